# src/apps/academy/services/recruitment_service.py
"""
Recruitment Service

Drives a recruit from the "Fly High" button to a passed practical:

    Fly High -> private channel + written test link
    written test submitted -> Continue -> callsign modal
    callsign saved -> recruit registers on the crew center
    registration confirmed -> practical assigned
    examiner review -> pass (roles granted, channel closed)
                    -> fail (retest practical in 24h)

A failed written test puts the recruit on a 24 hour cooldown. The
``process_retests`` job then posts a fresh link (new session, new token)
in the same channel and removes the old one.

Discord calls go through an injectable ``DiscordClient``; database work
is committed before any message is posted.
"""

import logging
import math
import re
import uuid
from datetime import datetime, timedelta
from typing import Dict, Any, Optional
from urllib.parse import quote

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from common.clients import DiscordClient, DISCORD_ERRORS
from apps.content.services import SiteSettingService
from apps.discord import messages
from apps.pilots.models import (
    Pilot,
    PilotApplication,
    ApplicationStatus,
    RoleName,
    PID_PATTERN,
)
from apps.pilots.services import PilotService

from ..models import (
    Course,
    Exam,
    Practical,
    PracticalStatus,
    RecruitmentExamSession,
    RETEST_COOLDOWN,
)
from ..models.recruitment import generate_session_token
from .exceptions import (
    RecruitmentError,
    RecruitmentSessionNotFoundError,
    CallsignTakenError,
    PracticalNotFoundError,
)
from .practical_service import PracticalService

logger = logging.getLogger(__name__)

EXAM_SETTING_KEY = 'recruitment_exam_id'
PRACTICAL_SETTING_KEY = 'recruitment_practical_id'
RETEST_BATCH_LIMIT = 200
PRACTICAL_COOLDOWN = timedelta(hours=24)
PRACTICAL_NOTES_PREFIX = 'Recruitment practical'

PLACEHOLDER_APPLICATION = {
    'experience_level': 'Grade 2',
    'preferred_simulator': 'No',
    'reason_for_joining': 'Recruitment flow',
    'if_grade': 'Grade 2',
    'is_ifatc': 'No',
    'ifc_trust_level': "I don't know",
    'age_range': '13-16',
    'other_va_membership': 'No',
    'hear_about_aflv': 'Discord Recruitment',
}

PASS_DEFAULT_NOTES = 'Passed via recruitment Discord review action'
FAIL_DEFAULT_NOTES = 'Failed via recruitment Discord review action'

UNSAFE_CHANNEL_CHARS = re.compile(r'[^a-z0-9_-]')


def _as_uuid(value) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


class RecruitmentService:
    """Recruitment workflow shared by the Discord bot, the exam API and the retest job."""

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def exam_url(exam_id, token: str) -> str:
        base = settings.FRONTEND_URL.rstrip('/')
        return f"{base}/academy/exam/{exam_id}?recruitmentToken={quote(str(token), safe='')}"

    @staticmethod
    def channel_name(discord_user_id: str, username: str = '') -> str:
        safe = UNSAFE_CHANNEL_CHARS.sub('-', (username or '').lower())[:40] or str(discord_user_id)
        return f"recruitment-{safe}-{str(discord_user_id)[-4:]}"

    @staticmethod
    def format_cooldown(minutes: int) -> str:
        return f"{minutes // 60}h {minutes % 60}m"

    @staticmethod
    def cooldown_remaining(discord_user_id: str, now: datetime = None) -> Optional[int]:
        """Minutes left before a failed recruit may get a new link, or None."""
        now = now or timezone.now()
        last_failed = (
            RecruitmentExamSession.objects
            .filter(discord_user_id=str(discord_user_id), passed=False, completed_at__isnull=False)
            .order_by('-completed_at')
            .first()
        )
        if last_failed is None:
            return None

        remaining = (last_failed.completed_at + RETEST_COOLDOWN - now).total_seconds()
        if remaining <= 0:
            return None
        return math.ceil(remaining / 60)

    @staticmethod
    def recruitment_exam() -> Exam:
        exam_id = SiteSettingService.require(EXAM_SETTING_KEY)
        exam = Exam.objects.filter(id=_as_uuid(exam_id)).first() if _as_uuid(exam_id) else None
        if exam is None:
            raise RecruitmentError(f"Recruitment exam {exam_id} not found")
        return exam

    @staticmethod
    def practical_course() -> Optional[Course]:
        course_id = _as_uuid(SiteSettingService.get(PRACTICAL_SETTING_KEY))
        if course_id is None:
            return None
        return Course.objects.filter(id=course_id).first()

    @staticmethod
    def get_session(token: str, lock: bool = False) -> RecruitmentExamSession:
        if not token:
            raise RecruitmentSessionNotFoundError()
        queryset = RecruitmentExamSession.objects.all()
        if lock:
            queryset = queryset.select_for_update()
        session = queryset.filter(token=token).first()
        if session is None:
            raise RecruitmentSessionNotFoundError()
        return session

    @staticmethod
    def ensure_application(user_id, discord_user_id: str, username: str = '') -> PilotApplication:
        """Latest application of the account, or a placeholder one for Discord recruits."""
        application = PilotApplication.objects.filter(user_id=user_id).order_by('-created_at').first()
        if application is not None:
            if application.discord_user_id != str(discord_user_id):
                application.discord_user_id = str(discord_user_id)
                application.save(update_fields=['discord_user_id', 'updated_at'])
            return application

        return PilotApplication.objects.create(
            user_id=user_id,
            email=f"{discord_user_id}@users.noreply.local",
            full_name=username or str(discord_user_id),
            discord_username=username or '',
            discord_user_id=str(discord_user_id),
            status=ApplicationStatus.PENDING,
            **PLACEHOLDER_APPLICATION,
        )

    # =========================================================================
    # FLY HIGH
    # =========================================================================

    @staticmethod
    def start_session(
        discord_user_id: str,
        username: str,
        guild_id: str,
        client: DiscordClient = None,
        now: datetime = None,
    ) -> Dict[str, Any]:
        """
        Open a recruitment channel and post the written test link.

        Returns:
            ``{'ok': bool, 'message': str}`` plus ``session`` on success

        Raises:
            RecruitmentError: missing context or misconfigured exam
            DiscordAPIError: channel creation or posting failed
        """
        if not discord_user_id or not guild_id:
            raise RecruitmentError('Missing Discord user/guild context.')

        now = now or timezone.now()
        client = client or DiscordClient()
        discord_user_id = str(discord_user_id)

        remaining = RecruitmentService.cooldown_remaining(discord_user_id, now)
        if remaining is not None:
            return {
                'ok': False,
                'message': (
                    "You need to wait before retest. Next exam link will be available in "
                    f"{RecruitmentService.format_cooldown(remaining)}."
                ),
            }

        exam = RecruitmentService.recruitment_exam()
        auth_user_id = PilotService.user_id_for_discord(discord_user_id)
        previous = (
            RecruitmentExamSession.objects
            .filter(discord_user_id=discord_user_id)
            .order_by('-created_at')
            .first()
        )

        with transaction.atomic():
            application = None
            if auth_user_id:
                application = RecruitmentService.ensure_application(auth_user_id, discord_user_id, username)

            session = RecruitmentExamSession.objects.create(
                token=generate_session_token(),
                exam=exam,
                application=application,
                auth_user_id=auth_user_id,
                discord_user_id=discord_user_id,
                created_at=now,
            )

        discord = settings.DISCORD
        try:
            channel = client.create_channel(
                guild_id,
                RecruitmentService.channel_name(discord_user_id, username),
                parent_id=discord['RECRUITMENTS_CATEGORY_ID'],
                permission_overwrites=[
                    {'id': str(guild_id), 'type': DiscordClient.OVERWRITE_ROLE,
                     'deny': str(DiscordClient.VIEW_CHANNEL), 'allow': '0'},
                    {'id': discord_user_id, 'type': DiscordClient.OVERWRITE_MEMBER,
                     'allow': str(DiscordClient.VIEW_CHANNEL)},
                    {'id': str(discord['STAFF_ROLE_ID']), 'type': DiscordClient.OVERWRITE_ROLE,
                     'allow': str(DiscordClient.VIEW_CHANNEL)},
                ],
            )
            channel_id = str(channel['id'])

            if previous is not None and previous.has_failed and not previous.in_cooldown(now):
                client.delete_message_quietly(previous.recruitment_channel_id, previous.exam_message_id)

            posted = client.post_message(channel_id, messages.written_test_message(
                discord_user_id,
                RecruitmentService.exam_url(exam.id, session.token),
                session.token,
            ))
        except DISCORD_ERRORS as e:
            # a session without a link must not supersede the previous one
            logger.error(f"Recruitment setup for {discord_user_id} failed: {e}")
            session.delete()
            raise

        session.recruitment_channel_id = channel_id
        session.exam_message_id = str((posted or {}).get('id', ''))
        session.save(update_fields=['recruitment_channel_id', 'exam_message_id'])

        logger.info(
            f"Recruitment session {session.id} opened for Discord user {discord_user_id}",
            extra={'channel_id': channel_id}
        )
        return {
            'ok': True,
            'message': f"Recruitment channel created: {messages.channel_mention(channel_id)}",
            'session': session,
        }

    @staticmethod
    def publish_recruitment_embed(client: DiscordClient = None) -> Dict:
        """Post the "AFLV Recruitments" board with the Fly High button."""
        client = client or DiscordClient()
        channel_id = settings.DISCORD['RECRUITMENTS_CHANNEL_ID']
        posted = client.post_message(channel_id, messages.recruitment_board_message())
        logger.info(f"Recruitment board posted to {channel_id}")
        return posted

    # =========================================================================
    # WRITTEN TEST
    # =========================================================================

    @staticmethod
    @transaction.atomic
    def submit_exam(token: str, passed: bool, score: int, now: datetime = None) -> RecruitmentExamSession:
        session = RecruitmentService.get_session(token, lock=True)
        if session.is_completed:
            raise RecruitmentError('Recruitment exam already submitted')

        session.completed_at = now or timezone.now()
        session.passed = bool(passed)
        session.score = score
        session.save(update_fields=['completed_at', 'passed', 'score'])

        logger.info(f"Recruitment session {session.id} completed: score={score} passed={passed}")
        return session

    @staticmethod
    def open_callsign_prompt(token: str, discord_user_id: str, now: datetime = None) -> Dict[str, Any]:
        """
        Decide what the Continue button does.

        Returns:
            ``{'ok': True, 'session': ...}`` when the callsign modal may be
            shown, otherwise ``{'ok': False, 'message': ...}``
        """
        now = now or timezone.now()
        session = RecruitmentExamSession.objects.filter(token=token).first() if token else None

        if session is None:
            return {'ok': False, 'message': 'Recruitment session not found. Please click Fly High again.'}
        if session.discord_user_id and session.discord_user_id != str(discord_user_id):
            return {'ok': False, 'message': 'This button belongs to another recruitment session.'}
        if not session.is_completed:
            return {'ok': False, 'message': 'Please complete the written test first, then click Continue.'}
        if session.has_failed:
            if session.in_cooldown(now):
                minutes = math.ceil((session.retest_available_at - now).total_seconds() / 60)
                return {
                    'ok': False,
                    'message': (
                        "You failed the written test. Please wait "
                        f"{RecruitmentService.format_cooldown(minutes)} before retry."
                    ),
                }
            return {'ok': False, 'message': 'Please complete and pass the written test first.'}
        return {'ok': True, 'session': session}

    # =========================================================================
    # CALLSIGN AND REGISTRATION
    # =========================================================================

    @staticmethod
    @transaction.atomic
    def set_callsign(token: str, pid: str, email: str = '') -> str:
        """
        Reserve a callsign on a passed session.

        Raises:
            RecruitmentError: bad format, bad email or exam not passed
            RecruitmentSessionNotFoundError: unknown token
            CallsignTakenError: pid held by a pilot or another recruit
        """
        pid = (pid or '').strip().upper()
        if not PID_PATTERN.match(pid):
            raise RecruitmentError('Invalid format. Use AFLVXXX (letters/numbers).')

        email = (email or '').strip().lower()
        if email:
            try:
                validate_email(email)
            except ValidationError:
                raise RecruitmentError('Invalid email address.')

        session = RecruitmentService.get_session(token, lock=True)
        if session.passed is not True:
            raise RecruitmentError('Please complete and pass the written test first.')

        reserved = (
            RecruitmentExamSession.objects
            .filter(preferred_pid__iexact=pid)
            .exclude(id=session.id)
            .exclude(discord_user_id=session.discord_user_id)
            .exists()
        )
        if PilotService.is_pid_taken(pid) or reserved:
            raise CallsignTakenError(pid)

        session.preferred_pid = pid
        session.pending_email = email
        session.save(update_fields=['preferred_pid', 'pending_email'])

        logger.info(f"Recruitment session {session.id} reserved {pid}")
        return pid

    @staticmethod
    @transaction.atomic
    def finalize_registration(token: str) -> Dict[str, Any]:
        """
        Link the session to a crew center account and make the recruit a pilot.

        The account is found through the session itself, the recruit's
        Discord identity, then the email typed into the callsign form.

        Returns:
            ``{'approved': False}`` when no account exists yet, otherwise
            ``{'approved': True, 'pid': ..., 'pilot': ...}``
        """
        session = RecruitmentService.get_session(token, lock=True)

        user_id = (
            session.auth_user_id
            or PilotService.user_id_for_discord(session.discord_user_id)
            or PilotService.user_id_for_email(session.pending_email)
        )
        if not user_id:
            return {'approved': False}

        if str(session.auth_user_id or '') != str(user_id):
            session.auth_user_id = user_id
            session.save(update_fields=['auth_user_id'])

        application = session.application or RecruitmentService.ensure_application(
            user_id, session.discord_user_id
        )
        if application.user_id is None:
            application.user_id = user_id

        pilot = PilotService.for_user(user_id)
        if pilot is None:
            pid = session.preferred_pid
            if not pid or PilotService.is_pid_taken(pid):
                pid = PilotService.get_next_pid()
            pilot = PilotService.create_pilot(
                pid=pid,
                full_name=application.full_name or session.discord_user_id,
                user_id=user_id,
                discord_user_id=session.discord_user_id,
                discord_username=application.discord_username,
            )
        else:
            PilotService.ensure_role(user_id, RoleName.PILOT)
            if session.discord_user_id and not pilot.discord_user_id:
                pilot.discord_user_id = session.discord_user_id
                pilot.save(update_fields=['discord_user_id', 'updated_at'])

        if application.status != ApplicationStatus.APPROVED or application.assigned_pid != pilot.pid:
            application.status = ApplicationStatus.APPROVED
            application.assigned_pid = pilot.pid
            application.reviewed_at = application.reviewed_at or timezone.now()
        application.save()

        if session.application_id != application.id:
            session.application = application
            session.save(update_fields=['application'])

        logger.info(f"Recruitment session {session.id} registered as {pilot.pid}")
        return {'approved': True, 'pid': pilot.pid, 'pilot': pilot}

    # =========================================================================
    # PRACTICAL
    # =========================================================================

    @staticmethod
    def assign_practical(token: str, now: datetime = None) -> Dict[str, Any]:
        """
        Give a registered recruit their practical check ride.

        Returns one of:
            ``{'ok': False, 'message': ...}``
            ``{'ok': True, 'already_assigned': True, 'practical': ..., 'pid': ...}``
            ``{'ok': True, 'already_assigned': False, 'practical': ..., 'pid': ...}``
        """
        now = now or timezone.now()

        with transaction.atomic():
            registration = RecruitmentService.finalize_registration(token)
            if not registration['approved']:
                return {'ok': False, 'message': 'Registration not approved yet'}

            pilot = registration['pilot']
            failed = PracticalService.latest_failed(pilot)
            if failed is not None and now < failed.completed_at + PRACTICAL_COOLDOWN:
                next_at = failed.completed_at + PRACTICAL_COOLDOWN
                return {
                    'ok': False,
                    'next_at': next_at,
                    'message': (
                        "You failed practical recently. Please wait until "
                        f"{messages.discord_timestamp(next_at)} before continuing."
                    ),
                }

            existing = (
                Practical.objects
                .filter(
                    pilot=pilot,
                    status__in=[PracticalStatus.SCHEDULED, PracticalStatus.COMPLETED],
                    notes__startswith=PRACTICAL_NOTES_PREFIX,
                )
                .order_by('-created_at')
                .first()
            )
            if existing is not None:
                return {'ok': True, 'already_assigned': True, 'practical': existing, 'pid': pilot.pid}

            practical = PracticalService.schedule(
                pilot,
                course=RecruitmentService.practical_course(),
                scheduled_at=now,
                notes=messages.practical_notes(pilot.pid),
            )
            RecruitmentExamSession.objects.filter(token=token).update(practical_assigned_at=now)

        return {'ok': True, 'already_assigned': False, 'practical': practical, 'pid': pilot.pid}

    @staticmethod
    def latest_session_for(pilot: Pilot) -> Optional[RecruitmentExamSession]:
        if pilot.user_id:
            application = (
                PilotApplication.objects.filter(user_id=pilot.user_id).order_by('-created_at').first()
            )
            if application is not None:
                session = application.recruitment_sessions.order_by('-created_at').first()
                if session is not None:
                    return session
            session = (
                RecruitmentExamSession.objects
                .filter(auth_user_id=pilot.user_id)
                .order_by('-created_at')
                .first()
            )
            if session is not None:
                return session
        if pilot.discord_user_id:
            return (
                RecruitmentExamSession.objects
                .filter(discord_user_id=pilot.discord_user_id)
                .order_by('-created_at')
                .first()
            )
        return None

    @staticmethod
    def apply_practical_result(
        practical_id,
        status: str,
        remarks: str = '',
        guild_id: str = None,
        examiner_id=None,
        client: DiscordClient = None,
        now: datetime = None,
    ) -> Dict[str, Any]:
        """
        Record an examiner's verdict and tell the recruit.

        A pass removes the recruit's sessions, closes their channel and
        swaps their Discord roles. A fail schedules a retest practical
        24 hours out. Discord failures are logged, not raised.

        Raises:
            RecruitmentError: status is not passed/failed
            PracticalNotFoundError: unknown practical
        """
        if status not in (PracticalStatus.PASSED, PracticalStatus.FAILED):
            raise RecruitmentError('Invalid practical review action.')

        practical_uuid = _as_uuid(practical_id)
        practical = (
            Practical.objects.select_related('pilot', 'course').filter(id=practical_uuid).first()
            if practical_uuid else None
        )
        if practical is None:
            raise PracticalNotFoundError(practical_id)

        now = now or timezone.now()
        client = client or DiscordClient()
        passed = status == PracticalStatus.PASSED
        pilot = practical.pilot
        retest = None

        with transaction.atomic():
            PracticalService.complete(
                practical,
                status,
                remarks=(remarks or '').strip() or (PASS_DEFAULT_NOTES if passed else FAIL_DEFAULT_NOTES),
                examiner_id=examiner_id,
                now=now,
            )

            session = RecruitmentService.latest_session_for(pilot)
            discord_user_id = pilot.discord_user_id or (session.discord_user_id if session else '')
            channel_id = session.recruitment_channel_id if session else ''

            if passed:
                stale = Q(discord_user_id=discord_user_id) if discord_user_id else Q(pk__in=[])
                if pilot.user_id:
                    stale |= Q(auth_user_id=pilot.user_id)
                RecruitmentExamSession.objects.filter(stale).delete()
            else:
                retest = PracticalService.schedule(
                    pilot,
                    course=practical.course,
                    scheduled_at=now + PRACTICAL_COOLDOWN,
                    notes=f"Auto-retest after failed practical ({now.isoformat()})",
                )

        if channel_id and discord_user_id:
            if passed:
                RecruitmentService._close_passed_channel(client, channel_id, discord_user_id, guild_id)
            else:
                RecruitmentService._post_quietly(client, channel_id, {
                    'content': (
                        f"❌ {messages.mention(discord_user_id)} practical result: failed. "
                        "You have a 24-hour cooldown. A retest practical has been auto-assigned "
                        "for after cooldown."
                    ),
                })

        action = 'pass_notification_sent' if passed else 'fail_retest_assigned'
        logger.info(f"Practical {practical.id} reviewed: {action}")
        return {
            'ok': True,
            'action': action,
            'practical': practical,
            'retest': retest,
            'discord_user_id': discord_user_id,
        }

    @staticmethod
    def _post_quietly(client: DiscordClient, channel_id: str, payload: Dict) -> Optional[Dict]:
        try:
            return client.post_message(channel_id, payload)
        except DISCORD_ERRORS as e:
            logger.warning(f"Could not post to channel {channel_id}: {e}")
            return None

    @staticmethod
    def _close_passed_channel(client: DiscordClient, channel_id: str, discord_user_id: str, guild_id: str = None):
        discord = settings.DISCORD
        RecruitmentService._post_quietly(client, channel_id, {
            'content': (
                f"🎉 Congratulations {messages.mention(discord_user_id)}! You passed your practical.\n"
                f"Please read the Pilot Guide here: {messages.channel_mention(discord['PILOT_GUIDE_CHANNEL_ID'])} "
                "this channel will now be closed. Any doubts? please open a ticket."
            ),
        })

        try:
            client.set_channel_permission(
                channel_id,
                discord_user_id,
                allow=0,
                deny=DiscordClient.VIEW_CHANNEL,
                overwrite_type=DiscordClient.OVERWRITE_MEMBER,
            )
        except DISCORD_ERRORS as e:
            logger.warning(f"Could not close channel {channel_id} for {discord_user_id}: {e}")

        try:
            guild_id = guild_id or (client.get_channel(channel_id) or {}).get('guild_id')
            if not guild_id:
                logger.warning(f"No guild for channel {channel_id}; roles not updated")
                return
            member = client.get_member(guild_id, discord_user_id) or {}
            roles = set(str(r) for r in member.get('roles', []))
            roles |= set(str(r) for r in discord['PASS_ADD_ROLE_IDS'])
            roles -= set(str(r) for r in discord['PASS_REMOVE_ROLE_IDS'])
            client.update_member_roles(guild_id, discord_user_id, sorted(roles))
        except DISCORD_ERRORS as e:
            logger.error(f"Role update failed for {discord_user_id}: {e}")

    # =========================================================================
    # RETEST JOB
    # =========================================================================

    @staticmethod
    def process_retests(now: datetime = None, client: DiscordClient = None) -> Dict[str, Any]:
        """
        Issue new written test links to recruits whose cooldown has passed.

        Returns:
            ``{'ok': True, 'processed': n, 'sent': n, 'skipped': n}``
        """
        now = now or timezone.now()
        client = client or DiscordClient()

        candidates = list(
            RecruitmentExamSession.objects
            .filter(passed=False, completed_at__isnull=False, retest_sent_at__isnull=True)
            .exclude(discord_user_id='')
            .exclude(recruitment_channel_id='')
            .order_by('completed_at')[:RETEST_BATCH_LIMIT]
        )

        processed = sent = skipped = 0
        for session in candidates:
            processed += 1

            if now < session.completed_at + RETEST_COOLDOWN:
                skipped += 1
                continue

            superseded = RecruitmentExamSession.objects.filter(
                discord_user_id=session.discord_user_id,
                created_at__gt=session.created_at,
            ).exists()
            if superseded:
                RecruitmentExamSession.objects.filter(id=session.id).update(retest_sent_at=now)
                skipped += 1
                continue

            client.delete_message_quietly(session.recruitment_channel_id, session.exam_message_id)

            token = generate_session_token()
            try:
                posted = client.post_message(session.recruitment_channel_id, messages.retest_message(
                    session.discord_user_id,
                    RecruitmentService.exam_url(session.exam_id, token),
                ))
            except DISCORD_ERRORS as e:
                logger.error(f"Retest link for session {session.id} not posted: {e}")
                continue

            with transaction.atomic():
                RecruitmentExamSession.objects.create(
                    token=token,
                    exam_id=session.exam_id,
                    application_id=session.application_id,
                    auth_user_id=session.auth_user_id,
                    discord_user_id=session.discord_user_id,
                    recruitment_channel_id=session.recruitment_channel_id,
                    exam_message_id=str((posted or {}).get('id', '')),
                    created_at=now,
                )
                RecruitmentExamSession.objects.filter(id=session.id).update(retest_sent_at=now)
            sent += 1

        logger.info(f"Recruitment retests: processed={processed} sent={sent} skipped={skipped}")
        return {'ok': True, 'processed': processed, 'sent': sent, 'skipped': skipped}
