# src/apps/discord/services/interactions.py
"""
Interaction Dispatcher

Turns a verified Discord interaction payload into the response body
Discord expects within its three second window. Slow work (the Fly High
channel setup) is deferred to Celery.
"""

import logging
import uuid
from decimal import Decimal
from typing import Dict, Any, Optional, Tuple

from django.conf import settings
from django.db.models import Q
from django.utils import timezone
from django.utils.dateparse import parse_date

from common.clients import DiscordClient, DISCORD_ERRORS
from apps.academy.services import AcademyError, RecruitmentService
from apps.content.services import NotamService, SiteSettingService
from apps.operations.models import (
    Aircraft,
    Challenge,
    Event,
    MultiplierConfig,
    PirepSource,
    DAY_NAMES,
)
from apps.operations.services import ChallengeService, EventService, PirepService, RouteService
from apps.pilots.services import PilotService, RankService, RosterError

from .. import messages
from ..messages import (
    ButtonStyle,
    Colors,
    CustomId,
    InteractionType,
    ResponseType,
)
from .reminders import EventReminderService

logger = logging.getLogger(__name__)

DEFAULT_OPERATORS = 'RAM,SU,ATR'
AUTOCOMPLETE_LIMIT = 25
NOTAM_CONTENT_LIMIT = 350


def discord_user(interaction: Dict) -> Dict:
    return (interaction.get('member') or {}).get('user') or interaction.get('user') or {}


def parse_options(options) -> Dict[str, Any]:
    return {option.get('name'): option.get('value') for option in (options or [])}


def modal_values(interaction: Dict) -> Dict[str, str]:
    values = {}
    for row in (interaction.get('data') or {}).get('components') or []:
        for component in row.get('components') or []:
            values[component.get('custom_id')] = component.get('value') or ''
    return values


def _as_uuid(value) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def notam_color(priority: str) -> int:
    priority = (priority or '').lower()
    if 'urgent' in priority or 'important' in priority:
        return Colors.RED
    if 'warning' in priority:
        return Colors.ORANGE
    return Colors.BLUE


class InteractionDispatcher:
    """Routes interactions by type, custom id prefix or command name."""

    def __init__(self, client: DiscordClient = None):
        self.client = client or DiscordClient()

    def dispatch(self, interaction: Dict[str, Any]) -> Dict[str, Any]:
        interaction_type = interaction.get('type')

        if interaction_type == InteractionType.PING:
            return messages.pong()
        if interaction_type == InteractionType.AUTOCOMPLETE:
            return self.autocomplete(interaction)
        if interaction_type == InteractionType.MESSAGE_COMPONENT:
            return self._guarded(self.handle_button, interaction, 'Action failed')
        if interaction_type == InteractionType.MODAL_SUBMIT:
            return self._guarded(self.handle_modal, interaction, 'Modal action failed')
        if interaction_type == InteractionType.APPLICATION_COMMAND:
            handler = self.COMMANDS.get((interaction.get('data') or {}).get('name'))
            if handler is not None:
                return self._guarded(lambda i: handler(self, i), interaction, 'Command failed')

        return messages.embed_response(
            'Unsupported Command',
            'This interaction type is not handled.',
            Colors.RED,
        )

    @staticmethod
    def _guarded(handler, interaction, fallback: str) -> Dict:
        try:
            return handler(interaction)
        except (AcademyError, RosterError) as e:
            return messages.ephemeral(e.message or fallback)
        except ValueError as e:
            return messages.ephemeral(str(e) or fallback)
        except DISCORD_ERRORS as e:
            logger.error(f"Discord call failed while handling interaction: {e}")
            return messages.ephemeral(fallback)

    # =========================================================================
    # AUTOCOMPLETE
    # =========================================================================

    def autocomplete(self, interaction: Dict) -> Dict:
        options = (interaction.get('data') or {}).get('options') or []
        focused = next((option for option in options if option.get('focused')), None)
        if focused is None:
            return messages.autocomplete([])

        query = str(focused.get('value') or '').strip()
        lowered = query.lower()
        name = focused.get('name')

        if name == 'operator':
            raw = SiteSettingService.get('pirep_operators', DEFAULT_OPERATORS)
            operators = [op.strip() for op in raw.split(',') if op.strip()]
            choices = [{'name': op, 'value': op} for op in operators if lowered in op.lower()]
            return messages.autocomplete(choices[:AUTOCOMPLETE_LIMIT])

        if name == 'aircraft':
            queryset = Aircraft.objects.all()
            if query:
                queryset = queryset.filter(Q(icao_code__icontains=query) | Q(name__icontains=query))
            choices = [
                {'name': aircraft.display_name[:100], 'value': aircraft.icao_code}
                for aircraft in queryset.order_by('icao_code')[:AUTOCOMPLETE_LIMIT]
            ]
            return messages.autocomplete(choices)

        if name == 'multiplier':
            choices = [
                {'name': multiplier.label[:100], 'value': multiplier.name}
                for multiplier in MultiplierConfig.objects.filter(is_active=True).order_by('value')
                if lowered in multiplier.name.lower() or lowered in str(multiplier.value)
            ]
            return messages.autocomplete(choices[:AUTOCOMPLETE_LIMIT])

        return messages.autocomplete([])

    # =========================================================================
    # BUTTONS
    # =========================================================================

    def handle_button(self, interaction: Dict) -> Dict:
        custom_id = str((interaction.get('data') or {}).get('custom_id') or '')

        if custom_id.startswith(CustomId.EVENT_JOIN):
            return self.join_event(interaction, custom_id[len(CustomId.EVENT_JOIN):])
        if custom_id.startswith(CustomId.CHALLENGE_ACCEPT):
            return self.accept_challenge(interaction, custom_id[len(CustomId.CHALLENGE_ACCEPT):])
        if custom_id == CustomId.FLY_HIGH:
            return self.fly_high(interaction)
        if custom_id.startswith(CustomId.SET_CALLSIGN):
            return self.open_callsign_modal(interaction, custom_id[len(CustomId.SET_CALLSIGN):])
        if custom_id.startswith(CustomId.PRACTICAL_CONFIRM):
            return self.confirm_registration(custom_id[len(CustomId.PRACTICAL_CONFIRM):])
        if custom_id.startswith(CustomId.PRACTICAL_READY):
            return self.assign_practical(custom_id[len(CustomId.PRACTICAL_READY):])
        if custom_id.startswith(CustomId.PRACTICAL_REVIEW):
            return self.open_review_modal(interaction, custom_id[len(CustomId.PRACTICAL_REVIEW):])

        return messages.embed_response('Action Failed', 'Unknown button action.', Colors.RED)

    def join_event(self, interaction: Dict, event_id: str) -> Dict:
        user = discord_user(interaction)
        pilot = PilotService.resolve_by_discord(user.get('id'), user.get('username'))
        if pilot is None:
            return messages.error_embed(
                'Event Join Failed',
                'No pilot mapping found. Link Discord in profile settings first.',
            )

        event_uuid = _as_uuid(event_id)
        event = Event.objects.filter(id=event_uuid, is_active=True).first() if event_uuid else None
        if event is None:
            return messages.error_embed('Event Join Failed', 'Event not found.')

        registration = EventService.join(event, pilot, user.get('id') or '')
        return messages.ephemeral(
            f"✅ Joined event. Departure gate: {registration.assigned_dep_gate or 'TBD'}, "
            f"Arrival gate: {registration.assigned_arr_gate or 'TBD'}"
        )

    def accept_challenge(self, interaction: Dict, challenge_id: str) -> Dict:
        user = discord_user(interaction)
        pilot = PilotService.resolve_by_discord(user.get('id'), user.get('username'))
        if pilot is None:
            return messages.ephemeral('⚠️ No pilot mapping found for your Discord account.')

        challenge_uuid = _as_uuid(challenge_id)
        challenge = Challenge.objects.filter(id=challenge_uuid).first() if challenge_uuid else None
        if challenge is None:
            return messages.ephemeral('⚠️ Challenge action failed: challenge not found')

        try:
            ChallengeService.accept(challenge, pilot)
        except ValueError as e:
            return messages.ephemeral(f"⚠️ Challenge action failed: {e}")
        return messages.ephemeral('✅ Challenge accepted.')

    # ----- recruitment -----

    def fly_high(self, interaction: Dict) -> Dict:
        from ..tasks import process_fly_high

        process_fly_high.delay(interaction)
        return messages.deferred_ephemeral()

    def open_callsign_modal(self, interaction: Dict, token: str) -> Dict:
        user_id = discord_user(interaction).get('id')
        if not user_id:
            return messages.ephemeral('Missing Discord user context.')

        outcome = RecruitmentService.open_callsign_prompt(token, user_id)
        if not outcome['ok']:
            return messages.ephemeral(outcome['message'])

        return messages.modal(f"{CustomId.CALLSIGN_MODAL}{token}", 'Continue', [
            messages.text_input(
                'preferred_callsign',
                'Preferred Callsign (AFLVXXX)',
                min_length=7,
                max_length=7,
                placeholder='AFLV123',
            ),
            messages.text_input(
                'contact_email',
                'Registration Email (if not Discord)',
                required=False,
                placeholder='name@example.com',
            ),
        ])

    def confirm_registration(self, token: str) -> Dict:
        if not token:
            return messages.ephemeral('Recruitment session expired. Please press Continue again from latest message.')

        registration = RecruitmentService.finalize_registration(token)
        if not registration['approved']:
            return messages.ephemeral(
                'Please register on Crew Center first (Discord login or same email from callsign form), '
                'then click this button again.'
            )

        return messages.message(
            content='Confirm to let the bot assign your practical now.',
            components=[messages.action_row(messages.button(
                ButtonStyle.SUCCESS,
                f"{CustomId.PRACTICAL_READY}{token}",
                'Yes, assign practical now',
            ))],
            response_type=ResponseType.UPDATE_MESSAGE,
        )

    def assign_practical(self, token: str) -> Dict:
        result = RecruitmentService.assign_practical(token)

        if not result['ok']:
            if 'next_at' in result:
                return messages.ephemeral(result['message'])
            return messages.ephemeral(
                'You still need to register on Crew Center first. Register with Discord OR with your email '
                f"used in the callsign form at {settings.FRONTEND_URL} then click again."
            )
        if result['already_assigned']:
            return messages.ephemeral('Practical already assigned. Please complete it and wait for staff review.')

        return messages.practical_assigned_response(result['pid'], str(result['practical'].id))

    @staticmethod
    def is_reviewer(interaction: Dict) -> bool:
        roles = [str(role) for role in (interaction.get('member') or {}).get('roles') or []]
        return str(settings.DISCORD['REVIEWER_ROLE_ID']) in roles

    @staticmethod
    def parse_review_action(suffix: str) -> Tuple[Optional[str], Optional[str]]:
        status, _, practical_id = (suffix or '').partition(':')
        if status not in ('passed', 'failed') or not practical_id:
            return None, None
        return status, practical_id

    def open_review_modal(self, interaction: Dict, suffix: str) -> Dict:
        if not self.is_reviewer(interaction):
            return messages.ephemeral('You are not allowed to review practicals.')

        status, practical_id = self.parse_review_action(suffix)
        if status is None:
            return messages.ephemeral('Invalid practical review action.')

        title = 'Practical Pass Remarks' if status == 'passed' else 'Practical Fail Remarks'
        return messages.modal(f"{CustomId.PRACTICAL_REVIEW_MODAL}{status}:{practical_id}", title, [
            messages.text_input(
                'review_remarks',
                'Remarks / Notes',
                style=2,
                required=False,
                max_length=1000,
                placeholder='Optional remarks for this result...',
            ),
        ])

    # =========================================================================
    # MODALS
    # =========================================================================

    def handle_modal(self, interaction: Dict) -> Dict:
        custom_id = str((interaction.get('data') or {}).get('custom_id') or '')

        if custom_id.startswith(CustomId.CALLSIGN_MODAL):
            return self.submit_callsign(interaction, custom_id[len(CustomId.CALLSIGN_MODAL):])
        if custom_id.startswith(CustomId.PRACTICAL_REVIEW_MODAL):
            return self.submit_review(interaction, custom_id[len(CustomId.PRACTICAL_REVIEW_MODAL):])

        return messages.embed_response('Action Failed', 'Unknown modal action.', Colors.RED)

    def submit_callsign(self, interaction: Dict, token: str) -> Dict:
        values = modal_values(interaction)
        pid = RecruitmentService.set_callsign(
            token,
            values.get('preferred_callsign', ''),
            values.get('contact_email', ''),
        )
        return messages.message(
            content=(
                f"✅ Callsign **{pid}** saved. Now register/login at {settings.FRONTEND_URL}. "
                "Then click the button below to continue."
            ),
            components=[messages.action_row(messages.button(
                ButtonStyle.PRIMARY,
                f"{CustomId.PRACTICAL_CONFIRM}{token}",
                'I have registered, continue',
            ))],
        )

    def submit_review(self, interaction: Dict, suffix: str) -> Dict:
        if not self.is_reviewer(interaction):
            return messages.ephemeral('You are not allowed to review practicals.')

        status, practical_id = self.parse_review_action(suffix)
        if status is None:
            return messages.ephemeral('Invalid practical review action.')

        remarks = modal_values(interaction).get('review_remarks', '').strip()
        reviewer_id = discord_user(interaction).get('id')

        result = RecruitmentService.apply_practical_result(
            practical_id,
            status,
            remarks=remarks,
            guild_id=interaction.get('guild_id'),
            examiner_id=PilotService.user_id_for_discord(reviewer_id),
            client=self.client,
        )

        practical = result['practical']
        pilot_display = (
            messages.mention(result['discord_user_id']) if result['discord_user_id'] else practical.pilot.full_name
        )
        fields = [
            messages.field('Pilot', pilot_display, inline=True),
            messages.field('Practical ID', practical.id, inline=True),
        ]
        if remarks:
            fields.append(messages.field('Remarks', remarks))

        passed = status == 'passed'
        return messages.embed_response(
            'AFLV | Practical Review',
            f"Practical review complete.\n**Result:** {'PASSED' if passed else 'FAILED'}",
            Colors.GREEN if passed else Colors.RED,
            fields=fields,
        )

    # =========================================================================
    # SLASH COMMANDS
    # =========================================================================

    def command_pirep(self, interaction: Dict) -> Dict:
        options = parse_options((interaction.get('data') or {}).get('options'))
        user = discord_user(interaction)
        pilot = PilotService.resolve_by_discord(user.get('id'), user.get('username'))
        if pilot is None:
            return messages.embed_response(
                'PIREP Filing Failed',
                'No pilot profile is linked to your Discord account. Sign in on the crew center with '
                'Discord (or set Discord username in profile settings).',
                Colors.RED,
            )

        flight_date = None
        if options.get('flight_date'):
            try:
                flight_date = parse_date(str(options['flight_date']).strip())
            except ValueError:
                flight_date = None
            if flight_date is None:
                return messages.embed_response('PIREP Filing Failed', 'Flight date must be YYYY-MM-DD.', Colors.RED)

        aircraft_icao = str(options.get('aircraft') or '').strip().upper()
        try:
            pirep = PirepService.file_pirep(
                pilot=pilot,
                flight_number=str(options.get('flight_number') or ''),
                dep_icao=str(options.get('dep_icao') or ''),
                arr_icao=str(options.get('arr_icao') or ''),
                aircraft_icao=aircraft_icao,
                flight_hours=options.get('flight_hours'),
                flight_date=flight_date,
                operator=str(options.get('operator') or ''),
                flight_type=str(options.get('flight_type') or 'passenger'),
                multiplier=options.get('multiplier'),
                source=PirepSource.DISCORD,
            )
        except ValueError as e:
            return messages.embed_response('PIREP Filing Failed', str(e), Colors.RED)

        livery = (
            Aircraft.objects.filter(icao_code__iexact=aircraft_icao).exclude(livery='')
            .values_list('livery', flat=True).first()
        )
        aircraft_display = f"{aircraft_icao} ({livery})" if livery else aircraft_icao

        return messages.embed_response(
            'PIREP Filed Successfully',
            f"**{pirep.flight_number}** • {pirep.dep_icao} → {pirep.arr_icao}",
            Colors.GREEN,
            fields=[
                messages.field('Pilot', pilot.full_name, inline=True),
                messages.field('Aircraft', aircraft_display or 'N/A', inline=True),
                messages.field('Operator', pirep.operator or 'N/A', inline=True),
                messages.field('Hours', f"{float(pirep.flight_hours):.1f}h", inline=True),
                messages.field('Multiplier', f"{float(pirep.multiplier):.1f}x", inline=True),
                messages.field('Status', 'Pending Review', inline=True),
            ],
        )

    def command_events(self, interaction: Dict) -> Dict:
        events = EventService.upcoming(days=2, limit=5)
        if not events:
            return messages.embed_response('Upcoming Events', 'No events scheduled in the next 2 days.', Colors.BLUE)

        embeds = []
        components = []
        for event in events:
            embeds.append(messages.embed(
                f"✈️ {event.name}",
                event.description or 'Join this upcoming community event.',
                Colors.BLUE,
                fields=[
                    messages.field('Route', f"{event.dep_icao} → {event.arr_icao}", inline=True),
                    messages.field('Server', event.server, inline=True),
                    messages.field('Start', messages.discord_timestamp(event.start_time)),
                    messages.field('End', messages.discord_timestamp(event.end_time)),
                    messages.field('Aircraft', EventReminderService.aircraft_display(event), inline=True),
                ],
                image_url=event.banner_url or None,
                footer='Use the Participate button below to auto-assign your gates.',
                timestamp=False,
            ))
            components.append(messages.action_row(messages.button(
                ButtonStyle.PRIMARY,
                f"{CustomId.EVENT_JOIN}{event.id}",
                f"Participate • {event.route_label}",
            )))
        return messages.message(embeds=embeds, components=components)

    def command_leaderboard(self, interaction: Dict) -> Dict:
        pilots = list(PilotService.leaderboard(limit=5))
        if not pilots:
            return messages.embed_response('Leaderboard', 'No pilots found.', Colors.BLUE)

        lines = [
            f"{index}. **{pilot.full_name}** ({pilot.pid}) • {RankService.format_rank(pilot.current_rank)} • "
            f"{float(pilot.total_hours or Decimal('0')):.1f}h"
            for index, pilot in enumerate(pilots, start=1)
        ]
        return messages.embed_response('🏆 Top 5 Pilot Leaderboard', '\n'.join(lines), Colors.BLUE)

    def command_challenges(self, interaction: Dict) -> Dict:
        challenges = list(ChallengeService.active(limit=5))
        if not challenges:
            return messages.embed_response('Challenges', 'No active challenges right now.', Colors.BLUE)

        embeds = [
            messages.embed(
                f"🎯 {challenge.name}",
                challenge.description or 'Community challenge',
                Colors.BLUE,
                fields=(
                    [messages.field('Destination', challenge.destination_icao, inline=True)]
                    if challenge.destination_icao else []
                ),
                image_url=challenge.image_url or None,
                timestamp=False,
            )
            for challenge in challenges
        ]
        components = [
            messages.action_row(messages.button(
                ButtonStyle.PRIMARY, f"{CustomId.CHALLENGE_ACCEPT}{challenge.id}", 'Participate'
            ))
            for challenge in challenges
        ]
        return messages.message(embeds=embeds, components=components)

    def command_notams(self, interaction: Dict) -> Dict:
        notams = list(NotamService.active(limit=8))
        if not notams:
            return messages.embed_response('NOTAMs', 'No active NOTAMs.', Colors.BLUE)

        return messages.message(embeds=[
            messages.embed(
                f"📢 {notam.title}",
                (notam.content or '')[:NOTAM_CONTENT_LIMIT],
                notam_color(notam.priority),
                fields=[messages.field('Priority', (notam.priority or 'info').upper(), inline=True)],
                timestamp=False,
            )
            for notam in notams
        ])

    def command_rotw(self, interaction: Dict) -> Dict:
        entries = list(RouteService.routes_of_week())
        if not entries:
            return messages.embed_response(
                'Routes of the Week', 'No routes are configured for this week.', Colors.BLUE
            )

        lines = []
        for entry in entries:
            route = entry.route
            aircraft = route.aircraft_icao or 'N/A'
            if route.livery:
                aircraft = f"{aircraft} ({route.livery})"
            duration = route.duration_display if route.est_flight_time_minutes else 'N/A'
            lines.append(
                f"**{DAY_NAMES[entry.day_of_week][:3]}** - **{route.route_number}** | "
                f"{route.dep_icao} → {route.arr_icao} | {aircraft} | {duration}"
            )
        return messages.embed_response('🗺️ Routes of the Week', '\n'.join(lines), Colors.BLUE)

    def command_featured(self, interaction: Dict) -> Dict:
        today = timezone.now().date()
        featured = list(RouteService.featured_for(today)[:5])
        if not featured:
            return messages.embed_response('Featured Routes', 'No featured routes for today.', Colors.BLUE)

        lines = []
        for entry in featured:
            route = entry.route
            aircraft = route.aircraft_icao or 'N/A'
            if route.livery:
                aircraft = f"{aircraft} ({route.livery})"
            lines.append(f"• **{route.route_number}** {route.dep_icao} → {route.arr_icao} | {aircraft}")
        return messages.embed_response(f"⭐ Featured Routes ({today.isoformat()})", '\n'.join(lines), Colors.BLUE)

    COMMANDS = {
        'pirep': command_pirep,
        'get-events': command_events,
        'leaderboard': command_leaderboard,
        'challange': command_challenges,
        'notams': command_notams,
        'rotw': command_rotw,
        'featured': command_featured,
    }
