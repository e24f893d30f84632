# src/apps/pilots/tests/test_services.py
"""
Tests for roster services
"""

from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.utils import timezone

from apps.content.models import Notification
from apps.content.services import SiteSettingService
from apps.pilots.models import (
    Pilot,
    PilotApplication,
    ApplicationStatus,
    LeaveStatus,
    RankConfig,
    BonusTier,
    UserRole,
    RoleName,
    ApprovedAdminEmail,
)
from apps.pilots.services import (
    RankService,
    PilotService,
    ApplicationService,
    AdminSetupService,
    ActivityService,
    LeaveService,
    BonusService,
    StreakService,
    PidTakenError,
)


pytestmark = pytest.mark.django_db


class TestRankService:
    """Tests for the rank ladder."""

    @pytest.mark.parametrize('hours,rank', [
        (0, 'cadet'),
        (49.99, 'cadet'),
        (50, 'first_officer'),
        (299, 'captain'),
        (500, 'commander'),
        (12000, 'commander'),
    ])
    def test_default_ladder(self, hours, rank):
        """Test the built-in ladder when no ranks are configured."""
        assert RankService.calculate_rank(hours) == rank

    def test_configured_ladder_wins(self):
        """Test configured ranks replace the defaults."""
        RankConfig.objects.create(name='trainee', label='Trainee', min_hours=0, max_hours=10, order_index=0)
        RankConfig.objects.create(name='line', label='Line', min_hours=10, order_index=1)

        assert RankService.calculate_rank(5) == 'trainee'
        assert RankService.calculate_rank(10) == 'line'

    def test_gap_uses_highest_reached_band(self):
        """Test hours falling between bands keep the lower band."""
        RankConfig.objects.create(name='low', label='Low', min_hours=0, max_hours=10, order_index=0)
        RankConfig.objects.create(name='high', label='High', min_hours=20, max_hours=30, order_index=1)

        assert RankService.calculate_rank(15) == 'low'
        assert RankService.calculate_rank(45) == 'high'

    def test_inactive_ranks_ignored(self):
        """Test disabled ranks do not count."""
        RankConfig.objects.create(name='ghost', label='Ghost', min_hours=0, order_index=0, is_active=False)

        assert RankService.calculate_rank(1) == 'cadet'

    def test_format_rank(self):
        """Test rank names are title-cased for display."""
        assert RankService.format_rank('senior_captain') == 'Senior Captain'
        assert RankService.format_rank(None) == 'Unknown'

    def test_is_promotion(self):
        """Test only moves up the ladder are promotions."""
        assert RankService.is_promotion('cadet', 'captain') is True
        assert RankService.is_promotion('captain', 'cadet') is False
        assert RankService.is_promotion('captain', 'captain') is False

    def test_announce_promotion(self, pilot, django_capture_on_commit_callbacks):
        """Test a promotion notifies the pilot and queues the webhook."""
        with patch('apps.discord.tasks.relay_webhook.delay') as delay:
            with django_capture_on_commit_callbacks(execute=True):
                RankService.announce_promotion(pilot, 'cadet', 'first_officer')

        notification = Notification.objects.get(recipient=pilot)
        assert 'First Officer' in notification.message
        notification_type, payload = delay.call_args[0]
        assert notification_type == 'rank_promotion'
        assert payload['pid'] == 'AFLV001'
        assert payload['new_rank'] == 'first_officer'


class TestPilotService:
    """Tests for callsigns, lookups and hour crediting."""

    def test_next_pid_empty_roster(self):
        """Test the first callsign is AFLV001."""
        assert PilotService.get_next_pid() == 'AFLV001'

    def test_next_pid_follows_highest(self, create_pilot):
        """Test allocation continues after the highest numeric callsign."""
        create_pilot(pid='AFLV007')
        create_pilot(pid='AFLV042')
        create_pilot(pid='AFLVXYZ')

        assert PilotService.get_next_pid() == 'AFLV043'

    def test_next_pid_exhausted(self, create_pilot):
        """Test the range ends at AFLV999."""
        create_pilot(pid='AFLV999')

        with pytest.raises(ValueError):
            PilotService.get_next_pid()

    def test_pid_taken_is_case_insensitive(self, create_pilot):
        """Test callsign checks ignore case."""
        create_pilot(pid='AFLV123')

        assert PilotService.is_pid_taken('aflv123') is True

    def test_resolve_by_linked_identity(self, pilot, link_discord):
        """Test a linked Discord identity finds the pilot."""
        Pilot.objects.filter(id=pilot.id).update(discord_user_id='')
        link_discord(pilot.user_id, '333333333333333333')

        assert PilotService.resolve_by_discord('333333333333333333') == pilot

    def test_resolve_by_stored_id(self, pilot):
        """Test the stored Discord id is used when nothing is linked."""
        assert PilotService.resolve_by_discord('111111111111111111') == pilot

    def test_resolve_by_username(self, create_pilot):
        """Test usernames match case-insensitively without the leading @."""
        pilot = create_pilot(discord_username='SkyKing')

        assert PilotService.resolve_by_discord('404', '@skyking') == pilot
        assert PilotService.resolve_by_discord('404', 'nobody') is None

    def test_credit_hours_re_ranks(self, pilot):
        """Test crediting hours updates totals and rank."""
        updated, old, new = PilotService.credit_hours(pilot.id, Decimal('55.5'), 1)

        assert updated.total_hours == Decimal('55.50')
        assert updated.total_pireps == 1
        assert (old, new) == ('cadet', 'first_officer')

    def test_debit_never_goes_negative(self, pilot):
        """Test debits floor at zero."""
        updated, _, _ = PilotService.credit_hours(pilot.id, Decimal('-10'), -1)

        assert updated.total_hours == Decimal('0')
        assert updated.total_pireps == 0

    def test_create_pilot_grants_role(self, user_id):
        """Test new pilots get the pilot role."""
        pilot = PilotService.create_pilot('aflv555', 'New Pilot', user_id=user_id)

        assert pilot.pid == 'AFLV555'
        assert PilotService.roles_for(user_id) == [RoleName.PILOT]

    def test_create_pilot_duplicate(self, pilot):
        """Test a taken callsign is refused."""
        with pytest.raises(PidTakenError):
            PilotService.create_pilot('AFLV001', 'Copycat')


class TestApplicationService:
    """Tests for application review."""

    @pytest.fixture
    def application(self, user_id):
        return PilotApplication.objects.create(
            user_id=user_id,
            email='applicant@aflv.test',
            full_name='Jane Applicant',
            discord_user_id='444444444444444444',
        )

    def test_approve(self, application, admin_user_id):
        """Test approval creates the pilot with the applicant's details."""
        pilot = ApplicationService.approve(application, 'aflv200', reviewed_by=admin_user_id)

        application.refresh_from_db()
        assert pilot.pid == 'AFLV200'
        assert pilot.discord_user_id == '444444444444444444'
        assert application.status == ApplicationStatus.APPROVED
        assert application.assigned_pid == 'AFLV200'

    def test_approve_bad_pid(self, application):
        """Test malformed callsigns are rejected."""
        with pytest.raises(ValueError):
            ApplicationService.approve(application, 'XX12')

    def test_approve_taken_pid(self, application, pilot):
        """Test approval fails on a taken callsign and leaves the application pending."""
        with pytest.raises(PidTakenError):
            ApplicationService.approve(application, 'AFLV001')

        application.refresh_from_db()
        assert application.is_pending

    def test_approve_twice(self, application):
        """Test a reviewed application cannot be approved again."""
        ApplicationService.approve(application, 'AFLV200')

        with pytest.raises(ValueError):
            ApplicationService.approve(application, 'AFLV201')

    def test_reject_requires_reason(self, application):
        """Test rejections need a reason."""
        with pytest.raises(ValueError):
            ApplicationService.reject(application, '  ')

    def test_reject(self, application):
        """Test rejection stores the reason."""
        application = ApplicationService.reject(application, ' Incomplete ')

        assert application.status == ApplicationStatus.REJECTED
        assert application.rejection_reason == 'Incomplete'


class TestAdminSetupService:

    def test_not_whitelisted(self, user_id):
        """Test unknown emails are refused."""
        assert AdminSetupService.setup_admin(user_id, 'someone@aflv.test') == {
            'setup': False,
            'message': 'Not admin email',
        }

    def test_settings_whitelist(self, user_id):
        """Test a whitelisted email gets a commander profile and the admin role."""
        result = AdminSetupService.setup_admin(user_id, 'Founder@AFLV.test')

        pilot = Pilot.objects.get(user_id=user_id)
        assert result == {'setup': True, 'pid': pilot.pid}
        assert pilot.current_rank == 'commander'
        assert UserRole.objects.filter(user_id=user_id, role=RoleName.ADMIN).exists()

    def test_database_whitelist_keeps_existing_pilot(self, pilot):
        """Test an approved email reuses the existing pilot."""
        ApprovedAdminEmail.objects.create(email='staff@aflv.test')

        result = AdminSetupService.setup_admin(pilot.user_id, 'staff@aflv.test')

        assert result['pid'] == 'AFLV001'
        assert Pilot.objects.count() == 1


class TestLeaveService:

    def test_request_validates_dates(self, pilot):
        """Test the end date must not precede the start date."""
        with pytest.raises(ValueError):
            LeaveService.request(pilot, date(2026, 5, 10), date(2026, 5, 1))

    def test_review_notifies_pilot(self, pilot, admin_user_id):
        """Test approving a leave sends a notification."""
        leave = LeaveService.request(pilot, date(2026, 5, 1), date(2026, 5, 10), 'Holiday')

        leave = LeaveService.review(leave, approve=True, reviewed_by=admin_user_id)

        assert leave.status == LeaveStatus.APPROVED
        assert Notification.objects.get(recipient=pilot).type == 'loa_review'

    def test_review_only_once(self, pilot):
        """Test a decided leave cannot be reviewed again."""
        leave = LeaveService.request(pilot, date(2026, 5, 1), date(2026, 5, 10))
        LeaveService.review(leave, approve=False)

        with pytest.raises(ValueError):
            LeaveService.review(leave, approve=True)


class TestActivityService:
    """Tests for the activity requirement."""

    def _file(self, pilot, flight_date, status='approved'):
        from apps.operations.models import Pirep

        return Pirep.objects.create(
            pilot=pilot,
            flight_number='SU100',
            dep_icao='UUEE',
            arr_icao='LFPG',
            aircraft_icao='A320',
            flight_hours=Decimal('2.0'),
            multiplier=Decimal('1.5'),
            flight_date=flight_date,
            status=status,
        )

    def test_without_requirement(self, pilot):
        """Test pilots are compliant when no requirement is set."""
        result = ActivityService.status(pilot)

        assert result['required_days'] is None
        assert result['compliant'] is True
        assert result['last_pirep_date'] is None

    def test_overdue_pilot(self, pilot):
        """Test a pilot past the requirement is not compliant."""
        SiteSettingService.set('activity_pirep_days', '14')
        today = date(2026, 6, 30)
        self._file(pilot, today - timedelta(days=20))

        result = ActivityService.status(pilot, today=today)

        assert result['days_since_last_pirep'] == 20
        assert result['compliant'] is False
        assert result['approved_hours'] == 3.0

    def test_leave_exempts(self, pilot):
        """Test an approved leave covering today keeps the pilot compliant."""
        SiteSettingService.set('activity_pirep_days', '14')
        today = timezone.now().date()
        leave = LeaveService.request(pilot, today - timedelta(days=1), today + timedelta(days=1))
        LeaveService.review(leave, approve=True)

        result = ActivityService.status(pilot, today=today)

        assert result['on_loa'] is True
        assert result['compliant'] is True


class TestBonusService:

    def test_default_tiers(self):
        """Test the built-in tiers are used when none are configured."""
        names = [tier.name for tier in BonusService.tiers()]

        assert names[0] == 'Premium'
        assert names[-1] == 'Black'

    def test_progress_between_tiers(self):
        """Test progress toward the next tier."""
        tiers = [BonusTier(name='Silver', min_hours=100), BonusTier(name='Gold', min_hours=300)]

        result = BonusService.progress(200, tiers)

        assert result['current_tier'] == 'Silver'
        assert result['next_tier'] == 'Gold'
        assert result['hours_to_next'] == 100.0
        assert result['progress_percent'] == 50

    def test_progress_top_tier(self):
        """Test the top tier reports full progress."""
        result = BonusService.progress(5000, BonusService.tiers())

        assert result['current_tier'] == 'Black'
        assert result['next_tier'] is None
        assert result['progress_percent'] == 100

    def test_card_is_stable(self, pilot):
        """Test a pilot keeps the same card number."""
        first = BonusService.card_for(pilot)
        second = BonusService.card_for(pilot)

        assert first['card_number'] == second['card_number']
        assert len(first['card_number']) == 19


class TestStreakService:
    """Tests for the day streak."""

    def test_consecutive_days(self, pilot):
        """Test consecutive days extend the streak."""
        StreakService.record_flight(pilot, date(2026, 3, 1))
        streak = StreakService.record_flight(pilot, date(2026, 3, 2))

        assert streak.current_streak == 2
        assert streak.longest_streak == 2

    def test_gap_restarts(self, pilot):
        """Test a missed day restarts the streak but keeps the record."""
        for day in (1, 2, 3):
            StreakService.record_flight(pilot, date(2026, 3, day))
        streak = StreakService.record_flight(pilot, date(2026, 3, 6))

        assert streak.current_streak == 1
        assert streak.longest_streak == 3

    def test_same_day_is_ignored(self, pilot):
        """Test a second flight on the same day changes nothing."""
        StreakService.record_flight(pilot, date(2026, 3, 1))
        streak = StreakService.record_flight(pilot, date(2026, 3, 1))

        assert streak.current_streak == 1
        assert streak.last_pirep_date == date(2026, 3, 1)
