# src/apps/pilots/tests/test_api.py
"""
Tests for the roster API
"""

from decimal import Decimal

import pytest
from rest_framework import status

from apps.pilots.models import (
    Pilot,
    PilotApplication,
    ApplicationStatus,
    AuthIdentity,
    UserRole,
    RoleName,
)


pytestmark = pytest.mark.django_db


class TestAuthentication:

    def test_anonymous_rejected(self, api_client):
        """Test the roster requires a token."""
        response = api_client.get('/api/v1/pilots/')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_bad_token(self, api_client):
        """Test a forged token is refused."""
        api_client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')

        response = api_client.get('/api/v1/pilots/')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_role_rows_grant_admin(self, api_client, make_token, user_id):
        """Test a stored admin role works without the token claim."""
        UserRole.objects.create(user_id=user_id, role=RoleName.ADMIN)
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {make_token(user_id)}")

        response = api_client.get('/api/v1/roles/')

        assert response.status_code == status.HTTP_200_OK


class TestPilotAPI:
    """Tests for pilot endpoints."""

    def test_me(self, pilot_client, pilot):
        """Test the signed-in pilot reads their profile with roles."""
        UserRole.objects.create(user_id=pilot.user_id, role=RoleName.PILOT)

        response = pilot_client.get('/api/v1/pilots/me/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['pid'] == 'AFLV001'
        assert response.data['rank_label'] == 'Cadet'
        assert response.data['roles'] == ['pilot']

    def test_me_without_profile(self, api_client, make_token, user_id):
        """Test accounts without a pilot get a 404."""
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {make_token(user_id)}")

        response = api_client.get('/api/v1/pilots/me/')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_me(self, pilot_client, pilot):
        """Test pilots edit their own profile fields only."""
        response = pilot_client.patch(
            '/api/v1/pilots/me/',
            {'vatsim_id': '1234567', 'total_hours': '999'},
            format='json'
        )

        pilot.refresh_from_db()
        assert response.status_code == status.HTTP_200_OK
        assert pilot.vatsim_id == '1234567'
        assert pilot.total_hours == Decimal('0')

    def test_pilot_cannot_edit_roster(self, pilot_client, pilot):
        """Test roster edits are admin only."""
        response = pilot_client.patch(f'/api/v1/pilots/{pilot.id}/', {'full_name': 'X'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_rejects_bad_pid(self, admin_client, pilot):
        """Test callsign edits are validated."""
        response = admin_client.patch(f'/api/v1/pilots/{pilot.id}/', {'pid': 'ABC'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_leaderboard(self, pilot_client, create_pilot):
        """Test the leaderboard orders by hours and honours the limit."""
        create_pilot(pid='AFLV010', total_hours=Decimal('10'))
        create_pilot(pid='AFLV020', total_hours=Decimal('200'))

        response = pilot_client.get('/api/v1/pilots/leaderboard/', {'limit': 2})

        assert [p['pid'] for p in response.data] == ['AFLV020', 'AFLV010']

    def test_streak_without_flights(self, pilot_client, pilot):
        """Test a pilot without flights has an empty streak."""
        response = pilot_client.get(f'/api/v1/pilots/{pilot.id}/streak/')

        assert response.data['current_streak'] == 0

    def test_bonus_card(self, pilot_client, pilot):
        """Test the bonus card endpoint issues a card."""
        response = pilot_client.get(f'/api/v1/pilots/{pilot.id}/bonus-card/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['current_tier'] is None
        assert response.data['next_tier'] == 'Premium'

    def test_activity(self, pilot_client, pilot):
        """Test the activity endpoint reports compliance."""
        response = pilot_client.get(f'/api/v1/pilots/{pilot.id}/activity/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['compliant'] is True


class TestRankAPI:

    def test_rank_bounds_validated(self, admin_client):
        """Test max_hours must exceed min_hours."""
        response = admin_client.post(
            '/api/v1/ranks/',
            {'name': 'odd', 'label': 'Odd', 'min_hours': '10', 'max_hours': '5'},
            format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_pilot_reads_ranks(self, pilot_client, admin_client):
        """Test pilots can read the ladder."""
        admin_client.post(
            '/api/v1/ranks/',
            {'name': 'cadet', 'label': 'Cadet', 'min_hours': '0', 'max_hours': '50'},
            format='json'
        )

        response = pilot_client.get('/api/v1/ranks/')

        assert [r['name'] for r in response.data] == ['cadet']


class TestIdentityAPI:

    def test_link_own_identity(self, pilot_client, pilot):
        """Test identities are linked to the caller's account."""
        response = pilot_client.post(
            '/api/v1/identities/',
            {'provider': 'discord', 'provider_id': '999999999999999999', 'user_id': '00000000-0000-0000-0000-000000000001'},
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert str(AuthIdentity.objects.get().user_id) == str(pilot.user_id)

    def test_other_identities_hidden(self, pilot_client, link_discord, admin_user_id):
        """Test pilots do not see other accounts' identities."""
        link_discord(admin_user_id, '123')

        response = pilot_client.get('/api/v1/identities/')

        assert response.data['count'] == 0


class TestApplicationAPI:
    """Tests for applications."""

    def test_submit_application(self, api_client, make_token, user_id):
        """Test an applicant submits for their own account."""
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {make_token(user_id)}")

        response = api_client.post(
            '/api/v1/applications/',
            {'email': 'new@aflv.test', 'full_name': 'New Recruit', 'status': 'approved'},
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        application = PilotApplication.objects.get()
        assert str(application.user_id) == user_id
        assert application.status == ApplicationStatus.PENDING

    def test_approve(self, admin_client, user_id):
        """Test admins approve with a callsign."""
        application = PilotApplication.objects.create(user_id=user_id, email='a@aflv.test', full_name='A')

        response = admin_client.post(
            f'/api/v1/applications/{application.id}/approve/',
            {'pid': 'AFLV321'},
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['pid'] == 'AFLV321'
        assert Pilot.objects.filter(user_id=user_id).exists()

    def test_approve_taken_callsign(self, admin_client, pilot):
        """Test a taken callsign returns a conflict."""
        application = PilotApplication.objects.create(email='b@aflv.test', full_name='B')

        response = admin_client.post(
            f'/api/v1/applications/{application.id}/approve/',
            {'pid': 'AFLV001'},
            format='json'
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['error']['code'] == 'CALLSIGN_TAKEN'

    def test_reject(self, admin_client):
        """Test admins reject with a reason."""
        application = PilotApplication.objects.create(email='c@aflv.test', full_name='C')

        response = admin_client.post(
            f'/api/v1/applications/{application.id}/reject/',
            {'reason': 'Too young'},
            format='json'
        )

        assert response.data['status'] == 'rejected'

    def test_pilot_cannot_approve(self, pilot_client, pilot):
        """Test reviewing is admin only."""
        application = PilotApplication.objects.create(user_id=pilot.user_id, email='d@aflv.test', full_name='D')

        response = pilot_client.post(
            f'/api/v1/applications/{application.id}/approve/',
            {'pid': 'AFLV400'},
            format='json'
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_next_pid(self, admin_client, pilot):
        """Test the suggested callsign follows the roster."""
        response = admin_client.get('/api/v1/applications/next-pid/')

        assert response.data == {'pid': 'AFLV002'}


class TestLeaveAPI:

    def test_request_and_approve(self, pilot_client, admin_client, pilot):
        """Test a pilot requests leave and an admin approves it."""
        created = pilot_client.post(
            '/api/v1/loa/',
            {'start_date': '2026-07-01', 'end_date': '2026-07-14', 'reason': 'Vacation'},
            format='json'
        )
        assert created.status_code == status.HTTP_201_CREATED

        response = admin_client.post(f"/api/v1/loa/{created.data['id']}/approve/")

        assert response.data['status'] == 'approved'

    def test_dates_validated(self, pilot_client, pilot):
        """Test reversed dates are rejected."""
        response = pilot_client.post(
            '/api/v1/loa/',
            {'start_date': '2026-07-14', 'end_date': '2026-07-01'},
            format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestAdminSetupAPI:

    def test_whitelisted_email(self, api_client, make_token, user_id):
        """Test a whitelisted email becomes admin."""
        api_client.credentials(
            HTTP_AUTHORIZATION=f"Bearer {make_token(user_id, email='founder@aflv.test')}"
        )

        response = api_client.post('/api/v1/admin/setup/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['setup'] is True

    def test_other_email(self, pilot_client):
        """Test other emails are refused."""
        response = pilot_client.post('/api/v1/admin/setup/')

        assert response.status_code == status.HTTP_403_FORBIDDEN
