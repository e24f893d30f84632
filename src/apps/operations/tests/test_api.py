# src/apps/operations/tests/test_api.py
"""
Tests for the flight operations API
"""

from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.utils import timezone
from rest_framework import status

from apps.operations.models import Challenge, Event, Pirep, PirepStatus, RouteOfWeek
from apps.operations.services import PirepService


pytestmark = pytest.mark.django_db


PIREP_PAYLOAD = {
    'flight_number': 'SU100',
    'dep_icao': 'UUEE',
    'arr_icao': 'LFPG',
    'aircraft_icao': 'A320',
    'flight_hours': '3.50',
}


class TestPirepAPI:
    """Tests for PIREP endpoints."""

    def test_file_pirep(self, pilot_client, pilot, multiplier):
        """Test a pilot files a PIREP with a named multiplier."""
        response = pilot_client.post(
            '/api/v1/pireps/',
            {**PIREP_PAYLOAD, 'multiplier': 'Event'},
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == 'pending'
        pirep = Pirep.objects.get()
        assert pirep.pilot == pilot
        assert pirep.multiplier == Decimal('2.00')
        assert pirep.source == 'web'

    def test_zero_hours_rejected(self, pilot_client):
        """Test flight hours must be positive."""
        response = pilot_client.post(
            '/api/v1/pireps/',
            {**PIREP_PAYLOAD, 'flight_hours': '0'},
            format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_file_without_pilot(self, api_client, make_token, user_id):
        """Test accounts without a pilot profile cannot file."""
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {make_token(user_id)}")

        response = api_client.post('/api/v1/pireps/', PIREP_PAYLOAD, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_pilot_sees_own_pireps(self, pilot_client, pilot, create_pilot):
        """Test pilots only list their own PIREPs."""
        PirepService.file_pirep(pilot=pilot, **PIREP_PAYLOAD)
        PirepService.file_pirep(pilot=create_pilot(), **PIREP_PAYLOAD)

        response = pilot_client.get('/api/v1/pireps/')

        assert response.data['count'] == 1

    def test_mine(self, pilot_client, pilot):
        """Test the mine endpoint lists the caller's PIREPs."""
        PirepService.file_pirep(pilot=pilot, **PIREP_PAYLOAD)

        response = pilot_client.get('/api/v1/pireps/mine/')

        assert response.data['results'][0]['flight_number'] == 'SU100'

    def test_admin_approves(self, admin_client, pilot):
        """Test approval through the API credits the pilot."""
        pirep = PirepService.file_pirep(pilot=pilot, **PIREP_PAYLOAD)

        response = admin_client.post(
            f'/api/v1/pireps/{pirep.id}/review/',
            {'status': 'approved'},
            format='json'
        )

        pilot.refresh_from_db()
        assert response.status_code == status.HTTP_200_OK
        assert pilot.total_hours == Decimal('3.50')

    def test_deny_needs_reason(self, admin_client, pilot):
        """Test denials without a reason are rejected."""
        pirep = PirepService.file_pirep(pilot=pilot, **PIREP_PAYLOAD)

        response = admin_client.post(
            f'/api/v1/pireps/{pirep.id}/review/',
            {'status': 'denied'},
            format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        pirep.refresh_from_db()
        assert pirep.status == PirepStatus.PENDING

    def test_pilot_cannot_review(self, pilot_client, pilot):
        """Test reviewing is admin only."""
        pirep = PirepService.file_pirep(pilot=pilot, **PIREP_PAYLOAD)

        response = pilot_client.post(
            f'/api/v1/pireps/{pirep.id}/review/',
            {'status': 'approved'},
            format='json'
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestFleetAPI:

    def test_route_filters(self, pilot_client, route):
        """Test routes filter by departure."""
        response = pilot_client.get('/api/v1/routes/', {'dep_icao': 'UUEE'})

        assert response.data['count'] == 1
        assert response.data['results'][0]['route_number'] == 'SU100'

    def test_multipliers_admin_write(self, pilot_client, admin_client):
        """Test only admins add multipliers."""
        payload = {'name': 'Weekend', 'value': '1.5'}

        assert pilot_client.post('/api/v1/multipliers/', payload, format='json').status_code == 403
        assert admin_client.post('/api/v1/multipliers/', payload, format='json').status_code == 201

    def test_gate_lookup(self, pilot_client):
        """Test the gate lookup passes the query through."""
        with patch('apps.operations.api.views.fleet_views.GateService.fetch_gates',
                   return_value={'gates': []}) as fetch:
            response = pilot_client.get('/api/v1/gates/', {'icao': 'LFPG', 'aircraft_icao': 'A320'})

        assert response.status_code == status.HTTP_200_OK
        fetch.assert_called_once_with('LFPG', 'A320')

    def test_gate_lookup_upstream_failure(self, pilot_client):
        """Test scrape failures surface as a bad gateway."""
        with patch('apps.operations.api.views.fleet_views.GateService.fetch_gates',
                   return_value={'gates': [], 'error': 'Failed to fetch gates'}):
            response = pilot_client.get('/api/v1/gates/', {'icao': 'LFPG'})

        assert response.status_code == status.HTTP_502_BAD_GATEWAY

    def test_gate_lookup_requires_icao(self, pilot_client):
        """Test a missing airport is a bad request."""
        response = pilot_client.get('/api/v1/gates/')

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestScheduleAPI:
    """Tests for routes of the week, featured routes, challenges and events."""

    def test_route_of_week_replaces_day(self, admin_client, route):
        """Test posting an existing day swaps the route."""
        other = route.__class__.objects.create(route_number='SU200', dep_icao='UUEE', arr_icao='EGLL')
        url = '/api/v1/routes-of-week/'

        admin_client.post(url, {'week_start': '2026-10-19', 'day_of_week': 0, 'route_id': str(route.id)}, format='json')
        response = admin_client.post(
            url,
            {'week_start': '2026-10-19', 'day_of_week': 0, 'route_id': str(other.id)},
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['day_name'] == 'Monday'
        assert RouteOfWeek.objects.get().route == other

    def test_route_of_week_not_monday(self, admin_client, route):
        """Test week starts must be Mondays."""
        response = admin_client.post(
            '/api/v1/routes-of-week/',
            {'week_start': '2026-10-20', 'day_of_week': 0, 'route_id': str(route.id)},
            format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_feature_routes(self, admin_client, route):
        """Test featuring routes returns the new entries."""
        today = timezone.now().date().isoformat()

        response = admin_client.post(
            '/api/v1/featured-routes/',
            {'featured_date': today, 'route_ids': [str(route.id)]},
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data[0]['route']['route_number'] == 'SU100'

    def test_accept_challenge(self, pilot_client, pilot):
        """Test a pilot accepts a challenge."""
        challenge = Challenge.objects.create(name='Paris', destination_icao='LFPG')

        response = pilot_client.post(f'/api/v1/challenges/{challenge.id}/accept/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'incomplete'

    def test_join_event(self, pilot_client, pilot):
        """Test joining an event assigns gates and keeps the Discord id."""
        now = timezone.now()
        event = Event.objects.create(
            name='Fly-In',
            dep_icao='UUEE',
            arr_icao='LFPG',
            start_time=now + timedelta(hours=2),
            end_time=now + timedelta(hours=6),
            available_dep_gates=['12'],
        )

        response = pilot_client.post(f'/api/v1/events/{event.id}/join/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['assigned_dep_gate'] == '12'
        assert response.data['discord_user_id'] == '111111111111111111'

    def test_event_times_validated(self, admin_client):
        """Test events must end after they start."""
        now = timezone.now()

        response = admin_client.post(
            '/api/v1/events/',
            {
                'name': 'Backwards',
                'dep_icao': 'UUEE',
                'arr_icao': 'LFPG',
                'start_time': now.isoformat(),
                'end_time': (now - timedelta(hours=1)).isoformat(),
            },
            format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_upcoming_bad_params(self, pilot_client):
        """Test non-numeric window parameters are rejected."""
        response = pilot_client.get('/api/v1/events/upcoming/', {'days': 'soon'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
