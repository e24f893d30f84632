# src/apps/discord/tests/test_api.py
"""
Tests for the Discord interactions endpoint and job triggers
"""

import json
import uuid
from unittest.mock import patch

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from django.conf import settings
from django.test import override_settings
from rest_framework import status

from apps.academy.services import PracticalNotFoundError
from apps.discord.services import WebhookNotConfiguredError


pytestmark = pytest.mark.django_db


INTERACTIONS_URL = '/discord/interactions/'
PRACTICAL_ACTION = 'apps.discord.api.views.RecruitmentService.apply_practical_result'


@pytest.fixture
def signing_key():
    return Ed25519PrivateKey.generate()


@pytest.fixture
def discord_public_key(signing_key):
    public_hex = signing_key.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    ).hex()
    with override_settings(DISCORD={**settings.DISCORD, 'PUBLIC_KEY': public_hex}):
        yield public_hex


@pytest.fixture
def signed_post(api_client, signing_key, discord_public_key):
    """Post a body signed the way Discord signs interactions."""
    def _post(payload, timestamp='1700000000', tamper=False):
        body = json.dumps(payload).encode()
        signature = signing_key.sign(timestamp.encode() + body).hex()
        if tamper:
            body = body.replace(b'}', b', "extra": 1}')
        return api_client.generic(
            'POST',
            INTERACTIONS_URL,
            body,
            content_type='application/json',
            HTTP_X_SIGNATURE_ED25519=signature,
            HTTP_X_SIGNATURE_TIMESTAMP=timestamp,
        )
    return _post


class TestInteractionsEndpoint:
    """Tests for requests signed by Discord."""

    def test_ping(self, signed_post):
        """Test a signed ping is answered with a pong."""
        response = signed_post({'type': 1})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'type': 1}

    def test_tampered_body(self, signed_post):
        """Test a body that does not match its signature is refused."""
        response = signed_post({'type': 1}, tamper=True)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_unsigned(self, api_client, discord_public_key):
        """Test requests without a signature are refused."""
        response = api_client.post(INTERACTIONS_URL, {'type': 1}, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_invalid_json(self, api_client):
        """Test a malformed body is a bad request."""
        response = api_client.generic('POST', INTERACTIONS_URL, b'{not json', content_type='application/json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'ok': False, 'error': 'Invalid JSON body'}

    def test_signed_command(self, signed_post, create_pilot):
        """Test signed slash commands reach the dispatcher."""
        create_pilot(full_name='Top Pilot')

        response = signed_post({
            'type': 2,
            'member': {'user': {'id': '1', 'username': 'someone'}},
            'data': {'name': 'leaderboard'},
        })

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['data']['embeds'][0]['title'] == '🏆 Top 5 Pilot Leaderboard'


class TestRecruitmentBoard:
    """Tests for publishing the Fly High board."""

    def test_publish(self, api_client):
        """Test the register secret publishes the board."""
        with patch(
            'apps.discord.api.views.RecruitmentService.publish_recruitment_embed',
            return_value={'id': '777000000000000123'},
        ) as publish:
            response = api_client.post(
                INTERACTIONS_URL,
                {},
                format='json',
                HTTP_X_REGISTER_SECRET='test-register-secret',
            )

        publish.assert_called_once_with()
        assert response.status_code == status.HTTP_200_OK
        assert response.data == {
            'ok': True,
            'messageId': '777000000000000123',
            'channelId': settings.DISCORD['RECRUITMENTS_CHANNEL_ID'],
        }

    def test_wrong_secret(self, api_client):
        """Test a wrong secret is unauthorized."""
        with patch('apps.discord.api.views.RecruitmentService.publish_recruitment_embed') as publish:
            response = api_client.post(
                INTERACTIONS_URL,
                {},
                format='json',
                HTTP_X_REGISTER_SECRET='guess',
            )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        publish.assert_not_called()

    def test_discord_failure(self, api_client):
        """Test Discord failures surface as a server error."""
        with patch(
            'apps.discord.api.views.RecruitmentService.publish_recruitment_embed',
            side_effect=httpx.ConnectError('down'),
        ):
            response = api_client.post(
                INTERACTIONS_URL,
                {},
                format='json',
                HTTP_X_REGISTER_SECRET='test-register-secret',
            )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR


class TestPracticalStatusAction:
    """Tests for admins reviewing practicals from the web."""

    def payload(self, **overrides):
        data = {
            'action': 'handle_practical_status',
            'practicalId': str(uuid.uuid4()),
            'status': 'passed',
            'remarks': 'Smooth landing',
        }
        data.update(overrides)
        return data

    def test_admin_review(self, admin_client, admin_user_id):
        """Test an admin records a result."""
        payload = self.payload()

        with patch(PRACTICAL_ACTION, return_value={'action': 'pass_completed'}) as apply:
            response = admin_client.post(INTERACTIONS_URL, payload, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'ok': True, 'action': 'pass_completed', 'adminUserId': admin_user_id}
        args, kwargs = apply.call_args
        assert str(args[0]) == payload['practicalId']
        assert args[1] == 'passed'
        assert kwargs['remarks'] == 'Smooth landing'
        assert kwargs['guild_id'] is None
        assert kwargs['examiner_id'] == admin_user_id

    def test_pilot_unauthorized(self, pilot_client):
        """Test non-admins cannot review."""
        with patch(PRACTICAL_ACTION) as apply:
            response = pilot_client.post(INTERACTIONS_URL, self.payload(), format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        apply.assert_not_called()

    def test_unsupported_action(self, admin_client):
        """Test other actions are rejected."""
        response = admin_client.post(INTERACTIONS_URL, self.payload(action='delete_everything'), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_invalid_status(self, admin_client):
        """Test only passed or failed are accepted."""
        response = admin_client.post(INTERACTIONS_URL, self.payload(status='maybe'), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'status' in response.data['details']

    def test_unknown_practical(self, admin_client):
        """Test a missing practical is a 404."""
        with patch(PRACTICAL_ACTION, side_effect=PracticalNotFoundError()):
            response = admin_client.post(INTERACTIONS_URL, self.payload(), format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == 'Practical not found'


class TestJobTriggers:
    """Tests for the admin/service job endpoints."""

    def test_pilot_forbidden(self, pilot_client):
        """Test pilots cannot run jobs."""
        response = pilot_client.post('/api/v1/discord/featured/notify/')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_featured_notify(self, service_client):
        """Test the featured job reports too few routes."""
        response = service_client.post('/api/v1/discord/featured/notify/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is False

    def test_featured_without_webhook(self, admin_client):
        """Test a missing webhook is a server error."""
        with patch(
            'apps.discord.api.views.DailyFeaturedNotifier.run',
            side_effect=WebhookNotConfiguredError('featured_route'),
        ):
            response = admin_client.post('/api/v1/discord/featured/notify/')

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR

    def test_register_commands(self, admin_client):
        """Test command registration returns the registered set."""
        with patch(
            'apps.discord.api.views.CommandRegistry.register_commands',
            return_value={'ok': True, 'count': 1, 'commands': [{'name': 'pirep'}]},
        ):
            response = admin_client.post('/api/v1/discord/commands/register/')

        assert response.data == {'ok': True, 'count': 1, 'commands': [{'name': 'pirep'}]}

    def test_register_commands_unconfigured(self, admin_client):
        """Test missing bot configuration is a 503."""
        with patch(
            'apps.discord.api.views.CommandRegistry.register_commands',
            side_effect=ValueError('Missing Discord configuration'),
        ):
            response = admin_client.post('/api/v1/discord/commands/register/')

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE

    def test_retests(self, service_client):
        """Test the retest job can be run on demand."""
        with patch(
            'apps.discord.api.views.RecruitmentService.process_retests',
            return_value={'success': True, 'processed': 0},
        ):
            response = service_client.post('/api/v1/discord/recruitment/retests/run/')

        assert response.data == {'success': True, 'processed': 0}

    def test_event_reminders(self, service_client):
        """Test the reminder job runs with nothing due."""
        response = service_client.post('/api/v1/discord/events/reminders/run/')

        assert response.data == {'success': True, 'processed': 0, 'results': []}


class TestWebhookNotify:

    def test_relay(self, pilot_client):
        """Test an announcement is relayed synchronously."""
        with patch('apps.discord.services.webhooks.post_webhook') as post:
            response = pilot_client.post(
                '/api/v1/discord/notify/',
                {'type': 'rank_promotion', 'payload': {'pid': 'AFLV001', 'new_rank': 'captain'}},
                format='json'
            )

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'success': True}
        assert post.call_args[0][0] == 'https://discord.test/api/webhooks/rank'

    def test_requires_login(self, api_client):
        """Test anonymous callers are refused."""
        response = api_client.post('/api/v1/discord/notify/', {'type': 'new_pirep'}, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_unknown_type(self, pilot_client):
        """Test notification types are validated."""
        response = pilot_client.post('/api/v1/discord/notify/', {'type': 'gossip'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_not_configured(self, pilot_client):
        """Test a missing webhook is a server error."""
        with override_settings(DISCORD={**settings.DISCORD, 'WEBHOOKS': {}}):
            response = pilot_client.post('/api/v1/discord/notify/', {'type': 'new_pirep'}, format='json')

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR

    def test_discord_failure(self, pilot_client):
        """Test Discord errors are a bad gateway."""
        with patch('apps.discord.services.webhooks.post_webhook', side_effect=httpx.ConnectError('down')):
            response = pilot_client.post('/api/v1/discord/notify/', {'type': 'new_pirep'}, format='json')

        assert response.status_code == status.HTTP_502_BAD_GATEWAY
