# src/apps/discord/api/views.py
"""
Discord Views

The interactions endpoint Discord calls, plus admin/service triggers for
the scheduled jobs and the webhook relay.
"""

import hmac
import json
import logging

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from common.clients import DiscordAPIError, DISCORD_ERRORS
from common.exceptions import DiscordAPIException, ServiceUnavailableException
from common.permissions import IsAdminOrService
from apps.academy.services import PracticalNotFoundError, RecruitmentError, RecruitmentService

from ..services import (
    CommandRegistry,
    DailyFeaturedNotifier,
    EventReminderService,
    InteractionDispatcher,
    WebhookNotConfiguredError,
    WebhookRelay,
    verify_signature,
)
from .serializers import PracticalStatusActionSerializer, WebhookNotifySerializer

logger = logging.getLogger(__name__)

PRACTICAL_STATUS_ACTION = 'handle_practical_status'


class InteractionsView(APIView):
    """
    POST /discord/interactions/

    Three callers share this URL: Discord itself (signed), an admin
    reviewing a practical from the web (bearer token, no signature) and
    the deploy script publishing the recruitment board (register secret).
    """

    permission_classes = [AllowAny]
    throttle_classes = []

    def post(self, request):
        raw_body = request.body
        signature = request.headers.get('X-Signature-Ed25519', '')
        timestamp = request.headers.get('X-Signature-Timestamp', '')

        try:
            body = json.loads(raw_body or b'{}')
        except ValueError:
            return Response({'ok': False, 'error': 'Invalid JSON body'}, status=status.HTTP_400_BAD_REQUEST)

        if not signature and getattr(request.user, 'is_authenticated', False):
            return self.authenticated_action(request, body)

        if 'X-Register-Secret' in request.headers:
            return self.publish_recruitment_board(request)

        if not verify_signature(settings.DISCORD.get('PUBLIC_KEY'), signature, timestamp, raw_body):
            return Response('invalid request signature', status=status.HTTP_401_UNAUTHORIZED)

        return Response(InteractionDispatcher().dispatch(body))

    def authenticated_action(self, request, body):
        if body.get('action') != PRACTICAL_STATUS_ACTION:
            return Response(
                {'ok': False, 'error': 'Unsupported authenticated action'},
                status=status.HTTP_400_BAD_REQUEST
            )

        if not getattr(request.user, 'is_admin', False):
            return Response({'ok': False, 'error': 'Unauthorized'}, status=status.HTTP_401_UNAUTHORIZED)

        serializer = PracticalStatusActionSerializer(data=body)
        if not serializer.is_valid():
            return Response(
                {'ok': False, 'error': 'Invalid practical payload', 'details': serializer.errors},
                status=status.HTTP_400_BAD_REQUEST
            )
        data = serializer.validated_data

        try:
            result = RecruitmentService.apply_practical_result(
                data['practicalId'],
                data['status'],
                remarks=data['remarks'],
                guild_id=data['guildId'] or None,
                examiner_id=request.user.id,
            )
        except PracticalNotFoundError as e:
            return Response({'ok': False, 'error': e.message}, status=status.HTTP_404_NOT_FOUND)
        except RecruitmentError as e:
            return Response({'ok': False, 'error': e.message}, status=status.HTTP_400_BAD_REQUEST)

        return Response({'ok': True, 'action': result['action'], 'adminUserId': str(request.user.id)})

    def publish_recruitment_board(self, request):
        expected = settings.DISCORD.get('REGISTER_SECRET') or ''
        provided = request.headers.get('X-Register-Secret', '')
        if not expected or not hmac.compare_digest(provided.encode(), expected.encode()):
            return Response('Unauthorized', status=status.HTTP_401_UNAUTHORIZED)

        try:
            posted = RecruitmentService.publish_recruitment_embed()
        except DISCORD_ERRORS as e:
            logger.error(f"Recruitment board not published: {e}")
            return Response(
                {'ok': False, 'error': 'Failed to create recruitment embed'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        return Response({
            'ok': True,
            'messageId': (posted or {}).get('id'),
            'channelId': settings.DISCORD['RECRUITMENTS_CHANNEL_ID'],
        })


class RegisterCommandsView(APIView):
    permission_classes = [IsAdminOrService]

    def post(self, request):
        try:
            result = CommandRegistry.register_commands()
        except ValueError as e:
            raise ServiceUnavailableException(str(e))
        except DiscordAPIError as e:
            raise DiscordAPIException(e.message)
        return Response({'ok': True, 'count': result['count'], 'commands': result['commands']})


class RecruitmentRetestRunView(APIView):
    """Run the retest job now instead of waiting for the beat schedule."""

    permission_classes = [IsAdminOrService]

    def post(self, request):
        return Response(RecruitmentService.process_retests())


class EventReminderRunView(APIView):
    permission_classes = [IsAdminOrService]

    def post(self, request):
        return Response(EventReminderService().run())


class FeaturedNotifyView(APIView):
    permission_classes = [IsAdminOrService]

    def post(self, request):
        try:
            return Response(DailyFeaturedNotifier.run())
        except WebhookNotConfiguredError:
            return Response({'error': 'No webhook configured'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        except DiscordAPIError as e:
            raise DiscordAPIException(e.message)


class WebhookNotifyView(APIView):
    """Relay an announcement to Discord synchronously."""

    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = WebhookNotifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = WebhookRelay.send(serializer.validated_data['type'], serializer.validated_data['payload'])
        except WebhookNotConfiguredError:
            return Response({'error': 'Webhook not configured'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        except DISCORD_ERRORS as e:
            logger.error(f"Discord webhook failed: {e}")
            return Response({'error': 'Discord webhook failed'}, status=status.HTTP_502_BAD_GATEWAY)
        return Response(result)
