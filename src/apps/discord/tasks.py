# src/apps/discord/tasks.py
"""
Discord Celery Tasks

Scheduled recruitment retests, event reminders and the daily featured
announcement, plus the deferred work triggered by interactions and
webhook relays queued by other apps.
"""

import logging
from typing import Dict, Any

import httpx
from celery import shared_task
from django.conf import settings

from common.clients import DiscordClient, DiscordAPIError, DISCORD_ERRORS
from apps.academy.services import AcademyError, RecruitmentService

from .messages import EPHEMERAL
from .services.commands import CommandRegistry
from .services.featured import DailyFeaturedNotifier
from .services.interactions import discord_user
from .services.reminders import EventReminderService
from .services.webhooks import WebhookRelay

logger = logging.getLogger(__name__)


@shared_task(name='discord.process_recruitment_retests')
def process_recruitment_retests() -> Dict[str, Any]:
    return RecruitmentService.process_retests()


@shared_task(name='discord.send_event_reminders')
def send_event_reminders() -> Dict[str, Any]:
    return EventReminderService().run()


@shared_task(name='discord.send_daily_featured_notification')
def send_daily_featured_notification() -> Dict[str, Any]:
    return DailyFeaturedNotifier.run()


@shared_task(name='discord.register_slash_commands')
def register_slash_commands() -> Dict[str, Any]:
    result = CommandRegistry.register_commands()
    return {'ok': True, 'count': result['count']}


@shared_task(
    name='discord.relay_webhook',
    bind=True,
    max_retries=3,
    default_retry_delay=30,
)
def relay_webhook(self, notification_type: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Post a queued announcement to its Discord webhook.

    Transport errors and 5xx answers are retried; a 4xx means the payload
    or webhook is wrong and is not.
    """
    try:
        return WebhookRelay.send(notification_type, payload)
    except httpx.HTTPError as e:
        logger.warning(f"Webhook {notification_type} transport error: {e}")
        raise self.retry(exc=e)
    except DiscordAPIError as e:
        if e.status_code >= 500 or e.status_code == 429:
            raise self.retry(exc=e)
        raise


@shared_task(name='discord.process_fly_high')
def process_fly_high(interaction: Dict[str, Any]) -> Dict[str, Any]:
    """
    Run the Fly High recruitment step and answer the deferred interaction.

    The recruit only ever sees the followup, so every failure is turned
    into its message text.
    """
    user = discord_user(interaction)
    client = DiscordClient()

    try:
        result = RecruitmentService.start_session(
            discord_user_id=user.get('id'),
            username=user.get('global_name') or user.get('username') or '',
            guild_id=interaction.get('guild_id'),
            client=client,
        )
        content = result['message']
    except AcademyError as e:
        content = e.message
    except ValueError as e:
        content = str(e)
    except DISCORD_ERRORS as e:
        logger.error(f"Fly High failed for {user.get('id')}: {e}")
        content = (e.message if isinstance(e, DiscordAPIError) else '') or 'Recruitment flow failed'

    application_id = interaction.get('application_id') or settings.DISCORD['APPLICATION_ID']
    try:
        client.post_followup(application_id, interaction.get('token'), {'content': content, 'flags': EPHEMERAL})
    except DISCORD_ERRORS as e:
        logger.error(f"Fly High followup not delivered: {e}")

    return {'content': content}
