# src/apps/discord/services/webhooks.py
"""
Webhook Relay

Announcements posted to Discord channel webhooks. Services never call
Discord inline; they queue a relay that runs once their transaction
commits.
"""

import logging
from typing import Dict, Any

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from common.clients import post_webhook
from apps.pilots.services import RankService

from ..messages import Colors

logger = logging.getLogger(__name__)

FOOTER = {'text': 'Aeroflot Virtual'}


class WebhookNotConfiguredError(Exception):
    def __init__(self, notification_type: str):
        self.notification_type = notification_type
        super().__init__('Webhook not configured')


def queue_webhook(notification_type: str, payload: Dict[str, Any]) -> None:
    """Relay ``payload`` through Celery after the current transaction commits."""
    from ..tasks import relay_webhook

    transaction.on_commit(lambda: relay_webhook.delay(notification_type, payload))


def _field(name: str, value: Any, inline: bool = True) -> Dict:
    text = '' if value is None else str(value)
    return {'name': name, 'value': text[:1024] or 'N/A', 'inline': inline}


class WebhookRelay:
    """Builds the embed for a notification type and posts it."""

    @staticmethod
    def webhook_url(notification_type: str) -> str:
        webhooks = settings.DISCORD.get('WEBHOOKS', {})
        return webhooks.get(notification_type) or webhooks.get('default') or ''

    @staticmethod
    def build_embed(notification_type: str, payload: Dict[str, Any]) -> Dict:
        p = payload or {}

        if notification_type == 'new_pirep':
            embed = {
                'title': '✈️ New PIREP Filed!',
                'description': f"**{p.get('pilot_name')}** ({p.get('pid')}) has filed a new PIREP.",
                'color': Colors.GREEN,
                'fields': [
                    _field('Flight', p.get('flight_number')),
                    _field('Route', f"{p.get('dep_icao')} → {p.get('arr_icao')}"),
                    _field('Aircraft', p.get('aircraft_icao')),
                    _field('Hours', p.get('flight_hours')),
                    _field('Operator', p.get('operator')),
                    _field('Type', p.get('flight_type')),
                ],
            }
        elif notification_type == 'featured_route':
            embed = {
                'title': '⭐ Featured Route of the Day!',
                'description': "Today's featured route has been set.",
                'color': Colors.GOLD,
                'fields': [
                    _field('Route', p.get('route_number')),
                    _field('From → To', f"{p.get('dep_icao')} → {p.get('arr_icao')}"),
                    _field('Aircraft', p.get('aircraft_icao')),
                    _field('Date', p.get('featured_date')),
                ],
            }
        elif notification_type == 'new_challenge':
            fields = []
            if p.get('description'):
                fields.append(_field('Description', p['description'], inline=False))
            if p.get('destination_icao'):
                fields.append(_field('Destination', p['destination_icao']))
            embed = {
                'title': '🎯 New Challenge Available!',
                'description': f"A new challenge has been added: **{p.get('name')}**",
                'color': Colors.ORANGE,
                'fields': fields,
            }
            if p.get('image_url'):
                embed['image'] = {'url': p['image_url']}
        else:
            embed = {
                'title': '🎖️ Rank Promotion!',
                'description': f"**{p.get('pilot_name')}** ({p.get('pid')}) has been promoted!",
                'color': Colors.RANK_BLUE,
                'fields': [
                    _field('Previous Rank', RankService.format_rank(p.get('old_rank'))),
                    _field('New Rank', RankService.format_rank(p.get('new_rank'))),
                ],
            }

        embed['timestamp'] = timezone.now().isoformat()
        embed['footer'] = FOOTER
        return embed

    @staticmethod
    def send(notification_type: str, payload: Dict[str, Any]) -> Dict:
        """
        Post the notification.

        Raises:
            WebhookNotConfiguredError: no URL for the type and no default
            DiscordAPIError: Discord answered with an error status
        """
        url = WebhookRelay.webhook_url(notification_type)
        if not url:
            logger.error(f"No webhook URL configured for type: {notification_type}")
            raise WebhookNotConfiguredError(notification_type)

        embed = WebhookRelay.build_embed(notification_type, payload)
        post_webhook(url, {'embeds': [embed]})
        logger.info(f"Webhook {notification_type} delivered")
        return {'success': True}
