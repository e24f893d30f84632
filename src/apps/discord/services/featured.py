# src/apps/discord/services/featured.py
"""
Daily featured-route announcement.
"""

import logging
from datetime import date
from typing import Dict, Any

from django.utils import timezone

from common.clients import post_webhook
from apps.operations.services import MultiplierService, RouteService

from ..messages import Colors
from .webhooks import WebhookRelay, WebhookNotConfiguredError, FOOTER

logger = logging.getLogger(__name__)

MIN_FEATURED_ROUTES = 2


class DailyFeaturedNotifier:

    @staticmethod
    def build_embed(featured, today: date) -> Dict[str, Any]:
        fields = []
        for index, entry in enumerate(featured, start=1):
            route = entry.route
            fields.extend([
                {'name': f"Route {index}", 'value': route.route_number or 'N/A', 'inline': True},
                {'name': 'From → To', 'value': f"{route.dep_icao or '?'} → {route.arr_icao or '?'}", 'inline': True},
                {'name': 'Aircraft', 'value': route.aircraft_icao or 'N/A', 'inline': True},
            ])
        fields.append({'name': 'Date', 'value': today.isoformat(), 'inline': True})

        description = f"Today's {len(featured)} featured routes have been set for {today.isoformat()}."
        multiplier = MultiplierService.top_active()
        if multiplier is not None:
            description += f"\n🔥 **{multiplier.value}x {multiplier.name}** multiplier active!"

        return {
            'title': '⭐ Daily Featured Routes!',
            'description': description,
            'color': Colors.GOLD,
            'fields': fields[:25],
            'timestamp': timezone.now().isoformat(),
            'footer': FOOTER,
        }

    @staticmethod
    def run(today: date = None) -> Dict[str, Any]:
        """
        Announce today's featured routes when at least two are set.

        Raises:
            WebhookNotConfiguredError: no featured or default webhook
            DiscordAPIError: webhook rejected the post
        """
        today = today or timezone.now().date()
        featured = list(RouteService.featured_for(today))

        if len(featured) < MIN_FEATURED_ROUTES:
            return {
                'success': False,
                'message': (
                    f"Only {len(featured)} featured route(s) today. "
                    f"Minimum {MIN_FEATURED_ROUTES} required for notification."
                ),
            }

        url = WebhookRelay.webhook_url('featured_route')
        if not url:
            raise WebhookNotConfiguredError('featured_route')

        post_webhook(url, {'embeds': [DailyFeaturedNotifier.build_embed(featured, today)]})
        logger.info(f"Daily featured notification sent for {today} ({len(featured)} routes)")
        return {'success': True, 'count': len(featured)}
