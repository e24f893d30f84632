# src/apps/operations/services/route_service.py
import logging
from datetime import date, timedelta
from typing import Iterable, List

from django.db import transaction
from django.utils import timezone

from ..models import Route, RouteOfWeek, DailyFeaturedRoute

logger = logging.getLogger(__name__)


class RouteService:

    @staticmethod
    def current_week_start(today: date = None) -> date:
        """Monday of the week containing ``today``."""
        today = today or timezone.now().date()
        return today - timedelta(days=today.weekday())

    @staticmethod
    def routes_of_week(week_start: date = None):
        week_start = week_start or RouteService.current_week_start()
        return RouteOfWeek.objects.filter(week_start=week_start).select_related('route').order_by('day_of_week')

    @staticmethod
    def set_route_of_day(week_start: date, day_of_week: int, route: Route) -> RouteOfWeek:
        if week_start.weekday() != 0:
            raise ValueError('week_start must be a Monday')
        if not 0 <= day_of_week <= 6:
            raise ValueError('day_of_week must be between 0 (Monday) and 6 (Sunday)')
        entry, _ = RouteOfWeek.objects.update_or_create(
            week_start=week_start,
            day_of_week=day_of_week,
            defaults={'route': route},
        )
        return entry

    @staticmethod
    def featured_for(day: date = None):
        day = day or timezone.now().date()
        return DailyFeaturedRoute.objects.filter(featured_date=day).select_related('route')

    @staticmethod
    @transaction.atomic
    def set_featured(day: date, routes: Iterable[Route]) -> List[DailyFeaturedRoute]:
        """Feature routes on ``day`` and announce each newly featured one."""
        from apps.discord.services.webhooks import queue_webhook

        created = []
        for route in routes:
            entry, is_new = DailyFeaturedRoute.objects.get_or_create(featured_date=day, route=route)
            if is_new:
                created.append(entry)
                queue_webhook('featured_route', {
                    'route_number': route.route_number,
                    'dep_icao': route.dep_icao,
                    'arr_icao': route.arr_icao,
                    'aircraft_icao': route.aircraft_icao,
                    'featured_date': day.isoformat(),
                })
        logger.info(f"Featured {len(created)} routes on {day}")
        return created
