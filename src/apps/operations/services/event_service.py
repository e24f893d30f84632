# src/apps/operations/services/event_service.py
"""
Event Service

Upcoming events and pilot registration with gate assignment.
"""

import logging
from datetime import timedelta
from typing import Iterable, List, Optional

from django.db import transaction
from django.utils import timezone

from apps.pilots.models import Pilot

from ..models import Event, EventRegistration

logger = logging.getLogger(__name__)


def pick_gate(available: Iterable[str], used: Iterable[str]) -> Optional[str]:
    """First available gate nobody holds yet, else the first gate, else None."""
    available = [g for g in (available or []) if g]
    used = set(g for g in (used or []) if g)
    for gate in available:
        if gate not in used:
            return gate
    return available[0] if available else None


class EventService:

    @staticmethod
    def upcoming(now=None, days: int = 2, limit: int = 5) -> List[Event]:
        now = now or timezone.now()
        return list(
            Event.objects.filter(
                is_active=True,
                start_time__gte=now,
                start_time__lte=now + timedelta(days=days),
            ).order_by('start_time')[:limit]
        )

    @staticmethod
    @transaction.atomic
    def join(event: Event, pilot: Pilot, discord_user_id: str = '') -> EventRegistration:
        """
        Register ``pilot`` for ``event``.

        Re-joining returns the existing registration, filling in the Discord
        id if it was missing.
        """
        event = Event.objects.select_for_update().get(id=event.id)

        existing = EventRegistration.objects.filter(event=event, pilot=pilot).first()
        if existing:
            if discord_user_id and not existing.discord_user_id:
                existing.discord_user_id = str(discord_user_id)
                existing.save(update_fields=['discord_user_id', 'updated_at'])
            return existing

        registrations = EventRegistration.objects.filter(event=event)
        used_dep = registrations.values_list('assigned_dep_gate', flat=True)
        used_arr = registrations.values_list('assigned_arr_gate', flat=True)

        registration = EventRegistration.objects.create(
            event=event,
            pilot=pilot,
            assigned_dep_gate=pick_gate(event.available_dep_gates, used_dep) or '',
            assigned_arr_gate=pick_gate(event.available_arr_gates, used_arr) or '',
            discord_user_id=str(discord_user_id or ''),
        )
        logger.info(
            f"{pilot.pid} joined {event.name}: dep {registration.assigned_dep_gate or 'TBD'}, "
            f"arr {registration.assigned_arr_gate or 'TBD'}"
        )
        return registration
