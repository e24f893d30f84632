# src/apps/discord/services/reminders.py
"""
Event Reminder Service

Thirty minutes before an event starts, open a thread in the reminder
channel listing every registered pilot with their assigned gates.
Each event is reminded once.
"""

import logging
from datetime import datetime, timedelta, timezone as dt_timezone
from typing import Dict, Any, List

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from common.clients import DiscordClient, DISCORD_ERRORS
from apps.operations.models import Aircraft, Event
from apps.pilots.models import AuthIdentity, IdentityProvider

from ..models import EventDiscordReminder, ReminderType

logger = logging.getLogger(__name__)

REMINDER_WINDOW = timedelta(minutes=30)
MESSAGE_LIMIT = 1900


def utc_hm(value: datetime) -> str:
    return f"{value.astimezone(dt_timezone.utc).strftime('%H:%M')} UTC"


class EventReminderService:

    def __init__(self, client: DiscordClient = None):
        self.client = client or DiscordClient()

    def pending_events(self, now: datetime) -> List[Event]:
        return list(
            Event.objects
            .filter(is_active=True, start_time__gte=now, start_time__lte=now + REMINDER_WINDOW)
            .exclude(discord_reminders__reminder_type=ReminderType.T_MINUS_30M)
            .order_by('start_time')
        )

    @staticmethod
    def aircraft_display(event: Event) -> str:
        if event.aircraft_name:
            return event.aircraft_name
        icao = (event.aircraft_icao or '').strip().upper()
        if not icao:
            return 'Any'
        livery = (
            Aircraft.objects.filter(icao_code__iexact=icao).exclude(livery='')
            .values_list('livery', flat=True).first()
        )
        return f"{icao} ({livery})" if livery else icao

    @staticmethod
    def assignment_lines(event: Event) -> List[str]:
        registrations = list(event.registrations.select_related('pilot').order_by('created_at'))
        if not registrations:
            return ['No pilots registered yet.']

        user_ids = [r.pilot.user_id for r in registrations if r.pilot.user_id]
        identities = {
            str(identity.user_id): identity
            for identity in AuthIdentity.objects.filter(provider=IdentityProvider.DISCORD, user_id__in=user_ids)
        }

        lines = []
        for registration in registrations:
            pilot = registration.pilot
            identity = identities.get(str(pilot.user_id)) if pilot.user_id else None
            discord_id = (
                registration.discord_user_id
                or pilot.discord_user_id
                or (identity.provider_id if identity else '')
            )
            username = (identity.username if identity else '') or pilot.discord_username

            if discord_id:
                display = f"**__<@{discord_id}>__**"
            elif username:
                display = f"**__@{username.lstrip('@')}__**"
            else:
                display = f"**__{pilot.full_name or pilot.pid or 'Pilot'}__**"

            lines.append(
                f"• {display} - DEP Gate: **{registration.assigned_dep_gate or 'TBD'}** | "
                f"ARR Gate: **{registration.assigned_arr_gate or 'TBD'}**"
            )
        return lines

    def build_message(self, event: Event) -> str:
        header = [
            f"## ✈️ {event.name or 'Event'}",
            f"**Route:** {event.dep_icao or '----'} → {event.arr_icao or '----'}",
            f"**Aircraft:** {self.aircraft_display(event)}",
            f"**Start (Zulu):** {utc_hm(event.start_time)}",
            f"**End (Zulu):** {utc_hm(event.end_time) if event.end_time else 'N/A'}",
        ]
        if event.banner_url:
            header.append(f"**Image:** {event.banner_url}")
        header.extend(['', '### 🛬 Gate Assignments'])
        return '\n'.join(header + self.assignment_lines(event))[:MESSAGE_LIMIT]

    def remind(self, event: Event) -> EventDiscordReminder:
        channel_id = settings.DISCORD['EVENT_REMINDER_CHANNEL_ID']
        thread = self.client.create_thread(
            channel_id,
            f"{event.name or 'Event'} • {utc_hm(event.start_time)}"[:100],
            auto_archive_duration=1440,
        )
        thread_id = str(thread['id'])
        self.client.post_message(thread_id, {'content': self.build_message(event)})

        with transaction.atomic():
            return EventDiscordReminder.objects.create(
                event=event,
                reminder_type=ReminderType.T_MINUS_30M,
                thread_id=thread_id,
            )

    def run(self, now: datetime = None) -> Dict[str, Any]:
        now = now or timezone.now()
        events = self.pending_events(now)

        results = []
        for event in events:
            try:
                reminder = self.remind(event)
                results.append({'event_id': str(event.id), 'status': 'ok', 'thread_id': reminder.thread_id})
            except DISCORD_ERRORS as e:
                logger.error(f"Failed handling event {event.id}: {e}")
                results.append({'event_id': str(event.id), 'status': 'error', 'error': str(e)})

        logger.info(f"Event reminders: {len(events)} processed")
        return {'success': True, 'processed': len(events), 'results': results}
