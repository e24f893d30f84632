# src/apps/discord/models.py
from django.db import models

from common.mixins import BaseModel
from apps.operations.models import Event


class ReminderType(models.TextChoices):
    T_MINUS_30M = 't_minus_30m', 'T-30 minutes'


class EventDiscordReminder(BaseModel):
    """Marks an event whose Discord reminder thread was already posted."""

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name='discord_reminders')
    reminder_type = models.CharField(
        max_length=20,
        choices=ReminderType.choices,
        default=ReminderType.T_MINUS_30M
    )
    thread_id = models.CharField(max_length=32, blank=True, default='')

    class Meta:
        db_table = 'event_discord_reminders'
        constraints = [
            models.UniqueConstraint(fields=['event', 'reminder_type'], name='uniq_event_reminder'),
        ]

    def __str__(self):
        return f"{self.event.name} ({self.reminder_type})"
