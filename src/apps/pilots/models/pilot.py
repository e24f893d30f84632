# src/apps/pilots/models/pilot.py
"""
Pilot Models

Roster entries, rank ladder and PIREP streaks.
"""

import re
from decimal import Decimal

from django.core.validators import RegexValidator
from django.db import models

from common.mixins import BaseModel, ActiveMixin

PID_PATTERN = re.compile(r'^AFLV[A-Z0-9]{3}$')

pid_validator = RegexValidator(
    regex=PID_PATTERN.pattern,
    message='Invalid format. Use AFLVXXX (letters/numbers).',
)


class Pilot(BaseModel):
    """
    A rostered pilot.

    ``user_id`` is the identity-provider account id; it may be empty for
    pilots created by staff before the person signed in.
    """

    user_id = models.UUIDField(unique=True, null=True, blank=True)
    pid = models.CharField(max_length=7, unique=True, validators=[pid_validator])
    full_name = models.CharField(max_length=255)

    # Discord
    discord_user_id = models.CharField(max_length=32, blank=True, default='', db_index=True)
    discord_username = models.CharField(max_length=100, blank=True, default='')

    # Progress
    total_hours = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0'))
    total_pireps = models.PositiveIntegerField(default=0)
    current_rank = models.CharField(max_length=50, default='cadet')

    # Networks
    vatsim_id = models.CharField(max_length=20, blank=True, default='')
    ivao_id = models.CharField(max_length=20, blank=True, default='')
    avatar_url = models.URLField(blank=True, default='')

    class Meta:
        db_table = 'pilots'
        ordering = ['pid']
        indexes = [
            models.Index(fields=['-total_hours']),
        ]

    def __str__(self):
        return f"{self.pid} - {self.full_name}"

    @property
    def short_pid(self) -> str:
        """Callsign digits without the airline prefix (AFLV123 -> 123)."""
        return self.pid[4:] if self.pid.upper().startswith('AFLV') else self.pid


class RankConfig(ActiveMixin, BaseModel):
    """Hour band that maps to a rank."""

    name = models.SlugField(max_length=50, unique=True)
    label = models.CharField(max_length=100)
    min_hours = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0'))
    max_hours = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    order_index = models.PositiveIntegerField(default=0)
    color = models.CharField(max_length=20, blank=True, default='')
    description = models.TextField(blank=True, default='')
    aircraft_unlocks = models.JSONField(default=list, blank=True)
    perk_unlocks = models.JSONField(default=list, blank=True)

    class Meta:
        db_table = 'rank_configs'
        ordering = ['order_index']

    def __str__(self):
        return self.label

    def covers(self, hours) -> bool:
        if hours < self.min_hours:
            return False
        return self.max_hours is None or hours < self.max_hours


class PilotStreak(BaseModel):
    """Consecutive-day PIREP streak."""

    pilot = models.OneToOneField(Pilot, on_delete=models.CASCADE, related_name='streak')
    current_streak = models.PositiveIntegerField(default=0)
    longest_streak = models.PositiveIntegerField(default=0)
    last_pirep_date = models.DateField(null=True, blank=True)

    class Meta:
        db_table = 'pilot_streaks'

    def __str__(self):
        return f"{self.pilot.pid}: {self.current_streak}d"
