# src/apps/operations/models/schedule.py
"""
Featured routes, challenges and events.
"""

from django.db import models

from common.mixins import BaseModel, ActiveMixin
from apps.pilots.models import Pilot

from .fleet import Route
from .pirep import Pirep

DAY_NAMES = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']


class RouteOfWeek(BaseModel):
    """Route featured on one day of a Monday-based week."""

    week_start = models.DateField(db_index=True)
    day_of_week = models.PositiveSmallIntegerField(
        choices=[(i, name) for i, name in enumerate(DAY_NAMES)]
    )
    route = models.ForeignKey(Route, on_delete=models.CASCADE, related_name='weekly_features')

    class Meta:
        db_table = 'routes_of_week'
        ordering = ['week_start', 'day_of_week']
        constraints = [
            models.UniqueConstraint(fields=['week_start', 'day_of_week'], name='uniq_rotw_day'),
        ]

    def __str__(self):
        return f"{self.week_start} {DAY_NAMES[self.day_of_week]}: {self.route}"


class DailyFeaturedRoute(BaseModel):
    featured_date = models.DateField(db_index=True)
    route = models.ForeignKey(Route, on_delete=models.CASCADE, related_name='daily_features')

    class Meta:
        db_table = 'daily_featured_routes'
        ordering = ['featured_date', 'created_at']
        constraints = [
            models.UniqueConstraint(fields=['featured_date', 'route'], name='uniq_featured_route_day'),
        ]

    def __str__(self):
        return f"{self.featured_date}: {self.route}"


class Challenge(ActiveMixin, BaseModel):
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    destination_icao = models.CharField(max_length=4, blank=True, default='')
    image_url = models.URLField(blank=True, default='')

    class Meta:
        db_table = 'challenges'
        ordering = ['-created_at']

    def __str__(self):
        return self.name


class CompletionStatus(models.TextChoices):
    INCOMPLETE = 'incomplete', 'Incomplete'
    COMPLETE = 'complete', 'Complete'


class ChallengeCompletion(BaseModel):
    challenge = models.ForeignKey(Challenge, on_delete=models.CASCADE, related_name='completions')
    pilot = models.ForeignKey(Pilot, on_delete=models.CASCADE, related_name='challenge_completions')
    status = models.CharField(
        max_length=20,
        choices=CompletionStatus.choices,
        default=CompletionStatus.INCOMPLETE
    )
    pirep = models.ForeignKey(Pirep, on_delete=models.SET_NULL, null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'challenge_completions'
        constraints = [
            models.UniqueConstraint(fields=['challenge', 'pilot'], name='uniq_challenge_pilot'),
        ]

    def __str__(self):
        return f"{self.pilot.pid} - {self.challenge.name} ({self.status})"


class Event(ActiveMixin, BaseModel):
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    dep_icao = models.CharField(max_length=4)
    arr_icao = models.CharField(max_length=4)
    server = models.CharField(max_length=50, default='expert')
    start_time = models.DateTimeField(db_index=True)
    end_time = models.DateTimeField()
    available_dep_gates = models.JSONField(default=list, blank=True)
    available_arr_gates = models.JSONField(default=list, blank=True)
    aircraft_icao = models.CharField(max_length=50, blank=True, default='')
    aircraft_name = models.CharField(max_length=100, blank=True, default='')
    banner_url = models.URLField(blank=True, default='')

    class Meta:
        db_table = 'events'
        ordering = ['start_time']

    def __str__(self):
        return self.name

    @property
    def route_label(self) -> str:
        return f"{self.dep_icao}-{self.arr_icao}"


class EventRegistration(BaseModel):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name='registrations')
    pilot = models.ForeignKey(Pilot, on_delete=models.CASCADE, related_name='event_registrations')
    assigned_dep_gate = models.CharField(max_length=50, blank=True, default='')
    assigned_arr_gate = models.CharField(max_length=50, blank=True, default='')
    discord_user_id = models.CharField(max_length=32, blank=True, default='')

    class Meta:
        db_table = 'event_registrations'
        ordering = ['created_at']
        constraints = [
            models.UniqueConstraint(fields=['event', 'pilot'], name='uniq_event_pilot'),
        ]

    def __str__(self):
        return f"{self.pilot.pid} @ {self.event.name}"
