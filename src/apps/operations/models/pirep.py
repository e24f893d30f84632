# src/apps/operations/models/pirep.py
"""
PIREP Model

Flight reports filed by pilots and reviewed by staff.
"""

from decimal import Decimal

from django.db import models

from common.mixins import BaseModel
from apps.pilots.models import Pilot


class PirepStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    DENIED = 'denied', 'Denied'
    ON_HOLD = 'on_hold', 'On Hold'


class FlightType(models.TextChoices):
    PASSENGER = 'passenger', 'Passenger'
    CARGO = 'cargo', 'Cargo'
    CHARTER = 'charter', 'Charter'


class PirepSource(models.TextChoices):
    WEB = 'web', 'Web'
    DISCORD = 'discord', 'Discord'


class Pirep(BaseModel):
    pilot = models.ForeignKey(Pilot, on_delete=models.CASCADE, related_name='pireps')

    flight_number = models.CharField(max_length=20)
    dep_icao = models.CharField(max_length=4)
    arr_icao = models.CharField(max_length=4)
    aircraft_icao = models.CharField(max_length=50)
    flight_hours = models.DecimalField(max_digits=6, decimal_places=2)
    flight_date = models.DateField()
    multiplier = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal('1'))
    operator = models.CharField(max_length=50, blank=True, default='')
    flight_type = models.CharField(
        max_length=20,
        choices=FlightType.choices,
        default=FlightType.PASSENGER
    )
    source = models.CharField(
        max_length=20,
        choices=PirepSource.choices,
        default=PirepSource.WEB
    )

    status = models.CharField(
        max_length=20,
        choices=PirepStatus.choices,
        default=PirepStatus.PENDING,
        db_index=True
    )
    status_reason = models.TextField(blank=True, default='')
    reviewed_at = models.DateTimeField(null=True, blank=True)
    reviewed_by = models.UUIDField(null=True, blank=True)

    class Meta:
        db_table = 'pireps'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['pilot', '-flight_date']),
        ]

    def __str__(self):
        return f"{self.flight_number} {self.dep_icao}-{self.arr_icao} ({self.status})"

    @property
    def credited_hours(self) -> Decimal:
        return (self.flight_hours * self.multiplier).quantize(Decimal('0.01'))
