# src/apps/operations/models/fleet.py
"""
Fleet, route network and hour multipliers.
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from common.mixins import BaseModel, ActiveMixin


class RouteType(models.TextChoices):
    PASSENGER = 'passenger', 'Passenger'
    CARGO = 'cargo', 'Cargo'


class Aircraft(BaseModel):
    icao_code = models.CharField(max_length=4, db_index=True)
    name = models.CharField(max_length=100)
    type = models.CharField(max_length=50, blank=True, default='')
    livery = models.CharField(max_length=100, blank=True, default='')
    passenger_capacity = models.PositiveIntegerField(null=True, blank=True)
    cargo_capacity_kg = models.PositiveIntegerField(null=True, blank=True)
    range_nm = models.PositiveIntegerField(null=True, blank=True)
    min_hours = models.PositiveIntegerField(default=0)
    min_rank = models.CharField(max_length=50, blank=True, default='')
    image_url = models.URLField(blank=True, default='')

    class Meta:
        db_table = 'aircraft'
        ordering = ['icao_code', 'name']
        verbose_name_plural = 'aircraft'

    def __str__(self):
        return f"{self.icao_code} - {self.name}"

    @property
    def display_name(self) -> str:
        base = f"{self.icao_code} - {self.name}"
        return f"{base} ({self.livery})" if self.livery else base


class Route(ActiveMixin, BaseModel):
    route_number = models.CharField(max_length=20, db_index=True)
    dep_icao = models.CharField(max_length=4)
    arr_icao = models.CharField(max_length=4)
    aircraft_icao = models.CharField(max_length=4, blank=True, default='')
    livery = models.CharField(max_length=100, blank=True, default='')
    est_flight_time_minutes = models.PositiveIntegerField(default=0)
    route_type = models.CharField(
        max_length=20,
        choices=RouteType.choices,
        default=RouteType.PASSENGER
    )
    min_rank = models.CharField(max_length=50, blank=True, default='')
    notes = models.TextField(blank=True, default='')

    class Meta:
        db_table = 'routes'
        ordering = ['route_number']
        indexes = [
            models.Index(fields=['dep_icao', 'arr_icao']),
        ]

    def __str__(self):
        return f"{self.route_number} {self.dep_icao}-{self.arr_icao}"

    @property
    def duration_display(self) -> str:
        hours, minutes = divmod(self.est_flight_time_minutes or 0, 60)
        return f"{hours}:{minutes:02d}"


class MultiplierConfig(ActiveMixin, BaseModel):
    name = models.CharField(max_length=100, unique=True)
    value = models.DecimalField(
        max_digits=6,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    description = models.TextField(blank=True, default='')

    class Meta:
        db_table = 'multiplier_configs'
        ordering = ['value']

    def __str__(self):
        return self.label

    @property
    def label(self) -> str:
        return f"{self.name} ({float(self.value):.1f}x)"
