# src/apps/pilots/models/bonus.py
"""
Loyalty card tiers.
"""

from django.db import models

from common.mixins import BaseModel, ActiveMixin

from .pilot import Pilot


class BonusTier(ActiveMixin, BaseModel):
    name = models.CharField(max_length=50, unique=True)
    min_hours = models.PositiveIntegerField()
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'bonus_tiers'
        ordering = ['min_hours', 'sort_order']

    def __str__(self):
        return f"{self.name} ({self.min_hours}h)"


class PilotBonusCard(BaseModel):
    pilot = models.OneToOneField(Pilot, on_delete=models.CASCADE, related_name='bonus_card')
    card_number = models.CharField(max_length=19, unique=True)

    class Meta:
        db_table = 'pilot_bonus_cards'

    def __str__(self):
        return f"{self.pilot.pid}: {self.card_number}"
