# src/apps/pilots/services/bonus_service.py
"""
Bonus Service

Loyalty card number and tier progress.
"""

import secrets
from decimal import Decimal
from typing import Dict, Any, List, Optional

from django.db import IntegrityError, transaction

from ..models import BonusTier, PilotBonusCard, Pilot

DEFAULT_BONUS_TIERS = [
    ('Premium', 200),
    ('Essential', 400),
    ('Gold', 600),
    ('Card Platina', 1200),
    ('Prestige', 2000),
    ('Black', 4000),
]


class BonusService:

    @staticmethod
    def tiers() -> List[BonusTier]:
        tiers = list(BonusTier.objects.filter(is_active=True).order_by('min_hours', 'sort_order'))
        if tiers:
            return tiers
        return [
            BonusTier(name=name, min_hours=hours, sort_order=i)
            for i, (name, hours) in enumerate(DEFAULT_BONUS_TIERS)
        ]

    @staticmethod
    def generate_card_number() -> str:
        return ' '.join(f"{secrets.randbelow(10000):04d}" for _ in range(4))

    @staticmethod
    def get_or_create_card(pilot: Pilot) -> PilotBonusCard:
        card = PilotBonusCard.objects.filter(pilot=pilot).first()
        if card:
            return card
        for _ in range(5):
            try:
                with transaction.atomic():
                    return PilotBonusCard.objects.create(
                        pilot=pilot,
                        card_number=BonusService.generate_card_number(),
                    )
            except IntegrityError:
                card = PilotBonusCard.objects.filter(pilot=pilot).first()
                if card:
                    return card
        raise ValueError('Could not allocate a unique card number')

    @staticmethod
    def progress(hours, tiers: List[BonusTier]) -> Dict[str, Any]:
        hours = Decimal(str(hours))
        current: Optional[BonusTier] = None
        upcoming: Optional[BonusTier] = None
        for tier in tiers:
            if tier.min_hours <= hours:
                current = tier
            elif upcoming is None:
                upcoming = tier

        floor = Decimal(current.min_hours if current else 0)
        if upcoming is None:
            percent = 100
        else:
            span = Decimal(upcoming.min_hours) - floor
            percent = int(min(100, max(0, (hours - floor) / span * 100))) if span > 0 else 0

        return {
            'current_tier': current.name if current else None,
            'next_tier': upcoming.name if upcoming else None,
            'next_tier_hours': upcoming.min_hours if upcoming else None,
            'hours_to_next': float(max(Decimal('0'), Decimal(upcoming.min_hours) - hours)) if upcoming else 0.0,
            'progress_percent': percent,
        }

    @staticmethod
    def card_for(pilot: Pilot) -> Dict[str, Any]:
        card = BonusService.get_or_create_card(pilot)
        return {
            'pid': pilot.pid,
            'full_name': pilot.full_name,
            'card_number': card.card_number,
            'total_hours': float(pilot.total_hours),
            **BonusService.progress(pilot.total_hours, BonusService.tiers()),
        }
