# src/apps/pilots/services/rank_service.py
"""
Rank Service

Maps credited hours to the rank ladder.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from ..models import RankConfig

logger = logging.getLogger(__name__)

DEFAULT_RANKS = [
    {'name': 'cadet', 'label': 'Cadet', 'min_hours': 0, 'max_hours': 50, 'order_index': 0},
    {'name': 'first_officer', 'label': 'First Officer', 'min_hours': 50, 'max_hours': 150, 'order_index': 1},
    {'name': 'captain', 'label': 'Captain', 'min_hours': 150, 'max_hours': 300, 'order_index': 2},
    {'name': 'senior_captain', 'label': 'Senior Captain', 'min_hours': 300, 'max_hours': 500, 'order_index': 3},
    {'name': 'commander', 'label': 'Commander', 'min_hours': 500, 'max_hours': None, 'order_index': 4},
]


class RankService:

    @staticmethod
    def ladder() -> List[RankConfig]:
        """Active ranks ordered bottom to top; falls back to the built-in ladder."""
        ranks = list(RankConfig.objects.filter(is_active=True).order_by('order_index'))
        if ranks:
            return ranks
        return [
            RankConfig(
                name=r['name'],
                label=r['label'],
                min_hours=Decimal(r['min_hours']),
                max_hours=Decimal(r['max_hours']) if r['max_hours'] is not None else None,
                order_index=r['order_index'],
            )
            for r in DEFAULT_RANKS
        ]

    @staticmethod
    def calculate_rank(hours) -> str:
        """
        Rank name for a number of credited hours.

        The highest band whose range contains ``hours`` wins; when bands do
        not cover the value the highest band with ``min_hours <= hours`` is
        used.
        """
        hours = Decimal(str(hours))
        ladder = RankService.ladder()

        for rank in reversed(ladder):
            if rank.covers(hours):
                return rank.name

        reached = [rank for rank in ladder if rank.min_hours <= hours]
        if reached:
            return reached[-1].name
        return 'cadet'

    @staticmethod
    def rank_index(name: str) -> int:
        for rank in RankService.ladder():
            if rank.name == name:
                return rank.order_index
        return -1

    @staticmethod
    def is_promotion(old_rank: str, new_rank: str) -> bool:
        return old_rank != new_rank and RankService.rank_index(new_rank) > RankService.rank_index(old_rank)

    @staticmethod
    def format_rank(name: Optional[str]) -> str:
        """``senior_captain`` -> ``Senior Captain``"""
        if not name:
            return 'Unknown'
        return ' '.join(word.capitalize() for word in name.replace('_', ' ').split())

    @staticmethod
    def announce_promotion(pilot, old_rank: str, new_rank: str) -> None:
        """Queue the promotion webhook and notify the pilot in-app."""
        from apps.content.services import NotificationService
        from apps.discord.services.webhooks import queue_webhook

        label = RankService.format_rank(new_rank)
        NotificationService.send(
            recipient=pilot,
            title='Rank Promotion',
            message=f"Congratulations! You have been promoted to {label}.",
            type='rank_promotion',
            related_entity='pilot',
            related_id=pilot.id,
        )

        queue_webhook('rank_promotion', {
            'pilot_name': pilot.full_name,
            'pid': pilot.pid,
            'old_rank': old_rank,
            'new_rank': new_rank,
            'total_hours': float(pilot.total_hours),
        })
        logger.info(f"Pilot {pilot.pid} promoted {old_rank} -> {new_rank}")
