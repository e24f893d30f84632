# src/apps/operations/services/challenge_service.py
import logging

from django.db import transaction

from ..models import Challenge, ChallengeCompletion, CompletionStatus

logger = logging.getLogger(__name__)


class ChallengeService:

    @staticmethod
    def active(limit: int = None):
        queryset = Challenge.objects.filter(is_active=True).order_by('-created_at')
        return queryset[:limit] if limit else queryset

    @staticmethod
    def accept(challenge: Challenge, pilot) -> ChallengeCompletion:
        if not challenge.is_active:
            raise ValueError('Challenge is no longer active')
        completion, created = ChallengeCompletion.objects.get_or_create(
            challenge=challenge,
            pilot=pilot,
            defaults={'status': CompletionStatus.INCOMPLETE},
        )
        if created:
            logger.info(f"{pilot.pid} accepted challenge {challenge.name}")
        return completion

    @staticmethod
    @transaction.atomic
    def create(**fields) -> Challenge:
        from apps.discord.services.webhooks import queue_webhook

        challenge = Challenge.objects.create(**fields)
        queue_webhook('new_challenge', {
            'name': challenge.name,
            'description': challenge.description,
            'destination_icao': challenge.destination_icao,
            'image_url': challenge.image_url,
        })
        return challenge
