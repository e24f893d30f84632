# src/apps/academy/services/practical_service.py
"""
Practical Service
"""

import logging
from typing import Optional

from django.utils import timezone

from ..models import Practical, PracticalStatus

logger = logging.getLogger(__name__)

RESULT_STATUSES = (PracticalStatus.PASSED, PracticalStatus.FAILED)


class PracticalService:

    @staticmethod
    def schedule(pilot, course=None, scheduled_at=None, notes: str = '', examiner_id=None) -> Practical:
        practical = Practical.objects.create(
            pilot=pilot,
            course=course,
            scheduled_at=scheduled_at or timezone.now(),
            notes=notes,
            examiner_id=examiner_id,
            status=PracticalStatus.SCHEDULED,
        )
        logger.info(f"Practical {practical.id} scheduled for {pilot.pid}")
        return practical

    @staticmethod
    def complete(practical: Practical, status: str, remarks: str = '', examiner_id=None, now=None) -> Practical:
        """
        Record a practical result.

        Raises:
            ValueError: status is not ``passed`` or ``failed``
        """
        if status not in RESULT_STATUSES:
            raise ValueError('Practical status must be passed or failed')

        practical.status = status
        practical.completed_at = now or timezone.now()
        practical.result_notes = remarks or ''
        if examiner_id:
            practical.examiner_id = examiner_id
        practical.save(update_fields=['status', 'completed_at', 'result_notes', 'examiner_id', 'updated_at'])

        logger.info(f"Practical {practical.id} for {practical.pilot.pid}: {status}")
        return practical

    @staticmethod
    def latest_failed(pilot) -> Optional[Practical]:
        return (
            Practical.objects
            .filter(pilot=pilot, status=PracticalStatus.FAILED, completed_at__isnull=False)
            .order_by('-completed_at')
            .first()
        )
