# src/apps/pilots/services/leave_service.py
import logging

from django.db import transaction
from django.utils import timezone

from ..models import LeaveOfAbsence, LeaveStatus

logger = logging.getLogger(__name__)


class LeaveService:

    @staticmethod
    def request(pilot, start_date, end_date, reason: str = '') -> LeaveOfAbsence:
        if end_date < start_date:
            raise ValueError('End date must be on or after the start date')
        leave = LeaveOfAbsence.objects.create(
            pilot=pilot,
            start_date=start_date,
            end_date=end_date,
            reason=reason or '',
        )
        logger.info(f"LOA requested by {pilot.pid}: {start_date} - {end_date}")
        return leave

    @staticmethod
    @transaction.atomic
    def review(leave: LeaveOfAbsence, approve: bool, reviewed_by=None) -> LeaveOfAbsence:
        from apps.content.services import NotificationService

        if leave.status != LeaveStatus.PENDING:
            raise ValueError(f"Leave request is already {leave.status}")

        leave.status = LeaveStatus.APPROVED if approve else LeaveStatus.DENIED
        leave.reviewed_by = reviewed_by
        leave.reviewed_at = timezone.now()
        leave.save(update_fields=['status', 'reviewed_by', 'reviewed_at', 'updated_at'])

        NotificationService.send(
            recipient=leave.pilot,
            title=f"Leave of absence {leave.status}",
            message=f"Your leave from {leave.start_date} to {leave.end_date} was {leave.status}.",
            type='loa_review',
            related_entity='leave_of_absence',
            related_id=leave.id,
        )
        return leave
