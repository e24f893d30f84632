# src/apps/pilots/services/application_service.py
"""
Application Service

Review of pilot applications.
"""

import logging

from django.db import transaction
from django.utils import timezone

from ..models import Pilot, PilotApplication, ApplicationStatus, PID_PATTERN
from .pilot_service import PilotService

logger = logging.getLogger(__name__)


class ApplicationService:

    @staticmethod
    @transaction.atomic
    def approve(application: PilotApplication, pid: str, reviewed_by=None) -> Pilot:
        """
        Approve an application and create the pilot with ``pid``.

        Raises:
            ValueError: application not pending or malformed pid
            PidTakenError: pid already assigned
        """
        application = PilotApplication.objects.select_for_update().get(id=application.id)
        if not application.is_pending:
            raise ValueError(f"Application is already {application.status}")

        pid = (pid or '').strip().upper()
        if not PID_PATTERN.match(pid):
            raise ValueError('Invalid format. Use AFLVXXX (letters/numbers).')

        pilot = PilotService.create_pilot(
            pid=pid,
            full_name=application.full_name,
            user_id=application.user_id,
            vatsim_id=application.vatsim_id,
            ivao_id=application.ivao_id,
            discord_user_id=application.discord_user_id,
            discord_username=application.discord_username,
        )

        application.status = ApplicationStatus.APPROVED
        application.assigned_pid = pid
        application.reviewed_at = timezone.now()
        application.reviewed_by = reviewed_by
        application.save(update_fields=['status', 'assigned_pid', 'reviewed_at', 'reviewed_by', 'updated_at'])

        logger.info(f"Application {application.id} approved as {pid}")
        return pilot

    @staticmethod
    @transaction.atomic
    def reject(application: PilotApplication, reason: str, reviewed_by=None) -> PilotApplication:
        if not (reason or '').strip():
            raise ValueError('A rejection reason is required')
        if not application.is_pending:
            raise ValueError(f"Application is already {application.status}")

        application.status = ApplicationStatus.REJECTED
        application.rejection_reason = reason.strip()
        application.reviewed_at = timezone.now()
        application.reviewed_by = reviewed_by
        application.save(update_fields=['status', 'rejection_reason', 'reviewed_at', 'reviewed_by', 'updated_at'])

        logger.info(f"Application {application.id} rejected")
        return application
