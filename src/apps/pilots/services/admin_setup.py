# src/apps/pilots/services/admin_setup.py
import logging
from typing import Dict, Any

from django.conf import settings
from django.db import transaction

from ..models import ApprovedAdminEmail, RoleName
from .pilot_service import PilotService

logger = logging.getLogger(__name__)


class AdminSetupService:

    @staticmethod
    def is_admin_email(email: str) -> bool:
        email = (email or '').strip().lower()
        if not email:
            return False
        if email in settings.ADMIN_EMAILS:
            return True
        return ApprovedAdminEmail.objects.filter(email=email).exists()

    @staticmethod
    @transaction.atomic
    def setup_admin(user_id, email: str) -> Dict[str, Any]:
        """
        Bootstrap an administrator account for a whitelisted email.

        Creates a commander-rank pilot profile when missing and grants the
        admin role.
        """
        if not AdminSetupService.is_admin_email(email):
            return {'setup': False, 'message': 'Not admin email'}

        pilot = PilotService.for_user(user_id)
        if pilot is None:
            pilot = PilotService.create_pilot(
                pid=PilotService.get_next_pid(),
                full_name='Administrator',
                user_id=user_id,
                current_rank='commander',
            )

        PilotService.ensure_role(user_id, RoleName.ADMIN)
        logger.info(f"Admin setup completed for {email}")
        return {'setup': True, 'pid': pilot.pid}
