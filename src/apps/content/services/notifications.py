# src/apps/content/services/notifications.py
"""
Notification Service

In-app notifications for pilots and admins.
"""

import logging
from typing import Iterable, List, Optional

from django.db import transaction
from django.utils import timezone

from ..models import Notification

logger = logging.getLogger(__name__)


class NotificationService:

    @staticmethod
    def send(
        recipient,
        title: str,
        message: str,
        type: str = 'info',
        related_entity: str = '',
        related_id=None,
    ) -> Notification:
        """
        Create a notification for one pilot.

        Args:
            recipient: Pilot receiving the notification
            title: Short heading
            message: Body text
            type: Notification category (pirep_approved, admin_alert, ...)
            related_entity: Entity kind the notification is about
            related_id: Id of that entity

        Returns:
            Created notification
        """
        notification = Notification.objects.create(
            recipient=recipient,
            title=title,
            message=message,
            type=type,
            related_entity=related_entity or '',
            related_id=related_id,
        )
        logger.debug(f"Notification {notification.id} sent to {recipient.pid}")
        return notification

    @staticmethod
    @transaction.atomic
    def notify_admins(
        title: str,
        message: str,
        type: str = 'admin_alert',
        related_entity: str = '',
        related_id=None,
    ) -> List[Notification]:
        """Notify every pilot whose account holds the admin role."""
        from apps.pilots.models import Pilot, UserRole, RoleName

        admin_user_ids = UserRole.objects.filter(role=RoleName.ADMIN).values_list('user_id', flat=True)
        admins = Pilot.objects.filter(user_id__in=list(admin_user_ids))

        notifications = Notification.objects.bulk_create([
            Notification(
                recipient=admin,
                title=title,
                message=message,
                type=type,
                related_entity=related_entity or '',
                related_id=related_id,
            )
            for admin in admins
        ])
        logger.info(f"Admin notification '{title}' sent to {len(notifications)} admins")
        return notifications

    @staticmethod
    def unread_count(recipient) -> int:
        return Notification.objects.filter(recipient=recipient, is_read=False).count()

    @staticmethod
    def mark_read(recipient, ids: Optional[Iterable] = None) -> int:
        """Mark the given notifications (or all when ``ids`` is None) as read."""
        queryset = Notification.objects.filter(recipient=recipient, is_read=False)
        if ids is not None:
            queryset = queryset.filter(id__in=list(ids))
        return queryset.update(is_read=True, read_at=timezone.now())
