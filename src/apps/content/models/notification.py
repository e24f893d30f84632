# src/apps/content/models/notification.py
from django.db import models

from common.mixins import BaseModel
from apps.pilots.models import Pilot


class Notification(BaseModel):
    """In-app notification shown in the pilot's bell menu."""

    recipient = models.ForeignKey(Pilot, on_delete=models.CASCADE, related_name='notifications')
    title = models.CharField(max_length=255)
    message = models.TextField()
    type = models.CharField(max_length=50, default='info')
    related_entity = models.CharField(max_length=50, blank=True, default='')
    related_id = models.UUIDField(null=True, blank=True)
    is_read = models.BooleanField(default=False, db_index=True)
    read_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'notifications'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['recipient', 'is_read']),
        ]

    def __str__(self):
        return f"{self.recipient.pid}: {self.title}"
