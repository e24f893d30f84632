# src/apps/content/models/content.py
from django.db import models

from common.mixins import BaseModel, ActiveMixin


class Announcement(ActiveMixin, BaseModel):
    title = models.CharField(max_length=255)
    content = models.TextField()
    created_by = models.UUIDField(null=True, blank=True)

    class Meta:
        db_table = 'announcements'
        ordering = ['-created_at']

    def __str__(self):
        return self.title


class NotamPriority(models.TextChoices):
    INFO = 'info', 'Info'
    WARNING = 'warning', 'Warning'
    IMPORTANT = 'important', 'Important'
    URGENT = 'urgent', 'Urgent'


class Notam(ActiveMixin, BaseModel):
    title = models.CharField(max_length=255)
    content = models.TextField()
    priority = models.CharField(
        max_length=20,
        choices=NotamPriority.choices,
        default=NotamPriority.INFO
    )
    expires_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'notams'
        ordering = ['-created_at']

    def __str__(self):
        return f"[{self.priority}] {self.title}"


class SiteSetting(BaseModel):
    """Free-form key/value configuration editable by admins."""

    key = models.CharField(max_length=100, unique=True)
    value = models.TextField(null=True, blank=True)

    class Meta:
        db_table = 'site_settings'
        ordering = ['key']

    def __str__(self):
        return self.key


class SidebarLink(ActiveMixin, BaseModel):
    label = models.CharField(max_length=100)
    url = models.CharField(max_length=500)
    icon = models.CharField(max_length=50, blank=True, default='')
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'sidebar_links'
        ordering = ['sort_order', 'label']

    def __str__(self):
        return self.label
