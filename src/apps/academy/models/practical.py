# src/apps/academy/models/practical.py
"""
Supervised check rides.
"""

from django.db import models

from common.mixins import BaseModel
from apps.pilots.models import Pilot

from .course import Course


class PracticalStatus(models.TextChoices):
    SCHEDULED = 'scheduled', 'Scheduled'
    COMPLETED = 'completed', 'Completed'
    PASSED = 'passed', 'Passed'
    FAILED = 'failed', 'Failed'


class Practical(BaseModel):
    pilot = models.ForeignKey(Pilot, on_delete=models.CASCADE, related_name='practicals')
    course = models.ForeignKey(
        Course,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='practicals'
    )
    examiner_id = models.UUIDField(null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=PracticalStatus.choices,
        default=PracticalStatus.SCHEDULED,
        db_index=True
    )
    scheduled_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True, default='')
    result_notes = models.TextField(blank=True, default='')
    replay_file_url = models.URLField(blank=True, default='')

    class Meta:
        db_table = 'practicals'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.pilot.pid} practical ({self.status})"
