# src/apps/academy/models/recruitment.py
"""
Recruitment Exam Session

One row per written-test link handed to a recruit. A failed session is
never reused: after the cooldown a fresh session (new token) is issued
in the same Discord channel.
"""

import uuid
from datetime import datetime, timedelta
from typing import Optional

from django.db import models
from django.utils import timezone

from apps.pilots.models import PilotApplication

from .exam import Exam

RETEST_COOLDOWN = timedelta(hours=24)


def generate_session_token() -> str:
    return str(uuid.uuid4())


class RecruitmentExamSession(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    token = models.CharField(max_length=64, unique=True, default=generate_session_token)

    exam = models.ForeignKey(Exam, on_delete=models.CASCADE, related_name='recruitment_sessions')
    application = models.ForeignKey(
        PilotApplication,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='recruitment_sessions'
    )
    auth_user_id = models.UUIDField(null=True, blank=True, db_index=True)

    # Discord
    discord_user_id = models.CharField(max_length=32, blank=True, default='', db_index=True)
    recruitment_channel_id = models.CharField(max_length=32, blank=True, default='')
    exam_message_id = models.CharField(max_length=32, blank=True, default='')

    # Callsign step
    pending_email = models.EmailField(blank=True, default='')
    preferred_pid = models.CharField(max_length=7, blank=True, default='')

    # Exam result
    completed_at = models.DateTimeField(null=True, blank=True)
    passed = models.BooleanField(null=True, blank=True)
    score = models.PositiveSmallIntegerField(null=True, blank=True)

    retest_sent_at = models.DateTimeField(null=True, blank=True)
    practical_assigned_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'recruitment_exam_sessions'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['passed', 'retest_sent_at', 'completed_at']),
        ]

    def __str__(self):
        return f"Recruitment session {self.token} ({self.status_label})"

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    @property
    def has_failed(self) -> bool:
        return self.is_completed and self.passed is False

    @property
    def status_label(self) -> str:
        if not self.is_completed:
            return 'issued'
        return 'passed' if self.passed else 'failed'

    @property
    def retest_available_at(self) -> Optional[datetime]:
        if not self.has_failed:
            return None
        return self.completed_at + RETEST_COOLDOWN

    def in_cooldown(self, now=None) -> bool:
        available_at = self.retest_available_at
        return available_at is not None and (now or timezone.now()) < available_at
