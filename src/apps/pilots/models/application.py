# src/apps/pilots/models/application.py
"""
Pilot applications and leaves of absence.
"""

from django.db import models
from django.utils import timezone

from common.mixins import BaseModel

from .pilot import Pilot


class ApplicationStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'


class PilotApplication(BaseModel):
    """
    Request to join the airline.

    Recruits coming through the Discord flow get an application created
    with placeholder questionnaire answers.
    """

    user_id = models.UUIDField(null=True, blank=True, db_index=True)
    email = models.EmailField()
    full_name = models.CharField(max_length=255)
    discord_username = models.CharField(max_length=100, blank=True, default='')
    discord_user_id = models.CharField(max_length=32, blank=True, default='', db_index=True)

    # Questionnaire
    experience_level = models.CharField(max_length=50, default='beginner')
    preferred_simulator = models.CharField(max_length=50, default='infinite_flight')
    reason_for_joining = models.TextField(blank=True, default='')
    if_grade = models.CharField(max_length=20, blank=True, default='')
    is_ifatc = models.CharField(max_length=10, blank=True, default='')
    ifc_trust_level = models.CharField(max_length=50, blank=True, default='')
    age_range = models.CharField(max_length=20, blank=True, default='')
    other_va_membership = models.CharField(max_length=255, blank=True, default='')
    hear_about_aflv = models.CharField(max_length=255, blank=True, default='')
    vatsim_id = models.CharField(max_length=20, blank=True, default='')
    ivao_id = models.CharField(max_length=20, blank=True, default='')

    # Review
    status = models.CharField(
        max_length=20,
        choices=ApplicationStatus.choices,
        default=ApplicationStatus.PENDING,
        db_index=True
    )
    assigned_pid = models.CharField(max_length=7, blank=True, default='')
    rejection_reason = models.TextField(blank=True, default='')
    reviewed_at = models.DateTimeField(null=True, blank=True)
    reviewed_by = models.UUIDField(null=True, blank=True)

    class Meta:
        db_table = 'pilot_applications'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.full_name} ({self.status})"

    @property
    def is_pending(self) -> bool:
        return self.status == ApplicationStatus.PENDING


class LeaveStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    DENIED = 'denied', 'Denied'


class LeaveOfAbsence(BaseModel):
    """Time away that suspends the activity requirement."""

    pilot = models.ForeignKey(Pilot, on_delete=models.CASCADE, related_name='leaves')
    start_date = models.DateField()
    end_date = models.DateField()
    reason = models.TextField(blank=True, default='')
    status = models.CharField(
        max_length=20,
        choices=LeaveStatus.choices,
        default=LeaveStatus.PENDING
    )
    reviewed_by = models.UUIDField(null=True, blank=True)
    reviewed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'leaves_of_absence'
        ordering = ['-start_date']

    def __str__(self):
        return f"{self.pilot.pid} LOA {self.start_date} - {self.end_date}"

    def covers(self, day=None) -> bool:
        day = day or timezone.now().date()
        return self.status == LeaveStatus.APPROVED and self.start_date <= day <= self.end_date
