# src/apps/pilots/services/activity_service.py
"""
Activity Service

Checks a pilot against the minimum PIREP frequency configured in site
settings (``activity_pirep_days``).
"""

from datetime import date
from decimal import Decimal
from typing import Dict, Any, Optional

from django.db.models import F, Sum
from django.utils import timezone

from ..models import Pilot, LeaveOfAbsence, LeaveStatus


class ActivityService:

    SETTING_KEY = 'activity_pirep_days'

    @staticmethod
    def status(pilot: Pilot, today: Optional[date] = None) -> Dict[str, Any]:
        from apps.content.services import SiteSettingService
        from apps.operations.models import Pirep, PirepStatus

        today = today or timezone.now().date()
        required_days = SiteSettingService.get_int(ActivityService.SETTING_KEY)

        pireps = Pirep.objects.filter(pilot=pilot)
        last = pireps.order_by('-flight_date', '-created_at').first()
        last_date = None
        if last is not None:
            last_date = last.flight_date or last.created_at.date()
        days_since_last = (today - last_date).days if last_date else None

        on_loa = LeaveOfAbsence.objects.filter(
            pilot=pilot,
            status=LeaveStatus.APPROVED,
            start_date__lte=today,
            end_date__gte=today,
        ).exists()

        if required_days is None or on_loa:
            compliant = True
        else:
            compliant = days_since_last is not None and days_since_last <= required_days

        approved = pireps.filter(status=PirepStatus.APPROVED)
        approved_hours = approved.aggregate(
            total=Sum(F('flight_hours') * F('multiplier'))
        )['total'] or Decimal('0')

        return {
            'pilot_id': str(pilot.id),
            'required_days': required_days,
            'last_pirep_date': last_date,
            'days_since_last_pirep': days_since_last,
            'on_loa': on_loa,
            'compliant': compliant,
            'total_pireps': pireps.count(),
            'approved_pireps': approved.count(),
            'approved_hours': round(float(approved_hours), 2),
        }
