# src/apps/operations/services/pirep_service.py
"""
PIREP Service

Filing and reviewing flight reports. Approval is the only place hours
are credited to a pilot.
"""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from django.db import transaction
from django.utils import timezone

from apps.pilots.models import Pilot
from apps.pilots.services import PilotService, RankService, StreakService

from ..models import (
    Pirep,
    PirepStatus,
    FlightType,
    PirepSource,
    ChallengeCompletion,
    CompletionStatus,
)
from .multiplier_service import MultiplierService

logger = logging.getLogger(__name__)

REASON_REQUIRED = {PirepStatus.DENIED, PirepStatus.ON_HOLD}


class PirepService:

    # =========================================================================
    # FILING
    # =========================================================================

    @staticmethod
    @transaction.atomic
    def file_pirep(
        pilot: Pilot,
        flight_number: str,
        dep_icao: str,
        arr_icao: str,
        aircraft_icao: str,
        flight_hours,
        flight_date: Optional[date] = None,
        operator: str = '',
        flight_type: str = FlightType.PASSENGER,
        multiplier=None,
        source: str = PirepSource.WEB,
    ) -> Pirep:
        """
        File a pending PIREP.

        Args:
            pilot: Filing pilot
            flight_number: Flight number, stored upper-case
            dep_icao: Departure airport
            arr_icao: Arrival airport
            aircraft_icao: Aircraft type
            flight_hours: Block hours, must be positive
            flight_date: Defaults to today
            operator: Operator code
            flight_type: passenger, cargo or charter
            multiplier: Number, multiplier name or label
            source: web or discord

        Returns:
            The created PIREP
        """
        try:
            hours = Decimal(str(flight_hours))
        except (InvalidOperation, TypeError):
            raise ValueError('Flight hours must be a number')
        if not hours.is_finite() or hours <= 0:
            raise ValueError('Flight hours must be greater than zero')

        flight_type = (flight_type or FlightType.PASSENGER).lower()
        if flight_type not in FlightType.values:
            raise ValueError(f"Invalid flight type: {flight_type}")

        for label, value in (('Flight number', flight_number), ('Departure', dep_icao),
                             ('Arrival', arr_icao), ('Aircraft', aircraft_icao)):
            if not (value or '').strip():
                raise ValueError(f"{label} is required")

        pirep = Pirep.objects.create(
            pilot=pilot,
            flight_number=flight_number.strip().upper(),
            dep_icao=dep_icao.strip().upper(),
            arr_icao=arr_icao.strip().upper(),
            aircraft_icao=aircraft_icao.strip().upper(),
            flight_hours=hours.quantize(Decimal('0.01')),
            flight_date=flight_date or timezone.now().date(),
            operator=(operator or '').strip().upper(),
            flight_type=flight_type,
            multiplier=MultiplierService.resolve_value(multiplier),
            source=source,
        )

        PirepService._announce_filing(pirep)
        logger.info(f"PIREP {pirep.id} filed by {pilot.pid} via {source}")
        return pirep

    @staticmethod
    def _announce_filing(pirep: Pirep) -> None:
        from apps.content.services import NotificationService
        from apps.discord.services.webhooks import queue_webhook

        route = f"{pirep.dep_icao}-{pirep.arr_icao}"
        NotificationService.notify_admins(
            title='New PIREP submitted',
            message=f"{pirep.pilot.pid} filed {pirep.flight_number} {route}",
            related_entity='pirep',
            related_id=pirep.id,
        )
        queue_webhook('new_pirep', {
            'pilot_name': pirep.pilot.full_name,
            'pid': pirep.pilot.pid,
            'flight_number': pirep.flight_number,
            'dep_icao': pirep.dep_icao,
            'arr_icao': pirep.arr_icao,
            'aircraft_icao': pirep.aircraft_icao,
            'flight_hours': float(pirep.flight_hours),
            'operator': pirep.operator,
            'flight_type': pirep.flight_type,
        })

    # =========================================================================
    # REVIEW
    # =========================================================================

    @staticmethod
    @transaction.atomic
    def review(pirep: Pirep, status: str, reason: str = '', reviewed_by=None) -> Pirep:
        """
        Change a PIREP's review status.

        Moving into ``approved`` credits ``flight_hours * multiplier`` and
        one PIREP to the pilot; moving out of it debits the same amounts.

        Raises:
            ValueError: unknown status or missing reason
        """
        if status not in PirepStatus.values:
            raise ValueError(f"Invalid status: {status}")
        reason = (reason or '').strip()
        if status in REASON_REQUIRED and not reason:
            raise ValueError(f"A reason is required to set status {status}")

        pirep = Pirep.objects.select_for_update().select_related('pilot').get(id=pirep.id)
        previous = pirep.status

        pirep.status = status
        pirep.status_reason = reason
        pirep.reviewed_at = timezone.now()
        pirep.reviewed_by = reviewed_by
        pirep.save(update_fields=['status', 'status_reason', 'reviewed_at', 'reviewed_by', 'updated_at'])

        if previous != PirepStatus.APPROVED and status == PirepStatus.APPROVED:
            PirepService._credit(pirep, sign=1)
        elif previous == PirepStatus.APPROVED and status != PirepStatus.APPROVED:
            PirepService._credit(pirep, sign=-1)

        PirepService._notify_review(pirep)
        logger.info(f"PIREP {pirep.id} reviewed: {previous} -> {status}")
        return pirep

    @staticmethod
    def _credit(pirep: Pirep, sign: int) -> None:
        pilot, old_rank, new_rank = PilotService.credit_hours(
            pirep.pilot_id,
            hours_delta=pirep.credited_hours * sign,
            pireps_delta=sign,
        )
        pirep.pilot = pilot

        if sign > 0:
            StreakService.record_flight(pilot, pirep.flight_date)
            PirepService._complete_challenges(pirep)
            if RankService.is_promotion(old_rank, new_rank):
                RankService.announce_promotion(pilot, old_rank, new_rank)

    @staticmethod
    def _complete_challenges(pirep: Pirep) -> int:
        """Complete accepted challenges whose destination this flight reached."""
        return ChallengeCompletion.objects.filter(
            pilot_id=pirep.pilot_id,
            status=CompletionStatus.INCOMPLETE,
            challenge__is_active=True,
            challenge__destination_icao__iexact=pirep.arr_icao,
        ).update(status=CompletionStatus.COMPLETE, pirep=pirep, completed_at=timezone.now())

    @staticmethod
    def _notify_review(pirep: Pirep) -> None:
        from apps.content.services import NotificationService

        label = PirepStatus(pirep.status).label.lower()
        message = f"Your PIREP {pirep.flight_number} ({pirep.dep_icao}-{pirep.arr_icao}) is {label}."
        if pirep.status_reason:
            message = f"{message} Reason: {pirep.status_reason}"
        NotificationService.send(
            recipient=pirep.pilot,
            title=f"PIREP {label}",
            message=message,
            type=f"pirep_{pirep.status}",
            related_entity='pirep',
            related_id=pirep.id,
        )
