# src/apps/pilots/services/pilot_service.py
"""
Pilot Service

Callsign allocation, Discord lookups, the leaderboard and hour crediting.
"""

import logging
import re
from decimal import Decimal
from typing import Optional, Tuple, List

from django.db import transaction
from django.db.models import QuerySet

from ..models import Pilot, UserRole, RoleName, AuthIdentity, IdentityProvider
from .rank_service import RankService

logger = logging.getLogger(__name__)

NUMERIC_PID = re.compile(r'^AFLV(\d{3})$')


class PilotService:
    """Roster operations."""

    # =========================================================================
    # CALLSIGNS
    # =========================================================================

    @staticmethod
    def get_next_pid() -> str:
        """
        Next free numeric callsign after the highest one in use.

        Returns:
            Callsign such as ``AFLV042``

        Raises:
            ValueError: when the numeric range is exhausted
        """
        used = set(Pilot.objects.values_list('pid', flat=True))
        numbers = [int(m.group(1)) for m in (NUMERIC_PID.match(pid) for pid in used) if m]
        candidate = max(numbers, default=0) + 1

        while candidate <= 999:
            pid = f"AFLV{candidate:03d}"
            if pid not in used:
                return pid
            candidate += 1

        raise ValueError('No free callsigns left in the AFLV001-AFLV999 range')

    @staticmethod
    def is_pid_taken(pid: str, exclude_pilot_id=None) -> bool:
        queryset = Pilot.objects.filter(pid__iexact=pid)
        if exclude_pilot_id:
            queryset = queryset.exclude(id=exclude_pilot_id)
        return queryset.exists()

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    @staticmethod
    def for_user(user_id) -> Optional[Pilot]:
        if not user_id:
            return None
        return Pilot.objects.filter(user_id=user_id).first()

    @staticmethod
    def user_id_for_discord(discord_user_id: str) -> Optional[str]:
        """Account id linked to a Discord user through an auth identity."""
        if not discord_user_id:
            return None
        identity = AuthIdentity.objects.filter(
            provider=IdentityProvider.DISCORD,
            provider_id=str(discord_user_id),
        ).first()
        return str(identity.user_id) if identity else None

    @staticmethod
    def user_id_for_email(email: str) -> Optional[str]:
        if not email:
            return None
        identity = AuthIdentity.objects.filter(
            provider=IdentityProvider.EMAIL,
            provider_id=email.strip().lower(),
        ).first()
        return str(identity.user_id) if identity else None

    @staticmethod
    def resolve_by_discord(discord_user_id: str, discord_username: str = None) -> Optional[Pilot]:
        """
        Find the pilot behind a Discord user.

        Order: linked auth identity, stored Discord id, then the stored
        Discord username (case-insensitive, leading ``@`` ignored).
        """
        user_id = PilotService.user_id_for_discord(discord_user_id)
        if user_id:
            pilot = Pilot.objects.filter(user_id=user_id).first()
            if pilot:
                return pilot

        if discord_user_id:
            pilot = Pilot.objects.filter(discord_user_id=str(discord_user_id)).first()
            if pilot:
                return pilot

        username = (discord_username or '').strip().lstrip('@').strip()
        if username:
            return Pilot.objects.filter(discord_username__iexact=username).first()

        return None

    @staticmethod
    def leaderboard(limit: int = 100) -> QuerySet:
        return Pilot.objects.order_by('-total_hours', 'pid')[:limit]

    # =========================================================================
    # ROLES
    # =========================================================================

    @staticmethod
    def ensure_role(user_id, role: str) -> UserRole:
        user_role, created = UserRole.objects.get_or_create(user_id=user_id, role=role)
        if created:
            logger.info(f"Granted role {role} to {user_id}")
        return user_role

    @staticmethod
    def roles_for(user_id) -> List[str]:
        return list(UserRole.objects.filter(user_id=user_id).values_list('role', flat=True))

    # =========================================================================
    # HOURS
    # =========================================================================

    @staticmethod
    @transaction.atomic
    def credit_hours(pilot_id, hours_delta: Decimal, pireps_delta: int) -> Tuple[Pilot, str, str]:
        """
        Add (or remove) credited hours and PIREP count, then re-rank.

        Args:
            pilot_id: Pilot to update
            hours_delta: Hours to add; negative to debit
            pireps_delta: PIREPs to add; negative to debit

        Returns:
            Tuple of (pilot, previous rank, new rank)
        """
        pilot = Pilot.objects.select_for_update().get(id=pilot_id)
        previous_rank = pilot.current_rank

        pilot.total_hours = max(Decimal('0'), pilot.total_hours + Decimal(str(hours_delta)))
        pilot.total_pireps = max(0, pilot.total_pireps + pireps_delta)
        pilot.current_rank = RankService.calculate_rank(pilot.total_hours)
        pilot.save(update_fields=['total_hours', 'total_pireps', 'current_rank', 'updated_at'])

        logger.info(
            f"Credited {hours_delta}h to {pilot.pid}: total {pilot.total_hours}h, rank {pilot.current_rank}"
        )
        return pilot, previous_rank, pilot.current_rank

    @staticmethod
    def create_pilot(
        pid: str,
        full_name: str,
        user_id=None,
        **extra
    ) -> Pilot:
        """Create a pilot and grant the pilot role to its account."""
        from .exceptions import PidTakenError

        pid = pid.strip().upper()
        if PilotService.is_pid_taken(pid):
            raise PidTakenError(pid)

        pilot = Pilot.objects.create(pid=pid, full_name=full_name, user_id=user_id, **extra)
        if user_id:
            PilotService.ensure_role(user_id, RoleName.PILOT)

        logger.info(f"Created pilot {pilot.pid} for user {user_id}")
        return pilot
