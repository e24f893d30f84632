# src/apps/pilots/services/exceptions.py
"""
Roster Exceptions
"""

from typing import Optional, Dict, Any


class RosterError(Exception):
    """Base exception for roster operations."""

    def __init__(
        self,
        message: str,
        code: str = "ROSTER_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class PidTakenError(RosterError):
    """Raised when a callsign is already assigned to another pilot."""

    def __init__(self, pid: str):
        super().__init__(
            message=f"Callsign {pid} is already taken",
            code="PID_TAKEN",
            details={"pid": pid}
        )


class PilotNotLinkedError(RosterError):
    """Raised when a Discord user cannot be mapped to a pilot."""

    def __init__(self, discord_user_id: str = None):
        super().__init__(
            message="Pilot profile not linked. Link Discord in Crew Center profile first.",
            code="PILOT_NOT_LINKED",
            details={"discord_user_id": discord_user_id}
        )
