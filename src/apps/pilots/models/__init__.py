"""
Pilot roster models.
"""

from .pilot import Pilot, RankConfig, PilotStreak, PID_PATTERN
from .access import UserRole, RoleName, AuthIdentity, IdentityProvider, ApprovedAdminEmail
from .application import (
    PilotApplication,
    ApplicationStatus,
    LeaveOfAbsence,
    LeaveStatus,
)
from .bonus import BonusTier, PilotBonusCard

__all__ = [
    # Pilot
    'Pilot',
    'RankConfig',
    'PilotStreak',
    'PID_PATTERN',
    # Access
    'UserRole',
    'RoleName',
    'AuthIdentity',
    'IdentityProvider',
    'ApprovedAdminEmail',
    # Applications
    'PilotApplication',
    'ApplicationStatus',
    'LeaveOfAbsence',
    'LeaveStatus',
    # Bonus
    'BonusTier',
    'PilotBonusCard',
]
