"""
Roster services.
"""

from .exceptions import RosterError, PidTakenError, PilotNotLinkedError
from .rank_service import RankService, DEFAULT_RANKS
from .pilot_service import PilotService
from .application_service import ApplicationService
from .admin_setup import AdminSetupService
from .activity_service import ActivityService
from .leave_service import LeaveService
from .bonus_service import BonusService, DEFAULT_BONUS_TIERS
from .streak_service import StreakService

__all__ = [
    'RosterError',
    'PidTakenError',
    'PilotNotLinkedError',
    'RankService',
    'DEFAULT_RANKS',
    'PilotService',
    'ApplicationService',
    'AdminSetupService',
    'ActivityService',
    'LeaveService',
    'BonusService',
    'DEFAULT_BONUS_TIERS',
    'StreakService',
]
