"""
Pilot API views.
"""

from .pilot_views import (
    PilotViewSet,
    RankConfigViewSet,
    BonusTierViewSet,
    UserRoleViewSet,
    AuthIdentityViewSet,
    AdminSetupView,
)
from .application_views import PilotApplicationViewSet, LeaveOfAbsenceViewSet

__all__ = [
    'PilotViewSet',
    'RankConfigViewSet',
    'BonusTierViewSet',
    'UserRoleViewSet',
    'AuthIdentityViewSet',
    'AdminSetupView',
    'PilotApplicationViewSet',
    'LeaveOfAbsenceViewSet',
]
