"""
Pilot API serializers.
"""

from .pilot_serializers import (
    PilotListSerializer,
    PilotDetailSerializer,
    PilotProfileUpdateSerializer,
    PilotStreakSerializer,
    RankConfigSerializer,
    UserRoleSerializer,
    AuthIdentitySerializer,
    BonusTierSerializer,
)
from .application_serializers import (
    PilotApplicationSerializer,
    ApplicationApproveSerializer,
    ApplicationRejectSerializer,
    LeaveOfAbsenceSerializer,
)

__all__ = [
    'PilotListSerializer',
    'PilotDetailSerializer',
    'PilotProfileUpdateSerializer',
    'PilotStreakSerializer',
    'RankConfigSerializer',
    'UserRoleSerializer',
    'AuthIdentitySerializer',
    'BonusTierSerializer',
    'PilotApplicationSerializer',
    'ApplicationApproveSerializer',
    'ApplicationRejectSerializer',
    'LeaveOfAbsenceSerializer',
]
