"""
Operations API serializers.
"""

from .fleet_serializers import AircraftSerializer, RouteSerializer, MultiplierConfigSerializer
from .pirep_serializers import (
    PirepListSerializer,
    PirepDetailSerializer,
    PirepCreateSerializer,
    PirepReviewSerializer,
)
from .schedule_serializers import (
    RouteOfWeekSerializer,
    DailyFeaturedRouteSerializer,
    FeatureRoutesSerializer,
    ChallengeSerializer,
    ChallengeCompletionSerializer,
    EventSerializer,
    EventRegistrationSerializer,
)

__all__ = [
    'AircraftSerializer',
    'RouteSerializer',
    'MultiplierConfigSerializer',
    'PirepListSerializer',
    'PirepDetailSerializer',
    'PirepCreateSerializer',
    'PirepReviewSerializer',
    'RouteOfWeekSerializer',
    'DailyFeaturedRouteSerializer',
    'FeatureRoutesSerializer',
    'ChallengeSerializer',
    'ChallengeCompletionSerializer',
    'EventSerializer',
    'EventRegistrationSerializer',
]
