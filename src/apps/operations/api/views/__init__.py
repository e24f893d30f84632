"""
Operations API views.
"""

from .fleet_views import AircraftViewSet, RouteViewSet, MultiplierConfigViewSet, GateLookupView
from .pirep_views import PirepViewSet
from .schedule_views import (
    RouteOfWeekViewSet,
    DailyFeaturedRouteViewSet,
    ChallengeViewSet,
    EventViewSet,
)

__all__ = [
    'AircraftViewSet',
    'RouteViewSet',
    'MultiplierConfigViewSet',
    'GateLookupView',
    'PirepViewSet',
    'RouteOfWeekViewSet',
    'DailyFeaturedRouteViewSet',
    'ChallengeViewSet',
    'EventViewSet',
]
