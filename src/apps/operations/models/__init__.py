"""
Flight operations models.
"""

from .fleet import Aircraft, Route, RouteType, MultiplierConfig
from .pirep import Pirep, PirepStatus, FlightType, PirepSource
from .schedule import (
    DAY_NAMES,
    RouteOfWeek,
    DailyFeaturedRoute,
    Challenge,
    ChallengeCompletion,
    CompletionStatus,
    Event,
    EventRegistration,
)

__all__ = [
    # Fleet
    'Aircraft',
    'Route',
    'RouteType',
    'MultiplierConfig',
    # PIREP
    'Pirep',
    'PirepStatus',
    'FlightType',
    'PirepSource',
    # Schedule
    'DAY_NAMES',
    'RouteOfWeek',
    'DailyFeaturedRoute',
    'Challenge',
    'ChallengeCompletion',
    'CompletionStatus',
    'Event',
    'EventRegistration',
]
