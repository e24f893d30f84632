"""
Flight operations services.
"""

from .multiplier_service import MultiplierService
from .pirep_service import PirepService
from .route_service import RouteService
from .event_service import EventService, pick_gate
from .challenge_service import ChallengeService
from .gate_service import GateService, parse_gates

__all__ = [
    'MultiplierService',
    'PirepService',
    'RouteService',
    'EventService',
    'pick_gate',
    'ChallengeService',
    'GateService',
    'parse_gates',
]
