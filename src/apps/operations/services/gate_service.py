# src/apps/operations/services/gate_service.py
"""
Gate Service

Scrapes the IFATC gate list for an airport and keeps the gates that fit
a given aircraft.
"""

import logging
import re
from typing import Dict, Any, List, Optional

import httpx
from bs4 import BeautifulSoup

from common.clients import fetch_gates_page

logger = logging.getLogger(__name__)

CLASS_ORDER = ['A', 'B', 'C', 'D', 'E', 'F']
DEFAULT_AIRCRAFT_CLASS = 'E'

# A: light GA, B: regional jets and turboprops, C: narrowbody,
# D: mid widebody, E: large widebody, F: super heavy
AIRCRAFT_CLASS_MAP = {
    **dict.fromkeys(['A318', 'A319', 'A320', 'A321'], 'C'),
    **dict.fromkeys(['B731', 'B732', 'B733', 'B734', 'B735', 'B736', 'B737', 'B738', 'B739',
                     'B37M', 'B38M', 'B39M'], 'C'),
    **dict.fromkeys(['E170', 'E175', 'E190', 'E195', 'E75S', 'E75L'], 'C'),
    **dict.fromkeys(['DH8A', 'DH8B', 'DH8C', 'DH8D'], 'C'),
    **dict.fromkeys(['CRJ7', 'CRJ9', 'CRJX', 'CRJ2', 'C208'], 'B'),
    **dict.fromkeys(['C172', 'C152', 'TBM9', 'SR22'], 'A'),
    **dict.fromkeys(['B752', 'B753', 'B762', 'B763', 'B764', 'MD11', 'DC10', 'C17', 'C130'], 'D'),
    **dict.fromkeys(['A332', 'A333', 'A338', 'A339', 'A342', 'A343', 'A345', 'A346', 'A359', 'A35K',
                     'B772', 'B773', 'B77L', 'B77W', 'B788', 'B789', 'B78X',
                     'B741', 'B742', 'B743', 'B744'], 'E'),
    **dict.fromkeys(['A388', 'B748'], 'F'),
}

HEADER_NAMES = {'name', 'class'}
EXCLUDED_TYPES = {'cargo', 'ga'}


def class_index(gate_class: str) -> int:
    try:
        return CLASS_ORDER.index(gate_class.upper())
    except ValueError:
        return -1


def gate_fits(gate_class: str, aircraft_class: str) -> bool:
    return class_index(gate_class) >= class_index(aircraft_class)


def fallback_classes(aircraft_class: str) -> List[str]:
    """Same class up to F, then one class smaller as a last resort."""
    idx = class_index(aircraft_class)
    classes = CLASS_ORDER[idx:]
    if idx > 0:
        classes = classes + [CLASS_ORDER[idx - 1]]
    return classes


def natural_key(name: str):
    return [int(part) if part.isdigit() else part.lower() for part in re.split(r'(\d+)', name)]


def parse_gates(html: str) -> List[Dict[str, str]]:
    """Airline-usable gates from the IFATC gates table."""
    soup = BeautifulSoup(html, 'html.parser')
    gates = []
    for row in soup.find_all('tr'):
        cells = row.find_all('td')
        if len(cells) != 4:
            continue
        name, gate_type, gate_class, max_size = (c.get_text(strip=True) for c in cells)

        if not name or name.lower() in HEADER_NAMES or len(gate_class) != 1:
            continue
        if gate_type.lower() in EXCLUDED_TYPES:
            continue
        lowered = name.lower()
        if 'hangar' in lowered or 'maintenance' in lowered:
            continue

        gates.append({
            'name': name,
            'type': gate_type,
            'class': gate_class.upper(),
            'max_aircraft_size': max_size,
        })
    return gates


class GateService:

    @staticmethod
    def aircraft_class(aircraft_icao: str) -> str:
        return AIRCRAFT_CLASS_MAP.get((aircraft_icao or '').strip().upper(), DEFAULT_AIRCRAFT_CLASS)

    @staticmethod
    def filter_for_aircraft(gates: List[Dict[str, str]], aircraft_icao: Optional[str]) -> List[Dict[str, str]]:
        if not aircraft_icao:
            return sorted(gates, key=lambda g: natural_key(g['name']))

        needed = GateService.aircraft_class(aircraft_icao)
        compatible = [g for g in gates if gate_fits(g['class'], needed)]

        if not compatible:
            for fallback in fallback_classes(needed):
                compatible = [g for g in gates if gate_fits(g['class'], fallback)]
                if compatible:
                    break

        if not compatible:
            compatible = gates

        return sorted(compatible, key=lambda g: natural_key(g['name']))

    @staticmethod
    def fetch_gates(icao: str, aircraft_icao: Optional[str] = None) -> Dict[str, Any]:
        icao = (icao or '').strip().upper()
        if not icao:
            raise ValueError('ICAO code required')

        try:
            html = fetch_gates_page(icao)
        except httpx.HTTPError as e:
            logger.warning(f"Gate lookup for {icao} failed: {e}")
            return {'gates': [], 'error': 'Failed to fetch gates'}

        return {'gates': GateService.filter_for_aircraft(parse_gates(html), aircraft_icao)}
