"""Heuristic location and lane extraction from free text.

Two passes: ``"City, ST"`` tokens first, then a small gazetteer of freight
hubs matched case-sensitively. No geocoding and no I/O.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

_CITY_STATE = re.compile(r"([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*),\s*([A-Z]{2})\b")

_ROUTE_PHRASE = re.compile(
    r"(?:from|pickup|origin)[:\s]+([^,\n]+)[,\s]+(?:to|destination|delivery)[:\s]+([^,\n]+)",
    re.IGNORECASE,
)

COMMON_CITIES: Tuple[str, ...] = (
    "Chicago", "Dallas", "Los Angeles", "New York", "Miami",
    "Atlanta", "Denver", "Phoenix", "Seattle", "Boston",
    "Houston", "Philadelphia", "San Francisco", "Detroit",
)


@dataclass(frozen=True)
class Route:
    origin: Optional[str] = None
    destination: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.origin and self.destination)

    def to_dict(self) -> Dict[str, str]:
        out: Dict[str, str] = {}
        if self.origin:
            out["origin"] = self.origin
        if self.destination:
            out["destination"] = self.destination
        return out


def extract_locations(text: str) -> List[str]:
    """Locations in order of first appearance per pass, without duplicates.

    A gazetteer city already captured as ``"City, ST"`` is not repeated.
    """
    text = text or ""
    locations: List[str] = []
    for match in _CITY_STATE.finditer(text):
        token = match.group(0)
        if token not in locations:
            locations.append(token)

    for city in COMMON_CITIES:
        if city not in text or city in locations:
            continue
        if any(loc.startswith(f"{city},") for loc in locations):
            continue
        locations.append(city)
    return locations


def extract_route(text: str) -> Route:
    """Origin/destination from the first two locations, else a from/to phrase."""
    locations = extract_locations(text)
    if len(locations) >= 2:
        return Route(origin=locations[0], destination=locations[1])

    match = _ROUTE_PHRASE.search(text or "")
    if match:
        return Route(origin=match.group(1).strip(), destination=match.group(2).strip())
    return Route()
