"""Ordering for free-text place search."""
from typing import List, Optional, Tuple

from taghra_shared.models import Place

from .geo import Coordinate, haversine_meters
from .places_repository import place_coordinate


def name_match_quality(text: str, name: str) -> int:
    """1 exact, 2 prefix, 3 contains, 4 matched on another field"""
    text = text.strip().lower()
    name = (name or "").lower()
    if name == text:
        return 1
    if name.startswith(text):
        return 2
    if text in name:
        return 3
    return 4


def rank_search_results(
    text: str,
    places: List[Place],
    origin: Optional[Coordinate] = None,
) -> List[Tuple[Place, Optional[float]]]:
    """Order by distance when an origin is given, else by match quality then rating"""
    if origin is not None:
        scored = [(p, haversine_meters(origin, place_coordinate(p))) for p in places]
        scored.sort(key=lambda item: (item[1], -(item[0].rating or 0.0), str(item[0].id)))
        return scored

    ordered = sorted(
        places,
        key=lambda p: (name_match_quality(text, p.name), -(p.rating or 0.0), str(p.id)),
    )
    return [(p, None) for p in ordered]
