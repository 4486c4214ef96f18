"""Great-circle distance and bounding boxes on a spherical Earth."""
import math
from typing import List, NamedTuple, Tuple

EARTH_RADIUS_M = 6_371_000.0


class Coordinate(NamedTuple):
    latitude: float
    longitude: float


class BoundingBox(NamedTuple):
    lat_min: float
    lat_max: float
    # One or two (lng_min, lng_max) ranges; two when the box crosses the antimeridian
    lng_ranges: Tuple[Tuple[float, float], ...]


def haversine_meters(a: Coordinate, b: Coordinate) -> float:
    """Distance in meters between two WGS84 coordinates."""
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    dphi = math.radians(abs(b.latitude - a.latitude))

    dlng = abs(b.longitude - a.longitude) % 360.0
    if dlng > 180.0:
        dlng = 360.0 - dlng
    dlambda = math.radians(dlng)

    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(h))


def bounding_box(origin: Coordinate, radius_m: float) -> BoundingBox:
    """Lat/lng window that contains every point within radius_m of origin.

    The box is a prefilter only: corners lie outside the circle, so callers
    still have to check the exact distance.
    """
    angular = radius_m / EARTH_RADIUS_M
    if angular >= math.pi:
        return BoundingBox(-90.0, 90.0, ((-180.0, 180.0),))

    dlat = math.degrees(angular)
    lat_min = origin.latitude - dlat
    lat_max = origin.latitude + dlat
    if lat_min <= -90.0 or lat_max >= 90.0:
        # A pole is inside the circle, so every meridian is reachable
        return BoundingBox(max(lat_min, -90.0), min(lat_max, 90.0), ((-180.0, 180.0),))

    ratio = math.sin(angular) / math.cos(math.radians(origin.latitude))
    if ratio >= 1.0:
        return BoundingBox(lat_min, lat_max, ((-180.0, 180.0),))
    dlng = math.degrees(math.asin(ratio))

    lng_min = origin.longitude - dlng
    lng_max = origin.longitude + dlng
    ranges: List[Tuple[float, float]] = []
    if lng_min < -180.0:
        ranges.append((lng_min + 360.0, 180.0))
        ranges.append((-180.0, lng_max))
    elif lng_max > 180.0:
        ranges.append((lng_min, 180.0))
        ranges.append((-180.0, lng_max - 360.0))
    else:
        ranges.append((lng_min, lng_max))
    return BoundingBox(lat_min, lat_max, tuple(ranges))
