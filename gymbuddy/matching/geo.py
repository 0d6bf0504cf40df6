"""Geographic helpers. Points are (longitude, latitude) pairs in degrees."""

import math
from typing import Optional, Sequence, Tuple

EARTH_RADIUS_KM = 6371.0
KM_PER_DEGREE_LAT = EARTH_RADIUS_KM * math.pi / 180


def as_point(value) -> Optional[Tuple[float, float]]:
    """Coerce a [lon, lat] pair to a float tuple, or None if malformed."""
    if value is None:
        return None
    try:
        lon, lat = value
        lon, lat = float(lon), float(lat)
    except (TypeError, ValueError):
        return None
    if math.isnan(lon) or math.isnan(lat):
        return None
    if not (-180.0 <= lon <= 180.0 and -90.0 <= lat <= 90.0):
        return None
    return lon, lat


def is_unset(point: Optional[Sequence[float]]) -> bool:
    """True for a missing or malformed point and for the (0, 0) sentinel."""
    coords = as_point(point)
    return coords is None or coords == (0.0, 0.0)


def distance_km(point_a: Sequence[float], point_b: Sequence[float]) -> float:
    """Great-circle distance between two points using the haversine formula."""
    lon1, lat1 = point_a
    lon2, lat2 = point_b

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(max(0.0, 1 - a)))
    return EARTH_RADIUS_KM * c


def bounding_box(point: Sequence[float], radius_km: float) -> Tuple[float, float, float, float]:
    """Return (min_lon, min_lat, max_lon, max_lat) enclosing a circle.

    Used as a cheap index-friendly pre-filter; callers still apply the exact
    haversine check afterwards. When the circle crosses the antimeridian the
    longitudes wrap and min_lon > max_lon, as in a GeoJSON bbox; see
    `crosses_antimeridian`.
    """
    lon, lat = point
    lat_delta = radius_km / KM_PER_DEGREE_LAT
    angular = radius_km / EARTH_RADIUS_KM
    cos_lat = math.cos(math.radians(lat))
    # Widest longitude reached by the circle, or the whole band near a pole
    if angular >= math.pi / 2 or math.sin(angular) >= cos_lat:
        lon_delta = 180.0
    else:
        lon_delta = math.degrees(math.asin(math.sin(angular) / cos_lat))
    min_lat = max(-90.0, lat - lat_delta)
    max_lat = min(90.0, lat + lat_delta)
    if lon_delta >= 180.0:
        return -180.0, min_lat, 180.0, max_lat

    min_lon = lon - lon_delta
    max_lon = lon + lon_delta
    if min_lon < -180.0:
        min_lon += 360.0
    if max_lon > 180.0:
        max_lon -= 360.0
    return min_lon, min_lat, max_lon, max_lat


def crosses_antimeridian(box: Tuple[float, float, float, float]) -> bool:
    min_lon, _, max_lon, _ = box
    return min_lon > max_lon
