"""
Geographic helpers: great-circle distance and coordinate validation
"""
import math
from typing import Optional

from app.core.exceptions import InvalidInput
from app.domain.user import Location

# Mean Earth radius in kilometers
EARTH_RADIUS_KM = 6371.0


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great circle distance between two points on Earth using Haversine formula.

    Args:
        lat1, lon1: Latitude and longitude of the first point in decimal degrees
        lat2, lon2: Latitude and longitude of the second point in decimal degrees

    Returns:
        Distance in kilometers
    """
    lat1, lon1, lat2, lon2 = map(math.radians, [lat1, lon1, lat2, lon2])

    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # Clamp guards against a > 1 from floating point error on antipodal points
    c = 2 * math.asin(math.sqrt(min(1.0, a)))

    return EARTH_RADIUS_KM * c


def distance_between(origin: Location, target: Optional[Location]) -> Optional[float]:
    """Distance in km between two locations, None when target has no location"""
    if target is None:
        return None
    return haversine_distance(origin.latitude, origin.longitude, target.latitude, target.longitude)


def parse_origin(lat: Optional[float], lng: Optional[float]) -> Optional[Location]:
    """
    Build a search origin from optional query coordinates

    Raises:
        InvalidInput: only one coordinate given, or a coordinate out of range
    """
    if lat is None and lng is None:
        return None
    if lat is None or lng is None:
        raise InvalidInput("Latitude and longitude must be provided together")
    if not (math.isfinite(lat) and -90 <= lat <= 90):
        raise InvalidInput(f"Latitude out of range: {lat}")
    if not (math.isfinite(lng) and -180 <= lng <= 180):
        raise InvalidInput(f"Longitude out of range: {lng}")
    return Location(latitude=lat, longitude=lng)


def validate_radius(radius_km: Optional[float]) -> Optional[float]:
    if radius_km is None:
        return None
    if not math.isfinite(radius_km) or radius_km <= 0:
        raise InvalidInput(f"Radius must be a positive number of kilometers: {radius_km}")
    return radius_km
