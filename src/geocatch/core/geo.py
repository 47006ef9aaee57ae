"""Geographic helpers: great-circle distance and coordinate checks."""

import math

from geocatch.core.constants import EARTH_RADIUS_METERS, METERS_PER_DEGREE_LAT
from geocatch.core.exceptions import InvalidCoordinateError


def distance_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate the distance between two points using the Haversine formula.

    Args:
        lat1: Latitude of the first point in degrees
        lon1: Longitude of the first point in degrees
        lat2: Latitude of the second point in degrees
        lon2: Longitude of the second point in degrees

    Returns:
        Distance in meters on a spherical Earth
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_METERS * c


def is_valid_coordinate(lat: object, lon: object) -> bool:
    """Check that lat/lon are finite numbers inside [-90, 90] / [-180, 180]."""
    for value in (lat, lon):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        if not math.isfinite(value):
            return False
    return abs(lat) <= 90 and abs(lon) <= 180


def validate_coordinate(lat: object, lon: object) -> None:
    """Raise InvalidCoordinateError unless the pair is a valid coordinate."""
    if not is_valid_coordinate(lat, lon):
        raise InvalidCoordinateError(lat, lon)


def validate_radius(radius_meters: float) -> None:
    """Raise ValueError unless the radius is a finite, positive number of meters."""
    if (
        isinstance(radius_meters, bool)
        or not isinstance(radius_meters, (int, float))
        or not math.isfinite(radius_meters)
        or radius_meters <= 0
    ):
        raise ValueError(f"radius_meters must be a positive finite number, got {radius_meters!r}")


def is_within_range(
    user_lat: float,
    user_lon: float,
    target_lat: float,
    target_lon: float,
    range_meters: float,
) -> bool:
    """Check if a target is within range_meters of the user."""
    return distance_meters(user_lat, user_lon, target_lat, target_lon) <= range_meters


def offset_coordinate(lat: float, lon: float, dx: float, dy: float) -> tuple[float, float]:
    """Shift a coordinate by dx meters east and dy meters north.

    Uses a local equirectangular approximation, good for a few kilometers.
    """
    d_lat = dy / METERS_PER_DEGREE_LAT
    d_lon = dx / (METERS_PER_DEGREE_LAT * math.cos(math.radians(lat)))
    return lat + d_lat, lon + d_lon


def bounding_box(lat: float, lon: float, radius_meters: float) -> tuple[float, float, float, float]:
    """Get (min_lat, max_lat, min_lon, max_lon) enclosing a circle.

    Used as a coarse SQL prefilter before the exact distance check, so it is
    padded slightly and may over-include. Longitude bounds are not wrapped at
    the antimeridian; see ``lon_bounds_usable``.
    """
    d_lat = math.degrees(radius_meters / EARTH_RADIUS_METERS) * 1.01
    cos_lat = max(math.cos(math.radians(lat)), 1e-6)
    d_lon = d_lat / cos_lat
    return lat - d_lat, lat + d_lat, lon - d_lon, lon + d_lon


def lon_bounds_usable(min_lon: float, max_lon: float) -> bool:
    """Whether a bounding box's longitude range can be used as a SQL filter."""
    return min_lon >= -180 and max_lon <= 180


def format_distance(meters: float) -> str:
    """Format a distance for display, e.g. ``42m`` or ``1.2km``."""
    if meters < 1000:
        return f"{round(meters)}m"
    return f"{meters / 1000:.1f}km"
