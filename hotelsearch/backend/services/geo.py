"""Spherical geometry helpers for radius search."""
import math
from typing import List, Optional, Tuple
from hotelsearch.backend.core.errors import InvalidInputError


# (min_lat, max_lat, min_lon, max_lon)
BoundingBox = Tuple[float, float, float, float]

# Slack added to bounding boxes so boundary points survive float rounding
BOX_EPSILON_DEG = 1e-9


def validate_coordinates(latitude: float, longitude: float) -> None:
    """Raise InvalidInputError unless (latitude, longitude) is a valid WGS84 point."""
    if latitude is None or longitude is None:
        raise InvalidInputError("Latitude and longitude are required")
    if math.isnan(latitude) or math.isnan(longitude):
        raise InvalidInputError("Coordinates must be numbers")
    if not -90.0 <= latitude <= 90.0:
        raise InvalidInputError(f"Latitude {latitude} out of range [-90, 90]")
    if not -180.0 <= longitude <= 180.0:
        raise InvalidInputError(f"Longitude {longitude} out of range [-180, 180]")


def haversine_distance_m(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    earth_radius_m: float
) -> float:
    """
    Great-circle distance between two points on a sphere.

    Args:
        lat1, lon1: First point in degrees
        lat2, lon2: Second point in degrees
        earth_radius_m: Sphere radius in meters

    Returns:
        Distance in meters (exactly 0.0 for identical points)
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    a = min(1.0, max(0.0, a))
    return 2 * earth_radius_m * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def bounding_boxes(
    latitude: float,
    longitude: float,
    radius_m: float,
    earth_radius_m: float
) -> Optional[List[BoundingBox]]:
    """
    Lat/lon boxes that contain every point within ``radius_m`` of the center.

    Boxes are a conservative prefilter for stores without spatial indexes;
    exact distance must still be checked. Returns None when the circle
    covers the whole sphere. A circle crossing the antimeridian yields two
    boxes; one containing a pole spans every longitude.
    """
    angular = radius_m / earth_radius_m
    if angular >= math.pi:
        return None

    delta_lat = math.degrees(angular) + BOX_EPSILON_DEG
    min_lat = latitude - delta_lat
    max_lat = latitude + delta_lat

    if min_lat <= -90.0 or max_lat >= 90.0:
        return [(max(min_lat, -90.0), min(max_lat, 90.0), -180.0, 180.0)]

    ratio = math.sin(angular) / math.cos(math.radians(latitude))
    if ratio >= 1.0:
        return [(min_lat, max_lat, -180.0, 180.0)]

    delta_lon = math.degrees(math.asin(ratio)) + BOX_EPSILON_DEG
    min_lon = longitude - delta_lon
    max_lon = longitude + delta_lon

    if min_lon < -180.0:
        return [
            (min_lat, max_lat, min_lon + 360.0, 180.0),
            (min_lat, max_lat, -180.0, max_lon),
        ]
    if max_lon > 180.0:
        return [
            (min_lat, max_lat, min_lon, 180.0),
            (min_lat, max_lat, -180.0, max_lon - 360.0),
        ]
    return [(min_lat, max_lat, min_lon, max_lon)]
