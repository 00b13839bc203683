"""
Geofence evaluation: great-circle distance and circular-zone membership.
"""

import math
from typing import NamedTuple

from ponto.utils.validators import validate_latitude, validate_longitude, validate_number
from ponto.exceptions import ValidationError

EARTH_RADIUS_METERS = 6371e3


class Coordinates(NamedTuple):
    latitude: float
    longitude: float


def validate_coordinates(point: Coordinates) -> Coordinates:
    """Reject NaN/infinite or out-of-range coordinates with ValidationError"""
    return Coordinates(validate_latitude(point.latitude), validate_longitude(point.longitude))


def distance_meters(a: Coordinates, b: Coordinates) -> float:
    """
    Haversine distance between two coordinates.

    Args:
        a: First coordinate
        b: Second coordinate

    Returns:
        Distance in meters; 0.0 for identical coordinates

    Raises:
        ValidationError: If either coordinate is invalid
    """
    a = validate_coordinates(a)
    b = validate_coordinates(b)

    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    delta_phi = math.radians(b.latitude - a.latitude)
    delta_lambda = math.radians(b.longitude - a.longitude)

    h = (math.sin(delta_phi / 2) ** 2 +
         math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

    return EARTH_RADIUS_METERS * c


def is_within_geofence(point: Coordinates, center: Coordinates, radius_meters: float) -> bool:
    """
    True when `point` lies inside or on the boundary of the circular zone.

    The comparison is an exact `<=` with no epsilon, so a radius of 0 only
    admits the center itself.
    """
    radius = validate_number(radius_meters, "geofence_radius")
    if radius < 0:
        raise ValidationError("geofence_radius must not be negative", "geofence_radius")
    return distance_meters(point, center) <= radius
