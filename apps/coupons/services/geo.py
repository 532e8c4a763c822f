"""Great-circle distance helpers used for on-site checks."""

from math import asin, cos, radians, sin, sqrt

EARTH_RADIUS_METERS = 6_371_000


def distance_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance between two coordinates, in meters."""
    phi1, phi2 = radians(lat1), radians(lat2)
    d_phi = radians(lat2 - lat1)
    d_lambda = radians(lon2 - lon1)

    a = sin(d_phi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * asin(min(1.0, sqrt(a)))


def within_radius(
    supplier_lat: float,
    supplier_lon: float,
    point_lat: float,
    point_lon: float,
    radius_meters: float,
) -> bool:
    """Whether the point lies within ``radius_meters`` of the supplier."""
    return distance_meters(supplier_lat, supplier_lon, point_lat, point_lon) <= radius_meters
