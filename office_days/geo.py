"""Geospatial utilities (no external dependencies)."""

from __future__ import annotations

import math

from office_days.models import EARTH_RADIUS_M, GeoPoint


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute Haversine distance in meters between two lat/lon points.

    Args:
        lat1: Latitude 1 in degrees.
        lon1: Longitude 1 in degrees.
        lat2: Latitude 2 in degrees.
        lon2: Longitude 2 in degrees.

    Returns:
        Distance in meters on a spherical Earth.
    """

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    # Rounding can push a fraction of an ulp past 1.0 for antipodal points.
    a = min(1.0, a)
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_M * c


def distance_m(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in meters between two points."""

    return haversine_m(a.latitude, a.longitude, b.latitude, b.longitude)


def is_within_radius(point: GeoPoint, center: GeoPoint, radius_m: float) -> bool:
    """Check whether a point is inside or on the boundary of a circle around center."""

    return distance_m(point, center) <= radius_m
