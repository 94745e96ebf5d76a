"""GPS distance checks for check-in and check-out."""

from __future__ import annotations

import math

EARTH_RADIUS_METERS = 6371000.0


def haversine_distance(
    lat1: float, lon1: float, lat2: float, lon2: float
) -> float:
    """Great-circle distance in meters between two coordinates."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return EARTH_RADIUS_METERS * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def is_within_radius(
    lat: float,
    lon: float,
    target_lat: float,
    target_lon: float,
    radius_meters: float,
) -> tuple[bool, float]:
    distance = haversine_distance(lat, lon, target_lat, target_lon)
    return distance <= radius_meters, distance
