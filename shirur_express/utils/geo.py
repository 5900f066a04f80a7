# shirur_express/utils/geo.py
import math
from typing import Any, Dict, Iterable, List

EARTH_RADIUS_KM = 6371.0


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle (haversine) distance between two points in decimal degrees"""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def within_radius(
    providers: Iterable[Dict[str, Any]],
    latitude: float,
    longitude: float,
    radius_km: float
) -> List[Dict[str, Any]]:
    """
    Keep providers inside the radius, nearest first, with ``distance_km`` set.
    Providers without coordinates are dropped.
    """
    nearby = []
    for provider in providers:
        if provider.get("latitude") is None or provider.get("longitude") is None:
            continue
        d = distance_km(latitude, longitude, provider["latitude"], provider["longitude"])
        if d <= radius_km:
            nearby.append({**provider, "distance_km": round(d, 2)})
    return sorted(nearby, key=lambda p: p["distance_km"])
