"""
Geographic helpers for PhotoScout.

This module holds the coordinate value type used throughout the package
and the great‑circle distance on which the stop‑order optimiser ranks
candidate routes. A handful of small helpers for bearings, bounding
boxes and display formatting live here as well.

Example usage:

    from photoscout.geo import Coordinates, calculate_distance
    london = Coordinates(51.5074, -0.1278)
    edinburgh = Coordinates(55.9533, -3.1883)
    calculate_distance(london, edinburgh)  # ~534 km, in meters

All distances are in meters. Inputs are expected to be finite and in
range; NaN coordinates simply propagate as NaN distances.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Tuple

EARTH_RADIUS_M = 6371000.0
METERS_PER_DEGREE_LAT = 111320.0

_POINT_PATTERN = re.compile(r"\(([^,\s]+)[,\s]+([^)]+)\)")
_LAT_LNG_PATTERN = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*[,\s]\s*(-?\d+(?:\.\d+)?)\s*$")


@dataclass(frozen=True)
class Coordinates:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lng: float

    def is_valid(self) -> bool:
        """Return True if both values are finite and inside their ranges."""
        if not (math.isfinite(self.lat) and math.isfinite(self.lng)):
            return False
        return -90.0 <= self.lat <= 90.0 and -180.0 <= self.lng <= 180.0

    def as_lat_lng(self) -> Tuple[float, float]:
        return self.lat, self.lng

    def as_lng_lat(self) -> Tuple[float, float]:
        # GeoJSON, OSRM and KML all use lng,lat order
        return self.lng, self.lat


def calculate_distance(point1: Coordinates, point2: Coordinates) -> float:
    """Compute the great‑circle distance between two coordinates in meters."""
    phi1, phi2 = math.radians(point1.lat), math.radians(point2.lat)
    d_phi = math.radians(point2.lat - point1.lat)
    d_lambda = math.radians(point2.lng - point1.lng)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def calculate_bearing(point1: Coordinates, point2: Coordinates) -> float:
    """Return the initial bearing from ``point1`` to ``point2`` in degrees (0‑360)."""
    phi1, phi2 = math.radians(point1.lat), math.radians(point2.lat)
    d_lambda = math.radians(point2.lng - point1.lng)
    y = math.sin(d_lambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(d_lambda)
    theta = math.atan2(y, x)
    return (math.degrees(theta) + 360.0) % 360.0


def bearing_to_cardinal(bearing: float) -> str:
    """Convert a compass bearing into one of the eight cardinal directions."""
    directions = ["N", "NE", "E", "SE", "S", "SW", "W", "NW"]
    index = int(math.floor((bearing % 360) / 45 + 0.5)) % 8
    return directions[index]


def calculate_bounding_box(center: Coordinates, radius_m: float) -> Tuple[float, float, float, float]:
    """Approximate bounding box around ``center``.

    Args:
        center: Centre of the box.
        radius_m: Half the box width in meters.

    Returns:
        Tuple ``(min_lng, min_lat, max_lng, max_lat)``.
    """
    lat_delta = radius_m / METERS_PER_DEGREE_LAT
    lng_delta = radius_m / (METERS_PER_DEGREE_LAT * math.cos(math.radians(center.lat)))
    return (
        center.lng - lng_delta,
        center.lat - lat_delta,
        center.lng + lng_delta,
        center.lat + lat_delta,
    )


def is_within_radius(point: Coordinates, center: Coordinates, radius_m: float) -> bool:
    return calculate_distance(point, center) <= radius_m


def format_coordinate(value: float, decimals: int = 6) -> str:
    return f"{value:.{decimals}f}"


def format_distance(meters: float) -> str:
    """Format a distance for display, e.g. ``"1.5 km"`` or ``"500 m"``."""
    if meters >= 1000:
        return f"{meters / 1000:.1f} km"
    return f"{int(math.floor(meters + 0.5))} m"


def parse_coordinates(value: Any) -> Optional[Coordinates]:
    """Parse coordinates stored in one of several formats.

    Handles ``Coordinates`` instances, PostGIS style ``"POINT(lng lat)"``
    strings, parenthesised ``"(lng,lat)"`` strings and mappings with
    ``lat``/``lng`` keys. Returns ``None`` if nothing matches.
    """
    if isinstance(value, Coordinates):
        return value
    if isinstance(value, str):
        match = _POINT_PATTERN.search(value)
        if match:
            try:
                return Coordinates(lat=float(match.group(2)), lng=float(match.group(1)))
            except ValueError:
                return None
        return None
    if isinstance(value, Mapping) and "lat" in value and "lng" in value:
        try:
            return Coordinates(lat=float(value["lat"]), lng=float(value["lng"]))
        except (TypeError, ValueError):
            return None
    return None


def parse_lat_lng_text(text: str) -> Optional[Coordinates]:
    """Parse user input such as ``"35.6586, 139.7454"``.

    Note the order: typed coordinates are latitude first, unlike the
    stored formats handled by :func:`parse_coordinates`. Out of range
    pairs are rejected.
    """
    match = _LAT_LNG_PATTERN.match(text or "")
    if not match:
        return None
    coords = Coordinates(lat=float(match.group(1)), lng=float(match.group(2)))
    return coords if coords.is_valid() else None
