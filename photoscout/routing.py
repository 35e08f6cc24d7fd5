"""
Routing utilities for PhotoScout.

Once the stop order is settled, this module turns it into real travel
legs. It wraps network calls to OSRM (Open Source Routing Machine) to
fetch road distance, duration and geometry for each consecutive pair of
stops. If OSRM is unavailable or returns no route, a simple Haversine
estimate with mode‑specific speed factors is used instead.

Example usage:

    coords = [Coordinates(35.6586, 139.7454), Coordinates(35.6895, 139.6917)]
    route = calculate_trip_route(coords, mode="walking")
    route.total_duration_seconds

The public OSRM demo server is rate limited. Point ``PHOTOSCOUT_OSRM_URL``
at your own OSRM server in production.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import requests

from photoscout.geo import Coordinates
from photoscout.optimisation import OptimizableStop, build_distance_matrix

logger = logging.getLogger(__name__)

OSRM_BASE_URL = os.environ.get("PHOTOSCOUT_OSRM_URL", "https://router.project-osrm.org")
OSRM_TIMEOUT_S = 30

TRANSPORT_MODES = ("driving", "walking", "cycling")
OSRM_PROFILES = {"driving": "driving", "walking": "foot", "cycling": "bike"}
FALLBACK_SPEEDS_KMH = {"driving": 40.0, "walking": 5.0, "cycling": 15.0}


class RoutingError(Exception):
    """Raised when a route cannot be requested for the given input."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


@dataclass(frozen=True)
class RouteLeg:
    from_coords: Coordinates
    to_coords: Coordinates
    distance_meters: float
    duration_seconds: float
    geometry: List[Tuple[float, float]]  # [lng, lat] pairs


@dataclass(frozen=True)
class TripRoute:
    legs: List[RouteLeg]
    total_distance_meters: float
    total_duration_seconds: float
    transport_mode: str
    source: str  # "osrm" or "haversine"


def _validate(coords: Sequence[Coordinates], mode: str) -> None:
    if len(coords) < 2:
        raise RoutingError("INVALID_INPUT", "At least 2 stops are required to calculate a route")
    if mode not in TRANSPORT_MODES:
        raise RoutingError("INVALID_INPUT", f"Unknown transport mode: {mode!r}")
    for c in coords:
        if not c.is_valid():
            raise RoutingError("INVALID_COORDINATES", f"Invalid coordinates: [{c.lng}, {c.lat}]")


def compute_haversine_matrix(coords: Sequence[Coordinates], speed_kmh: float) -> Tuple[List[List[float]], List[List[float]]]:
    """Compute distance and duration matrices using the Haversine formula.

    Args:
        coords: List of coordinates.
        speed_kmh: Assumed constant travel speed in km/h.

    Returns:
        Tuple of (distance_matrix_m, duration_matrix_s).
    """
    dist_matrix = build_distance_matrix([OptimizableStop(id=i, coordinates=c) for i, c in enumerate(coords)])
    dur_matrix = [[dist / 1000.0 / speed_kmh * 3600.0 for dist in row] for row in dist_matrix]
    return dist_matrix, dur_matrix


def fetch_osrm_route(coords: Sequence[Coordinates], mode: str) -> Optional[TripRoute]:
    """Call the OSRM route service for a path through ``coords``.

    Args:
        coords: Stops in visiting order.
        mode: One of ``TRANSPORT_MODES``.

    Returns:
        A ``TripRoute`` if successful, otherwise ``None``.
    """
    profile = OSRM_PROFILES[mode]
    # OSRM expects lon,lat order and semicolon separated list
    locs = ";".join(f"{c.lng},{c.lat}" for c in coords)
    url = f"{OSRM_BASE_URL.rstrip('/')}/route/v1/{profile}/{locs}"
    params = {"overview": "full", "geometries": "geojson", "steps": "true"}
    try:
        resp = requests.get(url, params=params, timeout=OSRM_TIMEOUT_S)
        resp.raise_for_status()
        data = resp.json()
    except (requests.RequestException, ValueError) as exc:
        logger.warning("OSRM request failed: %s", exc)
        return None
    if data.get("code") != "Ok" or not data.get("routes"):
        logger.warning("OSRM returned no route (code=%s)", data.get("code"))
        return None

    route = data["routes"][0]
    raw_legs = route.get("legs", [])
    if len(raw_legs) != len(coords) - 1:
        logger.warning("OSRM returned %d legs for %d stops", len(raw_legs), len(coords))
        return None
    legs = []
    for i, raw in enumerate(raw_legs):
        geometry: List[Tuple[float, float]] = []
        for step in raw.get("steps", []):
            for lng, lat in step.get("geometry", {}).get("coordinates", []):
                if not geometry or geometry[-1] != (lng, lat):
                    geometry.append((lng, lat))
        if len(geometry) < 2:
            geometry = [coords[i].as_lng_lat(), coords[i + 1].as_lng_lat()]
        legs.append(RouteLeg(
            from_coords=coords[i],
            to_coords=coords[i + 1],
            distance_meters=round(raw.get("distance", 0.0)),
            duration_seconds=round(raw.get("duration", 0.0)),
            geometry=geometry,
        ))
    return TripRoute(
        legs=legs,
        total_distance_meters=round(route.get("distance", 0.0)),
        total_duration_seconds=round(route.get("duration", 0.0)),
        transport_mode=mode,
        source="osrm",
    )


def estimate_route(coords: Sequence[Coordinates], mode: str) -> TripRoute:
    """Estimate a route from straight‑line distances and an average speed."""
    dist_matrix, dur_matrix = compute_haversine_matrix(coords, FALLBACK_SPEEDS_KMH[mode])
    legs = []
    for i in range(len(coords) - 1):
        a, b = coords[i], coords[i + 1]
        legs.append(RouteLeg(
            from_coords=a,
            to_coords=b,
            distance_meters=round(dist_matrix[i][i + 1]),
            duration_seconds=round(dur_matrix[i][i + 1]),
            geometry=[a.as_lng_lat(), b.as_lng_lat()],
        ))
    return TripRoute(
        legs=legs,
        total_distance_meters=sum(leg.distance_meters for leg in legs),
        total_duration_seconds=sum(leg.duration_seconds for leg in legs),
        transport_mode=mode,
        source="haversine",
    )


def calculate_trip_route(coords: Sequence[Coordinates], mode: str = "driving", use_osrm: bool = True) -> TripRoute:
    """Compute travel legs for stops visited in the given order.

    This function attempts to use OSRM for road distances and durations.
    If OSRM fails, it falls back to a Haversine estimate with a
    mode‑specific average speed.

    Args:
        coords: Stops in visiting order.
        mode: ``"driving"``, ``"walking"`` or ``"cycling"``.
        use_osrm: Set to False to skip the network call entirely.

    Returns:
        A ``TripRoute`` with one leg per consecutive pair of stops.

    Raises:
        RoutingError: If fewer than two stops are given, the mode is
            unknown, or a coordinate is out of range.
    """
    _validate(coords, mode)
    if use_osrm:
        route = fetch_osrm_route(coords, mode)
        if route is not None:
            return route
        logger.info("Falling back to straight-line estimate for %d stops", len(coords))
    return estimate_route(coords, mode)


def format_duration(seconds: float) -> str:
    """Format a duration for display, e.g. ``"1h 5m"`` or ``"12 min"``."""
    total_minutes = int(round(seconds / 60.0))
    hours, minutes = divmod(total_minutes, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes} min"
