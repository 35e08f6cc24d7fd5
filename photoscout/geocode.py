"""
Geocoding utilities for PhotoScout.

This module provides a thin wrapper around the `geopy` library to
convert free‑form addresses or place names into coordinates. It uses
OpenStreetMap's Nominatim service via geopy's API. A small cache is
maintained in memory to avoid repeated queries for the same address.

Example usage:

    from photoscout.geocode import geocode_address
    coords = geocode_address("Tokyo Tower")

Typed coordinates such as ``"35.6586, 139.7454"`` are accepted as is and
never sent to Nominatim. The geocode function returns ``None`` if the
address cannot be resolved.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from geopy.exc import GeocoderServiceError, GeocoderTimedOut, GeopyError
from geopy.geocoders import Nominatim

from photoscout.geo import Coordinates, parse_lat_lng_text

logger = logging.getLogger(__name__)

USER_AGENT = "photoscout_app"
GEOCODE_TIMEOUT_S = 10
GEOCODE_RETRY_TIMEOUT_S = 20

_geocoder: Optional[Nominatim] = None


def _get_geocoder() -> Nominatim:
    """Return a singleton Nominatim geocoder instance."""
    global _geocoder
    if _geocoder is None:
        # Provide a custom user agent to comply with Nominatim's usage policy.
        _geocoder = Nominatim(user_agent=USER_AGENT)
    return _geocoder


def _lookup(address: str, timeout: int) -> Optional[Coordinates]:
    location = _get_geocoder().geocode(address, timeout=timeout)
    if location:
        return Coordinates(lat=location.latitude, lng=location.longitude)
    return None


@lru_cache(maxsize=128)
def geocode_address(address: str) -> Optional[Coordinates]:
    """Resolve an address, place name or typed ``"lat, lng"`` pair.

    If a timeout or service error occurs, the request is retried once
    with a longer timeout. Other geocoder errors are logged and
    ``None`` is returned.

    Args:
        address: Free form text to geocode.

    Returns:
        ``Coordinates`` if geocoding succeeds, otherwise ``None``.
    """
    address = address.strip()
    if not address:
        return None
    typed = parse_lat_lng_text(address)
    if typed is not None:
        return typed
    try:
        return _lookup(address, GEOCODE_TIMEOUT_S)
    except (GeocoderTimedOut, GeocoderServiceError) as exc:
        logger.info("Geocoding %r failed (%s), retrying", address, exc)
        try:
            return _lookup(address, GEOCODE_RETRY_TIMEOUT_S)
        except GeopyError as retry_exc:
            logger.warning("Geocoding %r failed after retry: %s", address, retry_exc)
            return None
    except GeopyError as exc:
        logger.warning("Geocoding %r failed: %s", address, exc)
        return None
