"""
Map visualisation utilities for PhotoScout.

This module provides a helper function to build an interactive map
using the Folium library. It renders numbered markers for each stop
of the trip and draws the route as a polyline, following the road
geometry when a routed ``TripRoute`` is available. The map can be
embedded directly in a Streamlit app via ``streamlit_folium``.
"""

from __future__ import annotations

from typing import Optional, Sequence

import folium

from photoscout.routing import TripRoute
from photoscout.trip import TripStop

MARKER_HTML = (
    "<div style='font-size: 12px; color: white; background-color: #d9480f; "
    "border-radius: 50%; width: 24px; height: 24px; text-align: center; "
    "line-height: 24px;'>{order}</div>"
)


def create_folium_map(stops: Sequence[TripStop], route: Optional[TripRoute] = None) -> folium.Map:
    """Create a Folium map with numbered markers and a polyline for the trip.

    Args:
        stops: Stops in visiting order.
        route: Routed legs for ``stops``. When omitted, straight lines
            connect consecutive stops.

    Returns:
        A Folium Map object ready for display.
    """
    if not stops:
        return folium.Map(location=[0, 0], zoom_start=2)
    # Compute map centre as the mean of all coordinates
    avg_lat = sum(s.coordinates.lat for s in stops) / len(stops)
    avg_lng = sum(s.coordinates.lng for s in stops) / len(stops)
    m = folium.Map(location=[avg_lat, avg_lng], zoom_start=11, tiles="OpenStreetMap")
    for order, stop in enumerate(stops, start=1):
        popup = f"{order}. {stop.name} ({stop.planned_duration_minutes} min)"
        folium.Marker(
            location=[stop.coordinates.lat, stop.coordinates.lng],
            popup=folium.Popup(popup, parse_html=True),
            icon=folium.DivIcon(html=MARKER_HTML.format(order=order)),
        ).add_to(m)
    if route is not None:
        # leg geometry is [lng, lat]; folium wants [lat, lng]
        poly_coords = [[lat, lng] for leg in route.legs for lng, lat in leg.geometry]
    else:
        poly_coords = [[s.coordinates.lat, s.coordinates.lng] for s in stops]
    if len(poly_coords) >= 2:
        folium.PolyLine(poly_coords, color="#d9480f", weight=4, opacity=0.7).add_to(m)
    return m
