"""
PhotoScout package initialization.

This package provides the trip planning core of the PhotoScout
photography application. Components include coordinate helpers,
stop‑order optimisation, routing, schedule calculation, export and
map visualisation.

Modules:
    geo           – Coordinates, haversine distance and display helpers.
    optimisation  – Nearest neighbour and open‑path 2‑opt stop ordering.
    trip          – Trip and stop objects.
    routing       – Road routes via OSRM with Haversine fallbacks.
    schedule      – Arrival planning against planned arrival times.
    export        – GPX and KML export.
    geocode       – Functions to geocode addresses using Nominatim.
    visualisation – Folium based map creation utilities.

Straight‑line distances are used to rank stop orders only; travel
times shown to the user come from the routing service.
"""

__all__ = [
    "geo",
    "optimisation",
    "trip",
    "routing",
    "schedule",
    "export",
    "geocode",
    "visualisation",
]
