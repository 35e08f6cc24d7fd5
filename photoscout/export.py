"""
Trip export for PhotoScout.

Writes a trip as GPX 1.1 (GPS devices, most mapping apps) or KML 2.2
(Google Earth / Google Maps). Stops become waypoints or placemarks and,
when route geometry has been fetched, the road route is included as a
track or line.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import List, Optional

from photoscout.trip import Trip, TripStop

_XML_ESCAPES = {"&": "&amp;", "<": "&lt;", ">": "&gt;", '"': "&quot;", "'": "&apos;"}


def escape_xml(text: str) -> str:
    return "".join(_XML_ESCAPES.get(ch, ch) for ch in text)


def _stop_description(stop: TripStop) -> str:
    parts = [
        stop.notes,
        f"Duration: {stop.planned_duration_minutes} min",
        f"Arrival: {stop.planned_arrival}" if stop.planned_arrival else None,
    ]
    return "\n".join(p for p in parts if p)


def _trip_description(trip: Trip, today: date) -> str:
    parts = [
        trip.description,
        f"Date: {trip.trip_date or today.isoformat()}",
        f"Transport: {trip.transport_mode}",
        f"Stops: {len(trip.stops)}",
    ]
    return " | ".join(p for p in parts if p)


def _route_points(trip: Trip) -> List[tuple]:
    points = []
    for stop in trip.stops:
        if stop.route_geometry:
            points.extend(stop.route_geometry)
    return points


def export_trip_to_gpx(trip: Trip, now: Optional[datetime] = None) -> str:
    """Render ``trip`` as a GPX 1.1 document."""
    now = now or datetime.now(timezone.utc)
    waypoints = []
    for stop in trip.stops:
        waypoints.append(
            f'  <wpt lat="{stop.coordinates.lat}" lon="{stop.coordinates.lng}">\n'
            f"    <name>{escape_xml(stop.name)}</name>\n"
            f"    <desc>{escape_xml(_stop_description(stop))}</desc>\n"
            f"    <type>Photography Stop</type>\n"
            f"  </wpt>"
        )

    track = ""
    points = _route_points(trip)
    if points:
        # route geometry is stored as [lng, lat]
        trkpts = "\n".join(f'      <trkpt lat="{lat}" lon="{lng}"></trkpt>' for lng, lat in points)
        track = (
            f"  <trk>\n"
            f"    <name>{escape_xml(trip.name)} Route</name>\n"
            f"    <trkseg>\n{trkpts}\n    </trkseg>\n"
            f"  </trk>"
        )

    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<gpx version="1.1" creator="PhotoScout"\n'
        '  xmlns="http://www.topografix.com/GPX/1/1"\n'
        '  xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"\n'
        '  xsi:schemaLocation="http://www.topografix.com/GPX/1/1 http://www.topografix.com/GPX/1/1/gpx.xsd">\n'
        "  <metadata>\n"
        f"    <name>{escape_xml(trip.name)}</name>\n"
        f"    <desc>{escape_xml(_trip_description(trip, now.date()))}</desc>\n"
        f"    <time>{now.strftime('%Y-%m-%dT%H:%M:%SZ')}</time>\n"
        "  </metadata>\n"
        + "\n".join(waypoints) + "\n"
        + (track + "\n" if track else "")
        + "</gpx>"
    )


def export_trip_to_kml(trip: Trip, today: Optional[date] = None) -> str:
    """Render ``trip`` as a KML 2.2 document with numbered placemarks."""
    today = today or date.today()
    placemarks = []
    for index, stop in enumerate(trip.stops, start=1):
        placemarks.append(
            "      <Placemark>\n"
            f"        <name>{escape_xml(f'{index}. {stop.name}')}</name>\n"
            f"        <description>{escape_xml(_stop_description(stop))}</description>\n"
            "        <styleUrl>#stop-style</styleUrl>\n"
            "        <Point>\n"
            f"          <coordinates>{stop.coordinates.lng},{stop.coordinates.lat},0</coordinates>\n"
            "        </Point>\n"
            "      </Placemark>"
        )

    route_folder = ""
    points = _route_points(trip)
    if points:
        coords = "\n            ".join(f"{lng},{lat},0" for lng, lat in points)
        route_folder = (
            "    <Folder>\n"
            "      <name>Route</name>\n"
            "      <Placemark>\n"
            f"        <name>{escape_xml(trip.name)} Route</name>\n"
            "        <styleUrl>#route-style</styleUrl>\n"
            "        <LineString>\n"
            "          <tessellate>1</tessellate>\n"
            "          <coordinates>\n"
            f"            {coords}\n"
            "          </coordinates>\n"
            "        </LineString>\n"
            "      </Placemark>\n"
            "    </Folder>\n"
        )

    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<kml xmlns="http://www.opengis.net/kml/2.2">\n'
        "  <Document>\n"
        f"    <name>{escape_xml(trip.name)}</name>\n"
        f"    <description>{escape_xml(_trip_description(trip, today))}</description>\n"
        '    <Style id="stop-style">\n'
        "      <IconStyle>\n"
        "        <color>ff4488ff</color>\n"
        "        <scale>1.2</scale>\n"
        "        <Icon>\n"
        "          <href>http://maps.google.com/mapfiles/kml/paddle/red-circle.png</href>\n"
        "        </Icon>\n"
        "      </IconStyle>\n"
        "    </Style>\n"
        '    <Style id="route-style">\n'
        "      <LineStyle>\n"
        "        <color>ff4488ff</color>\n"
        "        <width>3</width>\n"
        "      </LineStyle>\n"
        "    </Style>\n"
        "    <Folder>\n"
        "      <name>Stops</name>\n"
        + "\n".join(placemarks) + "\n"
        "    </Folder>\n"
        + route_folder
        + "  </Document>\n"
        "</kml>"
    )
