"""
Streamlit application for PhotoScout trip planning.

This script defines the user interface and orchestrates the
underlying modules to geocode stops, optimise the visiting order,
fetch road routes, build a schedule, display an interactive map, and
export the trip as GPX or KML.

To run this app locally for development, install the package and
execute:

    streamlit run photoscout/app.py

Set ``OSRM_URL`` in ``.streamlit/secrets.toml`` (or the
``PHOTOSCOUT_OSRM_URL`` environment variable) to use your own routing
server, and ``PHOTOSCOUT_LOG_LEVEL`` to change log verbosity.
"""

from __future__ import annotations

import datetime
import logging
import os
import sys
from typing import List, Optional

import streamlit as st
from streamlit_folium import folium_static

# Ensure the package can be imported when run as a script
# (``streamlit run photoscout/app.py`` does not add the project root to sys.path).
current_dir = os.path.dirname(__file__)
parent_dir = os.path.dirname(current_dir)
if parent_dir not in sys.path:
    sys.path.append(parent_dir)

from photoscout import routing
from photoscout.export import export_trip_to_gpx, export_trip_to_kml
from photoscout.geo import format_distance
from photoscout.geocode import geocode_address
from photoscout.optimisation import OptimizationResult
from photoscout.routing import RoutingError, TripRoute, calculate_trip_route, format_duration
from photoscout.schedule import StopSchedule, schedule_trip
from photoscout.trip import Trip, TripStop
from photoscout.visualisation import create_folium_map

logger = logging.getLogger("photoscout.app")

MODE_LABELS = {"driving": "🚗 Driving", "walking": "🚶 Walking", "cycling": "🚲 Cycling"}
STATUS_LABELS = {"ok": "", "early": "early", "late": "late"}


def log_level(name: Optional[str]) -> int:
    """Map a level name such as ``"debug"`` to its number, INFO if unknown."""
    level = logging.getLevelName((name or "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure() -> None:
    """Apply logging and secrets based configuration once per process."""
    logging.basicConfig(level=log_level(os.environ.get("PHOTOSCOUT_LOG_LEVEL")),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        osrm_url = st.secrets.get("OSRM_URL")
    except FileNotFoundError:
        # no secrets.toml, environment configuration applies
        osrm_url = None
    if osrm_url:
        routing.OSRM_BASE_URL = osrm_url


def build_trip(
    name: str,
    mode: str,
    trip_date: datetime.date,
    stop_inputs: List[dict],
) -> Optional[Trip]:
    """Geocode the stop inputs and assemble a ``Trip``.

    Returns ``None`` if any stop cannot be resolved.
    """
    stops = []
    for i, item in enumerate(stop_inputs):
        query = item["address"].strip() or item["name"].strip()
        coords = geocode_address(query)
        if coords is None:
            logger.info("Could not resolve stop %d (%r)", i + 1, query)
            return None
        stops.append(TripStop(
            id=f"stop-{i}",
            name=item["name"].strip() or query,
            coordinates=coords,
            planned_duration_minutes=int(item["duration"]),
            planned_arrival=item["arrival"].strip() or None,
            notes=item["notes"].strip() or None,
        ))
    return Trip(name=name.strip() or "Untitled trip", stops=tuple(stops), transport_mode=mode,
                trip_date=trip_date.isoformat())


def format_schedule_text(trip: Trip, schedule: List[StopSchedule], route: TripRoute) -> str:
    """Format itinerary text for display or sharing."""
    lines = [f"{trip.name} ({trip.trip_date})\n"]
    for i, item in enumerate(schedule, start=1):
        stop = trip.stops[item.index]
        arr = item.arrival.strftime("%H:%M")
        dep = item.departure.strftime("%H:%M")
        status_text = f" ({item.status})" if item.status != "ok" else ""
        lines.append(f"{i}. {stop.name}: arrive {arr}, depart {dep}{status_text}")
    lines.append(f"\nTotal distance: {format_distance(route.total_distance_meters)}")
    lines.append(f"Total travel time: {format_duration(route.total_duration_seconds)}")
    return "\n".join(lines)


def render_optimisation(trip: Trip, result: OptimizationResult) -> None:
    col_orig, col_opt, col_gain = st.columns(3)
    col_orig.metric("Current order", format_distance(result.original_distance))
    col_opt.metric("Optimised order", format_distance(result.optimized_distance))
    col_gain.metric("Saved", f"{result.improvement_percent}%")
    if result.new_order == list(range(len(trip.stops))):
        st.info("The current order is already the shortest found.")
        return
    st.markdown("**Optimised order**")
    st.markdown("\n".join(
        f"{pos}. {trip.stops[idx].name}" + ("" if idx == pos - 1 else f" _(was {idx + 1})_")
        for pos, idx in enumerate(result.new_order, start=1)
    ))
    if st.button("Apply optimisation"):
        st.session_state["trip"] = trip.reordered(result.new_order)
        st.rerun()


def main():
    st.set_page_config(page_title="PhotoScout", layout="wide")
    configure()
    st.title("📷 PhotoScout trip planner")

    with st.form("trip_form"):
        st.subheader("Trip")
        col_name, col_mode, col_date, col_time = st.columns([3, 2, 2, 1])
        trip_name = col_name.text_input("Trip name", value="Photo trip")
        mode = col_mode.selectbox("Transport", list(MODE_LABELS), format_func=MODE_LABELS.get)
        trip_date = col_date.date_input("Date", value=datetime.date.today())
        depart_time = col_time.text_input("Start (HH:MM)", value="06:00")
        n_stops = st.number_input("Number of stops", min_value=2, max_value=25, value=4, step=1)

        stop_inputs = []
        for i in range(int(n_stops)):
            with st.expander(f"Stop {i + 1}", expanded=int(n_stops) <= 4):
                col_n, col_a = st.columns([1, 2])
                name = col_n.text_input("Name", key=f"name_{i}")
                address = col_a.text_input("Address or \"lat, lng\"", key=f"addr_{i}")
                col_d, col_arr = st.columns(2)
                duration = col_d.number_input("Time at stop (min)", min_value=0, max_value=600, value=30,
                                              key=f"duration_{i}")
                arrival = col_arr.text_input("Planned arrival (HH:MM, optional)", key=f"arrival_{i}",
                                             help="For example golden hour. Stops reached earlier or "
                                                  "more than 15 minutes later are flagged.")
                notes = st.text_input("Notes", key=f"notes_{i}")
                stop_inputs.append({"name": name, "address": address, "duration": duration,
                                    "arrival": arrival, "notes": notes})
        submitted = st.form_submit_button("Plan trip")

    if submitted:
        filled = [s for s in stop_inputs if s["name"].strip() or s["address"].strip()]
        if len(filled) < 2:
            st.error("At least 2 stops are required to plan a route.")
            st.stop()
        with st.spinner("Looking up stops…"):
            trip = build_trip(trip_name, mode, trip_date, filled)
        if trip is None:
            st.error("Some stops could not be found. Check the names and addresses.")
            st.stop()
        st.session_state["trip"] = trip
        st.session_state["depart_time"] = depart_time

    trip: Optional[Trip] = st.session_state.get("trip")
    if trip is None:
        return

    st.subheader("Optimise stop order")
    col_first, col_last = st.columns(2)
    fix_first = col_first.checkbox("Keep first stop first", value=True)
    fix_last = col_last.checkbox("Keep last stop last", value=False)
    render_optimisation(trip, trip.optimise(fix_first_stop=fix_first, fix_last_stop=fix_last))

    with st.spinner("Calculating route…"):
        try:
            route = calculate_trip_route(trip.coordinates, trip.transport_mode)
        except RoutingError as exc:
            st.error(exc.message)
            st.stop()
    if route.source != "osrm":
        st.warning("Routing service unavailable; times are straight-line estimates.")
    trip = trip.with_route(route)

    try:
        schedule = schedule_trip(trip.stops, [leg.duration_seconds for leg in route.legs],
                                 st.session_state.get("depart_time", "06:00"),
                                 day=datetime.date.fromisoformat(trip.trip_date))
    except ValueError as exc:
        st.error(str(exc))
        st.stop()

    st.subheader("Itinerary")
    st.table([
        {
            "#": i,
            "Stop": trip.stops[item.index].name,
            "Arrive": item.arrival.strftime("%H:%M"),
            "Depart": item.departure.strftime("%H:%M"),
            "Next leg": (format_distance(trip.stops[item.index].distance_to_next_meters)
                         if trip.stops[item.index].distance_to_next_meters is not None else ""),
            "Status": STATUS_LABELS.get(item.status, item.status),
        }
        for i, item in enumerate(schedule, start=1)
    ])
    folium_static(create_folium_map(trip.stops, route), width=900, height=500)
    st.text_area("Itinerary text", format_schedule_text(trip, schedule, route), height=200)

    col_gpx, col_kml = st.columns(2)
    col_gpx.download_button("Download GPX", export_trip_to_gpx(trip), file_name="trip.gpx",
                            mime="application/gpx+xml")
    col_kml.download_button("Download KML", export_trip_to_kml(trip), file_name="trip.kml",
                            mime="application/vnd.google-earth.kml+xml")


if __name__ == "__main__":
    main()
