"""
Trip and stop objects for PhotoScout.

A trip is an ordered list of photography stops plus a few details used
for display and export. Objects here are immutable; reordering or
attaching route data produces a new trip.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple, TYPE_CHECKING

from photoscout.geo import Coordinates
from photoscout.optimisation import OptimizableStop, OptimizationResult, apply_order, optimise_stop_order

if TYPE_CHECKING:
    from photoscout.routing import TripRoute


@dataclass(frozen=True)
class TripStop:
    id: str
    name: str
    coordinates: Coordinates
    planned_duration_minutes: int = 30
    planned_arrival: Optional[str] = None  # "HH:MM"
    notes: Optional[str] = None
    # route data for the leg leaving this stop, filled after routing
    distance_to_next_meters: Optional[float] = None
    duration_to_next_seconds: Optional[float] = None
    route_geometry: Optional[List[Tuple[float, float]]] = None  # [lng, lat] pairs

    def without_route(self) -> "TripStop":
        return replace(self, distance_to_next_meters=None, duration_to_next_seconds=None, route_geometry=None)


@dataclass(frozen=True)
class Trip:
    name: str
    stops: Sequence[TripStop] = field(default_factory=tuple)
    transport_mode: str = "driving"
    trip_date: Optional[str] = None  # "YYYY-MM-DD"
    description: Optional[str] = None

    @property
    def coordinates(self) -> List[Coordinates]:
        return [stop.coordinates for stop in self.stops]

    def optimise(self, fix_first_stop: bool = True, fix_last_stop: bool = False) -> OptimizationResult:
        """Run the stop‑order optimiser over this trip's stops."""
        optimizable = [OptimizableStop(id=stop.id, coordinates=stop.coordinates) for stop in self.stops]
        return optimise_stop_order(optimizable, fix_first_stop=fix_first_stop, fix_last_stop=fix_last_stop)

    def reordered(self, new_order: Sequence[int]) -> "Trip":
        """Return a copy with stops in ``new_order``.

        Leg data is dropped because it describes the previous sequence.
        """
        stops = tuple(stop.without_route() for stop in apply_order(list(self.stops), new_order))
        return replace(self, stops=stops)

    def with_route(self, route: "TripRoute") -> "Trip":
        """Return a copy with each stop's outgoing leg taken from ``route``.

        Raises:
            ValueError: If the route does not have one leg per consecutive pair.
        """
        if len(route.legs) != max(0, len(self.stops) - 1):
            raise ValueError(f"route has {len(route.legs)} legs for {len(self.stops)} stops")
        stops = []
        for idx, stop in enumerate(self.stops):
            if idx < len(route.legs):
                leg = route.legs[idx]
                stop = replace(
                    stop,
                    distance_to_next_meters=leg.distance_meters,
                    duration_to_next_seconds=leg.duration_seconds,
                    route_geometry=list(leg.geometry),
                )
            else:
                stop = stop.without_route()
            stops.append(stop)
        return replace(self, stops=tuple(stops), transport_mode=route.transport_mode)
