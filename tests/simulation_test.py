import random
import unittest

from photoscout.geo import Coordinates
from photoscout.optimisation import (
    OptimizableStop,
    build_distance_matrix,
    nearest_neighbor,
    optimise_stop_order,
    two_opt,
)
from photoscout.routing import calculate_trip_route
from photoscout.schedule import schedule_trip
from photoscout.trip import Trip, TripStop


def random_stops(rng, n):
    # random coordinates around Yosemite Valley
    return [
        OptimizableStop(id=i, coordinates=Coordinates(37.70 + rng.random() * 0.1, -119.70 + rng.random() * 0.2))
        for i in range(n)
    ]


class TestSimulation(unittest.TestCase):
    def test_random_cases(self):
        # Random trips of every small size under each anchor combination
        # must keep the optimiser's guarantees.
        rng = random.Random(20240611)
        for _ in range(40):
            n = rng.randint(0, 12)
            stops = random_stops(rng, n)
            for fix_first in (True, False):
                for fix_last in (True, False):
                    result = optimise_stop_order(stops, fix_first_stop=fix_first, fix_last_stop=fix_last)
                    self.assertEqual(sorted(result.new_order), list(range(n)))
                    self.assertLessEqual(result.optimized_distance, result.original_distance)
                    self.assertTrue(0 <= result.improvement_percent <= 100)
                    if n <= 2:
                        self.assertEqual(result.new_order, list(range(n)))
                        self.assertEqual(result.improvement_percent, 0)
                    if n and fix_first:
                        self.assertEqual(result.new_order[0], 0)
                    if n and fix_last:
                        self.assertEqual(result.new_order[-1], n - 1)

    def test_two_opt_output_is_stable(self):
        rng = random.Random(7)
        for _ in range(20):
            stops = random_stops(rng, rng.randint(3, 15))
            matrix = build_distance_matrix(stops)
            refined = two_opt(matrix, nearest_neighbor(matrix, 0))
            self.assertEqual(two_opt(matrix, refined), refined)

    def test_pipeline(self):
        # optimise, route offline and schedule without raising
        rng = random.Random(3)
        for _ in range(5):
            n = rng.randint(3, 6)
            stops = tuple(
                TripStop(id=str(s.id), name=f"Spot {s.id}", coordinates=s.coordinates, planned_duration_minutes=20)
                for s in random_stops(rng, n)
            )
            trip = Trip(name="Valley loop", stops=stops, transport_mode="walking")
            trip = trip.reordered(trip.optimise().new_order)
            route = calculate_trip_route(trip.coordinates, trip.transport_mode, use_osrm=False)
            trip = trip.with_route(route)
            schedule = schedule_trip(trip.stops, [leg.duration_seconds for leg in route.legs], "06:00")
            self.assertEqual(len(schedule), n)
            self.assertEqual(trip.stops[0].id, "0")


if __name__ == "__main__":
    unittest.main()
