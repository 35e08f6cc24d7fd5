import unittest

from photoscout.geo import Coordinates
from photoscout.routing import estimate_route
from photoscout.trip import Trip, TripStop


def make_trip():
    stops = (
        TripStop(id="a", name="Trailhead", coordinates=Coordinates(0.0, 0.0)),
        TripStop(id="b", name="Far falls", coordinates=Coordinates(0.0, 0.02)),
        TripStop(id="c", name="Near bridge", coordinates=Coordinates(0.0, 0.01), notes="long lens"),
    )
    return Trip(name="Falls", stops=stops, transport_mode="walking")


class TestTrip(unittest.TestCase):
    def test_optimise_and_reorder(self):
        trip = make_trip()
        result = trip.optimise()
        self.assertEqual(result.new_order, [0, 2, 1])
        reordered = trip.reordered(result.new_order)
        self.assertEqual([s.id for s in reordered.stops], ["a", "c", "b"])
        self.assertEqual(reordered.stops[1].notes, "long lens")
        self.assertEqual([s.id for s in trip.stops], ["a", "b", "c"])

    def test_with_route_fills_legs(self):
        trip = make_trip()
        route = estimate_route(trip.coordinates, "walking")
        routed = trip.with_route(route)
        self.assertEqual(routed.stops[0].distance_to_next_meters, route.legs[0].distance_meters)
        self.assertEqual(routed.stops[1].duration_to_next_seconds, route.legs[1].duration_seconds)
        self.assertEqual(routed.stops[0].route_geometry, [(0.0, 0.0), (0.02, 0.0)])
        self.assertIsNone(routed.stops[2].distance_to_next_meters)

        # reordering invalidates leg data
        reordered = routed.reordered([0, 2, 1])
        self.assertTrue(all(s.route_geometry is None for s in reordered.stops))

    def test_with_route_mismatch(self):
        trip = make_trip()
        route = estimate_route(trip.coordinates[:2], "walking")
        with self.assertRaises(ValueError):
            trip.with_route(route)

    def test_invalid_order(self):
        with self.assertRaises(ValueError):
            make_trip().reordered([0, 1])


if __name__ == "__main__":
    unittest.main()
