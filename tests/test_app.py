import datetime
import logging
import unittest
from unittest import mock

from photoscout.app import build_trip, format_schedule_text, log_level
from photoscout.geo import Coordinates
from photoscout.routing import estimate_route
from photoscout.schedule import schedule_trip

INPUTS = [
    {"name": "Dawn pier", "address": "", "duration": 40, "arrival": "06:15", "notes": " tripod "},
    {"name": "", "address": "51.5138, -0.0984", "duration": 20, "arrival": "", "notes": ""},
]


class TestBuildTrip(unittest.TestCase):
    @mock.patch("photoscout.app.geocode_address")
    def test_build_trip(self, geocode):
        geocode.side_effect = [Coordinates(51.5, -0.07), Coordinates(51.5138, -0.0984)]
        trip = build_trip(" ", "walking", datetime.date(2024, 10, 5), INPUTS)
        self.assertEqual(trip.name, "Untitled trip")
        self.assertEqual(trip.trip_date, "2024-10-05")
        self.assertEqual(geocode.call_args_list[0][0][0], "Dawn pier")
        self.assertEqual([s.name for s in trip.stops], ["Dawn pier", "51.5138, -0.0984"])
        self.assertEqual(trip.stops[0].planned_arrival, "06:15")
        self.assertEqual(trip.stops[0].notes, "tripod")
        self.assertIsNone(trip.stops[1].planned_arrival)

    @mock.patch("photoscout.app.geocode_address", return_value=None)
    def test_unresolved_stop(self, geocode):
        self.assertIsNone(build_trip("Trip", "driving", datetime.date(2024, 10, 5), INPUTS))


class TestScheduleText(unittest.TestCase):
    @mock.patch("photoscout.app.geocode_address")
    def test_format_schedule_text(self, geocode):
        geocode.side_effect = [Coordinates(51.5, -0.07), Coordinates(51.5138, -0.0984)]
        trip = build_trip("Dawn", "walking", datetime.date(2024, 10, 5), INPUTS)
        route = estimate_route(trip.coordinates, "walking")
        schedule = schedule_trip(trip.stops, [leg.duration_seconds for leg in route.legs], "06:00",
                                 day=datetime.date(2024, 10, 5))
        text = format_schedule_text(trip, schedule, route)
        self.assertTrue(text.startswith("Dawn (2024-10-05)"))
        self.assertIn("1. Dawn pier: arrive 06:00, depart 06:40 (early)", text)
        self.assertIn("Total distance: 2.5 km", text)


class TestLogLevel(unittest.TestCase):
    def test_known_levels(self):
        self.assertEqual(log_level("debug"), logging.DEBUG)
        self.assertEqual(log_level(" WARNING "), logging.WARNING)

    def test_unknown_or_missing_level_is_info(self):
        self.assertEqual(log_level("verbose"), logging.INFO)
        self.assertEqual(log_level(None), logging.INFO)
        self.assertEqual(log_level(""), logging.INFO)


if __name__ == "__main__":
    unittest.main()
