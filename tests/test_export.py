import unittest
from datetime import date, datetime, timezone

from photoscout.export import escape_xml, export_trip_to_gpx, export_trip_to_kml
from photoscout.geo import Coordinates
from photoscout.routing import estimate_route
from photoscout.trip import Trip, TripStop

NOW = datetime(2024, 10, 5, 5, 30, tzinfo=timezone.utc)


def make_trip():
    stops = (
        TripStop(id="1", name="Bridge & Tower", coordinates=Coordinates(51.5055, -0.0754),
                 planned_duration_minutes=45, planned_arrival="06:10", notes="Blue hour <east>"),
        TripStop(id="2", name="St Paul's", coordinates=Coordinates(51.5138, -0.0984)),
    )
    return Trip(name="London dawn", stops=stops, trip_date="2024-10-05", description="Sunrise walk")


class TestEscape(unittest.TestCase):
    def test_escape_xml(self):
        self.assertEqual(escape_xml("a & b <c> \"d\" 'e'"), "a &amp; b &lt;c&gt; &quot;d&quot; &apos;e&apos;")


class TestGpx(unittest.TestCase):
    def test_waypoints(self):
        gpx = export_trip_to_gpx(make_trip(), now=NOW)
        self.assertTrue(gpx.startswith('<?xml version="1.0" encoding="UTF-8"?>'))
        self.assertIn('<wpt lat="51.5055" lon="-0.0754">', gpx)
        self.assertIn("<name>Bridge &amp; Tower</name>", gpx)
        self.assertIn("<desc>Blue hour &lt;east&gt;\nDuration: 45 min\nArrival: 06:10</desc>", gpx)
        self.assertIn("<name>St Paul&apos;s</name>", gpx)
        self.assertIn("<desc>Sunrise walk | Date: 2024-10-05 | Transport: driving | Stops: 2</desc>", gpx)
        self.assertIn("<time>2024-10-05T05:30:00Z</time>", gpx)
        self.assertNotIn("<trk>", gpx)
        self.assertTrue(gpx.endswith("</gpx>"))

    def test_track_from_route(self):
        trip = make_trip()
        trip = trip.with_route(estimate_route(trip.coordinates, "walking"))
        gpx = export_trip_to_gpx(trip, now=NOW)
        self.assertIn("<name>London dawn Route</name>", gpx)
        self.assertIn('<trkpt lat="51.5138" lon="-0.0984"></trkpt>', gpx)


class TestKml(unittest.TestCase):
    def test_placemarks(self):
        kml = export_trip_to_kml(make_trip(), today=date(2024, 1, 1))
        self.assertIn('<kml xmlns="http://www.opengis.net/kml/2.2">', kml)
        self.assertIn("<name>1. Bridge &amp; Tower</name>", kml)
        self.assertIn("<name>2. St Paul&apos;s</name>", kml)
        self.assertIn("<coordinates>-0.0754,51.5055,0</coordinates>", kml)
        self.assertNotIn("<LineString>", kml)
        self.assertTrue(kml.endswith("</kml>"))

    def test_route_line_and_default_date(self):
        trip = Trip(name="No date", stops=make_trip().stops, transport_mode="cycling")
        trip = trip.with_route(estimate_route(trip.coordinates, "cycling"))
        kml = export_trip_to_kml(trip, today=date(2024, 1, 1))
        self.assertIn("<LineString>", kml)
        self.assertIn("-0.0984,51.5138,0", kml)
        self.assertIn("Date: 2024-01-01 | Transport: cycling | Stops: 2", kml)


if __name__ == "__main__":
    unittest.main()
