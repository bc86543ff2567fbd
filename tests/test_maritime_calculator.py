import unittest
from datetime import datetime, timedelta

from src.maritime_calculator import (
    SCATTERY_OFFSET_NM,
    WAYPOINTS,
    ShipPosition,
    calculate,
    calculate_with_waypoint,
    find_next_waypoint,
    format_coords,
    great_circle_nm,
    parse_coordinates,
    validate_position,
)

NOW = datetime(2026, 3, 14, 12, 0)


def _waypoint(name: str):
    return next(wp for wp in WAYPOINTS if wp.name == name)


class TestGreatCircle(unittest.TestCase):
    def test_same_point_is_zero(self):
        self.assertEqual(great_circle_nm(52.5, -9.7, 52.5, -9.7), 0.0)

    def test_one_degree_of_latitude_is_sixty_miles(self):
        self.assertAlmostEqual(great_circle_nm(52.0, -10.0, 53.0, -10.0), 60.0, places=6)


class TestNextWaypoint(unittest.TestCase):
    def test_inside_the_estuary_mouth_heads_for_kilcredaun(self):
        kil = _waypoint("Kilcreadaun")
        self.assertEqual(find_next_waypoint(kil.lat, -kil.long).name, "Kilcreadaun")

    def test_guard_point_redirects_to_the_following_waypoint(self):
        # Just south of Slyne Head: the ship has rounded it and is heading for Loop Head.
        self.assertEqual(find_next_waypoint(53.39683, 10.46664).name, "Loop Head")


class TestCalculate(unittest.TestCase):
    def test_at_kilcredaun_eta_is_report_time(self):
        position = ShipPosition(lat=52, latmin=33.2, long=9, longmin=43.0, speed=10.0)
        result = calculate_with_waypoint(position, _waypoint("Kilcreadaun"), now=NOW)
        self.assertLess(result.dist_to_kilcredaun, 0.1)
        self.assertLess(abs((result.eta_kilcredaun - NOW).total_seconds()), 60)

    def test_scattery_is_nine_miles_past_kilcredaun(self):
        position = ShipPosition(lat=52, latmin=0, long=11, longmin=0, speed=12.0)
        result = calculate(position, now=NOW)
        self.assertAlmostEqual(result.dist_to_scattery - result.dist_to_kilcredaun, SCATTERY_OFFSET_NM)
        self.assertEqual(
            result.eta_scattery - result.eta_kilcredaun,
            timedelta(hours=SCATTERY_OFFSET_NM / 12.0),
        )

    def test_distance_includes_waypoint_run_to_kilcredaun(self):
        loop_head = _waypoint("Loop Head")
        position = ShipPosition(lat=52, latmin=32.0, long=10, longmin=0.0, speed=10.0)
        result = calculate_with_waypoint(position, loop_head, now=NOW)
        self.assertLess(result.dist_to_waypoint, 0.1)
        self.assertAlmostEqual(result.dist_to_kilcredaun, result.dist_to_waypoint + loop_head.dist)
        self.assertAlmostEqual(result.hours_to_kilcredaun, result.dist_to_kilcredaun / 10.0)

    def test_report_delay_moves_start_time_back(self):
        position = ShipPosition(delay_hrs=1, delay_mns=30)
        result = calculate(position, now=NOW)
        self.assertEqual(result.from_time, datetime(2026, 3, 14, 10, 30))

    def test_zero_speed_is_rejected_with_actionable_message(self):
        with self.assertRaises(ValueError) as ctx:
            calculate(ShipPosition(speed=0), now=NOW)
        self.assertIn("Speed", str(ctx.exception))
        self.assertIn("Fix:", str(ctx.exception))

    def test_latitude_out_of_range_is_rejected(self):
        with self.assertRaises(ValueError):
            validate_position(ShipPosition(lat=95))


class TestCoordinates(unittest.TestCase):
    def test_parse_decimal_degrees(self):
        position = parse_coordinates("52.5, -9.75", speed=14.0)
        self.assertEqual(position.lat, 52.0)
        self.assertAlmostEqual(position.latmin, 30.0)
        self.assertEqual(position.long, 9.0)
        self.assertAlmostEqual(position.longmin, 45.0)
        self.assertEqual(position.speed, 14.0)

    def test_parse_rejects_bad_text(self):
        for text in ("52.5", "north, west", ", -9.8"):
            with self.subTest(text=text):
                with self.assertRaises(ValueError) as ctx:
                    parse_coordinates(text)
                self.assertIn("Fix:", str(ctx.exception))

    def test_format_coords(self):
        position = ShipPosition(lat=52, latmin=30, long=9, longmin=45)
        self.assertEqual(format_coords(position), "52.5000, -9.7500")
        self.assertEqual(format_coords(position.as_dict()), "52.5000, -9.7500")
        self.assertEqual(format_coords(None), "")


if __name__ == "__main__":
    unittest.main()
