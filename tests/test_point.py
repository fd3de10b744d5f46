from __future__ import annotations

import math
import unittest

from seriesplot.point import BoundingBox, Point2, ieee_div


class PointTests(unittest.TestCase):
    def test_componentwise_arithmetic_with_points_and_scalars(self) -> None:
        a = Point2(1.0, 2.0)
        b = Point2(3.0, 5.0)
        self.assertEqual(a + b, Point2(4.0, 7.0))
        self.assertEqual(b - a, Point2(2.0, 3.0))
        self.assertEqual(a * b, Point2(3.0, 10.0))
        self.assertEqual(a * 2.0, Point2(2.0, 4.0))
        self.assertEqual(b / 2.0, Point2(1.5, 2.5))
        self.assertEqual(-a, Point2(-1.0, -2.0))
        self.assertEqual(a + 1.0, Point2(2.0, 3.0))

    def test_division_by_zero_follows_ieee(self) -> None:
        p = Point2(0.0, 1.0) / 0.0
        self.assertTrue(math.isnan(p.x))
        self.assertEqual(p.y, math.inf)
        self.assertEqual(ieee_div(-2.0, 0.0), -math.inf)
        self.assertFalse(p.is_finite())

    def test_rotate_is_counter_clockwise(self) -> None:
        p = Point2(1.0, 0.0).rotate(math.pi / 2.0)
        self.assertAlmostEqual(p.x, 0.0)
        self.assertAlmostEqual(p.y, 1.0)

    def test_bounding_box_area_and_map(self) -> None:
        bb = BoundingBox(Point2(0.1, 0.2), Point2(0.5, 1.0))
        area = bb.area()
        self.assertAlmostEqual(area.x, 0.4)
        self.assertAlmostEqual(area.y, 0.8)
        doubled = bb.map(lambda p: p * 2.0)
        self.assertEqual(doubled.top_right, Point2(1.0, 2.0))


if __name__ == "__main__":
    unittest.main()
