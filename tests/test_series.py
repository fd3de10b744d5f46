from __future__ import annotations

import math
import tempfile
import unittest
from pathlib import Path

import numpy as np

from seriesplot.errors import PlotError, SeriesParseError
from seriesplot.point import Point2
from seriesplot.series import SeriesBuilder, load_series, parse_series, running_average


class SeriesParsingTests(unittest.TestCase):
    def test_step_directive_offsets_first_sample(self) -> None:
        series = parse_series(["step 2", "1.0", "3.0", "5.0"])
        self.assertEqual(series.points, (Point2(2.0, 1.0), Point2(4.0, 3.0), Point2(6.0, 5.0)))
        self.assertEqual(series.lowest, 1.0)
        self.assertEqual(series.highest, 5.0)
        self.assertIsNone(series.averages)

    def test_default_step_and_whitespace(self) -> None:
        series = parse_series(["  4.5 \n", "\t-2\n"])
        self.assertEqual(series.points, (Point2(1.0, 4.5), Point2(2.0, -2.0)))

    def test_step_can_change_mid_stream(self) -> None:
        series = parse_series(["1", "step 0.5", "2", "3"])
        self.assertEqual([p.x for p in series.points], [1.0, 1.5, 2.0])

    def test_points_are_sorted_by_x(self) -> None:
        series = parse_series(["step -1", "1", "2"])
        self.assertEqual(series.points, (Point2(-2.0, 2.0), Point2(-1.0, 1.0)))
        self.assertEqual(series.first(), Point2(-2.0, 2.0))
        self.assertEqual(series.last(), Point2(-1.0, 1.0))

    def test_invalid_line_reports_position(self) -> None:
        with self.assertRaises(SeriesParseError) as ctx:
            parse_series(["1.0", "abc"], source_name="cpu.txt")
        self.assertEqual(ctx.exception.line_number, 2)
        self.assertEqual(ctx.exception.text, "abc")
        self.assertIn("cpu.txt:2", str(ctx.exception))
        self.assertIsInstance(ctx.exception, PlotError)

    def test_rejected_lines(self) -> None:
        for bad in ("step", "step two", "Step 2", "1_000", "1 2", ""):
            with self.subTest(line=bad):
                with self.assertRaises(SeriesParseError):
                    parse_series([bad])

    def test_empty_input_gives_empty_series(self) -> None:
        series = parse_series([])
        self.assertEqual(len(series), 0)
        self.assertIsNone(series.lowest)
        self.assertIsNone(series.last())
        self.assertEqual(series.average_points(), ())

    def test_load_series_uses_path_as_source(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "mem.txt"
            path.write_text("step 10\n1\n2\n", encoding="utf-8")
            series = load_series(path, running_avg=2)
        self.assertEqual(series.source_name, str(path))
        self.assertEqual(series.points[-1], Point2(20.0, 2.0))
        self.assertEqual(len(series.averages or ()), 2)

    def test_undecodable_file_is_a_parse_error(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "binary.txt"
            path.write_bytes(b"1.0\n\xff\xfe\n3.0\n")
            with self.assertRaises(SeriesParseError) as ctx:
                load_series(path)
        self.assertEqual(ctx.exception.line_number, 2)
        self.assertEqual(ctx.exception.source, str(path))
        self.assertIsInstance(ctx.exception.__cause__, UnicodeDecodeError)

    def test_crlf_line_endings(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "dos.txt"
            path.write_bytes(b"step 2\r\n1\r\n2\r\n")
            series = load_series(path)
        self.assertEqual(series.points, (Point2(2.0, 1.0), Point2(4.0, 2.0)))


class RunningAverageTests(unittest.TestCase):
    def test_trailing_window_of_prior_samples(self) -> None:
        out = running_average(np.asarray([1.0, 2.0, 3.0, 4.0]), 2)
        self.assertTrue(math.isnan(out[0]))
        np.testing.assert_allclose(out[1:], [1.0, 1.5, 2.5])

    def test_window_larger_than_history(self) -> None:
        out = running_average(np.asarray([2.0, 4.0, 6.0]), 10)
        np.testing.assert_allclose(out[1:], [2.0, 3.0])

    def test_builder_attaches_one_average_per_sample(self) -> None:
        builder = SeriesBuilder(running_avg=2)
        for x, y in ((3.0, 6.0), (1.0, 2.0), (2.0, 4.0)):
            builder.push(Point2(x, y))
        series = builder.complete()
        self.assertEqual([p.x for p in series.points], [1.0, 2.0, 3.0])
        averages = series.average_points()
        self.assertEqual(len(averages), 3)
        self.assertEqual(averages[2], Point2(3.0, 3.0))
        self.assertTrue(math.isnan(averages[0].y))


if __name__ == "__main__":
    unittest.main()
