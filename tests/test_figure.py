from __future__ import annotations

import math
import tempfile
import unittest
from pathlib import Path

import numpy as np

from seriesplot.config import GraphConfig
from seriesplot.figure import PALETTE, TOP_LABEL_HEIGHT, Figure, Xorshift32, series_colors
from seriesplot.point import Point2
from seriesplot.raster import Color, PixelBuffer


def _has_color(image: PixelBuffer, color: Color) -> bool:
    return bool(np.any(np.all(image.data == np.asarray(color.rgb, dtype=np.uint8), axis=2)))


class PaletteTests(unittest.TestCase):
    def test_palette_comes_first_then_xorshift(self) -> None:
        colors = series_colors()
        head = [next(colors) for _ in range(len(PALETTE))]
        self.assertEqual(tuple(head), PALETTE)

        rng = Xorshift32()
        value = rng.next()
        self.assertEqual(next(colors), Color(value & 0xFF, (value >> 8) & 0xFF, (value >> 16) & 0xFF))

    def test_xorshift_is_deterministic_and_32_bit(self) -> None:
        a = Xorshift32()
        b = Xorshift32()
        seq_a = [a.next() for _ in range(100)]
        seq_b = [b.next() for _ in range(100)]
        self.assertEqual(seq_a, seq_b)
        self.assertTrue(all(0 < v <= 0xFFFFFFFF for v in seq_a))
        self.assertGreater(len(set(seq_a)), 90)


class FigureTests(unittest.TestCase):
    def test_render_draws_each_series_in_its_palette_color(self) -> None:
        fig = Figure(GraphConfig(width=800, height=400))
        fig.add_lines(["1", "3", "2", "5"], source_name="a")
        fig.add_lines(["4", "2", "4", "1"], source_name="b")
        image = fig.render()
        self.assertEqual(image.data.shape, (400, 800, 3))
        self.assertTrue(_has_color(image, PALETTE[0]))
        self.assertTrue(_has_color(image, PALETTE[1]))
        self.assertFalse(_has_color(image, PALETTE[2]))
        # border and labels
        self.assertTrue(_has_color(image, Color.black()))

    def test_running_average_and_best_fit_are_drawn(self) -> None:
        config = GraphConfig(width=800, height=400, running_avg=2, plot_line=True)
        fig = Figure(config)
        fig.add_lines(["1", "2", "3", "2", "5", "4"])
        image = fig.render()
        color = PALETTE[0]
        self.assertTrue(_has_color(image, Color.white().lerp(color, 0.6)))
        self.assertTrue(_has_color(image, Color.black().lerp(color, 0.75)))

    def test_degenerate_series_renders_without_raising(self) -> None:
        fig = Figure(GraphConfig(width=200, height=100, plot_line=True))
        fig.add_lines(["5.0"])
        fig.add_lines(["5.0"])
        self.assertTrue(math.isnan(fig.frame.position(fig.series[0].points[0]).y))
        image = fig.render()
        self.assertEqual(image.data.shape, (100, 200, 3))
        self.assertFalse(_has_color(image, PALETTE[0]))

    def test_empty_figure_and_empty_canvas(self) -> None:
        fig = Figure(GraphConfig(width=120, height=60))
        self.assertEqual(fig.render().data.shape, (60, 120, 3))
        self.assertEqual(fig.render(0, 10).data.shape, (10, 0, 3))

    def test_best_fit_stays_inside_plot(self) -> None:
        fig = Figure(GraphConfig(width=400, height=200, plot_line=True))
        series = fig.add_lines(["1", "3", "2", "5"])
        segment = fig.best_fit_segment(series)
        self.assertIsNotNone(segment)
        assert segment is not None
        for point in segment:
            self.assertTrue(0.0 <= point.x <= 1.0)
            self.assertTrue(0.0 <= point.y <= 1.0)

    def test_best_fit_outside_frame_is_not_drawn(self) -> None:
        config = GraphConfig(width=400, height=200, min_height=0.0, max_height=2.0, plot_line=True)
        fig = Figure(config)
        series = fig.add_lines(["5", "6", "7", "8"])
        self.assertIsNone(fig.best_fit_segment(series))
        image = fig.render()
        self.assertFalse(_has_color(image, Color.black().lerp(PALETTE[0], 0.75)))

    def test_unit_labels(self) -> None:
        fig = Figure()
        fig.add_lines(["0", "100"])
        labels = fig.unit_labels()
        self.assertEqual([t for t, _ in labels], [0.0, 0.25, 0.5, 0.75, 1.0])
        for (_, value), expected in zip(labels, (0.0, 25.0, 50.0, 75.0, 100.0)):
            self.assertAlmostEqual(value, expected)

    def test_unit_labels_under_log_scale(self) -> None:
        fig = Figure(GraphConfig(log_scale=2.0))
        fig.add_lines(["0", "100"])
        values = [value for _, value in fig.unit_labels()]
        expected = (0.0, 50.0, 100.0 * math.sqrt(0.5), 100.0 * math.sqrt(0.75), 100.0)
        for value, want in zip(values, expected):
            self.assertAlmostEqual(value, want)
        for t, value in fig.unit_labels():
            self.assertAlmostEqual(fig.frame.position(Point2(1.0, value)).y, t)

    def test_top_label_uses_the_taller_box(self) -> None:
        fig = Figure(GraphConfig(width=800, height=400))
        fig.add_lines(["0", "1"])
        # label column only, left of the tick caps
        rows = np.nonzero(np.any(np.all(fig.render().data[:, :68] == 0, axis=2), axis=1))[0]
        top_rows = rows[rows < 400 * 2 * TOP_LABEL_HEIGHT]
        bottom_rows = rows[rows > 400 * (1.0 - 2 * TOP_LABEL_HEIGHT)]
        top_span = int(top_rows.max() - top_rows.min())
        bottom_span = int(bottom_rows.max() - bottom_rows.min())
        self.assertGreater(top_span, bottom_span + 1)

    def test_summaries(self) -> None:
        fig = Figure()
        fig.add_lines(["1", "3", "5"], source_name="linear")
        (summary,) = fig.summaries()
        self.assertEqual(summary.source_name, "linear")
        self.assertEqual(summary.count, 3)
        self.assertEqual((summary.lowest, summary.highest), (1.0, 5.0))
        self.assertAlmostEqual(summary.fit.slope, 2.0)
        self.assertAlmostEqual(summary.fit.intercept, -1.0)
        self.assertAlmostEqual(summary.correlation.r, 1.0)

    def test_save_uses_configured_output(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            out = Path(td) / "chart.png"
            fig = Figure(GraphConfig(width=160, height=80, output=out))
            fig.add_lines(["1", "2"])
            self.assertEqual(fig.save(), out)
            loaded = PixelBuffer.load(out)
        self.assertEqual((loaded.width, loaded.height), (160, 80))


if __name__ == "__main__":
    unittest.main()
