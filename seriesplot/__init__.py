from seriesplot.config import GraphConfig, parse_config
from seriesplot.errors import ConfigError, ExclusiveArgumentsError, PlotError, SeriesParseError
from seriesplot.figure import Figure, SeriesSummary
from seriesplot.font import DEFAULT_FONT, Font, Glyph, StrokeBuilder
from seriesplot.point import BoundingBox, Point2
from seriesplot.scales import AxisFrame
from seriesplot.series import SampleSeries, SeriesBuilder, load_series, parse_series
from seriesplot.stats import Correlation, LinearFit, correlation, least_squares

__all__ = [
    "AxisFrame",
    "BoundingBox",
    "ConfigError",
    "Correlation",
    "DEFAULT_FONT",
    "ExclusiveArgumentsError",
    "Figure",
    "Font",
    "Glyph",
    "GraphConfig",
    "LinearFit",
    "PlotError",
    "Point2",
    "SampleSeries",
    "SeriesBuilder",
    "SeriesParseError",
    "SeriesSummary",
    "StrokeBuilder",
    "correlation",
    "least_squares",
    "load_series",
    "parse_series",
    "parse_config",
]
