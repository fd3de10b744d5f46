from __future__ import annotations

import argparse
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from seriesplot.errors import ConfigError, ExclusiveArgumentsError


DEFAULT_WIDTH = 4000
DEFAULT_HEIGHT = 2000
DEFAULT_OUTPUT = Path("graph.ppm")

# [plot] table key -> GraphConfig field
_FILE_KEYS = {
    "log_scale": "log_scale",
    "min_avg": "min_avg",
    "min": "min_height",
    "max": "max_height",
    "running_avg": "running_avg",
    "line": "plot_line",
    "width": "width",
    "height": "height",
    "output": "output",
    "inputs": "paths",
}


@dataclass(frozen=True)
class GraphConfig:
    log_scale: float | None = None
    min_avg: float | None = None
    min_height: float | None = None
    max_height: float | None = None
    running_avg: int | None = None
    plot_line: bool = False
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    output: Path = DEFAULT_OUTPUT
    paths: tuple[Path, ...] = ()

    def __post_init__(self) -> None:
        if self.min_avg is not None and self.min_height is not None:
            raise ExclusiveArgumentsError("--min-avg", "--min")
        if self.width <= 0 or self.height <= 0:
            raise ConfigError(f"canvas size must be positive, got {self.width}x{self.height}")
        if self.running_avg is not None and self.running_avg <= 0:
            raise ConfigError(f"running average window must be > 0, got {self.running_avg}")


def load_config_file(path: str | Path) -> dict[str, Any]:
    """Read the `[plot]` table of a TOML file into GraphConfig keyword arguments."""
    path = Path(path)
    try:
        with path.open("rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: invalid TOML: {exc}") from exc

    table = raw.get("plot", {})
    if not isinstance(table, dict):
        raise ConfigError(f"{path}: [plot] must be a table")
    unknown = sorted(set(table) - set(_FILE_KEYS))
    if unknown:
        raise ConfigError(f"{path}: unknown [plot] keys: {', '.join(unknown)}")

    out: dict[str, Any] = {}
    for key, value in table.items():
        name = _FILE_KEYS[key]
        if name == "output":
            value = Path(value)
        elif name == "paths":
            if not isinstance(value, list):
                raise ConfigError(f"{path}: `inputs` must be a list of paths")
            value = tuple(path.parent / str(v) for v in value)
        out[name] = value
    return out


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="seriesplot",
        description="Render numeric time-series files into a single line chart image.",
    )
    parser.add_argument("paths", nargs="*", type=Path, help="Input series files, one sample per line.")
    parser.add_argument("-l", "--log", dest="log_scale", type=float, default=None, help="Exponent applied to normalized y.")
    parser.add_argument(
        "--min-avg",
        dest="min_avg",
        type=float,
        default=None,
        help="Extend the bottom past the minimum by this multiple of |mean - min|.",
    )
    parser.add_argument("-m", "--min", dest="min_height", type=float, default=None, help="Fixed bottom of the y axis.")
    parser.add_argument("-M", "--max", dest="max_height", type=float, default=None, help="Fixed top of the y axis.")
    parser.add_argument("-r", "--running-avg", dest="running_avg", type=int, default=None, help="Running average window.")
    parser.add_argument("-L", "--line", dest="plot_line", action="store_true", default=None, help="Draw a best-fit line.")
    parser.add_argument("-W", "--width", type=int, default=None, help=f"Image width in pixels. Default: {DEFAULT_WIDTH}.")
    parser.add_argument("-H", "--height", type=int, default=None, help=f"Image height in pixels. Default: {DEFAULT_HEIGHT}.")
    parser.add_argument("-o", "--output", type=Path, default=None, help=f"Output image. Default: {DEFAULT_OUTPUT}.")
    parser.add_argument("-c", "--config", type=Path, default=None, help="TOML file with a [plot] table.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def resolve_config(args: argparse.Namespace) -> GraphConfig:
    """Merge the optional config file with command-line values; the command line wins."""
    values: dict[str, Any] = {}
    if args.config is not None:
        values.update(load_config_file(args.config))

    for name in ("log_scale", "min_avg", "min_height", "max_height", "running_avg", "plot_line", "width", "height", "output"):
        value = getattr(args, name)
        if value is not None:
            values[name] = value
    if args.paths:
        values["paths"] = tuple(args.paths)
    return GraphConfig(**values)


def parse_config(argv: Sequence[str] | None = None) -> GraphConfig:
    return resolve_config(build_parser().parse_args(argv))
