from __future__ import annotations

import logging
from typing import Sequence

from seriesplot.config import build_parser, resolve_config
from seriesplot.errors import PlotError
from seriesplot.figure import Figure


LOGGER = logging.getLogger("seriesplot")


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = resolve_config(args)
        if not config.paths:
            parser.error("no input files given")
        fig = Figure(config)
        for path in config.paths:
            fig.load(path)
        if config.plot_line:
            for summary in fig.summaries():
                LOGGER.info(
                    "%s: slope=%.6g intercept=%.6g r=%.6g t=%.6g density=%.6g",
                    summary.source_name,
                    summary.fit.slope,
                    summary.fit.intercept,
                    summary.correlation.r,
                    summary.correlation.t,
                    summary.correlation.significance,
                )
        out = fig.save()
    except (PlotError, OSError) as exc:
        LOGGER.error("%s", exc)
        return 1

    LOGGER.info("wrote %s", out)
    return 0
