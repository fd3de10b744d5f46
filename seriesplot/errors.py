from __future__ import annotations


class PlotError(Exception):
    pass


class SeriesParseError(PlotError, ValueError):
    def __init__(self, text: str, *, line_number: int | None = None, source: str | None = None) -> None:
        self.text = text
        self.line_number = line_number
        self.source = source
        where = source or "<input>"
        if line_number is not None:
            where = f"{where}:{line_number}"
        super().__init__(f"{where}: cannot parse sample line {text!r}")


class ConfigError(PlotError, ValueError):
    pass


class ExclusiveArgumentsError(ConfigError):
    def __init__(self, first: str, second: str) -> None:
        self.first = first
        self.second = second
        super().__init__(f"{first} and {second} are mutually exclusive")
