"""Error taxonomy for retrieval and analysis."""


class RadarError(Exception):
    """Base class for all Relation Radar errors."""


class SourceUnavailableError(RadarError):
    """A single provider or news source failed. Always recoverable by fallback or skip."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"{source} unavailable: {reason}")
        self.source = source
        self.reason = reason


class UnknownSourceError(RadarError):
    """An article references a source that is not in the registry."""

    def __init__(self, source: str) -> None:
        super().__init__(f"No source configuration registered for {source!r}")
        self.source = source


class InvalidDateError(RadarError, ValueError):
    """Date text could not be parsed. Callers resolve it to an unknown date."""


class NoDataError(RadarError):
    """No articles are available for the requested subject."""

    def __init__(self, subject: str) -> None:
        super().__init__(f"No analysis data found for {subject!r}")
        self.subject = subject


class PersistenceError(RadarError):
    """A durable store could not be read or written."""
