# pricematch/errors.py

"""Domain exceptions raised by the aggregation pipeline."""


class PriceMatchError(Exception):
    """Base class for every pricematch error."""


class ConfigurationError(PriceMatchError, ValueError):
    """The request cannot be dispatched (unknown source, empty query).

    Always raised before any adapter is built or any I/O happens.
    """


class SourceError(PriceMatchError):
    """A single source failed to produce records."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"[{source}] {reason}")
        self.source = source
        self.reason = reason


class SourceTimeoutError(SourceError):
    """A source exceeded its per-source deadline."""

    def __init__(self, source: str, timeout: float) -> None:
        super().__init__(source, f"Timed out after {timeout:g}s")
        self.timeout = timeout
