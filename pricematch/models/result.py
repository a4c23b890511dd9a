# pricematch/models/result.py

"""Aggregation and matching result containers."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from pricematch.errors import (
    ConfigurationError,
    SourceError,
    SourceTimeoutError,
)
from pricematch.models.record import CanonicalRecord
from pricematch.models.source import SourceId


@dataclass(frozen=True)
class SourceFailure:
    """Error descriptor occupying a failed source's result slot."""

    source: SourceId
    reason: str
    timed_out: bool = False

    @classmethod
    def from_error(cls, error: SourceError) -> "SourceFailure":
        """Convert a raised ``SourceError`` into a result value."""
        return cls(
            source=SourceId.parse(error.source),
            reason=(
                f"Failed to fetch results from {error.source}: "
                f"{error.reason}"
            ),
            timed_out=isinstance(error, SourceTimeoutError),
        )

    def to_dict(self) -> dict[str, str]:
        """Serialise to the wire ``{"error": ...}`` object."""
        return {"error": self.reason}


SourceOutcome = list[CanonicalRecord] | SourceFailure


@dataclass
class AggregationResult:
    """Per-source outcome of one aggregation request.

    Holds exactly one entry per requested source: either the
    ordered record list (possibly empty) or a ``SourceFailure``.
    """

    entries: dict[SourceId, SourceOutcome] = field(
        default_factory=lambda: dict[SourceId, SourceOutcome]()
    )

    def __getitem__(self, source: str | SourceId) -> SourceOutcome:
        return self.entries[SourceId.parse(source)]

    def __contains__(self, source: object) -> bool:
        if not isinstance(source, str):
            return False
        try:
            return SourceId.parse(source) in self.entries
        except ConfigurationError:
            return False

    def __iter__(self) -> Iterator[SourceId]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def records(self, source: str | SourceId) -> list[CanonicalRecord]:
        """Return the records for *source*, or ``[]`` if it failed."""
        outcome = self[source]
        if isinstance(outcome, SourceFailure):
            return []
        return outcome

    @property
    def failures(self) -> dict[SourceId, SourceFailure]:
        """Sources that failed, with their error descriptors."""
        return {
            sid: outcome
            for sid, outcome in self.entries.items()
            if isinstance(outcome, SourceFailure)
        }

    @property
    def succeeded(self) -> list[SourceId]:
        """Sources that returned a record list."""
        return [
            sid
            for sid, outcome in self.entries.items()
            if not isinstance(outcome, SourceFailure)
        ]

    @property
    def is_partial(self) -> bool:
        """True when some, but not all, sources failed."""
        return bool(self.failures) and bool(self.succeeded)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire object keyed by source id."""
        payload: dict[str, Any] = {}
        for sid, outcome in self.entries.items():
            if isinstance(outcome, SourceFailure):
                payload[sid.value] = outcome.to_dict()
            else:
                payload[sid.value] = [r.to_dict() for r in outcome]
        return payload


@dataclass(frozen=True)
class MatchedPair:
    """Two records from different sources believed to be one product."""

    left: CanonicalRecord
    right: CanonicalRecord
    similarity_score: float

    @property
    def price_difference(self) -> float:
        """Right price minus left price."""
        return self.right.price - self.left.price

    @property
    def cheaper(self) -> str | None:
        """``"left"`` or ``"right"``, or None if equal or unpriced."""
        if self.left.price <= 0 or self.right.price <= 0:
            return None
        if self.left.price < self.right.price:
            return "left"
        if self.right.price < self.left.price:
            return "right"
        return None

    @property
    def savings(self) -> float:
        """Amount saved by buying from the cheaper side."""
        if self.cheaper is None:
            return 0.0
        return abs(self.price_difference)

    @property
    def savings_percent(self) -> float:
        """Savings relative to the more expensive price."""
        if self.cheaper is None:
            return 0.0
        higher = max(self.left.price, self.right.price)
        return self.savings / higher * 100

    def to_dict(
        self,
        left_key: str = "left",
        right_key: str = "right",
    ) -> dict[str, Any]:
        """Serialise with caller-chosen keys for each side."""
        return {
            left_key: self.left.to_dict(),
            right_key: self.right.to_dict(),
            "similarityScore": self.similarity_score,
        }
