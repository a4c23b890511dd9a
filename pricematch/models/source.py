# pricematch/models/source.py

"""Supported source identifiers and the validated search query."""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pricematch.errors import ConfigurationError


class SourceId(str, Enum):
    """Closed set of data sources the engine can query."""

    AMAZON = "amazon"
    FLIPKART = "flipkart"

    @classmethod
    def parse(cls, value: "str | SourceId") -> "SourceId":
        """Return the member for *value* or raise ``ConfigurationError``."""
        if isinstance(value, SourceId):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            msg = f"Platform {value!r} not supported (available: {valid})"
            raise ConfigurationError(msg) from None


@dataclass(frozen=True)
class SourceQuery:
    """A trimmed free-text query plus the sources to dispatch it to."""

    text: str
    sources: tuple[SourceId, ...]

    @classmethod
    def create(
        cls,
        text: str,
        sources: Iterable["str | SourceId"],
    ) -> "SourceQuery":
        """Validate and normalise raw input into a ``SourceQuery``.

        Duplicate sources collapse onto their first occurrence.
        """
        trimmed = (text or "").strip()
        if not trimmed:
            raise ConfigurationError("Search query is required")

        resolved: list[SourceId] = []
        for raw in sources:
            source_id = SourceId.parse(raw)
            if source_id not in resolved:
                resolved.append(source_id)
        if not resolved:
            raise ConfigurationError(
                "At least one platform must be selected"
            )
        return cls(text=trimmed, sources=tuple(resolved))

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "SourceQuery":
        """Build a query from the ``{query, platforms}`` request body."""
        query = payload.get("query")
        platforms = payload.get("platforms")
        if not isinstance(query, str):
            raise ConfigurationError("Search query is required")
        if not isinstance(platforms, list):
            raise ConfigurationError(
                "At least one platform must be selected"
            )
        return cls.create(query, platforms)
