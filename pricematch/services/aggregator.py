# pricematch/services/aggregator.py

"""Concurrent fan-out of one query across independent sources."""

import asyncio
import logging
from collections.abc import Iterable

from pricematch.config.settings import Settings
from pricematch.errors import (
    ConfigurationError,
    SourceError,
    SourceTimeoutError,
)
from pricematch.models.record import CanonicalRecord
from pricematch.models.result import (
    AggregationResult,
    SourceFailure,
    SourceOutcome,
)
from pricematch.models.source import SourceId, SourceQuery
from pricematch.sources.base_source import BaseSource
from pricematch.sources.registry import adapter_for

logger = logging.getLogger("pricematch.aggregator")


def _build_adapter(
    source_id: SourceId, timeout: float,
) -> BaseSource:
    """Construct the adapter for *source_id* with its deadline."""
    return adapter_for(source_id, timeout=timeout)


class Aggregator:
    """Dispatches one fetch per source and collects every outcome.

    A failure or timeout on one source never affects another; the
    call returns once every dispatched fetch reached a terminal
    state, with exactly one entry per requested source.
    """

    def __init__(self, timeout: float | None = None) -> None:
        if timeout is not None and not timeout > 0:
            raise ConfigurationError(
                f"Timeout must be positive, got {timeout!r}"
            )
        self.settings = Settings()
        self._timeout = timeout
        self._registry: dict[str, dict[str, str]] = {
            s["id"]: s for s in self.settings.AVAILABLE_SOURCES
        }

    def timeout_for(self, source_id: SourceId) -> float:
        """Resolve the deadline for *source_id* in seconds."""
        if self._timeout is not None:
            return self._timeout
        override = self._registry.get(source_id.value, {}).get(
            "timeout"
        )
        if override is not None:
            return float(override)
        return self.settings.SOURCE_TIMEOUT

    async def _run_one(
        self,
        source_id: SourceId,
        adapter: BaseSource,
        query: str,
    ) -> SourceOutcome:
        """Fetch one source, converting any failure into a value."""
        timeout = self.timeout_for(source_id)
        try:
            records: list[CanonicalRecord] = await asyncio.wait_for(
                asyncio.to_thread(adapter.fetch, query),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Source %s timed out after %gs for query '%s'",
                source_id.value,
                timeout,
                query,
                extra={"source": source_id.value},
            )
            return SourceFailure.from_error(
                SourceTimeoutError(source_id.value, timeout)
            )
        except SourceError as exc:
            logger.warning(
                "Source %s failed for query '%s': %s",
                source_id.value,
                query,
                exc.reason,
                extra={"source": source_id.value},
            )
            return SourceFailure.from_error(exc)
        except Exception as exc:
            logger.error(
                "Unexpected error from source %s for query '%s': %s",
                source_id.value,
                query,
                exc,
                exc_info=exc,
                extra={"source": source_id.value},
            )
            return SourceFailure.from_error(
                SourceError(source_id.value, "Unexpected error")
            )

        logger.info(
            "Source %s returned %d records",
            source_id.value,
            len(records),
            extra={"source": source_id.value},
        )
        return records

    async def aggregate(
        self,
        query: str | SourceQuery,
        sources: Iterable[str | SourceId] = (),
    ) -> AggregationResult:
        """Query every requested source concurrently.

        Raises ``ConfigurationError`` before any I/O if the query is
        blank or a source is unsupported.
        """
        request = (
            query
            if isinstance(query, SourceQuery)
            else SourceQuery.create(query, sources)
        )
        adapters = [
            (sid, _build_adapter(sid, self.timeout_for(sid)))
            for sid in request.sources
        ]
        logger.info(
            "Dispatching '%s' to %s",
            request.text,
            ", ".join(sid.value for sid, _ in adapters),
        )

        tasks = [
            asyncio.create_task(
                self._run_one(sid, adapter, request.text)
            )
            for sid, adapter in adapters
        ]
        outcomes = await asyncio.gather(*tasks)

        result = AggregationResult(
            entries=dict(zip(request.sources, outcomes))
        )
        if result.failures:
            logger.info(
                "Aggregation for '%s' finished with %d/%d sources failed",
                request.text,
                len(result.failures),
                len(result),
            )
        return result

    def aggregate_sync(
        self,
        query: str | SourceQuery,
        sources: Iterable[str | SourceId] = (),
    ) -> AggregationResult:
        """Blocking wrapper around :meth:`aggregate`."""
        return asyncio.run(self.aggregate(query, sources))
