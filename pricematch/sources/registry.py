# pricematch/sources/registry.py

"""Closed mapping from source identifier to adapter class."""

from pricematch.models.source import SourceId
from pricematch.sources.amazon_source import AmazonSource
from pricematch.sources.base_source import BaseSource
from pricematch.sources.flipkart_source import FlipkartSource

ADAPTERS: dict[SourceId, type[BaseSource]] = {
    SourceId.AMAZON: AmazonSource,
    SourceId.FLIPKART: FlipkartSource,
}


def adapter_for(
    source_id: str | SourceId, timeout: float | None = None,
) -> BaseSource:
    """Instantiate the adapter registered for *source_id*.

    Unknown ids raise ``ConfigurationError`` before any session exists.
    """
    return ADAPTERS[SourceId.parse(source_id)](timeout=timeout)
