# pricematch/sources/flipkart_source.py

"""Adapter for the RapidAPI real-time Flipkart product search."""

from typing import Any

from pricematch.models.record import CanonicalRecord
from pricematch.models.source import SourceId
from pricematch.sources.base_source import BaseSource


class FlipkartSource(BaseSource):
    """Adapter for Flipkart listings via RapidAPI."""

    source_id = SourceId.FLIPKART
    API_HOST = "real-time-flipkart-data2.p.rapidapi.com"
    SEARCH_URL = (
        "https://real-time-flipkart-data2.p.rapidapi.com/product-search"
    )
    QUERY_PARAM = "query"

    def _parse_item(self, item: dict[str, Any]) -> CanonicalRecord:
        """Parse a single Flipkart product into a CanonicalRecord."""
        return CanonicalRecord(
            product_name=self.text_or_default(item.get("name")),
            price=self.parse_price(item.get("price")),
            rating=self.parse_rating(item.get("rating")),
            review_count=self.parse_review_count(
                item.get("reviewCount")
            ),
            availability=self.text_or_default(
                item.get("stock"), "Unknown"
            ),
            link=self.text_or_default(item.get("url")),
            image_url=self.text_or_default(item.get("imageUrl")),
        )

    def normalize(self, payload: Any) -> list[CanonicalRecord]:
        """Normalise the ``products`` array of a Flipkart payload."""
        items = self._extract_items(payload, "products")
        return [self._parse_item(item) for item in items]
