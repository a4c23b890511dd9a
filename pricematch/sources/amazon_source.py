# pricematch/sources/amazon_source.py

"""Adapter for the RapidAPI real-time Amazon search endpoint."""

from typing import Any

from pricematch.models.record import CanonicalRecord
from pricematch.models.source import SourceId
from pricematch.sources.base_source import BaseSource


class AmazonSource(BaseSource):
    """Adapter for Amazon listings via RapidAPI.

    Prices and review counts arrive as display text
    (``"₹1,299.00"``, ``"2,345"``) and are cleaned before parsing.
    """

    source_id = SourceId.AMAZON
    API_HOST = "real-time-amazon-data.p.rapidapi.com"
    SEARCH_URL = "https://real-time-amazon-data.p.rapidapi.com/search"
    QUERY_PARAM = "q"

    def _parse_item(self, item: dict[str, Any]) -> CanonicalRecord:
        """Parse a single Amazon result into a CanonicalRecord."""
        return CanonicalRecord(
            product_name=self.text_or_default(item.get("title")),
            price=self.parse_price(item.get("price")),
            rating=self.parse_rating(item.get("rating")),
            review_count=self.parse_review_count(item.get("reviews")),
            availability=self.text_or_default(
                item.get("availability"), "Unknown"
            ),
            link=self.text_or_default(item.get("link")),
            image_url=self.text_or_default(item.get("image")),
        )

    def normalize(self, payload: Any) -> list[CanonicalRecord]:
        """Normalise the ``results`` array of an Amazon payload."""
        items = self._extract_items(payload, "results")
        return [self._parse_item(item) for item in items]
