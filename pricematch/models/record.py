# pricematch/models/record.py

"""Canonical listing model shared by every source adapter."""

from dataclasses import dataclass
from typing import Any


@dataclass
class CanonicalRecord:
    """One normalised product listing, independent of source schema.

    Every field carries a safe default so a record is never
    partially constructed.
    """

    product_name: str = ""
    price: float = 0.0
    rating: float = 0.0
    review_count: int = 0
    availability: str = "Unknown"
    link: str = ""
    image_url: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialise using the wire field names."""
        return {
            "productName": self.product_name,
            "price": self.price,
            "rating": self.rating,
            "reviews": self.review_count,
            "availability": self.availability,
            "link": self.link,
            "image": self.image_url,
        }
