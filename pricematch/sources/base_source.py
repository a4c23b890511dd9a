# pricematch/sources/base_source.py

"""Abstract base class for all product-search source adapters."""

import json
import logging
import math
import re
from abc import ABC, abstractmethod
from typing import Any

from curl_cffi import CurlECode
from curl_cffi import requests as curl_requests

from pricematch.config.settings import Settings
from pricematch.errors import SourceError, SourceTimeoutError
from pricematch.models.record import CanonicalRecord
from pricematch.models.source import SourceId

_NON_PRICE_CHARS_RE = re.compile(r"[^\d.]")
_NON_DIGIT_RE = re.compile(r"\D")
_LEADING_DECIMAL_RE = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)")


class BaseSource(ABC):
    """Abstract base class for all source adapters.

    A source knows how to shape one search request for its API and
    how to normalise the raw JSON payload into ``CanonicalRecord``
    objects. Each ``fetch`` makes exactly one outbound call.
    """

    source_id: SourceId
    API_HOST: str = ""
    SEARCH_URL: str = ""
    QUERY_PARAM: str = "q"

    def __init__(self, timeout: float | None = None) -> None:
        self.source_name = self.source_id.value
        self.logger = logging.getLogger(
            f"pricematch.{self.source_name}"
        )
        self.settings = Settings()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: float = (
            timeout
            if timeout is not None
            else self.settings.SOURCE_TIMEOUT
        )

    # ── Request shaping ──────────────────────────────────

    def build_request(
        self, query: str,
    ) -> tuple[str, dict[str, str], dict[str, str]]:
        """Return the ``(url, params, headers)`` triple for *query*."""
        headers: dict[str, str] = {
            **self.settings.DEFAULT_HEADERS,
            "x-rapidapi-key": self.settings.RAPIDAPI_KEY,
            "x-rapidapi-host": self.API_HOST,
        }
        return self.SEARCH_URL, {self.QUERY_PARAM: query}, headers

    def _fetch_json(self, query: str) -> Any:
        """Perform the single GET for *query* and decode its body."""
        if not self.settings.RAPIDAPI_KEY:
            raise SourceError(
                self.source_name, "RAPIDAPI_KEY is not configured"
            )
        url, params, headers = self.build_request(query)
        try:
            resp = self.session.get(
                url,
                params=params,
                headers=headers,
                timeout=self._request_timeout,
            )
        except Exception as exc:
            if getattr(exc, "code", None) == CurlECode.OPERATION_TIMEDOUT:
                raise SourceTimeoutError(
                    self.source_name, self._request_timeout
                ) from exc
            self.logger.warning(
                "[%s] Request error: %s",
                self.source_name,
                exc,
                exc_info=True,
            )
            raise SourceError(
                self.source_name, f"Request failed: {exc}"
            ) from exc

        if not 200 <= resp.status_code < 300:
            self.logger.warning(
                "[%s] HTTP %d", self.source_name, resp.status_code
            )
            raise SourceError(
                self.source_name, f"HTTP {resp.status_code}"
            )

        try:
            return json.loads(resp.text)
        except ValueError as exc:
            raise SourceError(
                self.source_name, "Response is not valid JSON"
            ) from exc

    def _extract_items(
        self, payload: Any, key: str,
    ) -> list[dict[str, Any]]:
        """Pull the listing array at *key* out of a decoded payload.

        A missing key means no results; anything else that is not a
        list of objects is an unexpected payload shape.
        """
        if not isinstance(payload, dict):
            raise SourceError(
                self.source_name, "Unexpected payload shape"
            )
        items = payload.get(key)
        if items is None:
            self.logger.info(
                "[%s] Payload has no '%s' key, treating as empty",
                self.source_name,
                key,
            )
            return []
        if not isinstance(items, list) or not all(
            isinstance(item, dict) for item in items
        ):
            raise SourceError(
                self.source_name, "Unexpected payload shape"
            )
        return items

    def fetch(self, query: str) -> list[CanonicalRecord]:
        """Search this source and return normalised records."""
        payload = self._fetch_json(query)
        records = self.normalize(payload)
        self.logger.info(
            "[%s] %d records for '%s'",
            self.source_name,
            len(records),
            query,
        )
        return records

    # ── Normalisation helpers ────────────────────────────

    @staticmethod
    def _leading_decimal(text: str) -> float:
        """Read the leading decimal number of *text*, or 0."""
        match = _LEADING_DECIMAL_RE.match(text)
        if not match:
            return 0.0
        value = float(match.group(0))
        return value if math.isfinite(value) else 0.0

    @staticmethod
    def _as_number(value: Any) -> float | None:
        """Return *value* as a finite float if it is a JSON number."""
        if isinstance(value, bool) or not isinstance(
            value, (int, float)
        ):
            return None
        try:
            number = float(value)
        except OverflowError:
            return 0.0
        return number if math.isfinite(number) else 0.0

    @staticmethod
    def parse_price(value: Any) -> float:
        """Parse a price like '₹1,299.00'; unparsable prices are 0."""
        number = BaseSource._as_number(value)
        if number is not None:
            return number
        if not isinstance(value, str):
            return 0.0
        cleaned = _NON_PRICE_CHARS_RE.sub("", value)
        return BaseSource._leading_decimal(cleaned)

    @staticmethod
    def parse_rating(value: Any) -> float:
        """Parse a rating like '4.5 out of 5'; missing ratings are 0."""
        number = BaseSource._as_number(value)
        if number is not None:
            return number
        if not isinstance(value, str):
            return 0.0
        return BaseSource._leading_decimal(value)

    @staticmethod
    def parse_review_count(value: Any) -> int:
        """Parse a count like '1,234 ratings'; never negative."""
        number = BaseSource._as_number(value)
        if number is not None:
            return max(int(number), 0)
        if not isinstance(value, str):
            return 0
        digits = _NON_DIGIT_RE.sub("", value)
        if not digits:
            return 0
        try:
            return int(digits)
        except ValueError:
            # Longer than the interpreter's int conversion limit
            return 0

    @staticmethod
    def text_or_default(value: Any, default: str = "") -> str:
        """Coerce a scalar field to text, using *default* when empty."""
        if value is None or isinstance(value, (dict, list)):
            return default
        text = str(value).strip()
        return text or default

    @abstractmethod
    def normalize(self, payload: Any) -> list[CanonicalRecord]:
        """Translate a decoded payload into canonical records."""
        ...
