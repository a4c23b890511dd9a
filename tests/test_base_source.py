# tests/test_base_source.py

"""Tests for BaseSource error mapping and normalisation helpers."""

import unittest
from typing import Any
from unittest.mock import MagicMock, patch

from curl_cffi import CurlECode

from pricematch.config.settings import Settings
from pricematch.errors import SourceError, SourceTimeoutError
from pricematch.models.record import CanonicalRecord
from pricematch.models.source import SourceId
from pricematch.sources.base_source import BaseSource


class _StubSource(BaseSource):
    """Concrete source returning one record per payload item."""

    source_id = SourceId.AMAZON
    API_HOST = "stub.example.com"
    SEARCH_URL = "https://stub.example.com/search"

    def normalize(self, payload: Any) -> list[CanonicalRecord]:
        return [
            CanonicalRecord(product_name=str(item.get("title", "")))
            for item in self._extract_items(payload, "items")
        ]

    @property
    def request_timeout(self) -> float:
        """Expose the configured request timeout."""
        return self._request_timeout


class _CurlTimeout(Exception):
    """Mimics a curl_cffi error carrying a curl error code."""

    code = CurlECode.OPERATION_TIMEDOUT


@patch("pricematch.sources.base_source.curl_requests.Session")
class TestFetchErrors(unittest.TestCase):
    """Every failure mode surfaces as a SourceError."""

    def _source_with(
        self, mock_session_cls: MagicMock, **get_kwargs: Any,
    ) -> tuple[_StubSource, MagicMock]:
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session
        for key, value in get_kwargs.items():
            setattr(mock_session.get, key, value)
        return _StubSource(), mock_session

    def test_success(self, mock_session_cls: MagicMock) -> None:
        """A 200 JSON body is normalised."""
        source, _ = self._source_with(
            mock_session_cls,
            return_value=MagicMock(
                status_code=200, text='{"items": [{"title": "A"}]}'
            ),
        )
        self.assertEqual(
            source.fetch("a"), [CanonicalRecord(product_name="A")]
        )

    def test_non_2xx_raises(self, mock_session_cls: MagicMock) -> None:
        """Non-2xx statuses carry the code in the reason."""
        source, _ = self._source_with(
            mock_session_cls,
            return_value=MagicMock(status_code=503, text=""),
        )
        with self.assertRaises(SourceError) as ctx:
            source.fetch("a")
        self.assertEqual(ctx.exception.reason, "HTTP 503")

    def test_network_error_raises(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """Transport exceptions are wrapped, not leaked."""
        source, _ = self._source_with(
            mock_session_cls,
            side_effect=ConnectionError("Connection refused"),
        )
        with self.assertRaises(SourceError) as ctx:
            source.fetch("a")
        self.assertNotIsInstance(ctx.exception, SourceTimeoutError)
        self.assertIn("Connection refused", ctx.exception.reason)
        self.assertIsInstance(ctx.exception.__cause__, ConnectionError)

    def test_curl_timeout_raises_timeout_error(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """curl's operation-timed-out code maps to SourceTimeoutError."""
        source, _ = self._source_with(
            mock_session_cls, side_effect=_CurlTimeout("timed out"),
        )
        with self.assertRaises(SourceTimeoutError):
            source.fetch("a")

    def test_invalid_json_raises(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """An HTML error page is not a valid payload."""
        source, _ = self._source_with(
            mock_session_cls,
            return_value=MagicMock(
                status_code=200, text="<html>oops</html>"
            ),
        )
        with self.assertRaises(SourceError) as ctx:
            source.fetch("a")
        self.assertIn("JSON", ctx.exception.reason)

    def test_top_level_array_raises(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """A payload that is not an object is an unexpected shape."""
        source, _ = self._source_with(
            mock_session_cls,
            return_value=MagicMock(status_code=200, text="[1, 2]"),
        )
        with self.assertRaises(SourceError):
            source.fetch("a")

    def test_non_object_item_raises(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """List items must be objects."""
        source, _ = self._source_with(
            mock_session_cls,
            return_value=MagicMock(
                status_code=200, text='{"items": ["x"]}'
            ),
        )
        with self.assertRaises(SourceError):
            source.fetch("a")

    def test_missing_api_key_fails_before_request(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """Without a key no request is sent."""
        source, session = self._source_with(mock_session_cls)
        with patch.object(Settings, "RAPIDAPI_KEY", ""):
            with self.assertRaises(SourceError) as ctx:
                source.fetch("a")
        self.assertIn("RAPIDAPI_KEY", ctx.exception.reason)
        session.get.assert_not_called()

    def test_single_request_per_fetch(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """Failures are not retried at the adapter layer."""
        source, session = self._source_with(
            mock_session_cls,
            return_value=MagicMock(status_code=500, text=""),
        )
        with self.assertRaises(SourceError):
            source.fetch("a")
        self.assertEqual(session.get.call_count, 1)

    def test_timeout_passed_to_request(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """The constructor timeout bounds the HTTP call."""
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session
        mock_session.get.return_value = MagicMock(
            status_code=200, text='{"items": []}'
        )
        source = _StubSource(timeout=2.5)
        source.fetch("a")
        self.assertEqual(source.request_timeout, 2.5)
        self.assertEqual(mock_session.get.call_args.kwargs["timeout"], 2.5)

    def test_default_timeout_from_settings(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """Without an override the settings deadline applies."""
        self.assertEqual(
            _StubSource().request_timeout, Settings.SOURCE_TIMEOUT
        )


class TestParsePrice(unittest.TestCase):
    """Price parsing never fails and defaults to 0."""

    def test_currency_text(self) -> None:
        self.assertEqual(BaseSource.parse_price("₹1,299.00"), 1299.0)
        self.assertEqual(BaseSource.parse_price("$ 24.99"), 24.99)

    def test_numbers_pass_through(self) -> None:
        self.assertEqual(BaseSource.parse_price(1195), 1195.0)
        self.assertEqual(BaseSource.parse_price(9.5), 9.5)

    def test_leading_decimal_prefix(self) -> None:
        """Only the first decimal number is read."""
        self.assertEqual(BaseSource.parse_price("1.299.00"), 1.299)

    def test_unparsable_defaults_to_zero(self) -> None:
        for value in (None, "", "N/A", "Currently unavailable", ".",
                      True, {"amount": 3}, [], float("nan")):
            with self.subTest(value=value):
                self.assertEqual(BaseSource.parse_price(value), 0.0)

    def test_integer_too_large_for_float(self) -> None:
        """A JSON integer beyond float range defaults to 0."""
        self.assertEqual(BaseSource.parse_price(10 ** 400), 0.0)
        self.assertEqual(BaseSource.parse_rating(-(10 ** 400)), 0.0)


class TestParseRating(unittest.TestCase):
    """Rating parsing keeps the source's native scale."""

    def test_text_with_suffix(self) -> None:
        self.assertEqual(
            BaseSource.parse_rating("4.5 out of 5 stars"), 4.5
        )

    def test_number(self) -> None:
        self.assertEqual(BaseSource.parse_rating(4), 4.0)

    def test_garbage_defaults_to_zero(self) -> None:
        for value in (None, "", "no rating", False, float("inf")):
            with self.subTest(value=value):
                self.assertEqual(BaseSource.parse_rating(value), 0.0)


class TestParseReviewCount(unittest.TestCase):
    """Review counts are non-negative integers."""

    def test_grouped_digits(self) -> None:
        self.assertEqual(
            BaseSource.parse_review_count("1,234 ratings"), 1234
        )

    def test_number(self) -> None:
        self.assertEqual(BaseSource.parse_review_count(87), 87)
        self.assertEqual(BaseSource.parse_review_count(12.0), 12)

    def test_negative_number_clamped(self) -> None:
        self.assertEqual(BaseSource.parse_review_count(-3), 0)

    def test_garbage_defaults_to_zero(self) -> None:
        for value in (None, "", "none yet", True):
            with self.subTest(value=value):
                self.assertEqual(
                    BaseSource.parse_review_count(value), 0
                )

    def test_overlong_digit_string_defaults_to_zero(self) -> None:
        self.assertEqual(BaseSource.parse_review_count("1" * 5000), 0)
        self.assertEqual(BaseSource.parse_review_count(10 ** 400), 0)


class TestTextOrDefault(unittest.TestCase):
    """Scalar text coercion."""

    def test_values(self) -> None:
        self.assertEqual(BaseSource.text_or_default("  x "), "x")
        self.assertEqual(BaseSource.text_or_default(42), "42")
        self.assertEqual(
            BaseSource.text_or_default(None, "Unknown"), "Unknown"
        )
        self.assertEqual(
            BaseSource.text_or_default("", "Unknown"), "Unknown"
        )
        self.assertEqual(BaseSource.text_or_default({"a": 1}), "")


if __name__ == "__main__":
    unittest.main()
