# pricematch/matching/matcher.py

"""Greedy title-similarity matching of listings across two sources."""

import logging
from collections.abc import Sequence

from pricematch.models.record import CanonicalRecord
from pricematch.models.result import AggregationResult, MatchedPair
from pricematch.models.source import SourceId

logger = logging.getLogger("pricematch.matcher")


class ProductMatcher:
    """Pair each left-hand listing with its most similar right-hand one.

    Matching is greedy per left record, not a globally optimal
    bipartite assignment: a right-hand record may be chosen by
    several left-hand records.
    """

    MATCH_THRESHOLD: float = 0.6
    MIN_WORD_LENGTH: int = 4

    @staticmethod
    def title_similarity(first: str, second: str) -> float:
        """Score word overlap between two titles.

        A word of ``first`` at least ``MIN_WORD_LENGTH`` characters
        long is common if some word of ``second`` contains it or is
        contained by it. The score is the common-word count over the
        mean word count of both titles. It is not clamped.
        """
        words_a = first.lower().split()
        words_b = second.lower().split()
        if not words_a or not words_b:
            return 0.0

        common = sum(
            1
            for word in words_a
            if len(word) >= ProductMatcher.MIN_WORD_LENGTH
            and any(word in other or other in word for other in words_b)
        )
        return common / ((len(words_a) + len(words_b)) / 2)

    @classmethod
    def match(
        cls,
        list_a: Sequence[CanonicalRecord],
        list_b: Sequence[CanonicalRecord],
    ) -> list[MatchedPair]:
        """Return matched pairs sorted by similarity, highest first.

        Only scores strictly above ``MATCH_THRESHOLD`` qualify. Ties
        on the best score keep the earliest ``list_b`` record; equal
        scores in the output keep ``list_a`` order.
        """
        if not list_a or not list_b:
            return []

        pairs: list[MatchedPair] = []
        for left in list_a:
            best: CanonicalRecord | None = None
            best_score = cls.MATCH_THRESHOLD
            for right in list_b:
                score = cls.title_similarity(
                    left.product_name, right.product_name
                )
                if score > best_score:
                    best, best_score = right, score
            if best is not None:
                pairs.append(MatchedPair(left, best, best_score))

        logger.debug(
            "Matched %d of %d listings against %d candidates",
            len(pairs),
            len(list_a),
            len(list_b),
        )
        return sorted(
            pairs, key=lambda p: p.similarity_score, reverse=True
        )

    @classmethod
    def match_result(
        cls,
        result: AggregationResult,
        left: str | SourceId,
        right: str | SourceId,
    ) -> list[MatchedPair]:
        """Match two entries of an aggregation; failed sides yield []."""
        pairs = cls.match(result.records(left), result.records(right))
        logger.info(
            "Comparison %s vs %s: %d matched pairs",
            SourceId.parse(left).value,
            SourceId.parse(right).value,
            len(pairs),
        )
        return pairs
