"""
Palate — Tag-overlap recommendation engine.

Scores an account's catalog against one submitted answer set:

  1. Answer blob:  every answer value, lower-cased, joined into one string.
  2. Product score: number of *distinct* tags found as substrings of the blob.
  3. Keep products with score > 0, stable-sort by score descending
     (catalog order survives among equal scores), keep the top 6.
  4. Fallback: when nothing scores, the first 3 catalog entries as listed.

The engine is pure and synchronous: no I/O, no shared state, so any number
of submissions can be scored concurrently.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

import structlog

logger = structlog.get_logger("palate.recommendation_service")


@dataclass(frozen=True)
class ScoredProduct:
    product: Any
    score: int


class RecommendationService:
    """Rank catalog products by how many of their tags the answers mention."""

    MAX_RECOMMENDATIONS: int = 6
    FALLBACK_SIZE: int = 3

    # ── Blob & tag normalisation ──────────────────────────────────────────

    @staticmethod
    def build_answer_blob(answers: Mapping[str, Any]) -> str:
        """Lower-cased haystack of all answer values.

        Values are sorted before joining so the blob never depends on the
        mapping's iteration order, and a newline separates them so a tag
        cannot match across the boundary of two answers.
        """
        values = sorted(
            str(value).lower() for value in answers.values() if value is not None
        )
        return "\n".join(values)

    @staticmethod
    def normalise_tags(tags: Iterable[str] | None) -> set[str]:
        """Distinct, lower-cased, stripped tags; blanks are dropped.

        An empty tag would be a substring of every blob, so it never counts.
        """
        if not tags:
            return set()
        normalised = {str(tag).strip().lower() for tag in tags if tag is not None}
        normalised.discard("")
        return normalised

    def score_product(self, product: Any, blob: str) -> int:
        return sum(1 for tag in self.normalise_tags(product.tags) if tag in blob)

    # ── Ranking ───────────────────────────────────────────────────────────

    def score_catalog(
        self,
        answers: Mapping[str, Any],
        catalog: Sequence[Any],
    ) -> list[ScoredProduct]:
        """Ranked shortlist with each product's score.

        Fallback entries are reported with a score of 0.
        """
        blob = self.build_answer_blob(answers)

        matched = [
            ScoredProduct(product=product, score=score)
            for product in catalog
            if (score := self.score_product(product, blob)) > 0
        ]

        if not matched:
            fallback = [
                ScoredProduct(product=product, score=0)
                for product in catalog[: self.FALLBACK_SIZE]
            ]
            logger.info(
                "recommendation_fallback",
                catalog_size=len(catalog),
                returned=len(fallback),
            )
            return fallback

        # sorted() is stable, so equal scores keep catalog order.
        ranked = sorted(matched, key=lambda item: item.score, reverse=True)
        shortlist = ranked[: self.MAX_RECOMMENDATIONS]

        logger.info(
            "recommendation_ranked",
            catalog_size=len(catalog),
            matched=len(matched),
            returned=len(shortlist),
            top_score=shortlist[0].score,
        )
        return shortlist

    def recommend(
        self,
        answers: Mapping[str, Any],
        catalog: Sequence[Any],
    ) -> list[Any]:
        """Return the recommended products, best match first."""
        return [item.product for item in self.score_catalog(answers, catalog)]
