"""
Duplicate detection between imported candidates and existing transactions.
Uses a weighted composite of exact date/amount/category matches and
Levenshtein-based description similarity.

Date and amount are compared exactly so that close but distinct
transactions are not merged.
"""
from typing import Dict, List, Optional, Sequence

import Levenshtein

from core.config import SimilarityWeights
from core.exceptions import ConfigurationError
from core.logger import setup_logger
from core.schema import CandidateTransaction, ExistingTransactionRef, SimilarityResult

logger = setup_logger(__name__)

DEFAULT_DUPLICATE_THRESHOLD = 0.8
DEFAULT_DESCRIPTION_REASON_THRESHOLD = 0.8

# Composite scores are rounded so float noise in the weight sum cannot cross the threshold
SCORE_PRECISION = 6

REASON_SAME_DATE = "same date"
REASON_SAME_AMOUNT = "same amount"
REASON_SIMILAR_DESCRIPTION = "similar description"
REASON_SAME_CATEGORY = "same category"


def normalize_string(text: Optional[str]) -> str:
    """
    Normalize string for matching: lowercase and trim.
    Inner whitespace is kept, so it counts towards edit distance.

    Args:
        text: Input string

    Returns:
        Normalized string
    """
    if not text or not isinstance(text, str):
        return ""

    return text.strip().lower()


def description_similarity(s1: Optional[str], s2: Optional[str]) -> float:
    """
    Normalized Levenshtein similarity: 1 - distance / max(len).

    Args:
        s1: First description
        s2: Second description

    Returns:
        Similarity score (0.0 to 1.0); 1.0 when both are empty, 0.0 when only one is
    """
    s1_norm = normalize_string(s1)
    s2_norm = normalize_string(s2)

    if not s1_norm and not s2_norm:
        return 1.0
    if not s1_norm or not s2_norm:
        return 0.0
    if s1_norm == s2_norm:
        return 1.0

    distance = Levenshtein.distance(s1_norm, s2_norm)
    return 1.0 - distance / max(len(s1_norm), len(s2_norm))


def same_category(c1: Optional[str], c2: Optional[str]) -> bool:
    """Case-insensitive category equality."""
    return normalize_string(c1) == normalize_string(c2)


class SimilarityScorer:
    """Weighted composite similarity between one candidate and one existing transaction."""

    def __init__(self, weights: Optional[SimilarityWeights] = None):
        """
        Initialize scorer.

        Args:
            weights: Weight table (defaults to 0.30/0.40/0.20/0.10)
        """
        self.weights = weights or SimilarityWeights()

    def components(
        self,
        candidate: CandidateTransaction,
        existing: ExistingTransactionRef
    ) -> Dict[str, float]:
        """
        Per-field similarity values, each in [0, 1].

        Returns:
            Dictionary keyed by field name
        """
        return {
            "date": 1.0 if candidate.date == existing.date else 0.0,
            "amount": 1.0 if candidate.amount == existing.amount else 0.0,
            "description": description_similarity(candidate.description, existing.description),
            "category": 1.0 if same_category(candidate.category, existing.category) else 0.0,
        }

    def score(self, candidate: CandidateTransaction, existing: ExistingTransactionRef) -> float:
        """
        Composite similarity score.

        Returns:
            Score in [0, 1]; an identical transaction scores exactly 1.0
        """
        parts = self.components(candidate, existing)
        total = (
            self.weights.date * parts["date"]
            + self.weights.amount * parts["amount"]
            + self.weights.description * parts["description"]
            + self.weights.category * parts["category"]
        )
        return min(1.0, max(0.0, round(total, SCORE_PRECISION)))


class DuplicateDetector:
    """Flags candidates that look like already committed transactions."""

    def __init__(
        self,
        scorer: Optional[SimilarityScorer] = None,
        threshold: float = DEFAULT_DUPLICATE_THRESHOLD,
        description_reason_threshold: float = DEFAULT_DESCRIPTION_REASON_THRESHOLD
    ):
        """
        Initialize detector.

        Args:
            scorer: Similarity scorer (default weights when omitted)
            threshold: Minimum composite score for a pair to be reported
            description_reason_threshold: Description similarity above which
                "similar description" is given as a reason
        """
        for name, value in (
            ("threshold", threshold),
            ("description_reason_threshold", description_reason_threshold),
        ):
            if not (0.0 <= value <= 1.0):
                raise ConfigurationError(
                    f"{name} must be between 0 and 1",
                    details={name: value}
                )
        self.scorer = scorer or SimilarityScorer()
        self.threshold = threshold
        self.description_reason_threshold = description_reason_threshold

    def reasons(self, candidate: CandidateTransaction, existing: ExistingTransactionRef) -> List[str]:
        """
        Human readable reasons explaining why a pair looks alike.

        Returns:
            Ordered list of reasons, possibly empty
        """
        parts = self.scorer.components(candidate, existing)
        reasons = []
        if parts["date"]:
            reasons.append(REASON_SAME_DATE)
        if parts["amount"]:
            reasons.append(REASON_SAME_AMOUNT)
        if parts["description"] > self.description_reason_threshold:
            reasons.append(REASON_SIMILAR_DESCRIPTION)
        if parts["category"]:
            reasons.append(REASON_SAME_CATEGORY)
        return reasons

    def detect(
        self,
        candidates: Sequence[CandidateTransaction],
        existing: Sequence[ExistingTransactionRef]
    ) -> List[SimilarityResult]:
        """
        Compare every candidate with every existing transaction.
        All pairs at or above the threshold are reported, candidate-major.

        Args:
            candidates: Extracted candidates in file order
            existing: Existing transactions (read only)

        Returns:
            List of SimilarityResult objects
        """
        results = []
        for candidate in candidates:
            for ref in existing:
                score = self.scorer.score(candidate, ref)
                if score < self.threshold:
                    continue

                results.append(SimilarityResult(
                    candidate=candidate,
                    existing=ref,
                    score=score,
                    reasons=self.reasons(candidate, ref),
                ))
                logger.debug(
                    f"Row {candidate.row_number} matches existing {ref.id} (score={score:.2f})"
                )

        logger.info(
            f"Duplicate check: {len(candidates)} candidates x {len(existing)} existing "
            f"-> {len(results)} potential duplicates"
        )
        return results
