# emotion/scorer.py

"""emotion.scorer
----------------------------------
Classify one text against the reference store.

Raw similarity is the plain dot product of the query vector with each
reference vector (magnitude matters, this is not cosine similarity).  Raw
scores are then expressed as a percentage of the best one and the best label
is called *confident* when its percentage reaches the threshold.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Sequence

import numpy as np

from core.errors import DimensionMismatchError
from core.logging import get_logger
from utils.json import sanitize

from .labels import EMOTIONS, Emotion
from .provider import EmbeddingProvider
from .store import EmbeddingStore, load_store

logger = get_logger(__name__)

__all__ = [
    "DEFAULT_THRESHOLD",
    "SimilarityResult",
    "SimilarityScorer",
    "dot_product",
    "normalise_scores",
    "classify",
]

DEFAULT_THRESHOLD = 70.0


def dot_product(a: Sequence[float], b: Sequence[float]) -> float:
    """Σ aᵢ·bᵢ over two vectors of equal length."""
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise DimensionMismatchError(vb.size, va.size)
    return float(np.dot(va, vb))


def normalise_scores(raw: Mapping[Emotion, float]) -> Dict[Emotion, float]:
    """Scale raw scores so the maximum becomes 100.

    When the maximum is not positive there is no meaningful reference point
    and every percentage is reported as 0.0.
    """
    max_raw = max(raw[e] for e in EMOTIONS)
    if max_raw <= 0.0:
        return {e: 0.0 for e in EMOTIONS}
    return {e: 100.0 * raw[e] / max_raw for e in EMOTIONS}


@dataclass(frozen=True)
class SimilarityResult:
    """Outcome of scoring one text; never persisted."""

    text: str
    raw_scores: Mapping[Emotion, float]
    percentages: Mapping[Emotion, float]
    best_label: Emotion
    max_raw: float
    threshold: float
    is_confident: bool

    @property
    def confidence(self) -> float:
        """Normalised percentage of the best label."""
        return self.percentages[self.best_label]

    def passes(self, emotion: Emotion) -> bool:
        """Whether *emotion*'s percentage reaches the threshold."""
        return self.max_raw > 0.0 and self.percentages[emotion] >= self.threshold

    def to_dict(self) -> Dict[str, Any]:
        return sanitize(
            {
                "text": self.text,
                "best_label": self.best_label,
                "confidence": self.confidence,
                "is_confident": self.is_confident,
                "threshold": self.threshold,
                "max_raw": self.max_raw,
                "scores": {
                    e: {"raw": self.raw_scores[e], "percentage": self.percentages[e]}
                    for e in EMOTIONS
                },
            }
        )


class SimilarityScorer:
    """Score texts against an :class:`EmbeddingStore` with a fixed threshold."""

    def __init__(self, provider: EmbeddingProvider, *, threshold: float = DEFAULT_THRESHOLD):
        self.provider = provider
        self.threshold = float(threshold)

    def score(self, text: str, store: EmbeddingStore) -> SimilarityResult:
        query = self.provider.embed(text)
        if len(query) != store.dimension:
            raise DimensionMismatchError(store.dimension, len(query))

        raw = {e: dot_product(query, store[e]) for e in EMOTIONS}
        # max() keeps the first of equal keys, i.e. enumeration order
        best = max(EMOTIONS, key=lambda e: raw[e])
        max_raw = raw[best]
        percentages = normalise_scores(raw)
        confident = max_raw > 0.0 and percentages[best] >= self.threshold

        logger.debug("Raw scores: %s", {e.value: s for e, s in raw.items()})
        if max_raw <= 0.0:
            logger.warning(
                "Best raw score is %.6f (not positive); reporting 0%% for every label.",
                max_raw,
            )

        return SimilarityResult(
            text=text,
            raw_scores=MappingProxyType(raw),
            percentages=MappingProxyType(percentages),
            best_label=best,
            max_raw=max_raw,
            threshold=self.threshold,
            is_confident=confident,
        )


def classify(
    text: str,
    *,
    store_path: str | Path,
    provider: EmbeddingProvider,
    threshold: float = DEFAULT_THRESHOLD,
) -> SimilarityResult:
    """Load the store (validating it first) and score *text* against it."""
    store = load_store(store_path)
    return SimilarityScorer(provider, threshold=threshold).score(text, store)
