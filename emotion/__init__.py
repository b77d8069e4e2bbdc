"""Embedding-based emotion classification."""

from .labels import EMOTIONS, Emotion
from .scorer import SimilarityResult, SimilarityScorer
from .store import EmbeddingStore, StoreBuilder, load_store, save_store

__all__ = [
    "EMOTIONS",
    "Emotion",
    "EmbeddingStore",
    "SimilarityResult",
    "SimilarityScorer",
    "StoreBuilder",
    "load_store",
    "save_store",
]
