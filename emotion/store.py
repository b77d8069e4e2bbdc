# emotion/store.py

"""emotion.store
----------------------------------
The persisted set of reference embeddings and the builder that produces it.

The store is one JSON document mapping each of the six emotion labels to its
vector::

    {"sadness": [0.01, ...], "happiness": [...], ..., "disgust": [...]}

It is always written as a whole: :class:`StoreBuilder` only hands a store to
:func:`save_store` after all six embeddings succeeded, and :func:`save_store`
replaces the file atomically.
"""

from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping

import numpy as np

from core.errors import (
    DimensionMismatchError,
    EmbeddingProviderError,
    PartialGenerationError,
    StoreCorruptError,
    StoreNotFoundError,
)
from core.logging import get_logger
from utils.json import sanitize
from utils.paths import atomic_write_text

from .labels import EMOTIONS, Emotion
from .provider import EmbeddingProvider

logger = get_logger(__name__)

__all__ = ["EmbeddingStore", "StoreBuilder", "load_store", "save_store"]


class EmbeddingStore(Mapping[Emotion, np.ndarray]):
    """Immutable mapping of all six emotions to equal‑length vectors."""

    def __init__(self, vectors: Mapping[Any, Any]):
        vectors = _parse_labels(vectors)
        missing = [e.value for e in EMOTIONS if e not in vectors]
        if missing:
            raise StoreCorruptError(f"missing labels: {', '.join(missing)}")

        frozen: Dict[Emotion, np.ndarray] = {}
        for emotion in EMOTIONS:
            try:
                vec = np.array(vectors[emotion], dtype=np.float64)
            except (TypeError, ValueError):
                raise StoreCorruptError(
                    f"vector for '{emotion.value}' is not a list of numbers"
                ) from None
            if vec.ndim != 1 or vec.size == 0:
                raise StoreCorruptError(
                    f"vector for '{emotion.value}' must be a non-empty flat list"
                )
            if not np.all(np.isfinite(vec)):
                raise StoreCorruptError(f"vector for '{emotion.value}' has NaN/inf values")
            vec.setflags(write=False)
            frozen[emotion] = vec

        dims = {e.value: v.size for e, v in frozen.items()}
        if len(set(dims.values())) != 1:
            raise StoreCorruptError(f"vectors have differing dimensionality {dims}")

        self._vectors = MappingProxyType(frozen)
        self.dimension: int = frozen[EMOTIONS[0]].size

    # Mapping interface, always in enumeration order
    def __getitem__(self, key: Emotion) -> np.ndarray:
        try:
            return self._vectors[Emotion.parse(key)]
        except ValueError:
            raise KeyError(key) from None

    def __iter__(self) -> Iterator[Emotion]:
        return iter(EMOTIONS)

    def __len__(self) -> int:
        return len(EMOTIONS)

    def __repr__(self) -> str:  # pragma: no cover – cosmetic
        return f"<EmbeddingStore labels={len(self)} dimension={self.dimension}>"

    # ------------------------------------------------------------------
    # (De)serialisation
    # ------------------------------------------------------------------
    def to_document(self) -> Dict[str, list]:
        return {e.value: sanitize(self._vectors[e]) for e in EMOTIONS}

    @classmethod
    def from_document(cls, document: Any) -> "EmbeddingStore":
        if not isinstance(document, dict):
            raise StoreCorruptError(
                f"expected a JSON object of labels, got {type(document).__name__}"
            )
        vectors = _parse_labels(document)
        if any(isinstance(v, (str, bytes, dict)) for v in vectors.values()):
            raise StoreCorruptError("every label must map to a list of numbers")
        return cls(vectors)


def _parse_labels(vectors: Mapping[Any, Any]) -> Dict[Emotion, Any]:
    """Key *vectors* by :class:`Emotion`; unknown or repeated labels are corrupt."""
    parsed: Dict[Emotion, Any] = {}
    unknown = []
    for key, value in vectors.items():
        try:
            emotion = Emotion.parse(key)
        except ValueError:
            unknown.append(str(key))
            continue
        if emotion in parsed:
            raise StoreCorruptError(f"duplicate label '{emotion.value}' (key {key!r})")
        parsed[emotion] = value
    if unknown:
        raise StoreCorruptError(f"unexpected labels: {', '.join(unknown)}")
    return parsed


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


def load_store(path: str | Path) -> EmbeddingStore:
    """Read and validate the store at *path*."""
    path = Path(path).expanduser()
    if not path.is_file():
        raise StoreNotFoundError(path)

    try:
        with open(path, "r", encoding="utf-8") as fh:
            document = json.load(fh)
    except json.JSONDecodeError as exc:
        raise StoreCorruptError(f"not valid JSON ({exc})", path) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise StoreCorruptError(f"unreadable ({exc})", path) from exc

    try:
        store = EmbeddingStore.from_document(document)
    except StoreCorruptError as exc:
        raise StoreCorruptError(exc.reason, path) from exc

    logger.info("Loaded embedding store from %s (dimension %d)", path, store.dimension)
    return store


def save_store(store: EmbeddingStore, path: str | Path) -> Path:
    """Write the whole *store* to *path*, replacing any previous file atomically."""
    text = json.dumps(store.to_document())
    target = atomic_write_text(path, text)
    logger.info("Saved embedding store to %s", target)
    return target


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class StoreBuilder:
    """Embed the six bare label words and assemble them into a store."""

    def __init__(
        self,
        provider: EmbeddingProvider,
        *,
        concurrent: bool = False,
        max_workers: int = len(EMOTIONS),
    ):
        self.provider = provider
        self.concurrent = concurrent
        self.max_workers = max(1, max_workers)

    def _embed_label(self, emotion: Emotion) -> np.ndarray:
        try:
            return self.provider.embed(emotion.value)
        except EmbeddingProviderError as exc:
            raise PartialGenerationError(emotion.value, exc) from exc

    def build(self) -> EmbeddingStore:
        """Return a complete store or raise; nothing is persisted here."""
        logger.info(
            "Generating reference embeddings for %d emotions (%s)",
            len(EMOTIONS),
            "concurrent" if self.concurrent else "sequential",
        )
        if self.concurrent:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                futures = [pool.submit(self._embed_label, e) for e in EMOTIONS]
                # result() re‑raises in enumeration order
                vectors = {e: f.result() for e, f in zip(EMOTIONS, futures)}
        else:
            vectors = {e: self._embed_label(e) for e in EMOTIONS}

        first = EMOTIONS[0]
        expected = len(vectors[first])
        for emotion, vec in vectors.items():
            if len(vec) != expected:
                raise DimensionMismatchError(
                    expected, len(vec), context=f"reference vector '{emotion.value}'"
                )

        return EmbeddingStore(vectors)

    def build_and_save(self, path: str | Path) -> EmbeddingStore:
        """Build all six embeddings, then overwrite the store at *path*."""
        store = self.build()
        save_store(store, path)
        return store
