"""core.errors
-----------------------------------
Exception hierarchy for embedding generation, store loading and scoring.

Every error is fatal for the current invocation.  The CLI maps each class to
its own exit code so that callers can tell the failure reasons apart (a
low‑confidence classification is *not* an error and exits with 0).
"""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "EmotionEmbedError",
    "EmbeddingProviderError",
    "PartialGenerationError",
    "DimensionMismatchError",
    "StoreError",
    "StoreNotFoundError",
    "StoreCorruptError",
]

_GENERATE_HINT = "Run the 'generate' command first to (re)build the store."


class EmotionEmbedError(RuntimeError):
    """Base class for every error raised by the classifier core."""

    exit_code: int = 1


class EmbeddingProviderError(EmotionEmbedError):
    """The embedding provider failed or returned malformed data."""

    exit_code = 3


class PartialGenerationError(EmbeddingProviderError):
    """A provider call failed while generating the reference store.

    The generation attempt is discarded as a whole; no store is written.
    """

    exit_code = 4

    def __init__(self, label: str, cause: BaseException | None = None):
        self.label = label
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(
            f"Embedding generation failed for label '{label}'{detail}. "
            "No store was written; any existing store is unchanged."
        )


class DimensionMismatchError(EmotionEmbedError):
    """Two vectors that must share a dimensionality do not."""

    exit_code = 5

    def __init__(self, expected: int, actual: int, context: str = "query vector"):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Dimension mismatch for {context}: expected {expected}, got {actual}. "
            "The store was probably generated with a different embedding model."
        )


class StoreError(EmotionEmbedError):
    """Base class for problems with the persisted embedding store."""

    exit_code = 6


class StoreNotFoundError(StoreError):
    exit_code = 6

    def __init__(self, path: str | Path):
        self.path = Path(path)
        super().__init__(f"Embedding store not found at {self.path}. {_GENERATE_HINT}")


class StoreCorruptError(StoreError):
    exit_code = 7

    def __init__(self, reason: str, path: str | Path | None = None):
        self.path = Path(path) if path is not None else None
        self.reason = reason
        where = f" at {self.path}" if self.path is not None else ""
        super().__init__(f"Embedding store{where} is invalid: {reason}. {_GENERATE_HINT}")
