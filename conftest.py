# conftest.py

"""Shared pytest fixtures: stub embedding providers and ready‑made stores."""

from __future__ import annotations

import threading
from typing import Dict, List, Sequence

import numpy as np
import pytest

from core.errors import EmbeddingProviderError
from emotion.labels import EMOTIONS, Emotion
from emotion.provider import EmbeddingProvider, validate_vector
from emotion.store import EmbeddingStore


class StubProvider(EmbeddingProvider):
    """Returns canned vectors per text and records every call."""

    name = "stub"

    def __init__(self, vectors: Dict[str, Sequence[float]], default: Sequence[float] | None = None):
        self.vectors = dict(vectors)
        self.default = default
        self.calls: List[str] = []

    def embed(self, text: str) -> np.ndarray:
        self.calls.append(text)
        if text in self.vectors:
            return validate_vector(self.vectors[text], source=self.name)
        if self.default is not None:
            return validate_vector(self.default, source=self.name)
        raise EmbeddingProviderError(f"no stub vector for {text!r}")


class FailingProvider(StubProvider):
    """Fails on the *fail_on*-th call (1‑based)."""

    def __init__(self, fail_on: int, dim: int = 3):
        super().__init__({}, default=[1.0] * dim)
        self.fail_on = fail_on
        self._lock = threading.Lock()

    def embed(self, text: str) -> np.ndarray:
        with self._lock:
            self.calls.append(text)
            call_no = len(self.calls)
        if call_no == self.fail_on:
            raise EmbeddingProviderError("simulated outage")
        return validate_vector(self.default, source=self.name)


def label_vectors(dim: int = 3) -> Dict[str, List[float]]:
    """One distinct basis‑like vector per label, keyed by label word."""
    out = {}
    for i, emotion in enumerate(EMOTIONS):
        vec = [0.0] * dim
        vec[i % dim] = float(i + 1)
        out[emotion.value] = vec
    return out


@pytest.fixture
def scenario_store() -> EmbeddingStore:
    """happiness → [1, 0], sadness → [0, 1], everything else → [0, 0]."""
    vectors = {e: [0.0, 0.0] for e in EMOTIONS}
    vectors[Emotion.HAPPINESS] = [1.0, 0.0]
    vectors[Emotion.SADNESS] = [0.0, 1.0]
    return EmbeddingStore(vectors)


@pytest.fixture
def stub_provider_cls():
    return StubProvider


@pytest.fixture
def failing_provider_cls():
    return FailingProvider


@pytest.fixture
def label_provider() -> StubProvider:
    return StubProvider(label_vectors())
