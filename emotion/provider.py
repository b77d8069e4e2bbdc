# emotion/provider.py
"""
Embedding providers: the only place where text is turned into vectors.

The rest of the package depends on :class:`EmbeddingProvider` alone, so the
backend (OpenAI's embeddings API or a local transformers model) is chosen in
one spot, :func:`build_provider`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, Union

import numpy as np
import openai

from core.errors import EmbeddingProviderError
from core.logging import get_logger

logger = get_logger(__name__)

__all__ = [
    "EmbeddingProvider",
    "OpenAIEmbeddingProvider",
    "TransformersEmbeddingProvider",
    "validate_vector",
    "build_provider",
]


def validate_vector(raw: Any, *, source: str = "provider") -> np.ndarray:
    """Coerce a raw provider response into a 1‑D, finite float64 vector.

    Raises :class:`EmbeddingProviderError` for anything else.
    """
    try:
        vec = np.asarray(raw, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise EmbeddingProviderError(f"{source} returned a non-numeric embedding: {exc}") from exc

    if vec.ndim != 1:
        raise EmbeddingProviderError(
            f"{source} returned an embedding of shape {vec.shape}; expected a flat vector"
        )
    if vec.size == 0:
        raise EmbeddingProviderError(f"{source} returned an empty embedding")
    if not np.all(np.isfinite(vec)):
        raise EmbeddingProviderError(f"{source} returned an embedding with NaN/inf values")
    return vec


class EmbeddingProvider(ABC):
    """Contract for embedding providers.

    ``embed`` must return a validated vector or raise
    :class:`EmbeddingProviderError`; it must never return partial data.
    """

    name: str = "provider"

    @abstractmethod
    def embed(self, text: str) -> np.ndarray:
        raise NotImplementedError


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """Embeddings from the OpenAI ``/embeddings`` endpoint."""

    def __init__(
        self,
        model: str = "text-embedding-3-small",
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        client: Any = None,
    ):
        self.model = model
        self.name = f"openai:{model}"
        if client is None:
            # No retries here: a failed request fails the current command.
            try:
                client = openai.OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
            except openai.OpenAIError as exc:
                raise EmbeddingProviderError(f"Cannot create OpenAI client: {exc}") from exc
        self.client = client

    def embed(self, text: str) -> np.ndarray:
        logger.info("Generating the embedding for input: %r", text)
        try:
            response = self.client.embeddings.create(model=self.model, input=text)
        except openai.OpenAIError as exc:
            raise EmbeddingProviderError(f"OpenAI embedding request failed: {exc}") from exc

        data = getattr(response, "data", None)
        if not data:
            raise EmbeddingProviderError("OpenAI returned no embedding data")
        return validate_vector(data[0].embedding, source=self.name)


class TransformersEmbeddingProvider(EmbeddingProvider):
    """
    Local embeddings from a transformers ``feature-extraction`` pipeline.
    Token vectors are mean‑pooled into one sentence vector.
    """

    def __init__(
        self,
        model_name: str = "sentence-transformers/all-MiniLM-L6-v2",
        device: Optional[Union[str, int]] = "auto",
    ):
        self.model_name = model_name
        self.name = f"transformers:{model_name}"
        self.device = resolve_device(device)

        logger.info("Loading feature-extraction model: %s ...", self.model_name)
        try:
            from transformers.pipelines import pipeline

            self.extractor = pipeline(
                "feature-extraction", model=self.model_name, device=self.device
            )
        except (OSError, ValueError, RuntimeError) as exc:
            raise EmbeddingProviderError(
                f"Failed to load embedding model '{self.model_name}': {exc}"
            ) from exc
        logger.info("Embedding model loaded on device: %s.", self.extractor.device)

    def embed(self, text: str) -> np.ndarray:
        logger.info("Generating the embedding for input: %r", text)
        try:
            # [[token_vec, ...]] for a single input string
            output = self.extractor(text)
        except (RuntimeError, ValueError, IndexError) as exc:
            raise EmbeddingProviderError(
                f"Embedding failed for text snippet '{text[:50]}': {exc}"
            ) from exc

        tokens = np.asarray(output, dtype=np.float64)
        if tokens.ndim == 3:
            tokens = tokens[0]
        if tokens.ndim != 2 or tokens.shape[0] == 0:
            raise EmbeddingProviderError(
                f"Unexpected feature-extraction output shape {tokens.shape}"
            )
        return validate_vector(tokens.mean(axis=0), source=self.name)


def resolve_device(device: Optional[Union[str, int]]) -> Optional[Union[str, int]]:
    """Turn ``"auto"`` into ``"cuda"`` or ``"cpu"``; pass anything else through."""
    if device == "auto":
        import torch

        return "cuda" if torch.cuda.is_available() else "cpu"
    return device


def build_provider(cfg: Any) -> EmbeddingProvider:
    """Instantiate the backend named by ``cfg.embedding_backend``."""
    backend = cfg.embedding_backend
    if backend == "openai":
        return OpenAIEmbeddingProvider(
            model=cfg.openai_model,
            api_key=cfg.openai_api_key,
            timeout=cfg.request_timeout_seconds,
        )
    if backend == "transformers":
        return TransformersEmbeddingProvider(
            model_name=cfg.transformers_model, device=cfg.device
        )
    raise ValueError(f"Unknown embedding backend: {backend!r}")
