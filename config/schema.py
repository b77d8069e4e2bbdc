"""config.schema
--------------------------------
Pydantic settings model that holds **all user‑tunable parameters** for the
emotion classifier.  Environment variables automatically override the
defaults (thanks to BaseSettings).

* `device` is only consulted by the local transformers backend; "auto"
  (default) is resolved there to "cuda" when available, else "cpu".
* `openai_api_key` also honours the plain ``OPENAI_API_KEY`` variable used by
  the OpenAI client itself.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Literal, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="EMOTION_",  # e.g. EMOTION_THRESHOLD, EMOTION_STORE_PATH
        env_file=".env",  # Optional dotenv file
        extra="ignore",
        populate_by_name=True,
    )

    # ---------------------------------------------------------------------
    # Store & classification
    # ---------------------------------------------------------------------
    store_path: Path = Field(
        Path("data/emotion-embeddings.json"),
        description="Where the six reference embeddings are persisted.",
    )
    threshold: float = Field(
        70.0, description="Minimum normalised percentage for a confident match."
    )

    # ------------------------------------------------------------------
    # Embedding provider
    # ------------------------------------------------------------------
    embedding_backend: Literal["openai", "transformers"] = "openai"
    openai_model: str = "text-embedding-3-small"
    openai_api_key: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("EMOTION_OPENAI_API_KEY", "OPENAI_API_KEY"),
        description="OpenAI API key (required for the openai backend).",
    )
    transformers_model: str = "sentence-transformers/all-MiniLM-L6-v2"
    request_timeout_seconds: float = Field(
        30.0, description="Client‑side timeout for a single embedding request."
    )
    concurrent_generation: bool = Field(
        False, description="Embed the six reference labels in parallel."
    )

    # ------------------------------------------------------------------
    # Hardware / platform
    # ------------------------------------------------------------------
    device: Literal["auto", "cpu", "cuda"] = Field(
        "auto", description="Execution device. 'auto' → choose cuda if available else cpu."
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    log_dir: Optional[Path] = Field(
        None, description="If set, logs are also written to log_dir/log_filename."
    )
    log_filename: str = "emotion-embed.log"

    # ------------------------------------------------------------------
    # Validators & derived defaults
    # ------------------------------------------------------------------
    @field_validator("threshold")
    @classmethod
    def _finite_threshold(cls, v: float):
        if not math.isfinite(v):
            raise ValueError("threshold must be a finite number")
        return v

    @field_validator("request_timeout_seconds")
    @classmethod
    def _positive_timeout(cls, v: float):
        if v <= 0:
            raise ValueError("request_timeout_seconds must be positive")
        return v
