"""core.config
--------------------------------
Runtime configuration facade that wraps :pymod:`config.schema` so that callers
can interact with *one* object regardless of whether settings originated from
environment variables, a user‑supplied JSON file, or defaults.

Key features
~~~~~~~~~~~~
* **Dot‑access & mapping‑like API** – ``cfg.threshold`` works alongside
  ``cfg["threshold"]``.
* **JSON overlay** – keys present in the JSON file win over env/defaults;
  unknown keys are ignored with a warning.
* **Save** – persists *only* values that differ from defaults to a JSON file,
  never the API key.
"""

from __future__ import annotations

import json
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, MutableMapping

from config.schema import Settings
from core.logging import get_logger

logger = get_logger(__name__)

_SECRET_KEYS = frozenset({"openai_api_key"})


class Config(MutableMapping[str, Any]):
    """A lightweight wrapper around :class:`~config.schema.Settings`."""

    _settings: Settings
    _defaults: MappingProxyType

    def __init__(self, json_path: str | Path | None = None, **overrides: Any):
        # 1. Load env / defaults via BaseSettings, overlaying JSON if given
        data: dict[str, Any] = {}
        if json_path is not None:
            json_path = Path(json_path)
            if json_path.exists():
                logger.info("Loading config overrides from %s", json_path)
                data = self._read_json(json_path)
            else:
                logger.warning("Config JSON %s not found – using env/defaults", json_path)

        # 2. Explicit keyword overrides (CLI flags) win over everything
        data.update({k: v for k, v in overrides.items() if v is not None})

        self._settings = Settings(**data)
        self._defaults = MappingProxyType(Settings.model_construct().model_dump())

        self._post_init()

    @staticmethod
    def _read_json(json_path: Path) -> dict[str, Any]:
        with open(json_path, "r", encoding="utf-8") as fh:
            loaded = json.load(fh)
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file {json_path} must contain a JSON object")

        known = set(Settings.model_fields)
        data = {}
        for key, value in loaded.items():
            if key not in known:
                logger.warning("Unknown key '%s' found in %s. Ignoring.", key, json_path)
            elif value is not None:
                data[key] = value
        return data

    # ---------------------------------------------------------------------
    # Validation helpers
    # ---------------------------------------------------------------------
    def _post_init(self) -> None:
        """Warn for unusual combos."""
        if self.embedding_backend == "openai" and not self.openai_api_key:
            logger.warning(
                "OPENAI_API_KEY missing – embedding requests to OpenAI will fail."
            )
        if not 0.0 < self.threshold <= 100.0:
            logger.warning(
                "Threshold %.2f lies outside (0, 100]; %s.",
                self.threshold,
                "every result with a positive best score will be confident"
                if self.threshold <= 0.0
                else "no result will be confident",
            )

    # ------------------------------------------------------------------
    # Mapping / attribute proxy
    # ------------------------------------------------------------------
    def __getattr__(self, item):  # dot access
        if item.startswith("_"):
            raise AttributeError(item)
        return getattr(self._settings, item)

    def __setattr__(self, key, value):  # to keep immutability illusion
        if key in {"_settings", "_defaults"}:
            super().__setattr__(key, value)
        else:
            self._settings = self._settings.model_copy(update={key: value})

    # Mapping interface
    def __getitem__(self, key: str) -> Any:
        try:
            return getattr(self._settings, key)
        except AttributeError:
            raise KeyError(key) from None

    def __setitem__(self, key: str, value: Any) -> None:
        self.__setattr__(key, value)

    def __delitem__(self, key: str) -> None:  # not supported but keep Mapping contract
        raise TypeError("Config keys cannot be deleted")

    def __iter__(self) -> Iterator[str]:
        return iter(self._settings.model_dump().keys())

    def __len__(self) -> int:
        return len(self._settings.model_dump())

    # convenience
    def get(self, key: str, default: Any | None = None):
        return getattr(self._settings, key, default)

    def set(self, key: str, value: Any) -> None:
        if key not in Settings.model_fields:
            raise KeyError(key)
        self.__setattr__(key, value)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def save(self, path: str | Path = "config.json") -> None:
        """Save only the diff vs defaults so the file stays minimal."""
        path = Path(path)
        diff = {
            k: v
            for k, v in self._settings.model_dump(mode="json").items()
            if k not in _SECRET_KEYS and v != _jsonable(self._defaults[k])
        }
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(diff, fh, indent=2, ensure_ascii=False)
        logger.info("Configuration saved to %s", path)

    # ------------------------------------------------------------------
    # Representation helpers
    # ------------------------------------------------------------------
    def __repr__(self) -> str:  # pragma: no cover – cosmetic
        return f"<Config {self._settings.model_dump(exclude=set(_SECRET_KEYS))!r}>"


def _jsonable(value: Any) -> Any:
    return str(value) if isinstance(value, Path) else value
