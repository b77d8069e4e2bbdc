"""core.logging
--------------------------------
Configures and provides logging functionality for the application.

Console output goes to *stderr* so that classification results printed on
stdout (including ``--json`` documents) stay machine‑readable.
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict

__all__ = ["init", "get_logger", "LoggingInitError"]

_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Libraries that flood the log at INFO
_QUIET_LOGGERS = ("openai", "httpx", "httpcore", "transformers", "urllib3")

_initialised_with: tuple | None = None


class LoggingInitError(RuntimeError):
    """Raised when the log directory or file handler cannot be set up."""


def get_logger(name: str) -> logging.Logger:
    """Return a module logger; configuration is applied by :func:`init`."""
    return logging.getLogger(name)


def _build_config(level: str, log_file: Path | None) -> Dict[str, Any]:
    handlers: Dict[str, Any] = {
        "console": {
            "level": level,
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "stream": "ext://sys.stderr",
        },
    }
    if log_file is not None:
        handlers["file"] = {
            "level": level,
            "class": "logging.FileHandler",
            "filename": str(log_file),
            "formatter": "standard",
            "encoding": "utf-8",
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": _FORMAT, "datefmt": _DATEFMT},
        },
        "handlers": handlers,
        "loggers": {
            "": {  # root logger
                "handlers": list(handlers),
                "level": level,
            },
            **{name: {"level": "WARNING"} for name in _QUIET_LOGGERS},
        },
    }


def init(cfg: Any) -> None:
    """Set up logging from a config‑like object using dictConfig.

    *cfg* needs ``log_level`` and may provide ``log_dir`` / ``log_filename``;
    when ``log_dir`` is set a file handler is added next to the console one.
    Calling ``init`` again with the same settings is a no‑op.
    """
    global _initialised_with

    level = str(getattr(cfg, "log_level", "WARNING")).upper()
    log_dir = getattr(cfg, "log_dir", None)
    log_file: Path | None = None
    if log_dir:
        log_dir_path = Path(log_dir).expanduser()
        try:
            log_dir_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise LoggingInitError(
                f"Failed to create log directory {log_dir_path}: {exc}"
            ) from exc
        log_file = log_dir_path / getattr(cfg, "log_filename", "emotion-embed.log")

    key = (level, str(log_file) if log_file else None)
    if _initialised_with == key:
        return

    try:
        logging.config.dictConfig(_build_config(level, log_file))
    except (ValueError, TypeError, AttributeError, ImportError) as exc:
        raise LoggingInitError(f"Failed to configure logging: {exc}") from exc

    _initialised_with = key
    get_logger(__name__).debug("Logging setup complete.")
