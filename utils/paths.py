# utils/paths.py

"""utils.paths
--------------------------------
Filesystem convenience helpers that are safe for concurrent use and free of
classifier‑specific logic.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Final

from core.logging import get_logger

logger = get_logger(__name__)

__all__: Final = [
    "ensure_dir",
    "atomic_write_text",
]


def ensure_dir(path: str | Path) -> Path:  # noqa: D401 – Imperative helper
    """Create *path* (recursively) if it does not exist and return it as :class:`Path`.

    Parameters
    ----------
    path:
        Directory to create.  May be a :class:`str` or :class:`~pathlib.Path`.

    Returns
    -------
    pathlib.Path
        The absolute, expanded path.

    Notes
    -----
    * Multiple processes can safely race on this function.
    * Exceptions bubble up – callers decide whether failure is fatal.
    """

    p = Path(path).expanduser().resolve()
    try:
        p.mkdir(parents=True, exist_ok=True)
        logger.debug("Ensured directory exists: %s", p)
    except OSError:
        logger.exception("Unable to create directory: %s", p)
        raise
    return p


def atomic_write_text(path: str | Path, text: str, encoding: str = "utf-8") -> Path:
    """Replace *path* with *text* in one step.

    The content is written to a temporary file in the same directory and then
    moved over the target with :func:`os.replace`, so readers see either the
    old file or the complete new one, never a partial write.
    """

    target = Path(path).expanduser()
    directory = ensure_dir(target.parent)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{target.name}.", suffix=".tmp", dir=directory
    )
    try:
        with os.fdopen(fd, "w", encoding=encoding) as fh:
            fh.write(text)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.debug("Wrote %d characters to %s", len(text), target)
    return target
