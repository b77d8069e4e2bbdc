"""utils.json
--------------------------------
Helpers for making classifier data structures JSON‑serialisable.
Covers numpy scalars / arrays, enums, paths and dataclasses.
"""

from __future__ import annotations

import dataclasses
from enum import Enum
from pathlib import Path
from typing import Any

import numpy as _np

__all__ = ["sanitize"]


def sanitize(obj: Any) -> Any:  # noqa: C901 – recursion switch‑yard
    """Recursively convert non‑JSON‑serialisable values into built‑ins.

    * NumPy floating / integer scalars → builtin ``float`` / ``int``.
    * NumPy arrays → (nested) lists of built‑ins.
    * ``Enum`` members (e.g. :class:`emotion.labels.Emotion`) → their value,
      also when used as dict keys.
    * ``Path`` objects → ``str`` path.
    * Dataclass instances → dict of their fields.
    """
    # Enum first: str‑valued enums are also ``str`` instances
    if isinstance(obj, Enum):
        return sanitize(obj.value)

    # Primitive fast‑path
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj

    # numpy scalars → built‑ins
    if isinstance(obj, _np.generic):
        return obj.item()

    if isinstance(obj, _np.ndarray):
        return obj.tolist()

    if isinstance(obj, Path):
        return str(obj)

    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: sanitize(getattr(obj, f.name)) for f in dataclasses.fields(obj)}

    if isinstance(obj, dict):
        return {sanitize(k): sanitize(v) for k, v in obj.items()}

    if isinstance(obj, (list, tuple, set)):
        return [sanitize(v) for v in obj]

    # fallback – let ``json.dump`` raise, but at least fail clearly
    return obj
