"""emotion.labels
-----------------------------------
Canonical, closed set of reference emotions.

The order of :data:`EMOTIONS` is significant: it is the order in which
reference vectors are generated and persisted, the order of every result
mapping, and the tie‑break order when two emotions score the same.
"""

from __future__ import annotations

from enum import Enum
from typing import Final, Tuple


class Emotion(str, Enum):
    SADNESS = "sadness"
    HAPPINESS = "happiness"
    FEAR = "fear"
    ANGER = "anger"
    SURPRISE = "surprise"
    DISGUST = "disgust"

    def __str__(self) -> str:  # pragma: no cover – cosmetic
        return self.value

    @classmethod
    def parse(cls, value: "str | Emotion") -> "Emotion":
        """Return the member named *value* (case‑insensitive)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown emotion label {value!r}; expected one of "
                f"{', '.join(e.value for e in cls)}"
            ) from None


EMOTIONS: Final[Tuple[Emotion, ...]] = tuple(Emotion)

__all__ = ["Emotion", "EMOTIONS"]
