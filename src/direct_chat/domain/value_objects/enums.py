from __future__ import annotations

from enum import StrEnum


class LivenessState(StrEnum):
    ALIVE = "alive"
    DEAD = "dead"
