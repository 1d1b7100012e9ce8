from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Identity:
    """Verified caller identity extracted from the auth token."""

    user_id: UUID
    username: str
