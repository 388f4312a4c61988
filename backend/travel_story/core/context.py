"""Per-request authentication context."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """The authenticated caller of a request.

    Produced once per request by the bearer-token dependency and passed
    explicitly to handlers and services; never stored globally.
    """

    user_id: str

    def owns(self, owner_id: str | None) -> bool:
        return owner_id is not None and owner_id == self.user_id
