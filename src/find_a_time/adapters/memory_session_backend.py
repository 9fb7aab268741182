"""Process-local storage for development without Supabase."""

import copy
from dataclasses import dataclass

from find_a_time.services.sessions import SessionBackend


@dataclass
class InMemorySessionBackend(SessionBackend):
    """Keeps the last saved mapping in memory. Lost when the process exits."""

    _payload: dict[str, object] | None

    def __init__(self, payload: dict[str, object] | None = None) -> None:
        self._payload = copy.deepcopy(payload)

    def load(self) -> dict[str, object] | None:
        """Return a copy of the last saved mapping."""
        return copy.deepcopy(self._payload)

    def save(self, payload: dict[str, object]) -> None:
        """Replace the stored mapping with a copy of ``payload``."""
        self._payload = copy.deepcopy(payload)
