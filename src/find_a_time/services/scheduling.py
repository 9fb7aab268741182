"""Inbound commands issued by the presentation layer."""

from collections.abc import Iterable
from dataclasses import dataclass

from find_a_time.domain.errors import InvalidInputError, SessionNotFoundError
from find_a_time.domain.sessions import Session
from find_a_time.domain.slots import SlotId, parse_slot_key
from find_a_time.services.availability import SessionResults, build_results
from find_a_time.services.codes import normalize_code
from find_a_time.services.sessions import SessionStore


@dataclass
class SchedulingService:
    """Application service for creating, joining and answering sessions."""

    store: SessionStore

    def create_session(self, title: str) -> Session:
        """Create a new session and return it."""
        return self.store.create_session(title)

    def join_session(self, code: str) -> Session:
        """Return the session for a shared code."""
        session = self.store.lookup_session(code)
        if session is None:
            raise SessionNotFoundError(normalize_code(code))
        return session

    def submit_availability(
        self, code: str, name: str, slots: Iterable[SlotId | str]
    ) -> Session:
        """Record one participant's availability and return the updated session.

        A repeated name adds another entry rather than replacing the earlier one.
        """
        cleaned = name.strip()
        if not cleaned:
            raise InvalidInputError("Participant name must not be empty.")
        picked = frozenset(_coerce_slot(slot) for slot in slots)
        return self.store.append_participant(code, cleaned, picked)

    def request_results(self, code: str) -> SessionResults:
        """Return overlap and best times for a session."""
        return build_results(self.join_session(code))


def _coerce_slot(slot: SlotId | str) -> SlotId:
    if isinstance(slot, SlotId):
        return slot
    return parse_slot_key(slot)
