"""Session store: durable mapping from session code to session."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from find_a_time.domain.errors import (
    CodeSpaceExhaustedError,
    FindATimeError,
    InvalidInputError,
    SessionNotFoundError,
)
from find_a_time.domain.sessions import (
    Session,
    session_from_record,
    session_to_record,
)
from find_a_time.domain.slots import SlotId
from find_a_time.services.codes import CodeGenerator, normalize_code

logger = logging.getLogger(__name__)

Record = dict[str, object]


class SessionBackend(Protocol):
    """Durable key-value storage holding the whole store under one key."""

    def load(self) -> dict[str, object] | None:
        """Return the persisted store, or None when nothing was saved yet."""

    def save(self, payload: dict[str, object]) -> None:
        """Persist the full store, replacing any previous value."""


class SnapshotWriter(Protocol):
    """Delivers full-store snapshots to a backend."""

    def submit(self, payload: dict[str, object]) -> None:
        """Accept the latest snapshot. Must not raise on backend failures."""


@dataclass
class BlockingSnapshotWriter(SnapshotWriter):
    """Saves on the calling thread, logging failures."""

    backend: SessionBackend

    def submit(self, payload: dict[str, object]) -> None:
        """Save immediately."""
        save_snapshot(self.backend, payload)


def save_snapshot(backend: SessionBackend, payload: dict[str, object]) -> None:
    """Save a snapshot; a failure is logged and the in-memory state stays."""
    try:
        backend.save(payload)
    except Exception:
        logger.exception("Failed to persist sessions; keeping in-memory state")


@dataclass
class SessionStore:
    """Single writer for all sessions in the process.

    Sessions are immutable snapshots; a mutation replaces the stored value
    and re-persists the complete mapping. Records are serialized before the
    in-memory mapping changes, so a failed mutation leaves no trace.
    """

    backend: SessionBackend
    code_generator: CodeGenerator = field(default_factory=CodeGenerator)
    sessions: dict[str, Session] = field(default_factory=dict)
    writer: SnapshotWriter | None = None
    _records: dict[str, Record] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        if self.writer is None:
            self.writer = BlockingSnapshotWriter(self.backend)
        for code, session in self.sessions.items():
            self._records.setdefault(code, session_to_record(session))

    @classmethod
    def load(
        cls,
        backend: SessionBackend,
        code_generator: CodeGenerator | None = None,
    ) -> "SessionStore":
        """Create a store populated from the backend.

        An unreadable backend gives an empty store; malformed records are
        skipped and the rest are kept.
        """
        sessions, records = _load_sessions(backend)
        return cls(
            backend=backend,
            code_generator=code_generator or CodeGenerator(),
            sessions=sessions,
            _records=records,
        )

    def create_session(self, title: str) -> Session:
        """Create, persist and return a session with no participants."""
        cleaned = title.strip()
        if not cleaned:
            raise InvalidInputError("Session title must not be empty.")
        session = Session(code=self._unique_code(), title=cleaned)
        self._commit(session)
        logger.info("Created session %s", session.code)
        return session

    def lookup_session(self, code: str) -> Session | None:
        """Return the session for a code, or None when it does not exist."""
        return self.sessions.get(normalize_code(code))

    def append_participant(
        self, code: str, name: str, slots: Iterable[SlotId]
    ) -> Session:
        """Append a participant to a session and return the updated snapshot."""
        normalized = normalize_code(code)
        session = self.sessions.get(normalized)
        if session is None:
            raise SessionNotFoundError(normalized)
        updated = session.with_participant(name, frozenset(slots))
        self._commit(updated)
        logger.info(
            "Session %s now has %d participant(s)",
            normalized,
            len(updated.participants),
        )
        return updated

    def snapshot(self) -> dict[str, object]:
        """Return the persisted form of the whole store."""
        return dict(self._records)

    def _commit(self, session: Session) -> None:
        record = session_to_record(session)
        self.sessions[session.code] = session
        self._records[session.code] = record
        self.writer.submit(self.snapshot())  # type: ignore[union-attr]

    def _unique_code(self) -> str:
        if len(self.sessions) >= self.code_generator.keyspace:
            raise CodeSpaceExhaustedError("No free session codes are left.")
        while True:
            code = self.code_generator.generate()
            if code not in self.sessions:
                return code
            logger.debug("Session code collision on %s, retrying", code)


def _load_sessions(
    backend: SessionBackend,
) -> tuple[dict[str, Session], dict[str, Record]]:
    try:
        payload = backend.load()
    except Exception:
        logger.exception("Failed to load sessions; starting with an empty store")
        return {}, {}
    if not payload:
        return {}, {}
    if not isinstance(payload, dict):
        logger.error("Stored sessions are not a mapping; starting with an empty store")
        return {}, {}
    sessions: dict[str, Session] = {}
    records: dict[str, Record] = {}
    for code, record in payload.items():
        try:
            session = session_from_record(record)  # type: ignore[arg-type]
        except (FindATimeError, KeyError, TypeError, ValueError, AttributeError):
            logger.exception("Skipping corrupt stored session %s", code)
            continue
        sessions[session.code] = session
        records[session.code] = session_to_record(session)
    logger.info("Loaded %d session(s)", len(sessions))
    return sessions, records
