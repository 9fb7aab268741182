"""Shared test fixtures."""

import logging
import random
from dataclasses import dataclass, field

import pytest

from find_a_time.config import Settings
from find_a_time.containers import AppContainer
from find_a_time.services.codes import CodeGenerator
from find_a_time.services.scheduling import SchedulingService
from find_a_time.services.sessions import SessionBackend, SessionStore


@dataclass
class RecordingSessionBackend(SessionBackend):
    """In-memory backend that records every save and can be told to fail."""

    payload: dict[str, object] | None = None
    saves: list[dict[str, object]] = field(default_factory=list)
    fail_on_load: bool = False
    fail_on_save: bool = False

    def load(self) -> dict[str, object] | None:
        if self.fail_on_load:
            raise ConnectionError("storage unavailable")
        return self.payload

    def save(self, payload: dict[str, object]) -> None:
        if self.fail_on_save:
            raise ConnectionError("storage unavailable")
        self.saves.append(payload)
        self.payload = payload


@pytest.fixture(autouse=True)
def _propagate_app_logs(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(logging.getLogger("find_a_time"), "propagate", True)


@pytest.fixture
def settings() -> Settings:
    return Settings(supabase_url=None, supabase_service_key=None)


@pytest.fixture
def backend() -> RecordingSessionBackend:
    return RecordingSessionBackend()


@pytest.fixture
def code_generator() -> CodeGenerator:
    return CodeGenerator(rng=random.Random(1234))


@pytest.fixture
def store(
    backend: RecordingSessionBackend, code_generator: CodeGenerator
) -> SessionStore:
    return SessionStore.load(backend, code_generator=code_generator)


@pytest.fixture
def scheduling_service(store: SessionStore) -> SchedulingService:
    return SchedulingService(store)


@pytest.fixture
def container(
    settings: Settings,
    store: SessionStore,
    scheduling_service: SchedulingService,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        session_store=store,
        scheduling_service=scheduling_service,
    )
