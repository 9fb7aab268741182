"""Dependency container wiring for the application."""

import logging
from dataclasses import dataclass

from supabase import create_client

from find_a_time.adapters.memory_session_backend import InMemorySessionBackend
from find_a_time.adapters.supabase_session_backend import SupabaseSessionBackend
from find_a_time.config import Settings
from find_a_time.services.scheduling import SchedulingService
from find_a_time.services.sessions import SessionBackend, SessionStore

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_store: SessionStore
    scheduling_service: SchedulingService


def build_backend(settings: Settings) -> SessionBackend:
    """Pick the durable backend for the configured environment."""
    if settings.uses_supabase:
        client = create_client(
            settings.supabase_url,  # type: ignore[arg-type]
            settings.supabase_service_key,  # type: ignore[arg-type]
        )
        return SupabaseSessionBackend(
            client, table=settings.store_table, key=settings.store_key
        )
    logger.warning("Supabase is not configured; sessions are kept in memory only")
    return InMemorySessionBackend()


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container. Loads the store once."""
    resolved_settings = settings or Settings()
    session_store = SessionStore.load(build_backend(resolved_settings))
    return AppContainer(
        settings=resolved_settings,
        session_store=session_store,
        scheduling_service=SchedulingService(session_store),
    )
