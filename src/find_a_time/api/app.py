"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status

from find_a_time.api.models import CreateSessionRequest, SubmitAvailabilityRequest
from find_a_time.api.persistence import ThreadpoolSnapshotWriter
from find_a_time.app_logging import configure_logging
from find_a_time.containers import AppContainer
from find_a_time.domain.errors import (
    CodeSpaceExhaustedError,
    InvalidInputError,
    SessionNotFoundError,
)
from find_a_time.domain.sessions import Participant, Session
from find_a_time.domain.slots import (
    DAYS,
    HOURS,
    enumerate_slots,
    format_hour,
    in_grid_order,
    slot_label,
)
from find_a_time.services.availability import (
    SessionResults,
    coverage_band,
    coverage_ratio,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        store = app.state.container.session_store
        previous_writer = store.writer
        writer = ThreadpoolSnapshotWriter(store.backend)
        store.writer = writer
        try:
            yield
        finally:
            await writer.drain()
            store.writer = previous_writer

    app = FastAPI(title="Find a Time", lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/grid")
    async def grid() -> dict[str, object]:
        """Describe the weekly grid so clients can render cells."""
        return {
            "days": list(DAYS),
            "hours": [{"hour": hour, "label": format_hour(hour)} for hour in HOURS],
            "slots": [slot.key for slot in enumerate_slots(by_hour=True)],
        }

    @app.post("/sessions", status_code=status.HTTP_201_CREATED)
    async def create_session(
        payload: CreateSessionRequest, request: Request
    ) -> dict[str, object]:
        """Create a session and return its shareable code."""
        state_container: AppContainer = request.app.state.container
        try:
            session = state_container.scheduling_service.create_session(payload.title)
        except InvalidInputError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        except CodeSpaceExhaustedError as exc:
            logger.error("Cannot create session: %s", exc)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
            ) from exc
        return _serialize_session(session)

    @app.get("/sessions/{code}")
    async def join_session(code: str, request: Request) -> dict[str, object]:
        """Look up a session by its shared code."""
        state_container: AppContainer = request.app.state.container
        try:
            session = state_container.scheduling_service.join_session(code)
        except SessionNotFoundError as exc:
            logger.info("Join attempt for unknown session %s", exc.code)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
            ) from exc
        return _serialize_session(session)

    @app.post("/sessions/{code}/participants")
    async def submit_availability(
        code: str, payload: SubmitAvailabilityRequest, request: Request
    ) -> dict[str, object]:
        """Record one participant's availability."""
        state_container: AppContainer = request.app.state.container
        try:
            session = state_container.scheduling_service.submit_availability(
                code, payload.name, payload.slots
            )
        except InvalidInputError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        except SessionNotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
            ) from exc
        return _serialize_session(session)

    @app.get("/sessions/{code}/results")
    async def results(code: str, request: Request) -> dict[str, object]:
        """Return the availability overview and best times."""
        state_container: AppContainer = request.app.state.container
        try:
            session_results = state_container.scheduling_service.request_results(code)
        except SessionNotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
            ) from exc
        return _serialize_results(session_results)

    return app


def _serialize_participant(participant: Participant) -> dict[str, object]:
    return {
        "name": participant.name,
        "color": participant.color,
        "color_index": participant.color_index,
        "slot_count": participant.slot_count,
        "slots": [slot.key for slot in in_grid_order(participant.slots)],
    }


def _serialize_session(session: Session) -> dict[str, object]:
    return {
        "code": session.code,
        "title": session.title,
        "participants": [_serialize_participant(p) for p in session.participants],
    }


def _serialize_results(results: SessionResults) -> dict[str, object]:
    total = results.total_participants
    overlap = []
    for slot in enumerate_slots(by_hour=True):
        participants = results.overlap.get(slot)
        if not participants:
            continue
        ratio = coverage_ratio(participants, total)
        overlap.append(
            {
                "slot": slot.key,
                "label": slot_label(slot),
                "participants": [p.name for p in participants],
                "count": len(participants),
                "ratio": ratio,
                "band": coverage_band(ratio).value,
            }
        )
    return {
        "session": _serialize_session(results.session),
        "total_participants": total,
        "max_overlap": results.max_overlap,
        "overlap": overlap,
        "best_times": [
            {
                "slot": slot.key,
                "label": slot_label(slot),
                "participants": [p.name for p in participants],
                "count": len(participants),
            }
            for slot, participants in results.best_times
        ],
    }
