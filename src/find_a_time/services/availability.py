"""Availability aggregation and best-time ranking."""

from dataclasses import dataclass
from enum import Enum

from find_a_time.domain.sessions import Participant, Session
from find_a_time.domain.slots import SlotId, in_grid_order

BEST_TIMES_LIMIT = 5
_SOME_THRESHOLD = 0.33
_MANY_THRESHOLD = 0.66

OverlapMap = dict[SlotId, list[Participant]]
BestTimes = list[tuple[SlotId, list[Participant]]]


class CoverageBand(str, Enum):
    """Display tier for the share of participants free in a slot."""

    NONE = "none"
    SOME = "some"
    MANY = "many"
    MOST = "most"


@dataclass(frozen=True)
class SessionResults:
    """Everything the results view needs for one session."""

    session: Session
    total_participants: int
    overlap: OverlapMap
    best_times: BestTimes
    max_overlap: int


def compute_overlap(session: Session) -> OverlapMap:
    """Map each picked slot to the participants free then, in submission order.

    Slots nobody picked are absent rather than mapped to an empty list.
    """
    overlap: OverlapMap = {}
    for participant in session.participants:
        for slot in in_grid_order(participant.slots):
            overlap.setdefault(slot, []).append(participant)
    return overlap


def rank_best_times(session: Session, limit: int = BEST_TIMES_LIMIT) -> BestTimes:
    """Return up to ``limit`` slots shared by at least two people, most first.

    Ties keep grid order (day, then hour).
    """
    if not session.participants:
        return []
    shared = [
        (slot, participants)
        for slot, participants in compute_overlap(session).items()
        if len(participants) > 1
    ]
    shared.sort(key=lambda entry: (-len(entry[1]), entry[0].position))
    return shared[:limit]


def coverage_ratio(
    slot_participants: list[Participant] | None, total_participants: int
) -> float:
    """Share of participants free in a slot; the denominator is floored at 1."""
    count = len(slot_participants or [])
    return count / max(total_participants, 1)


def coverage_band(ratio: float) -> CoverageBand:
    """Map a coverage ratio to its display tier."""
    if ratio <= 0:
        return CoverageBand.NONE
    if ratio < _SOME_THRESHOLD:
        return CoverageBand.SOME
    if ratio < _MANY_THRESHOLD:
        return CoverageBand.MANY
    return CoverageBand.MOST


def build_results(session: Session) -> SessionResults:
    """Aggregate overlap and ranking for the results view."""
    overlap = compute_overlap(session)
    return SessionResults(
        session=session,
        total_participants=len(session.participants),
        overlap=overlap,
        best_times=rank_best_times(session),
        max_overlap=max((len(ps) for ps in overlap.values()), default=1),
    )
