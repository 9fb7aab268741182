"""Tests for overlap aggregation and best-time ranking."""

import pytest

from find_a_time.domain.sessions import Session
from find_a_time.domain.slots import SlotId
from find_a_time.services.availability import (
    CoverageBand,
    build_results,
    compute_overlap,
    coverage_band,
    coverage_ratio,
    rank_best_times,
)

MON_9 = SlotId("Mon", 9)
MON_10 = SlotId("Mon", 10)
MON_11 = SlotId("Mon", 11)


def _session(*responses: tuple[str, set[SlotId]]) -> Session:
    session = Session(code="oak-sky-100", title="Team sync")
    for name, slots in responses:
        session = session.with_participant(name, frozenset(slots))
    return session


def test_overlap_for_two_participants() -> None:
    session = _session(("Amy", {MON_9, MON_10}), ("Bo", {MON_10, MON_11}))
    amy, bo = session.participants

    overlap = compute_overlap(session)

    assert overlap == {MON_9: [amy], MON_10: [amy, bo], MON_11: [bo]}
    assert rank_best_times(session) == [(MON_10, [amy, bo])]


def test_overlap_omits_slots_nobody_picked() -> None:
    session = _session(("Amy", {MON_9}))

    assert SlotId("Sun", 20) not in compute_overlap(session)


def test_overlap_buckets_independent_of_submission_order() -> None:
    forward = _session(("Amy", {MON_9, MON_10}), ("Bo", {MON_10}), ("Cy", {MON_9}))
    backward = _session(("Cy", {MON_9}), ("Bo", {MON_10}), ("Amy", {MON_9, MON_10}))

    def names(session: Session) -> dict[SlotId, set[str]]:
        return {
            slot: {p.name for p in ps} for slot, ps in compute_overlap(session).items()
        }

    assert names(forward) == names(backward)
    assert [p.name for p in compute_overlap(backward)[MON_9]] == ["Cy", "Amy"]


def test_rank_best_times_filters_single_participant_slots() -> None:
    session = _session(("Amy", {MON_9}), ("Bo", {MON_10}))

    assert rank_best_times(session) == []


def test_rank_best_times_sorts_by_count_and_caps_at_five() -> None:
    slots = [SlotId("Tue", hour) for hour in range(8, 16)]
    session = _session(
        ("A", set(slots)),
        ("B", set(slots)),
        ("C", set(slots[4:])),
        ("D", {slots[7]}),
    )

    ranked = rank_best_times(session)
    counts = [len(ps) for _, ps in ranked]

    assert len(ranked) == 5
    assert counts == sorted(counts, reverse=True)
    assert all(count > 1 for count in counts)
    assert ranked[0][0] == slots[7]
    assert [slot for slot, _ in ranked[1:4]] == slots[4:7]
    assert ranked[4][0] == slots[0]


def test_rank_best_times_ties_follow_grid_order() -> None:
    picks = {SlotId("Wed", 9), SlotId("Mon", 14), SlotId("Mon", 8)}
    session = _session(("Amy", picks), ("Bo", picks))

    assert [slot for slot, _ in rank_best_times(session)] == [
        SlotId("Mon", 8),
        SlotId("Mon", 14),
        SlotId("Wed", 9),
    ]


def test_rank_best_times_empty_session() -> None:
    assert rank_best_times(_session()) == []


def test_coverage_ratio_floors_denominator() -> None:
    assert coverage_ratio([], 0) == 0
    assert coverage_ratio(None, 0) == 0


def test_coverage_ratio_share_of_participants() -> None:
    session = _session(("Amy", {MON_9}), ("Bo", {MON_9}), ("Cy", set()))
    overlap = compute_overlap(session)

    assert coverage_ratio(overlap[MON_9], 3) == pytest.approx(2 / 3)
    assert coverage_ratio(overlap.get(MON_10), 3) == 0


@pytest.mark.parametrize(
    ("ratio", "band"),
    [
        (0.0, CoverageBand.NONE),
        (0.2, CoverageBand.SOME),
        (0.33, CoverageBand.MANY),
        (0.5, CoverageBand.MANY),
        (0.66, CoverageBand.MOST),
        (1.0, CoverageBand.MOST),
    ],
)
def test_coverage_band_edges(ratio: float, band: CoverageBand) -> None:
    assert coverage_band(ratio) is band


def test_build_results_bundles_view_data() -> None:
    session = _session(("Amy", {MON_9, MON_10}), ("Bo", {MON_10}))

    results = build_results(session)

    assert results.total_participants == 2
    assert results.max_overlap == 2
    assert results.best_times == rank_best_times(session)
    assert results.overlap == compute_overlap(session)


def test_build_results_without_participants() -> None:
    results = build_results(_session())

    assert results.total_participants == 0
    assert results.overlap == {}
    assert results.best_times == []
    assert results.max_overlap == 1
