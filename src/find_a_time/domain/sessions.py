"""Domain models for scheduling sessions."""

from dataclasses import dataclass, field

from find_a_time.domain.slots import SlotId, in_grid_order, parse_slot_key

PARTICIPANT_PALETTE: tuple[str, ...] = (
    "#1B6896",
    "#4CAF7D",
    "#E8732A",
    "#2A8FA8",
    "#7B68EE",
    "#E8418D",
    "#F5A623",
    "#52B788",
    "#4A90D9",
)


@dataclass(frozen=True)
class Participant:
    """One submitted availability response."""

    name: str
    slots: frozenset[SlotId] = field(default_factory=frozenset)
    color_index: int = 0

    @property
    def color(self) -> str:
        """Palette color used to display this participant."""
        return PARTICIPANT_PALETTE[self.color_index % len(PARTICIPANT_PALETTE)]

    @property
    def slot_count(self) -> int:
        return len(self.slots)


@dataclass(frozen=True)
class Session:
    """A shareable scheduling poll. Participants are kept in submission order."""

    code: str
    title: str
    participants: tuple[Participant, ...] = ()

    def with_participant(self, name: str, slots: frozenset[SlotId]) -> "Session":
        """Return a copy extended by one participant with the next palette color."""
        participant = Participant(
            name=name,
            slots=slots,
            color_index=len(self.participants) % len(PARTICIPANT_PALETTE),
        )
        return Session(
            code=self.code,
            title=self.title,
            participants=(*self.participants, participant),
        )


def session_to_record(session: Session) -> dict[str, object]:
    """Serialize a session into its persisted record."""
    return {
        "code": session.code,
        "title": session.title,
        "participants": [
            {
                "name": participant.name,
                "slots": [slot.key for slot in in_grid_order(participant.slots)],
                "colorIndex": participant.color_index,
            }
            for participant in session.participants
        ],
    }


def session_from_record(record: dict[str, object]) -> Session:
    """Build a session from a persisted record.

    Raises ``KeyError``, ``TypeError`` or ``InvalidInputError`` for malformed
    records; the caller decides how to recover.
    """
    participants = []
    for row in record["participants"]:  # type: ignore[union-attr]
        participants.append(
            Participant(
                name=str(row["name"]),
                slots=frozenset(parse_slot_key(key) for key in row["slots"]),
                color_index=int(row["colorIndex"]),
            )
        )
    return Session(
        code=str(record["code"]),
        title=str(record["title"]),
        participants=tuple(participants),
    )
