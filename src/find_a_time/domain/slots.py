"""Weekly availability grid and slot identifiers."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from find_a_time.domain.errors import InvalidInputError

DAYS: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
FIRST_HOUR = 7
LAST_HOUR = 20
HOURS: tuple[int, ...] = tuple(range(FIRST_HOUR, LAST_HOUR + 1))

_SEPARATOR = "-"


@dataclass(frozen=True)
class SlotId:
    """One (weekday, hour) cell of the grid."""

    day: str
    hour: int

    def __post_init__(self) -> None:
        if self.day not in DAYS or self.hour not in HOURS:
            raise InvalidInputError(f"Slot outside the grid: {self.day} {self.hour}")

    @property
    def key(self) -> str:
        """Canonical string form used as a mapping key."""
        return slot_key(self.day, self.hour)

    @property
    def position(self) -> tuple[int, int]:
        """Day-major grid position, used for deterministic ordering."""
        return DAYS.index(self.day), self.hour

    def __str__(self) -> str:
        return self.key


def enumerate_slots(by_hour: bool = False) -> Iterator[SlotId]:
    """Yield every grid slot, day-major by default or hour-major for row rendering."""
    if by_hour:
        for hour in HOURS:
            for day in DAYS:
                yield SlotId(day=day, hour=hour)
        return
    for day in DAYS:
        for hour in HOURS:
            yield SlotId(day=day, hour=hour)


def format_hour(hour: int) -> str:
    """Return a 12-hour label such as ``"7 am"`` or ``"1 pm"``."""
    if hour == 12:
        return "12 pm"
    if hour > 12:
        return f"{hour - 12} pm"
    return f"{hour} am"


def slot_key(day: str, hour: int) -> str:
    """Return the canonical key for a slot, e.g. ``"Wed-14"``."""
    return f"{day}{_SEPARATOR}{hour}"


def parse_slot_key(key: str) -> SlotId:
    """Parse a key produced by :func:`slot_key` back into a grid slot."""
    day, sep, raw_hour = key.strip().partition(_SEPARATOR)
    if not sep or not raw_hour.isdigit():
        raise InvalidInputError(f"Unknown slot: {key!r}")
    return SlotId(day=day, hour=int(raw_hour))


def slot_label(slot: SlotId) -> str:
    """Human-readable label, e.g. ``"Mon 9 am"``."""
    return f"{slot.day} {format_hour(slot.hour)}"


def in_grid_order(slots: Iterable[SlotId]) -> list[SlotId]:
    """Return slots sorted day-major, then by hour."""
    return sorted(slots, key=lambda slot: slot.position)
