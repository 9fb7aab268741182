"""In-progress slot selection for one participant, driven by pointer events."""

from dataclasses import dataclass, field
from enum import Enum

from find_a_time.domain.slots import SlotId


class DragMode(str, Enum):
    """What a drag gesture does to the cells it passes over."""

    ADD = "add"
    REMOVE = "remove"


@dataclass
class SelectionSession:
    """Two-state machine: idle, or dragging with a mode fixed at press time."""

    _selected: set[SlotId] = field(default_factory=set)
    mode: DragMode | None = None

    @property
    def is_dragging(self) -> bool:
        return self.mode is not None

    @property
    def selected(self) -> frozenset[SlotId]:
        """Snapshot of the current picks, ready for submission."""
        return frozenset(self._selected)

    def is_selected(self, slot: SlotId) -> bool:
        return slot in self._selected

    def press(self, slot: SlotId) -> None:
        """Start a gesture on a cell, toggling it and fixing the drag mode."""
        if slot in self._selected:
            self.mode = DragMode.REMOVE
        else:
            self.mode = DragMode.ADD
        self._apply(slot)

    def enter(self, slot: SlotId) -> None:
        """Apply the current drag mode to a cell; ignored when idle."""
        if self.mode is None:
            return
        self._apply(slot)

    def release(self) -> None:
        """End the gesture. Fired for any pointer release, inside the grid or not."""
        self.mode = None

    def reset(self) -> None:
        """Clear the selection for a fresh submission."""
        self._selected.clear()
        self.mode = None

    def _apply(self, slot: SlotId) -> None:
        if self.mode is DragMode.ADD:
            self._selected.add(slot)
        else:
            self._selected.discard(slot)
