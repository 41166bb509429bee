"""
Selection state for menus and checkbox lists.

These are plain state holders with no terminal access, so the cursor and
checkbox rules can be exercised directly.
"""

from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

T = TypeVar("T")


@dataclass
class MenuSelection(Generic[T]):
    """
    Single-choice cursor over a non-empty list. Moving past either end wraps.

    Attributes:
        items: The choices, in display order.
        cursor: Index of the highlighted item.
    """
    items: Sequence[T]
    cursor: int = 0

    def move_up(self) -> None:
        self.cursor = (self.cursor - 1) % len(self.items)

    def move_down(self) -> None:
        self.cursor = (self.cursor + 1) % len(self.items)


@dataclass
class CheckboxSelection(MenuSelection[T]):
    """
    Multi-choice cursor over a non-empty list.

    Every item starts checked unless an explicit set is given.

    Attributes:
        checked: Indices of the checked items.
    """
    checked: set[int] | None = None

    def __post_init__(self) -> None:
        if self.checked is None:
            self.checked = set(range(len(self.items)))

    def toggle(self) -> None:
        """Flip the checked state of the item under the cursor."""
        if self.cursor in self.checked:
            self.checked.discard(self.cursor)
        else:
            self.checked.add(self.cursor)

    def toggle_all(self) -> None:
        """Check everything, or clear everything if all items are already checked."""
        if len(self.checked) == len(self.items):
            self.checked = set()
        else:
            self.checked = set(range(len(self.items)))
