"""
Modal prompts built on the key dispatcher.

Each prompt follows the same protocol:

    1. Clear the dispatcher's handler table.
    2. Install handlers for the prompt's keys.
    3. Call the render callback once immediately and again after every
       state change.
    4. Settle exactly one result, clear the handlers and return it.

Prompts never draw anything themselves: the caller supplies a render
callback that builds the full frame, which keeps screen layout out of the
interaction logic.

Cancelled results:
    menu_select      -> MENU_CANCELLED (-1)
    checkbox_select  -> None  (an empty set means "confirmed, nothing chosen")
    text_input       -> None
"""

from typing import Callable, Generic, Mapping, Sequence, TypeVar

from ssdl.tui.input import KeyDispatcher
from ssdl.tui.keys import Key
from ssdl.tui.selection import CheckboxSelection, MenuSelection

T = TypeVar("T")
R = TypeVar("R")

MENU_CANCELLED = -1


class Outcome(Generic[R]):
    """
    A result that can be settled only once.

    Later calls to settle() are ignored, so a prompt returns the first
    decision even if more keystrokes were already queued.
    """

    def __init__(self) -> None:
        self.settled = False
        self.value: R | None = None

    def settle(self, value: R | None) -> None:
        if self.settled:
            return
        self.value = value
        self.settled = True


def _run(keys: KeyDispatcher, outcome: Outcome[R]) -> R | None:
    try:
        keys.run_until(lambda: outcome.settled)
    finally:
        keys.stop_text_input()
        keys.clear_handlers()
    return outcome.value


def menu_select(
    keys: KeyDispatcher,
    items: Sequence[T],
    render: Callable[[Sequence[T], int], None],
    initial: int = 0
) -> int:
    """
    Let the user pick one item.

    Up/Down move the cursor with wraparound, Return picks the highlighted
    item and Escape cancels.

    Args:
        keys: Dispatcher to read keys from.
        items: The choices.
        render: Called as render(items, cursor) to draw the frame.
        initial: Starting cursor index.

    Returns:
        Index of the chosen item, or MENU_CANCELLED. An empty item list
        returns MENU_CANCELLED immediately without reading any keys.
    """
    if not items:
        return MENU_CANCELLED

    selection = MenuSelection(items, cursor=initial % len(items))
    outcome: Outcome[int] = Outcome()

    def move(step: Callable[[], None]) -> None:
        step()
        render(selection.items, selection.cursor)

    keys.clear_handlers()
    keys.on(Key.UP, lambda event: move(selection.move_up))
    keys.on(Key.DOWN, lambda event: move(selection.move_down))
    keys.on(Key.RETURN, lambda event: outcome.settle(selection.cursor))
    keys.on(Key.ESCAPE, lambda event: outcome.settle(MENU_CANCELLED))

    render(selection.items, selection.cursor)
    return _run(keys, outcome)


def checkbox_select(
    keys: KeyDispatcher,
    items: Sequence[T],
    render: Callable[[Sequence[T], int, set[int]], None]
) -> set[int] | None:
    """
    Let the user pick any subset of items. Every item starts checked.

    Up/Down move the cursor with wraparound, Space toggles the highlighted
    item, a/A toggles between all and none, Return confirms and Escape
    cancels.

    Args:
        keys: Dispatcher to read keys from.
        items: The choices.
        render: Called as render(items, cursor, checked) to draw the frame.

    Returns:
        The set of checked indices (possibly empty), or None if cancelled.
        An empty item list returns None immediately.
    """
    if not items:
        return None

    selection: CheckboxSelection[T] = CheckboxSelection(items)
    outcome: Outcome[set[int]] = Outcome()

    def update(step: Callable[[], None]) -> None:
        step()
        render(selection.items, selection.cursor, selection.checked)

    keys.clear_handlers()
    keys.on(Key.UP, lambda event: update(selection.move_up))
    keys.on(Key.DOWN, lambda event: update(selection.move_down))
    keys.on(Key.SPACE, lambda event: update(selection.toggle))
    keys.on(Key.LOWER_A, lambda event: update(selection.toggle_all))
    keys.on(Key.UPPER_A, lambda event: update(selection.toggle_all))
    keys.on(Key.RETURN, lambda event: outcome.settle(set(selection.checked)))
    keys.on(Key.ESCAPE, lambda event: outcome.settle(None))

    render(selection.items, selection.cursor, selection.checked)
    return _run(keys, outcome)


def text_input(
    keys: KeyDispatcher,
    render: Callable[[str], None],
    initial: str = ""
) -> str | None:
    """
    Let the user type a line of text.

    The render callback receives the live buffer after every keystroke, so
    callers can show validation feedback as the user types.

    Args:
        keys: Dispatcher to read keys from.
        render: Called as render(buffer) to draw the frame.
        initial: Starting buffer content.

    Returns:
        The raw buffer when Return is pressed (trimming is up to the
        caller), or None if cancelled with Escape.
    """
    outcome: Outcome[str] = Outcome()

    keys.clear_handlers()
    keys.on(Key.ESCAPE, lambda event: outcome.settle(None))
    keys.start_text_input(initial, on_change=render, on_submit=outcome.settle)

    render(initial)
    return _run(keys, outcome)


def choose_key(
    keys: KeyDispatcher,
    choices: Mapping[Key, R],
    render: Callable[[], None] | None = None
) -> R:
    """
    Wait for one of a fixed set of keys.

    Used by screens that only need a single decision such as
    "Enter to continue, q to quit".

    Args:
        keys: Dispatcher to read keys from.
        choices: Maps each accepted key to the value returned for it.
        render: Optional callback drawing the frame once before waiting.

    Returns:
        The value mapped to the first accepted key pressed.
    """
    outcome: Outcome[R] = Outcome()

    keys.clear_handlers()
    for key, value in choices.items():
        keys.on(key, lambda event, value=value: outcome.settle(value))

    if render is not None:
        render()
    return _run(keys, outcome)
