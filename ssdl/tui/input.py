"""
Key input dispatcher.

The dispatcher owns keyboard input for the whole process. It works in one
of two mutually exclusive modes:

    Navigation mode
        Each keystroke is classified and looked up in the handler table.
        The table maps a logical Key to exactly one callback and is
        replaced wholesale whenever a new prompt takes over.

    Text mode
        Keystrokes edit a line buffer instead of being dispatched:
        Return submits, Backspace trims, printable characters append.
        Escape leaves text mode, clears the buffer and then fires the
        navigation ESCAPE handler so the active prompt can cancel.

Ctrl+C is handled outside the handler table in both modes: it raises
KeyboardInterrupt, which unwinds through the dispatcher's context manager
so the terminal is restored before the process exits.

Usage:
    with KeyDispatcher(term) as keys:
        keys.on(Key.RETURN, lambda event: ...)
        keys.run_until(lambda: done)
"""

from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import Callable

from blessed import Terminal
from blessed.keyboard import Keystroke

from ssdl.core.logger import get_logger
from ssdl.tui.keys import Key, KeyEvent, classify

logger = get_logger(__name__)


KeyHandler = Callable[[KeyEvent], None]
KeySource = Callable[[], Keystroke | str]


@dataclass
class TextEditState:
    """
    Line buffer used while the dispatcher is in text mode.

    Attributes:
        buffer: Current text.
        on_change: Called with the buffer after every edit.
        on_submit: Called with the buffer when Return is pressed.
    """
    buffer: str = ""
    on_change: Callable[[str], None] = field(default=lambda text: None)
    on_submit: Callable[[str], None] = field(default=lambda text: None)


class KeyDispatcher:
    """
    Turns keystrokes into logical key events and routes them.

    The dispatcher is a context manager: entering puts the terminal in
    cbreak mode (keys delivered one at a time, no echo) with a hidden
    cursor on the alternate screen; leaving restores the terminal, on
    every exit path.

    Attributes:
        terminal: blessed Terminal, or None when driven by a custom key source.
    """

    def __init__(
        self,
        terminal: Terminal | None = None,
        key_source: KeySource | None = None
    ) -> None:
        """
        Initialize the dispatcher.

        Args:
            terminal: Terminal to take over. Required unless key_source is given.
            key_source: Callable returning the next keystroke. Defaults to
                        terminal.inkey (blocking read).

        Raises:
            ValueError: If neither terminal nor key_source is given.
        """
        if terminal is None and key_source is None:
            raise ValueError("KeyDispatcher needs a terminal or a key source")

        self.terminal = terminal
        self._read_key: KeySource = key_source or terminal.inkey
        self._handlers: dict[Key, KeyHandler] = {}
        self._text: TextEditState | None = None
        self._stack: ExitStack | None = None

    # =========================================================================
    # Terminal ownership
    # =========================================================================

    def __enter__(self) -> "KeyDispatcher":
        stack = ExitStack()
        if self.terminal is not None:
            stack.enter_context(self.terminal.fullscreen())
            stack.enter_context(self.terminal.cbreak())
            stack.enter_context(self.terminal.hidden_cursor())
        self._stack = stack
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.clear_handlers()
        self.stop_text_input()
        if self._stack is not None:
            self._stack.close()
            self._stack = None

    # =========================================================================
    # Handler table
    # =========================================================================

    def on(self, key: Key, handler: KeyHandler) -> None:
        """Register the handler for a key, replacing any previous one."""
        self._handlers[key] = handler

    def clear_handlers(self) -> None:
        """Remove every registered handler."""
        self._handlers = {}

    # =========================================================================
    # Text mode
    # =========================================================================

    @property
    def in_text_mode(self) -> bool:
        return self._text is not None

    @property
    def text_buffer(self) -> str:
        """Current text mode buffer ("" in navigation mode)."""
        return self._text.buffer if self._text is not None else ""

    def start_text_input(
        self,
        initial: str = "",
        on_change: Callable[[str], None] | None = None,
        on_submit: Callable[[str], None] | None = None
    ) -> None:
        """
        Switch to text mode with the buffer seeded to initial.

        Args:
            initial: Starting buffer content.
            on_change: Called with the buffer after every edit.
            on_submit: Called with the buffer when Return is pressed.
        """
        state = TextEditState(buffer=initial)
        if on_change is not None:
            state.on_change = on_change
        if on_submit is not None:
            state.on_submit = on_submit
        self._text = state

    def stop_text_input(self) -> None:
        """Force navigation mode, discarding the buffer."""
        self._text = None

    # =========================================================================
    # Dispatch
    # =========================================================================

    def feed(self, keystroke: Keystroke | str) -> None:
        """Classify one keystroke and dispatch it."""
        event = classify(keystroke)
        if event is not None:
            self.dispatch(event)

    def dispatch(self, event: KeyEvent) -> None:
        """
        Route a classified event.

        Raises:
            KeyboardInterrupt: For the interrupt event, in any mode.
        """
        if event.is_interrupt:
            raise KeyboardInterrupt

        if self._text is not None:
            self._dispatch_text(self._text, event)
            return

        key = Key.for_event(event)
        if key is None:
            return
        handler = self._handlers.get(key)
        if handler is not None:
            handler(event)

    def _dispatch_text(self, state: TextEditState, event: KeyEvent) -> None:
        if event.name == "return":
            self._text = None
            state.on_submit(state.buffer)
        elif event.name == "escape":
            self._text = None
            handler = self._handlers.get(Key.ESCAPE)
            if handler is not None:
                handler(event)
        elif event.name == "backspace":
            state.buffer = state.buffer[:-1]
            state.on_change(state.buffer)
        elif event.is_printable:
            state.buffer += event.char
            state.on_change(state.buffer)

    def run_until(self, done: Callable[[], bool]) -> None:
        """
        Read and dispatch keystrokes until done() returns True.

        Args:
            done: Checked before every read.
        """
        while not done():
            self.feed(self._read_key())
