"""
Logical key vocabulary and keystroke classification.

Every physical keystroke is turned into a KeyEvent before anything else
looks at it. Prompts register handlers against the closed Key enum rather
than raw strings, so a typo in a key name fails at import time instead
of silently never firing.

Categories:
    NAVIGATION - arrows, Enter, Escape, Backspace, Space, Tab
    TEXT       - printable characters (name is the character itself)
    CONTROL    - Ctrl+<letter> combinations, including the interrupt (Ctrl+C)
"""

from dataclasses import dataclass
from enum import Enum

from blessed.keyboard import Keystroke


class KeyCategory(Enum):
    """Kind of keystroke."""
    NAVIGATION = "navigation"
    TEXT = "text"
    CONTROL = "control"


class Key(Enum):
    """
    Logical keys that prompts can bind handlers to.

    The value of each member is the KeyEvent name it matches.
    """
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    RETURN = "return"
    ESCAPE = "escape"
    BACKSPACE = "backspace"
    SPACE = "space"
    TAB = "tab"
    LOWER_A = "a"
    UPPER_A = "A"
    LOWER_Q = "q"
    UPPER_Q = "Q"

    @classmethod
    def for_event(cls, event: "KeyEvent") -> "Key | None":
        """Return the logical key matching an event, or None."""
        return _KEYS_BY_NAME.get(event.name)


_KEYS_BY_NAME = {key.value: key for key in Key}

INTERRUPT = "interrupt"

# blessed sequence names -> logical names
_SEQUENCE_NAMES = {
    "KEY_UP": "up",
    "KEY_DOWN": "down",
    "KEY_LEFT": "left",
    "KEY_RIGHT": "right",
    "KEY_ENTER": "return",
    "KEY_ESCAPE": "escape",
    "KEY_BACKSPACE": "backspace",
    "KEY_DELETE": "backspace",
    "KEY_TAB": "tab",
}

# Raw characters that terminals send for navigation keys when blessed
# does not report them as sequences (e.g. in tests or on odd terminals)
_RAW_NAMES = {
    "\r": "return",
    "\n": "return",
    "\x1b": "escape",
    "\x7f": "backspace",
    "\x08": "backspace",
    "\t": "tab",
    " ": "space",
}


@dataclass(frozen=True)
class KeyEvent:
    """
    A classified keystroke.

    Attributes:
        category: NAVIGATION, TEXT or CONTROL.
        name: Logical name ("up", "return", "ctrl+d", "interrupt") or,
              for TEXT events, the character itself.
        char: The raw character(s) received ("" for pure sequences).
    """
    category: KeyCategory
    name: str
    char: str = ""

    @property
    def is_interrupt(self) -> bool:
        return self.category is KeyCategory.CONTROL and self.name == INTERRUPT

    @property
    def is_printable(self) -> bool:
        """True if the event can be inserted into a text buffer."""
        return self.category is KeyCategory.TEXT or self.name == "space"


def classify(keystroke: Keystroke | str) -> KeyEvent | None:
    """
    Classify a keystroke from blessed (or a plain string) into a KeyEvent.

    Args:
        keystroke: Value returned by Terminal.inkey(), or a raw string.

    Returns:
        The classified event, or None for an empty keystroke (inkey timeout)
        and for sequences with no logical meaning (F-keys, Home, ...).

    Examples:
        classify("\\r")     # KeyEvent(NAVIGATION, "return", "\\r")
        classify("a")      # KeyEvent(TEXT, "a", "a")
        classify("\\x03")   # KeyEvent(CONTROL, "interrupt", "\\x03")
    """
    sequence_name = getattr(keystroke, "name", None)
    if getattr(keystroke, "is_sequence", False) and sequence_name:
        name = _SEQUENCE_NAMES.get(sequence_name)
        if name is None:
            return None
        return KeyEvent(KeyCategory.NAVIGATION, name, str(keystroke))

    char = str(keystroke)
    if not char:
        return None

    if char in _RAW_NAMES:
        return KeyEvent(KeyCategory.NAVIGATION, _RAW_NAMES[char], char)

    if char == "\x03":
        return KeyEvent(KeyCategory.CONTROL, INTERRUPT, char)

    if len(char) == 1 and ord(char) < 0x20:
        return KeyEvent(KeyCategory.CONTROL, f"ctrl+{chr(ord(char) + 96)}", char)

    if not char.isprintable():
        return None

    return KeyEvent(KeyCategory.TEXT, char, char)
