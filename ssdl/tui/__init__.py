"""
Terminal user interface primitives for ssdl.

This module provides the building blocks every screen uses:
    - keys: Logical key vocabulary and keystroke classification
    - input: Key dispatcher owning the terminal while ssdl runs
    - selection: Menu and checkbox cursor state
    - prompts: Modal menu, checkbox and text prompts
    - renderer: Full-frame renderer, windowing and drawing helpers

Usage:
    from ssdl.tui import KeyDispatcher, Renderer, menu_select
"""

from ssdl.tui.input import KeyDispatcher
from ssdl.tui.keys import Key, KeyCategory, KeyEvent, classify
from ssdl.tui.prompts import (
    MENU_CANCELLED,
    checkbox_select,
    choose_key,
    menu_select,
    text_input,
)
from ssdl.tui.renderer import Renderer, visible_window

__all__ = [
    "Key",
    "KeyCategory",
    "KeyEvent",
    "KeyDispatcher",
    "MENU_CANCELLED",
    "Renderer",
    "checkbox_select",
    "choose_key",
    "classify",
    "menu_select",
    "text_input",
    "visible_window",
]
