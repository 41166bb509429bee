"""Tests for selection state and the modal prompts"""

import pytest

from ssdl.tui.keys import Key
from ssdl.tui.prompts import MENU_CANCELLED, checkbox_select, choose_key, menu_select, text_input
from ssdl.tui.selection import CheckboxSelection, MenuSelection

from fakes import BACKSPACE, DOWN, ENTER, ESC, SPACE, UP, scripted_dispatcher, typed


class TestMenuSelection:
    """Test cursor movement"""

    @pytest.mark.parametrize("length", [1, 2, 5])
    def test_wraparound(self, length):
        """Up from the first item goes to the last and back down"""
        selection = MenuSelection(list(range(length)))

        selection.move_up()
        assert selection.cursor == length - 1

        selection.move_down()
        assert selection.cursor == 0


class TestCheckboxSelection:
    """Test checkbox state"""

    def test_starts_all_checked(self):
        """Every item is checked initially"""
        assert CheckboxSelection(["a", "b", "c"]).checked == {0, 1, 2}

    def test_explicit_empty_set_is_kept(self):
        """An explicit empty selection is not refilled"""
        assert CheckboxSelection(["a", "b"], checked=set()).checked == set()

    def test_toggle(self):
        """Space flips the item under the cursor"""
        selection = CheckboxSelection(["a", "b", "c"], cursor=1)
        selection.toggle()
        assert selection.checked == {0, 2}
        selection.toggle()
        assert selection.checked == {0, 1, 2}

    @pytest.mark.parametrize("initial", [set(), {0, 1, 2}])
    def test_toggle_all_twice_restores_state(self, initial):
        """Select-all toggle applied twice from all or none returns to that state"""
        selection = CheckboxSelection(["a", "b", "c"], checked=set(initial))
        selection.toggle_all()
        selection.toggle_all()
        assert selection.checked == initial

    def test_toggle_all_from_partial_selects_everything(self):
        """A partial selection is filled, not cleared"""
        selection = CheckboxSelection(["a", "b", "c"], checked={1})
        selection.toggle_all()
        assert selection.checked == {0, 1, 2}

    def test_toggle_all_from_full_clears(self):
        """Full selection clears, anything else fills"""
        selection = CheckboxSelection(["a", "b", "c"])
        selection.toggle_all()
        assert selection.checked == set()
        selection.toggle_all()
        assert selection.checked == {0, 1, 2}


class TestMenuSelect:
    """Test the single-choice prompt"""

    def test_returns_chosen_index(self):
        """Down twice then Enter picks the third item"""
        keys = scripted_dispatcher(DOWN, DOWN, ENTER)
        frames = []

        result = menu_select(keys, ["a", "b", "c"], lambda items, cursor: frames.append(cursor))

        assert result == 2
        assert frames == [0, 1, 2]

    def test_up_wraps_to_last(self):
        """Up from the first item selects the last"""
        keys = scripted_dispatcher(UP, ENTER)
        assert menu_select(keys, ["a", "b", "c"], lambda items, cursor: None) == 2

    def test_escape_cancels(self):
        """Escape returns the cancelled sentinel"""
        keys = scripted_dispatcher(DOWN, ESC)
        assert menu_select(keys, ["a", "b"], lambda items, cursor: None) == MENU_CANCELLED

    def test_empty_list_cancels_without_reading(self):
        """No items means nothing to choose"""
        keys = scripted_dispatcher()
        assert menu_select(keys, [], lambda items, cursor: None) == MENU_CANCELLED

    def test_initial_cursor(self):
        """The cursor can start on a given item"""
        keys = scripted_dispatcher(ENTER)
        assert menu_select(keys, ["a", "b", "c"], lambda items, cursor: None, initial=1) == 1

    def test_handlers_cleared_after_settle(self):
        """The handler table is released once the prompt settles"""
        keys = scripted_dispatcher(ENTER)
        menu_select(keys, ["a", "b"], lambda items, cursor: None)

        assert keys._handlers == {}


class TestCheckboxSelect:
    """Test the multi-choice prompt"""

    def test_toggle_one_of_five(self):
        """Space on index 2 then Enter leaves the other four checked"""
        keys = scripted_dispatcher(DOWN, DOWN, SPACE, ENTER)

        result = checkbox_select(keys, list("abcde"), lambda items, cursor, checked: None)

        assert result == {0, 1, 3, 4}

    def test_confirmed_empty_is_not_cancel(self):
        """Clearing everything and confirming returns an empty set"""
        keys = scripted_dispatcher("a", ENTER)

        result = checkbox_select(keys, list("abc"), lambda items, cursor, checked: None)

        assert result == set()
        assert result is not None

    def test_upper_a_toggles_all(self):
        """Both a and A toggle everything"""
        keys = scripted_dispatcher("A", "A", ENTER)
        assert checkbox_select(keys, list("abc"), lambda items, cursor, checked: None) == {0, 1, 2}

    def test_escape_cancels(self):
        """Escape returns None"""
        keys = scripted_dispatcher(SPACE, ESC)
        assert checkbox_select(keys, list("abc"), lambda items, cursor, checked: None) is None

    def test_renders_after_every_change(self):
        """The frame is redrawn initially and after each change"""
        keys = scripted_dispatcher(DOWN, SPACE, ENTER)
        frames = []

        checkbox_select(keys, list("abc"), lambda items, cursor, checked: frames.append((cursor, set(checked))))

        assert frames == [(0, {0, 1, 2}), (1, {0, 1, 2}), (1, {0, 2})]

    def test_empty_list(self):
        """No items is treated as cancelled"""
        assert checkbox_select(scripted_dispatcher(), [], lambda *args: None) is None


class TestTextInput:
    """Test the line editor prompt"""

    def test_returns_raw_buffer(self):
        """Trimming is left to the caller"""
        keys = scripted_dispatcher(*typed(" hi "), ENTER)
        assert text_input(keys, lambda text: None) == " hi "

    def test_live_render(self):
        """Every edit re-renders with the current buffer"""
        keys = scripted_dispatcher(*typed("ab"), BACKSPACE, ENTER)
        frames = []

        text_input(keys, frames.append)

        assert frames == ["", "a", "ab", "a"]

    def test_initial_value(self):
        """The buffer can be pre-filled"""
        keys = scripted_dispatcher("x", ENTER)
        assert text_input(keys, lambda text: None, initial="~/Music") == "~/Musicx"

    def test_escape_cancels(self):
        """Escape returns None, not the typed text"""
        keys = scripted_dispatcher(*typed("abc"), ESC)
        assert text_input(keys, lambda text: None) is None
        assert not keys.in_text_mode

    def test_empty_submit(self):
        """Enter on an empty buffer submits the empty string"""
        keys = scripted_dispatcher(ENTER)
        assert text_input(keys, lambda text: None) == ""


class TestChooseKey:
    """Test waiting for one of a few keys"""

    def test_ignores_other_keys(self):
        """Only mapped keys settle"""
        keys = scripted_dispatcher(DOWN, "x", "Q")
        choices = {Key.RETURN: "back", Key.LOWER_Q: "quit", Key.UPPER_Q: "quit"}

        assert choose_key(keys, choices) == "quit"

    def test_render_called_once(self):
        """The frame is drawn before waiting"""
        keys = scripted_dispatcher(ENTER)
        drawn = []

        choose_key(keys, {Key.RETURN: True}, render=lambda: drawn.append(True))

        assert drawn == [True]
