import pytest

from mvcore.imui_input import TextBuffer, TextInputState, text_input_filter


def focused(text: str, size: int = 32) -> tuple[TextInputState, TextBuffer]:
    buffer = TextBuffer(size, text)
    state = TextInputState()
    state.focus(buffer)
    return state, buffer


@pytest.mark.parametrize(
    "char, expected",
    [(" ", True), ("~", True), ("a", True), ("\x1f", False), ("\x7f", False), ("\n", False)],
)
def test_text_input_filter(char, expected):
    assert text_input_filter(char) is expected


def test_filter_rejects_multiple_characters():
    assert text_input_filter("ab") is False


def test_buffer_rejects_text_too_long():
    with pytest.raises(ValueError):
        TextBuffer(3, "abc")


def test_buffer_rejects_non_positive_size():
    with pytest.raises(ValueError):
        TextBuffer(0)


def test_buffer_capacity_is_size_minus_one():
    buffer = TextBuffer(5)
    assert buffer.capacity == 4


def test_focus_puts_cursor_at_end():
    state, buffer = focused("hello")
    assert state.active
    assert state.cursor == len(buffer)


def test_release_drops_focus():
    state, _ = focused("hello")
    state.release()
    assert not state.active
    assert state.insert("x") == 0


def test_insert_without_focus_does_nothing():
    state = TextInputState()
    assert state.insert("abc") == 0
    assert state.backspace() is False


def test_insert_at_end():
    state, buffer = focused("abc")
    assert state.insert("de") == 2
    assert buffer.text == "abcde"
    assert state.cursor == 5


def test_insert_in_middle():
    state, buffer = focused("ac")
    state.move_left()
    state.insert("b")
    assert buffer.text == "abc"
    assert state.cursor == 2


def test_insert_skips_filtered_characters():
    state, buffer = focused("")
    assert state.insert("a\tb\n") == 2
    assert buffer.text == "ab"


def test_insert_refused_when_it_would_not_fit():
    state, buffer = focused("abc", size=5)
    assert state.insert("de") == 0
    assert buffer.text == "abc"
    assert state.insert("d") == 1
    assert buffer.text == "abcd"
    assert state.insert("e") == 0
    assert len(buffer) == buffer.capacity


def test_backspace_removes_before_cursor():
    state, buffer = focused("abc")
    state.move_left()
    assert state.backspace() is True
    assert buffer.text == "ac"
    assert state.cursor == 1


def test_backspace_at_start_does_nothing():
    state, buffer = focused("abc")
    while state.move_left():
        pass
    assert state.cursor == 0
    assert state.backspace() is False
    assert buffer.text == "abc"


def test_delete_removes_under_cursor():
    state, buffer = focused("abc")
    state.move_left()
    state.move_left()
    assert state.delete() is True
    assert buffer.text == "ac"
    assert state.cursor == 1


def test_delete_at_end_does_nothing():
    state, buffer = focused("abc")
    assert state.delete() is False
    assert buffer.text == "abc"


def test_move_right_stops_at_end():
    state, buffer = focused("ab")
    assert state.move_right() is False
    state.move_left()
    assert state.move_right() is True
    assert state.cursor == len(buffer)


def test_cursor_clamped_after_external_change():
    state, buffer = focused("hello")
    buffer.text = "hi"
    assert state.backspace() is True
    assert buffer.text == "h"
    assert state.cursor == len(buffer)


def test_custom_filter():
    state = TextInputState(input_filter=str.isdigit)
    buffer = TextBuffer(16)
    state.focus(buffer)
    state.insert("a1b2")
    assert buffer.text == "12"


def test_insert_then_backspace_round_trip():
    state, buffer = focused("start")
    inserted = state.insert("xyz")
    for _ in range(inserted):
        state.backspace()
    assert buffer.text == "start"
    assert state.cursor == len("start")