import pytest

from backend.engine import CalculatorEngine, Command
from frontend.keymap import translate_key


@pytest.mark.parametrize("keysym, char, expected", [
    ("7", "7", Command("char", "7")),
    ("period", ".", Command("char", ".")),
    ("parenleft", "(", Command("char", "(")),
    ("plus", "+", Command("operator", "+")),
    ("minus", "-", Command("operator", "-")),
    ("asterisk", "*", Command("operator", "×")),
    ("slash", "/", Command("operator", "÷")),
    ("asciicircum", "^", Command("operator", "^")),
    ("equal", "=", Command("operator", "=")),
    ("Return", "\r", Command("operator", "=")),
    ("KP_Enter", "\r", Command("operator", "=")),
    ("Escape", "\x1b", Command("clear", "AC")),
    ("BackSpace", "\x08", Command("backspace")),
    ("Delete", "\x7f", Command("clear", "C")),
])
def test_bound_keys(keysym, char, expected):
    assert translate_key(keysym, char) == expected


@pytest.mark.parametrize("keysym, char", [("a", "a"), ("Shift_L", ""), ("F1", ""), ("space", " ")])
def test_unbound_keys(keysym, char):
    assert translate_key(keysym, char) is None


def test_typed_session_matches_button_session():
    typed = CalculatorEngine()
    for keysym, char in [("1", "1"), ("2", "2"), ("asterisk", "*"), ("3", "3"), ("Return", "\r")]:
        typed.dispatch(translate_key(keysym, char))

    clicked = CalculatorEngine()
    clicked.submit_char("1")
    clicked.submit_char("2")
    clicked.submit_operator("×")
    clicked.submit_char("3")
    clicked.submit_operator("=")

    assert typed.state == clicked.state
    assert typed.get_display() == "36"


def test_escape_then_backspace():
    engine = CalculatorEngine()
    for keysym, char in [("4", "4"), ("2", "2"), ("BackSpace", "\x08")]:
        engine.dispatch(translate_key(keysym, char))
    assert engine.get_display() == "4"
    engine.dispatch(translate_key("Escape", "\x1b"))
    assert engine.get_display() == "0"
