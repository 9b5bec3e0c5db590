"""
Keyboard translation layer.

Maps Tk key events onto the same Command objects the keypad buttons produce,
so typing and clicking go through exactly the same engine code path.
"""
from typing import Optional

from backend.engine import Command

# Tk keysyms that do not carry a printable character.
KEYSYM_COMMANDS = {
    "Return": Command("operator", "="),
    "KP_Enter": Command("operator", "="),
    "Escape": Command("clear", "AC"),
    "Delete": Command("clear", "C"),
    "BackSpace": Command("backspace"),
}

CHAR_COMMANDS = {
    "+": Command("operator", "+"),
    "-": Command("operator", "-"),
    "*": Command("operator", "×"),
    "/": Command("operator", "÷"),
    "^": Command("operator", "^"),
    "%": Command("operator", "mod"),
    "=": Command("operator", "="),
}

INPUT_KEYS = set("0123456789.()")


def translate_key(keysym: str, char: str = "") -> Optional[Command]:
    """
    Return the engine command for a key press, or None if the key is not bound.
    `keysym` and `char` are Tk's event.keysym and event.char.
    """
    if keysym in KEYSYM_COMMANDS:
        return KEYSYM_COMMANDS[keysym]
    if char in INPUT_KEYS:
        return Command("char", char)
    return CHAR_COMMANDS.get(char)
