"""Keyboard matrix: eight rows of eight keys, most significant bit first."""

from __future__ import annotations

from collections.abc import Collection

# Each row lists its keys from bit 7 down to bit 0; None is a key that never reads pressed.
KEY_ROWS: tuple[tuple[str | None, ...], ...] = (
    ("A", "B", "C", "D", "E", "F", "G", "H"),
    ("I", "J", "K", "L", "M", "N", "O", "P"),
    ("Q", "R", "S", "T", "U", "V", "W", "X"),
    ("Y", "Z", "ZERO", "ONE", "TWO", "THREE", "FOUR", "FIVE"),
    ("SIX", "SEVEN", "EIGHT", "NINE", "LEFT_SHIFT", "LEFT_CONTROL", "LEFT_ALT", "ESCAPE"),
    ("BACKSPACE", "DELETE", "ENTER", "TAB", "UP", "DOWN", "LEFT", "RIGHT"),
    ("MINUS", "EQUAL", "LEFT_BRACKET", "RIGHT_BRACKET", "BACKSLASH", "SEMICOLON", "APOSTROPHE", "COMMA"),
    ("PERIOD", "SLASH", "GRAVE", "SPACE", None, None, None, None),
)


def kb_row(row: int, pressed: Collection[str]) -> int:
    """Return the byte for matrix ``row`` given the names of the keys held down."""
    if not 0 <= row < len(KEY_ROWS):
        return 0
    value = 0
    for key in KEY_ROWS[row]:
        value = (value << 1) | (key is not None and key in pressed)
    return value