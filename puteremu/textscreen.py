"""Text screen output helpers used by programs running on the machine."""

from __future__ import annotations

TXT_COLS = 80
TXT_ROWS = 60
SCREEN_SIZE = TXT_COLS * TXT_ROWS


def _to_int16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


def parse_int(text: str) -> int:
    """Parse an integer the lenient way: digits anywhere count, a leading '-' negates.

    The result wraps to a signed 16-bit value.
    """
    value = 0
    for ch in text:
        if "0" <= ch <= "9":
            value = value * 10 + (ord(ch) - ord("0"))
    if text.startswith("-"):
        value = -value
    return _to_int16(value)


class TextScreen:
    """An 80x60 character buffer written through a moving cursor."""

    def __init__(self) -> None:
        self.buffer = bytearray(b" " * SCREEN_SIZE)
        self.cursor = 0

    def clear(self) -> None:
        """Fill the screen with spaces; the cursor stays where it is."""
        self.buffer[:] = b" " * SCREEN_SIZE

    def newline(self) -> None:
        """Move the cursor to the start of the next row."""
        self.cursor = self.cursor - (self.cursor % TXT_COLS) + TXT_COLS

    def putc(self, c: str) -> None:
        """Write one character; writes past the end of the screen are dropped."""
        if c == "\n":
            self.newline()
        elif self.cursor < SCREEN_SIZE:
            self.buffer[self.cursor] = ord(c) & 0xFF
            self.cursor += 1

    def puts(self, text: str) -> None:
        for ch in text:
            self.putc(ch)

    def putbin(self, x: int) -> None:
        """Write a byte as eight binary digits, most significant first."""
        self.puts(format(x & 0xFF, "08b"))

    def putdec(self, n: int) -> None:
        """Write a signed 16-bit integer in decimal."""
        n = _to_int16(n)
        if n < 0:
            self.putc("-")
            n = -n
        self.puts(str(n))