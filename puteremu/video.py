"""Video memory: a text screen plus foreground and background colour planes."""

from __future__ import annotations

TXT_COLS = 80
TXT_ROWS = 60
TEXT_SIZE = TXT_COLS * TXT_ROWS

# Hardware sectors that the memory map routes to video memory.
VRAM_HWS_FIRST = 8
VRAM_HWS_LAST = 15


class VideoRam:
    """Byte-addressable video memory laid out as text, fgs, then bgs."""

    def __init__(self) -> None:
        self.data = bytearray(3 * TEXT_SIZE)
        self.clear()

    @property
    def text(self) -> memoryview:
        return memoryview(self.data)[:TEXT_SIZE]

    @property
    def fgs(self) -> memoryview:
        return memoryview(self.data)[TEXT_SIZE : 2 * TEXT_SIZE]

    @property
    def bgs(self) -> memoryview:
        return memoryview(self.data)[2 * TEXT_SIZE :]

    def clear(self) -> None:
        """Fill the text plane with spaces."""
        self.data[:TEXT_SIZE] = b" " * TEXT_SIZE

    def char_at(self, row: int, col: int) -> str:
        """Return the character shown at ``row``, ``col``."""
        if not (0 <= row < TXT_ROWS and 0 <= col < TXT_COLS):
            raise IndexError(f"cell ({row}, {col}) is off screen")
        return chr(self.data[row * TXT_COLS + col])