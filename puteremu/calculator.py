"""A three-register stack calculator driven by the keyboard matrix."""

from __future__ import annotations

from collections.abc import Callable

from puteremu.textscreen import TXT_COLS, TextScreen, _to_int16, parse_int

KB_MAX_ROW = 7
MAX_INPUT = 99

# Characters by scancode; rows run right to left.
SCANCODE_CHARS = "hgfedcbaponmlkjixwvutsrq543210zy    9876        ,';\\][=-     `/."
SCANCODE_CHARS_SHIFT = "HGFEDCBAPONMLKJIXWVUTSRQ%$#@!)ZY    (*&^        <\":|}{+_     ~?>"


def scancode(col: int, row: int) -> int:
    """Scancode of the key in matrix column ``col`` (from the left) of ``row``."""
    return row * 8 + (7 - col)


KEY_SHIFT = scancode(4, 4)
KEY_CTRL = scancode(5, 4)
KEY_ALT = scancode(6, 4)
KEY_ESC = scancode(7, 4)

KEY_BACKSPACE = scancode(0, 5)
KEY_DEL = scancode(1, 5)
KEY_ENTER = scancode(2, 5)
KEY_TAB = scancode(3, 5)
KEY_UP = scancode(4, 5)
KEY_DOWN = scancode(5, 5)
KEY_LEFT = scancode(6, 5)
KEY_RIGHT = scancode(7, 5)

KEY_SPACE = scancode(3, 7)


class Keyboard:
    """Tracks the key matrix between frames to find newly pressed keys."""

    def __init__(self) -> None:
        self.old_state = [0] * (KB_MAX_ROW + 1)
        self.state = [0] * (KB_MAX_ROW + 1)
        self.pressed = [0] * (KB_MAX_ROW + 1)

    def is_key_down(self, code: int) -> bool:
        return bool((self.state[code // 8] >> (code % 8)) & 1)

    def scan(self, read_row: Callable[[int], int]) -> list[int]:
        """Read every row and return the scancodes pressed since the last scan."""
        for row in range(KB_MAX_ROW + 1):
            data = read_row(row) & 0xFF
            self.state[row] = data
            self.pressed[row] = ~self.old_state[row] & data
        codes = [
            row * 8 + bit
            for row, bits in enumerate(self.pressed)
            for bit in range(8)
            if (bits >> bit) & 1
        ]
        self.old_state = list(self.state)
        return codes


def _divide(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


class Calculator:
    """RPN calculator with X, Y and Z registers and a line of typed input."""

    def __init__(self, screen: TextScreen) -> None:
        self.screen = screen
        self.keyboard = Keyboard()
        self.x = 0
        self.y = 0
        self.z = 0
        self.input_str = ""

    def _binary(self, op: Callable[[int, int], int]) -> None:
        self.x = _to_int16(op(self.y, self.x))
        self.y = self.z
        self.z = 0

    def run_input(self) -> None:
        """Execute the command held in the input line, then clear the screen."""
        command = self.input_str[:1]
        if command == "P":
            self.z, self.y = self.y, self.x
            self.x = parse_int(self.input_str[1:])
        elif command == "p":
            self.x, self.y, self.z = self.y, self.z, 0
        elif command == "+":
            self._binary(lambda a, b: a + b)
        elif command == "-":
            self._binary(lambda a, b: a - b)
        elif command == "*":
            self._binary(lambda a, b: a * b)
        elif command == "/":
            self._binary(_divide)
        self.screen.clear()

    def _special_keypress(self, code: int) -> None:
        if code == KEY_ENTER:
            self.run_input()
            self.input_str = ""
        elif code == KEY_BACKSPACE:
            self.input_str = self.input_str[:-1]

    def keypress(self, code: int, shift: bool) -> None:
        """Handle a newly pressed key."""
        self.screen.clear()
        c = (SCANCODE_CHARS_SHIFT if shift else SCANCODE_CHARS)[code]
        if c == " " and code != KEY_SPACE:
            self._special_keypress(code)
            return
        if len(self.input_str) < MAX_INPUT:
            self.input_str += c

    def end_frame(self, read_row: Callable[[int], int]) -> None:
        """Process keys for this frame and draw the registers and input line."""
        screen = self.screen
        screen.cursor = TXT_COLS
        screen.putc(" ")
        screen.newline()
        screen.newline()

        for code in self.keyboard.scan(read_row):
            self.keypress(code, self.keyboard.is_key_down(KEY_SHIFT))

        screen.newline()
        screen.newline()
        for name, value in (("Z", self.z), ("Y", self.y), ("X", self.x)):
            screen.puts(name + "=")
            screen.putdec(value)
            screen.newline()

        screen.newline()
        screen.putdec(len(self.input_str))
        screen.puts(":<")
        screen.puts(self.input_str)
        screen.putc(">")