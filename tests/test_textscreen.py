import pytest

from puteremu.textscreen import SCREEN_SIZE, TXT_COLS, TextScreen, parse_int


def _row(screen, index):
    return screen.buffer[index * TXT_COLS : (index + 1) * TXT_COLS].decode().rstrip()


@pytest.mark.parametrize(
    "text, expected",
    [("123", 123), ("-42", -42), ("1a2", 12), ("", 0), ("P5", 5), ("0", 0)],
)
def test_parse_int(text, expected):
    assert parse_int(text) == expected


def test_parse_int_wraps_to_16_bits():
    assert -32768 <= parse_int("99999") <= 32767


def test_new_screen_is_blank():
    screen = TextScreen()
    assert screen.buffer == bytearray(b" " * SCREEN_SIZE)
    assert screen.cursor == 0


def test_puts_writes_at_cursor():
    screen = TextScreen()
    screen.puts("hi")
    assert _row(screen, 0) == "hi"
    assert screen.cursor == 2


def test_newline_moves_to_next_row():
    screen = TextScreen()
    screen.puts("abc")
    screen.newline()
    assert screen.cursor == TXT_COLS
    screen.newline()
    assert screen.cursor == 2 * TXT_COLS


def test_putc_newline_character():
    screen = TextScreen()
    screen.puts("a\nb")
    assert _row(screen, 0) == "a"
    assert _row(screen, 1) == "b"


def test_putc_past_end_is_dropped():
    screen = TextScreen()
    screen.cursor = SCREEN_SIZE
    screen.putc("x")
    assert screen.cursor == SCREEN_SIZE
    assert b"x" not in screen.buffer


def test_clear_keeps_cursor():
    screen = TextScreen()
    screen.puts("hello")
    screen.clear()
    assert screen.buffer == bytearray(b" " * SCREEN_SIZE)
    assert screen.cursor == 5


@pytest.mark.parametrize("value", [0, 1, 5, 128, 255])
def test_putbin_round_trip(value):
    screen = TextScreen()
    screen.putbin(value)
    text = _row(screen, 0)
    assert len(text) == 8
    assert int(text, 2) == value


@pytest.mark.parametrize("value", [0, 7, -7, 1050, 32767, -32768])
def test_putdec_round_trip(value):
    screen = TextScreen()
    screen.putdec(value)
    assert int(_row(screen, 0)) == value
    assert _row(screen, 0) == str(value)