import pytest

from puteremu.video import TEXT_SIZE, TXT_COLS, TXT_ROWS, VideoRam


def test_new_screen_is_blank():
    vram = VideoRam()
    assert all(vram.char_at(r, c) == " " for r in range(TXT_ROWS) for c in range(TXT_COLS))


def test_planes_cover_all_data():
    vram = VideoRam()
    assert len(vram.text) + len(vram.fgs) + len(vram.bgs) == len(vram.data)
    assert len(vram.text) == TEXT_SIZE


def test_colour_planes_start_zeroed():
    vram = VideoRam()
    assert bytes(vram.fgs) == bytes(TEXT_SIZE)
    assert bytes(vram.bgs) == bytes(TEXT_SIZE)


def test_data_write_shows_in_char_at():
    vram = VideoRam()
    vram.data[2 * TXT_COLS + 5] = ord("Q")
    assert vram.char_at(2, 5) == "Q"
    assert vram.char_at(2, 4) == " "


def test_clear_resets_text_only():
    vram = VideoRam()
    vram.data[0] = ord("x")
    vram.data[TEXT_SIZE] = 7
    vram.clear()
    assert vram.char_at(0, 0) == " "
    assert vram.fgs[0] == 7


@pytest.mark.parametrize("row,col", [(-1, 0), (TXT_ROWS, 0), (0, TXT_COLS), (0, -1)])
def test_char_at_off_screen(row, col):
    with pytest.raises(IndexError):
        VideoRam().char_at(row, col)