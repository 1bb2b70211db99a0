import io

import pytest

from puteremu.bus import (
    RAM_HWS_FIRST,
    ROM_SIZE,
    SECT_SIZE,
    SECTORS,
    IoBus,
    LabelTable,
    MemoryMap,
)
from puteremu.video import VRAM_HWS_FIRST, VideoRam


@pytest.fixture
def memory():
    return MemoryMap(VideoRam())


@pytest.fixture
def bus(memory):
    b = IoBus(memory, lambda row: row + 40)
    b.input = io.StringIO()
    b.output = io.StringIO()
    return b


def test_default_sector_table(memory):
    assert memory.sector_table[0] == 0
    assert memory.sector_table[1] == RAM_HWS_FIRST
    assert memory.sector_table[SECTORS - 1] == VRAM_HWS_FIRST


def test_load_rom_and_read(memory, tmp_path):
    path = tmp_path / "rom.bin"
    path.write_bytes(bytes(range(16)))
    assert memory.load_rom(path) == 16
    assert [memory.read(a) for a in range(16)] == list(range(16))


def test_load_rom_truncates(memory, tmp_path):
    path = tmp_path / "big.bin"
    path.write_bytes(b"\x11" * (ROM_SIZE + 100))
    assert memory.load_rom(path) == ROM_SIZE


def test_load_rom_missing(memory, tmp_path):
    with pytest.raises(FileNotFoundError):
        memory.load_rom(tmp_path / "nope.bin")


def test_rom_is_read_only(memory):
    memory.write(5, 0x42)
    assert memory.read(5) == 0


def test_unset_sectors_alias_rom(memory):
    memory.rom[5] = 0x99
    assert memory.read(3 * SECT_SIZE + 5) == 0x99


def test_ram_round_trip(memory):
    memory.write(SECT_SIZE + 10, 0x1FF)
    assert memory.read(SECT_SIZE + 10) == 0xFF
    assert memory.ram[10] == 0xFF


def test_second_ram_sector_is_distinct(memory):
    memory.map_sector(2, RAM_HWS_FIRST + 1)
    memory.write(2 * SECT_SIZE, 7)
    memory.write(SECT_SIZE, 3)
    assert memory.read(2 * SECT_SIZE) == 7
    assert memory.read(SECT_SIZE) == 3
    assert memory.ram[SECT_SIZE] == 7


def test_vram_write_shows_on_screen(memory):
    memory.write((SECTORS - 1) * SECT_SIZE, ord("Z"))
    assert memory.vram.char_at(0, 0) == "Z"
    assert memory.read((SECTORS - 1) * SECT_SIZE) == ord("Z")


def test_map_sector_out_of_range(memory):
    with pytest.raises(ValueError):
        memory.map_sector(SECTORS, 0)


def test_reset_sectors_undoes_mapping(memory):
    memory.map_sector(1, RAM_HWS_FIRST + 4)
    memory.reset_sectors()
    assert memory.sector_table[1] == RAM_HWS_FIRST


def test_mapper_command(bus, memory):
    for byte in (2, 0x01, 0x02, 0xFF, 0xFF, 0xFF):
        bus.write(2, byte)
    assert memory.sector_table[2] == 0x0201


def test_mapper_needs_full_command(bus, memory):
    for byte in (2, 0x01, 0x02, 0xFF, 0xFF):
        bus.write(2, byte)
    assert memory.sector_table[2] == 0


def test_invalid_mapper_command_ignored(bus, memory):
    before = list(memory.sector_table)
    for byte in (SECTORS, 0x01, 0x02, 0xFF, 0xFF, 0xFF):
        bus.write(2, byte)
    assert memory.sector_table == before


def test_keyboard_port_uses_b_register(bus):
    assert bus.read(0x0203) == 42


def test_stdio_round_trip(bus):
    bus.input = io.StringIO("hi")
    assert bus.read(0) == ord("h")
    bus.write(0, ord("A"))
    assert bus.output.getvalue() == "A"


def test_stdio_eof(bus):
    assert bus.read(0) == 0xFF


def test_num_out(bus):
    bus.write(1, 200)
    assert bus.output.getvalue() == "num out: 200\n"


def test_num_in(bus):
    bus.input = io.StringIO("-1\n")
    assert bus.read(1) == 0xFF
    assert bus.output.getvalue() == "num in: "


def test_num_in_invalid(bus):
    bus.input = io.StringIO("abc\n")
    assert bus.read(1) == 0


def test_debug_port_calls_hook(bus):
    calls = []
    bus.debug_dump = lambda: calls.append(1)
    bus.write(4, 0)
    assert calls == [1]


def test_unknown_port_reads_zero(bus):
    assert bus.read(0x99) == 0


def test_describe_without_labels():
    assert LabelTable().describe(0x1234) == "$1234"


def test_labels(tmp_path):
    path = tmp_path / "labels.txt"
    path.write_text("0000 start\n0100 loop\n0200 done\n")
    table = LabelTable()
    assert table.load(path) == 3
    assert table.describe(0x0105) == "loop+$5 ($0105)"
    assert table.describe(0x0200) == "done+$0 ($0200)"
    assert table.describe(0x0050) == "start+$50 ($0050)"


def test_label_before_first(tmp_path):
    path = tmp_path / "labels.txt"
    path.write_text("0100 main\n")
    table = LabelTable()
    table.load(path)
    assert table.describe(0x0010) == "main+$10 ($0010)"


def test_label_load_stops_at_bad_hex(tmp_path):
    path = tmp_path / "labels.txt"
    path.write_text("0010 a\nzz b\n0030 c\n")
    table = LabelTable()
    assert table.load(path) == 1


def test_label_missing_file_keeps_table(tmp_path):
    path = tmp_path / "labels.txt"
    path.write_text("0010 a\n")
    table = LabelTable()
    table.load(path)
    assert table.load(tmp_path / "absent.txt") == 1
    assert table.describe(0x0011) == "a+$1 ($0011)"


def test_long_label_name_truncated(tmp_path):
    path = tmp_path / "labels.txt"
    path.write_text("0000 " + "n" * 30 + "\n")
    table = LabelTable()
    table.load(path)
    assert table.describe(0) == "n" * 20 + "+$0 ($0000)"