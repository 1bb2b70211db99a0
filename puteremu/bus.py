"""Memory map, I/O ports and debug labels of the machine."""

from __future__ import annotations

import logging
import sys
from collections import deque
from collections.abc import Callable
from pathlib import Path

from puteremu.video import VRAM_HWS_FIRST, VRAM_HWS_LAST, VideoRam

logger = logging.getLogger(__name__)

ADDR_SPACE = 65536
SECT_SIZE = 8192
SECTORS = ADDR_SPACE // SECT_SIZE

ROM_SIZE = SECT_SIZE
RAM_SIZE = SECT_SIZE * 512

ROM_HWS = 0
RAM_HWS_FIRST = 512
RAM_HWS_LAST = 1023

MAX_LABELS = 1024
LABEL_NAME_MAX = 63

PORT_STDIO = 0
PORT_NUM = 1
PORT_MAPPER = 2
PORT_KEYBOARD = 3
PORT_DEBUG = 4


class MemoryMap:
    """Routes the 64 KiB address space through an 8-entry sector table."""

    def __init__(self, vram: VideoRam) -> None:
        self.vram = vram
        self.rom = bytearray(ROM_SIZE)
        self.ram = bytearray(RAM_SIZE)
        self.sector_table = [0] * SECTORS
        self.trace_reads = False
        self.trace_writes = False
        self.reset_sectors()

    def reset_sectors(self) -> None:
        """Map rom, the first ram sector and the first vram sector."""
        self.sector_table = [0] * SECTORS
        self.sector_table[0] = ROM_HWS
        self.sector_table[1] = RAM_HWS_FIRST
        self.sector_table[SECTORS - 1] = VRAM_HWS_FIRST

    def _resolve(self, addr: int) -> tuple[str, bytearray | None, int, int, int]:
        addr &= 0xFFFF
        sect, rel = divmod(addr, SECT_SIZE)
        hw = self.sector_table[sect]
        if hw == ROM_HWS:
            return "rom", self.rom, rel, sect, hw
        if RAM_HWS_FIRST <= hw <= RAM_HWS_LAST:
            return "ram", self.ram, rel + (hw - RAM_HWS_FIRST) * SECT_SIZE, sect, hw
        if VRAM_HWS_FIRST <= hw <= VRAM_HWS_LAST:
            index = rel + (hw - VRAM_HWS_FIRST) * SECT_SIZE
            if index < len(self.vram.data):
                return "vram", self.vram.data, index, sect, hw
        return "idk", None, rel, sect, hw

    def read(self, addr: int) -> int:
        """Read one byte; unmapped space reads as zero."""
        dev, store, index, sect, hw = self._resolve(addr)
        value = store[index] if store is not None else 0
        if self.trace_reads:
            logger.info(
                " read($%04x / %5d) -> %s s:%d h:%d ra:%04x -> $%02x / %3d",
                addr, addr, dev, sect, hw, addr % SECT_SIZE, value, value,
            )
        return value

    def write(self, addr: int, value: int) -> None:
        """Write one byte; writes to rom or unmapped space are dropped."""
        dev, store, index, sect, hw = self._resolve(addr)
        if store is not None and dev != "rom":
            store[index] = value & 0xFF
        if self.trace_writes:
            logger.info(
                "write($%04x / %5d, $%02x / %3d) -> %s s:%d h:%d ra:%04x",
                addr, addr, value, value, dev, sect, hw, addr % SECT_SIZE,
            )

    def map_sector(self, sector: int, hw_sector: int) -> None:
        """Point software ``sector`` at hardware sector ``hw_sector``."""
        if not 0 <= sector < SECTORS:
            raise ValueError(f"sector {sector} out of range 0..{SECTORS - 1}")
        self.sector_table[sector] = hw_sector & 0xFFFF

    def load_rom(self, path: str | Path) -> int:
        """Load up to one sector of rom from ``path``; returns bytes read."""
        with open(path, "rb") as f:
            data = f.read(ROM_SIZE)
        self.rom[: len(data)] = data
        logger.info("read %d bytes of rom", len(data))
        return len(data)


class IoBus:
    """The I/O ports: console, number console, mapper, keyboard and debug."""

    def __init__(self, memory: MemoryMap, keyboard_row: Callable[[int], int]) -> None:
        self.memory = memory
        self.keyboard_row = keyboard_row
        self.input = sys.stdin
        self.output = sys.stdout
        self.debug_dump: Callable[[], None] | None = None
        self.trace_reads = False
        self.trace_writes = False
        self.mapper_state: deque[int] = deque([0] * 6, maxlen=6)

    def _read_number(self) -> int:
        self.output.write("num in: ")
        self.output.flush()
        words = self.input.readline().split()
        try:
            return int(words[0]) & 0xFF
        except (IndexError, ValueError):
            return 0

    def read(self, addr: int) -> int:
        breg = (addr >> 8) & 0xFF
        port = addr & 0xFF
        value = 0
        dev = "idk"
        if port == PORT_STDIO:
            dev = "stdio"
            ch = self.input.read(1)
            value = ord(ch) & 0xFF if ch else 0xFF
        elif port == PORT_NUM:
            dev = "num"
            value = self._read_number()
        elif port == PORT_KEYBOARD:
            dev = "keyboard"
            value = self.keyboard_row(breg) & 0xFF
        if self.trace_reads:
            logger.info(" in($%02x%02x) -> %s -> $%02x / %3d", breg, port, dev, value, value)
        return value

    def write(self, addr: int, value: int) -> None:
        breg = (addr >> 8) & 0xFF
        port = addr & 0xFF
        value &= 0xFF
        dev = "idk"
        if port == PORT_STDIO:
            dev = "stdio"
            self.output.write(chr(value))
        elif port == PORT_NUM:
            dev = "num"
            self.output.write(f"num out: {value}\n")
        elif port == PORT_MAPPER:
            dev = "mapper"
            self._mapper_byte(value)
        elif port == PORT_DEBUG and self.debug_dump is not None:
            self.debug_dump()
        if self.trace_writes:
            logger.info("out($%02x%02x, $%02x / %3d) -> %s", breg, port, value, value, dev)

    def _mapper_byte(self, value: int) -> None:
        self.mapper_state.append(value)
        sector, low, high, *tail = self.mapper_state
        if tail != [0xFF, 0xFF, 0xFF]:
            return
        try:
            self.memory.map_sector(sector, low | (high << 8))
        except ValueError:
            logger.info("invalid mapper command! %02x %02x %02x", sector, low, high)


class LabelTable:
    """Address labels used to describe program locations."""

    def __init__(self) -> None:
        self.labels: list[tuple[int, str]] = []

    def load(self, path: str | Path) -> int:
        """Read "hexaddr name" pairs; a missing file leaves the table alone."""
        try:
            text = Path(path).read_text()
        except OSError:
            return len(self.labels)
        words = text.split()
        labels: list[tuple[int, str]] = []
        for addr_word, name in zip(words[::2], words[1::2]):
            if len(labels) >= MAX_LABELS:
                break
            try:
                addr = int(addr_word, 16)
            except ValueError:
                break
            labels.append((addr & 0xFFFF, name[:LABEL_NAME_MAX]))
        self.labels = labels
        logger.info("loaded %d debug labels", len(labels))
        return len(labels)

    def describe(self, addr: int) -> str:
        """Render ``addr`` relative to the closest preceding label."""
        addr &= 0xFFFF
        if not self.labels:
            return f"${addr:04X}"
        base, name = 0, self.labels[0][1]
        for label_addr, label_name in self.labels:
            if label_addr > addr:
                break
            base, name = label_addr, label_name
        return f"{name[:20]}+${addr - base:X} (${addr:04X})"