# puteremu

Building blocks for a small Z80-based computer. The package has no third-party
dependencies.

## Modules

### `puteremu.alu`

This module holds the Z80 processor state and the primitive operations its instructions
are made from.

- `Registers` is one register set. It has the byte registers `a`, `f`, `b`, `c`, `d`,
  `e`, `h`, `l`, `ixh`, `ixl`, `iyh`, `iyl` and `sp`. It also has the word views `af`,
  `bc`, `de`, `hl`, `ix` and `iy`, which can be read and written.
- `Flag` holds the bits of F: `C`, `N`, `PV`, `F3`, `H`, `F5`, `Z` and `S`. `Condition`
  holds the branch conditions, from `ALWAYS` through `PO`.
- `Z80(mem_read, mem_write, io_read, io_write)` holds:
  - the main register set `r1` and the alternate set `r2`
  - `pc`, `i`, `r`, `im`, `iff1`, `iff2`, `halted` and the `tstates` counter

  It offers these operations:
  - Bus access: `read8` and `read16`, which cost 3 T-states per byte. `io_in` and
    `io_out`, which cost 4 T-states.
  - Flags: `get_flag`, `set_flag` and `condition`.
  - 8-bit arithmetic: `arithmetic`, for ADD, ADC, SUB, SBC and CP. It returns the result
    and does not store it.
  - 16-bit arithmetic: `add_word`.
  - Logic: `alu_and`, `alu_or` and `alu_xor`.
  - Bit tests: `bit`, `bit_r` and `bit_indexed`.
  - Increment and decrement: `inc_dec`.
  - Rotates: `rlc`, `rl`, `rrc` and `rr`.
  - Shifts: `shift_left` and `shift_right`.
  - Stack: `push` and `pop`.
  - Other operations: `cp_hl` and `daa`.
  - Interrupts: `interrupt(value)` and `nmi()` set the request flags. `reset()` restores
    the power-on state.
- Helper functions: `parity`, `complement` (a byte as a signed number) and
  `set_res(bit, pos, value)`.

### `puteremu.bus`

- `MemoryMap(vram)` divides the 64 KiB address space into eight sectors of 8 KiB each.
  - `sector_table` maps each sector to a hardware sector:
    - hardware sector 0 is ROM
    - hardware sectors 512–1023 are RAM
    - hardware sectors 8–15 are video RAM
  - Unmapped space reads as zero.
  - Writes to ROM or to unmapped space are dropped.
  - `reset_sectors()` gives the default map: sector 0 to ROM, sector 1 to hardware sector
    512, and sector 7 to hardware sector 8.
  - `map_sector(sector, hw_sector)` raises `ValueError` if the sector is outside 0–7.
  - `load_rom(path)` reads up to 8192 bytes and returns how many it read.
- `IoBus(memory, keyboard_row)` decodes the low byte of the port address:
  - Port 0 reads one character from `input` (0xFF at end of input) and writes one
    character to `output`.
  - Port 1 prompts `num in: ` and reads a number, or writes `num out: N`.
  - Port 2 is the sector mapper. When the last three bytes written are all `0xFF`, the
    three bytes before them map a sector: sector, then the low byte of the hardware
    sector, then the high byte. If the sector is invalid, the command is logged and
    ignored.
  - Port 3 returns `keyboard_row(row)`, where the row is the high byte of the address
    (the B register).
  - Port 4 calls `debug_dump` when it is set.
- `LabelTable` reads `hexaddr name` pairs with `load(path)`, keeping at most 1024 of
  them. If the file is missing, the table is left as it was. `describe(addr)` returns
  `$0123` when no labels are loaded, and otherwise `name+$offset ($0123)`.

Both `MemoryMap` and `IoBus` have `trace_reads` and `trace_writes` switches. When these
are on, every access is logged through `logging`.

### `puteremu.video`

`VideoRam` holds 80×60 bytes of text followed by foreground and background planes of the
same size. It provides:

- `data`: the raw bytes
- `text`, `fgs` and `bgs`: views of the three planes
- `clear()`: fills the text plane with spaces
- `char_at(row, col)`: returns one character, or raises `IndexError` if the position is
  off screen

### `puteremu.keyboard`

`kb_row(row, pressed)` packs the keys of one matrix row into a byte, from bit 7 down.
`pressed` is a collection of key names such as `"A"`, `"LEFT_SHIFT"` or `"SPACE"`. Rows
outside 0–7 read as 0.

### `puteremu.textscreen` and `puteremu.calculator`

- `TextScreen` is an 80×60 byte buffer with a cursor. It provides:
  - `putc`, which drops writes past the end and treats `"\n"` as a newline
  - `puts`
  - `putbin`, which writes eight binary digits
  - `putdec`, which writes a signed 16-bit value
  - `newline`
  - `clear`, which leaves the cursor where it is
- `parse_int` keeps every digit in the string and negates the result if the string
  starts with `-`. The result wraps to 16 bits.
- `Keyboard.scan(read_row)` returns the scancodes pressed since the last scan.
  `is_key_down(code)` tests the current state of one key. `scancode(col, row)` gives
  the scancode of the key at `col` in `row`.
- `Calculator(screen)` is an RPN calculator with three registers, X, Y and Z. Typed
  characters collect in `input_str`, up to 99 of them. Backspace deletes one, and Enter
  runs the line with `run_input()`:

  | Input | Effect |
  |-------|--------|
  | `P<number>` | push the number into X |
  | `p` | pop |
  | `+`, `-`, `*`, `/` | combine Y with X into X; division truncates toward zero |

  Results wrap to signed 16 bits. `end_frame(read_row)` scans the keyboard and handles
  the new key presses. It then draws the registers and the input line on the screen.

## Wiring the parts together

```python
from puteremu.alu import Z80
from puteremu.bus import IoBus, LabelTable, MemoryMap
from puteremu.keyboard import kb_row
from puteremu.video import VideoRam

held = set()                      # names of keys currently down
vram = VideoRam()
memory = MemoryMap(vram)
memory.load_rom("program.bin")
io = IoBus(memory, lambda row: kb_row(row, held))

cpu = Z80(memory.read, memory.write, io.read, io.write)

labels = LabelTable()
labels.load("program.labels")
print(labels.describe(0x0123))
```

## What this package does not do

- `Z80` holds the processor state and the operations that instructions are made from.
  It has no instruction decoder, so it cannot fetch and run a program, disassemble, or
  service interrupt requests by itself.
- There is no window or renderer for `VideoRam`, and no live keyboard input.
  `kb_row` only packs the key names it is given.
- There is no command-line program.

## Tests

```
pip install .[test]
pytest
```