"""Z80 processor state and the primitive operations its instructions are built from."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import Callable

ReadFn = Callable[[int], int]
WriteFn = Callable[[int, int], None]


class Flag(IntFlag):
    """Bits of the F register."""

    C = 1
    N = 2
    PV = 4
    F3 = 8
    H = 16
    F5 = 32
    Z = 64
    S = 128


class Condition(Enum):
    """Branch conditions tested against the flags."""

    ALWAYS = "always"
    Z = "z"
    NZ = "nz"
    C = "c"
    NC = "nc"
    M = "m"
    P = "p"
    PE = "pe"
    PO = "po"


def parity(value: int) -> bool:
    """True when the byte has an even number of set bits."""
    return bin(value & 0xFF).count("1") % 2 == 0


def complement(value: int) -> int:
    """Interpret a byte as a signed two's complement number."""
    value &= 0xFF
    return value - 0x100 if value & 0x80 else value


def set_res(bit: bool, pos: int, value: int) -> int:
    """Set (bit true) or reset bit ``pos`` of a byte."""
    if bit:
        return (value | (1 << pos)) & 0xFF
    return value & ~(1 << pos) & 0xFF


def _pair(high: str, low: str) -> property:
    def fget(self: "Registers") -> int:
        return (getattr(self, high) << 8) | getattr(self, low)

    def fset(self: "Registers", value: int) -> None:
        setattr(self, high, (value >> 8) & 0xFF)
        setattr(self, low, value & 0xFF)

    return property(fget, fset)


@dataclass
class Registers:
    """One Z80 register set with byte and word views."""

    a: int = 0
    f: int = 0
    b: int = 0
    c: int = 0
    d: int = 0
    e: int = 0
    h: int = 0
    l: int = 0  # noqa: E741
    ixh: int = 0
    ixl: int = 0
    iyh: int = 0
    iyl: int = 0
    sp: int = 0

    af = _pair("a", "f")
    bc = _pair("b", "c")
    de = _pair("d", "e")
    hl = _pair("h", "l")
    ix = _pair("ixh", "ixl")
    iy = _pair("iyh", "iyl")


class Z80:
    """Z80 execution context wired to memory and I/O callbacks."""

    def __init__(
        self,
        mem_read: ReadFn,
        mem_write: WriteFn,
        io_read: ReadFn,
        io_write: WriteFn,
    ) -> None:
        self.mem_read = mem_read
        self.mem_write = mem_write
        self.io_read = io_read
        self.io_write = io_write
        self.r1 = Registers()
        self.r2 = Registers()
        self.int_vector = 0
        self.reset()

    def reset(self) -> None:
        """Put the processor into its power-on state."""
        self.pc = 0
        self.r1.f = 0
        self.im = 0
        self.iff1 = False
        self.iff2 = False
        self.r = 0
        self.i = 0
        self.halted = False
        self.tstates = 0
        self.nmi_req = False
        self.int_req = False
        self.defer_int = False
        self.exec_int_vector = False

    # -- bus access -------------------------------------------------------

    def read8(self, addr: int) -> int:
        self.tstates += 3
        return self.mem_read(addr & 0xFFFF) & 0xFF

    def read16(self, addr: int) -> int:
        lsb = self.read8(addr)
        msb = self.read8(addr + 1)
        return (msb << 8) | lsb

    def write8(self, addr: int, value: int) -> None:
        self.tstates += 3
        self.mem_write(addr & 0xFFFF, value & 0xFF)

    def write16(self, addr: int, value: int) -> None:
        self.write8(addr, value)
        self.write8(addr + 1, value >> 8)

    def io_in(self, addr: int) -> int:
        self.tstates += 4
        return self.io_read(addr & 0xFFFF) & 0xFF

    def io_out(self, addr: int, value: int) -> None:
        self.tstates += 4
        self.io_write(addr & 0xFFFF, value & 0xFF)

    # -- flags ------------------------------------------------------------

    def get_flag(self, flag: int) -> bool:
        return (self.r1.f & flag) != 0

    def set_flag(self, flag: int, value: object) -> None:
        if value:
            self.r1.f |= flag
        else:
            self.r1.f &= ~flag & 0xFF

    def _adjust_undocumented(self, value: int) -> None:
        self.set_flag(Flag.F5, value & Flag.F5)
        self.set_flag(Flag.F3, value & Flag.F3)

    def _adjust_szp(self, value: int) -> None:
        value &= 0xFF
        self.set_flag(Flag.S, value & 0x80)
        self.set_flag(Flag.Z, value == 0)
        self.set_flag(Flag.PV, parity(value))

    def _adjust_logic(self, half_carry: bool) -> None:
        a = self.r1.a
        self.set_flag(Flag.S, a & 0x80)
        self.set_flag(Flag.Z, a == 0)
        self.set_flag(Flag.H, half_carry)
        self.set_flag(Flag.N, False)
        self.set_flag(Flag.C, False)
        self.set_flag(Flag.PV, parity(a))
        self._adjust_undocumented(a)

    def condition(self, cond: Condition) -> bool:
        """Evaluate a branch condition against the current flags."""
        if cond is Condition.ALWAYS:
            return True
        if cond is Condition.Z:
            return self.get_flag(Flag.Z)
        if cond is Condition.NZ:
            return not self.get_flag(Flag.Z)
        if cond is Condition.C:
            return self.get_flag(Flag.C)
        if cond is Condition.NC:
            return not self.get_flag(Flag.C)
        if cond is Condition.M:
            return self.get_flag(Flag.S)
        if cond is Condition.P:
            return not self.get_flag(Flag.S | Flag.Z)
        if cond is Condition.PE:
            return self.get_flag(Flag.PV)
        return not self.get_flag(Flag.PV)

    # -- arithmetic and logic --------------------------------------------

    def arithmetic(self, value: int, with_carry: bool, is_sub: bool) -> int:
        """ADD/ADC/SUB/SBC/CP against A; returns the result without storing it."""
        a = self.r1.a
        value &= 0xFF
        if is_sub:
            self.set_flag(Flag.N, True)
            self.set_flag(Flag.H, ((a & 0x0F) - (value & 0x0F)) & 0x10)
            res = a - value
            if with_carry and self.get_flag(Flag.C):
                res -= 1
        else:
            self.set_flag(Flag.N, False)
            self.set_flag(Flag.H, ((a & 0x0F) + (value & 0x0F)) & 0x10)
            res = a + value
            if with_carry and self.get_flag(Flag.C):
                res += 1
        res &= 0xFFFF
        self.set_flag(Flag.S, res & 0x80)
        self.set_flag(Flag.C, res & 0x100)
        self.set_flag(Flag.Z, (res & 0xFF) == 0)
        minuend_sign = a & 0x80
        subtrahend_sign = value & 0x80
        result_sign = res & 0x80
        if is_sub:
            overflow = minuend_sign != subtrahend_sign and result_sign != minuend_sign
        else:
            overflow = minuend_sign == subtrahend_sign and result_sign != minuend_sign
        self.set_flag(Flag.PV, overflow)
        self._adjust_undocumented(res & 0xFF)
        return res & 0xFF

    def add_word(self, a1: int, a2: int, with_carry: bool, is_sub: bool) -> int:
        """16-bit ADD/ADC/SBC with flag updates; returns the 16-bit result."""
        a1 &= 0xFFFF
        a2 &= 0xFFFF
        if with_carry and self.get_flag(Flag.C):
            a2 = (a2 + 1) & 0xFFFF
        if is_sub:
            total = a1 - a2
            self.set_flag(Flag.H, ((a1 & 0x0FFF) - (a2 & 0x0FFF)) & 0x1000)
        else:
            total = a1 + a2
            self.set_flag(Flag.H, ((a1 & 0x0FFF) + (a2 & 0x0FFF)) & 0x1000)
        self.set_flag(Flag.C, total & 0x10000)
        if with_carry or is_sub:
            minuend_sign = a1 & 0x8000
            subtrahend_sign = a2 & 0x8000
            result_sign = total & 0x8000
            if is_sub:
                overflow = minuend_sign != subtrahend_sign and result_sign != minuend_sign
            else:
                overflow = minuend_sign == subtrahend_sign and result_sign != minuend_sign
            self.set_flag(Flag.PV, overflow)
            self.set_flag(Flag.S, total & 0x8000)
            self.set_flag(Flag.Z, total == 0)
        self.set_flag(Flag.N, is_sub)
        self._adjust_undocumented((total >> 8) & 0xFF)
        return total & 0xFFFF

    def alu_and(self, value: int) -> None:
        self.r1.a &= value & 0xFF
        self._adjust_logic(True)

    def alu_or(self, value: int) -> None:
        self.r1.a |= value & 0xFF
        self._adjust_logic(False)

    def alu_xor(self, value: int) -> None:
        self.r1.a ^= value & 0xFF
        self._adjust_logic(False)

    def bit(self, b: int, value: int) -> None:
        """Test bit ``b`` of a byte, setting Z/PV/H/N/S."""
        clear = not (value & (1 << b))
        self.set_flag(Flag.Z | Flag.PV, clear)
        self.set_flag(Flag.H, True)
        self.set_flag(Flag.N, False)
        self.set_flag(Flag.S, b == 7 and not self.get_flag(Flag.Z))

    def bit_r(self, b: int, value: int) -> None:
        self.bit(b, value)
        self._adjust_undocumented(value)

    def bit_indexed(self, b: int, address: int) -> None:
        value = self.read8(address)
        self.bit(b, value)
        self._adjust_undocumented((address >> 8) & 0xFF)

    def inc_dec(self, value: int, is_dec: bool) -> int:
        value &= 0xFF
        if is_dec:
            self.set_flag(Flag.PV, (value & 0x80) and not ((value - 1) & 0x80))
            value = (value - 1) & 0xFF
            self.set_flag(Flag.H, (value & 0x0F) == 0x0F)
        else:
            self.set_flag(Flag.PV, not (value & 0x80) and ((value + 1) & 0x80))
            value = (value + 1) & 0xFF
            self.set_flag(Flag.H, not (value & 0x0F))
        self.set_flag(Flag.S, value & 0x80)
        self.set_flag(Flag.Z, value == 0)
        self.set_flag(Flag.N, is_dec)
        self._adjust_undocumented(value)
        return value

    # -- rotates and shifts ----------------------------------------------

    def _finish_rotate(self, value: int, adjust: bool) -> int:
        self._adjust_undocumented(value)
        self.set_flag(Flag.H | Flag.N, False)
        if adjust:
            self._adjust_szp(value)
        return value

    def rlc(self, value: int, adjust: bool) -> int:
        value &= 0xFF
        self.set_flag(Flag.C, value & 0x80)
        value = ((value << 1) & 0xFF) | int(self.get_flag(Flag.C))
        return self._finish_rotate(value, adjust)

    def rl(self, value: int, adjust: bool) -> int:
        value &= 0xFF
        carry = int(self.get_flag(Flag.C))
        self.set_flag(Flag.C, value & 0x80)
        value = ((value << 1) & 0xFF) | carry
        return self._finish_rotate(value, adjust)

    def rrc(self, value: int, adjust: bool) -> int:
        value &= 0xFF
        self.set_flag(Flag.C, value & 0x01)
        value = (value >> 1) | (int(self.get_flag(Flag.C)) << 7)
        return self._finish_rotate(value, adjust)

    def rr(self, value: int, adjust: bool) -> int:
        value &= 0xFF
        carry = int(self.get_flag(Flag.C))
        self.set_flag(Flag.C, value & 0x01)
        value = (value >> 1) | (carry << 7)
        return self._finish_rotate(value, adjust)

    def shift_left(self, value: int, is_arith: bool) -> int:
        """SLA when arithmetic, otherwise SLL (shifting in a one)."""
        value &= 0xFF
        self.set_flag(Flag.C, value & 0x80)
        value = (value << 1) & 0xFF
        if not is_arith:
            value |= 1
        return self._finish_rotate(value, True)

    def shift_right(self, value: int, is_arith: bool) -> int:
        """SRA when arithmetic (keeping the sign bit), otherwise SRL."""
        value &= 0xFF
        sign = value & 0x80
        self.set_flag(Flag.C, value & 0x01)
        value >>= 1
        if is_arith:
            value |= sign
        return self._finish_rotate(value, True)

    # -- stack and misc ---------------------------------------------------

    def push(self, value: int) -> None:
        self.r1.sp = (self.r1.sp - 2) & 0xFFFF
        self.write16(self.r1.sp, value)

    def pop(self) -> int:
        value = self.read16(self.r1.sp)
        self.r1.sp = (self.r1.sp + 2) & 0xFFFF
        return value

    def cp_hl(self) -> int:
        """Compare A with the byte at (HL); returns the subtraction result."""
        value = self.read8(self.r1.hl)
        result = self.arithmetic(value, False, True)
        self._adjust_undocumented(value)
        return result

    def daa(self) -> None:
        """Decimal-adjust A after a BCD addition or subtraction."""
        correction = 0
        carry = False
        a = self.r1.a
        if a > 0x99 or self.get_flag(Flag.C):
            correction |= 0x60
            carry = True
        if (a & 0x0F) > 9 or self.get_flag(Flag.H):
            correction |= 0x06
        if self.get_flag(Flag.N):
            self.r1.a = (a - correction) & 0xFF
        else:
            self.r1.a = (a + correction) & 0xFF
        self.set_flag(Flag.H, (a ^ self.r1.a) & 0x10)
        self.set_flag(Flag.C, carry)
        self._adjust_szp(self.r1.a)
        self._adjust_undocumented(self.r1.a)

    def interrupt(self, value: int) -> None:
        """Request a maskable interrupt with ``value`` on the data bus."""
        self.int_req = True
        self.int_vector = value & 0xFF

    def nmi(self) -> None:
        """Request a non-maskable interrupt."""
        self.nmi_req = True