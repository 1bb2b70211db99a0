"""Z80 computer parts: CPU state and flag logic, banked memory, I/O, video RAM, keyboard and a guest-side calculator."""

__version__ = "0.1.0"
__all__ = ["alu", "bus", "video", "keyboard", "textscreen", "calculator"]