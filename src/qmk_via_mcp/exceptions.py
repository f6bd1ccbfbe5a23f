"""
VIA client exceptions.

Every error raised by the protocol engine derives from ``ViaError``. Errors that
signal a caller mistake also derive from the matching builtin so they can be
caught as ``ValueError``/``IndexError`` where that reads better.
"""

from __future__ import annotations


class ViaError(Exception):
    """Base exception for VIA protocol errors"""


class NoMatchingDeviceError(ViaError):
    """Raised when discovery finds no keyboard matching the filters"""


class VersionMismatchError(ViaError):
    """Raised when the keyboard speaks an incompatible VIA protocol version"""

    def __init__(self, version: int, expected: int) -> None:
        self.version = version
        self.expected = expected
        super().__init__(
            f"keyboard reports VIA protocol 0x{version:04X}, "
            f"expected 0x{expected:04X}"
        )


class BadMessageSizeError(ViaError, ValueError):
    """Raised when a frame handed to the transport is not exactly one HID report"""


class ReadWriteError(ViaError):
    """Raised when every transport attempt failed to write or read a report"""


class UnknownCommandError(ViaError):
    """Raised when the firmware answers with the unhandled-command marker"""

    def __init__(self, command: int) -> None:
        self.command = command
        super().__init__(f"keyboard did not handle VIA command 0x{command:02X}")


class BadBufferSizeError(ViaError, ValueError):
    """Raised when a buffer chunk size is zero or larger than one frame can carry"""


class InvalidMacroIndexError(ViaError, IndexError):
    """Raised when a macro index is beyond the keyboard's macro count"""


class MacroNotFoundError(ViaError, LookupError):
    """Raised when the macro buffer holds fewer macros than the requested index"""


class UnknownColorFormatError(ViaError, ValueError):
    """Raised when a color string is not a known name, hex, rgb() or hsv() value"""


class UnknownKeycodeError(ViaError, ValueError):
    """Raised when a keycode name is not in the keycode tables"""

    def __init__(self, name: str, keycode: int = 0x0000) -> None:
        self.name = name
        self.keycode = keycode
        super().__init__(f"unknown keycode {name!r}")
