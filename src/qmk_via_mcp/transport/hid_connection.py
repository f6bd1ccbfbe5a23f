"""USB HID discovery and raw report I/O for VIA keyboards.

VIA-enabled QMK firmware exposes a raw HID interface on usage page 0xFF60,
usage 0x61, exchanging 32-byte reports. Discovery and I/O go through the
``hidapi`` bindings (imported as ``hid``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..protocol.framing import MESSAGE_SIZE

logger = logging.getLogger(__name__)

VIA_USAGE_PAGE = 0xFF60
VIA_USAGE = 0x61
READ_TIMEOUT_MS = 1000

# hidapi expects the report ID as the first byte of every write.
REPORT_ID = 0x00


@dataclass
class KeyboardInfo:
    """A VIA keyboard found during discovery."""

    path: bytes = b""
    vendor_id: int = 0
    product_id: int = 0
    serial_number: str = ""
    manufacturer: str = ""
    product: str = ""
    release_number: int = 0

    @classmethod
    def from_hid_dict(cls, info: dict) -> KeyboardInfo:
        """Build from one entry of ``hid.enumerate()``."""
        return cls(
            path=info.get("path", b""),
            vendor_id=info.get("vendor_id", 0),
            product_id=info.get("product_id", 0),
            serial_number=info.get("serial_number") or "",
            manufacturer=info.get("manufacturer_string") or "",
            product=info.get("product_string") or "",
            release_number=info.get("release_number", 0),
        )

    def open(self, timeout_ms: int = READ_TIMEOUT_MS) -> HidHandle:
        """Open this keyboard's raw HID interface.

        Raises:
            OSError: If hidapi cannot open the device path.
        """
        return HidHandle.open_path(self.path, timeout_ms=timeout_ms)

    def to_dict(self) -> dict:
        return {
            "vendor_id": f"0x{self.vendor_id:04X}",
            "product_id": f"0x{self.product_id:04X}",
            "serial_number": self.serial_number,
            "manufacturer": self.manufacturer,
            "product": self.product,
            "release_number": f"0x{self.release_number:04X}",
        }


def list_keyboards() -> list[KeyboardInfo]:
    """Enumerate every HID interface that speaks VIA, sorted by product name.

    Returns:
        Matching keyboards; empty if none are attached.
    """
    import hid

    keyboards = [
        KeyboardInfo.from_hid_dict(info)
        for info in hid.enumerate(0, 0)
        if info.get("usage_page") == VIA_USAGE_PAGE and info.get("usage") == VIA_USAGE
    ]
    keyboards.sort(key=lambda kb: kb.product)
    logger.debug("Found %d VIA keyboard(s)", len(keyboards))
    return keyboards


class HidHandle:
    """An open raw HID interface, exchanging fixed-size reports.

    Usage::

        handle = HidHandle.open_path(info.path)
        handle.write(report)
        reply = handle.read(32)
        handle.close()
    """

    def __init__(self, device, timeout_ms: int = READ_TIMEOUT_MS) -> None:
        self._device = device
        self._timeout_ms = timeout_ms
        self._open = True

    @classmethod
    def open_path(cls, path: bytes, timeout_ms: int = READ_TIMEOUT_MS) -> HidHandle:
        """Open a device by its hidapi path."""
        import hid

        device = hid.device()
        device.open_path(path)
        device.set_nonblocking(False)
        logger.info("Opened HID device %r", path)
        return cls(device, timeout_ms=timeout_ms)

    @property
    def is_open(self) -> bool:
        return self._open

    def write(self, data: bytes) -> int:
        """Write one report.

        Returns:
            Number of report bytes written, excluding the report ID prefix.

        Raises:
            ConnectionError: If the handle has been closed.
            OSError: If hidapi reports a write failure.
        """
        if not self._open:
            raise ConnectionError("HID device is closed")
        written = self._device.write(bytes([REPORT_ID]) + bytes(data))
        if written < 0:
            raise OSError("HID write failed")
        return max(written - 1, 0)

    def read(self, size: int = MESSAGE_SIZE) -> bytes:
        """Read one report, blocking up to the handle's timeout.

        Returns:
            The report bytes; empty if the read timed out.
        """
        if not self._open:
            raise ConnectionError("HID device is closed")
        data = self._device.read(size, self._timeout_ms)
        return bytes(data) if data else b""

    def close(self) -> None:
        """Close the HID device."""
        if not self._open:
            return

        try:
            self._device.close()
        except OSError as e:
            logger.warning("Error closing device: %s", e)
        finally:
            self._open = False
            logger.info("Disconnected")
