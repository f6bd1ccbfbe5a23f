"""Dynamic keymap macro storage.

The firmware keeps every macro in one flat buffer of device-reported size.
Each macro is terminated by a single zero byte, so macro ``n`` is the ``n``-th
zero-delimited segment. The buffer can only be moved in chunks of at most
28 bytes, one VIA report each.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from .exceptions import InvalidMacroIndexError, MacroNotFoundError
from .protocol.framing import MAX_BUFFER_CHUNK

if TYPE_CHECKING:
    from .client import KeyboardClient

logger = logging.getLogger(__name__)

TERMINATOR = b"\x00"


def split_macros(buffer: bytes) -> list[bytes]:
    """Split a macro buffer after every terminator.

    Every segment but the last keeps its trailing zero byte; the last is
    whatever follows the final terminator (often just padding or empty).
    """
    parts = buffer.split(TERMINATOR)
    return [part + TERMINATOR for part in parts[:-1]] + [parts[-1]]


class MacroStore:
    """Read-through cache and index access over a keyboard's macro buffer.

    Usage::

        store = MacroStore(client)
        store.set(0, b"hello")
        store.get(0)  # b"hello"

    The cache belongs to this store alone. It is filled by ``read_all`` and
    dropped before every write, so a failed write never leaves stale data
    behind.
    """

    def __init__(self, client: KeyboardClient) -> None:
        self._client = client
        self._cache: bytes | None = None

    @property
    def cached(self) -> bool:
        return self._cache is not None

    def invalidate(self) -> None:
        """Forget the cached buffer; the next read goes to the keyboard."""
        self._cache = None

    def read_all(self) -> bytes:
        """Return the whole macro buffer, trimmed to its reported size."""
        if self._cache is not None:
            return self._cache

        size = self._client.get_macro_buffer_size()
        chunks = math.ceil(size / MAX_BUFFER_CHUNK)
        data = b"".join(
            self._client.get_macro_buffer(i * MAX_BUFFER_CHUNK, MAX_BUFFER_CHUNK)
            for i in range(chunks)
        )
        self._cache = data[:size]
        logger.debug("Read %d-byte macro buffer in %d chunks", size, chunks)
        return self._cache

    def write_all(self, buffer: bytes) -> None:
        """Overwrite the macro buffer, zero-padding to whole chunks.

        Bytes beyond the keyboard-reported size are dropped; the firmware
        ignores writes past its end.
        """
        self.invalidate()

        size = self._client.get_macro_buffer_size()
        aligned = math.ceil(size / MAX_BUFFER_CHUNK) * MAX_BUFFER_CHUNK
        if len(buffer) > size:
            logger.warning(
                "Macro data is %d bytes, keyboard holds %d; truncating",
                len(buffer), size,
            )
        data = bytes(buffer[:size]).ljust(aligned, TERMINATOR)

        for offset in range(0, aligned, MAX_BUFFER_CHUNK):
            self._client.set_macro_buffer(
                offset, MAX_BUFFER_CHUNK, data[offset:offset + MAX_BUFFER_CHUNK]
            )
        logger.debug("Wrote %d-byte macro buffer", aligned)

    def _segments(self, index: int) -> list[bytes]:
        count = self._client.get_macro_count()
        if index < 0 or index > count:
            raise InvalidMacroIndexError(
                f"Macro index {index} out of range (keyboard has {count} macros)"
            )
        segments = split_macros(self.read_all())
        if index >= len(segments):
            raise MacroNotFoundError(f"Macro {index} not found in buffer")
        return segments

    def get(self, index: int) -> bytes:
        """Return macro ``index`` without its terminator.

        Raises:
            InvalidMacroIndexError: If ``index`` exceeds the macro count.
            MacroNotFoundError: If the buffer holds fewer segments.
        """
        segment = self._segments(index)[index]
        if segment.endswith(TERMINATOR):
            segment = segment[:-1]
        return segment

    def set(self, index: int, data: bytes) -> None:
        """Replace macro ``index`` and write the whole buffer back.

        Raises:
            InvalidMacroIndexError: If ``index`` exceeds the macro count.
            MacroNotFoundError: If the buffer holds fewer segments.
        """
        segments = self._segments(index)
        segments[index] = bytes(data) + TERMINATOR
        self.write_all(b"".join(segments))

    def get_all(self) -> list[bytes]:
        """Every macro slot the keyboard reports, terminators removed.

        Slots with no segment in the buffer come back empty.
        """
        count = self._client.get_macro_count()
        segments = split_macros(self.read_all())
        macros = []
        for index in range(count):
            segment = segments[index] if index < len(segments) else b""
            macros.append(segment[:-1] if segment.endswith(TERMINATOR) else segment)
        return macros
