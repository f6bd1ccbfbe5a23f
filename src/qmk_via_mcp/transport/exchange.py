"""Request/reply exchange over a keyboard handle with bounded retries.

Every VIA command is one 32-byte report out and one 32-byte report back.
A failed or short write or read simply triggers another attempt; there is
no backoff and no timeout other than the handle's own.
"""

from __future__ import annotations

import logging
from typing import Protocol

from ..exceptions import BadMessageSizeError, ReadWriteError, UnknownCommandError
from ..protocol.framing import MESSAGE_SIZE, UNHANDLED

logger = logging.getLogger(__name__)

DEFAULT_ATTEMPTS = 20


class KeyboardHandle(Protocol):
    """The two primitives the transport needs from an open device."""

    def write(self, data: bytes) -> int: ...

    def read(self, size: int) -> bytes: ...


class MessageTransport:
    """Sends VIA reports through a handle and returns the replies."""

    def __init__(self, handle: KeyboardHandle, attempts: int = DEFAULT_ATTEMPTS) -> None:
        self.handle = handle
        self.attempts = attempts

    def exchange(self, message: bytes, attempts: int | None = None) -> bytes:
        """Write a report and read the reply.

        Args:
            message: Exactly one 32-byte report.
            attempts: Attempt budget; defaults to the transport's.

        Returns:
            The 32-byte reply.

        Raises:
            BadMessageSizeError: If ``message`` is not 32 bytes (not retried).
            UnknownCommandError: If the firmware answered 0xFF (not retried).
            ReadWriteError: If no attempt completed a full write and read.
        """
        if len(message) != MESSAGE_SIZE:
            raise BadMessageSizeError(
                f"VIA report must be {MESSAGE_SIZE} bytes, got {len(message)}"
            )
        if attempts is None:
            attempts = self.attempts

        for attempt in range(1, attempts + 1):
            try:
                written = self.handle.write(message)
            except (OSError, ValueError) as e:
                logger.debug("Write attempt %d failed: %s", attempt, e)
                continue
            if written != MESSAGE_SIZE:
                logger.debug("Write attempt %d was short: %d bytes", attempt, written)
                continue

            try:
                reply = self.handle.read(MESSAGE_SIZE)
            except (OSError, ValueError) as e:
                logger.debug("Read attempt %d failed: %s", attempt, e)
                continue
            if reply is None or len(reply) != MESSAGE_SIZE:
                logger.debug(
                    "Read attempt %d was short: %d bytes",
                    attempt, len(reply) if reply else 0,
                )
                continue

            if reply[0] == UNHANDLED:
                raise UnknownCommandError(message[0])
            return bytes(reply)

        logger.warning(
            "Command 0x%02X failed after %d attempts", message[0], attempts
        )
        raise ReadWriteError(
            f"could not read/write VIA command 0x{message[0]:02X} "
            f"after {attempts} attempts"
        )
