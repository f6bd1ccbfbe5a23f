"""Transport layer: HID discovery, device handles, and report exchange."""

from .exchange import DEFAULT_ATTEMPTS, KeyboardHandle, MessageTransport
from .hid_connection import HidHandle, KeyboardInfo, list_keyboards
