"""Tests for the chunked macro buffer and macro indexing."""

from __future__ import annotations

import logging

import pytest

from conftest import FakeKeyboard
from qmk_via_mcp.client import KeyboardClient
from qmk_via_mcp.exceptions import InvalidMacroIndexError, MacroNotFoundError
from qmk_via_mcp.macros import MacroStore, split_macros


def _client(size: int = 64, count: int = 16) -> tuple[KeyboardClient, FakeKeyboard]:
    keyboard = FakeKeyboard(macro_buffer_size=size, macro_count=count)
    return KeyboardClient(keyboard), keyboard


def test_split_macros_keeps_terminators():
    assert split_macros(b"ab\0c\0\0") == [b"ab\0", b"c\0", b"\0", b""]
    assert split_macros(b"abc") == [b"abc"]
    assert split_macros(b"") == [b""]


# =========================================================================
# Whole-buffer transfer
# =========================================================================

@pytest.mark.parametrize("size", [27, 28, 29, 55, 56, 57])
def test_write_then_read_round_trips(size):
    client, keyboard = _client(size=size)
    data = bytes((i * 7 + 1) % 251 + 1 for i in range(size))

    client.macros.write_all(data)
    assert client.macros.read_all() == data
    assert bytes(keyboard.macro_buffer) == data


@pytest.mark.parametrize("size,chunks", [(27, 1), (28, 1), (29, 2), (940, 34)])
def test_transfers_whole_chunks(size, chunks):
    client, keyboard = _client(size=size)
    client.macros.write_all(b"x")
    writes = [w for w in keyboard.writes if w[0] == 0x0F]
    assert len(writes) == chunks
    assert all(w[3] == 28 for w in writes)
    assert [int.from_bytes(w[1:3], "big") for w in writes] == [
        i * 28 for i in range(chunks)
    ]

    client.macros.read_all()
    reads = [w for w in keyboard.writes if w[0] == 0x0E]
    assert len(reads) == chunks
    assert all(w[3] == 28 for w in reads)


def test_write_pads_with_zeros():
    client, keyboard = _client(size=40)
    keyboard.macro_buffer[:] = b"\xff" * 40
    client.macros.write_all(b"abc")
    assert bytes(keyboard.macro_buffer) == b"abc" + bytes(37)


def test_write_truncates_oversized_buffer(caplog):
    client, keyboard = _client(size=28)
    with caplog.at_level(logging.WARNING, logger="qmk_via_mcp.macros"):
        client.macros.write_all(b"a" * 30)
    assert bytes(keyboard.macro_buffer) == b"a" * 28
    assert "truncating" in caplog.text


def test_write_truncates_at_reported_size(caplog):
    """Bytes past the reported size are dropped even inside the last chunk."""
    client, keyboard = _client(size=40)
    with caplog.at_level(logging.WARNING, logger="qmk_via_mcp.macros"):
        client.macros.write_all(b"a" * 45)
    assert bytes(keyboard.macro_buffer) == b"a" * 40
    assert "keyboard holds 40" in caplog.text
    writes = [w for w in keyboard.writes if w[0] == 0x0F]
    assert writes[-1][4:32] == b"a" * 12 + bytes(16)


def test_write_of_exact_size_does_not_warn(caplog):
    client, keyboard = _client(size=40)
    with caplog.at_level(logging.WARNING, logger="qmk_via_mcp.macros"):
        client.macros.write_all(b"a" * 40)
    assert bytes(keyboard.macro_buffer) == b"a" * 40
    assert caplog.text == ""


def test_growing_macro_past_buffer_warns(caplog):
    client, keyboard = _client(size=40, count=4)
    keyboard.macro_buffer[:] = b"x" * 30 + b"\0" + b"y" * 8 + b"\0"
    with caplog.at_level(logging.WARNING, logger="qmk_via_mcp.macros"):
        client.set_macro(0, b"x" * 40)
    assert bytes(keyboard.macro_buffer) == b"x" * 40
    assert "truncating" in caplog.text


def test_read_is_cached():
    client, keyboard = _client()
    first = client.macros.read_all()
    before = len(keyboard.writes)
    assert client.macros.read_all() is first
    assert len(keyboard.writes) == before
    assert client.macros.cached


def test_write_invalidates_cache_before_writing():
    client, keyboard = _client()
    client.macros.read_all()
    keyboard.write = _failing_write
    with pytest.raises(RuntimeError):
        client.macros.write_all(b"abc")
    assert not client.macros.cached


def _failing_write(data):
    raise RuntimeError("unplugged")


def test_invalidate_forces_reread():
    client, keyboard = _client()
    assert client.macros.read_all() == bytes(64)
    keyboard.macro_buffer[0:2] = b"hi"
    assert client.macros.read_all() == bytes(64)
    client.macros.invalidate()
    assert client.macros.read_all()[:2] == b"hi"


def test_caches_are_per_store():
    client, keyboard = _client()
    other = MacroStore(client)
    client.macros.read_all()
    assert client.macros.cached
    assert not other.cached


# =========================================================================
# Indexed access
# =========================================================================

def _seed(keyboard: FakeKeyboard, buffer: bytes) -> None:
    keyboard.macro_buffer[:] = buffer.ljust(len(keyboard.macro_buffer), b"\0")


def test_get_returns_segment_without_terminator():
    client, keyboard = _client(count=3)
    _seed(keyboard, b"one\0two\0three\0")
    assert client.get_macro(0) == b"one"
    assert client.get_macro(1) == b"two"
    assert client.get_macro(2) == b"three"


@pytest.mark.parametrize("index", [0, 7, 15])
def test_set_then_get(index):
    """First, middle and last macro slots round-trip their bytes."""
    client, _ = _client(size=128, count=16)
    client.set_macro(index, b"hello world")
    assert client.get_macro(index) == b"hello world"


def test_set_preserves_other_macros():
    client, keyboard = _client(count=3)
    _seed(keyboard, b"one\0two\0three\0")
    client.set_macro(1, b"TWO!")
    assert bytes(keyboard.macro_buffer).startswith(b"one\0TWO!\0three\0")
    assert client.get_macros()[:3] == [b"one", b"TWO!", b"three"]


def test_set_empty_macro():
    client, keyboard = _client(count=3)
    _seed(keyboard, b"one\0two\0three\0")
    client.set_macro(0, b"")
    assert client.get_macro(0) == b""
    assert client.get_macro(1) == b"two"


def test_index_beyond_count():
    client, keyboard = _client(count=4)
    with pytest.raises(InvalidMacroIndexError):
        client.get_macro(5)
    with pytest.raises(InvalidMacroIndexError):
        client.set_macro(5, b"x")
    with pytest.raises(IndexError):
        client.get_macro(-1)


def test_index_equal_to_count_reads_trailing_segment():
    """Index == count passes the count check and reads whatever follows."""
    client, keyboard = _client(size=28, count=2)
    _seed(keyboard, b"a\0b\0")
    assert client.get_macro(2) == b""


def test_index_beyond_segments():
    client, keyboard = _client(size=8, count=16)
    _seed(keyboard, b"abcdefg\0")
    assert client.get_macro(0) == b"abcdefg"
    assert client.get_macro(1) == b""
    with pytest.raises(MacroNotFoundError):
        client.get_macro(2)
    with pytest.raises(MacroNotFoundError):
        client.set_macro(2, b"x")


def test_unterminated_tail_is_returned_whole():
    client, keyboard = _client(size=8, count=4)
    _seed(keyboard, b"ab\0cdefg")
    assert client.get_macro(1) == b"cdefg"


def test_get_all_pads_missing_slots():
    client, keyboard = _client(size=8, count=4)
    _seed(keyboard, b"abcdefg\0")
    assert client.get_macros() == [b"abcdefg", b"", b"", b""]
