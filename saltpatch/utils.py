"""Byte-order helpers, alignment and hex dumping utilities."""

from __future__ import annotations

import os
import string
from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]

KEY_SIZE = 16
_HEX_DIGITS = frozenset(string.hexdigits)


def align(offset: int, alignment: int) -> int:
    """Round ``offset`` up to the next multiple of ``alignment`` (a power of two)."""
    if alignment <= 0:
        raise ValueError("alignment must be positive")
    mask = ~(alignment - 1)
    return (offset + alignment - 1) & mask


def _read(data: BytesLike, width: int, order: str) -> int:
    raw = bytes(data[:width])
    if len(raw) < width:
        raise ValueError(f"need {width} bytes, got {len(raw)}")
    return int.from_bytes(raw, order)


def _write(value: int, width: int, order: str) -> bytes:
    return (value & ((1 << (8 * width)) - 1)).to_bytes(width, order)


def get_le16(data: BytesLike) -> int:
    """Read a little-endian 16-bit value from the start of ``data``."""
    return _read(data, 2, "little")


def get_le32(data: BytesLike) -> int:
    """Read a little-endian 32-bit value from the start of ``data``."""
    return _read(data, 4, "little")


def get_le64(data: BytesLike) -> int:
    """Read a little-endian 64-bit value from the start of ``data``."""
    return _read(data, 8, "little")


def get_be16(data: BytesLike) -> int:
    """Read a big-endian 16-bit value from the start of ``data``."""
    return _read(data, 2, "big")


def get_be32(data: BytesLike) -> int:
    """Read a big-endian 32-bit value from the start of ``data``."""
    return _read(data, 4, "big")


def get_be64(data: BytesLike) -> int:
    """Read a big-endian 64-bit value from the start of ``data``."""
    return _read(data, 8, "big")


def put_le16(value: int) -> bytes:
    """Encode the low 16 bits of ``value`` little-endian."""
    return _write(value, 2, "little")


def put_le32(value: int) -> bytes:
    """Encode the low 32 bits of ``value`` little-endian."""
    return _write(value, 4, "little")


def put_be16(value: int) -> bytes:
    """Encode the low 16 bits of ``value`` big-endian."""
    return _write(value, 2, "big")


def put_be32(value: int) -> bytes:
    """Encode the low 32 bits of ``value`` big-endian."""
    return _write(value, 4, "big")


def hexdump(data: BytesLike) -> str:
    """Return a classic 16-bytes-per-line hex and ASCII dump of ``data``."""
    raw = bytes(data)
    lines = []
    for offset in range(0, len(raw), 16):
        chunk = raw[offset:offset + 16]
        hex_part = "".join(f"{b:02x} " for b in chunk) + "   " * (16 - len(chunk))
        text_part = "".join(chr(b) if 0x20 <= b <= 0x7E else "." for b in chunk)
        lines.append(f"{offset:06x}: {hex_part} {text_part}\n")
    return "".join(lines)


def memdump(prefix: str, data: BytesLike) -> str:
    """Dump ``data`` as upper-case hex, 32 bytes per line, after ``prefix``.

    Continuation lines are indented by the width of the prefix.
    """
    raw = bytes(data)
    indent = " " * len(prefix)
    lines = []
    for line_no, offset in enumerate(range(0, len(raw), 32)):
        lead = prefix if line_no == 0 else indent
        lines.append(lead + raw[offset:offset + 32].hex().upper() + "\n")
    return "".join(lines)


def hex2bytes(text: str, size: int) -> bytes:
    """Parse exactly ``size`` bytes from the hex digits in ``text``.

    Characters that are not hex digits are ignored.
    """
    digits = "".join(c for c in text if c in _HEX_DIGITS)
    if len(digits) != size * 2:
        raise ValueError(
            f"expected {size * 2} hex characters when parsing text {text!r}"
        )
    return bytes.fromhex(digits)


def read_key_file(path: Union[str, os.PathLike]) -> bytes:
    """Read a 16-byte key file."""
    with open(path, "rb") as handle:
        key = handle.read()
    if len(key) != KEY_SIZE:
        raise ValueError(
            f"key size mismatch, got {len(key)}, expected {KEY_SIZE}"
        )
    return key