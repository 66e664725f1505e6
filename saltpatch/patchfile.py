"""Reading and writing SALTPTCH memory patch files.

A patch file is a 32-byte header (magic, big-endian version, SHA-1 of the
whole file taken with the hash field zeroed) followed by big-endian chunks:
data chunks that copy bytes to an address, memset chunks that zero a range,
and an end-of-file marker.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from enum import IntEnum
from itertools import groupby
from typing import BinaryIO, Iterator, Union

from .utils import BytesLike, get_be32, put_be32

MAGIC = b"SALTPTCH"
PATCHFILE_VERSION = 1
HEADER_SIZE = 32
HASH_OFFSET = 12
HASH_SIZE = 20
CHUNK_HEADER_SIZE = 12
WORD = 4

_ZERO_WORD = bytes(WORD)

_VIRT_TO_PHYS = {
    0x04000000: 0x08280000,
    0x04020000: 0x082A0000,
    0x04024000: 0x082A4000,
    0x04025000: 0x082A5000,
    0x05000000: 0x081C0000,
    0x05060000: 0x08220000,
    0x05070000: 0x08230000,
    0x05074000: 0x08234000,
    0x05100000: 0x13D80000,
    0xE0000000: 0x12900000,
    0xE0100000: 0x12A00000,
    0xE0121000: 0x12A21000,
    0xE0122000: 0x12A22000,
    0xE0123000: 0x12A23000,
    0xE1000000: 0x12BC0000,
    0xE10C0000: 0x12C80000,
    0xE10E2000: 0x12CA2000,
    0xE10E4000: 0x12CA4000,
    0xE2000000: 0x12EC0000,
    0xE2280000: 0x13140000,
    0xE22C9000: 0x13189000,
    0xE22CA000: 0x1318A000,
    0xE22CB000: 0x1318B000,
    0xE3000000: 0x13640000,
    0xE3180000: 0x137C0000,
    0xE31AD000: 0x137ED000,
    0xE31AE000: 0x137EE000,
    0xE31AF000: 0x137EF000,
    0xE4000000: 0x13A40000,
    0xE4040000: 0x13A80000,
    0xE4046000: 0x13A86000,
    0xE4047000: 0x13A87000,
    0xE5000000: 0x13C00000,
    0xE5040000: 0x13C40000,
    0xE5044000: 0x13C44000,
    0xE5045000: 0x13C45000,
    0xE6000000: 0x13CC0000,
    0xE6040000: 0x13D00000,
    0xE6042000: 0x13D02000,
    0xE6047000: 0x13D07000,
    0xE7000000: 0x082C0000,
    0xEFF00000: 0xFFF00000,
}


def virt_to_phys(addr: int) -> int:
    """Map a known section base address to its physical address.

    Addresses that are not section bases are returned unchanged.
    """
    return _VIRT_TO_PHYS.get(addr, addr)


class PatchFormatError(ValueError):
    """Raised when patch file data is malformed."""


class ChunkType(IntEnum):
    DATA = 0
    MEMSET = 1
    EOF = 0xFF


@dataclass(frozen=True)
class Chunk:
    """One chunk of a patch file; ``kind`` is a raw int for unknown types."""

    kind: Union[ChunkType, int]
    addr: int = 0
    length: int = 0
    data: bytes = b""

    def __str__(self) -> str:
        if self.kind == ChunkType.DATA:
            return f"Data chunk: Offs 0x{self.addr:08X} len 0x{self.length:08X}"
        if self.kind == ChunkType.MEMSET:
            return f"Memset chunk: Offs 0x{self.addr:08X} len 0x{self.length:08X}"
        if self.kind == ChunkType.EOF:
            return "EOF chunk."
        return f"Unrecognized chunk type {int(self.kind):08X}"


def _pad_to_words(data: BytesLike) -> bytes:
    raw = bytes(data)
    remainder = len(raw) % WORD
    if remainder:
        raw += bytes(WORD - remainder)
    return raw


def _words(data: bytes) -> list[bytes]:
    return [data[pos:pos + WORD] for pos in range(0, len(data), WORD)]


def _runs(flags: list[bool]) -> Iterator[tuple[bool, int, int]]:
    """Yield (flag, first index, count) for each run of equal flags."""
    start = 0
    for flag, group in groupby(flags):
        count = sum(1 for _ in group)
        yield flag, start, count
        start += count


class PatchWriter:
    """Writes a patch file to a seekable binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self.stream = stream
        self._hash = hashlib.sha1()
        self._start: int | None = None
        self._finished = False

    def _write(self, payload: bytes) -> None:
        if self._start is None:
            raise RuntimeError("patch header has not been written")
        if self._finished:
            raise RuntimeError("patch file is already finished")
        self.stream.write(payload)
        self._hash.update(payload)

    def write_header(self) -> None:
        """Write the header with a zeroed checksum field."""
        if self._start is not None:
            raise RuntimeError("patch header already written")
        self._start = self.stream.tell()
        self._write(MAGIC + put_be32(PATCHFILE_VERSION) + bytes(HASH_SIZE))

    def add_diff(self, data: BytesLike, base: int) -> None:
        """Add a data chunk copying ``data`` (whole words) to ``base``."""
        raw = bytes(data)
        if len(raw) % WORD:
            raise ValueError("data chunk length must be a multiple of 4")
        self._write(
            put_be32(ChunkType.DATA) + put_be32(base) + put_be32(len(raw)) + raw
        )

    def add_memset(self, length: int, base: int) -> None:
        """Add a chunk zeroing ``length`` bytes at ``base``."""
        if length < 0 or length % WORD:
            raise ValueError("memset length must be a non-negative multiple of 4")
        self._write(put_be32(ChunkType.MEMSET) + put_be32(base) + put_be32(length))

    def add_file(self, data: BytesLike, base: int) -> None:
        """Encode a whole image: zero words as memsets, the rest as data."""
        padded = _pad_to_words(data)
        words = _words(padded)
        for is_zero, first, count in _runs([w == _ZERO_WORD for w in words]):
            offset = first * WORD
            if is_zero:
                self.add_memset(count * WORD, base + offset)
            else:
                self.add_diff(padded[offset:offset + count * WORD], base + offset)

    def add_diff_file(
        self, unpatched: BytesLike, patched: BytesLike, base: int
    ) -> None:
        """Encode the words that differ between two images, plus any growth."""
        old = _pad_to_words(unpatched)
        new = _pad_to_words(patched)
        compared = new.ljust(len(old), b"\0")
        flags = [a != b for a, b in zip(_words(old), _words(compared))]
        for differs, first, count in _runs(flags):
            if differs:
                offset = first * WORD
                self.add_diff(compared[offset:offset + count * WORD], base + offset)
        if len(new) > len(old):
            self.add_diff(new[len(old):], base + len(old))

    def finish(self) -> bytes:
        """Write the end marker and fill in the checksum; return the digest."""
        self._write(put_be32(ChunkType.EOF))
        self._finished = True
        digest = self._hash.digest()
        end = self.stream.tell()
        assert self._start is not None
        self.stream.seek(self._start + HASH_OFFSET)
        self.stream.write(digest)
        self.stream.seek(end)
        return digest


def _check_header(raw: bytes) -> None:
    if len(raw) < HEADER_SIZE:
        raise PatchFormatError(
            f"patch file too short: {len(raw)} bytes, header needs {HEADER_SIZE}"
        )
    if raw[:8] != MAGIC:
        raise PatchFormatError(f"Invalid magic! {raw[:8].hex().upper()}")
    version = get_be32(raw[8:12])
    if version != PATCHFILE_VERSION:
        raise PatchFormatError(f"Unsupported patch version {version}")


def read_patch(data: BytesLike) -> list[Chunk]:
    """Parse patch file contents into its chunks, in file order."""
    raw = bytes(data)
    _check_header(raw)
    end = len(raw) // WORD * WORD
    chunks: list[Chunk] = []
    pos = HEADER_SIZE
    while pos < end:
        kind = get_be32(raw[pos:pos + WORD])
        if kind in (ChunkType.DATA, ChunkType.MEMSET):
            if pos + CHUNK_HEADER_SIZE > end:
                raise PatchFormatError(f"truncated chunk at offset 0x{pos:X}")
            addr = get_be32(raw[pos + 4:pos + 8])
            length = get_be32(raw[pos + 8:pos + 12])
            pos += CHUNK_HEADER_SIZE
            if kind == ChunkType.DATA:
                size = length // WORD * WORD
                if pos + size > end:
                    raise PatchFormatError(
                        f"data chunk at 0x{addr:08X} runs past end of file"
                    )
                chunks.append(Chunk(ChunkType.DATA, addr, length, raw[pos:pos + size]))
                pos += size
            else:
                chunks.append(Chunk(ChunkType.MEMSET, addr, length))
        elif kind == ChunkType.EOF:
            chunks.append(Chunk(ChunkType.EOF))
            pos += WORD
        else:
            chunks.append(Chunk(kind))
            pos += WORD
    return chunks


def verify_checksum(data: BytesLike) -> bool:
    """Tell whether the stored SHA-1 matches the file contents."""
    raw = bytes(data)
    if len(raw) < HEADER_SIZE:
        raise PatchFormatError(
            f"patch file too short: {len(raw)} bytes, header needs {HEADER_SIZE}"
        )
    stored = raw[HASH_OFFSET:HASH_OFFSET + HASH_SIZE]
    zeroed = raw[:HASH_OFFSET] + bytes(HASH_SIZE) + raw[HASH_OFFSET + HASH_SIZE:]
    return hashlib.sha1(zeroed).digest() == stored