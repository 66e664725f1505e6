"""Boyer-Moore byte string search."""

from __future__ import annotations

from typing import Optional, Union

BytesLike = Union[bytes, bytearray, memoryview]

_ALPHABET_LEN = 256


def _make_delta1(pat: bytes) -> list[int]:
    patlen = len(pat)
    delta1 = [patlen] * _ALPHABET_LEN
    for i, byte in enumerate(pat[:-1]):
        delta1[byte] = patlen - 1 - i
    return delta1


def _is_prefix(word: bytes, pos: int) -> bool:
    return word[pos:] == word[:len(word) - pos]


def _suffix_length(word: bytes, pos: int) -> int:
    last = len(word) - 1
    length = 0
    while word[pos - length] == word[last - length] and length < pos:
        length += 1
    return length


def _make_delta2(pat: bytes) -> list[int]:
    patlen = len(pat)
    delta2 = [0] * patlen
    last_prefix_index = patlen - 1
    for p in range(patlen - 1, -1, -1):
        if _is_prefix(pat, p + 1):
            last_prefix_index = p + 1
        delta2[p] = last_prefix_index + (patlen - 1 - p)
    for p in range(patlen - 1):
        slen = _suffix_length(pat, p)
        if pat[p - slen] != pat[patlen - 1 - slen]:
            delta2[patlen - 1 - slen] = patlen - 1 - p + slen
    return delta2


def boyer_moore_search(haystack: BytesLike, needle: BytesLike) -> Optional[int]:
    """Return the offset of the first occurrence of ``needle``, or None."""
    text = bytes(haystack)
    pat = bytes(needle)
    if not pat:
        return 0
    delta1 = _make_delta1(pat)
    delta2 = _make_delta2(pat)

    i = len(pat) - 1
    while i < len(text):
        j = len(pat) - 1
        while j >= 0 and text[i] == pat[j]:
            i -= 1
            j -= 1
        if j < 0:
            return i + 1
        i += max(delta1[text[i]], delta2[j])
    return None