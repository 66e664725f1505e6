import random

import pytest

from saltpatch.bm import boyer_moore_search


@pytest.mark.parametrize(
    "haystack, needle",
    [
        (b".....ABYXCDEYX", b"ABYXCDEYX"),
        (b"dddbcabcdddbcabc", b"dddbcabc"),
        (b"hello world", b"world"),
        (b"hello world", b"hello"),
        (b"aaaaaaaab", b"aab"),
        (b"abcabcabd", b"abcabd"),
        (b"\x00\xa3\x60\xb7\x58\x98\x21\x00", b"\x00\xa3\x60\xb7\x58\x98\x21\x00"),
    ],
)
def test_matches_find(haystack, needle):
    assert boyer_moore_search(haystack, needle) == haystack.find(needle)


def test_not_found():
    assert boyer_moore_search(b"hello world", b"xyz") is None


def test_needle_longer_than_haystack():
    assert boyer_moore_search(b"ab", b"abc") is None


def test_empty_needle_matches_at_start():
    assert boyer_moore_search(b"abc", b"") == 0


def test_accepts_bytearray_and_memoryview():
    data = bytearray(b"xx/dev/sdio/MLC01yy")
    assert boyer_moore_search(memoryview(data), bytearray(b"/dev/sdio/MLC01")) == 2


def test_first_occurrence_reported():
    data = b"needle..needle..needle"
    assert boyer_moore_search(data, b"needle") == data.find(b"needle")


def test_random_agrees_with_find():
    rng = random.Random(1234)
    for _ in range(400):
        haystack = bytes(rng.choice(b"abc") for _ in range(rng.randint(0, 60)))
        needle = bytes(rng.choice(b"abc") for _ in range(rng.randint(1, 6)))
        expected = haystack.find(needle)
        result = boyer_moore_search(haystack, needle)
        assert result == (None if expected < 0 else expected)