import pytest

from saltpatch import utils


@pytest.mark.parametrize("offset", [0, 1, 3, 4, 5, 100, 0xFFF, 0x1000])
@pytest.mark.parametrize("alignment", [1, 2, 4, 0x20, 0x1000])
def test_align_invariants(offset, alignment):
    result = utils.align(offset, alignment)
    assert result % alignment == 0
    assert offset <= result < offset + alignment


def test_align_rejects_zero():
    with pytest.raises(ValueError):
        utils.align(5, 0)


@pytest.mark.parametrize("value", [0, 1, 0x1234, 0xFFFF])
def test_16bit_round_trips(value):
    assert utils.get_le16(utils.put_le16(value)) == value
    assert utils.get_be16(utils.put_be16(value)) == value
    assert utils.put_be16(value) == utils.put_le16(value)[::-1]


@pytest.mark.parametrize("value", [0, 1, 0x12345678, 0xFFFFFFFF])
def test_32bit_round_trips(value):
    assert utils.get_le32(utils.put_le32(value)) == value
    assert utils.get_be32(utils.put_be32(value)) == value
    assert utils.put_be32(value) == utils.put_le32(value)[::-1]


def test_put_truncates_to_width():
    assert len(utils.put_be16(0x12345)) == 2
    assert utils.get_be16(utils.put_be16(0x12345)) == 0x2345


def test_be32_wire_bytes():
    assert utils.put_be32(0xFF) == b"\x00\x00\x00\xff"


def test_64bit_reads_are_mirror_images():
    data = bytes(range(1, 9))
    assert utils.get_be64(data) == utils.get_le64(data[::-1])
    assert utils.get_be64(data) >> 56 == 1
    assert utils.get_le64(data) & 0xFF == 1


def test_get_reads_only_prefix():
    data = utils.put_be32(0xCAFEBABE) + b"\x99\x99"
    assert utils.get_be32(data) == 0xCAFEBABE


def test_get_too_short_raises():
    with pytest.raises(ValueError):
        utils.get_be32(b"\x01\x02")


def test_hexdump_layout():
    data = b"Hello\x00World!" * 2
    dump = utils.hexdump(data)
    lines = dump.splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("000000: 48 65 6c 6c 6f 00 ")
    assert lines[0].endswith("Hello.World!Hell")
    assert lines[1].startswith("000010: ")
    # short last line is padded so the ASCII column lines up
    assert lines[0].index("Hello") == lines[1].index("o.World!")


def test_hexdump_empty():
    assert utils.hexdump(b"") == ""


def test_memdump_wraps_and_indents():
    data = bytes(range(40))
    dump = utils.memdump("key: ", data)
    lines = dump.splitlines()
    assert len(lines) == 2
    assert lines[0] == "key: " + data[:32].hex().upper()
    assert lines[1] == " " * 5 + data[32:].hex().upper()


def test_hex2bytes_round_trip_and_separators():
    raw = bytes(range(16))
    assert utils.hex2bytes(raw.hex(), 16) == raw
    assert utils.hex2bytes(" ".join(f"{b:02X}" for b in raw), 16) == raw


def test_hex2bytes_wrong_count():
    with pytest.raises(ValueError):
        utils.hex2bytes("abc", 2)


def test_read_key_file(tmp_path):
    path = tmp_path / "key.bin"
    key = bytes(range(16))
    path.write_bytes(key)
    assert utils.read_key_file(path) == key


def test_read_key_file_bad_size(tmp_path):
    path = tmp_path / "key.bin"
    path.write_bytes(bytes(15))
    with pytest.raises(ValueError):
        utils.read_key_file(path)


def test_read_key_file_missing(tmp_path):
    with pytest.raises(OSError):
        utils.read_key_file(tmp_path / "absent.bin")