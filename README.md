# saltpatch

`saltpatch` builds and reads **SALTPTCH** patch files. A SALTPTCH file is a compact list of memory writes for a firmware image, protected by a checksum. The package also has two small helper modules:

- byte-order, alignment and hex-dump utilities,
- a Boyer–Moore byte search.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## The file format

A patch file starts with a 32-byte header:

- the magic `SALTPTCH`,
- a big-endian version number, which is `1`,
- a 20-byte SHA-1 of the whole file, computed with this field set to zero.

The header is followed by big-endian chunks:

- **data**: an address, a length, and that many bytes to copy to the address;
- **memset**: an address and a length of bytes to zero;
- **EOF**: a single marker word that ends the file.

## Writing a patch

`saltpatch.patchfile.PatchWriter` writes a patch to a seekable binary stream. Call its methods in this order:

1. `write_header()` writes the header with a zeroed checksum.
2. Add chunks with any of these:
   - `add_diff(data, base)` adds one data chunk. The length of `data` must be a multiple of 4.
   - `add_memset(length, base)` adds one memset chunk.
   - `add_file(data, base)` encodes a whole section. It pads the section to whole 32-bit words. Runs of zero words become memset chunks, and all other runs become data chunks.
   - `add_diff_file(unpatched, patched, base)` records only the words that differ between the two images. If the patched image is longer, the extra data is added as one more data chunk.
3. `finish()` writes the EOF marker, fills in the checksum and returns the digest.

Calling the methods out of order raises `RuntimeError`.

`virt_to_phys(addr)` maps a known section base address to its physical address. Any other address is returned unchanged.

```python
import io
from saltpatch.patchfile import PatchWriter, read_patch, verify_checksum, virt_to_phys

buf = io.BytesIO()
writer = PatchWriter(buf)
writer.write_header()
writer.add_diff_file(b"\0" * 8, b"\0\0\0\0\x01\x02\x03\x04", virt_to_phys(0x05000000))
writer.finish()

data = buf.getvalue()
assert verify_checksum(data)
for chunk in read_patch(data):
    print(chunk)
```

## Reading a patch

`read_patch(data)` checks the magic and the version, then returns the chunks as a list of `Chunk` objects in file order. Each `Chunk` has these fields:

- `kind`: a `ChunkType` (`DATA`, `MEMSET` or `EOF`), or a plain int for a chunk type it does not recognise;
- `addr`;
- `length`;
- `data`.

Calling `str()` on a chunk gives a one-line description of it.

`read_patch` raises `PatchFormatError` (a subclass of `ValueError`) in these cases:

- bad magic,
- unsupported version,
- the file is too short,
- a chunk is truncated.

`verify_checksum(data)` tells you whether the stored SHA-1 matches the file.

## Helpers

`saltpatch.utils` provides:

- **Alignment:** `align(offset, alignment)`.
- **Reading integers:** `get_le16`, `get_le32`, `get_le64`, `get_be16`, `get_be32` and `get_be64` read from the start of a bytes-like value.
- **Writing integers:** `put_le16`, `put_le32`, `put_be16` and `put_be32` return encoded bytes.
- **Dumps:** `hexdump(data)` gives a 16-bytes-per-line hex and ASCII dump. `memdump(prefix, data)` gives upper-case hex, 32 bytes per line, after a prefix.
- **Hex parsing:** `hex2bytes(text, size)` parses exactly `size` bytes of hex digits and ignores any other characters.
- **Keys:** `read_key_file(path)` reads a 16-byte key file. It raises `ValueError` if the file is any other size.

`saltpatch.bm.boyer_moore_search(haystack, needle)` returns the offset of the first occurrence of `needle`, or `None` if it does not occur.

## What this package does not do

The package has no command-line program. It does not do either of these for you:

- scan a directory of section dumps to produce a patch file,
- print a listing of an existing patch file.

Read the files yourself and pass their contents to `PatchWriter` and `read_patch`.

It also has no bitmap font and no framebuffer text drawing.