from __future__ import annotations

"""
Chunked (clientside/shared) container decoder.

Each chunk file is a script whose every line starts with a two byte comment
marker. Stripping the marker from every line of every chunk file, in list
order, rebuilds one buffer (the superchunk) laid out as:
path bytes, TERM, hex length, TERM, payload bytes; repeated until an empty
path or the end of the buffer.
"""

import logging
from typing import BinaryIO, List, Optional, Sequence, Tuple

from gluaunpack.core.codec.entry_stream import EntryStreamReader
from gluaunpack.domain import constants as const
from gluaunpack.domain.errors import UnpackFormatError, translated_errors

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# STAGE A: DE-COMMENTING
# -----------------------------------------------------------------------------

def read_commented_file(path: str) -> bytes:
    """
    Strip the comment marker from every line of a chunk file.

    Line terminators are part of the payload and are kept.

    Args:
        path: Chunk file to read.

    Returns:
        bytes: Concatenated payload fragments.
    """
    marker_len = len(const.COMMENT_MARKER)
    buf = bytearray()
    with open(path, "rb") as f:
        while True:
            f.read(marker_len)
            line = f.readline()
            if not line:
                break
            buf += line
    return bytes(buf)


def superchunk_capacity_hint(file_count: int) -> int:
    """Expected superchunk size: one maximum-size script per file, capped."""
    return min(const.MAX_LUA_SIZE * file_count, const.MEM_PREALLOCATE_MAX)


def build_superchunk(paths: Sequence[str]) -> bytearray:
    """
    De-comment and concatenate chunk files in list order.

    The buffer is preallocated from superchunk_capacity_hint(), grows when
    the hint undershoots and is trimmed to the bytes actually read.

    Raises:
        UnpackIOError: If a chunk file cannot be read.
    """
    capacity = superchunk_capacity_hint(len(paths))
    logger.debug(f"Assembling superchunk from {len(paths)} file(s), preallocating {capacity} bytes.")

    superchunk = bytearray(capacity)
    size = 0
    for path in paths:
        with translated_errors(path):
            data = read_commented_file(path)
        # Replaces preallocated bytes and extends past the end if needed
        superchunk[size:size + len(data)] = data
        size += len(data)
    del superchunk[size:]
    return superchunk

# -----------------------------------------------------------------------------
# STAGE B: ENTRY PARSING
# -----------------------------------------------------------------------------

def parse_hex_length(text: str) -> int:
    """
    Parse a hexadecimal length field as an unsigned 32-bit integer.

    Either case and leading zeros are accepted. Signs, prefixes, whitespace
    and underscores are not.

    Raises:
        UnpackFormatError: If text is empty, not hex, or exceeds u32.
    """
    if not text or any(c not in const.HEX_DIGITS for c in text):
        raise UnpackFormatError(f"Invalid hex length field {text!r}")
    value = int(text, 16)
    if value > const.U32_MAX:
        raise UnpackFormatError(f"Length field {text!r} overflows u32")
    return value


class ChunkedStreamReader(EntryStreamReader):
    """Entry reader over an in-memory superchunk."""

    def __init__(self, superchunk: bytes, source: str, output_root: str) -> None:
        super().__init__(source, output_root)
        self.data = superchunk
        self.view = memoryview(superchunk)
        self.pos = 0

    def _read_field(self) -> Tuple[bytes, bool]:
        """Read up to TERM; the flag is False if the buffer ended first."""
        end = len(self.data)
        idx = self.data.find(const.TERMINATOR, self.pos)
        if idx == -1:
            field = bytes(self.view[self.pos:end])
            self.pos = end
            return field, False
        field = bytes(self.view[self.pos:idx])
        self.pos = idx + len(const.TERMINATOR)
        return field, True

    def read_path(self) -> Optional[bytes]:
        if self.pos >= len(self.data):
            return None
        field, terminated = self._read_field()
        if not terminated:
            raise UnpackFormatError(f"Truncated path field ({len(field)} bytes, no terminator)")
        return field or None

    def read_length(self) -> int:
        field, terminated = self._read_field()
        if not terminated:
            raise UnpackFormatError("Truncated length field (no terminator)")
        return parse_hex_length(field.decode("utf-8"))

    def copy_payload(self, length: int, out: BinaryIO) -> None:
        available = len(self.data) - self.pos
        if length > available:
            raise UnpackFormatError(
                f"Truncated payload: got {available} of {length} bytes"
            )
        out.write(self.view[self.pos:self.pos + length])
        self.pos += length


def unpack_chunk_files(paths: List[str], output_root: str, stream: str = "chunked") -> int:
    """
    Decode one logical chunked stream into output_root.

    An empty list is a valid, empty stream.

    Args:
        paths: Chunk files of the stream in concatenation order.
        output_root: Script folder of the output tree.
        stream: Stream name used in log and error messages.

    Returns:
        int: Number of entries written.
    """
    if not paths:
        logger.debug(f"No {stream} chunk files.")
        return 0

    superchunk = build_superchunk(paths)
    source = f"{stream} stream ({len(paths)} chunk file(s))"
    count = ChunkedStreamReader(superchunk, source, output_root).unpack()
    logger.debug(f"{source}: {count} entries from {len(superchunk)} bytes.")
    return count
