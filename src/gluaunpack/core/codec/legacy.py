from __future__ import annotations

"""
Legacy (serverside) container decoder.

Binary layout, repeated until an empty path or end of file:
path bytes, 0x00, payload length as u32 little-endian, payload bytes.
"""

import logging
import struct
from typing import BinaryIO, Optional

from gluaunpack.core.codec.entry_stream import EntryStreamReader
from gluaunpack.domain import constants as const
from gluaunpack.domain.errors import UnpackFormatError, translated_errors

logger = logging.getLogger(__name__)

_LENGTH = struct.Struct("<I")
_COPY_BUFFER_SIZE = 64 * 1024


def read_until(stream: BinaryIO, delimiter: bytes) -> bytes:
    """
    Read up to and including delimiter.

    The result lacks the delimiter only when the stream ended first.
    """
    out = bytearray()
    while True:
        b = stream.read(1)
        if not b:
            break
        out += b
        if b == delimiter:
            break
    return bytes(out)


class LegacyStreamReader(EntryStreamReader):
    """Entry reader over a legacy container file handle."""

    def __init__(self, stream: BinaryIO, source: str, output_root: str) -> None:
        super().__init__(source, output_root)
        self.stream = stream

    def read_path(self) -> Optional[bytes]:
        data = read_until(self.stream, const.LEGACY_PATH_TERMINATOR)
        if not data:
            return None
        if not data.endswith(const.LEGACY_PATH_TERMINATOR):
            raise UnpackFormatError(f"Truncated path field ({len(data)} bytes, no terminator)")
        return data[:-1] or None

    def read_length(self) -> int:
        raw = self.stream.read(const.LEGACY_LENGTH_SIZE)
        if len(raw) != const.LEGACY_LENGTH_SIZE:
            raise UnpackFormatError(
                f"Truncated length field: expected {const.LEGACY_LENGTH_SIZE} bytes, got {len(raw)}"
            )
        return _LENGTH.unpack(raw)[0]

    def copy_payload(self, length: int, out: BinaryIO) -> None:
        remaining = length
        while remaining:
            chunk = self.stream.read(min(remaining, _COPY_BUFFER_SIZE))
            if not chunk:
                raise UnpackFormatError(
                    f"Truncated payload: got {length - remaining} of {length} bytes"
                )
            out.write(chunk)
            remaining -= len(chunk)


def unpack_legacy_file(path: str, output_root: str) -> int:
    """
    Decode a legacy container into output_root.

    Args:
        path: The legacy container file.
        output_root: Script folder of the output tree.

    Returns:
        int: Number of entries written.
    """
    with translated_errors(path):
        with open(path, "rb") as f:
            count = LegacyStreamReader(f, path, output_root).unpack()
    logger.debug(f"Legacy container '{path}': {count} entries.")
    return count
