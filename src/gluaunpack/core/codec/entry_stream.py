from __future__ import annotations

"""
Sequential Entry Stream Protocol.

Both container formats are a flat sequence of (path, length, payload)
records. EntryStreamReader implements the loop shared by the two formats:
read a path (or detect the end of the stream), read a length, then copy
exactly that many payload bytes into a freshly created file below the
output root. Subclasses only supply the three field readers.
"""

import logging
import os
import posixpath
from abc import ABC, abstractmethod
from typing import BinaryIO, Optional

from gluaunpack.domain.errors import UnpackFormatError, translated_errors

logger = logging.getLogger(__name__)


class EntryStreamReader(ABC):
    """
    Abstract reader of one logical container stream.

    Attributes:
        source: Label of the container used in error messages.
        output_root: Directory decoded entry paths are resolved against.
        entries: Number of entries written so far.
    """

    def __init__(self, source: str, output_root: str) -> None:
        self.source = source
        self.output_root = output_root
        self.entries = 0

    # -------------------------------------------------------------------------
    # FORMAT HOOKS
    # -------------------------------------------------------------------------

    @abstractmethod
    def read_path(self) -> Optional[bytes]:
        """
        Read the next path field.

        Returns:
            Optional[bytes]: The raw path without its terminator, or None when
            the stream ends here (empty path or end of source at a record
            boundary).

        Raises:
            UnpackFormatError: If the source ends inside the path field.
        """

    @abstractmethod
    def read_length(self) -> int:
        """Read the payload length field of the current entry."""

    @abstractmethod
    def copy_payload(self, length: int, out: BinaryIO) -> None:
        """Copy exactly length payload bytes into out."""

    # -------------------------------------------------------------------------
    # DRIVER
    # -------------------------------------------------------------------------

    def read_entry(self) -> bool:
        """
        Decode one entry and write it to disk.

        Returns:
            bool: False once the end-of-stream sentinel has been reached.
        """
        raw_path = self.read_path()
        if raw_path is None:
            return False

        length = self.read_length()
        rel_path = raw_path.decode("utf-8")
        target = resolve_entry_path(self.output_root, rel_path)

        parent = os.path.dirname(target)
        if parent:
            os.makedirs(parent, exist_ok=True)

        with open(target, "wb") as out:
            self.copy_payload(length, out)

        logger.debug(f"{self.source}: wrote '{rel_path}' ({length} bytes)")
        return True

    def unpack(self) -> int:
        """
        Decode every entry of the stream in container order.

        Returns:
            int: Number of entries written.

        Raises:
            UnpackingError: On any I/O, encoding or framing failure.
        """
        while True:
            with translated_errors(self.source, self.entries):
                if not self.read_entry():
                    break
            self.entries += 1
        return self.entries


def resolve_entry_path(output_root: str, rel_path: str) -> str:
    """
    Map an entry path onto the filesystem below output_root.

    Entry paths always use '/' separators. Paths that are absolute or climb
    out of the output root are rejected.

    Args:
        output_root: Base directory for decoded files.
        rel_path: Decoded entry path.

    Returns:
        str: Filesystem path of the file to create.

    Raises:
        UnpackFormatError: If the path would escape output_root.
    """
    normalized = rel_path.replace("\\", "/")
    parts = normalized.split("/")
    if (
            posixpath.isabs(normalized)
            or ".." in parts
            or (parts and parts[0].endswith(":"))
            or not any(p not in ("", ".") for p in parts)
    ):
        raise UnpackFormatError(f"Unsafe entry path {rel_path!r}")
    return os.path.join(output_root, *[p for p in parts if p not in ("", ".")])
