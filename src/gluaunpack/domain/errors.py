from __future__ import annotations

"""
Unpacking Error Taxonomy.

Every failure of an unpack run surfaces as one of three concrete subclasses of
UnpackingError, so callers can tell an I/O problem from a bad text encoding or
a malformed container without inspecting messages.
"""

from contextlib import contextmanager
from typing import Iterator, Optional


class UnpackingError(Exception):
    """
    Base class of all fatal unpacking failures.

    Attributes:
        kind: Short category label used in user-facing messages.
        source: Container or filesystem path involved, if known.
        entry: Zero-based index of the entry being decoded, if known.
    """

    kind = "Unpacking error"

    def __init__(
            self,
            message: str,
            *,
            source: Optional[str] = None,
            entry: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.source = source
        self.entry = entry

    def __str__(self) -> str:
        where = ""
        if self.source:
            where = f" [{self.source}"
            if self.entry is not None:
                where += f", entry #{self.entry}"
            where += "]"
        return f"{self.kind}: {self.message}{where}"


class UnpackIOError(UnpackingError):
    """A filesystem read/write/create/metadata operation failed."""

    kind = "IO error"


class UnpackDecodeError(UnpackingError):
    """A path or length field is not valid UTF-8."""

    kind = "UTF-8 error"


class UnpackFormatError(UnpackingError):
    """The container is malformed: bad hex length, truncated field or payload."""

    kind = "File format error"


@contextmanager
def translated_errors(
        source: Optional[str] = None,
        entry: Optional[int] = None,
) -> Iterator[None]:
    """
    Convert low-level exceptions raised inside the block into the taxonomy.

    UnpackingError instances pass through, gaining source and entry when they
    were raised without them. OSError becomes
    UnpackIOError and UnicodeDecodeError becomes UnpackDecodeError; the
    original exception is chained as __cause__.

    Args:
        source: Path reported on the converted error.
        entry: Entry index reported on the converted error.
    """
    try:
        yield
    except UnpackingError as e:
        if e.source is None:
            e.source = source
        if e.entry is None:
            e.entry = entry
        raise
    except UnicodeDecodeError as e:
        raise UnpackDecodeError(str(e), source=source, entry=entry) from e
    except OSError as e:
        raise UnpackIOError(str(e), source=source, entry=entry) from e
