from __future__ import annotations

"""
Unpack Domain Data Models.

Defines the accumulator filled during container discovery and the result
object handed back from the pipeline engine to the interface layer.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from gluaunpack.domain.errors import UnpackFormatError

# -----------------------------------------------------------------------------
# DISCOVERY ACCUMULATOR
# -----------------------------------------------------------------------------

@dataclass
class DiscoveredContainers:
    """
    Container artifacts found while walking or globbing an addon.

    Attributes:
        legacy_file: The single serverside legacy container, if any.
        client_chunks: Chunk files forming the clientside stream.
        shared_chunks: Chunk files forming the shared stream.
    """
    legacy_file: Optional[str] = None
    client_chunks: List[str] = field(default_factory=list)
    shared_chunks: List[str] = field(default_factory=list)

    @property
    def chunk_count(self) -> int:
        return len(self.client_chunks) + len(self.shared_chunks)

    def set_legacy_file(self, path: str) -> None:
        """Record the legacy container; an addon holds at most one."""
        if self.legacy_file is not None:
            raise UnpackFormatError(
                f"Duplicate legacy container (already found '{self.legacy_file}')",
                source=path,
            )
        self.legacy_file = path


# -----------------------------------------------------------------------------
# PIPELINE RESULT
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class UnpackResult:
    """
    Outcome of a complete unpack run.

    Attributes:
        unpacked_files: Total entries decoded and written.
        packed_files: Container units processed (legacy file + two streams).
        chunk_files: Physical chunk files read across both streams.
        elapsed: Wall-clock duration in seconds.
        addon_path: Source addon directory.
        output_path: Directory the addon was unpacked into.
        no_copy: Whether the run decoded in place without copying.
    """
    unpacked_files: int
    packed_files: int
    chunk_files: int
    elapsed: float
    addon_path: str
    output_path: str
    no_copy: bool = False
