from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. A minimal reference packer producing both container formats, used to
   build fixtures for decoder and pipeline tests.
"""

import os
import struct
import sys
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Tuple

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

Entries = Iterable[Tuple[str, bytes]]

TERM = b"\x02"
MARKER = b"--"


# -----------------------------------------------------------------------------
# Reference Packer
# -----------------------------------------------------------------------------
def encode_legacy(entries: Entries, sentinel: bool = True) -> bytes:
    """Encode entries in the legacy (path, 0x00, u32le length, payload) layout."""
    out = bytearray()
    for path, data in entries:
        out += path.encode("utf-8") + b"\x00" + struct.pack("<I", len(data)) + data
    if sentinel:
        out += b"\x00"
    return bytes(out)


def encode_superchunk(entries: Entries, sentinel: bool = True) -> bytes:
    """Encode entries in the (path, TERM, hex length, TERM, payload) layout."""
    out = bytearray()
    for path, data in entries:
        out += path.encode("utf-8") + TERM + format(len(data), "x").encode("ascii") + TERM + data
    if sentinel:
        out += TERM
    return bytes(out)


def wrapped_lines(data: bytes) -> List[bytes]:
    """Split data on LF (kept) and prefix every line with the comment marker."""
    parts = data.split(b"\n")
    lines = [p + b"\n" for p in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return [MARKER + line for line in lines]


def comment_wrap(data: bytes) -> bytes:
    return b"".join(wrapped_lines(data))


def write_chunks(directory: Path, name_fmt: str, superchunk: bytes, pieces: int = 1) -> List[Path]:
    """
    Spread a superchunk over several comment-wrapped chunk files.

    Pieces are cut at line boundaries so every file is well formed.
    """
    directory.mkdir(parents=True, exist_ok=True)
    lines = wrapped_lines(superchunk)
    per_file = max(1, -(-len(lines) // pieces))
    paths: List[Path] = []
    for i in range(pieces):
        path = directory / name_fmt.format(i + 1)
        path.write_bytes(b"".join(lines[i * per_file:(i + 1) * per_file]))
        paths.append(path)
    return paths


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def packed_addon(tmp_path: Path) -> Path:
    """
    Build a packed addon.

    Structure:
    /addon
      addon.json
      gluapack.json
      .gitignore
      materials/icon.png
      lua/autorun/001_gluapack_abc.lua        (loader)
      lua/autorun/server/plain.lua
      lua/gluapack/abc/gluapack.sv.lua        (init.lua, 5 bytes)
      lua/gluapack/abc/1.cl.lua               (cl_init.lua, 3 bytes)
    """
    addon = tmp_path / "addon"
    (addon / "materials").mkdir(parents=True)
    (addon / "materials" / "icon.png").write_bytes(b"\x89PNG")
    (addon / "addon.json").write_text("{}", encoding="utf-8")
    (addon / "gluapack.json").write_text("{}", encoding="utf-8")
    (addon / ".gitignore").write_text("*.tmp", encoding="utf-8")

    autorun = addon / "lua" / "autorun"
    (autorun / "server").mkdir(parents=True)
    (autorun / "001_gluapack_abc.lua").write_text("-- loader", encoding="utf-8")
    (autorun / "server" / "plain.lua").write_text("print('plain')", encoding="utf-8")

    pack_dir = addon / "lua" / "gluapack" / "abc"
    pack_dir.mkdir(parents=True)
    (pack_dir / "gluapack.sv.lua").write_bytes(encode_legacy([("init.lua", b"hello")]))
    write_chunks(pack_dir, "{}.cl.lua", encode_superchunk([("cl_init.lua", b"abc")]))
    return addon


@pytest.fixture
def read_tree() -> Callable[[Path], Dict[str, bytes]]:
    """Return a helper mapping every file below a root to its contents."""
    def _read(root: Path) -> Dict[str, bytes]:
        return {
            p.relative_to(root).as_posix(): p.read_bytes()
            for p in sorted(root.rglob("*"))
            if p.is_file()
        }
    return _read
