from __future__ import annotations

"""
Integration tests for the unpack orchestration engine.

Runs complete copy-mode and in-place unpacks over generated addons and
checks the resulting tree and the reported counters.
"""

import asyncio
from pathlib import Path
from typing import Callable, Dict
from unittest.mock import patch

import pytest

from conftest import encode_legacy, encode_superchunk, write_chunks
from gluaunpack.core.pipeline import engine
from gluaunpack.core.pipeline.engine import run_unpack, unpack
from gluaunpack.domain.errors import UnpackFormatError, UnpackIOError

ReadTree = Callable[[Path], Dict[str, bytes]]


def test_copy_mode_end_to_end(packed_addon: Path, tmp_path: Path, read_tree: ReadTree) -> None:
    """TC-01: Loader and packaging folder vanish, decoded files appear under lua/."""
    out = tmp_path / "out"

    result = run_unpack(str(packed_addon), str(out))

    assert read_tree(out) == {
        "addon.json": b"{}",
        "lua/autorun/server/plain.lua": b"print('plain')",
        "lua/cl_init.lua": b"abc",
        "lua/init.lua": b"hello",
        "materials/icon.png": b"\x89PNG",
    }
    assert result.unpacked_files == 2
    assert result.packed_files == 3
    assert result.chunk_files == 1
    assert result.elapsed >= 0
    assert result.no_copy is False
    assert result.output_path == str(out)


def test_flat_packaging_layout(tmp_path: Path, read_tree: ReadTree) -> None:
    """TC-02: Containers placed directly in lua/gluapack/ are recognized too."""
    addon = tmp_path / "addon"
    lua = addon / "lua"
    (lua / "autorun").mkdir(parents=True)
    (lua / "autorun" / "001_gluapack_x.lua").write_bytes(b"-- loader")
    (lua / "gluapack").mkdir()
    (lua / "gluapack" / "gluapack.sv").write_bytes(encode_legacy([("init.lua", b"12345")]))
    write_chunks(lua / "gluapack", "chunk{}.cl.lua", encode_superchunk([("cl_init.lua", b"abc")]))
    out = tmp_path / "out"

    result = run_unpack(str(addon), str(out))

    assert read_tree(out) == {"lua/init.lua": b"12345", "lua/cl_init.lua": b"abc"}
    assert (result.unpacked_files, result.packed_files) == (2, 3)


def test_no_legacy_file_counts_two_streams(tmp_path: Path) -> None:
    addon = tmp_path / "addon"
    pack = addon / "lua" / "gluapack" / "id"
    write_chunks(pack, "{}.sh.lua", encode_superchunk([("a.lua", b"1"), ("b/c.lua", b"2")]), pieces=2)

    result = run_unpack(str(addon), str(tmp_path / "out"))

    assert result.unpacked_files == 2
    assert result.packed_files == 2
    assert result.chunk_files == 2


def test_empty_addon(tmp_path: Path) -> None:
    addon = tmp_path / "addon"
    addon.mkdir()

    result = run_unpack(str(addon), str(tmp_path / "out"))

    assert (result.unpacked_files, result.packed_files) == (0, 2)


def test_no_copy_mode_decodes_in_place(packed_addon: Path) -> None:
    result = run_unpack(str(packed_addon), no_copy=True)

    lua = packed_addon / "lua"
    assert (lua / "init.lua").read_bytes() == b"hello"
    assert (lua / "cl_init.lua").read_bytes() == b"abc"
    # Nothing is removed in place
    assert (lua / "gluapack" / "abc" / "gluapack.sv.lua").exists()
    assert result.output_path == str(packed_addon)
    assert (result.unpacked_files, result.packed_files) == (2, 3)


def test_missing_output_defaults_to_in_place(packed_addon: Path) -> None:
    result = run_unpack(str(packed_addon))

    assert result.output_path == str(packed_addon)
    assert (packed_addon / "lua" / "init.lua").read_bytes() == b"hello"


def test_multi_file_streams_are_ordered_naturally(tmp_path: Path, read_tree: ReadTree) -> None:
    entries = [(f"f{i}.lua", f"-- {i}\n".encode() * 30) for i in range(12)]
    addon = tmp_path / "addon"
    write_chunks(addon / "lua" / "gluapack" / "x", "{}.cl.lua", encode_superchunk(entries), pieces=11)
    out = tmp_path / "out"

    result = run_unpack(str(addon), str(out))

    assert result.unpacked_files == 12
    tree = read_tree(out)
    for rel, data in entries:
        assert tree[f"lua/{rel}"] == data


def test_corrupt_container_aborts(packed_addon: Path, tmp_path: Path) -> None:
    """TC-03: A malformed stream is fatal and surfaces as a typed error."""
    (packed_addon / "lua" / "gluapack" / "abc" / "1.cl.lua").write_bytes(b"--x.lua\x02nothex\x02")

    with pytest.raises(UnpackFormatError):
        run_unpack(str(packed_addon), str(tmp_path / "out"))


def test_copy_failure_is_an_io_error(packed_addon: Path, tmp_path: Path) -> None:
    with patch.object(engine, "copy_addon", side_effect=PermissionError("denied")):
        with pytest.raises(UnpackIOError, match="denied") as exc_info:
            run_unpack(str(packed_addon), str(tmp_path / "out"))
    assert exc_info.value.source == str(packed_addon)


def test_decode_runs_after_copy(packed_addon: Path, tmp_path: Path) -> None:
    """TC-04: Decoding only starts once the copy phase has completed."""
    calls = []
    real_copy = engine.copy_addon
    real_legacy = engine.unpack_legacy_file

    def _copy(*args):
        calls.append("copy")
        return real_copy(*args)

    def _legacy(*args):
        calls.append("legacy")
        return real_legacy(*args)

    with patch.object(engine, "copy_addon", side_effect=_copy), \
            patch.object(engine, "unpack_legacy_file", side_effect=_legacy):
        run_unpack(str(packed_addon), str(tmp_path / "out"))

    assert calls == ["copy", "legacy"]


def test_unpack_is_awaitable(packed_addon: Path, tmp_path: Path) -> None:
    async def _main():
        return await unpack(str(packed_addon), str(tmp_path / "out"))

    result = asyncio.run(_main())
    assert result.unpacked_files == 2
