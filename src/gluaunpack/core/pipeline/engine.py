from __future__ import annotations

"""
Unpack orchestration pipeline.

Drives one unpack run as a strictly sequential series of phases:
1. Prepares the output directory (or selects in-place mode).
2. Copies the addon while collecting container files, or globs for them.
3. Decodes the serverside legacy container, if present.
4. Decodes the clientside chunk stream.
5. Decodes the shared chunk stream.

Blocking filesystem work runs on a worker thread so the event loop stays
free; each phase is awaited before the next one starts.
"""

import asyncio
import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from gluaunpack.core.codec.chunked import unpack_chunk_files
from gluaunpack.core.codec.legacy import unpack_legacy_file
from gluaunpack.core.services.discovery import discover_containers
from gluaunpack.core.services.tree_copier import copy_addon
from gluaunpack.domain import constants as const
from gluaunpack.domain.errors import translated_errors
from gluaunpack.domain.unpack_models import DiscoveredContainers, UnpackResult
from gluaunpack.infra.fs import canonicalize, prepare_output_dir

logger = logging.getLogger(__name__)


async def unpack(
        addon_path: str,
        output_path: Optional[str] = None,
        *,
        no_copy: bool = False,
) -> UnpackResult:
    """
    Unpack a gluapack-packed addon.

    Args:
        addon_path: Root directory of the packed addon.
        output_path: Destination directory; None unpacks in place.
        no_copy: Decode in place, discovering containers by glob instead of
            copying the addon.

    Returns:
        UnpackResult: Decoded entry count, processed container count, timing.

    Raises:
        UnpackingError: On any I/O, encoding or container format failure.
    """
    logger.info(f"Addon Path: {canonicalize(addon_path)}")

    in_place = (
            no_copy
            or output_path is None
            or os.path.abspath(output_path) == os.path.abspath(addon_path)
    )

    if in_place:
        out_dir = addon_path
        logger.info("Output Path: In-place")
    else:
        out_dir = output_path
        with translated_errors(out_dir):
            prepare_output_dir(out_dir)
        logger.info(f"Output Path: {canonicalize(out_dir)}")

    loop = asyncio.get_running_loop()
    started = time.perf_counter()

    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="Unpacker") as executor:
        found: DiscoveredContainers
        if in_place:
            logger.info("Discovering chunk files...")
            with translated_errors(addon_path):
                found = await loop.run_in_executor(executor, discover_containers, addon_path)
        else:
            logger.info("Copying addon to output directory...")
            with translated_errors(addon_path):
                found = await loop.run_in_executor(executor, copy_addon, addon_path, out_dir)

        output_root = os.path.join(out_dir, const.SCRIPT_FOLDER)
        unpacked_files = 0
        packed_files = 0

        if found.legacy_file is not None:
            packed_files += 1
            logger.info("Unpacking serverside files...")
            unpacked_files += await loop.run_in_executor(
                executor, unpack_legacy_file, found.legacy_file, output_root
            )

        logger.info("Unpacking clientside files...")
        unpacked_files += await loop.run_in_executor(
            executor, unpack_chunk_files, list(found.client_chunks), output_root, "clientside"
        )

        logger.info("Unpacking shared files...")
        unpacked_files += await loop.run_in_executor(
            executor, unpack_chunk_files, list(found.shared_chunks), output_root, "shared"
        )
        packed_files += 2

    elapsed = time.perf_counter() - started
    logger.debug(f"Unpack finished: {unpacked_files} entries, {packed_files} containers, {elapsed:.3f}s.")

    return UnpackResult(
        unpacked_files=unpacked_files,
        packed_files=packed_files,
        chunk_files=found.chunk_count,
        elapsed=elapsed,
        addon_path=addon_path,
        output_path=out_dir,
        no_copy=no_copy,
    )


def run_unpack(
        addon_path: str,
        output_path: Optional[str] = None,
        *,
        no_copy: bool = False,
) -> UnpackResult:
    """Synchronous entry point: run unpack() on a fresh event loop."""
    return asyncio.run(unpack(addon_path, output_path, no_copy=no_copy))
