from __future__ import annotations

"""
Addon Tree Copier.

Mirrors an addon directory into the output directory, leaving out packaging
artifacts, hidden entries and the packer manifest. Container files met on the
way are not copied; they are collected for the decoders instead.
"""

import logging
import os
import shutil
import stat
from typing import List, Set, Tuple

from gluaunpack.core.services.discovery import (
    collect_container,
    finalize_discovery,
    is_chunk_file,
    is_loader_file,
    is_pack_dir,
)
from gluaunpack.domain import constants as const
from gluaunpack.domain.unpack_models import DiscoveredContainers
from gluaunpack.infra.fs import to_posix_relative

logger = logging.getLogger(__name__)


def copy_addon(addon_path: str, output_path: str) -> DiscoveredContainers:
    """
    Copy an addon to output_path and collect its container files.

    Symlinks are followed once per resolved target; a target seen before in
    this pass is skipped, which also breaks symlink cycles. Entries are
    classified by their resolved location, so a link into the packaging
    folder is excluded like the folder itself. Excluded
    packaging directories are still traversed so their chunk files are
    found, but they are not created in the destination.

    Args:
        addon_path: Root directory of the packed addon.
        output_path: Destination root.

    Returns:
        DiscoveredContainers: Legacy file and chunk lists, in decode order.

    Raises:
        OSError: On any filesystem failure. Output written so far is kept.
    """
    os.makedirs(output_path, exist_ok=True)

    lua_real = os.path.realpath(os.path.join(addon_path, const.SCRIPT_FOLDER))
    output_real = os.path.realpath(output_path)
    visited_symlinks: Set[str] = set()
    collected: Set[str] = set()
    found = DiscoveredContainers()
    copied = 0

    # (source dir, destination dir, resolved source dir, inside excluded dir)
    stack: List[Tuple[str, str, str, bool]] = [
        (addon_path, output_path, os.path.realpath(addon_path), False)
    ]
    while stack:
        src_dir, dst_dir, real_dir, excluded = stack.pop()
        with os.scandir(src_dir) as it:
            entries = sorted(it, key=lambda e: e.name)

        subdirs: List[Tuple[str, str, str, bool]] = []
        for entry in entries:
            path = entry.path

            if entry.is_symlink():
                target = os.path.realpath(path)
                if target in visited_symlinks:
                    logger.debug(f"Skipping already visited symlink target: {path} -> {target}")
                    continue
                visited_symlinks.add(target)
                real_path = target
                is_dir = os.path.isdir(target)
                is_file = os.path.isfile(target)
            else:
                real_path = os.path.join(real_dir, entry.name)
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = entry.is_file(follow_symlinks=False)

            if is_dir and real_path == output_real:
                # Output nested inside the addon
                continue

            skip_copy = excluded
            rel = to_posix_relative(real_path, lua_real)
            if rel is not None:
                if is_dir:
                    skip_copy = skip_copy or is_pack_dir(rel)
                elif is_loader_file(rel):
                    logger.debug(f"Skipping loader: {rel}")
                    continue
                elif is_chunk_file(rel):
                    # Reachable twice when a link points into the packaging folder
                    if real_path not in collected:
                        collected.add(real_path)
                        collect_container(found, path)
                    continue

            if entry.name.startswith(const.HIDDEN_PREFIX) or entry.name == const.MANIFEST_NAME:
                continue
            if _has_hidden_attribute(path):
                continue

            dst = os.path.join(dst_dir, entry.name)
            if is_dir:
                if not skip_copy:
                    os.makedirs(dst, exist_ok=True)
                subdirs.append((path, dst, real_path, skip_copy))
            elif is_file and not skip_copy:
                shutil.copy(path, dst)
                copied += 1

        # Reversed so directories are visited in name order
        stack.extend(reversed(subdirs))

    logger.debug(f"Copied {copied} file(s) from '{addon_path}' to '{output_path}'.")
    return finalize_discovery(found)


def _has_hidden_attribute(path: str) -> bool:
    """Windows 'hidden' attribute bit; always False elsewhere."""
    if os.name != "nt":
        return False
    attrs = getattr(os.stat(path), "st_file_attributes", 0)
    return bool(attrs & stat.FILE_ATTRIBUTE_HIDDEN)
