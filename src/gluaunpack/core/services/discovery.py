from __future__ import annotations

"""
Container Discovery Service.

Recognizes packaging artifacts by their path relative to the addon's script
folder, sorts chunk files into the clientside and shared streams, and
implements the glob-based discovery used when unpacking in place.
"""

import glob
import logging
import os
import re
from fnmatch import fnmatchcase
from typing import List, Optional

from gluaunpack.domain import constants as const
from gluaunpack.domain.unpack_models import DiscoveredContainers
from gluaunpack.infra.fs import to_posix_relative

logger = logging.getLogger(__name__)

_DIGITS_RX = re.compile(r"(\d+)")


# ==============================================================================
# CLASSIFICATION
# ==============================================================================

def is_loader_file(rel_path: str) -> bool:
    return fnmatchcase(rel_path, const.LOADER_GLOB)


def is_chunk_file(rel_path: str) -> bool:
    return fnmatchcase(rel_path, const.CHUNK_FILE_GLOB)


def is_pack_dir(rel_path: str) -> bool:
    return rel_path == const.PACK_FOLDER or fnmatchcase(rel_path, const.CHUNK_DIR_GLOB)


def classify_container(file_name: str) -> Optional[str]:
    """
    Tell which container bucket a packaging file belongs to.

    The script extension is optional: 'x.cl.lua' and 'x.cl' are both
    clientside chunks.

    Args:
        file_name: Base name of the file.

    Returns:
        Optional[str]: 'serverside', 'clientside', 'shared', or None for any
        other packaging file.
    """
    stem = file_name
    if stem.endswith(const.SCRIPT_EXTENSION):
        stem = stem[:-len(const.SCRIPT_EXTENSION)]

    if stem == const.LEGACY_PACK_STEM:
        return "serverside"
    if stem.endswith(const.CLIENT_SUFFIX):
        return "clientside"
    if stem.endswith(const.SHARED_SUFFIX):
        return "shared"
    return None


def collect_container(found: DiscoveredContainers, path: str) -> None:
    """Add a packaging file to the matching bucket of found."""
    kind = classify_container(os.path.basename(path))
    if kind == "serverside":
        found.set_legacy_file(path)
    elif kind == "clientside":
        found.client_chunks.append(path)
    elif kind == "shared":
        found.shared_chunks.append(path)
    else:
        logger.debug(f"Ignoring unrecognized packaging file: {path}")


def natural_key(path: str) -> List[object]:
    """Sort key that orders 'chunk2' before 'chunk10'."""
    return [int(p) if p.isdecimal() else p for p in _DIGITS_RX.split(path)]


def finalize_discovery(found: DiscoveredContainers) -> DiscoveredContainers:
    """Put both chunk lists into their concatenation order."""
    found.client_chunks.sort(key=natural_key)
    found.shared_chunks.sort(key=natural_key)
    return found


# ==============================================================================
# IN-PLACE DISCOVERY
# ==============================================================================

def discover_containers(addon_path: str) -> DiscoveredContainers:
    """
    Locate container files of an addon without walking or copying it.

    Args:
        addon_path: Root directory of the addon.

    Returns:
        DiscoveredContainers: The legacy file and both chunk lists.
    """
    lua_folder = os.path.join(addon_path, const.SCRIPT_FOLDER)
    pattern = os.path.join(glob.escape(lua_folder), const.PACK_FOLDER, "**", "*")

    found = DiscoveredContainers()
    for path in sorted(glob.glob(pattern, recursive=True)):
        if not os.path.isfile(path):
            continue
        rel = to_posix_relative(path, lua_folder)
        if rel is not None and is_chunk_file(rel):
            collect_container(found, path)

    logger.debug(
        f"Discovered legacy={found.legacy_file!r}, "
        f"{len(found.client_chunks)} clientside and {len(found.shared_chunks)} shared chunk(s)."
    )
    return finalize_discovery(found)
