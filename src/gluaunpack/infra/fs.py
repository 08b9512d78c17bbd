from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Cross-platform path helpers shared by the CLI and the pipeline: user data
directory resolution, path normalization, display canonicalization and
output directory preparation.
"""

import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "gluaunpack"
UNIX_APP_DIR_NAME = ".gluaunpack"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the OS-specific directory for persistent application data.

    Standards:
    - Windows: %LOCALAPPDATA%/gluaunpack
    - Linux/Mac: ~/.gluaunpack

    Returns:
        str: Absolute path to the application data directory.
    """
    path = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    return os.path.abspath(path)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a path string into an absolute filesystem path.

    Expands environment variables and '~'. Reverts to fallback if the input
    is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    return os.path.abspath(os.path.expandvars(os.path.expanduser(p)))


def canonicalize(path: str) -> str:
    """Resolve symlinks for display, falling back to the absolute path."""
    try:
        return os.path.realpath(path, strict=True)
    except OSError:
        return os.path.abspath(path)


def to_posix_relative(path: str, start: str) -> Optional[str]:
    """
    Express path relative to start with '/' separators.

    Returns:
        Optional[str]: The relative path, or None when path is not below start.
    """
    try:
        rel = os.path.relpath(path, start)
    except ValueError:
        # Different drives on Windows
        return None
    if rel == os.curdir or rel == os.pardir or rel.startswith(os.pardir + os.sep):
        return None
    return rel.replace(os.sep, "/")

# -----------------------------------------------------------------------------
# OUTPUT PREPARATION API
# -----------------------------------------------------------------------------

def prepare_output_dir(path: str) -> None:
    """
    Make sure the unpack destination exists.

    Existing content is never removed; a non-empty directory only triggers a
    warning because unpacked files will overwrite same-named files in it.

    Args:
        path: Output directory.

    Raises:
        OSError: If the directory cannot be created or listed.
    """
    if os.path.isdir(path):
        with os.scandir(path) as it:
            if any(True for _ in it):
                logger.warning(f"Output directory is not empty, files may be overwritten: {path}")
        return
    os.makedirs(path, exist_ok=True)
