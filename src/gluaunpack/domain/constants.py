from __future__ import annotations

"""
Domain Constants.

Fixed naming conventions of packed addons and the framing constants of the
two container formats. Everything here is known at process start and never
mutated.
"""

from typing import Final

APP_NAME: Final = "gluaunpack"
APP_VERSION: Final = "1.0.0"

# -----------------------------------------------------------------------------
# ADDON LAYOUT
# -----------------------------------------------------------------------------
SCRIPT_FOLDER: Final = "lua"
PACK_FOLDER: Final = "gluapack"
MANIFEST_NAME: Final = "gluapack.json"
HIDDEN_PREFIX: Final = "."
SCRIPT_EXTENSION: Final = ".lua"

# Globs are matched against POSIX paths relative to the script folder.
# '*' crosses '/' so chunk files are found at any depth below PACK_FOLDER.
LOADER_GLOB: Final = "autorun/*_gluapack_*.lua"
CHUNK_FILE_GLOB: Final = "gluapack/*"
CHUNK_DIR_GLOB: Final = "gluapack/*"

LEGACY_PACK_STEM: Final = "gluapack.sv"
CLIENT_SUFFIX: Final = ".cl"
SHARED_SUFFIX: Final = ".sh"

# -----------------------------------------------------------------------------
# CONTAINER FRAMING
# -----------------------------------------------------------------------------
LEGACY_PATH_TERMINATOR: Final = b"\x00"
LEGACY_LENGTH_SIZE: Final = 4

COMMENT_MARKER: Final = b"--"
TERMINATOR: Final = b"\x02"

MAX_LUA_SIZE: Final = 64 * 1024
MEM_PREALLOCATE_MAX: Final = 256 * 1024 * 1024

U32_MAX: Final = 0xFFFFFFFF
HEX_DIGITS: Final = "0123456789abcdefABCDEF"
