from __future__ import annotations

"""
Unit tests for the unpacking error taxonomy and error translation.
"""

import pytest

from gluaunpack.domain.errors import (
    UnpackDecodeError,
    UnpackFormatError,
    UnpackingError,
    UnpackIOError,
    translated_errors,
)


def test_error_rendering() -> None:
    err = UnpackFormatError("Invalid hex length 'zz'", source="/a/1.cl.lua", entry=3)
    assert str(err) == "File format error: Invalid hex length 'zz' [/a/1.cl.lua, entry #3]"
    assert str(UnpackIOError("denied")) == "IO error: denied"
    assert str(UnpackDecodeError("bad byte", source="x")) == "UTF-8 error: bad byte [x]"


@pytest.mark.parametrize("cls", [UnpackIOError, UnpackDecodeError, UnpackFormatError])
def test_hierarchy(cls: type) -> None:
    assert issubclass(cls, UnpackingError)


def test_os_error_is_translated() -> None:
    with pytest.raises(UnpackIOError) as exc_info:
        with translated_errors("/addon/file", 2):
            raise PermissionError("denied")

    err = exc_info.value
    assert (err.source, err.entry) == ("/addon/file", 2)
    assert isinstance(err.__cause__, PermissionError)


def test_unicode_error_is_translated() -> None:
    with pytest.raises(UnpackDecodeError) as exc_info:
        with translated_errors("container"):
            b"\xff".decode("utf-8")
    assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)


def test_taxonomy_errors_gain_context() -> None:
    with pytest.raises(UnpackFormatError) as exc_info:
        with translated_errors("outer", 7):
            with translated_errors("inner"):
                raise UnpackFormatError("Truncated payload")

    # Innermost context wins, missing fields come from outer blocks
    assert exc_info.value.source == "inner"
    assert exc_info.value.entry == 7


def test_unrelated_errors_pass_through() -> None:
    with pytest.raises(KeyError):
        with translated_errors("x"):
            raise KeyError("k")
