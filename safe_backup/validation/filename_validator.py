"""Filename validation.

Every user-supplied filename passes through ``validate`` before any file
is touched. A name is accepted only when it is non-empty, relative, and
free of parent-directory components. Accepted names are returned exactly
as given so backup names can be built from the original string.
"""

import re
from dataclasses import dataclass
from pathlib import PurePosixPath, PureWindowsPath

EMPTY_NAME = "EmptyName"
ABSOLUTE_PATH = "AbsolutePath"
PATH_TRAVERSAL = "PathTraversal"

PARENT_DIR = ".."

_SEPARATORS = re.compile(r"[\\/]")


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a filename.

    ``name`` is set on success, ``error`` (one of the kind constants above)
    and ``message`` on failure.
    """
    name: str | None
    error: str | None = None
    message: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None


def _fail(error: str, message: str) -> ValidationResult:
    return ValidationResult(name=None, error=error, message=message)


def is_absolute(name: str) -> bool:
    """True for root-anchored names on either POSIX or Windows.

    Covers ``/etc/passwd``, ``\\temp``, ``C:\\x``, drive-relative ``C:x``
    and UNC shares.
    """
    if PurePosixPath(name).is_absolute():
        return True
    return bool(PureWindowsPath(name).anchor)


def has_parent_component(name: str) -> bool:
    return any(part == PARENT_DIR for part in _SEPARATORS.split(name))


def validate(name: str) -> ValidationResult:
    if name is None or not name.strip():
        return _fail(EMPTY_NAME, "empty file name")
    if is_absolute(name):
        return _fail(ABSOLUTE_PATH, "absolute paths not allowed")
    if has_parent_component(name):
        return _fail(PATH_TRAVERSAL, "parent traversal not allowed")
    return ValidationResult(name=name)
