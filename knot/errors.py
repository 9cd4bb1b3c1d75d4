"""Error kinds raised by the KNOT core.

Storage and editor errors never crash the session: the mode controller
catches ``KnotError`` and turns it into a transient status message.
"""

from __future__ import annotations

from pathlib import Path


class KnotError(Exception):
    """Base class for every recoverable KNOT error."""


# ── Storage ───────────────────────────────────────────────────


class StorageError(KnotError):
    """A filesystem operation on the notes root failed."""


class NotFound(StorageError):
    pass


class PermissionDenied(StorageError):
    pass


class NameConflict(StorageError):
    """A sibling with the requested name already exists."""

    def __init__(self, name: str) -> None:
        super().__init__(f"{name!r} already exists")
        self.name = name


class InvalidName(StorageError):
    """The requested name is empty or would escape its parent directory."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Invalid name {name!r}: {reason}")
        self.name = name
        self.reason = reason


# ── Editor ────────────────────────────────────────────────────


class EditorError(KnotError):
    """The external editor could not be run to completion."""


class LaunchFailed(EditorError):
    pass


class EditorAbnormalExit(EditorError):
    def __init__(self, path: Path, code: int) -> None:
        super().__init__(f"Editor exited with status {code} for {path.name}")
        self.path = path
        self.code = code
