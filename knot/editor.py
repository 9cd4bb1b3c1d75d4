"""Handing the terminal over to an external editor and taking it back.

The handoff is synchronous: the caller's terminal session is released for
the lifetime of the child process and re-acquired on every exit path,
including a failed launch or a child killed by a signal.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from contextlib import nullcontext
from pathlib import Path
from typing import Callable, ContextManager

from knot.errors import EditorAbnormalExit, LaunchFailed

log = logging.getLogger(__name__)

Launcher = Callable[[Path], int]
TerminalRelease = Callable[[], ContextManager[object]]

# Exit statuses a shell uses for "found but not executable" / "not found".
LAUNCH_FAILURE_CODES = {126, 127}


def launch_editor(command: str) -> Launcher:
    """Build a launcher that runs ``command <path>`` and waits for it."""
    try:
        argv = shlex.split(command)
    except ValueError:
        log.warning("Cannot parse editor command %r", command)
        argv = []

    def launch(path: Path) -> int:
        if not argv:
            raise LaunchFailed("No editor configured")
        try:
            proc = subprocess.run([*argv, str(path)], check=False)
        except FileNotFoundError as e:
            raise LaunchFailed(f"Editor {argv[0]!r} not found") from e
        except OSError as e:
            raise LaunchFailed(f"Cannot start editor {argv[0]!r}: {e.strerror or e}") from e
        return proc.returncode

    return launch


class EditorHandoff:
    """Runs the editor on a note while the interactive session is suspended.

    *terminal* returns a context manager that releases the terminal on
    enter and takes it back on exit (for the Textual front-end that is
    ``App.suspend``). Without one the launcher runs directly, which is what
    the tests use.
    """

    def __init__(
        self,
        launch: Launcher,
        terminal: TerminalRelease | None = None,
        strict_exit: bool = False,
    ) -> None:
        self._launch = launch
        self._terminal = terminal
        self.strict_exit = strict_exit
        self.in_progress = False

    def attach_terminal(self, terminal: TerminalRelease) -> None:
        self._terminal = terminal

    def open_in_editor(self, path: Path) -> None:
        """Block until the editor on *path* exits. Raises ``EditorError`` on failure."""
        if not path.is_file():
            raise LaunchFailed(f"{path.name} is not an existing note")

        release = self._terminal() if self._terminal is not None else nullcontext()
        log.info("Opening editor on %s", path)
        self.in_progress = True
        try:
            with release:
                code = self._launch(path)
        finally:
            self.in_progress = False

        if code in LAUNCH_FAILURE_CODES:
            raise LaunchFailed(f"Editor could not be started (status {code})")
        if code < 0:
            raise EditorAbnormalExit(path, code)
        if code != 0:
            if self.strict_exit:
                raise EditorAbnormalExit(path, code)
            log.warning("Editor exited with status %d for %s", code, path)
        log.info("Editor closed %s", path)
