"""Shared test fixtures for KNOT tests."""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path

import pytest

from knot.config import Config
from knot.controller import ModeController
from knot.editor import EditorHandoff
from knot.storage import NoteStore


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    """Create a temporary notes root with two categories."""
    root = tmp_path / "vault"
    (root / "Work").mkdir(parents=True)
    (root / "Personal").mkdir()

    (root / "Work" / "a.md").write_text("# A\n\nalpha beta gamma\n", encoding="utf-8")
    (root / "Work" / "b.md").write_text("# B\n\nbravo\n", encoding="utf-8")
    (root / "Personal" / "diary.md").write_text("dear diary", encoding="utf-8")

    # Never listed
    (root / ".git").mkdir()
    (root / "Work" / ".draft.md").write_text("hidden", encoding="utf-8")
    (root / "Work" / "diagram.png").write_bytes(b"\x89PNG")
    (root / "README.md").write_text("root-level file, not a category", encoding="utf-8")

    os.environ["KNOT_ROOT"] = str(root)
    yield root
    if "KNOT_ROOT" in os.environ:
        del os.environ["KNOT_ROOT"]


class FakeTerminal:
    """Records when the terminal is released to the editor and taken back."""

    def __init__(self) -> None:
        self.events: list = []

    @contextmanager
    def release(self):
        self.events.append("release")
        try:
            yield
        finally:
            self.events.append("reacquire")


class FakeLauncher:
    """Stands in for the editor binary: optionally rewrites the file, returns *code*."""

    def __init__(self, terminal: FakeTerminal) -> None:
        self.terminal = terminal
        self.calls: list[Path] = []
        self.code = 0
        self.write: str | None = None
        self.error: Exception | None = None

    def __call__(self, path: Path) -> int:
        self.calls.append(path)
        self.terminal.events.append(("launch", path))
        if self.error is not None:
            raise self.error
        if self.write is not None:
            path.write_text(self.write, encoding="utf-8")
        return self.code


@pytest.fixture
def terminal() -> FakeTerminal:
    return FakeTerminal()


@pytest.fixture
def launcher(terminal: FakeTerminal) -> FakeLauncher:
    return FakeLauncher(terminal)


@pytest.fixture
def config(vault: Path) -> Config:
    return Config(root=vault, editor="true", words_per_minute=2)


@pytest.fixture
def store(config: Config) -> NoteStore:
    return NoteStore(config)


@pytest.fixture
def controller(config: Config, store: NoteStore, launcher: FakeLauncher, terminal: FakeTerminal) -> ModeController:
    ctrl = ModeController(config, store, EditorHandoff(launcher, terminal.release))
    ctrl.start()
    return ctrl


def press(ctrl: ModeController, *keys: str) -> None:
    """Feed keys the way Textual names them; single characters double as their key name."""
    for key in keys:
        ctrl.handle_key(key, key if len(key) == 1 else None)


def type_text(ctrl: ModeController, text: str) -> None:
    for ch in text:
        ctrl.handle_key(ch, ch)
