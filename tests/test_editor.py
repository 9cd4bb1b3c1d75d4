"""Tests for knot/editor.py: terminal release/reacquire and exit status handling."""

import pytest

from knot.editor import EditorHandoff, launch_editor
from knot.errors import EditorAbnormalExit, LaunchFailed


@pytest.fixture
def note(tmp_path):
    path = tmp_path / "n.md"
    path.write_text("body", encoding="utf-8")
    return path


def test_terminal_released_around_launch(note, terminal, launcher):
    handoff = EditorHandoff(launcher, terminal.release)
    handoff.open_in_editor(note)
    assert terminal.events == ["release", ("launch", note), "reacquire"]


def test_in_progress_only_while_editor_runs(note, terminal):
    seen = []
    handoff = EditorHandoff(lambda p: seen.append(handoff.in_progress) or 0, terminal.release)
    assert not handoff.in_progress
    handoff.open_in_editor(note)
    assert seen == [True]
    assert not handoff.in_progress


def test_reacquired_when_launch_raises(note, terminal, launcher):
    launcher.error = LaunchFailed("Editor 'nope' not found")
    handoff = EditorHandoff(launcher, terminal.release)
    with pytest.raises(LaunchFailed):
        handoff.open_in_editor(note)
    assert terminal.events[-1] == "reacquire"
    assert not handoff.in_progress


def test_missing_note_is_not_launched(tmp_path, terminal, launcher):
    handoff = EditorHandoff(launcher, terminal.release)
    with pytest.raises(LaunchFailed, match="not an existing note"):
        handoff.open_in_editor(tmp_path / "missing.md")
    assert launcher.calls == []
    assert terminal.events == []


@pytest.mark.parametrize("code", [126, 127])
def test_shell_launch_failure_codes(note, launcher, code):
    launcher.code = code
    with pytest.raises(LaunchFailed):
        EditorHandoff(launcher).open_in_editor(note)


def test_killed_editor_is_abnormal(note, launcher):
    launcher.code = -9
    with pytest.raises(EditorAbnormalExit) as excinfo:
        EditorHandoff(launcher).open_in_editor(note)
    assert excinfo.value.code == -9


def test_nonzero_exit_tolerated_unless_strict(note, launcher):
    launcher.code = 1
    EditorHandoff(launcher).open_in_editor(note)
    with pytest.raises(EditorAbnormalExit, match="status 1"):
        EditorHandoff(launcher, strict_exit=True).open_in_editor(note)


def test_launch_editor_runs_command_with_path(note):
    assert launch_editor("true")(note) == 0
    assert launch_editor("sh -c 'exit 3' sh")(note) == 3


def test_launch_editor_passes_path_as_last_argument(note, tmp_path):
    out = tmp_path / "out.txt"
    launch = launch_editor(f"sh -c 'printf %s \"$1\" > {out}' sh")
    assert launch(note) == 0
    assert out.read_text(encoding="utf-8") == str(note)


def test_launch_editor_missing_binary(note):
    with pytest.raises(LaunchFailed, match="not found"):
        launch_editor("definitely-not-an-editor-knot")(note)


def test_launch_editor_empty_command(note):
    with pytest.raises(LaunchFailed, match="No editor"):
        launch_editor("")(note)
    with pytest.raises(LaunchFailed, match="No editor"):
        launch_editor("vim 'unbalanced")(note)
