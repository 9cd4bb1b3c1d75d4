#!/usr/bin/env python3
"""KNOT TUI: colour-coded Markdown notes in the terminal, powered by Textual."""

from __future__ import annotations

import argparse
import logging
import sys
from contextlib import contextmanager
from typing import Iterator

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult, SuspendNotSupported
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import Static

from knot import (
    EditorHandoff,
    LaunchFailed,
    ModeController,
    NoteStore,
    StorageError,
    launch_editor,
    load_config,
    notes_root,
    project,
)
from knot.controller import SPECIAL_KEYS
from knot.logging_setup import install_excepthook, setup_logging
from knot.view import Frame, Pane

log = logging.getLogger("knot.tui")


# ── Stylesheet ─────────────────────────────────────────────────

CSS = """
Screen {
    background: $surface;
}

#header-bar {
    dock: top;
    height: 1;
    background: $primary-background;
    color: $text;
    padding: 0 2;
    text-style: bold;
}

#main-layout {
    height: 1fr;
}

.pane {
    width: 1fr;
    min-width: 18;
    max-width: 36;
    height: 1fr;
    border: round $primary-background-darken-2;
    padding: 0 1;
}

.pane.focused {
    border: round $warning;
}

#preview-pane {
    width: 3fr;
    height: 1fr;
    border: round $primary-background-darken-2;
    padding: 0 1;
}

#message-bar {
    dock: bottom;
    height: 1;
    color: $warning;
    padding: 0 2;
}

#status-bar {
    dock: bottom;
    height: 1;
    background: $primary-background;
    color: $text-muted;
    padding: 0 1;
}
"""


# ── Painting ───────────────────────────────────────────────────


def render_pane(pane: Pane) -> Text:
    text = Text(no_wrap=True, overflow="ellipsis")
    if not pane.rows:
        text.append(pane.placeholder, style="dim italic")
        return text
    for i, row in enumerate(pane.rows):
        if i:
            text.append("\n")
        color = row.color or "default"
        if row.selected and pane.focused:
            text.append(f" {row.label} ", style=f"bold black on {color}")
        elif row.selected:
            text.append(f"› {row.label}", style=f"bold underline {color}")
        else:
            text.append(f"  {row.label}", style=color)
    return text


# ── Main app ───────────────────────────────────────────────────


class KnotApp(App):
    """Browse categories and notes, edit them in $EDITOR."""

    TITLE = "KNOT"
    CSS = CSS
    AUTO_FOCUS = None

    # Keys Textual would otherwise consume for focus/scroll handling.
    BINDINGS = [
        Binding(key, f"route_key('{key}')", show=False, priority=True)
        for key in sorted(SPECIAL_KEYS)
    ]

    def __init__(self, controller: ModeController) -> None:
        super().__init__()
        self.controller = controller
        controller.editor.attach_terminal(self._release_terminal)

    def compose(self) -> ComposeResult:
        yield Static(id="header-bar")
        yield Horizontal(
            Static(id="categories", classes="pane"),
            Static(id="notes", classes="pane"),
            VerticalScroll(Static(id="preview"), id="preview-pane", can_focus=False),
            id="main-layout",
        )
        yield Static(id="status-bar")
        yield Static(id="message-bar")

    def on_mount(self) -> None:
        self._paint()

    # ── Input ──────────────────────────────────────────────────

    def on_key(self, event: events.Key) -> None:
        if event.key in SPECIAL_KEYS:
            return
        event.stop()
        self.controller.handle_key(event.key, event.character)
        self._after_key()

    def action_route_key(self, key: str) -> None:
        self.controller.handle_key(key)
        self._after_key()

    def _after_key(self) -> None:
        if self.controller.should_quit:
            self.exit(0)
            return
        if self.controller.repaint_requested:
            self.controller.repaint_requested = False
            self.refresh(layout=True)
        self._paint()

    @contextmanager
    def _release_terminal(self) -> Iterator[None]:
        """Give the terminal to a foreground child process; take it back afterwards."""
        try:
            with self.suspend():
                yield
        except SuspendNotSupported as e:
            raise LaunchFailed("This terminal cannot be suspended for an editor") from e

    # ── Output ─────────────────────────────────────────────────

    def _paint(self) -> None:
        frame: Frame = project(self.controller)

        self.query_one("#header-bar", Static).update(Text(frame.header))

        for widget_id, pane in (("#categories", frame.categories), ("#notes", frame.notes)):
            widget = self.query_one(widget_id, Static)
            widget.update(render_pane(pane))
            widget.border_title = pane.title
            widget.set_class(pane.focused, "focused")
            widget.display = frame.show_sidebars

        preview_pane = self.query_one("#preview-pane", VerticalScroll)
        preview_pane.border_title = frame.preview_title
        self.query_one("#preview", Static).update(Text(frame.preview))

        self.query_one("#status-bar", Static).update(Text(frame.footer))
        self.query_one("#message-bar", Static).update(Text(frame.message or ""))


# ── Entry point ────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="knot", description="Colour-coded Markdown notes in the terminal.")
    parser.add_argument("--root", help="notes root (default: $KNOT_ROOT or ~/.knot_vault)")
    parser.add_argument("--editor", help="editor command (default: config, $VISUAL, $EDITOR, vim)")
    args = parser.parse_args(argv)

    root = notes_root(args.root)
    config = load_config(root)
    if args.editor:
        config.editor = args.editor

    setup_logging(config.log_level)
    install_excepthook()

    store = NoteStore(config)
    editor = EditorHandoff(launch_editor(config.editor), strict_exit=config.strict_editor_exit)
    controller = ModeController(config, store, editor)
    try:
        controller.start()
    except StorageError as e:
        log.error("Cannot open notes root %s: %s", root, e)
        print(f"Cannot open notes root {root}: {e}", file=sys.stderr)
        return 1

    app = KnotApp(controller)
    app.run()
    return app.return_code or 0


if __name__ == "__main__":
    sys.exit(main())
