"""The interaction state machine.

Exactly one mode is active at a time and every key press is routed to the
handler of that mode only, so a key is never interpreted twice (typing a
filter query cannot trigger ``n``/``c``/``d``). Every non-browsing mode has
an escape path back to the base mode, which is Normal or ZenActive.

Keys are given as Textual key names (``"tab"``, ``"enter"``, ``"escape"``,
``"backspace"``, ``"up"``, ``"down"``) plus the printable character, if any.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable

from knot.config import Config
from knot.editor import EditorHandoff
from knot.errors import InvalidName, KnotError, NameConflict, StorageError
from knot.models import (
    BaseMode,
    ConfirmingDelete,
    CreatingCategory,
    CreatingNote,
    DeleteTarget,
    Filtering,
    Focus,
    Mode,
    Normal,
    Note,
    NoteStats,
    ZenActive,
)
from knot.navigation import NavigationModel, Selection
from knot.stats import NoteCache
from knot.storage import NoteStore

log = logging.getLogger(__name__)

SPECIAL_KEYS = {"tab", "enter", "escape", "backspace", "up", "down"}


def _command(key: str, character: str | None) -> str:
    if key in SPECIAL_KEYS:
        return key
    return character if character is not None else key


def _printable(key: str, character: str | None) -> str | None:
    """The character a key types, or None for control/special keys."""
    if key in SPECIAL_KEYS:
        return None
    ch = character if character is not None else key
    if len(ch) == 1 and ch.isprintable():
        return ch
    return None


class ModeController:
    """Routes key presses to the active mode and applies the resulting transition."""

    def __init__(self, config: Config, store: NoteStore, editor: EditorHandoff) -> None:
        self.config = config
        self.store = store
        self.editor = editor
        self.nav = NavigationModel()
        self.cache = NoteCache(store.read_note, config.words_per_minute)
        self.mode: Mode = Normal()
        self.base: BaseMode = Normal()
        self.message: str | None = None
        self.should_quit = False
        self.repaint_requested = False
        self._filter_prior: Selection | None = None
        self._handlers: dict[type, Callable[[str, str | None], None]] = {
            Normal: self._handle_browse,
            ZenActive: self._handle_browse,
            Filtering: self._handle_filtering,
            CreatingNote: self._handle_text_entry,
            CreatingCategory: self._handle_text_entry,
            ConfirmingDelete: self._handle_confirm_delete,
        }

    # ── Lifecycle ─────────────────────────────────────────────

    def start(self) -> None:
        """Check the notes root and load the first listing. Storage errors propagate."""
        self.store.ensure_root()
        self.refresh()
        log.info(
            "Session started: root=%s categories=%d", self.store.root, len(self.nav.categories)
        )

    def refresh(self) -> None:
        categories, notes = self.store.list_all()
        self.nav.load(categories, notes)

    @property
    def zen(self) -> bool:
        return isinstance(self.mode, ZenActive)

    def handle_key(self, key: str, character: str | None = None) -> None:
        if self.editor.in_progress or self.should_quit:
            return
        self.message = None
        self._handlers[type(self.mode)](key, character)

    def selected_stats(self) -> NoteStats | None:
        note = self.nav.selected_note
        if note is None:
            return None
        try:
            return self.cache.stats(note.path)
        except StorageError as e:
            log.warning("Cannot read %s: %s", note.path, e)
            return None

    def selected_content(self) -> str | None:
        note = self.nav.selected_note
        if note is None:
            return None
        return self.cache.content(note.path)

    # ── Normal / Zen ──────────────────────────────────────────

    def _handle_browse(self, key: str, character: str | None) -> None:
        nav = self.nav
        cmd = _command(key, character)
        if cmd == "tab":
            nav.switch_focus()
        elif cmd in ("j", "down"):
            nav.move_down()
        elif cmd in ("k", "up"):
            nav.move_up()
        elif cmd in ("enter", "e"):
            self.edit_selected()
        elif cmd == "/":
            self._filter_prior = nav.selection()
            nav.filter.start(nav.focus)
            self.mode = Filtering()
        elif cmd == "n":
            if nav.selected_category is not None:
                self.mode = CreatingNote()
        elif cmd == "c":
            self.mode = CreatingCategory()
        elif cmd == "d":
            target = self._delete_target()
            if target is not None:
                self.mode = ConfirmingDelete(target)
        elif cmd == "z":
            self.base = Normal() if self.zen else ZenActive()
            self.mode = self.base
        elif cmd == "q":
            self.should_quit = True
            log.info("Quit requested")

    def _delete_target(self) -> DeleteTarget | None:
        category = self.nav.selected_category
        if category is None:
            return None
        if self.nav.focus is Focus.CATEGORIES:
            return DeleteTarget(category=category.name)
        note = self.nav.selected_note
        if note is None:
            return None
        return DeleteTarget(category=category.name, note=note)

    # ── Editor handoff ────────────────────────────────────────

    def edit_selected(self) -> None:
        note = self.nav.selected_note
        if note is None:
            return
        try:
            self.editor.open_in_editor(note.path)
        except KnotError as e:
            self._report(e)
        self._after_editor(note)

    def _after_editor(self, note: Note) -> None:
        """The file may have changed, moved or vanished while the editor had it."""
        self.cache.invalidate(note.path)
        try:
            self.refresh()
            if self.nav.selected_note == note:
                self.cache.recompute(note.path)
        except StorageError as e:
            self._report(e)
        self.repaint_requested = True

    # ── Filtering ─────────────────────────────────────────────

    def _handle_filtering(self, key: str, character: str | None) -> None:
        flt = self.nav.filter
        if key == "enter":
            self._commit_filter()
        elif key == "escape":
            flt.clear()
            self.nav.restore(self._filter_prior or (None, None))
            self._leave_filter()
        elif key == "backspace":
            flt.query = flt.query[:-1]
            self.nav.refilter()
        else:
            ch = _printable(key, character)
            if ch is not None:
                flt.query += ch
                self.nav.refilter()

    def _commit_filter(self) -> None:
        nav = self.nav
        pane = nav.filter.pane
        matches = nav.visible(pane)
        first = matches[0] if matches else None
        nav.filter.clear()
        if first is None:
            nav.restore(self._filter_prior or (None, None))
        elif pane is Focus.CATEGORIES:
            nav.select_category_named(first.name)
        else:
            nav.select_note_path(first.path)
        self._leave_filter()

    def _leave_filter(self) -> None:
        self._filter_prior = None
        self.mode = self.base

    # ── Creating ──────────────────────────────────────────────

    def _handle_text_entry(self, key: str, character: str | None) -> None:
        mode = self.mode
        if key == "escape":
            self.mode = self.base
        elif key == "enter":
            if isinstance(mode, CreatingNote):
                self._create_note(mode.buffer)
            else:
                self._create_category(mode.buffer)
        elif key == "backspace":
            self.mode = replace(mode, buffer=mode.buffer[:-1])
        else:
            ch = _printable(key, character)
            if ch is not None:
                self.mode = replace(mode, buffer=mode.buffer + ch)

    def _create_note(self, name: str) -> None:
        category = self.nav.selected_category
        if category is None:
            self.mode = self.base
            return
        try:
            note = self.store.create_note(category.name, name)
        except (InvalidName, NameConflict) as e:
            self._report(e)
            return
        except StorageError as e:
            self._report(e)
            self.mode = self.base
            return
        self.mode = self.base
        self.message = f"Created {note.filename}"
        self._refresh_and_select(lambda: self.nav.select_note_path(note.path))

    def _create_category(self, name: str) -> None:
        try:
            category = self.store.create_category(name)
        except (InvalidName, NameConflict) as e:
            self._report(e)
            return
        except StorageError as e:
            self._report(e)
            self.mode = self.base
            return
        self.mode = self.base
        self.message = f"Created category {category.name}"
        self._refresh_and_select(lambda: self.nav.select_category_named(category.name))

    # ── Deleting ──────────────────────────────────────────────

    def _handle_confirm_delete(self, key: str, character: str | None) -> None:
        mode = self.mode
        if not isinstance(mode, ConfirmingDelete):
            return
        target = mode.target
        self.mode = self.base
        if _command(key, character) in ("y", "enter"):
            self._delete(target)
        else:
            self.message = "Delete cancelled"

    def _delete(self, target: DeleteTarget) -> None:
        nav = self.nav
        pane = target.pane
        if target.note is None:
            names = [c.name for c in nav.categories]
            old_index = names.index(target.category) if target.category in names else 0
        else:
            paths = [n.path for n in nav.notes()]
            old_index = paths.index(target.note.path) if target.note.path in paths else 0

        try:
            if target.note is None:
                self.store.delete_category(target.category)
                self.cache.invalidate()
            else:
                self.store.delete_note(target.note)
                self.cache.invalidate(target.note.path)
        except StorageError as e:
            self._report(e)
            return

        self.message = f"Deleted {target.label}"
        self._refresh_and_select(lambda: nav.place(pane, old_index))

    # ── Helpers ───────────────────────────────────────────────

    def _refresh_and_select(self, select: Callable[[], object]) -> None:
        try:
            self.refresh()
        except StorageError as e:
            self._report(e)
            return
        select()

    def _report(self, error: KnotError) -> None:
        log.warning("%s: %s", type(error).__name__, error)
        self.message = str(error)
