"""Cursor and focus state over the category and note lists.

Pure in-memory state: listings are handed in by the controller through
:meth:`NavigationModel.load`, this module never touches storage.

Selection is tracked by identity (category name, note path) and exposed as
an index into the *visible* list, which is the authoritative list narrowed
by the active filter. After every mutation the selection is normalised so
that it is either inside the visible list or ``None`` when that list is
empty.
"""

from __future__ import annotations

from pathlib import Path

from knot.fuzzy import fuzzy_filter
from knot.models import Category, FilterState, Focus, Note

Selection = tuple[str | None, Path | None]


def _clamp(index: int, length: int) -> int:
    return max(0, min(index, length - 1))


class NavigationModel:
    def __init__(self) -> None:
        self.focus: Focus = Focus.CATEGORIES
        self.filter = FilterState()
        self._categories: list[Category] = []
        self._notes: dict[str, list[Note]] = {}
        self._category: str | None = None
        self._note: Path | None = None

    # ── Listings ──────────────────────────────────────────────

    def load(self, categories: list[Category], notes_by_category: dict[str, list[Note]]) -> None:
        """Replace the listings, keeping the current selection where it still exists."""
        self._categories = list(categories)
        self._notes = {name: list(notes) for name, notes in notes_by_category.items()}
        self._normalize()

    @property
    def categories(self) -> list[Category]:
        return list(self._categories)

    def notes(self) -> list[Note]:
        """All notes of the selected category, unfiltered."""
        if self._category is None:
            return []
        return list(self._notes.get(self._category, []))

    def visible_categories(self) -> list[Category]:
        if self.filter.applies_to(Focus.CATEGORIES):
            return fuzzy_filter(self.filter.query, self._categories, key=lambda c: c.label)
        return list(self._categories)

    def visible_notes(self) -> list[Note]:
        notes = self.notes()
        if self.filter.applies_to(Focus.NOTES):
            return fuzzy_filter(self.filter.query, notes, key=lambda n: n.label)
        return notes

    def visible(self, pane: Focus) -> list[Category] | list[Note]:
        return self.visible_categories() if pane is Focus.CATEGORIES else self.visible_notes()

    # ── Selection ─────────────────────────────────────────────

    @property
    def selected_category(self) -> Category | None:
        for category in self._categories:
            if category.name == self._category:
                return category
        return None

    @property
    def selected_note(self) -> Note | None:
        for note in self.notes():
            if note.path == self._note:
                return note
        return None

    @property
    def category_index(self) -> int | None:
        for i, category in enumerate(self.visible_categories()):
            if category.name == self._category:
                return i
        return None

    @property
    def note_index(self) -> int | None:
        for i, note in enumerate(self.visible_notes()):
            if note.path == self._note:
                return i
        return None

    def index(self, pane: Focus) -> int | None:
        return self.category_index if pane is Focus.CATEGORIES else self.note_index

    def selection(self) -> Selection:
        return (self._category, self._note)

    def restore(self, selection: Selection) -> None:
        """Return to a saved selection; parts that no longer exist are reset."""
        category, note = selection
        if category is not None and any(c.name == category for c in self.visible_categories()):
            self._category = category
            self._note = note
        else:
            categories = self.visible_categories()
            self._set_category(categories[0].name if categories else None)
        self._normalize()

    def select_category(self, i: int) -> None:
        visible = self.visible_categories()
        if not visible:
            return
        self._set_category(visible[_clamp(i, len(visible))].name)

    def select_note(self, i: int) -> None:
        visible = self.visible_notes()
        if not visible:
            return
        self._note = visible[_clamp(i, len(visible))].path

    def select_category_named(self, name: str) -> bool:
        for i, category in enumerate(self.visible_categories()):
            if category.name == name:
                self.select_category(i)
                return True
        return False

    def select_note_path(self, path: Path) -> bool:
        for i, note in enumerate(self.visible_notes()):
            if note.path == path:
                self.select_note(i)
                return True
        return False

    def place(self, pane: Focus, index: int) -> None:
        """Put the cursor of *pane* at *index*, clamped; ``None`` if the list is empty."""
        if pane is Focus.CATEGORIES:
            if self.visible_categories():
                self.select_category(index)
            else:
                self._set_category(None)
        else:
            if self.visible_notes():
                self.select_note(index)
            else:
                self._note = None

    # ── Movement ──────────────────────────────────────────────

    def move_down(self) -> None:
        self._move(1)

    def move_up(self) -> None:
        self._move(-1)

    def _move(self, step: int) -> None:
        pane = self.focus
        if not self.visible(pane):
            return
        current = self.index(pane)
        target = 0 if current is None else current + step
        if pane is Focus.CATEGORIES:
            self.select_category(target)
        else:
            self.select_note(target)

    def switch_focus(self) -> None:
        self.focus = self.focus.toggled()

    # ── Internals ─────────────────────────────────────────────

    def _set_category(self, name: str | None) -> None:
        if name == self._category:
            return
        self._category = name
        notes = self.visible_notes()
        self._note = notes[0].path if notes else None

    def _normalize(self) -> None:
        categories = self.visible_categories()
        if not any(c.name == self._category for c in categories):
            self._set_category(categories[0].name if categories else None)
        notes = self.visible_notes()
        if not any(n.path == self._note for n in notes):
            self._note = notes[0].path if notes else None

    def refilter(self) -> None:
        """Re-apply the filter after its query changed."""
        self._normalize()
