"""Typed dataclasses for the KNOT data model.

Categories and notes are immutable snapshots of a directory listing; the
navigation model replaces them wholesale on every refresh. Interaction modes
are small frozen dataclasses so that a mode is a single value and a
transition is an assignment.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Union


# ── Panes ─────────────────────────────────────────────────────


class Focus(Enum):
    CATEGORIES = "categories"
    NOTES = "notes"

    def toggled(self) -> Focus:
        return Focus.NOTES if self is Focus.CATEGORIES else Focus.CATEGORIES


# ── Listing snapshots ─────────────────────────────────────────


@dataclass(frozen=True)
class Category:
    """A directory directly under the notes root."""

    name: str
    path: Path
    color: str

    @property
    def label(self) -> str:
        return self.name


@dataclass(frozen=True)
class Note:
    """A Markdown file inside a category directory."""

    path: Path
    category: str

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def title(self) -> str:
        return self.path.stem

    @property
    def label(self) -> str:
        return self.filename


@dataclass(frozen=True)
class NoteStats:
    word_count: int = 0
    reading_minutes: int = 0


# ── Filter ────────────────────────────────────────────────────


@dataclass
class FilterState:
    """Live query over one pane. Never holds a copy of the list it filters."""

    active: bool = False
    query: str = ""
    pane: Focus = Focus.CATEGORIES

    def start(self, pane: Focus) -> None:
        self.active = True
        self.query = ""
        self.pane = pane

    def clear(self) -> None:
        self.active = False
        self.query = ""

    def applies_to(self, pane: Focus) -> bool:
        return self.active and self.pane is pane


# ── Modes ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class DeleteTarget:
    """What ``d`` captured: a whole category, or one note inside it."""

    category: str
    note: Note | None = None

    @property
    def pane(self) -> Focus:
        return Focus.CATEGORIES if self.note is None else Focus.NOTES

    @property
    def label(self) -> str:
        if self.note is None:
            return f"category {self.category!r}"
        return f"note {self.note.filename!r}"


@dataclass(frozen=True)
class Normal:
    pass


@dataclass(frozen=True)
class ZenActive:
    pass


@dataclass(frozen=True)
class Filtering:
    pass


@dataclass(frozen=True)
class CreatingNote:
    buffer: str = ""


@dataclass(frozen=True)
class CreatingCategory:
    buffer: str = ""


@dataclass(frozen=True)
class ConfirmingDelete:
    target: DeleteTarget


Mode = Union[Normal, ZenActive, Filtering, CreatingNote, CreatingCategory, ConfirmingDelete]
BaseMode = Union[Normal, ZenActive]
