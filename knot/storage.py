"""Filesystem adapter for the notes root.

Layout::

    <root>/
        <category>/
            <note>.md

The adapter lists, creates, reads and deletes; it holds no selection or
mode policy. Every ``OSError`` leaves this module as a ``StorageError``.
"""

from __future__ import annotations

import logging
import os
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from knot.config import Config
from knot.errors import InvalidName, NameConflict, NotFound, PermissionDenied, StorageError
from knot.fileio import write_text_atomic
from knot.models import Category, Note

log = logging.getLogger(__name__)

FORBIDDEN_CHARS = ("/", "\\", "\x00")


def sort_key(name: str) -> tuple[str, str]:
    """Alphabetical, case-insensitive first, so the order is stable across platforms."""
    return (name.casefold(), name)


def validate_name(name: str) -> str:
    """Return the stripped *name*, or raise ``InvalidName``."""
    cleaned = name.strip()
    if not cleaned:
        raise InvalidName(name, "name is empty")
    for ch in FORBIDDEN_CHARS:
        if ch in cleaned:
            raise InvalidName(name, "path separators are not allowed")
    if os.sep in cleaned or (os.altsep and os.altsep in cleaned):
        raise InvalidName(name, "path separators are not allowed")
    if cleaned in (".", ".."):
        raise InvalidName(name, "reserved name")
    if cleaned.startswith("."):
        raise InvalidName(name, "hidden names are not listed")
    return cleaned


@contextmanager
def _translate_os_errors(action: str, path: Path) -> Iterator[None]:
    try:
        yield
    except FileNotFoundError as e:
        raise NotFound(f"Cannot {action} {path}: not found") from e
    except PermissionError as e:
        raise PermissionDenied(f"Cannot {action} {path}: permission denied") from e
    except FileExistsError as e:
        raise NameConflict(path.name) from e
    except OSError as e:
        raise StorageError(f"Cannot {action} {path}: {e.strerror or e}") from e


class NoteStore:
    """Categories and notes under ``config.root``."""

    def __init__(self, config: Config) -> None:
        self.config = config
        self.root = config.root

    # ── Root ──────────────────────────────────────────────────

    def ensure_root(self) -> Path:
        """Create the root if missing and check that it is a readable directory."""
        if self.root.exists() and not self.root.is_dir():
            raise NotFound(f"Notes root {self.root} is not a directory")
        with _translate_os_errors("open notes root", self.root):
            self.root.mkdir(parents=True, exist_ok=True)
        if not os.access(self.root, os.R_OK | os.W_OK | os.X_OK):
            raise PermissionDenied(f"Notes root {self.root} is not accessible")
        return self.root

    # ── Listing ───────────────────────────────────────────────

    def category_path(self, name: str) -> Path:
        return self.root / name

    def list_categories(self) -> list[Category]:
        """Visible sub-directories of the root, coloured by their position in sorted order."""
        with _translate_os_errors("list", self.root):
            names = [
                entry.name
                for entry in os.scandir(self.root)
                if entry.is_dir() and not entry.name.startswith(".")
            ]
        names.sort(key=sort_key)
        return [
            Category(name=name, path=self.root / name, color=self.config.color_for(i))
            for i, name in enumerate(names)
        ]

    def is_note_file(self, path: Path) -> bool:
        return (
            path.is_file()
            and not path.name.startswith(".")
            and path.suffix.lower() == self.config.note_extension.lower()
        )

    def list_notes(self, category: str) -> list[Note]:
        """Note files of one category, sorted by filename."""
        cat_path = self.category_path(category)
        with _translate_os_errors("list", cat_path):
            paths = [Path(entry.path) for entry in os.scandir(cat_path)]
        notes = [Note(path=p, category=category) for p in paths if self.is_note_file(p)]
        notes.sort(key=lambda n: sort_key(n.filename))
        return notes

    def list_all(self) -> tuple[list[Category], dict[str, list[Note]]]:
        """One full snapshot: categories plus the notes of each."""
        categories = self.list_categories()
        notes = {c.name: self.list_notes(c.name) for c in categories}
        return categories, notes

    # ── Create ────────────────────────────────────────────────

    def note_filename(self, name: str) -> str:
        cleaned = validate_name(name)
        if Path(cleaned).suffix.lower() != self.config.note_extension.lower():
            cleaned += self.config.note_extension
        return cleaned

    def create_category(self, name: str) -> Category:
        cleaned = validate_name(name)
        path = self.category_path(cleaned)
        if path.exists():
            raise NameConflict(cleaned)
        with _translate_os_errors("create", path):
            path.mkdir(parents=False, exist_ok=False)
        log.info("Created category %s", path)
        for category in self.list_categories():
            if category.name == cleaned:
                return category
        raise NotFound(f"Category {cleaned!r} vanished after creation")

    def create_note(self, category: str, name: str) -> Note:
        filename = self.note_filename(name)
        cat_path = self.category_path(category)
        if not cat_path.is_dir():
            raise NotFound(f"Category {category!r} does not exist")
        path = cat_path / filename
        if path.exists():
            raise NameConflict(filename)
        content = self.config.note_template.replace("{title}", path.stem)
        with _translate_os_errors("create", path):
            write_text_atomic(path, content)
        log.info("Created note %s", path)
        return Note(path=path, category=category)

    # ── Read / delete ─────────────────────────────────────────

    def read_note(self, path: Path) -> str:
        with _translate_os_errors("read", path):
            return path.read_text(encoding="utf-8", errors="replace")

    def delete_category(self, name: str) -> None:
        path = self.category_path(name)
        if not path.is_dir():
            raise NotFound(f"Category {name!r} does not exist")
        with _translate_os_errors("delete", path):
            shutil.rmtree(path)
        log.info("Deleted category %s", path)

    def delete_note(self, note: Note) -> None:
        with _translate_os_errors("delete", note.path):
            note.path.unlink()
        log.info("Deleted note %s", note.path)
