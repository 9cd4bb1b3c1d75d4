"""What to draw, as plain data.

``project`` reads the controller and returns a :class:`Frame`; the Textual
front-end only paints it. Nothing here mutates state, apart from the note
cache filling lazily when the preview asks for content.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from knot.controller import ModeController
from knot.errors import StorageError
from knot.models import (
    ConfirmingDelete,
    CreatingCategory,
    CreatingNote,
    Filtering,
    Focus,
    ZenActive,
)

CURSOR = "█"

NORMAL_HINTS = (
    "[Tab] Focus  [j/k] Move  [Enter/e] Edit  [/] Filter  "
    "[n] New note  [c] New category  [d] Delete  [z] Zen  [q] Quit"
)
ZEN_HINTS = "[z] Leave zen  [j/k] Move  [Enter/e] Edit  [q] Quit"


@dataclass(frozen=True)
class Row:
    label: str
    selected: bool = False
    color: str | None = None


@dataclass(frozen=True)
class Pane:
    title: str
    rows: list[Row] = field(default_factory=list)
    focused: bool = False
    placeholder: str = ""


@dataclass(frozen=True)
class Frame:
    header: str
    categories: Pane
    notes: Pane
    preview_title: str
    preview: str
    footer: str
    message: str | None = None
    show_sidebars: bool = True


def _pane_title(base: str, ctrl: ModeController, pane: Focus) -> str:
    flt = ctrl.nav.filter
    if flt.applies_to(pane):
        return f"{base} /{flt.query}"
    return base


def _category_pane(ctrl: ModeController) -> Pane:
    nav = ctrl.nav
    index = nav.category_index
    rows = [
        Row(label=c.name, selected=i == index, color=c.color)
        for i, c in enumerate(nav.visible_categories())
    ]
    placeholder = "(no match)" if nav.filter.applies_to(Focus.CATEGORIES) else "(press c to add one)"
    return Pane(
        title=_pane_title("Categories", ctrl, Focus.CATEGORIES),
        rows=rows,
        focused=nav.focus is Focus.CATEGORIES,
        placeholder=placeholder,
    )


def _notes_pane(ctrl: ModeController) -> Pane:
    nav = ctrl.nav
    index = nav.note_index
    category = nav.selected_category
    color = category.color if category is not None else None
    rows = [
        Row(label=n.filename, selected=i == index, color=color)
        for i, n in enumerate(nav.visible_notes())
    ]
    if nav.filter.applies_to(Focus.NOTES):
        placeholder = "(no match)"
    elif category is None:
        placeholder = "(no category)"
    else:
        placeholder = "(press n to add one)"
    return Pane(
        title=_pane_title("Notes", ctrl, Focus.NOTES),
        rows=rows,
        focused=nav.focus is Focus.NOTES,
        placeholder=placeholder,
    )


def _header(ctrl: ModeController) -> str:
    nav = ctrl.nav
    parts = ["KNOT"]
    category = nav.selected_category
    note = nav.selected_note
    if category is not None:
        parts.append(category.name if note is None else f"{category.name} / {note.title}")
    stats = ctrl.selected_stats()
    if stats is not None:
        parts.append(f"{stats.word_count} words · {stats.reading_minutes} min read")
    if isinstance(ctrl.mode, ZenActive):
        parts.append("ZEN")
    return "  |  ".join(parts)


def _preview(ctrl: ModeController) -> tuple[str, str]:
    note = ctrl.nav.selected_note
    if note is None:
        return "Preview", "---"
    try:
        content = ctrl.selected_content() or ""
    except StorageError as e:
        content = f"Error reading file: {e}"
    return note.filename, content


def _footer(ctrl: ModeController) -> str:
    mode = ctrl.mode
    if isinstance(mode, Filtering):
        pane = ctrl.nav.filter.pane.value
        return f" Filter {pane}: {ctrl.nav.filter.query}{CURSOR}   [Enter] Apply  [Esc] Cancel"
    if isinstance(mode, CreatingNote):
        category = ctrl.nav.selected_category
        where = category.name if category is not None else "?"
        return f" New note in {where}: {mode.buffer}{CURSOR}   [Enter] Save  [Esc] Cancel"
    if isinstance(mode, CreatingCategory):
        return f" New category: {mode.buffer}{CURSOR}   [Enter] Save  [Esc] Cancel"
    if isinstance(mode, ConfirmingDelete):
        return f" !!! Delete {mode.target.label} permanently? [y/Enter] Yes  [any other key] No"
    if isinstance(mode, ZenActive):
        return f" {ZEN_HINTS}"
    return f" {NORMAL_HINTS}"


def project(ctrl: ModeController) -> Frame:
    preview_title, preview = _preview(ctrl)
    return Frame(
        header=_header(ctrl),
        categories=_category_pane(ctrl),
        notes=_notes_pane(ctrl),
        preview_title=preview_title,
        preview=preview,
        footer=_footer(ctrl),
        message=ctrl.message,
        show_sidebars=not ctrl.zen,
    )
