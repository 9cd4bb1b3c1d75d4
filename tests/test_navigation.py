"""Tests for knot/navigation.py: cursors, focus and filtered views."""

from pathlib import Path

import pytest

from knot.models import Category, Focus, Note
from knot.navigation import NavigationModel

ROOT = Path("/notes")


def _listing(layout: dict[str, list[str]]):
    categories = [Category(name=n, path=ROOT / n, color="cyan") for n in layout]
    notes = {n: [Note(path=ROOT / n / f, category=n) for f in files] for n, files in layout.items()}
    return categories, notes


@pytest.fixture
def nav() -> NavigationModel:
    model = NavigationModel()
    model.load(*_listing({"Work": ["a.md", "b.md", "c.md"], "Personal": [], "Wombat": ["w.md"]}))
    return model


def test_initial_selection(nav):
    assert nav.focus is Focus.CATEGORIES
    assert nav.category_index == 0
    assert nav.selected_category.name == "Work"
    assert nav.selected_note.filename == "a.md"


def test_empty_listing_has_no_selection():
    model = NavigationModel()
    model.load([], {})
    assert model.category_index is None
    assert model.note_index is None
    model.move_down()
    model.move_up()
    model.select_category(3)
    assert model.selected_category is None


def test_move_clamps_at_bounds(nav):
    nav.move_up()
    assert nav.category_index == 0
    nav.move_down()
    nav.move_down()
    nav.move_down()
    assert nav.category_index == 2
    assert nav.selected_category.name == "Wombat"


def test_category_change_resets_note_selection(nav):
    nav.switch_focus()
    nav.move_down()
    assert nav.selected_note.filename == "b.md"
    nav.switch_focus()
    nav.move_down()
    assert nav.selected_category.name == "Personal"
    assert nav.selected_note is None
    nav.move_down()
    assert nav.selected_note.filename == "w.md"


def test_switch_focus_keeps_selection(nav):
    nav.select_category(2)
    before = nav.selection()
    nav.switch_focus()
    assert nav.focus is Focus.NOTES
    assert nav.selection() == before
    nav.switch_focus()
    assert nav.focus is Focus.CATEGORIES
    assert nav.selection() == before


def test_focus_into_empty_notes_has_no_selection(nav):
    nav.select_category(1)
    nav.switch_focus()
    assert nav.note_index is None
    nav.move_down()
    assert nav.note_index is None


def test_select_note_clamps(nav):
    nav.select_note(99)
    assert nav.selected_note.filename == "c.md"
    nav.select_note(-5)
    assert nav.selected_note.filename == "a.md"


def test_category_filter_is_a_view(nav):
    nav.filter.start(Focus.CATEGORIES)
    nav.filter.query = "wo"
    nav.refilter()
    assert [c.name for c in nav.visible_categories()] == ["Work", "Wombat"]
    assert [c.name for c in nav.categories] == ["Work", "Personal", "Wombat"]
    nav.filter.clear()
    assert [c.name for c in nav.visible_categories()] == ["Work", "Personal", "Wombat"]


def test_filter_hiding_selection_moves_to_first_match(nav):
    nav.select_category(1)
    nav.filter.start(Focus.CATEGORIES)
    nav.filter.query = "wb"
    nav.refilter()
    assert nav.selected_category.name == "Wombat"
    assert nav.category_index == 0


def test_filter_without_matches_clears_selection(nav):
    nav.filter.start(Focus.CATEGORIES)
    nav.filter.query = "zzz"
    nav.refilter()
    assert nav.category_index is None
    assert nav.selected_note is None


def test_note_filter_only_touches_notes(nav):
    nav.switch_focus()
    nav.filter.start(Focus.NOTES)
    nav.filter.query = "c"
    nav.refilter()
    assert [n.filename for n in nav.visible_notes()] == ["c.md"]
    assert len(nav.visible_categories()) == 3
    assert nav.selected_note.filename == "c.md"


def test_restore_prior_selection(nav):
    nav.select_category(2)
    saved = nav.selection()
    nav.select_category(0)
    nav.restore(saved)
    assert nav.selected_category.name == "Wombat"


def test_restore_invalid_selection_resets(nav):
    nav.select_category(2)
    nav.restore(("Gone", None))
    assert nav.category_index == 0


def test_reload_keeps_selection_by_identity(nav):
    nav.select_category(2)
    nav.load(*_listing({"Aardvark": [], "Work": ["a.md"], "Wombat": ["w.md", "x.md"]}))
    assert nav.selected_category.name == "Wombat"
    assert nav.category_index == 2


def test_place_clamps_and_handles_empty(nav):
    nav.place(Focus.CATEGORIES, 10)
    assert nav.category_index == 2
    nav.load(*_listing({}))
    nav.place(Focus.CATEGORIES, 0)
    assert nav.category_index is None
    nav.place(Focus.NOTES, 0)
    assert nav.note_index is None
