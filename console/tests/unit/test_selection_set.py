"""Unit tests for the SelectionSet."""

from mec_admin.application.services import SelectionSet


def test_toggle_adds_then_removes():
    selection = SelectionSet()
    assert selection.toggle("a") is True
    assert "a" in selection
    assert selection.toggle("a") is False
    assert "a" not in selection
    assert len(selection) == 0


def test_select_all_and_clear():
    selection = SelectionSet()
    selection.select_all(["a", "b", "c"])
    assert selection.ids == ["a", "b", "c"]

    selection.select_all(None)
    assert not selection

    selection.select_all(["x"])
    selection.clear()
    assert selection.ids == []


def test_is_all_selected_requires_exact_match():
    selection = SelectionSet()
    selection.select_all(["a", "b"])
    assert selection.is_all_selected(["a", "b"]) is True
    assert selection.is_all_selected(["a", "b", "c"]) is False
    assert selection.is_all_selected(["a", "c"]) is False


def test_is_all_selected_is_false_for_empty_candidates():
    """An empty list never checks the "select all" box, even with an empty set."""
    assert SelectionSet().is_all_selected([]) is False


def test_retain_drops_ids_that_are_no_longer_listed():
    selection = SelectionSet()
    selection.select_all(["a", "b", "c"])
    selection.retain(["c", "a", "z"])
    assert selection.ids == ["a", "c"]
