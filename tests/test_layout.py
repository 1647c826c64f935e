"""
Tests for the layout editor: seeding, pointer gestures and copy-to-all.
"""

import pytest

from award_slides.defaults import DEFAULT_LAYOUT
from award_slides.editor import EditorSession
from award_slides.layout import (
    MIN_ELEMENT_SIZE,
    Guide,
    LayoutEditor,
    PointerMode,
    alignment_guides,
    moved_rect,
    resized_rect,
)
from award_slides.models import LayoutRect


@pytest.fixture
def session(sample_awardees):
    return EditorSession(sample_awardees)


@pytest.fixture
def editor(session):
    editor = LayoutEditor(session)
    editor.enter_edit_mode()
    return editor


def rect(x, y, width, height):
    return LayoutRect(x=x, y=y, width=width, height=height)


class TestGeometry:
    """Pure move/resize/guide math."""

    def test_move(self):
        assert moved_rect(rect(10, 10, 100, 50), 5, -5) == rect(15, 5, 100, 50)

    def test_resize_east_and_south(self):
        assert resized_rect(rect(0, 0, 100, 100), "se", 20, 30) == rect(0, 0, 120, 130)

    def test_resize_west_moves_anchor(self):
        assert resized_rect(rect(100, 100, 200, 100), "w", 50, 0) == rect(150, 100, 150, 100)

    def test_resize_north_moves_anchor(self):
        assert resized_rect(rect(100, 100, 200, 100), "n", 0, -40) == rect(100, 60, 200, 140)

    def test_resize_respects_minimum(self):
        result = resized_rect(rect(100, 100, 50, 50), "nw", 500, 500)
        assert result.width == MIN_ELEMENT_SIZE
        assert result.height == MIN_ELEMENT_SIZE
        assert result.x + result.width == 150
        assert result.y + result.height == 150

    def test_guides_for_shared_edge(self):
        guides = alignment_guides(rect(103, 500, 50, 20), [rect(100, 0, 10, 10)])
        assert Guide(x=100) in guides

    def test_guides_for_canvas_centre(self):
        guides = alignment_guides(rect(935, 0, 50, 20), [])
        assert guides == [Guide(x=960)]

    def test_no_guides_when_far_apart(self):
        assert alignment_guides(rect(0, 0, 10, 10), [rect(500, 500, 10, 10)]) == []


class TestSeeding:
    """Default rectangles on first entry."""

    def test_entering_edit_mode_seeds_active_slide(self, editor, session):
        layout = session.awardees[0].layout
        assert layout.photo == LayoutRect(**DEFAULT_LAYOUT["photo"])
        assert session.awardees[1].layout is None

    def test_activate_seeds_new_slide(self, editor, session):
        editor.activate(2)
        assert session.active_tab == 2
        assert session.awardees[2].layout is not None

    def test_reentering_keeps_user_changes(self, editor, session):
        editor.update_element("name", rect(1, 2, 300, 40))
        editor.exit_edit_mode()
        editor.enter_edit_mode()
        assert session.awardees[0].layout.name == rect(1, 2, 300, 40)

    def test_existing_layout_is_not_overwritten(self, session):
        session.edit(0, layout={"photo": {"x": 1, "y": 1, "width": 30, "height": 30}})
        LayoutEditor(session).enter_edit_mode()
        assert session.awardees[0].layout.name is None
        assert session.awardees[0].layout.photo == rect(1, 1, 30, 30)

    def test_effective_rects_fill_in_defaults(self, session):
        session.edit(0, layout={"photo": {"x": 1, "y": 1, "width": 30, "height": 30}})
        rects = LayoutEditor(session).rects(0)
        assert rects["photo"] == rect(1, 1, 30, 30)
        assert rects["name"] == LayoutRect(**DEFAULT_LAYOUT["name"])


class TestPointer:
    """Press, drag and release."""

    def test_move_gesture_commits_on_release(self, editor, session):
        assert editor.press("photo", 150, 250) is True
        assert editor.selected == "photo"
        assert editor.pointer.mode is PointerMode.MOVING
        preview = editor.move(170, 240)
        assert preview == rect(120, 190, 400, 400)
        # nothing stored until release
        assert session.awardees[0].layout.photo == rect(100, 200, 400, 400)
        editor.release()
        assert session.awardees[0].layout.photo == rect(120, 190, 400, 400)
        assert editor.pointer.mode is PointerMode.IDLE

    def test_resize_gesture(self, editor, session):
        editor.press("title", 0, 0, handle="e")
        editor.move(100, 0)
        editor.release()
        assert session.awardees[0].layout.title.width == 900

    def test_unknown_handle(self, editor):
        with pytest.raises(ValueError):
            editor.press("title", 0, 0, handle="up")

    def test_press_outside_edit_mode(self, session):
        assert LayoutEditor(session).press("photo", 0, 0) is False

    def test_click_without_drag_changes_nothing(self, editor, session):
        seen = []
        session.subscribe(seen.append)
        editor.press("name", 10, 10)
        editor.release()
        assert seen == []

    def test_background_press_clears_selection(self, editor):
        editor.press("name", 0, 0)
        editor.press_background()
        assert editor.selected is None
        assert editor.pointer.mode is PointerMode.IDLE

    def test_guides_while_dragging(self, editor):
        assert editor.guides() == []
        editor.press("name", 0, 0)
        editor.move(0, 1)
        assert Guide(x=550) in editor.guides()


class TestCopyToAll:
    """Mirroring slide 1's layout across the deck."""

    def test_enabling_copies_first_layout(self, editor, session):
        editor.update_element("photo", rect(5, 5, 100, 100))
        editor.set_copy_to_all(True)
        assert all(a.layout.photo == rect(5, 5, 100, 100) for a in session.awardees)

    def test_edits_on_first_slide_fan_out(self, editor, session):
        editor.set_copy_to_all(True)
        editor.update_element("date", rect(0, 0, 50, 20))
        assert all(a.layout.date == rect(0, 0, 50, 20) for a in session.awardees)

    def test_other_slides_are_locked(self, editor, session):
        editor.set_copy_to_all(True)
        editor.activate(2)
        assert editor.locked is True
        assert editor.update_element("date", rect(0, 0, 50, 20)) is False
        assert editor.press("date", 0, 0) is False

    def test_disabled_edits_only_active_slide(self, editor, session):
        editor.activate(1)
        editor.update_element("date", rect(0, 0, 50, 20))
        assert session.awardees[1].layout.date == rect(0, 0, 50, 20)
        assert session.awardees[0].layout.date == LayoutRect(**DEFAULT_LAYOUT["date"])

    def test_reset_from_locked_slide_is_refused(self, editor, session):
        editor.update_element("photo", rect(1, 1, 100, 100))
        editor.set_copy_to_all(True)
        editor.activate(2)
        assert editor.reset_layout() is False
        assert session.awardees[2].layout.photo == rect(1, 1, 100, 100)

    def test_reset_from_first_slide_clears_every_slide(self, editor, session):
        editor.update_element("photo", rect(1, 1, 100, 100))
        editor.set_copy_to_all(True)
        assert editor.reset_layout() is True
        assert all(a.layout is None for a in session.awardees)

    def test_reset_clears_layout(self, editor, session):
        editor.update_element("photo", rect(5, 5, 100, 100))
        assert editor.reset_layout() is True
        assert session.awardees[0].layout is None
        assert editor.rects()["photo"] == LayoutRect(**DEFAULT_LAYOUT["photo"])
