"""Tests for wrapping navigation, grid navigation and zoom bounds."""

import pytest
from conftest import entry

from core.models import NavigationState
from core.services.navigation import (
    NEXT,
    PREV,
    GridCursor,
    NavigationCursor,
    advance,
    advance_in_grid,
    is_navigable_image,
    set_collection,
)
from core.services.zoom import ZOOM_MAX, ZOOM_MIN, ZoomController

IMAGES = ["/p/img1.jpg", "/p/img2.jpg", "/p/img3.jpg"]


class TestSetCollection:
    def test_focus_path_found(self):
        state = set_collection(IMAGES, "/p/img2.jpg")
        assert state.current_index == 1
        assert state.current_path == "/p/img2.jpg"

    def test_focus_path_missing_falls_back_to_first(self):
        assert set_collection(IMAGES, "/elsewhere.jpg").current_index == 0

    def test_empty_collection_has_no_index(self):
        state = set_collection([], "/p/img1.jpg")
        assert state.current_index is None
        assert state.current_path is None


class TestAdvance:
    def test_next_wraps_to_start(self):
        state = set_collection(IMAGES, "/p/img3.jpg")
        assert advance(state, NEXT).current_index == 0

    def test_prev_wraps_to_end(self):
        state = set_collection(IMAGES, "/p/img1.jpg")
        assert advance(state, PREV).current_index == 2

    def test_full_cycle_returns_to_start(self):
        state = set_collection(IMAGES, "/p/img2.jpg")
        for _ in range(len(IMAGES)):
            state = advance(state, NEXT)
        assert state.current_index == 1

    def test_prev_is_inverse_of_next(self):
        state = set_collection(IMAGES, "/p/img1.jpg")
        assert advance(advance(state, NEXT), PREV) == state

    def test_single_item_stays(self):
        state = set_collection(["/p/only.png"])
        assert advance(state, NEXT).current_index == 0
        assert advance(state, PREV).current_index == 0

    def test_no_focus_is_noop(self):
        state = NavigationState()
        assert advance(state, NEXT) is state


class TestAdvanceInGrid:
    def setup_method(self):
        self.entries = [
            entry("/p/dir", is_dir=True),
            entry("/p/a.png"),
            entry("/p/notes.txt"),
            entry("/p/b.jpg"),
        ]

    def test_skips_non_images(self):
        assert advance_in_grid(self.entries, 1, NEXT) == 3

    def test_stops_at_upper_bound(self):
        assert advance_in_grid(self.entries, 3, NEXT) == 3

    def test_stops_at_lower_bound_skipping_directory(self):
        assert advance_in_grid(self.entries, 1, PREV) == 1

    def test_none_index(self):
        assert advance_in_grid(self.entries, None, NEXT) is None


class TestNavigationCursor:
    def test_advance_resets_zoom(self):
        cursor = NavigationCursor()
        cursor.set_collection(IMAGES, "/p/img1.jpg")
        cursor.zoom.zoom_in()
        assert cursor.next()
        assert cursor.current_path == "/p/img2.jpg"
        assert cursor.zoom.factor == 1.0

    def test_empty_collection_does_not_move(self):
        cursor = NavigationCursor()
        cursor.set_collection([])
        assert not cursor.next()
        assert cursor.current_index is None


class TestGridCursor:
    def setup_method(self):
        self.cursor = GridCursor()
        self.cursor.set_entries(
            [entry("/p/dir", is_dir=True), entry("/p/a.png"), entry("/p/b.jpg")]
        )

    def test_expand_rejects_directories(self):
        assert not self.cursor.expand(0)
        assert self.cursor.expanded_index is None

    def test_navigate_within_bounds(self):
        assert self.cursor.expand_path("/p/a.png")
        assert self.cursor.navigate(NEXT)
        assert self.cursor.expanded_entry.name == "b.jpg"
        assert not self.cursor.navigate(NEXT)
        assert self.cursor.expanded_entry.name == "b.jpg"

    def test_navigate_resets_zoom(self):
        self.cursor.expand(1)
        self.cursor.zoom.zoom_in()
        self.cursor.navigate(NEXT)
        assert self.cursor.zoom.factor == 1.0

    def test_resort_keeps_expanded_path(self):
        self.cursor.expand_path("/p/b.jpg")
        self.cursor.set_entries([entry("/p/b.jpg"), entry("/p/a.png")])
        assert self.cursor.expanded_index == 0

    def test_listing_without_expanded_path_closes(self):
        self.cursor.expand_path("/p/b.jpg")
        self.cursor.set_entries([entry("/p/a.png")])
        assert self.cursor.expanded_entry is None


class TestZoom:
    def test_in_then_out_restores(self):
        zoom = ZoomController()
        zoom.zoom_in()
        assert zoom.zoom_out() == pytest.approx(1.0)

    def test_saturates_at_max(self):
        zoom = ZoomController()
        for _ in range(50):
            zoom.zoom_in()
        assert zoom.factor == ZOOM_MAX

    def test_saturates_at_min(self):
        zoom = ZoomController()
        for _ in range(50):
            zoom.zoom_out()
        assert zoom.factor == ZOOM_MIN

    def test_step_is_ten_percent(self):
        assert ZoomController().zoom_in() == pytest.approx(1.1)

    def test_initial_factor_clamped(self):
        assert ZoomController(10.0).factor == ZOOM_MAX


@pytest.mark.parametrize(
    "name,expected",
    [("a.JPG", True), ("b.webp", True), ("c.heic", False), ("readme", False)],
)
def test_is_navigable_image(name, expected):
    assert is_navigable_image(name) is expected
