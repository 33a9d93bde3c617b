"""Tests for per-item single/double click disambiguation."""

from conftest import entry

from core.services.click_service import ClickDisambiguator, GridAction, resolve_grid_action


class TestClickDisambiguator:
    def setup_method(self):
        self.resolved = []

    def _make(self, scheduler, delay_ms=200):
        return ClickDisambiguator(
            scheduler, lambda item, count: self.resolved.append((item, count)), delay_ms
        )

    def test_single_click_resolves_after_delay(self, scheduler):
        clicks = self._make(scheduler)
        clicks.click("a", "A")
        scheduler.advance(199)
        assert self.resolved == []
        scheduler.advance(1)
        assert self.resolved == [("A", 1)]

    def test_double_click_reports_once(self, scheduler):
        clicks = self._make(scheduler)
        clicks.click("a", "A")
        scheduler.advance(100)
        clicks.click("a", "A")
        scheduler.advance(500)
        assert self.resolved == [("A", 2)]

    def test_second_press_restarts_timer(self, scheduler):
        clicks = self._make(scheduler)
        clicks.click("a", "A")
        scheduler.advance(150)
        clicks.click("a", "A")
        scheduler.advance(199)
        assert self.resolved == []
        assert clicks.pending_count("a") == 2
        scheduler.advance(1)
        assert self.resolved == [("A", 2)]

    def test_items_are_independent(self, scheduler):
        clicks = self._make(scheduler)
        clicks.click("a", "A")
        clicks.click("b", "B")
        scheduler.advance(200)
        assert sorted(self.resolved) == [("A", 1), ("B", 1)]

    def test_slow_clicks_are_two_singles(self, scheduler):
        clicks = self._make(scheduler)
        clicks.click("a", "A")
        scheduler.advance(300)
        clicks.click("a", "A")
        scheduler.advance(300)
        assert self.resolved == [("A", 1), ("A", 1)]

    def test_cancel_all_drops_pending(self, scheduler):
        clicks = self._make(scheduler)
        clicks.click("a", "A")
        clicks.cancel_all()
        scheduler.advance(1000)
        assert self.resolved == []
        assert clicks.pending_count("a") == 0

    def test_custom_delay(self, scheduler):
        clicks = self._make(scheduler, delay_ms=50)
        clicks.click("a", "A")
        scheduler.advance(50)
        assert clicks.delay_ms == 50
        assert self.resolved == [("A", 1)]


class TestResolveGridAction:
    def test_single_click_on_image_expands(self):
        assert resolve_grid_action(entry("/p/a.png"), 1) is GridAction.EXPAND

    def test_single_click_on_other_file_does_nothing(self):
        assert resolve_grid_action(entry("/p/a.txt"), 1) is GridAction.NONE

    def test_double_click_opens_window(self):
        assert resolve_grid_action(entry("/p/a.png"), 2) is GridAction.OPEN_WINDOW

    def test_directory_always_enters(self):
        folder = entry("/p/sub", is_dir=True)
        assert resolve_grid_action(folder, 1) is GridAction.ENTER_DIRECTORY
        assert resolve_grid_action(folder, 3) is GridAction.ENTER_DIRECTORY

    def test_zero_clicks(self):
        assert resolve_grid_action(entry("/p/a.png"), 0) is GridAction.NONE
