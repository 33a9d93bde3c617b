"""Tests for the browsing session view-model, driven with fake services."""

import pytest
from conftest import DeferredRunner, FakeDirectoryService, ImmediateRunner, entry

from app.viewmodels.main_vm import (
    ERROR,
    EXPANDED_CHANGED,
    FILES_CHANGED,
    FOLDER_CHANGED,
    SORT_CHANGED,
    ZOOM_CHANGED,
    MainVM,
)
from core.models import ORDER_DESC, SORT_NAME, StartupInfo, WindowGeometry
from core.services.interfaces import INIT_EVENT


def _folders():
    return {
        "/pics": [
            entry("/pics/sub", is_dir=True),
            entry("/pics/b.png"),
            entry("/pics/a.jpg"),
            entry("/pics/notes.txt"),
        ],
        "/pics/sub": [entry("/pics/sub/c.png")],
    }


def _names(vm):
    return [e.name for e in vm.files]


@pytest.fixture
def service():
    return FakeDirectoryService(_folders())


@pytest.fixture
def vm(service, scheduler, host):
    model = MainVM(service, ImmediateRunner(), scheduler, host)
    model.changes = []
    model.subscribe(model.changes.append)
    return model


class TestStartup:
    def test_opens_startup_folder_and_focuses_file(self, service, vm):
        service.startup = StartupInfo("/pics", "/pics/b.png")
        vm.initialize()
        assert vm.current_path == "/pics"
        assert _names(vm) == ["sub", "a.jpg", "b.png", "notes.txt"]
        assert vm.grid.expanded_entry.path == "/pics/b.png"
        assert service.saved == ["/pics"]
        assert vm.changes[:3] == [FOLDER_CHANGED, FILES_CHANGED, EXPANDED_CHANGED]

    def test_missing_startup_falls_back_to_selection(self, service, vm):
        service.chooser_result = "/pics/sub"
        vm.initialize()
        assert vm.current_path == "/pics/sub"
        assert _names(vm) == ["c.png"]

    def test_cancelled_selection_leaves_empty_state(self, vm):
        vm.initialize()
        assert vm.current_path is None
        assert vm.files == []
        assert not vm.select_folder()

    def test_late_startup_result_does_not_override_chosen_folder(self, scheduler, host):
        service = FakeDirectoryService(
            _folders(), startup=StartupInfo("/pics"), chooser_result="/pics/sub"
        )
        runner = DeferredRunner()
        vm = MainVM(service, runner, scheduler, host)
        vm.initialize()
        assert vm.select_folder()
        runner.run_all()
        assert vm.current_path == "/pics/sub"
        assert _names(vm) == ["c.png"]
        assert service.saved == ["/pics/sub"]


class TestDirectoryLoading:
    def test_stale_listing_is_discarded(self, scheduler, host):
        service = FakeDirectoryService(_folders())
        runner = DeferredRunner()
        vm = MainVM(service, runner, scheduler, host)
        vm.set_folder("/pics")
        vm.set_folder("/pics/sub")
        # pending: contents(/pics), save(/pics), contents(/pics/sub), save(/pics/sub)
        runner.run(2)
        runner.run(0)
        assert _names(vm) == ["c.png"]

    def test_failure_keeps_previous_listing(self, vm):
        vm.set_folder("/pics")
        vm.set_folder("/missing")
        assert _names(vm) == ["sub", "a.jpg", "b.png", "notes.txt"]
        assert "/missing" in vm.last_error
        assert vm.changes[-1] == ERROR


class TestSorting:
    def test_sort_key_change_refetches(self, service, vm):
        vm.set_folder("/pics")
        before = len(service.content_requests)
        vm.set_sort_key(SORT_NAME)
        assert len(service.content_requests) == before + 1
        assert SORT_CHANGED in vm.changes
        assert vm.sort_spec.key == SORT_NAME

    def test_same_key_does_not_refetch(self, service, vm):
        vm.set_folder("/pics")
        before = len(service.content_requests)
        vm.set_sort_key(vm.sort_spec.key)
        assert len(service.content_requests) == before

    def test_descending_keeps_directories_first(self, vm):
        vm.set_folder("/pics")
        vm.set_sort_order(ORDER_DESC)
        assert _names(vm) == ["sub", "notes.txt", "b.png", "a.jpg"]

    def test_toggle_order(self, vm):
        vm.toggle_sort_order()
        assert vm.sort_spec.order == ORDER_DESC


class TestGridClicks:
    def test_single_click_expands_image(self, scheduler, vm):
        vm.set_folder("/pics")
        vm.click_item(1)
        assert vm.grid.expanded_entry is None
        scheduler.advance(200)
        assert vm.grid.expanded_entry.name == "a.jpg"

    def test_single_click_on_non_image_does_nothing(self, scheduler, vm):
        vm.set_folder("/pics")
        vm.click_item(3)
        scheduler.advance(200)
        assert vm.grid.expanded_entry is None

    def test_click_on_directory_enters_it(self, scheduler, vm):
        vm.set_folder("/pics")
        vm.click_item(0)
        scheduler.advance(200)
        assert vm.current_path == "/pics/sub"

    def test_double_click_opens_synchronized_window(self, scheduler, host, vm):
        vm.set_folder("/pics")
        vm.click_item(2)
        scheduler.advance(50)
        vm.click_item(2)
        scheduler.advance(200)
        assert vm.grid.expanded_entry is None
        assert len(host.created) == 1
        handle, _, payload = host.emitted[0]
        assert handle == host.created[0][0]
        assert host.emitted[0][1] == INIT_EVENT
        assert payload["initialPath"] == "/pics/b.png"
        assert payload["fullImageList"] == ["/pics/a.jpg", "/pics/b.png"]

    def test_out_of_range_click_ignored(self, scheduler, vm):
        vm.set_folder("/pics")
        vm.click_item(99)
        scheduler.advance(200)
        assert vm.grid.expanded_entry is None

    def test_teardown_drops_pending_clicks(self, scheduler, vm):
        vm.set_folder("/pics")
        vm.click_item(1)
        vm.teardown()
        scheduler.advance(200)
        assert vm.grid.expanded_entry is None


class TestExpandedNavigation:
    def test_navigation_skips_non_images_and_stops(self, scheduler, vm):
        vm.set_folder("/pics")
        vm.click_item(1)
        scheduler.advance(200)
        assert vm.next_image()
        assert vm.grid.expanded_entry.name == "b.png"
        assert not vm.next_image()
        assert vm.prev_image()
        assert not vm.prev_image()
        assert vm.grid.expanded_entry.name == "a.jpg"

    def test_zoom_resets_on_navigation(self, scheduler, vm):
        vm.set_folder("/pics")
        vm.click_item(1)
        scheduler.advance(200)
        assert vm.zoom_in() == pytest.approx(1.1)
        assert vm.changes[-1] == ZOOM_CHANGED
        vm.next_image()
        assert vm.zoom_factor == 1.0

    def test_close_expanded(self, scheduler, vm):
        vm.set_folder("/pics")
        vm.click_item(1)
        scheduler.advance(200)
        vm.close_expanded()
        assert vm.grid.expanded_index is None


class TestOpenInWindow:
    def test_clone_is_offset_from_parent(self, host, vm):
        vm.set_folder("/pics")
        vm.open_in_window("/pics/a.jpg")
        assert host.created[0][1] == WindowGeometry(150, 150, 1024, 768)

    def test_failed_list_still_spawns_without_event(self, service, host, vm):
        service.fail_full_list = True
        vm.set_folder("/pics")
        vm.open_in_window("/pics/a.jpg")
        assert len(host.created) == 1
        assert host.emitted == []

    def test_list_uses_current_sort(self, service, vm):
        vm.set_folder("/pics")
        vm.set_sort_order(ORDER_DESC)
        vm.open_in_window("/pics/a.jpg")
        assert service.list_requests[-1] == ("/pics/a.jpg", vm.sort_spec.key, ORDER_DESC)
