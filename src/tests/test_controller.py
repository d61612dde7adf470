from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from radar_tui.controller import ReaderController
from radar_tui.gateway import FetchError
from radar_tui.state import FetchStatus

from conftest import make_dataset


@pytest.fixture
def gateway():
    gw = MagicMock()
    gw.fetch.return_value = make_dataset(120)
    return gw


@pytest.fixture
def controller(store, gateway):
    return ReaderController(store, gateway=gateway, page_size=50, max_visible_pages=10)


def test_refresh_loads_dataset(controller, gateway):
    controller.fetch_top = 500
    assert controller.refresh()
    gateway.fetch.assert_called_once_with(500)
    assert controller.state.status is FetchStatus.LOADED
    assert controller.view().total_count == 120


def test_refresh_failure_clears_previous_dataset(controller, gateway):
    controller.refresh()
    gateway.fetch.side_effect = FetchError("rate limited")

    controller.refresh()

    assert controller.state.dataset is None
    assert controller.state.error == "rate limited"
    assert controller.view().items == []


def test_refresh_without_gateway_fails_cleanly(store):
    controller = ReaderController(store)
    controller.refresh()
    assert controller.state.status is FetchStatus.FAILED


def test_next_and_previous_stop_at_bounds(controller):
    controller.refresh()
    controller.previous_page()
    assert controller.view().current_page == 1

    for _ in range(5):
        controller.next_page()
    assert controller.view().current_page == 3

    controller.previous_page()
    assert controller.view().current_page == 2


def test_filter_change_resets_page_but_toggle_does_not(controller):
    controller.refresh()
    controller.go_to_page(2)

    controller.toggle_star("60")
    assert controller.state.page == 2
    assert controller.store.is_starred("60")

    controller.set_query("story")
    assert controller.state.page == 1


def test_star_only_flow(controller):
    controller.refresh()
    controller.toggle_star("3")
    controller.toggle_star("99")
    controller.set_star_only(True)

    view = controller.view()
    assert [it.id for it in view.items] == ["3", "99"]

    controller.toggle_star("3")
    assert [it.id for it in controller.view().items] == ["99"]


def test_open_item_marks_read_and_hides_it(controller):
    controller.refresh()
    controller.set_hide_read(True)
    controller.open_item("0")
    assert controller.store.is_read("0")
    assert controller.view().filtered_count == 119


def test_clear_query(controller):
    controller.refresh()
    controller.set_query("zzz")
    assert controller.view().filtered_count == 0
    controller.clear_query()
    assert controller.view().filtered_count == 120


def test_page_size_must_be_positive(store):
    with pytest.raises(ValueError):
        ReaderController(store, page_size=0)


def test_stored_page_is_clamped_after_page_request(controller):
    controller.refresh()
    controller.go_to_page(99)
    assert controller.state.page == 3
    assert controller.state.page <= controller.view().total_pages


def test_stored_page_is_clamped_when_toggle_shrinks_results(controller):
    controller.refresh()
    controller.set_hide_read(True)
    controller.go_to_page(3)
    assert controller.state.page == 3

    for i in range(100, 120):
        controller.toggle_read(str(i))

    assert controller.view().total_pages == 2
    assert controller.state.page == 2


def test_failed_fetch_keeps_selection_but_drops_options(controller, gateway):
    controller.refresh()
    controller.set_source("Reuters")
    gateway.fetch.side_effect = FetchError("boom")

    controller.refresh()

    assert controller.state.sources == ()
    assert controller.state.topics == ()
    assert controller.state.criteria.source == "Reuters"
