from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

from textual.widgets import ListView, Select
from textual.worker import WorkerFailed

from radar_tui.app import RadarApp
from radar_tui.gateway import FetchError
from radar_tui.state import FetchStatus
from radar_tui.themes import ThemePreference
from radar_tui.widgets import ItemRow

from conftest import make_dataset


def make_app(store, tmp_path, gateway):
    return RadarApp(
        settings={"page_size": 10, "max_visible_pages": 3},
        store=store,
        gateway=gateway,
        theme_preference=ThemePreference(str(tmp_path / "theme.json")),
    )


async def _settle(app, pilot):
    try:
        await app.workers.wait_for_complete()
    except WorkerFailed:
        pass
    await pilot.pause()
    await pilot.pause()


def test_app_loads_and_pages(store, tmp_path):
    gateway = MagicMock()
    gateway.fetch.return_value = make_dataset(25)
    app = make_app(store, tmp_path, gateway)

    async def run():
        async with app.run_test() as pilot:
            await _settle(app, pilot)
            assert app.controller.state.status is FetchStatus.LOADED
            assert len(app.query_one("#items-list", ListView).query(ItemRow)) == 10

            app.action_next_page()
            await pilot.pause()
            assert app.controller.view().current_page == 2

            app.action_toggle_theme()
            assert app.theme == "textual-dark"

    asyncio.run(run())


def test_app_shows_fetch_failure(store, tmp_path):
    gateway = MagicMock()
    gateway.fetch.side_effect = FetchError("rate limited")
    app = make_app(store, tmp_path, gateway)

    async def run():
        async with app.run_test() as pilot:
            await _settle(app, pilot)
            assert app.controller.state.status is FetchStatus.FAILED
            assert app.controller.state.error == "rate limited"
            assert app.is_running

    asyncio.run(run())


def test_item_list_has_focus_so_keys_reach_bindings(store, tmp_path):
    gateway = MagicMock()
    gateway.fetch.return_value = make_dataset(25)
    app = make_app(store, tmp_path, gateway)

    async def run():
        async with app.run_test() as pilot:
            await _settle(app, pilot)
            assert isinstance(app.focused, ListView)

            await pilot.press("s")
            await pilot.pause()

            assert app.controller.state.criteria.query == ""
            assert store.is_starred("0")

    asyncio.run(run())


def test_failed_fetch_resets_select_options(store, tmp_path):
    gateway = MagicMock()
    gateway.fetch.return_value = make_dataset(5)
    app = make_app(store, tmp_path, gateway)

    async def run():
        async with app.run_test() as pilot:
            await _settle(app, pilot)
            assert app.controller.state.sources == ("Reuters",)

            gateway.fetch.side_effect = FetchError("boom")
            app.action_refresh()
            await _settle(app, pilot)

            assert app.controller.state.status is FetchStatus.FAILED
            assert app.controller.state.sources == ()
            source_select = app.query_one("#source-select", Select)
            assert source_select.value == ""

    asyncio.run(run())
