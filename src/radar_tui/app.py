from __future__ import annotations

import logging
import webbrowser
from typing import Any, Dict, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Checkbox, Header, Input, ListView, Select, Static
from textual.worker import Worker, WorkerState

from .annotations import AnnotationStore
from .config import DEFAULT_SETTINGS
from .controller import ReaderController
from .gateway import CandidatesGateway
from .state import FetchStatus
from .themes import ThemePreference, textual_theme
from .widgets import ItemRow, MessageLine, PageButton, PaginationBar, StatusBar

logger = logging.getLogger("radar")

KEYBINDING_HINT = (
    "[b]/[/] search  [b]s[/] star  [b]m[/] read  [b]o[/] open  "
    "[b]\\[ ][/] page  [b]r[/] refresh  [b]t[/] theme"
)


class RadarApp(App):
    TITLE = "Finance Radar"
    SUB_TITLE = "Top candidates, read and starred on this device"

    CSS = """
    #filters { height: auto; }
    #query { width: 2fr; }
    #source-select, #topic-select { width: 1fr; }
    #toggles, #meta { height: auto; }
    #meta Static { width: auto; margin-right: 2; }
    #items-list { height: 1fr; }
    ItemRow { height: auto; padding: 0 1; }
    ItemRow.read .item-title { color: $text-muted; }
    .item-container { height: auto; }
    .item-badges { width: 4; }
    .item-title { width: 1fr; text-style: bold; }
    .item-meta { color: $text-muted; padding-left: 4; }
    #pagination { height: auto; }
    .page-button { min-width: 5; }
    .page-button.active { background: $accent; }
    .page-meta { padding: 1 2; }
    StatusBar { dock: bottom; height: 1; }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("/", "focus_query", "Search"),
        Binding("escape", "clear_query", "Clear search"),
        Binding("s", "toggle_star", "Star"),
        Binding("m", "toggle_read", "Read"),
        Binding("o", "open_item", "Open"),
        Binding("left_square_bracket", "previous_page", "Prev page"),
        Binding("right_square_bracket", "next_page", "Next page"),
        Binding("t", "toggle_theme", "Theme"),
    ]

    def __init__(
        self,
        settings: Optional[Dict[str, Any]] = None,
        store: Optional[AnnotationStore] = None,
        gateway: Optional[CandidatesGateway] = None,
        theme_preference: Optional[ThemePreference] = None,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.settings = dict(DEFAULT_SETTINGS)
        self.settings.update(settings or {})
        gateway = gateway or CandidatesGateway(
            api_base=self.settings["api_base"], timeout=self.settings["http_timeout"]
        )
        self.controller = ReaderController(
            store or AnnotationStore(),
            gateway=gateway,
            page_size=self.settings["page_size"],
            max_visible_pages=self.settings["max_visible_pages"],
            fetch_top=self.settings["fetch_top"],
        )
        self.theme_preference = theme_preference or ThemePreference()

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="main"):
            with Horizontal(id="filters"):
                yield Input(placeholder="Search titles, sources, topics...", id="query")
                yield Select([("All Sources", "")], allow_blank=False, id="source-select")
                yield Select([("All Topics", "")], allow_blank=False, id="topic-select")
            with Horizontal(id="toggles"):
                yield Checkbox("Hide read", id="hide-read")
                yield Checkbox("Starred only", id="star-only")
            with Horizontal(id="meta"):
                yield Static("", id="meta-showing")
                yield Static("", id="meta-source")
                yield Static("", id="meta-topic")
            yield MessageLine("", id="message")
            yield ListView(id="items-list")
            yield PaginationBar(id="pagination")
        yield StatusBar()

    def on_mount(self) -> None:
        self.theme = textual_theme(self.theme_preference.load())
        self.query_one(StatusBar).set_keybindings(KEYBINDING_HINT)
        self.render_view()
        self.action_refresh()
        # Single-key bindings only work while the search input is unfocused.
        self.query_one("#items-list", ListView).focus()

    # --- Rendering ---
    def render_view(self) -> None:
        controller = self.controller
        view = controller.view()
        state = controller.state

        status_bar = self.query_one(StatusBar)
        status_bar.loading_status = (
            "Fetching..." if state.status is FetchStatus.LOADING else ""
        )
        status_bar.summary = view.summary

        self.query_one("#meta-showing", Static).update(view.showing)
        self.query_one("#meta-source", Static).update(view.source_label)
        self.query_one("#meta-topic", Static).update(view.topic_label)
        self.query_one(MessageLine).show_message(
            view.message or "", error=state.status is FetchStatus.FAILED
        )

        items_list = self.query_one("#items-list", ListView)
        index = items_list.index
        items_list.clear()
        store = controller.store
        items_list.extend(
            ItemRow(it, store.is_read(it.id), store.is_starred(it.id)) for it in view.items
        )
        if view.items:
            target = min(index or 0, len(view.items) - 1)
            self.call_after_refresh(setattr, items_list, "index", target)

        self.query_one(PaginationBar).show_pages(
            view.current_page,
            view.total_pages,
            view.visible_pages,
            view.has_previous,
            view.has_next,
        )

    def _sync_options(self) -> None:
        state = self.controller.state
        criteria = state.criteria
        sources = list(state.sources)
        topics = list(state.topics)
        # After a failed fetch the lists are empty but the selection is kept.
        if criteria.source and criteria.source not in sources:
            sources.append(criteria.source)
        if criteria.topic and criteria.topic not in topics:
            topics.append(criteria.topic)
        source_select = self.query_one("#source-select", Select)
        topic_select = self.query_one("#topic-select", Select)
        source_select.set_options([("All Sources", "")] + [(s, s) for s in sources])
        topic_select.set_options([("All Topics", "")] + [(t, t) for t in topics])
        source_select.value = state.criteria.source
        topic_select.value = state.criteria.topic

    def _highlighted_row(self) -> Optional[ItemRow]:
        item = self.query_one("#items-list", ListView).highlighted_child
        return item if isinstance(item, ItemRow) else None

    # --- Fetch ---
    def action_refresh(self) -> None:
        # Every request gets its own worker; whichever settles last wins.
        self.controller.begin_fetch()
        self.render_view()
        self.run_worker(
            self.controller.load,
            name="items_loader",
            thread=True,
            exit_on_error=False,
        )

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if getattr(event.worker, "name", None) != "items_loader":
            return
        if event.state is WorkerState.SUCCESS:
            self.controller.fetch_resolved(event.worker.result)
            self._sync_options()
            self.render_view()
        elif event.state is WorkerState.ERROR:
            error = getattr(event.worker, "error", None)
            self.controller.fetch_failed(str(error) if error else "Unknown error")
            self._sync_options()
            self.render_view()

    # --- Filter inputs ---
    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id != "query":
            return
        if event.value != self.controller.state.criteria.query:
            self.controller.set_query(event.value)
            self.render_view()

    def on_select_changed(self, event: Select.Changed) -> None:
        value = event.value if isinstance(event.value, str) else ""
        criteria = self.controller.state.criteria
        if event.select.id == "source-select" and value != criteria.source:
            self.controller.set_source(value)
        elif event.select.id == "topic-select" and value != criteria.topic:
            self.controller.set_topic(value)
        else:
            return
        self.render_view()

    def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        criteria = self.controller.state.criteria
        if event.checkbox.id == "hide-read" and event.value != criteria.hide_read:
            self.controller.set_hide_read(event.value)
        elif event.checkbox.id == "star-only" and event.value != criteria.star_only:
            self.controller.set_star_only(event.value)
        else:
            return
        self.render_view()

    def action_focus_query(self) -> None:
        """Focus the search input."""
        self.query_one("#query", Input).focus()

    def action_clear_query(self) -> None:
        query_input = self.query_one("#query", Input)
        query_input.value = ""
        if self.controller.clear_query():
            self.render_view()
        self.query_one("#items-list", ListView).focus()

    # --- Pagination ---
    def on_button_pressed(self, event: Button.Pressed) -> None:
        if isinstance(event.button, PageButton):
            self.controller.go_to_page(event.button.page)
            self.render_view()

    def action_previous_page(self) -> None:
        self.controller.previous_page()
        self.render_view()

    def action_next_page(self) -> None:
        self.controller.next_page()
        self.render_view()

    # --- Annotations ---
    def action_toggle_star(self) -> None:
        row = self._highlighted_row()
        if row is not None and self.controller.toggle_star(row.item.id):
            self.render_view()

    def action_toggle_read(self) -> None:
        row = self._highlighted_row()
        if row is not None and self.controller.toggle_read(row.item.id):
            self.render_view()

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, ItemRow):
            self._open(event.item)

    def action_open_item(self) -> None:
        row = self._highlighted_row()
        if row is not None:
            self._open(row)

    def _open(self, row: ItemRow) -> None:
        if row.item.url:
            webbrowser.open(row.item.url)
        if self.controller.open_item(row.item.id):
            self.render_view()

    # --- Theme ---
    def action_toggle_theme(self) -> None:
        self.theme = textual_theme(self.theme_preference.toggle())
