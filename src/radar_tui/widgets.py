from __future__ import annotations

from typing import List

from rich.markup import escape
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.reactive import reactive
from textual.widget import Widget
from textual.widgets import Button, ListItem, Static

from .datamodels import Item

MAX_TAG_CHIPS = 3


# --- UI Widgets ---
class ItemRow(ListItem):
    def __init__(self, item: Item, read: bool, starred: bool):
        super().__init__(classes="read" if read else None)
        self.item = item
        self.read = read
        self.starred = starred

    def compose(self) -> ComposeResult:
        item = self.item
        badges = ("★ " if self.starred else "☆ ") + ("✓" if self.read else " ")
        chips = [f"[b]{escape(item.source_label)}[/]"]
        if item.host:
            chips.append(escape(item.host))
        if item.published_label:
            chips.append(escape(item.published_label))
        chips.extend(f"#{escape(tag)}" for tag in item.tags[:MAX_TAG_CHIPS])

        with Horizontal(classes="item-container"):
            yield Static(badges, classes="item-badges")
            yield Static(escape(item.title or item.url), classes="item-title")
        yield Static("  ".join(chips), classes="item-meta")


class PageButton(Button):
    def __init__(self, label: str, page: int, active: bool = False, disabled: bool = False):
        super().__init__(label, classes="page-button", disabled=disabled)
        self.page = page
        self.set_class(active, "active")


class PaginationBar(Horizontal):
    """Prev, the first few page numbers, Next."""

    def show_pages(
        self,
        current: int,
        total: int,
        visible: List[int],
        has_previous: bool,
        has_next: bool,
    ) -> None:
        buttons: List[Widget] = [
            PageButton("Prev", max(1, current - 1), disabled=not has_previous)
        ]
        for page in visible:
            buttons.append(PageButton(str(page), page, active=page == current))
        buttons.append(PageButton("Next", min(total, current + 1), disabled=not has_next))
        buttons.append(Static(f"Page {current} of {total}", classes="page-meta"))

        self.remove_children()
        self.mount_all(buttons)


class StatusBar(Static):
    loading_status = reactive("")
    summary = reactive("")
    keybinding_hint = reactive("")

    def on_mount(self) -> None:
        self.update_display()

    def set_keybindings(self, hint: str) -> None:
        """Set the keybinding hint text."""
        self.keybinding_hint = hint

    def update_display(self) -> None:
        """Update the status bar display."""
        status_items = []
        if self.loading_status:
            status_items.append(self.loading_status)

        if self.summary:
            status_items.append(escape(self.summary))

        if self.keybinding_hint:
            status_items.append(self.keybinding_hint)

        self.update(" | ".join(status_items))

    def watch_loading_status(self, loading_status: str) -> None:
        self.update_display()

    def watch_summary(self, summary: str) -> None:
        self.update_display()

    def watch_keybinding_hint(self, keybinding_hint: str) -> None:
        self.update_display()


class MessageLine(Static):
    def show_message(self, message: str, error: bool = False) -> None:
        self.update(Text(message, style="bold red" if error else "italic"))
        self.display = bool(message)
