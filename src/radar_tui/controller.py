from __future__ import annotations

import logging
from typing import Optional

from .annotations import AnnotationStore
from .config import FETCH_TOP, MAX_VISIBLE_PAGES, PAGE_SIZE
from .datamodels import Dataset
from .gateway import CandidatesGateway, FetchError
from .state import (
    Event,
    FetchFailed,
    FetchRequested,
    FetchResolved,
    FilterChanged,
    PageRequested,
    QueryChanged,
    ToggleRead,
    ToggleStar,
    ViewModel,
    ViewState,
    derive_view,
    reduce,
    settle_page,
)

logger = logging.getLogger("radar")


class ReaderController:
    """Owns the view state and the annotation store.

    All changes go through :meth:`dispatch`; the named helpers only build
    events (and perform the annotation side effect for toggles).
    """

    def __init__(
        self,
        store: AnnotationStore,
        gateway: Optional[CandidatesGateway] = None,
        page_size: int = PAGE_SIZE,
        max_visible_pages: int = MAX_VISIBLE_PAGES,
        fetch_top: int = FETCH_TOP,
    ):
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.store = store
        self.gateway = gateway
        self.page_size = page_size
        self.max_visible_pages = max_visible_pages
        self.fetch_top = fetch_top
        self.state = ViewState()

    def dispatch(self, event: Event) -> bool:
        """Apply ``event``; returns whether the view needs re-rendering."""
        transition = reduce(self.state, event)
        self.state = settle_page(transition.state, self.store.record, self.page_size)
        logger.debug("Dispatched %s (page=%d)", type(event).__name__, self.state.page)
        return transition.rerender

    def view(self) -> ViewModel:
        return derive_view(
            self.state, self.store.record, self.page_size, self.max_visible_pages
        )

    # --- Filters ---
    def set_query(self, query: str) -> bool:
        return self.dispatch(QueryChanged(query))

    def clear_query(self) -> bool:
        return self.dispatch(QueryChanged(""))

    def set_source(self, source: str) -> bool:
        return self.dispatch(FilterChanged("source", source))

    def set_topic(self, topic: str) -> bool:
        return self.dispatch(FilterChanged("topic", topic))

    def set_hide_read(self, hide_read: bool) -> bool:
        return self.dispatch(FilterChanged("hide_read", hide_read))

    def set_star_only(self, star_only: bool) -> bool:
        return self.dispatch(FilterChanged("star_only", star_only))

    # --- Pagination ---
    def go_to_page(self, page: int) -> bool:
        return self.dispatch(PageRequested(page))

    def previous_page(self) -> bool:
        current = self.view().current_page
        return self.dispatch(PageRequested(max(1, current - 1)))

    def next_page(self) -> bool:
        view = self.view()
        return self.dispatch(PageRequested(min(view.total_pages, view.current_page + 1)))

    # --- Annotations ---
    def toggle_read(self, item_id: str) -> bool:
        self.store.toggle_read(item_id)
        return self.dispatch(ToggleRead(item_id))

    def toggle_star(self, item_id: str) -> bool:
        self.store.toggle_star(item_id)
        return self.dispatch(ToggleStar(item_id))

    def open_item(self, item_id: str) -> bool:
        """Record that an item was opened; it counts as read from now on."""
        self.store.mark_read(item_id)
        return True

    # --- Fetch lifecycle ---
    def begin_fetch(self) -> bool:
        return self.dispatch(FetchRequested())

    def fetch_resolved(self, dataset: Dataset) -> bool:
        logger.info("Loaded %d items", len(dataset))
        return self.dispatch(FetchResolved(dataset))

    def fetch_failed(self, message: str) -> bool:
        logger.error("Fetch failed: %s", message)
        return self.dispatch(FetchFailed(message))

    def load(self) -> Dataset:
        """Fetch a snapshot through the gateway. Raises FetchError."""
        if self.gateway is None:
            raise FetchError("No API configured.")
        return self.gateway.fetch(self.fetch_top)

    def refresh(self) -> bool:
        """Fetch synchronously and settle the result into the state."""
        self.begin_fetch()
        try:
            dataset = self.load()
        except FetchError as e:
            return self.fetch_failed(str(e))
        return self.fetch_resolved(dataset)
