"""View state, the events that change it, and the derived render model.

Every user or network event maps to a pure transition in :func:`reduce`.
Rendering reads :func:`derive_view`, which runs the filter engine and the
paginator over the current state on every call.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Any, List, Optional, Tuple, Union

from .datamodels import AnnotationRecord, Dataset, FilterCriteria, Item
from .filters import apply_filters, distinct_sources, distinct_topics
from .paginator import (
    clamp_page,
    has_next,
    has_previous,
    paginate,
    total_pages,
    visible_page_numbers,
)

FILTER_FIELDS = ("source", "topic", "hide_read", "star_only")

FETCHING_MESSAGE = "Fetching items…"
NO_RESULTS_MESSAGE = "No results match your filters."


class FetchStatus(enum.Enum):
    EMPTY = "empty"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class ViewState:
    criteria: FilterCriteria = field(default_factory=FilterCriteria)
    dataset: Optional[Dataset] = None
    status: FetchStatus = FetchStatus.EMPTY
    error: Optional[str] = None
    page: int = 1
    sources: Tuple[str, ...] = ()
    topics: Tuple[str, ...] = ()


# --- Events ---
@dataclass(frozen=True)
class QueryChanged:
    query: str


@dataclass(frozen=True)
class FilterChanged:
    field: str
    value: Any


@dataclass(frozen=True)
class PageRequested:
    page: int


@dataclass(frozen=True)
class ToggleRead:
    item_id: str


@dataclass(frozen=True)
class ToggleStar:
    item_id: str


@dataclass(frozen=True)
class FetchRequested:
    pass


@dataclass(frozen=True)
class FetchResolved:
    dataset: Dataset


@dataclass(frozen=True)
class FetchFailed:
    message: str


Event = Union[
    QueryChanged,
    FilterChanged,
    PageRequested,
    ToggleRead,
    ToggleStar,
    FetchRequested,
    FetchResolved,
    FetchFailed,
]


@dataclass(frozen=True)
class Transition:
    state: ViewState
    rerender: bool


def _with_criteria(state: ViewState, **changes: Any) -> Transition:
    criteria = replace(state.criteria, **changes)
    return Transition(replace(state, criteria=criteria, page=1), True)


def _on_fetch_resolved(state: ViewState, dataset: Dataset) -> ViewState:
    sources = tuple(distinct_sources(dataset.items))
    topics = tuple(distinct_topics(dataset.items))
    criteria = state.criteria
    # A selection the new snapshot no longer offers reverts to "All".
    if criteria.source and criteria.source not in sources:
        criteria = replace(criteria, source="")
    if criteria.topic and criteria.topic not in topics:
        criteria = replace(criteria, topic="")
    return replace(
        state,
        criteria=criteria,
        dataset=dataset,
        status=FetchStatus.LOADED,
        error=None,
        page=1,
        sources=sources,
        topics=topics,
    )


def reduce(state: ViewState, event: Event) -> Transition:
    """Apply one event to ``state``."""
    if isinstance(event, QueryChanged):
        return _with_criteria(state, query=event.query)

    if isinstance(event, FilterChanged):
        if event.field not in FILTER_FIELDS:
            raise ValueError(f"Unknown filter field: {event.field}")
        value = event.value
        if event.field in ("hide_read", "star_only"):
            value = bool(value)
        else:
            value = value or ""
        return _with_criteria(state, **{event.field: value})

    if isinstance(event, PageRequested):
        return Transition(replace(state, page=max(1, int(event.page))), True)

    if isinstance(event, (ToggleRead, ToggleStar)):
        # The flag lives in the annotation store; only the render is stale.
        return Transition(state, True)

    if isinstance(event, FetchRequested):
        return Transition(replace(state, status=FetchStatus.LOADING, error=None), True)

    if isinstance(event, FetchResolved):
        return Transition(_on_fetch_resolved(state, event.dataset), True)

    if isinstance(event, FetchFailed):
        failed = replace(
            state,
            dataset=None,
            status=FetchStatus.FAILED,
            error=event.message,
            page=1,
            sources=(),
            topics=(),
        )
        return Transition(failed, True)

    raise TypeError(f"Unhandled event: {event!r}")


def settle_page(state: ViewState, annotations: AnnotationRecord, page_size: int) -> ViewState:
    """Clamp ``state.page`` against the current filtered result."""
    all_items: Tuple[Item, ...] = state.dataset.items if state.dataset else ()
    filtered = apply_filters(all_items, state.criteria, annotations)
    page = clamp_page(state.page, total_pages(len(filtered), page_size))
    if page == state.page:
        return state
    return replace(state, page=page)


# --- Derived view ---
@dataclass(frozen=True)
class ViewModel:
    items: List[Item]
    total_count: int
    filtered_count: int
    source_count: int
    current_page: int
    total_pages: int
    visible_pages: List[int]
    has_previous: bool
    has_next: bool
    summary: str
    showing: str
    source_label: str
    topic_label: str
    message: Optional[str] = None


def _summary(state: ViewState, total: int, source_count: int) -> str:
    if state.status is FetchStatus.FAILED:
        return f"Error: {state.error}"
    if state.dataset is None:
        return FETCHING_MESSAGE
    updated = state.dataset.fetched_at.strftime("%H:%M")
    return f"{total} news articles from {source_count} sources · Last updated: {updated}"


def derive_view(
    state: ViewState,
    annotations: AnnotationRecord,
    page_size: int,
    max_visible_pages: int,
) -> ViewModel:
    """Run filter and pagination for ``state`` and describe what to render."""
    all_items: Tuple[Item, ...] = state.dataset.items if state.dataset else ()
    filtered = apply_filters(all_items, state.criteria, annotations)
    page = paginate(filtered, page_size, state.page)
    source_count = len({it.feed_title for it in all_items if it.feed_title})

    message: Optional[str] = None
    if state.status is FetchStatus.FAILED:
        message = f"Failed to load: {state.error}"
    elif state.dataset is None:
        message = FETCHING_MESSAGE
    elif not filtered:
        message = NO_RESULTS_MESSAGE

    criteria = state.criteria
    return ViewModel(
        items=page.items,
        total_count=len(all_items),
        filtered_count=len(filtered),
        source_count=source_count,
        current_page=page.current_page,
        total_pages=page.total_pages,
        visible_pages=visible_page_numbers(page.total_pages, max_visible_pages),
        has_previous=has_previous(page.current_page),
        has_next=has_next(page.current_page, page.total_pages),
        summary=_summary(state, len(all_items), source_count),
        showing=f"Showing {len(filtered)} of {len(all_items)}",
        source_label=f"Source: {criteria.source or 'All'}",
        topic_label=f"Topic: {criteria.topic or 'All'}",
        message=message,
    )
