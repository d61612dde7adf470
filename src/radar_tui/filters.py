from __future__ import annotations

import locale
from typing import Iterable, List, Tuple

from .datamodels import AnnotationRecord, FilterCriteria, Item, host_from_url

__all__ = [
    "apply_filters",
    "distinct_sources",
    "distinct_topics",
    "host_from_url",
    "matches",
]


def _sort_key(value: str) -> Tuple[str, str]:
    return locale.strxfrm(value.casefold()), value


def _uniq_sorted(values: Iterable[str]) -> List[str]:
    return sorted({v for v in values if v}, key=_sort_key)


def _haystack(item: Item) -> str:
    return " ".join(
        [item.title, item.feed_title, item.host, " ".join(item.tags)]
    ).lower()


def matches(item: Item, criteria: FilterCriteria, annotations: AnnotationRecord) -> bool:
    """True when ``item`` satisfies every active criterion."""
    if criteria.source and item.feed_title != criteria.source:
        return False
    if criteria.topic and criteria.topic not in item.tags:
        return False
    if criteria.hide_read and annotations.is_read(item.id):
        return False
    if criteria.star_only and not annotations.is_starred(item.id):
        return False

    query = criteria.query.strip().lower()
    if not query:
        return True
    return query in _haystack(item)


def apply_filters(
    items: Iterable[Item], criteria: FilterCriteria, annotations: AnnotationRecord
) -> List[Item]:
    """Return the items matching ``criteria``, in their original order."""
    return [it for it in items if matches(it, criteria, annotations)]


def distinct_sources(items: Iterable[Item]) -> List[str]:
    return _uniq_sorted(it.feed_title for it in items)


def distinct_topics(items: Iterable[Item]) -> List[str]:
    return _uniq_sorted(tag for it in items for tag in it.tags)
