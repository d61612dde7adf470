from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Generic, List, Mapping, Optional, Tuple, TypeVar
from urllib.parse import urlparse

logger = logging.getLogger("radar")

T = TypeVar("T")


def host_from_url(url: str) -> str:
    """Return the hostname of ``url`` without a leading ``www.``."""
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        return ""
    if host.startswith("www."):
        host = host[4:]
    return host


# --- Data models ---
@dataclass(frozen=True)
class Item:
    id: str
    title: str
    url: str
    feed_title: str = ""
    published_at: Optional[str] = None
    tags: Tuple[str, ...] = ()

    @property
    def host(self) -> str:
        return host_from_url(self.url)

    @property
    def source_label(self) -> str:
        return self.feed_title or self.host or "Source"

    @property
    def published_label(self) -> str:
        """Short ``Mon D`` date, blank if the timestamp is missing or unparsable."""
        if not self.published_at:
            return ""
        try:
            when = datetime.fromisoformat(self.published_at.replace("Z", "+00:00"))
        except ValueError:
            return ""
        return f"{when:%b} {when.day}"


@dataclass(frozen=True)
class Dataset:
    items: Tuple[Item, ...]
    fetched_at: datetime

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class FilterCriteria:
    query: str = ""
    source: str = ""
    topic: str = ""
    hide_read: bool = False
    star_only: bool = False

    @property
    def is_active(self) -> bool:
        return bool(
            self.query.strip()
            or self.source
            or self.topic
            or self.hide_read
            or self.star_only
        )


@dataclass
class AnnotationRecord:
    read: Dict[str, bool] = field(default_factory=dict)
    star: Dict[str, bool] = field(default_factory=dict)

    def is_read(self, item_id: str) -> bool:
        return bool(self.read.get(item_id, False))

    def is_starred(self, item_id: str) -> bool:
        return bool(self.star.get(item_id, False))

    def to_dict(self) -> Dict[str, Dict[str, bool]]:
        return {"read": dict(self.read), "star": dict(self.star)}


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T]
    total_pages: int
    current_page: int


def _coerce_str(value: Any) -> str:
    """Stringify a scalar the way the web client does, so flag keys agree."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_item(raw: Mapping[str, Any]) -> Tuple[Item, List[str]]:
    """Build an Item from one API entry.

    Missing or malformed fields fall back to safe defaults; each fallback is
    reported in the returned reasons list.
    """
    reasons: List[str] = []

    if raw.get("id") is None:
        reasons.append("missing id")
    title = raw.get("title")
    if not isinstance(title, str):
        reasons.append("missing title")
        title = _coerce_str(title)
    url = raw.get("url")
    if not isinstance(url, str):
        reasons.append("missing url")
        url = ""

    feed = raw.get("feed")
    feed_title = ""
    if isinstance(feed, Mapping) and isinstance(feed.get("title"), str):
        feed_title = feed["title"]
    else:
        reasons.append("missing feed title")

    published_at = raw.get("published_at")
    if published_at is not None and not isinstance(published_at, str):
        reasons.append("unreadable published_at")
        published_at = None

    raw_tags = raw.get("tags")
    if isinstance(raw_tags, list):
        tags = tuple(t for t in raw_tags if isinstance(t, str) and t)
        if len(tags) != len(raw_tags):
            reasons.append("dropped non-string tags")
    else:
        if raw_tags is not None:
            reasons.append("tags is not a list")
        tags = ()

    item = Item(
        id=_coerce_str(raw.get("id")),
        title=title,
        url=url,
        feed_title=feed_title,
        published_at=published_at,
        tags=tags,
    )
    return item, reasons


def parse_dataset(payload: Any, fetched_at: Optional[datetime] = None) -> Dataset:
    """Turn a decoded API payload into a Dataset."""
    fetched_at = fetched_at or datetime.now()
    raw_items = payload.get("items") if isinstance(payload, Mapping) else None
    if not isinstance(raw_items, list):
        logger.warning("Payload has no items list; treating it as empty")
        return Dataset(items=(), fetched_at=fetched_at)

    items: List[Item] = []
    for index, raw in enumerate(raw_items):
        if not isinstance(raw, Mapping):
            logger.warning("Skipping entry %d: not an object", index)
            continue
        item, reasons = parse_item(raw)
        if reasons:
            logger.debug("Item %r defaulted fields: %s", item.id, ", ".join(reasons))
        items.append(item)

    return Dataset(items=tuple(items), fetched_at=fetched_at)
