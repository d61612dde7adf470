from __future__ import annotations

from datetime import datetime

import pytest

from radar_tui.annotations import AnnotationStore
from radar_tui.datamodels import Dataset, Item


def make_item(item_id, title="Story", feed_title="Reuters", url=None, tags=()):
    return Item(
        id=str(item_id),
        title=title,
        url=url or f"https://www.example.com/{item_id}",
        feed_title=feed_title,
        published_at="2024-05-03T10:00:00Z",
        tags=tuple(tags),
    )


def make_dataset(count, feed_title="Reuters"):
    items = tuple(make_item(i, title=f"Story {i}", feed_title=feed_title) for i in range(count))
    return Dataset(items=items, fetched_at=datetime(2024, 5, 3, 9, 30))


@pytest.fixture
def store(tmp_path):
    return AnnotationStore(str(tmp_path / "state.json"))
