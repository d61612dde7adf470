from __future__ import annotations

import pytest

from radar_tui.datamodels import AnnotationRecord, FilterCriteria
from radar_tui.filters import apply_filters, distinct_sources, distinct_topics, matches

from conftest import make_item


@pytest.fixture
def items():
    return [
        make_item("a", title="Fed holds rates", feed_title="Reuters", tags=["rates", "fed"]),
        make_item("b", title="Oil slips", feed_title="Reuters", tags=["energy"]),
        make_item("c", title="Tech rally", feed_title="AP", url="https://www.bloomberg.com/x"),
        make_item("d", title="Bond yields", feed_title="", tags=["rates"]),
    ]


def test_no_criteria_keeps_everything_in_order(items):
    result = apply_filters(items, FilterCriteria(), AnnotationRecord())
    assert result == items


def test_source_and_hide_read_scenario():
    a = make_item("A", feed_title="Reuters")
    b = make_item("B", feed_title="Reuters")
    c = make_item("C", feed_title="AP")
    annotations = AnnotationRecord(read={"A": True, "B": False})
    criteria = FilterCriteria(query="", source="Reuters", hide_read=True)

    assert apply_filters([a, b, c], criteria, annotations) == [b]


def test_topic_filter_matches_any_tag(items):
    result = apply_filters(items, FilterCriteria(topic="rates"), AnnotationRecord())
    assert [it.id for it in result] == ["a", "d"]


def test_star_only_requires_true_flag(items):
    annotations = AnnotationRecord(star={"b": True, "c": False})
    result = apply_filters(items, FilterCriteria(star_only=True), annotations)
    assert [it.id for it in result] == ["b"]


@pytest.mark.parametrize(
    "query, expected",
    [
        ("  FED ", ["a"]),
        ("reuters", ["a", "b"]),
        ("bloomberg", ["c"]),
        ("energy", ["b"]),
        ("nothing here", []),
        ("   ", ["a", "b", "c", "d"]),
    ],
)
def test_query_searches_title_source_host_and_tags(items, query, expected):
    result = apply_filters(items, FilterCriteria(query=query), AnnotationRecord())
    assert [it.id for it in result] == expected


def test_query_ignores_www_prefix(items):
    result = apply_filters(items, FilterCriteria(query="www."), AnnotationRecord())
    assert result == []


def test_criteria_are_conjunctive(items):
    annotations = AnnotationRecord(read={"a": True})
    criteria = FilterCriteria(query="rates", source="Reuters", topic="rates", hide_read=True)
    assert apply_filters(items, criteria, annotations) == []

    for item in items:
        included = matches(item, criteria, annotations)
        assert included == (item in apply_filters(items, criteria, annotations))


def test_apply_is_idempotent(items):
    annotations = AnnotationRecord(read={"c": True}, star={"a": True})
    criteria = FilterCriteria(query="r", hide_read=True)
    first = apply_filters(items, criteria, annotations)
    assert apply_filters(items, criteria, annotations) == first
    assert apply_filters(first, criteria, annotations) == first


def test_distinct_sources_skips_blank_and_sorts(items):
    assert distinct_sources(items) == ["AP", "Reuters"]


def test_distinct_topics_dedupes_and_sorts_case_insensitively():
    items = [
        make_item(1, tags=["banks", "Fed"]),
        make_item(2, tags=["fed", "Asia"]),
        make_item(3, tags=["banks"]),
    ]
    topics = distinct_topics(items)
    assert topics[0] == "Asia"
    assert topics[1] == "banks"
    assert set(topics[2:]) == {"Fed", "fed"}
