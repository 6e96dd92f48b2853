"""Tests for request-scoped view state."""

import pytest

from miniflux_reader.web.view_state import (
    ALL_ITEMS_TITLE,
    PageData,
    ViewState,
    get_density,
    parse_id,
    parse_id_lenient,
)

from tests.conftest import make_categories, make_entries, make_feeds


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, 0), ("", 0), ("0", 0), ("42", 42), ("+7", 7), ("-3", -3), ("007", 7)],
)
def test_parse_id(raw, expected):
    assert parse_id(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "abc",
        "1.5",
        " 1",
        "1_000",
        "0x10",
        "٣",
        "-",
        "9223372036854775808",
        "-9223372036854775809",
        "99999999999999999999",
    ],
)
def test_parse_id_rejects(raw):
    with pytest.raises(ValueError):
        parse_id(raw)


def test_parse_id_accepts_int64_bounds():
    assert parse_id("9223372036854775807") == 2**63 - 1
    assert parse_id("-9223372036854775808") == -(2**63)


def test_parse_id_lenient():
    assert parse_id_lenient("abc") == 0
    assert parse_id_lenient("12") == 12


@pytest.mark.parametrize(
    ("cookie", "expected"),
    [(None, "1"), ("", "1"), ("0.75", "0.75"), ("whatever", "whatever")],
)
def test_get_density(cookie, expected):
    assert get_density(cookie) == expected


def test_all_items_expands_every_category():
    state = ViewState.build(make_categories(), make_feeds())
    assert state.active_title == ALL_ITEMS_TITLE
    assert state.open_categories == {1, 2, 3}


def test_feed_expands_owning_category():
    state = ViewState.build(make_categories(), make_feeds(), feed_id=9)
    assert state.active_title == "BBC"
    assert state.open_categories == {2}
    assert state.selected_feed_id == 9


def test_category_expands_only_itself():
    state = ViewState.build(make_categories(), make_feeds(), category_id=1)
    assert state.active_title == "Tech"
    assert state.open_categories == {1}


def test_feed_takes_precedence_over_category():
    state = ViewState.build(make_categories(), make_feeds(), category_id=2, feed_id=7)
    assert state.active_title == "Hacker News"
    assert state.open_categories == {1}


@pytest.mark.parametrize(("category_id", "feed_id"), [(0, 404), (404, 0)])
def test_unmatched_filter_falls_back(category_id, feed_id):
    state = ViewState.build(
        make_categories(), make_feeds(), category_id=category_id, feed_id=feed_id
    )
    assert state.active_title == ALL_ITEMS_TITLE
    assert state.open_categories == set()


def test_page_data_template_context():
    entries = make_entries()
    page = PageData(
        categories=make_categories(),
        feeds=make_feeds(),
        entries=entries,
        entries_count=250,
        selected_entry=entries[0],
        density="0.75",
        view=ViewState.build(make_categories(), make_feeds(), feed_id=7),
    )
    context = page.template_context()

    assert "view" not in context
    assert context["active_title"] == "Hacker News"
    assert context["selected_feed_id"] == 7
    assert context["entries_count"] == 250
    assert context["selected_entry"] is page.selected_entry
