from __future__ import annotations

import pytest

from page_splitter.exceptions import InvalidRangeError
from page_splitter.ranges import (
    format_selection,
    is_valid_range,
    parse_page_range,
    parse_page_range_report,
    resolve_working_set,
)
from page_splitter.types import PageSelection


def test_parse_mixed_ranges_and_singles() -> None:
    selection = parse_page_range("1-3,5", 10)

    assert list(selection) == [1, 2, 3, 5]
    assert selection == {1, 2, 3, 5}


def test_parse_descending_range_is_dropped() -> None:
    assert list(parse_page_range("5-3", 10)) == []


def test_out_of_range_bounds_drop_whole_token() -> None:
    assert list(parse_page_range("0-2,15", 10)) == []
    assert list(parse_page_range("0-2,1-2,15", 10)) == [1, 2]
    assert list(parse_page_range("8-12,3", 10)) == [3]


def test_empty_expression_is_empty_selection() -> None:
    assert list(parse_page_range("", 10)) == []
    assert list(parse_page_range("   ", 10)) == []


def test_whitespace_and_empty_parts_are_ignored() -> None:
    assert list(parse_page_range(" 2 , ,4 - 5,", 10)) == [2, 4, 5]


def test_overlapping_parts_collapse_in_ascending_order() -> None:
    assert list(parse_page_range("7,1-4,3-5,2", 10)) == [1, 2, 3, 4, 5, 7]


@pytest.mark.parametrize("token", ["abc", "-3", "3-", "1-2-3", "+4", "2.5", "٣"])
def test_malformed_tokens_are_dropped(token: str) -> None:
    assert list(parse_page_range(f"{token},6", 10)) == [6]


def test_is_valid_range() -> None:
    assert not is_valid_range("", 5)
    assert not is_valid_range("", 0)
    assert is_valid_range("3", 5)
    assert not is_valid_range("9", 5)
    assert not is_valid_range("x,y", 5)


def test_report_lists_dropped_tokens() -> None:
    report = parse_page_range_report("1-3,x,9-2", 10)

    assert report.selection == PageSelection([1, 2, 3])
    assert report.dropped == ["x", "9-2"]
    assert not report.is_clean


def test_strict_mode_raises_with_tokens() -> None:
    with pytest.raises(InvalidRangeError) as excinfo:
        parse_page_range("1-3,x,9-2", 10, strict=True)

    assert excinfo.value.tokens == ["x", "9-2"]
    assert "'x'" in str(excinfo.value)


def test_strict_mode_accepts_clean_expression() -> None:
    assert list(parse_page_range("1-2,4", 4, strict=True)) == [1, 2, 4]


@pytest.mark.parametrize(
    "expression",
    ["1-3,5", "10,1,4-6", "2-2", "1-10"],
)
def test_reparsing_canonical_rendering_is_stable(expression: str) -> None:
    selection = parse_page_range(expression, 10)

    assert parse_page_range(format_selection(selection), 10) == selection


def test_resolve_working_set_defaults_to_all_pages() -> None:
    assert list(resolve_working_set(None, 4)) == [1, 2, 3, 4]
    assert list(resolve_working_set("  ", 3)) == [1, 2, 3]
    assert list(resolve_working_set(None, 0)) == []


def test_resolve_working_set_uses_explicit_selection() -> None:
    assert list(resolve_working_set("2,4", 4)) == [2, 4]
    assert list(resolve_working_set([4, 2, 2], 4)) == [2, 4]
    selection = PageSelection([3])
    assert resolve_working_set(selection, 4) is selection


def test_page_selection_behaves_like_ordered_set() -> None:
    selection = PageSelection([5, 1, 3, 1])

    assert list(selection) == [1, 3, 5]
    assert len(selection) == 3
    assert 3 in selection
    assert selection.is_within(5)
    assert not selection.is_within(4)
    assert repr(selection) == "PageSelection([1, 3, 5])"
