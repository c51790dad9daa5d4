"""Unit tests for sort parsing and page arithmetic"""

import pytest

from sku_service.domain.sku import InvalidArgumentError, Page, PageRequest, SortOrder, parse_sort

DEFAULT = SortOrder(field="created_at", descending=True)


class TestParseSort:

    def test_no_values_uses_default(self):
        assert parse_sort(None, DEFAULT) == (DEFAULT,)
        assert parse_sort([], DEFAULT) == (DEFAULT,)

    def test_field_defaults_to_ascending(self):
        assert parse_sort(["name"], DEFAULT) == (SortOrder("name"),)

    def test_multiple_keys_keep_priority(self):
        orders = parse_sort(["price,desc", "name,ASC"], DEFAULT)
        assert orders == (SortOrder("price", descending=True), SortOrder("name"))

    def test_unknown_field_rejected(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            parse_sort(["cost"], DEFAULT)
        assert "Cannot sort by 'cost'" in str(exc_info.value)

    @pytest.mark.parametrize("raw", ["name,sideways", "name,asc,desc"])
    def test_bad_direction_rejected(self, raw):
        with pytest.raises(InvalidArgumentError):
            parse_sort([raw], DEFAULT)


class TestPageArithmetic:

    def test_offset_is_one_based(self):
        assert PageRequest(page=1, per_page=20).offset == 0
        assert PageRequest(page=3, per_page=10).offset == 20

    @pytest.mark.parametrize(
        "total,per_page,expected",
        [(0, 20, 0), (1, 20, 1), (20, 20, 1), (21, 20, 2), (25, 10, 3)],
    )
    def test_total_pages(self, total, per_page, expected):
        assert Page(items=[], total=total, page=1, per_page=per_page).total_pages == expected
