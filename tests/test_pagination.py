import pytest

from placefinder.pagination import calculate_pagination, page_bounds, slice_page, total_pages_for


@pytest.mark.parametrize("total,size", [(1, 1), (7, 5), (20, 5), (60, 60), (59, 7), (3, 10)])
def test_pages_reconstruct_full_sequence(total, size):
    items = list(range(total))
    pages = total_pages_for(total, size)
    collected = []
    for page in range(1, pages + 1):
        chunk = slice_page(items, size, page)
        assert len(chunk) == min(size, total - (page - 1) * size)
        collected.extend(chunk)
    assert collected == items


def test_first_and_last_page_flags():
    first = calculate_pagination(12, 5, 1)
    assert first.total_pages == 3
    assert first.has_next_page is True
    assert first.has_prev_page is False

    last = calculate_pagination(12, 5, 3)
    assert last.has_next_page is False
    assert last.has_prev_page is True


def test_single_page_has_no_neighbours():
    info = calculate_pagination(4, 5, 1)
    assert info.total_pages == 1
    assert not info.has_next_page
    assert not info.has_prev_page


def test_zero_results_has_zero_pages():
    info = calculate_pagination(0, 5, 1)
    assert info.total_pages == 0
    assert info.has_next_page is False
    assert info.has_prev_page is False
    assert info.to_dict() == {
        "current_page": 1,
        "total_results": 0,
        "results_per_page": 5,
        "total_pages": 0,
        "has_next_page": False,
        "has_prev_page": False,
    }


def test_page_bounds_beyond_range_start_past_total():
    start, end = page_bounds(7, 5, 3)
    assert start == 10
    assert start >= 7
    assert end == 7
