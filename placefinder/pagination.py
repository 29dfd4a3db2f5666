"""Pagination arithmetic over the aggregated, ranked result list."""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Sequence, Tuple, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PaginationInfo:
    current_page: int
    total_results: int
    results_per_page: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def total_pages_for(total_results: int, results_per_page: int) -> int:
    # Zero results means zero pages.
    return math.ceil(total_results / results_per_page)


def calculate_pagination(total_results: int, results_per_page: int, current_page: int) -> PaginationInfo:
    total_pages = total_pages_for(total_results, results_per_page)
    return PaginationInfo(
        current_page=current_page,
        total_results=total_results,
        results_per_page=results_per_page,
        total_pages=total_pages,
        has_next_page=current_page < total_pages,
        has_prev_page=current_page > 1,
    )


def page_bounds(total_results: int, results_per_page: int, current_page: int) -> Tuple[int, int]:
    start = (current_page - 1) * results_per_page
    end = min(start + results_per_page, total_results)
    return start, end


def slice_page(items: Sequence[T], results_per_page: int, current_page: int) -> List[T]:
    start, end = page_bounds(len(items), results_per_page, current_page)
    return list(items[start:end])
