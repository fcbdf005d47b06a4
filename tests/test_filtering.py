"""Tests for task/event filtering and sorting."""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from conftest import make_event, make_task
from tasksaver.filtering import (
    DateRange,
    FilterOptions,
    extract_tags,
    filter_events,
    filter_tasks,
    sort_by_created,
    sort_by_date,
    sort_by_priority,
)


@pytest.fixture
def tasks():
    return [
        make_task("Report", priority="high", tags=["work"], due_date=datetime(2024, 3, 5, 17, 0)),
        make_task("Groceries", priority="low", tags=["home"], due_date=datetime(2024, 3, 6)),
        make_task("Call mom", priority="medium", tags=["home", "family"], status="completed"),
        make_task("Budget", priority="high", description="Quarterly numbers", tags=["work"],
                  due_date=datetime(2024, 3, 20)),
    ]


class TestFilterTasks:
    def test_empty_options_keep_everything(self, tasks):
        assert filter_tasks(tasks, FilterOptions()) == tasks

    def test_result_is_subset_and_idempotent(self, tasks):
        options = FilterOptions(priority=["high"], tags=["work"])
        once = filter_tasks(tasks, options)
        assert all(task in tasks for task in once)
        assert filter_tasks(once, options) == once

    def test_status(self, tasks):
        result = filter_tasks(tasks, FilterOptions(status=["completed"]))
        assert [t.title for t in result] == ["Call mom"]

    def test_tags_match_any(self, tasks):
        result = filter_tasks(tasks, FilterOptions(tags=["family", "work"]))
        assert [t.title for t in result] == ["Report", "Call mom", "Budget"]

    def test_conditions_combine(self, tasks):
        result = filter_tasks(tasks, FilterOptions(priority=["high"], search="quarterly"))
        assert [t.title for t in result] == ["Budget"]

    def test_search_is_case_insensitive(self, tasks):
        assert [t.title for t in filter_tasks(tasks, FilterOptions(search="GROC"))] == ["Groceries"]

    def test_search_matches_tags(self, tasks):
        assert [t.title for t in filter_tasks(tasks, FilterOptions(search="famil"))] == ["Call mom"]

    def test_date_range_covers_whole_days(self, tasks):
        options = FilterOptions(date_range=DateRange(date(2024, 3, 1), date(2024, 3, 5)))
        assert [t.title for t in filter_tasks(tasks, options)] == ["Report"]

    def test_undated_task_never_in_range(self, tasks):
        options = FilterOptions(date_range=DateRange(date(2000, 1, 1), date(2100, 1, 1)))
        assert "Call mom" not in [t.title for t in filter_tasks(tasks, options)]


class TestFilterEvents:
    def test_overlap(self):
        events = [
            make_event("Before", datetime(2024, 2, 25), datetime(2024, 2, 28)),
            make_event("Spanning", datetime(2024, 2, 28), datetime(2024, 3, 2)),
            make_event("Inside", datetime(2024, 3, 3, 10), datetime(2024, 3, 3, 11)),
            make_event("After", datetime(2024, 3, 8), datetime(2024, 3, 9)),
        ]
        options = FilterOptions(date_range=DateRange(date(2024, 3, 1), date(2024, 3, 7)))
        assert [e.title for e in filter_events(events, options)] == ["Spanning", "Inside"]


class TestSorting:
    def test_sort_by_date_puts_undated_last(self, tasks):
        assert [t.title for t in sort_by_date(tasks)] == ["Report", "Groceries", "Budget", "Call mom"]

    def test_sort_by_priority_is_stable(self, tasks):
        assert [t.title for t in sort_by_priority(tasks)] == ["Report", "Budget", "Call mom", "Groceries"]

    def test_sort_by_created_newest_first(self):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        items = [make_task(f"T{i}", created_at=base + timedelta(hours=i)) for i in range(3)]
        assert [t.title for t in sort_by_created(items)] == ["T2", "T1", "T0"]

    def test_events_sort_by_start(self):
        late = make_event("Late", datetime(2024, 5, 1))
        early = make_event("Early", datetime(2024, 4, 1))
        assert sort_by_date([late, early]) == [early, late]

    def test_sorting_does_not_mutate(self, tasks):
        original = list(tasks)
        sort_by_priority(tasks)
        assert tasks == original


def test_extract_tags():
    assert extract_tags("Plan trip #travel #Summer2024 now") == ["travel", "Summer2024"]
    assert extract_tags("") == []
