"""Tests for the text views and the CLI in local data mode."""
from __future__ import annotations

from datetime import date, datetime

import pytest

import cli
from conftest import make_event, make_task
from tasksaver.calendar import CalendarView, build_day_schedule, build_grid
from tasksaver.client import LocalCache
from tasksaver.messages import MessagePage
from tasksaver.notifications import ItemAlerts
from tasksaver.views import (
    WEEKDAY_HEADER,
    format_alerts,
    format_day_schedule,
    format_grid,
    format_message_rows,
    format_task_rows,
)


class TestViews:
    def test_task_rows(self):
        task = make_task("Report", id="abcdef123456", due_date=datetime(2024, 3, 10), due_time="09:00",
                         tags=["work"])
        lines = format_task_rows([task]).splitlines()
        assert lines[0] == "ID | Title | Status | Priority | Due | Tags"
        assert lines[1] == "abcdef12 | Report | pending | medium | 2024-03-10 09:00 | work"

    def test_grid_shape(self):
        event = make_event("Trip", datetime(2024, 3, 4), datetime(2024, 3, 5))
        cells = build_grid(CalendarView("month", date(2024, 3, 1)), [], [event], today=date(2024, 3, 4))
        lines = format_grid(cells).splitlines()
        assert lines[0] == WEEKDAY_HEADER
        assert len(lines) == 1 + len(cells) // 7
        assert "4*(1)" in lines[2]
        assert "[25]" in lines[1]

    def test_day_schedule(self):
        event = make_event("Lunch", datetime(2024, 3, 12), start_time="12:00", end_time="13:00")
        slots = build_day_schedule(date(2024, 3, 12), [], [event])
        text = format_day_schedule(date(2024, 3, 12), slots)
        assert text.splitlines()[0] == "Tuesday, March 12, 2024"
        assert "12 PM | [event] Lunch (12:00 - 13:00)" in text

    def test_message_rows_empty(self):
        text = format_message_rows(MessagePage(messages=[], page=1, limit=20, total=0))
        assert text.splitlines()[-1] == "Page 1 of 1 (0 messages)"

    def test_alerts(self):
        task = make_task("Report", due_date=datetime(2024, 3, 11))
        text = format_alerts(ItemAlerts(tasks=[task]), ItemAlerts(), today=date(2024, 3, 12))
        assert text.splitlines() == ["Overdue (1):", "  task  Report (due Yesterday)"]
        assert format_alerts(ItemAlerts(), ItemAlerts()) == "Nothing overdue or coming up."


@pytest.fixture
def local_env(monkeypatch, tmp_path):
    monkeypatch.setenv("TASKSAVER_DATA_MODE", "local")
    monkeypatch.setenv("TASKSAVER_CACHE_DIR", str(tmp_path / "cache"))
    return tmp_path


class TestCli:
    def test_add_and_list_tasks(self, local_env, capsys):
        assert cli.main(["add-task", "Plan trip #travel", "--due", "2024-03-10", "--priority", "high"]) == 0
        assert cli.main(["add-task", "Buy milk"]) == 0
        capsys.readouterr()

        assert cli.main(["tasks", "--tag", "travel"]) == 0
        out = capsys.readouterr().out
        assert "Plan trip #travel" in out
        assert "Buy milk" not in out
        assert "| travel" in out

    def test_add_event_and_calendar(self, local_env, capsys):
        assert cli.main(["add-event", "Offsite", "2024-03-12", "2024-03-13", "--start-time", "09:00"]) == 0
        capsys.readouterr()

        assert cli.main(["calendar", "--view", "day", "--date", "2024-03-12"]) == 0
        assert "[event] Offsite" in capsys.readouterr().out

        assert cli.main(["calendar", "--date", "2024-03-12"]) == 0
        out = capsys.readouterr().out
        assert out.splitlines()[0] == "March 2024"
        assert "12(1)" in out

    def test_inbox_empty(self, local_env, capsys):
        assert cli.main(["inbox", "--folder", "sent"]) == 0
        assert "(0 messages)" in capsys.readouterr().out

    def test_bad_date(self, local_env, capsys):
        assert cli.main(["add-task", "Oops", "--due", "someday"]) == 1
        assert "Invalid date" in capsys.readouterr().err

    def test_notifications(self, local_env, capsys):
        assert cli.main(["notifications"]) == 0
        assert "Nothing overdue or coming up." in capsys.readouterr().out

    def test_logout_drops_cached_data(self, local_env, capsys):
        cache = LocalCache(local_env / "cache")
        cache.save("tasks", [{"id": "t1", "title": "Alice private"}])
        assert cli.main(["logout"]) == 0
        assert "Logged out." in capsys.readouterr().out
        assert cache.load("tasks") == []
        assert cache.load_session() is None

    def test_bad_config(self, local_env, monkeypatch, capsys):
        monkeypatch.setenv("TASKSAVER_DATA_MODE", "carrier-pigeon")
        assert cli.main(["tasks"]) == 1
        assert "Configuration error" in capsys.readouterr().err
