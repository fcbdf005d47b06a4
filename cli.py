#!/usr/bin/env python3
"""TaskSaver CLI."""
from __future__ import annotations

import argparse
import getpass
import logging
import sys
from datetime import date

from dotenv import load_dotenv

from tasksaver.calendar import VIEW_TYPES, CalendarView, build_day_schedule, build_grid
from tasksaver.client import ApiClient, ApiError, LocalCache, build_data_source
from tasksaver.config import ConfigError, Settings, load_settings
from tasksaver.dates import parse_datetime
from tasksaver.errors import TaskSaverError
from tasksaver.filtering import SORTERS, FilterOptions, extract_tags, filter_events, filter_tasks
from tasksaver.items import PRIORITIES
from tasksaver.messages import FOLDERS
from tasksaver.notifications import check_overdue_items, check_upcoming_items
from tasksaver.views import (
    format_alerts,
    format_day_schedule,
    format_event_rows,
    format_grid,
    format_message_rows,
    format_task_rows,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tasksaver",
        description="Tasks, events, calendar and inbox from the terminal.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    register_parser = subparsers.add_parser("register", help="Create an account on the server.")
    register_parser.add_argument("name")
    register_parser.add_argument("email")

    login_parser = subparsers.add_parser("login", help="Log in and remember the session.")
    login_parser.add_argument("email")

    subparsers.add_parser("logout", help="Forget the saved session.")

    for kind in ("tasks", "events"):
        list_parser = subparsers.add_parser(kind, help=f"List {kind} with optional filters.")
        list_parser.add_argument("--status", action="append", help="Repeat to allow several.")
        list_parser.add_argument("--priority", action="append", choices=PRIORITIES)
        list_parser.add_argument("--tag", action="append", dest="tags")
        list_parser.add_argument("--search", help="Case-insensitive title, description or tag match.")
        list_parser.add_argument(
            "--sort",
            choices=sorted(SORTERS),
            default="date",
            help="Order of the listing.",
        )

    add_task_parser = subparsers.add_parser("add-task", help="Create a task. #tags in the title are kept.")
    add_task_parser.add_argument("title")
    add_task_parser.add_argument("--due", help="Due date, YYYY-MM-DD.")
    add_task_parser.add_argument("--time", help="Due time, HH:MM.")
    add_task_parser.add_argument("--priority", choices=PRIORITIES, default="medium")
    add_task_parser.add_argument("--description", default="")

    add_event_parser = subparsers.add_parser("add-event", help="Create an event.")
    add_event_parser.add_argument("title")
    add_event_parser.add_argument("start", help="Start date, YYYY-MM-DD.")
    add_event_parser.add_argument("end", nargs="?", help="End date; defaults to the start date.")
    add_event_parser.add_argument("--start-time")
    add_event_parser.add_argument("--end-time")
    add_event_parser.add_argument("--priority", choices=PRIORITIES, default="medium")
    add_event_parser.add_argument("--description", default="")

    calendar_parser = subparsers.add_parser("calendar", help="Show a month, week or day view.")
    calendar_parser.add_argument("--view", choices=VIEW_TYPES, default="month")
    calendar_parser.add_argument("--date", help="Any day inside the period to show.")

    inbox_parser = subparsers.add_parser("inbox", help="List messages in a folder.")
    inbox_parser.add_argument("--folder", choices=sorted(FOLDERS), default="inbox")
    inbox_parser.add_argument("--page", type=int, default=1)
    inbox_parser.add_argument("--limit", type=int, default=20)

    subparsers.add_parser("notifications", help="Show overdue and upcoming items.")

    serve_parser = subparsers.add_parser("serve", help="Run the API server.")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--reload", action="store_true")

    return parser


# =============================================================================
# Session commands
# =============================================================================

def _cmd_register(settings: Settings, name: str, email: str) -> int:
    password = getpass.getpass("Password: ")
    api = ApiClient(settings.api_base_url, timeout=settings.request_timeout)
    try:
        user = api.register(name, email, password)
    except ApiError as exc:
        print(f"Registration failed: {exc.message}", file=sys.stderr)
        return 1
    print(f"Registered {user['email']}. Run 'tasksaver login {user['email']}' next.")
    return 0


def _cmd_login(settings: Settings, email: str) -> int:
    password = getpass.getpass("Password: ")
    api = ApiClient(settings.api_base_url, timeout=settings.request_timeout)
    try:
        user = api.login(email, password)
    except ApiError as exc:
        print(f"Login failed: {exc.message}", file=sys.stderr)
        return 1
    LocalCache(settings.cache_dir).save_session(api.token, user)
    print(f"Logged in as {user['name']} <{user['email']}>.")
    return 0


def _cmd_logout(settings: Settings) -> int:
    cache = LocalCache(settings.cache_dir)
    session = cache.load_session()
    if session and session.get("token"):
        api = ApiClient(settings.api_base_url, token=session["token"], timeout=settings.request_timeout)
        try:
            api.logout()
        except ApiError as exc:
            print(f"Server logout failed ({exc.message}); clearing the local session anyway.")
    cache.clear_session()
    cache.clear()
    print("Logged out.")
    return 0


# =============================================================================
# Views
# =============================================================================

def _filter_options(args: argparse.Namespace) -> FilterOptions:
    return FilterOptions(
        status=args.status or [],
        priority=args.priority or [],
        tags=args.tags or [],
        search=args.search or "",
    )


def _cmd_list(settings: Settings, args: argparse.Namespace) -> int:
    result = build_data_source(settings).load_all()
    if result.warning:
        print(result.warning)

    options = _filter_options(args)
    sort = SORTERS[args.sort]
    if args.command == "tasks":
        print(format_task_rows(sort(filter_tasks(result.tasks, options))))
    else:
        print(format_event_rows(sort(filter_events(result.events, options))))
    return 0


def _cmd_add_task(settings: Settings, args: argparse.Namespace) -> int:
    fields = {
        "title": args.title,
        "description": args.description,
        "priority": args.priority,
        "tags": extract_tags(args.title),
        "due_date": parse_datetime(args.due) if args.due else None,
        "due_time": args.time,
    }
    task = build_data_source(settings).create_task(fields)
    print(f"Created task {task.id}: {task.title}")
    return 0


def _cmd_add_event(settings: Settings, args: argparse.Namespace) -> int:
    start = parse_datetime(args.start)
    fields = {
        "title": args.title,
        "description": args.description,
        "priority": args.priority,
        "tags": extract_tags(args.title),
        "start_date": start,
        "end_date": parse_datetime(args.end) if args.end else start,
        "start_time": args.start_time,
        "end_time": args.end_time,
    }
    event = build_data_source(settings).create_event(fields)
    print(f"Created event {event.id}: {event.title}")
    return 0


def _cmd_calendar(settings: Settings, view_type: str, day: str | None) -> int:
    current = parse_datetime(day).date() if day else date.today()
    result = build_data_source(settings).load_all()
    if result.warning:
        print(result.warning)

    if view_type == "day":
        print(format_day_schedule(current, build_day_schedule(current, result.tasks, result.events)))
    else:
        view = CalendarView(view_type, current)
        print(f"{current:%B %Y}")
        print(format_grid(build_grid(view, result.tasks, result.events)))
    return 0


def _cmd_inbox(settings: Settings, folder: str, page: int, limit: int) -> int:
    result = build_data_source(settings).list_messages(folder=folder, limit=limit, page=page)
    print(format_message_rows(result))
    return 0


def _cmd_notifications(settings: Settings) -> int:
    result = build_data_source(settings).load_all()
    if result.warning:
        print(result.warning)
    overdue = check_overdue_items(result.tasks, result.events)
    upcoming = check_upcoming_items(result.tasks, result.events)
    print(format_alerts(overdue, upcoming))
    return 0


def _cmd_serve(host: str, port: int, reload: bool) -> int:
    import uvicorn

    uvicorn.run("api.main:app", host=host, port=port, reload=reload)
    return 0


def _dispatch(settings: Settings, args: argparse.Namespace) -> int:
    if args.command == "register":
        return _cmd_register(settings, args.name, args.email)
    if args.command == "login":
        return _cmd_login(settings, args.email)
    if args.command == "logout":
        return _cmd_logout(settings)
    if args.command in ("tasks", "events"):
        return _cmd_list(settings, args)
    if args.command == "add-task":
        return _cmd_add_task(settings, args)
    if args.command == "add-event":
        return _cmd_add_event(settings, args)
    if args.command == "calendar":
        return _cmd_calendar(settings, args.view, args.date)
    if args.command == "inbox":
        return _cmd_inbox(settings, args.folder, args.page, args.limit)
    if args.command == "notifications":
        return _cmd_notifications(settings)
    if args.command == "serve":
        return _cmd_serve(args.host, args.port, args.reload)
    return 2


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        code = _dispatch(settings, args)
    except ApiError as exc:
        print(f"Request failed: {exc.message}", file=sys.stderr)
        return 1
    except TaskSaverError as exc:
        print(exc.message, file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"Invalid date: {exc}", file=sys.stderr)
        return 1

    if code == 2:
        parser.error(f"Unknown command: {args.command}")
    return code


if __name__ == "__main__":
    raise SystemExit(main())
