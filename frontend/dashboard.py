"""
Terminal dashboard for Taskboard.

Usage:
    taskboard register --name "Ada" --email ada@example.com
    taskboard login --email ada@example.com
    taskboard list [--filter active] [--search milk] [--view list]
    taskboard add "Buy milk" [-d "2 litres"]
    taskboard done <task-id-or-prefix>
    taskboard delete <task-id-or-prefix>
"""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from typing import Any, Dict, List, Optional

from config.settings import config
from frontend.client import ApiError, AuthRequired, TaskboardClient
from frontend.session_store import SessionStore
from frontend.views import FILTERS, VIEWS, DashboardState, render_dashboard


def _resolve_task(tasks: List[Dict[str, Any]], ref: str) -> Dict[str, Any]:
    """Find a task by full id or unique id prefix."""
    matches = [t for t in tasks if str(t["task_id"]).startswith(ref)]
    if len(matches) != 1:
        raise ApiError(404, "Task not found" if not matches else f"'{ref}' matches several tasks")
    return matches[0]


def _password(args: argparse.Namespace, confirm: bool) -> tuple[str, Optional[str]]:
    password = args.password or getpass.getpass("Password: ")
    if not confirm:
        return password, None
    return password, args.confirm or getpass.getpass("Confirm password: ")


def cmd_register(client: TaskboardClient, args: argparse.Namespace) -> str:
    password, confirm = _password(args, confirm=True)
    user = client.register(args.name, args.email, password, confirm)
    return f"Welcome, {user['name']}!"


def cmd_login(client: TaskboardClient, args: argparse.Namespace) -> str:
    password, _ = _password(args, confirm=False)
    user = client.login(args.email, password)
    return f"Logged in as {user['name']}."


def cmd_logout(client: TaskboardClient, args: argparse.Namespace) -> str:
    client.logout()
    return "Logged out."


def cmd_whoami(client: TaskboardClient, args: argparse.Namespace) -> str:
    user = client.whoami()
    return f"{user['name']} <{user['email']}>"


def cmd_list(client: TaskboardClient, args: argparse.Namespace) -> str:
    state = DashboardState(filter=args.filter, search_term=args.search, view=args.view)
    return render_dashboard(client.list_tasks(), state, client.store.user)


def cmd_add(client: TaskboardClient, args: argparse.Namespace) -> str:
    task = client.create_task(args.title, args.description)
    return f"Added: {task['title']} ({task['task_id']})"


def cmd_done(client: TaskboardClient, args: argparse.Namespace) -> str:
    task = client.toggle_complete(_resolve_task(client.list_tasks(), args.task))
    return f"{'Completed' if task['completed'] else 'Reopened'}: {task['title']}"


def cmd_edit(client: TaskboardClient, args: argparse.Namespace) -> str:
    task = _resolve_task(client.list_tasks(), args.task)
    fields: Dict[str, Any] = {}
    if args.title is not None:
        fields["title"] = args.title
    if args.description is not None:
        fields["description"] = args.description
    if not fields:
        return "Nothing to change."
    task = client.update_task(task["task_id"], **fields)
    return f"Updated: {task['title']}"


def cmd_delete(client: TaskboardClient, args: argparse.Namespace) -> str:
    task = _resolve_task(client.list_tasks(), args.task)
    if not args.yes and input(f"Delete '{task['title']}'? [y/N] ").strip().lower() != "y":
        return "Cancelled."
    return client.delete_task(task["task_id"])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="taskboard", description="Taskboard terminal client")
    parser.add_argument("--api", default=config.api_base_url, help="API base URL")
    parser.add_argument("--session-file", default=config.session_file)
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("register", help="create an account")
    p.add_argument("--name", required=True)
    p.add_argument("--email", required=True)
    p.add_argument("--password")
    p.add_argument("--confirm")
    p.set_defaults(func=cmd_register)

    p = sub.add_parser("login", help="log in")
    p.add_argument("--email", required=True)
    p.add_argument("--password")
    p.set_defaults(func=cmd_login)

    sub.add_parser("logout", help="forget the stored session").set_defaults(func=cmd_logout)
    sub.add_parser("whoami", help="show the logged-in account").set_defaults(func=cmd_whoami)

    p = sub.add_parser("list", help="show the dashboard")
    p.add_argument("--filter", choices=FILTERS, default="all")
    p.add_argument("--search", default="")
    p.add_argument("--view", choices=VIEWS, default="grid")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("add", help="create a task")
    p.add_argument("title")
    p.add_argument("-d", "--description")
    p.set_defaults(func=cmd_add)

    p = sub.add_parser("done", help="toggle a task's completion")
    p.add_argument("task")
    p.set_defaults(func=cmd_done)

    p = sub.add_parser("edit", help="change a task's title or description")
    p.add_argument("task")
    p.add_argument("--title")
    p.add_argument("-d", "--description")
    p.set_defaults(func=cmd_edit)

    p = sub.add_parser("delete", help="delete a task")
    p.add_argument("task")
    p.add_argument("-y", "--yes", action="store_true", help="skip confirmation")
    p.set_defaults(func=cmd_delete)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s  %(name)s — %(message)s")

    with TaskboardClient(SessionStore(args.session_file), args.api) as client:
        try:
            print(args.func(client, args))
        except AuthRequired as exc:
            print(f"{exc.detail}. Run `taskboard login` first.", file=sys.stderr)
            return 1
        except ApiError as exc:
            print(f"Error: {exc.detail}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
