"""
Dashboard presentation helpers.

Filtering and search here are display-only: they narrow what is shown and
never change what the API returns.
"""

from __future__ import annotations

import textwrap
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

FILTERS = ("all", "active", "completed")
VIEWS = ("grid", "list")


@dataclass
class DashboardState:
    """Ephemeral UI state; lives only as long as one render."""

    filter: str = "all"
    search_term: str = ""
    view: str = "grid"

    def __post_init__(self):
        if self.filter not in FILTERS:
            raise ValueError(f"filter must be one of {', '.join(FILTERS)}")
        if self.view not in VIEWS:
            raise ValueError(f"view must be one of {', '.join(VIEWS)}")


def _matches_filter(task: Dict[str, Any], filter_: str) -> bool:
    if filter_ == "active":
        return not task.get("completed")
    if filter_ == "completed":
        return bool(task.get("completed"))
    return True


def _matches_search(task: Dict[str, Any], term: str) -> bool:
    term = term.lower()
    if term in (task.get("title") or "").lower():
        return True
    return term in (task.get("description") or "").lower()


def filter_tasks(tasks: Iterable[Dict[str, Any]], state: DashboardState) -> List[Dict[str, Any]]:
    """Tasks that pass both the completion filter and the search term, order kept."""
    return [
        t for t in tasks
        if _matches_filter(t, state.filter) and _matches_search(t, state.search_term)
    ]


def task_stats(tasks: List[Dict[str, Any]]) -> Dict[str, Any]:
    total = len(tasks)
    completed = sum(1 for t in tasks if t.get("completed"))
    return {
        "total": total,
        "completed": completed,
        "pending": total - completed,
        "progress": round(completed / total * 100) if total else 0,
    }


def initials(name: str | None) -> str:
    if not name or not name.strip():
        return "U"
    return "".join(word[0] for word in name.split())[:2].upper()


def _checkbox(task: Dict[str, Any]) -> str:
    return "[x]" if task.get("completed") else "[ ]"


def _render_list(tasks: List[Dict[str, Any]]) -> List[str]:
    lines = []
    for t in tasks:
        lines.append(f"{_checkbox(t)} {t['title']}  ({t['task_id']})")
        if t.get("description"):
            lines.extend("      " + ln for ln in textwrap.wrap(t["description"], 70))
    return lines


def _render_grid(tasks: List[Dict[str, Any]], width: int = 36) -> List[str]:
    cards = []
    for t in tasks:
        body = textwrap.shorten(t.get("description") or "", width=width - 4, placeholder="…")
        title = textwrap.shorten(f"{_checkbox(t)} {t['title']}", width=width - 4, placeholder="…")
        cards.append([
            "+" + "-" * (width - 2) + "+",
            "| " + title.ljust(width - 4) + " |",
            "| " + body.ljust(width - 4) + " |",
            "| " + str(t["task_id"])[:8].ljust(width - 4) + " |",
            "+" + "-" * (width - 2) + "+",
        ])
    lines = []
    for i in range(0, len(cards), 2):
        row = cards[i:i + 2]
        for parts in zip(*row):
            lines.append("  ".join(parts))
    return lines


def render_dashboard(
    tasks: List[Dict[str, Any]],
    state: DashboardState,
    user: Dict[str, Any] | None = None,
) -> str:
    stats = task_stats(tasks)
    shown = filter_tasks(tasks, state)

    lines = []
    if user:
        lines.append(f"({initials(user.get('name'))}) {user.get('name', '')} <{user.get('email', '')}>")
    lines.append(
        f"Total {stats['total']}  |  Completed {stats['completed']}  |  "
        f"Pending {stats['pending']}  |  {stats['progress']}% Complete"
    )
    lines.append("")

    if not shown:
        lines.append("No tasks to show.")
        if state.search_term or state.filter != "all":
            lines.append("Try adjusting the search or filter.")
        else:
            lines.append("Create your first task with `taskboard add`.")
    elif state.view == "grid":
        lines.extend(_render_grid(shown))
    else:
        lines.extend(_render_list(shown))
    return "\n".join(lines)
