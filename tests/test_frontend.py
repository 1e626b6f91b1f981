"""
Tests for the terminal client: session persistence, API client, dashboard views.
"""

import json

import httpx
import pytest

from frontend.client import ApiError, AuthRequired, TaskboardClient
from frontend.dashboard import main
from frontend.session_store import SessionStore
from frontend.views import DashboardState, filter_tasks, initials, render_dashboard, task_stats

USER = {"user_id": "11111111-1111-1111-1111-111111111111", "name": "Ada Lovelace", "email": "a@x.com"}

TASKS = [
    {"task_id": "c3", "title": "Write report", "description": "Quarterly numbers", "completed": False},
    {"task_id": "b2", "title": "Buy milk", "description": None, "completed": True},
    {"task_id": "a1", "title": "Call mum", "description": "about the MILK order", "completed": False},
]


# ── helpers ────────────────────────────────────────────────────────────────────


class _FakeApi:
    """Records requests and answers with canned responses keyed by (method, path)."""

    def __init__(self, routes):
        self.routes = routes
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.routes.get((request.method, request.url.path), (404, {"detail": "Task not found"}))
        return httpx.Response(status, json=body)


def _client(tmp_path, routes, logged_in=True):
    store = SessionStore(tmp_path / "session.json")
    if logged_in:
        store.save("tok-123", USER)
    api = _FakeApi(routes)
    client = TaskboardClient(store, "http://api.test/api/v1", transport=httpx.MockTransport(api))
    return client, api, store


# ── Session store ──────────────────────────────────────────────────────────────


class TestSessionStore:
    def test_save_load_clear(self, tmp_path):
        store = SessionStore(tmp_path / "nested" / "session.json")
        assert store.load() is None

        store.save("tok", USER)
        assert store.token == "tok"
        assert store.user == USER
        assert SessionStore(tmp_path / "nested" / "session.json").token == "tok"

        store.clear()
        assert store.load() is None
        store.clear()

    def test_corrupt_file_is_logged_out(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json")
        assert SessionStore(path).load() is None


# ── API client ─────────────────────────────────────────────────────────────────


class TestClient:
    def test_bearer_token_attached(self, tmp_path):
        client, api, _ = _client(tmp_path, {("GET", "/api/v1/tasks"): (200, TASKS)})
        assert client.list_tasks() == TASKS
        assert api.requests[0].headers["Authorization"] == "Bearer tok-123"

    def test_register_persists_identity(self, tmp_path):
        routes = {("POST", "/api/v1/auth/register"): (201, {"token": "new-tok", "user": USER})}
        client, api, store = _client(tmp_path, routes, logged_in=False)

        user = client.register("Ada Lovelace", "a@x.com", "Str0ng!Pass", "Str0ng!Pass")
        assert user == USER
        assert store.token == "new-tok"
        assert json.loads(api.requests[0].content) == {
            "name": "Ada Lovelace", "email": "a@x.com", "password": "Str0ng!Pass",
        }
        assert "Authorization" not in api.requests[0].headers

    def test_register_checks_confirmation_and_strength_locally(self, tmp_path):
        client, api, _ = _client(tmp_path, {}, logged_in=False)
        with pytest.raises(ApiError, match="match"):
            client.register("Ada", "a@x.com", "Str0ng!Pass", "Str0ng!Pas")
        with pytest.raises(ApiError, match="stronger"):
            client.register("Ada", "a@x.com", "password", "password")
        assert api.requests == []

    def test_401_clears_session(self, tmp_path):
        routes = {("GET", "/api/v1/tasks"): (401, {"detail": "Invalid or expired token: token expired"})}
        client, _, store = _client(tmp_path, routes)
        with pytest.raises(AuthRequired):
            client.list_tasks()
        assert store.load() is None

    def test_not_logged_in_never_calls_api(self, tmp_path):
        client, api, _ = _client(tmp_path, {}, logged_in=False)
        with pytest.raises(AuthRequired):
            client.list_tasks()
        assert api.requests == []

    def test_blank_title_rejected_locally(self, tmp_path):
        client, api, _ = _client(tmp_path, {})
        with pytest.raises(ApiError):
            client.create_task("   ")
        assert api.requests == []

    def test_toggle_sends_inverse(self, tmp_path):
        routes = {("PUT", "/api/v1/tasks/b2"): (200, dict(TASKS[1], completed=False))}
        client, api, _ = _client(tmp_path, routes)
        task = client.toggle_complete(TASKS[1])
        assert task["completed"] is False
        assert json.loads(api.requests[0].content) == {"completed": False}

    def test_error_detail_surfaced(self, tmp_path):
        routes = {("DELETE", "/api/v1/tasks/a1"): (403, {"detail": "Not authorized to modify this task"})}
        client, _, store = _client(tmp_path, routes)
        with pytest.raises(ApiError) as info:
            client.delete_task("a1")
        assert info.value.status_code == 403
        assert info.value.detail == "Not authorized to modify this task"
        assert store.token == "tok-123"


# ── Views ──────────────────────────────────────────────────────────────────────


class TestViews:
    def test_filters(self):
        assert [t["task_id"] for t in filter_tasks(TASKS, DashboardState(filter="active"))] == ["c3", "a1"]
        assert [t["task_id"] for t in filter_tasks(TASKS, DashboardState(filter="completed"))] == ["b2"]
        assert len(filter_tasks(TASKS, DashboardState())) == 3

    def test_search_is_case_insensitive_over_title_and_description(self):
        found = filter_tasks(TASKS, DashboardState(search_term="milk"))
        assert [t["task_id"] for t in found] == ["b2", "a1"]

    def test_filter_and_search_combine(self):
        found = filter_tasks(TASKS, DashboardState(filter="active", search_term="MILK"))
        assert [t["task_id"] for t in found] == ["a1"]

    def test_invalid_state_rejected(self):
        with pytest.raises(ValueError):
            DashboardState(filter="archived")

    def test_stats(self):
        assert task_stats(TASKS) == {"total": 3, "completed": 1, "pending": 2, "progress": 33}
        assert task_stats([])["progress"] == 0

    @pytest.mark.parametrize(
        "name, expected",
        [("Ada Lovelace", "AL"), ("cher", "C"), ("Jean Luc Picard", "JL"), ("", "U"), (None, "U")],
    )
    def test_initials(self, name, expected):
        assert initials(name) == expected

    def test_render_empty_hint(self):
        out = render_dashboard([], DashboardState(search_term="zzz"), USER)
        assert "(AL) Ada Lovelace" in out
        assert "Try adjusting" in out

    @pytest.mark.parametrize("view", ["grid", "list"])
    def test_render_shows_filtered_tasks(self, view):
        out = render_dashboard(TASKS, DashboardState(filter="completed", view=view))
        assert "Buy milk" in out
        assert "Write report" not in out
        assert "33% Complete" in out


# ── CLI ────────────────────────────────────────────────────────────────────────


def test_cli_without_session_asks_for_login(tmp_path, capsys):
    code = main(["--api", "http://127.0.0.1:9/api/v1", "--session-file", str(tmp_path / "s.json"), "list"])
    assert code == 1
    assert "taskboard login" in capsys.readouterr().err
