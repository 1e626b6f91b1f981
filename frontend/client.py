"""
HTTP client for the Taskboard API.

Attaches the stored bearer token to every request.  A 401 from the server
clears the stored session and raises ``AuthRequired`` so the caller can
send the user back to the login screen.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from config.settings import config
from frontend.session_store import SessionStore
from utils.validators import password_strength, strength_label

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{status_code}: {detail}")


class AuthRequired(ApiError):
    def __init__(self, detail: str = "Please log in"):
        super().__init__(401, detail)


class TaskboardClient:
    def __init__(
        self,
        store: SessionStore,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.store = store
        self._http = httpx.Client(
            base_url=base_url or config.api_base_url,
            timeout=timeout or config.request_timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "TaskboardClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ── plumbing ──────────────────────────────────────────────────────

    def _headers(self, authenticated: bool) -> Dict[str, str]:
        if not authenticated:
            return {}
        token = self.store.token
        if not token:
            raise AuthRequired()
        return {"Authorization": f"Bearer {token}"}

    def _request(self, method: str, path: str, *, authenticated: bool = True, **kwargs) -> Any:
        try:
            resp = self._http.request(method, path, headers=self._headers(authenticated), **kwargs)
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, path, exc)
            raise ApiError(0, f"Could not reach server: {exc}") from exc

        if resp.status_code == 401 and authenticated:
            self.store.clear()
            raise AuthRequired(_detail(resp) or "Session expired, please log in again")
        if resp.is_error:
            raise ApiError(resp.status_code, _detail(resp) or resp.reason_phrase)
        return resp.json()

    # ── auth ──────────────────────────────────────────────────────────

    def register(self, name: str, email: str, password: str, confirm_password: str) -> Dict[str, Any]:
        if password != confirm_password:
            raise ApiError(400, "Passwords don't match!")
        score = password_strength(password)
        if score < config.min_password_strength:
            raise ApiError(400, f"Please choose a stronger password ({strength_label(score)})")

        data = self._request(
            "POST", "/auth/register", authenticated=False,
            json={"name": name, "email": email, "password": password},
        )
        self.store.save(data["token"], data["user"])
        return data["user"]

    def login(self, email: str, password: str) -> Dict[str, Any]:
        data = self._request(
            "POST", "/auth/login", authenticated=False,
            json={"email": email, "password": password},
        )
        self.store.save(data["token"], data["user"])
        return data["user"]

    def logout(self) -> None:
        self.store.clear()

    def whoami(self) -> Dict[str, Any]:
        return self._request("GET", "/auth/me")

    # ── tasks ─────────────────────────────────────────────────────────

    def list_tasks(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/tasks")

    def create_task(self, title: str, description: Optional[str] = None) -> Dict[str, Any]:
        if not title or not title.strip():
            raise ApiError(400, "title: must not be empty")
        body: Dict[str, Any] = {"title": title.strip()}
        if description and description.strip():
            body["description"] = description.strip()
        return self._request("POST", "/tasks", json=body)

    def update_task(self, task_id: str, **fields: Any) -> Dict[str, Any]:
        return self._request("PUT", f"/tasks/{task_id}", json=fields)

    def toggle_complete(self, task: Dict[str, Any]) -> Dict[str, Any]:
        return self.update_task(task["task_id"], completed=not task["completed"])

    def delete_task(self, task_id: str) -> str:
        return self._request("DELETE", f"/tasks/{task_id}")["message"]


def _detail(resp: httpx.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("message")
        return str(detail) if detail else None
    return None
