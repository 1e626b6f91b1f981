"""
Client-side identity that survives between runs.

Holds the bearer token and the user record returned by register/login.
Only the client reads this file; the API only ever sees the token.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class SessionStore:
    def __init__(self, path: str | Path):
        self.path = Path(os.path.expanduser(str(path)))

    def load(self) -> Optional[Dict[str, Any]]:
        """Return ``{"token", "user"}`` or ``None`` when logged out."""
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning("Ignoring unreadable session file %s", self.path)
            return None
        if not isinstance(data, dict) or not data.get("token"):
            return None
        return data

    def save(self, token: str, user: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"token": token, "user": user}), encoding="utf-8")
        try:
            os.chmod(self.path, 0o600)
        except OSError:
            logger.debug("Could not restrict permissions on %s", self.path)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()

    @property
    def token(self) -> Optional[str]:
        data = self.load()
        return data["token"] if data else None

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        data = self.load()
        return data.get("user") if data else None
