"""
Input validators shared by the API and the client.
"""

from __future__ import annotations

import re
from typing import Optional

from core.exceptions import ValidationError

_STRENGTH_LABELS = {
    0: "Very Weak",
    1: "Weak",
    2: "Medium",
    3: "Strong",
    4: "Very Strong",
}


def password_strength(password: str) -> int:
    """
    Score a password from 0 to 4.

    One point each for: at least 8 characters, both lower and upper case
    letters, a digit, and a character that is neither a letter nor a digit.
    """
    score = 0
    if len(password) >= 8:
        score += 1
    if re.search(r"[a-z]", password) and re.search(r"[A-Z]", password):
        score += 1
    if re.search(r"\d", password):
        score += 1
    if re.search(r"[^a-zA-Z\d]", password):
        score += 1
    return score


def strength_label(score: int) -> str:
    return _STRENGTH_LABELS.get(score, _STRENGTH_LABELS[0])


def normalize_email(email: str) -> str:
    email = email.strip().lower()
    if "@" not in email or email.startswith("@") or email.endswith("@"):
        raise ValidationError("email: not a valid email address")
    return email


def validate_title(title: Optional[str]) -> str:
    """Strip *title* and reject it when nothing is left."""
    if title is None or not title.strip():
        raise ValidationError("title: must not be empty")
    return title.strip()


def clean_description(description: Optional[str]) -> Optional[str]:
    """Blank descriptions are stored as absent."""
    if description is None:
        return None
    description = description.strip()
    return description or None
