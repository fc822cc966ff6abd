"""Identifier generation and validation.

IDs are 21-character random tokens over the URL-safe alphabet
(``A-Za-z0-9_-``), the same shape nanoid produces.

INVARIANT: IDs are permanent. Once generated, an ID never changes.
"""

from __future__ import annotations

import re
import secrets

ID_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_-"
ID_LENGTH = 21

ID_PATTERN: re.Pattern[str] = re.compile(rf"^[A-Za-z0-9_-]{{{ID_LENGTH}}}$")


def generate_id(existing: set[str] | None = None) -> str:
    """Return a new random ID, retrying on the (unlikely) clash with *existing*."""
    taken = existing or set()
    while True:
        candidate = "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH))
        # A leading "-" would read as an option on the command line.
        if candidate not in taken and not candidate.startswith("-"):
            return candidate


def validate_id(entity_id: str) -> bool:
    """Check whether *entity_id* has the shape of a generated ID."""
    return ID_PATTERN.match(entity_id) is not None
