"""Field and structural validation for board, column, and card payloads.

Field rules check presence and minimum length. Structural rules check
case-insensitive title uniqueness within the relevant scope (all boards
for a board title, the owning board for a column title). Card content has
no uniqueness rule.

INVARIANT: Validation runs before any mutation. A failed result means the
snapshot has not been touched.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from boardctl.domain.models import Board, Column

BOARD_TITLE_EXISTS = "A board with this title already exists"
COLUMN_TITLE_EXISTS = "A column with this title already exists in this board"


@dataclass(frozen=True)
class FieldRules:
    """Minimum lengths for each validated field."""

    board_title_min: int = 2
    column_title_min: int = 2
    card_content_min: int = 3


@dataclass(frozen=True)
class ValidationResult:
    """Per-field validation outcome.

    ``errors`` maps a payload field name (``"title"``, ``"content"``) to the
    messages raised against it.
    """

    errors: dict[str, list[str]] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        return "; ".join(msg for msgs in self.errors.values() for msg in msgs)


def check_text(value: object, label: str, minimum: int) -> list[str]:
    """Return the field-rule violations for a required string of *minimum* length."""
    if not isinstance(value, str):
        return [f"{label} must be a string"]
    if not value.strip():
        return [f"{label} is required"]
    if len(value) < minimum:
        return [f"{label} must be at least {minimum} characters"]
    return []


def _title_taken(
    title: str,
    entries: Iterable[Board] | Iterable[Column],
    exclude_id: str | None,
) -> bool:
    wanted = title.lower()
    return any(e.title.lower() == wanted and e.id != exclude_id for e in entries)


def validate_board_title(
    title: object,
    boards: Iterable[Board],
    *,
    rules: FieldRules | None = None,
    exclude_id: str | None = None,
) -> ValidationResult:
    """Validate a board title for create (or rename, with *exclude_id*)."""
    rules = rules or FieldRules()
    errors = check_text(title, "Board title", rules.board_title_min)
    if not errors and _title_taken(str(title), boards, exclude_id):
        errors = [BOARD_TITLE_EXISTS]
    return ValidationResult(errors={"title": errors} if errors else {})


def validate_column_title(
    title: object,
    board: Board,
    *,
    rules: FieldRules | None = None,
    exclude_id: str | None = None,
) -> ValidationResult:
    """Validate a column title against its owning board's other columns."""
    rules = rules or FieldRules()
    errors = check_text(title, "Column title", rules.column_title_min)
    if not errors and _title_taken(str(title), board.columns, exclude_id):
        errors = [COLUMN_TITLE_EXISTS]
    return ValidationResult(errors={"title": errors} if errors else {})


def validate_card_content(
    content: object,
    *,
    rules: FieldRules | None = None,
) -> ValidationResult:
    """Validate card content. Duplicate content across cards is allowed."""
    rules = rules or FieldRules()
    errors = check_text(content, "Card content", rules.card_content_min)
    return ValidationResult(errors={"content": errors} if errors else {})
