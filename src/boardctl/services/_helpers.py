"""Shared service-layer helper functions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from boardctl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from boardctl.domain.validation import ValidationResult


def not_found(op: str, level: str, entity_id: str) -> ServiceResult:
    """Failed result for an id that does not resolve at *level*."""
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(
            code="NOT_FOUND",
            message=f"{level.capitalize()} not found: {entity_id}",
            detail={"level": level, "id": entity_id},
        ),
    )


def invalid(op: str, vr: ValidationResult) -> ServiceResult:
    """Failed result carrying per-field validation messages."""
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(
            code="VALIDATION_FAILED",
            message=vr.message,
            detail={"fields": vr.errors},
        ),
    )
