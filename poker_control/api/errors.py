from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status

from poker_control.domain import DomainValidationError, InvalidAmount, InvalidTransition


def api_error(
    *,
    code: str,
    message: str,
    details: Any | None = None,
    status_code: int = status.HTTP_400_BAD_REQUEST,
) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={
            "code": code,
            "message": message,
            "details": details,
        },
    )


def domain_error(exc: DomainValidationError, **details: Any) -> HTTPException:
    if isinstance(exc, InvalidTransition):
        return api_error(
            code="invalid_transition",
            message=str(exc),
            details=details or None,
            status_code=status.HTTP_409_CONFLICT,
        )
    if isinstance(exc, InvalidAmount):
        return api_error(code="invalid_amount", message=str(exc), details=details or None)
    return api_error(code="validation_error", message=str(exc), details=details or None)
