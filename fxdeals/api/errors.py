from __future__ import annotations

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from fxdeals.errors import FxDealsError

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "validation": 400,
    "duplicate_deal": 409,
    "not_found": 404,
}

TITLE_BY_KIND = {
    "validation": "Validation Error",
    "duplicate_deal": "Duplicate Deal",
    "not_found": "Not Found",
    "store": "Internal Error",
    "internal": "Internal Error",
}

INTERNAL_ERROR_DETAIL = "An unexpected error occurred. Please try again later."


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details response."""

    type: str = "about:blank"
    title: str
    status: int
    detail: str
    instance: str | None = None
    errors: list[dict] | None = None


def _problem_response(problem: ProblemDetail) -> JSONResponse:
    return JSONResponse(
        status_code=problem.status, content=problem.model_dump(exclude_none=True)
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    detail_parts = []
    error_list = []
    for err in exc.errors():
        loc = " -> ".join(str(l) for l in err["loc"] if l not in ("body", "query", "path"))
        msg = err["msg"]
        detail_parts.append(f"{loc}: {msg}")
        error_list.append({"field": loc, "message": msg, "type": err["type"]})

    logger.warning("Request validation failed: %s", "; ".join(detail_parts))
    return _problem_response(
        ProblemDetail(
            type="urn:fxdeals:error:validation",
            title="Validation Error",
            status=400,
            detail="; ".join(detail_parts),
            instance=str(request.url),
            errors=error_list,
        )
    )


async def deal_error_handler(request: Request, exc: FxDealsError) -> JSONResponse:
    status = STATUS_BY_KIND.get(exc.kind, 500)
    if status == 500:
        logger.error("Deal operation failed: %s", exc, exc_info=exc)
        detail = INTERNAL_ERROR_DETAIL
    else:
        detail = str(exc)

    return _problem_response(
        ProblemDetail(
            type=f"urn:fxdeals:error:{exc.kind}",
            title=TITLE_BY_KIND.get(exc.kind, "Internal Error"),
            status=status,
            detail=detail,
            instance=str(request.url),
        )
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unexpected error occurred: %s", exc, exc_info=exc)
    return _problem_response(
        ProblemDetail(
            type="urn:fxdeals:error:internal",
            title="Internal Error",
            status=500,
            detail=INTERNAL_ERROR_DETAIL,
            instance=str(request.url),
        )
    )
