"""Helpers shared by the API routers."""

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from app.core.facade import OperationFacade
from app.models.operations import OperationResult


def get_facade(request: Request) -> OperationFacade:
    return request.app.state.facade


def result_response(result: OperationResult, **extra: Any) -> JSONResponse:
    """Relay a CLI result; failures keep the tool's output in the body."""
    body = result.to_dict()
    if result.success:
        body.update(extra)
        return JSONResponse(status_code=200, content=body)
    return JSONResponse(status_code=500, content=body)
