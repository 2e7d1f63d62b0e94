"""Admin login endpoint."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from label_admin.api.models import LoginRequest
from label_admin.errors import DashboardError, ValidationError

if TYPE_CHECKING:
    from label_admin.containers import AppContainer

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login")
async def login(request: Request) -> JSONResponse:
    """Check the posted credentials against the configured admin pair."""
    container: AppContainer = request.app.state.container
    try:
        credentials = await _read_credentials(request)
        container.auth_service.login(credentials.username, credentials.password)
    except DashboardError as exc:
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.message},
        )
    return JSONResponse({"success": True, "message": "Login successful"})


async def _read_credentials(request: Request) -> LoginRequest:
    try:
        return LoginRequest.model_validate_json(await request.body())
    except PydanticValidationError as exc:
        raise ValidationError("Username and password are required") from exc
