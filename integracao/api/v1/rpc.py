# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""RPC API endpoints.

This module exposes the registered operations over HTTP:
- GET /rpc - List the available methods
- POST /rpc/{method} - Run one method

The raw request body is decoded and validated once against the method's
request model; malformed JSON and non-object bodies are validation errors.
Every response carries the operation payload; failures use the uniform
three-field payload ``{id: 0, status: "error", message}`` with an HTTP
status matching the error kind.

Example:
    POST /api/v1/rpc/create_course
    Body:
        {
            "trm_id": 42,
            "category": 1,
            "shortname": "TADS-2025",
            "fullname": "Tecnologia em ADS 2025",
            "summaryformat": 1,
            "format": "topics",
            "numsections": 10
        }
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from integracao.api.dependencies import get_app_settings, get_db, get_platform
from integracao.core.config import Settings
from integracao.domains.base import ErrorKind
from integracao.infrastructure.platform import HostPlatform
from integracao.models.common import OperationResponse
from integracao.rpc import get_method, list_methods
from integracao.utils.logging import bind_context, clear_context

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_STATUS = {
    ErrorKind.VALIDATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.NOT_MAPPED: status.HTTP_404_NOT_FOUND,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.ALREADY_MAPPED: status.HTTP_409_CONFLICT,
    ErrorKind.PLATFORM: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.STORAGE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class MethodInfo(BaseModel):
    """Public description of a registered method."""

    name: str = Field(description="Method name")
    platform_name: str = Field(description="Platform web service name")
    kind: str = Field(description="read or write")
    description: str
    parameters: dict[str, Any] = Field(description="JSON schema of the request body")


def format_validation_error(error: ValidationError) -> str:
    """Render pydantic errors as one message.

    Example:
        "Parâmetros inválidos: trm_id: Field required"
    """
    details = "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
        for err in error.errors()
    )
    return f"Parâmetros inválidos: {details}"


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build an HTTP error carrying the three-field payload."""
    return JSONResponse(
        status_code=status_code,
        content=OperationResponse.error(message).model_dump(mode="json"),
    )


@router.get(
    "",
    response_model=list[MethodInfo],
    summary="List RPC methods",
)
async def list_rpc_methods() -> list[MethodInfo]:
    """List every registered method with its request schema."""
    return [
        MethodInfo(
            name=method.name,
            platform_name=method.platform_name,
            kind=method.kind.value,
            description=method.description,
            parameters=method.request_model.model_json_schema(),
        )
        for method in list_methods()
    ]


@router.post(
    "/{method}",
    summary="Run an RPC method",
    responses={
        404: {"model": OperationResponse, "description": "Unknown method or unmapped id"},
        409: {"model": OperationResponse, "description": "External id already mapped"},
        422: {"model": OperationResponse, "description": "Invalid parameters"},
        502: {"model": OperationResponse, "description": "Platform failure"},
    },
)
async def call_rpc_method(
    method: str,
    request: Request,
    db: AsyncSession = Depends(get_db),
    platform: HostPlatform = Depends(get_platform),
    settings: Settings = Depends(get_app_settings),
) -> JSONResponse:
    """Validate the body, run the method and render its result.

    Args:
        method: Method name, plain or as a platform web service name.
        request: HTTP request; its body is the JSON object of parameters.
        db: Mapping store session.
        platform: Learning platform client.
        settings: Application settings.

    Returns:
        The operation payload, or the error payload on failure.
    """
    entry = get_method(method)
    if entry is None:
        return error_response(status.HTTP_404_NOT_FOUND, f"Método desconhecido: {method}")

    bind_context(rpc_method=entry.name)
    try:
        raw = await request.body()
        try:
            params = entry.request_model.model_validate_json(raw.strip() or b"{}")
        except ValidationError as e:
            message = format_validation_error(e)
            logger.warning("%s rejected: %s", entry.name, message)
            return error_response(ERROR_STATUS[ErrorKind.VALIDATION], message)

        handler = entry.bind(db, platform, settings)
        result = await handler(params)

        if not result.ok:
            return error_response(ERROR_STATUS[result.kind], result.message)

        return JSONResponse(content=result.payload.model_dump(mode="json"))
    finally:
        clear_context()
