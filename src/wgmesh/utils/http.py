"""
Shared FastAPI error handling.

Both servers report every request validation problem (malformed JSON,
wrong types, out-of-range values) as 400 Bad Request rather than FastAPI's
default 422.
"""

from typing import TypeVar

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from wgmesh.utils.logger import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _detail_for(errors) -> str:
    if any(err.get("type") == "json_invalid" for err in errors):
        return "invalid json"
    return "invalid request"


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Map request validation errors to 400."""
    errors = exc.errors()
    detail = _detail_for(errors)

    logger.warning(f"{request.method} {request.url.path}: {detail}: {errors}")
    return JSONResponse(
        status_code=400,
        content={"detail": detail, "errors": jsonable_encoder(errors)},
    )


def install_error_handlers(app: FastAPI) -> None:
    """Register the shared exception handlers on an application."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)


async def parse_json_body(request: Request, model: type[ModelT]) -> ModelT:
    """
    Read and validate a JSON request body.

    For handlers that must run checks before the body is touched.

    Raises:
        HTTPException: 400 with the same details as the validation handler.
    """
    body = await request.body()
    try:
        return model.model_validate_json(body)
    except ValidationError as e:
        errors = e.errors(include_url=False)
        detail = _detail_for(errors)
        logger.warning(f"{request.method} {request.url.path}: {detail}: {errors}")
        raise HTTPException(status_code=400, detail=detail)
