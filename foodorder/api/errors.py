# foodorder/api/errors.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from foodorder.domain.errors import AppError, ValidationError
from foodorder.domain.schemas import ErrorOut
from foodorder.utils.logging import get_logger

logger = get_logger(__name__)


def error_body(code: str, message: str, detail: str | None = None) -> dict:
    return ErrorOut(success=False, message=message, error=code, detail=detail).model_dump()


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} failed: {exc.code} ({exc.detail})")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.code, exc.message, exc.detail),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} rejected: invalid body")
    return JSONResponse(
        status_code=422,
        content=error_body(ValidationError.code, ValidationError.message, str(exc.errors())),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
