"""
Error-to-response mapping.

Classified errors carry their own status and body; anything else becomes a
generic 500 without details.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from image_converter.errors import ConverterError, UploadError
from image_converter.logging_config import get_logger

logger = get_logger("server")

INTERNAL_ERROR_BODY = {"error": "Internal server error"}


async def handle_converter_error(request: Request, exc: ConverterError) -> JSONResponse:
    if not isinstance(exc, UploadError):
        logger.error(f"{request.method} {request.url.path} failed [{exc.kind}]: {exc}", exc_info=exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ConverterError, handle_converter_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
