"""
Maps exceptions to client-facing {message} responses.
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ...common.exceptions import RiesgoVialError
from ...common.logging import setup_logger
from ...reports.application.report_store import INCOMPLETE_REPORT

logger = setup_logger("riesgovial.api")

INTERNAL_ERROR = "Error interno del servidor."

async def handle_domain_error(request: Request, exc: RiesgoVialError):
    if exc.status_code >= 500:
        logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

async def handle_request_validation(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"message": INCOMPLETE_REPORT})

async def handle_unexpected(request: Request, exc: Exception):
    logger.exception(f"Unexpected error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"message": INTERNAL_ERROR})

def register_error_handlers(app: FastAPI):
    app.add_exception_handler(RiesgoVialError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)
