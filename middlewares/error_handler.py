import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from fastapi.responses import JSONResponse

from schemas.common import error
from services.errors import SchoolError

logger = logging.getLogger(__name__)


def add_error_handlers(app: FastAPI):
    # every failure leaves the app in the same {"status": "error", "message"} shape

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content=error(str(exc.detail)))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=422, content=error(f"Invalid request: {exc.errors()}"))

    @app.exception_handler(SchoolError)
    async def school_error_handler(request: Request, exc: SchoolError):
        logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=400, content=error(exc.message))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content=error(str(exc) or "Internal server error"))
