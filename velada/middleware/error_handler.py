"""
velada/middleware/error_handler.py
Global exception handlers

Every failure leaves the API in the same envelope:
{"success": false, "error": ..., "message": ..., "code": ..., "details"?: ...}
Unexpected exceptions are logged with a short log id and surface as a
generic 500; the log id is the only detail the client sees.
"""
import logging
import traceback

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from velada.errors import ERROR_MAPPING, APIError, ErrorCode, api_error_from_voting_error, new_log_id
from velada.exceptions import VotingError

logger = logging.getLogger(__name__)


def _request_context(request: Request) -> dict:
    context = {
        "method": request.method,
        "path": request.url.path,
        "client": request.client.host if request.client else None,
    }
    user = getattr(request.state, "user", None)
    if user:
        context["user_id"] = user.get("id")
    return context


def setup_error_handlers(app, debug: bool = False):
    """
    Register exception handlers on a FastAPI application.

    Args:
        app: FastAPI application instance
        debug: include exception type and traceback in 500 responses
    """

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        logger.warning(f"API error on {request.url.path}: {exc.code} - {exc.message}")
        return exc.to_response()

    @app.exception_handler(VotingError)
    async def voting_error_handler(request: Request, exc: VotingError):
        logger.info(f"Rejected on {request.url.path}: {exc.code} - {exc.message} | {_request_context(request)}")
        return api_error_from_voting_error(exc).to_response()

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")

        error_details = [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "success": False,
                "error": "Validation Error",
                "message": "Invalid request data",
                "code": ErrorCode.VALIDATION_ERROR,
                "details": {"errors": error_details},
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(f"HTTP exception on {request.url.path}: {exc.detail}")
        error, code = ERROR_MAPPING.get(
            exc.status_code,
            ("Error", ErrorCode.INTERNAL_ERROR if exc.status_code >= 500 else ErrorCode.INVALID_INPUT),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "error": error,
                "message": str(exc.detail),
                "code": code,
            },
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        logger.warning(f"Rate limit exceeded on {request.url.path}: {exc.detail}")
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={
                "success": False,
                "error": "Too Many Requests",
                "message": f"Rate limit exceeded: {exc.detail}",
                "code": ErrorCode.RATE_LIMITED,
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        log_id = new_log_id()
        logger.error(
            f"[{log_id}] Unhandled exception on {request.url.path}: {type(exc).__name__}: {str(exc)}\n"
            f"Context: {_request_context(request)}\n"
            f"Traceback:\n{traceback.format_exc()}"
        )

        details = {"log_id": log_id}
        if debug:
            details["type"] = type(exc).__name__
            details["traceback"] = traceback.format_exc()

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "error": "Internal Error",
                "message": "An unexpected error occurred. Please try again later.",
                "code": ErrorCode.INTERNAL_ERROR,
                "details": details,
            },
        )

    logger.info("Error handlers configured")
