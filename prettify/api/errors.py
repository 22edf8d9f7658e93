"""
API error handling and exception mapping.

Converts application errors into the HTTP responses clients rely on: a 400
JSON error for empty input and an RFC 7807 problem body for anything
unexpected.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from prettify.api.schemas import ErrorResponse, ProblemDetails
from prettify.domain.exceptions import EmptyInputError
from prettify.infra.config.logging_config import get_logger

PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = get_logger("api.errors")


def problem_response(
    title: str, detail: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
) -> JSONResponse:
    problem = ProblemDetails(title=title, status=status_code, detail=detail)
    return JSONResponse(
        status_code=status_code,
        content=problem.model_dump(),
        media_type=PROBLEM_MEDIA_TYPE,
    )


async def empty_input_handler(request: Request, exc: EmptyInputError) -> JSONResponse:
    logger.info("request.empty_input", path=str(request.url.path))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(error=str(exc)).model_dump(),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "request.unhandled",
        error=str(exc),
        path=str(request.url.path),
        method=request.method,
    )
    return problem_response("Internal Server Error", str(exc))


def setup_error_handlers(app) -> None:
    app.add_exception_handler(EmptyInputError, empty_input_handler)
    app.add_exception_handler(Exception, general_exception_handler)
