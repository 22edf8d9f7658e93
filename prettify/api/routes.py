import asyncio
from contextlib import aclosing
from typing import AsyncIterator

from fastapi import APIRouter, Response
from fastapi.responses import PlainTextResponse, StreamingResponse

from prettify.api.errors import problem_response
from prettify.api.schemas import ErrorResponse, PrettifyRequest
from prettify.application.prettify_service import PrettifyService, is_blank
from prettify.domain.exceptions import EmptyInputError, UpstreamError
from prettify.infra.config.dependencies import PrettifyServiceDep
from prettify.infra.config.logging_config import get_logger

LIVENESS_MESSAGE = "Prettifier API is running!"

router = APIRouter()
logger = get_logger("api.prettify")


@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    """Liveness check."""
    return LIVENESS_MESSAGE


@router.post(
    "/prettify",
    tags=["Prettifier"],
    name="Prettify",
    responses={400: {"model": ErrorResponse}},
)
async def prettify(request: PrettifyRequest, service: PrettifyServiceDep) -> Response:
    """Prettify text or code and return the model's JSON output."""
    if is_blank(request.text):
        raise EmptyInputError()

    try:
        result = await service.prettify(request.text)
    except Exception as exc:
        logger.exception("prettify.error", error=str(exc))
        return problem_response("Gemini API Error", str(exc))

    return Response(content=result, media_type="application/json")


@router.post(
    "/prettify/stream",
    tags=["Prettifier"],
    name="PrettifyStream",
    responses={400: {"model": ErrorResponse}},
)
async def prettify_stream(
    request: PrettifyRequest, service: PrettifyServiceDep
) -> StreamingResponse:
    """Stream partial prettified JSON as Server-Sent Events while it is generated."""
    if is_blank(request.text):
        raise EmptyInputError()

    return StreamingResponse(
        _stream_chunks(service, request.text),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache, no-transform",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


async def _stream_chunks(service: PrettifyService, text: str) -> AsyncIterator[bytes]:
    chunks = 0
    try:
        async with aclosing(service.prettify_stream(text)) as stream:
            async for chunk in stream:
                chunks += 1
                yield chunk.encode("utf-8")
    except asyncio.CancelledError:
        logger.warning("prettify.stream.cancelled", chunks=chunks)
        raise
    except UpstreamError as exc:
        logger.error(
            "prettify.stream.error", error_kind=exc.kind, error=str(exc), chunks=chunks
        )
    except Exception as exc:
        # Headers are already sent; end the stream instead of aborting it
        logger.exception("prettify.stream.error", error=str(exc), chunks=chunks)
    else:
        logger.info("prettify.stream.end", chunks=chunks)
