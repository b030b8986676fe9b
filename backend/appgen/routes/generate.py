# appgen/routes/generate.py

import asyncio
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response, StreamingResponse

from appgen.models.requests import GenerateAppRequest
from appgen.models.responses import ErrorResponse
from appgen.services.assembler import generate
from appgen.services.errors import GenerationError
from appgen.services.llm_client import CompletionClient, get_completion_client
from appgen.services.stream_relay import QueueChannel, relay_stream

router = APIRouter()
logger = logging.getLogger(__name__)

HTML_MEDIA_TYPE = "text/html; charset=utf-8"
ERROR_RESPONSES = {status: {"model": ErrorResponse} for status in (400, 429, 502, 503)}
STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",  # keep nginx from buffering the chunks
}


def error_response(error: GenerationError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@router.post("/generate", response_class=Response, responses=ERROR_RESPONSES)
async def generate_app(req: GenerateAppRequest, client: CompletionClient = Depends(get_completion_client)):
    result = await generate(req, client)
    if not result.ok:
        return error_response(result.error)
    return Response(content=result.document, media_type=HTML_MEDIA_TYPE)


async def _stream_body(channel: QueueChannel, task: asyncio.Task):
    completed = False
    try:
        async for chunk in channel.chunks():
            yield chunk
        completed = True
    finally:
        # client went away mid-stream: stop the relay and the upstream call with it
        if not completed and not task.done():
            logger.info("client disconnected, cancelling stream relay")
            channel.disconnect()
            task.cancel()


@router.post("/generate/stream", response_class=StreamingResponse, responses=ERROR_RESPONSES)
async def generate_app_stream(req: GenerateAppRequest, client: CompletionClient = Depends(get_completion_client)):
    channel = QueueChannel()
    task = asyncio.create_task(relay_stream(req, client, channel))
    opened = asyncio.create_task(channel.wait_opened())
    await asyncio.wait({task, opened}, return_when=asyncio.FIRST_COMPLETED)

    if not channel.committed and task.done():
        opened.cancel()
        error = task.exception()
        if isinstance(error, GenerationError):
            return error_response(error)
        # anything else is a bug in the relay itself
        task.result()
        await channel.close()

    if not opened.done():
        opened.cancel()
    return StreamingResponse(_stream_body(channel, task), media_type=HTML_MEDIA_TYPE, headers=STREAM_HEADERS)
