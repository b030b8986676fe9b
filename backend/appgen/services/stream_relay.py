"""Streaming generation: relay model increments to the caller as they arrive.

The model may open its answer with a markdown fence split over several
increments, and bytes already sent cannot be taken back. `advance` therefore
holds the first increments until it knows whether a fence is there, drops it,
and from then on passes text straight through. A trailing run of whitespace
and backticks is always held back so a closing fence can be dropped at
`finish`.

Failures are handled by `relay_stream` in two tiers: before anything has been
written the classified `GenerationError` is raised so the route can still
answer with an error status; once the response is committed an HTML comment
describing the failure is appended and the channel is closed.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from appgen.models.requests import GenerateAppRequest
from appgen.services.assembler import PreparedGeneration, log_generation_start, prepare_generation
from appgen.services.errors import GenerationError, MalformedOutputError, TransientUpstreamError
from appgen.services.fence import FenceScan, is_trailing_fence, scan_leading_fence, strip_fences
from appgen.services.llm_client import CompletionClient

logger = logging.getLogger(__name__)

TAIL_CHARS = " \t\r\n`"
DIAGNOSTIC_MAX_CHARS = 200

STATUS_COMPLETED = "completed"
STATUS_INTERRUPTED = "interrupted"
STATUS_CANCELLED = "cancelled"


class ChannelClosedError(Exception):
    """Raised when writing to a channel whose consumer has gone away."""


class OutputChannel:
    """Where relayed text goes. `committed` turns true on the first non-empty write."""

    committed = False
    closed = False

    async def write(self, text: str):
        raise NotImplementedError

    async def close(self):
        raise NotImplementedError


class QueueChannel(OutputChannel):
    """Hands relayed text from the relay task to a StreamingResponse body."""

    def __init__(self):
        self._queue: asyncio.Queue = asyncio.Queue()
        self._opened = asyncio.Event()
        self.committed = False
        self.closed = False

    async def write(self, text: str):
        if self.closed:
            raise ChannelClosedError()
        if not text:
            return
        self.committed = True
        self._opened.set()
        await self._queue.put(text)

    async def close(self):
        if self.closed:
            return
        self.closed = True
        self._opened.set()
        await self._queue.put(None)

    def disconnect(self):
        self.closed = True
        self._opened.set()

    async def wait_opened(self):
        await self._opened.wait()

    async def chunks(self) -> AsyncIterator[str]:
        while True:
            item = await self._queue.get()
            if item is None:
                return
            yield item


@dataclass
class StreamState:
    accumulated_length: int = 0
    emitted_length: int = 0
    is_first_emitted_chunk: bool = True
    leading_fence_suppressed: bool = False
    buffered: str = ""
    held_tail: str = ""


@dataclass
class StreamOutcome:
    status: str
    generated_length: int = 0
    emitted_length: int = 0
    error: Optional[GenerationError] = None


def _release(state: StreamState, text: str) -> str:
    combined = state.held_tail + text
    body = combined.rstrip(TAIL_CHARS)
    state.held_tail = combined[len(body):]
    return body


def advance(state: StreamState, delta: str) -> str:
    """Feed one increment through the fence gate and return what may be sent now."""
    state.accumulated_length += len(delta)
    if not state.is_first_emitted_chunk:
        return _release(state, delta)

    state.buffered += delta
    if state.leading_fence_suppressed:
        content = state.buffered.lstrip()
    else:
        scan, end = scan_leading_fence(state.buffered)
        if scan is FenceScan.PENDING:
            return ""
        if scan is FenceScan.PRESENT:
            state.leading_fence_suppressed = True
            content = state.buffered[end:].lstrip()
        else:
            content = state.buffered

    state.buffered = ""
    if not content:
        return ""
    state.is_first_emitted_chunk = False
    return _release(state, content)


def finish(state: StreamState) -> str:
    """Return whatever is still held once the increments have ended."""
    if state.is_first_emitted_chunk:
        text = strip_fences(state.buffered)
        state.buffered = ""
        state.is_first_emitted_chunk = False
        return text if text.strip() else ""

    tail, state.held_tail = state.held_tail, ""
    if is_trailing_fence(tail):
        return ""
    return tail


def diagnostic_comment(error: GenerationError) -> str:
    message = error.message[:DIAGNOSTIC_MAX_CHARS].replace("--", "- -")
    return f"\n<!-- generation interrupted: {message} -->\n"


async def _emit(channel: OutputChannel, state: StreamState, text: str):
    if not text:
        return
    await channel.write(text)
    state.emitted_length += len(text)


async def _aclose(increments):
    aclose = getattr(increments, "aclose", None)
    if aclose is not None:
        await aclose()


def _outcome(status: str, state: StreamState, error: GenerationError = None) -> StreamOutcome:
    return StreamOutcome(
        status=status,
        generated_length=state.accumulated_length,
        emitted_length=state.emitted_length,
        error=error,
    )


async def _run(prepared: PreparedGeneration, client: CompletionClient,
               channel: OutputChannel, state: StreamState) -> bool:
    """Relay every increment; returns False when the consumer went away."""
    increments = client.stream(prepared.model, prepared.prompt.messages())
    try:
        async for delta in increments:
            if channel.closed:
                return False
            await _emit(channel, state, advance(state, delta))
        await _emit(channel, state, finish(state))
    finally:
        await _aclose(increments)
    return True


async def relay_stream(request: GenerateAppRequest, client: CompletionClient,
                       channel: OutputChannel) -> StreamOutcome:
    prepared = prepare_generation(request)
    log_generation_start("stream", request, prepared)
    state = StreamState()

    try:
        finished = await _run(prepared, client, channel, state)
    except ChannelClosedError:
        finished = False
    except GenerationError as e:
        return await _fail(channel, state, prepared, e)
    except Exception as e:
        logger.exception("unexpected failure while streaming model=%s", prepared.model)
        return await _fail(channel, state, prepared, TransientUpstreamError(f"Unexpected upstream failure: {e}"))

    if not finished:
        logger.info("generate cancelled mode=stream model=%s emitted=%d", prepared.model, state.emitted_length)
        return _outcome(STATUS_CANCELLED, state)

    if not channel.committed:
        logger.warning("generate failed mode=stream model=%s error=empty_output", prepared.model)
        raise MalformedOutputError("The model returned no content.")

    await channel.close()
    logger.info(
        "generate done mode=stream model=%s length=%d emitted=%d",
        prepared.model, state.accumulated_length, state.emitted_length,
    )
    return _outcome(STATUS_COMPLETED, state)


async def _fail(channel: OutputChannel, state: StreamState, prepared: PreparedGeneration,
                error: GenerationError) -> StreamOutcome:
    if not channel.committed:
        logger.warning("generate failed mode=stream model=%s error=%s message=%s",
                       prepared.model, error.code, error.message)
        raise error

    logger.warning(
        "generate interrupted mode=stream model=%s error=%s emitted=%d",
        prepared.model, error.code, state.emitted_length,
    )
    try:
        await _emit(channel, state, finish(state) + diagnostic_comment(error))
    except ChannelClosedError:
        return _outcome(STATUS_CANCELLED, state, error)
    await channel.close()
    return _outcome(STATUS_INTERRUPTED, state, error)
