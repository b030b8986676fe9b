"""
Pytest configuration and fixtures
"""
import asyncio

import pytest

from appgen.services.llm_client import CompletionClient
from appgen.services.stream_relay import ChannelClosedError, OutputChannel


class FakeCompletionClient(CompletionClient):
    """Deterministic stand-in for the upstream completion service."""

    def __init__(self, text="", chunks=None, error=None, stream_error_after=None):
        self.text = text
        self.chunks = list(chunks or [])
        self.error = error
        self.stream_error_after = stream_error_after
        self.calls = []
        self.stream_closed = False
        self.chunks_sent = 0

    async def complete(self, model, messages):
        self.calls.append(("complete", model, messages))
        if self.error is not None:
            raise self.error
        return self.text

    async def stream(self, model, messages):
        self.calls.append(("stream", model, messages))
        try:
            if self.error is not None and self.stream_error_after is None:
                raise self.error
            for i, chunk in enumerate(self.chunks):
                if self.stream_error_after is not None and i == self.stream_error_after:
                    raise self.error
                await asyncio.sleep(0)
                self.chunks_sent += 1
                yield chunk
            if self.stream_error_after is not None and self.stream_error_after >= len(self.chunks):
                raise self.error
        finally:
            self.stream_closed = True


class RecordingChannel(OutputChannel):
    """Output channel that keeps every write; can simulate a consumer going away."""

    def __init__(self, disconnect_after=None):
        self.writes = []
        self.committed = False
        self.closed = False
        self.close_calls = 0
        self.disconnect_after = disconnect_after

    async def write(self, text):
        if self.closed:
            raise ChannelClosedError()
        if not text:
            return
        self.writes.append(text)
        self.committed = True
        if self.disconnect_after is not None and len(self.writes) >= self.disconnect_after:
            self.closed = True

    async def close(self):
        self.close_calls += 1
        self.closed = True

    @property
    def body(self):
        return "".join(self.writes)


@pytest.fixture
def fake_client():
    return FakeCompletionClient


@pytest.fixture
def recording_channel():
    return RecordingChannel
