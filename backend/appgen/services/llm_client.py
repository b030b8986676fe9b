# appgen/services/llm_client.py
import json
import logging
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx

from appgen.config import Config
from appgen.services.errors import (
    CredentialError,
    GenerationError,
    QuotaExceededError,
    TransientUpstreamError,
)

logger = logging.getLogger(__name__)

Messages = List[Dict[str, str]]

QUOTA_CODES = {"insufficient_quota"}
CREDENTIAL_CODES = {"invalid_api_key", "invalid_authentication", "account_deactivated"}


class CompletionClient:
    """The two calls the generation paths need from a chat-completion service."""

    async def complete(self, model: str, messages: Messages) -> str:
        raise NotImplementedError

    def stream(self, model: str, messages: Messages) -> AsyncIterator[str]:
        raise NotImplementedError


def _error_body(payload: Any) -> Dict[str, Any]:
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        return payload["error"]
    return {}


def classify_upstream_error(status_code: Optional[int], payload: Any = None) -> GenerationError:
    """Map an upstream HTTP status and error payload onto the error taxonomy."""
    error = _error_body(payload)
    code = str(error.get("code") or "")
    kind = str(error.get("type") or "")
    message = error.get("message")

    if code in QUOTA_CODES or kind in QUOTA_CODES:
        return QuotaExceededError()
    if status_code in (401, 403) or code in CREDENTIAL_CODES:
        return CredentialError()
    detail = f"Upstream returned status {status_code}" if status_code else "Upstream request failed"
    if message:
        detail = f"{detail}: {message}"
    return TransientUpstreamError(detail)


def _content_from_completion(data: Any) -> str:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        raise TransientUpstreamError("Unexpected completion response format")
    if not isinstance(content, str):
        raise TransientUpstreamError("Completion response carried no text")
    return content


def _delta_from_event(data: Any) -> str:
    try:
        choices = data["choices"]
    except (KeyError, TypeError):
        raise TransientUpstreamError("Unexpected stream event format")
    if not choices:
        return ""
    delta = choices[0].get("delta") or {}
    return delta.get("content") or ""


class OpenAICompletionClient(CompletionClient):
    """OpenAI-compatible /chat/completions client over httpx."""

    def __init__(self, api_key: str = None, base_url: str = None, timeout: Optional[float] = None,
                 transport: httpx.AsyncBaseTransport = None):
        self.api_key = api_key if api_key is not None else Config.OPENAI_API_KEY
        self.base_url = (base_url or Config.OPENAI_BASE_URL).rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            raise CredentialError("OPENAI_API_KEY is not set.")
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport)

    async def complete(self, model: str, messages: Messages) -> str:
        headers = self._headers()
        payload = {"model": model, "messages": messages}
        try:
            async with self._client() as client:
                resp = await client.post("/chat/completions", headers=headers, json=payload)
        except httpx.RequestError as e:
            logger.warning("upstream request failed model=%s error=%s", model, e)
            raise TransientUpstreamError(f"Network error talking to upstream: {e}")

        if resp.is_error:
            raise classify_upstream_error(resp.status_code, _json_or_none(resp))
        try:
            data = resp.json()
        except ValueError:
            raise TransientUpstreamError("Upstream returned a non-JSON body")
        return _content_from_completion(data)

    async def stream(self, model: str, messages: Messages) -> AsyncIterator[str]:
        headers = self._headers()
        payload = {"model": model, "messages": messages, "stream": True}
        try:
            async with self._client() as client:
                async with client.stream("POST", "/chat/completions", headers=headers, json=payload) as response:
                    if response.is_error:
                        await response.aread()
                        raise classify_upstream_error(response.status_code, _json_or_none(response))
                    async for line in response.aiter_lines():
                        if not line.startswith("data:"):
                            continue
                        data = line[len("data:"):].strip()
                        if data == "[DONE]":
                            break
                        try:
                            event = json.loads(data)
                        except json.JSONDecodeError:
                            continue
                        if "error" in event:
                            raise classify_upstream_error(None, event)
                        delta = _delta_from_event(event)
                        if delta:
                            yield delta
        except httpx.RequestError as e:
            logger.warning("upstream stream failed model=%s error=%s", model, e)
            raise TransientUpstreamError(f"Network error talking to upstream: {e}")


def _json_or_none(response: httpx.Response):
    try:
        return response.json()
    except ValueError:
        return None


def get_completion_client() -> CompletionClient:
    return OpenAICompletionClient(timeout=Config.UPSTREAM_TIMEOUT)
