# appgen/services/assembler.py
import logging
import re
from dataclasses import dataclass
from typing import Optional

from appgen.models.requests import GenerateAppRequest
from appgen.services.errors import (
    GenerationError,
    MalformedOutputError,
    TransientUpstreamError,
    ValidationError,
)
from appgen.services.fence import strip_fences
from appgen.services.llm_client import CompletionClient
from appgen.services.model_registry import resolve_model
from appgen.services.prompt_builder import PromptPair, build_prompt, coerce_app_type, coerce_style

logger = logging.getLogger(__name__)

IDEA_EXCERPT_CHARS = 60

DOCUMENT_ROOT = re.compile(r"<!doctype\s+html|<html[\s>]", re.IGNORECASE)

DOCUMENT_SHELL = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Generated App</title>
</head>
<body>
{body}
</body>
</html>
"""


@dataclass
class PreparedGeneration:
    idea: str
    model: str
    prompt: PromptPair


@dataclass
class GenerationResult:
    document: Optional[str] = None
    error: Optional[GenerationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def idea_excerpt(idea: str) -> str:
    if len(idea) <= IDEA_EXCERPT_CHARS:
        return idea
    return idea[:IDEA_EXCERPT_CHARS] + "..."


def prepare_generation(request: GenerateAppRequest) -> PreparedGeneration:
    """Validate the request and build everything needed for the upstream call.

    Shared by the buffered and the streaming path, so both reject an empty
    idea before any upstream traffic.
    """
    idea = (request.idea or "").strip()
    if not idea:
        raise ValidationError("An app idea is required.")
    model = resolve_model(request.model)
    return PreparedGeneration(
        idea=idea,
        model=model,
        prompt=build_prompt(idea, request.type, request.style),
    )


def log_generation_start(mode: str, request: GenerateAppRequest, prepared: PreparedGeneration):
    logger.info(
        "generate mode=%s idea=%r type=%s style=%s model=%s",
        mode,
        idea_excerpt(prepared.idea),
        coerce_app_type(request.type).value,
        coerce_style(request.style).value,
        prepared.model,
    )


def finalize_document(text: str) -> str:
    """Turn raw model output into a complete document or raise MalformedOutputError."""
    document = strip_fences(text or "")
    if DOCUMENT_ROOT.search(document):
        return document
    if "<" in document or ">" in document:
        return DOCUMENT_SHELL.format(body=document.strip())
    raise MalformedOutputError()


async def assemble_document(request: GenerateAppRequest, client: CompletionClient) -> str:
    prepared = prepare_generation(request)
    log_generation_start("buffered", request, prepared)

    try:
        raw = await client.complete(prepared.model, prepared.prompt.messages())
    except GenerationError:
        raise
    except Exception as e:
        logger.exception("unexpected upstream failure model=%s", prepared.model)
        raise TransientUpstreamError(f"Unexpected upstream failure: {e}")

    document = finalize_document(raw)
    logger.info("generate done mode=buffered model=%s length=%d", prepared.model, len(document))
    return document


async def generate(request: GenerateAppRequest, client: CompletionClient) -> GenerationResult:
    """Buffered generation. Failures come back as the result's `error`."""
    try:
        document = await assemble_document(request, client)
    except GenerationError as e:
        logger.warning("generate failed mode=buffered error=%s message=%s", e.code, e.message)
        return GenerationResult(error=e)
    return GenerationResult(document=document)
