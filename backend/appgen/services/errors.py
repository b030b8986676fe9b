from typing import Any, Dict

FALLBACK_ROUTE = "/fallback"


class GenerationError(Exception):
    """Base class for every failure the generation paths can report."""

    code = "generation_failed"
    status_code = 502
    retryable = False
    default_message = "Generation failed."

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "retryable": self.retryable,
            "fallback": FALLBACK_ROUTE,
        }


class ValidationError(GenerationError):
    code = "invalid_request"
    status_code = 400
    default_message = "An app idea is required."


class QuotaExceededError(GenerationError):
    code = "quota_exceeded"
    status_code = 429
    retryable = True
    default_message = "The upstream usage quota is exhausted. Try again later."


class CredentialError(GenerationError):
    code = "upstream_credentials"
    status_code = 503
    default_message = "The generation service is not configured with valid credentials."


class MalformedOutputError(GenerationError):
    code = "malformed_output"
    status_code = 502
    default_message = "The model returned content that is not renderable HTML."


class TransientUpstreamError(GenerationError):
    code = "upstream_unavailable"
    status_code = 502
    retryable = True
    default_message = "The generation service failed. Try again shortly."
