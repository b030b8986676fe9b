# Supported upstream models
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class ModelEntry:
    id: str
    display_name: str
    description: str


MODELS = (
    ModelEntry("gpt-4o", "GPT-4o", "Best overall quality for complete, polished apps."),
    ModelEntry("gpt-4o-mini", "GPT-4o mini", "Fast and inexpensive, good for simple tools and forms."),
    ModelEntry("gpt-4.1", "GPT-4.1", "Strong instruction following for larger single-file apps."),
    ModelEntry("gpt-4.1-mini", "GPT-4.1 mini", "Balanced speed and quality."),
    ModelEntry("gpt-4-turbo", "GPT-4 Turbo", "Previous generation high quality model."),
    ModelEntry("gpt-3.5-turbo", "GPT-3.5 Turbo", "Legacy model, quickest responses and simplest output."),
)

DEFAULT_MODEL = "gpt-4o"

_MODELS_BY_ID = {entry.id: entry for entry in MODELS}


def resolve_model(model_id: Optional[str]) -> str:
    """Return `model_id` if it is a supported model, otherwise the default."""
    if isinstance(model_id, str) and model_id.strip() in _MODELS_BY_ID:
        return model_id.strip()
    return DEFAULT_MODEL


def list_models() -> List[ModelEntry]:
    return list(MODELS)
