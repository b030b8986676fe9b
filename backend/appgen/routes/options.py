# appgen/routes/options.py

from typing import List

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, JSONResponse

from appgen.models.responses import ModelInfo, OptionsResponse
from appgen.services.fallback import FALLBACK_HTML
from appgen.services.model_registry import DEFAULT_MODEL, list_models
from appgen.services.prompt_builder import AppType, StyleId

router = APIRouter()


def _model_infos() -> List[ModelInfo]:
    return [
        ModelInfo(id=m.id, display_name=m.display_name, description=m.description)
        for m in list_models()
    ]


@router.get("/options", response_model=OptionsResponse)
def get_options():
    return OptionsResponse(
        types=[t.value for t in AppType],
        styles=[s.value for s in StyleId],
        models=_model_infos(),
        default_model=DEFAULT_MODEL,
    )


@router.get("/models", response_model=List[ModelInfo])
def get_models():
    return _model_infos()


@router.get("/fallback", response_class=HTMLResponse)
def get_fallback():
    return HTMLResponse(content=FALLBACK_HTML)


# The first client fetched the demo as a JSON string from /idea
@router.get("/idea")
def get_idea():
    return JSONResponse(content=FALLBACK_HTML)
