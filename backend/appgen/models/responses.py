from pydantic import BaseModel
from typing import List


class ModelInfo(BaseModel):
    id: str
    display_name: str
    description: str


class OptionsResponse(BaseModel):
    types: List[str]
    styles: List[str]
    models: List[ModelInfo]
    default_model: str


class ErrorResponse(BaseModel):
    error: str
    message: str
    retryable: bool = False
    fallback: str
