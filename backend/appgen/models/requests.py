# appgen/models/requests.py
from pydantic import BaseModel
from typing import Optional


class GenerateAppRequest(BaseModel):
    idea: Optional[str] = None
    type: Optional[str] = "tool"
    style: Optional[str] = "modern"
    model: Optional[str] = None
