# ENV vars like the OpenAI API key
import os
from dotenv import load_dotenv

load_dotenv()


def _float_or_none(value):
    if value in (None, "", "none", "None"):
        return None
    return float(value)


class Config:
    # turnKey is the variable name the first version of the server used
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY") or os.getenv("turnKey", "")
    OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").rstrip("/")
    UPSTREAM_TIMEOUT = _float_or_none(os.getenv("UPSTREAM_TIMEOUT", "120"))
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    DEBUG = os.getenv("DEBUG", "false").lower() == "true"
    PORT = int(os.getenv("PORT", "5002"))
