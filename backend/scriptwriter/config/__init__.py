"""
Application configuration and settings
"""

import os
from pathlib import Path

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

from .models import (
    ModelConfig,
    PipelineModels,
    DEFAULT_PIPELINE_MODELS,
    AVAILABLE_MODELS,
    get_model_config,
    get_model_name,
    list_pipeline_steps,
)

# Base directories
APP_DIR = Path(__file__).parent.parent
BACKEND_DIR = APP_DIR.parent

# API settings
API_TITLE = "Scriptwriter API"
API_DESCRIPTION = "Turn a video idea into a short-form video script"
API_VERSION = "1.0.0"

# CORS origins
CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:3001",
    "http://localhost:5173",
]

# Per-call bounds for the external generation service
GENERATION_TIMEOUT_SECONDS = float(os.getenv("GENERATION_TIMEOUT_SECONDS", "60"))
GENERATION_MAX_RETRIES = max(int(os.getenv("GENERATION_MAX_RETRIES", "2")), 1)
GENERATION_BACKOFF_SECONDS = float(os.getenv("GENERATION_BACKOFF_SECONDS", "1"))

# Client-side backend (PipelineController -> HTTP service)
SCRIPTWRITER_API_URL = os.getenv("SCRIPTWRITER_API_URL", "http://localhost:8000")
BACKEND_TIMEOUT_SECONDS = float(os.getenv("BACKEND_TIMEOUT_SECONDS", "180"))


def get_gemini_api_key() -> str | None:
    """Read the Gemini credential at call time so the check is always live."""
    key = os.getenv("GEMINI_API_KEY")
    return key.strip() if key and key.strip() else None


__all__ = [
    "ModelConfig",
    "PipelineModels",
    "DEFAULT_PIPELINE_MODELS",
    "AVAILABLE_MODELS",
    "get_model_config",
    "get_model_name",
    "list_pipeline_steps",
    "APP_DIR",
    "BACKEND_DIR",
    "API_TITLE",
    "API_DESCRIPTION",
    "API_VERSION",
    "CORS_ORIGINS",
    "GENERATION_TIMEOUT_SECONDS",
    "GENERATION_MAX_RETRIES",
    "GENERATION_BACKOFF_SECONDS",
    "SCRIPTWRITER_API_URL",
    "BACKEND_TIMEOUT_SECONDS",
    "get_gemini_api_key",
]
