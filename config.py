"""Neurika configuration settings.

Values are read from the environment (a local .env file is loaded first).

Supabase:
- SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY
- STORAGE_BUCKET: bucket holding uploaded datasets

Language model (OpenAI-compatible chat completions):
- OPENAI_API_KEY, OPENAI_BASE_URL, OPENAI_MODEL
- LLM_TIMEOUT, LLM_MAX_TOKENS, ANALYZE_TEMPERATURE, CHAT_TEMPERATURE

Team invitations:
- RESEND_API_KEY (optional, invitations are still created without it)
- INVITE_FROM, INVITE_EXPIRY_DAYS
"""
import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


class Settings(BaseModel):
    """Application settings."""

    supabase_url: str = os.getenv("SUPABASE_URL", "")
    supabase_key: str = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
    storage_bucket: str = os.getenv("STORAGE_BUCKET", "datasets")

    openai_api_key: Optional[str] = os.getenv("OPENAI_API_KEY")
    openai_base_url: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    llm_timeout: float = float(os.getenv("LLM_TIMEOUT", "60"))
    llm_max_tokens: int = int(os.getenv("LLM_MAX_TOKENS", "1000"))
    analyze_temperature: float = float(os.getenv("ANALYZE_TEMPERATURE", "0.7"))
    chat_temperature: float = float(os.getenv("CHAT_TEMPERATURE", "0.8"))

    # Dataset handling
    dataset_context_chars: int = int(os.getenv("DATASET_CONTEXT_CHARS", "10000"))
    profile_max_rows: int = int(os.getenv("PROFILE_MAX_ROWS", "100"))

    resend_api_key: Optional[str] = os.getenv("RESEND_API_KEY")
    invite_from: str = os.getenv("INVITE_FROM", "Neurika <onboarding@resend.dev>")
    invite_expiry_days: int = int(os.getenv("INVITE_EXPIRY_DAYS", "7"))

    cors_origins: List[str] = [
        o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
    ]
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def load_settings() -> Settings:
    """Build a Settings object from the current environment."""
    return Settings()
