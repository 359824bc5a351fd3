"""
Configuration settings for the Labour Law Assistant
"""

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

# Use find_dotenv() to locate .env regardless of the current working directory.
# Falls back to an explicit path relative to this file (project root) if not found.
_dotenv_path = find_dotenv(usecwd=True) or str(Path(__file__).resolve().parent.parent.parent / ".env")
load_dotenv(_dotenv_path)


def _env_bool(name: str, default: str) -> bool:
    return (os.getenv(name, default)).strip().lower() in ("true", "1", "yes")


# ============================================
# Environment-based Configuration
# ============================================


class Config:
    """
    Centralized configuration loaded from environment variables.
    Edit .env file to change these values.
    """

    # Generation models. Rewrite/expansion/extraction are cheap calls; the answer model
    # can be upgraded independently.
    OPENAI_CHAT_MODEL: str = os.getenv("OPENAI_CHAT_MODEL", "gpt-4o-mini")
    REWRITE_MODEL: str = os.getenv("REWRITE_MODEL", "gpt-4o-mini")
    CHAT_TEMPERATURE: float = float(os.getenv("CHAT_TEMPERATURE", "0.2"))

    # Embedding Settings. MUST match the model the corpus was indexed with,
    # otherwise hybrid_search compares vectors from different spaces.
    EMBEDDING_MODEL: str = os.getenv("EMBEDDING_MODEL", "text-embedding-3-small")
    EMBEDDING_DIMENSIONS: int = int(os.getenv("EMBEDDING_DIMENSIONS", "1536"))

    # Retrieval Settings
    MATCH_COUNT: int = int(os.getenv("MATCH_COUNT", "10"))
    ASK_MATCH_COUNT: int = int(os.getenv("ASK_MATCH_COUNT", "5"))
    # Fusion weights favour meaning over exact keywords.
    FULL_TEXT_WEIGHT: float = float(os.getenv("FULL_TEXT_WEIGHT", "1.0"))
    SEMANTIC_WEIGHT: float = float(os.getenv("SEMANTIC_WEIGHT", "2.0"))
    RRF_K: int = int(os.getenv("RRF_K", "50"))
    HYBRID_SEARCH_RPC: str = os.getenv("HYBRID_SEARCH_RPC", "hybrid_search")

    # Case persistence
    CASES_TABLE: str = os.getenv("CASES_TABLE", "cases")
    CASE_TRACKING_ENABLED: bool = _env_bool("CASE_TRACKING_ENABLED", "true")

    # Every provider round-trip (rewrite, expand, embed, search, extract, persist, generate)
    # is capped by this timeout. A timeout fails the request like a provider error.
    STAGE_TIMEOUT_SECONDS: float = float(os.getenv("STAGE_TIMEOUT_SECONDS", "30"))

    # Query length limit (chars) - reject oversize queries to avoid abuse and cost
    MAX_QUERY_LENGTH: int = int(os.getenv("MAX_QUERY_LENGTH", "2000"))

    # HTTP server
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))


# Singleton instance
config = Config()


def validate_env_for_app() -> None:
    """
    Validate required env vars for the API. Call at startup.
    Raises SystemExit with clear message if any required var is missing.
    """
    required = {
        "SUPABASE_URL": os.getenv("SUPABASE_URL", "").strip(),
        "SUPABASE_KEY": os.getenv("SUPABASE_KEY", "").strip(),
        "OPENAI_API_KEY": os.getenv("OPENAI_API_KEY", "").strip(),
    }
    missing = [k for k, v in required.items() if not v]
    if missing:
        msg = f"Missing required env vars: {', '.join(missing)}. Set them in .env or environment."
        raise SystemExit(msg)


def validate_config_dependencies() -> list[str]:
    """Return human-readable errors for settings that would fail at request time."""
    errors: list[str] = []
    if config.MATCH_COUNT <= 0:
        errors.append(f"MATCH_COUNT must be positive (got {config.MATCH_COUNT}).")
    if config.ASK_MATCH_COUNT <= 0:
        errors.append(f"ASK_MATCH_COUNT must be positive (got {config.ASK_MATCH_COUNT}).")
    if config.STAGE_TIMEOUT_SECONDS <= 0:
        errors.append(f"STAGE_TIMEOUT_SECONDS must be positive (got {config.STAGE_TIMEOUT_SECONDS}).")
    if config.EMBEDDING_DIMENSIONS <= 0:
        errors.append(f"EMBEDDING_DIMENSIONS must be positive (got {config.EMBEDDING_DIMENSIONS}).")
    if config.MAX_QUERY_LENGTH <= 0:
        errors.append(f"MAX_QUERY_LENGTH must be positive (got {config.MAX_QUERY_LENGTH}).")
    return errors


# ============================================
# Service metadata (static values)
# ============================================

APP_TITLE = "South African Labour Law Assistant"
APP_VERSION = "0.4.0"
