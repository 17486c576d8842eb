"""
GroundCheck Configuration

Central settings loaded from environment variables.
"""

import os
import tempfile
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    # --- Weights ---
    # Looked up relative to the working directory at load time.
    WEIGHTS_FILE: str = os.getenv("GROUNDCHECK_WEIGHTS_FILE", ".groundcheckrc.json")

    # --- Stop hook ---
    MAX_CONSECUTIVE_BLOCKS: int = int(os.getenv("GROUNDCHECK_MAX_BLOCKS", "2"))
    STATE_DIR: str = os.getenv("GROUNDCHECK_STATE_DIR", tempfile.gettempdir())

    # --- Input ceiling (API only; the core accepts any string) ---
    MAX_TEXT_CHARS: int = int(os.getenv("GROUNDCHECK_MAX_TEXT_CHARS", "50000"))

    # --- Server ---
    HOST: str = os.getenv("GROUNDCHECK_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("GROUNDCHECK_PORT", "8000"))

    # --- CORS ---
    CORS_ORIGINS: str = os.getenv("GROUNDCHECK_CORS_ORIGINS", "*")


settings = Settings()
