"""
Runtime settings.

Rationale:
- Every component receives this object explicitly instead of reading globals.
- Values come from the process environment (after .env is loaded) with defaults.
"""

import os
from typing import Optional
from pydantic import BaseModel

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

DEFAULT_MODEL = "gemini-2.5-flash"


class Settings(BaseModel):
    port: int = 3000
    api_key: Optional[str] = None
    model_name: str = DEFAULT_MODEL
    vision_model_name: str = DEFAULT_MODEL
    max_tokens: int = 1000
    llm_timeout: float = 60.0
    upload_dir: str = os.path.join(BASE_DIR, "uploads")
    charts_dir: str = os.path.join(BASE_DIR, "generated-charts")
    public_dir: str = os.path.join(BASE_DIR, "public")
    # Characters of file content forwarded to the model
    content_limit: int = 2000

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to defaults."""
        defaults = cls()
        model_name = os.getenv("GEMINI_MODEL") or defaults.model_name
        return cls(
            port=int(os.getenv("PORT", defaults.port)),
            api_key=os.getenv("GEMINI_API_KEY") or os.getenv("LLM_API_KEY"),
            model_name=model_name,
            vision_model_name=os.getenv("GEMINI_VISION_MODEL") or model_name,
            max_tokens=int(os.getenv("LLM_MAX_TOKENS", defaults.max_tokens)),
            llm_timeout=float(os.getenv("LLM_TIMEOUT", defaults.llm_timeout)),
            upload_dir=os.getenv("UPLOAD_DIR") or defaults.upload_dir,
            charts_dir=os.getenv("CHARTS_DIR") or defaults.charts_dir,
            public_dir=os.getenv("PUBLIC_DIR") or defaults.public_dir,
        )
