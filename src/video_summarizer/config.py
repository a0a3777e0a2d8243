import os
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
DEFAULT_CACHE_TTL_SECONDS = 60 * 60  # an hour
DEFAULT_CACHE_MAX_SIZE = 128


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


@dataclass
class Settings:
    """Runtime configuration, read from the environment by ``from_env``."""

    llm_provider: str = "gemini"
    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None
    openai_model: Optional[str] = None
    youtube_api_key: Optional[str] = None
    transcript_languages: list[str] = field(default_factory=lambda: ["en"])
    llm_timeout_seconds: int = 120
    cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS
    cache_max_size: int = DEFAULT_CACHE_MAX_SIZE
    host: str = "0.0.0.0"
    port: int = 5000

    @classmethod
    def from_env(cls) -> "Settings":
        languages = os.getenv("TRANSCRIPT_LANGUAGES", "en")
        return cls(
            llm_provider=os.getenv("LLM_PROVIDER", "gemini").lower(),
            gemini_api_key=os.getenv("GEMINI_API_KEY"),
            gemini_model=os.getenv("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            openai_base_url=os.getenv("OPENAI_BASE_URL"),
            openai_model=os.getenv("OPENAI_MODEL"),
            youtube_api_key=os.getenv("YOUTUBE_API_KEY"),
            transcript_languages=[
                lang.strip() for lang in languages.split(",") if lang.strip()
            ]
            or ["en"],
            llm_timeout_seconds=_int_env("LLM_TIMEOUT_SECONDS", 120),
            cache_ttl_seconds=_int_env("CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS),
            cache_max_size=_int_env("CACHE_MAX_SIZE", DEFAULT_CACHE_MAX_SIZE),
            host=os.getenv("HOST", "0.0.0.0"),
            port=_int_env("PORT", 5000),
        )
