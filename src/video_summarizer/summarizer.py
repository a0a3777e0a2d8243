import asyncio
import logging
import os
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Awaitable, Callable, Optional, Union

from video_summarizer.config import Settings
from video_summarizer.errors import (
    GenerationError,
    InvalidUrlError,
    TranscriptUnavailableError,
    to_user_error,
)
from video_summarizer.llm_providers import LLMProvider, get_llm_provider
from video_summarizer.metadata import MetadataService, VideoMetadata
from video_summarizer.retry import RetryError, exponential_backoff, retry_async
from video_summarizer.transcripts import TranscriptService
from video_summarizer.urls import extract_video_id, is_youtube_url

logger = logging.getLogger(__name__)

PROMPTS_DIR = os.path.join(os.path.dirname(__file__), "prompts")
PROMPT_NAMES = ["summary", "short_summary", "long_summary", "key_points"]

SINGLE = "single"
MULTI = "multi"
VARIANTS = (SINGLE, MULTI)

# Transcript character budget per variant
TRANSCRIPT_LIMITS = {SINGLE: 8000, MULTI: 10000}
TRUNCATION_MARKER = "..."
MAX_ATTEMPTS = 3

_LIST_MARKER = re.compile(r"^\d+\.\s*")


@dataclass
class VideoSummary:
    short_summary: str
    long_summary: str
    key_points: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


SummaryResult = Union[str, VideoSummary]


def read_prompt(filename):
    """Helper function to read a prompt file."""
    filepath = os.path.join(PROMPTS_DIR, f"{filename}.md")
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"Prompt file not found: {filepath}")
    with open(filepath, "r") as f:
        return f.read()


def load_prompts() -> dict:
    return {name: read_prompt(name) for name in PROMPT_NAMES}


def truncate_transcript(transcript: str, limit: int) -> str:
    if len(transcript) > limit:
        return transcript[:limit] + TRUNCATION_MARKER
    return transcript


def parse_key_points(text: str) -> list[str]:
    """Split a numbered list reply into bare points, dropping blank lines."""
    points = []
    for line in text.split("\n"):
        line = line.strip()
        if not line:
            continue
        points.append(_LIST_MARKER.sub("", line, count=1))
    return points


def build_content(metadata: VideoMetadata, transcript: str) -> str:
    return (
        f"Title: {metadata.title}\n"
        f"Description: {metadata.description_or_default}\n\n"
        f"Transcript:\n{transcript}"
    )


def is_retryable(exc: BaseException) -> bool:
    # Access problems won't fix themselves between attempts
    return "permission" not in str(exc)


class Summarizer:
    """
    Turns a YouTube URL into a summary.

    Every collaborator is passed in, so tests can swap any of them for a fake.
    Failures of any kind come out as a ``SummarizationError`` whose message is
    meant for the end user.
    """

    def __init__(
        self,
        llm_provider: LLMProvider,
        metadata_service: MetadataService,
        transcript_service: TranscriptService,
        prompts: Optional[dict] = None,
        total_attempts: int = MAX_ATTEMPTS,
        delay_for: Callable[[int], float] = exponential_backoff,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        timeout_seconds: Optional[float] = None,
    ):
        self.llm_provider = llm_provider
        self.metadata_service = metadata_service
        self.transcript_service = transcript_service
        self.prompts = prompts or load_prompts()
        self.total_attempts = total_attempts
        self.delay_for = delay_for
        self.sleep = sleep
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "Summarizer":
        return cls(
            llm_provider=get_llm_provider(settings),
            metadata_service=MetadataService(
                youtube_api_key=settings.youtube_api_key,
                cache_ttl_seconds=settings.cache_ttl_seconds,
                cache_max_size=settings.cache_max_size,
            ),
            transcript_service=TranscriptService(
                languages=settings.transcript_languages,
                cache_ttl_seconds=settings.cache_ttl_seconds,
                cache_max_size=settings.cache_max_size,
            ),
            timeout_seconds=settings.llm_timeout_seconds or None,
        )

    async def summarize(self, url: str, variant: str = MULTI) -> SummaryResult:
        if variant not in VARIANTS:
            raise ValueError(f"Unknown summary variant: {variant}")
        try:
            video_id = extract_video_id(url) if is_youtube_url(url or "") else None
            if not video_id:
                raise InvalidUrlError()

            metadata, transcript = await asyncio.gather(
                self._run_blocking(self.metadata_service.fetch, video_id),
                self._run_blocking(self.transcript_service.fetch_text, video_id),
            )
            if not transcript:
                raise TranscriptUnavailableError(video_id)

            content = build_content(
                metadata, truncate_transcript(transcript, TRANSCRIPT_LIMITS[variant])
            )
            if variant == SINGLE:
                return await self._generate("summary", content)
            return await self._generate_sections(content)

        except Exception as e:
            raise to_user_error(e) from e

    async def _generate_sections(self, content: str) -> VideoSummary:
        short_summary, long_summary, key_points = await asyncio.gather(
            self._generate("short_summary", content),
            self._generate("long_summary", content),
            self._generate("key_points", content),
        )
        return VideoSummary(
            short_summary=short_summary,
            long_summary=long_summary,
            key_points=parse_key_points(key_points),
        )

    async def _generate(self, prompt_name: str, content: str) -> str:
        instructions = self.prompts[prompt_name]
        try:
            return await retry_async(
                lambda: self.llm_provider.generate_content_async(instructions, content),
                total_attempts=self.total_attempts,
                delay_for=self.delay_for,
                is_retryable=is_retryable,
                sleep=self.sleep,
                description=f"{prompt_name} generation",
                timeout_seconds=self.timeout_seconds,
            )
        except RetryError as e:
            raise GenerationError(e.attempts, e.last_error) from e

    async def _run_blocking(self, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func, *args)
