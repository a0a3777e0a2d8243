import logging
import threading
from typing import Optional, Sequence

from cachetools import TTLCache, cachedmethod
from youtube_transcript_api import (
    NoTranscriptFound,
    TranscriptsDisabled,
    YouTubeTranscriptApi,
)

from video_summarizer.config import DEFAULT_CACHE_MAX_SIZE, DEFAULT_CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)


class TranscriptNotFoundError(Exception):
    """Raised when a requested transcript cannot be found for a video."""

    def __init__(self, video_id: str):
        self.video_id = video_id
        super().__init__(f"Requested transcript does not exist for video: {video_id}")


def join_segments(segments) -> str:
    """Concatenate timed caption fragments into one space-separated string."""
    texts = []
    for segment in segments:
        # Older releases of youtube-transcript-api return dicts, newer ones snippet objects
        text = segment["text"] if isinstance(segment, dict) else segment.text
        if text:
            texts.append(text)
    return " ".join(texts)


class TranscriptService:
    """
    Fetches YouTube captions through youtube-transcript-api.

    Successful fetches are kept in a per-instance TTL cache, failures are not.
    """

    def __init__(
        self,
        languages: Sequence[str] = ("en",),
        api: Optional[YouTubeTranscriptApi] = None,
        cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
        cache_max_size: int = DEFAULT_CACHE_MAX_SIZE,
    ):
        self.languages = list(languages)
        self.api = api or YouTubeTranscriptApi()
        self._cache = TTLCache(maxsize=cache_max_size, ttl=cache_ttl_seconds)
        self._lock = threading.Lock()

    @cachedmethod(lambda self: self._cache, lock=lambda self: self._lock)
    def fetch_segments(self, video_id: str) -> list:
        try:
            fetched = self.api.fetch(video_id, languages=self.languages)
        except (TranscriptsDisabled, NoTranscriptFound) as e:
            raise TranscriptNotFoundError(video_id) from e

        segments = list(fetched)
        if not segments:
            raise TranscriptNotFoundError(video_id)
        return segments

    def fetch_text(self, video_id: str) -> str:
        """Return the whole transcript as one string, or "" if it can't be fetched."""
        try:
            segments = self.fetch_segments(video_id)
        except Exception as e:
            logger.error(f"Error fetching transcript for {video_id}: {e}")
            return ""
        logger.info(f"Fetched {len(segments)} transcript segments for {video_id}")
        return join_segments(segments)
