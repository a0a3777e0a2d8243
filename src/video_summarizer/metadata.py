import logging
import threading
from dataclasses import dataclass
from typing import Optional

import requests
from cachetools import TTLCache, cachedmethod
from googleapiclient.discovery import build

from video_summarizer.config import DEFAULT_CACHE_MAX_SIZE, DEFAULT_CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)

OEMBED_URL = "https://www.youtube.com/oembed"
NO_DESCRIPTION = "No description available."


@dataclass(frozen=True)
class VideoMetadata:
    title: str
    description: Optional[str] = None

    @property
    def description_or_default(self) -> str:
        return self.description or NO_DESCRIPTION


class MetadataService:
    """
    Looks up a video's title and description.

    Uses the YouTube Data API when a key is configured, otherwise the public
    oEmbed endpoint, which only knows the title. Errors are left to propagate.
    """

    def __init__(
        self,
        youtube_api_key: Optional[str] = None,
        youtube_client=None,
        session: Optional[requests.Session] = None,
        timeout_seconds: float = 10,
        cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
        cache_max_size: int = DEFAULT_CACHE_MAX_SIZE,
    ):
        self.youtube_client = youtube_client
        if self.youtube_client is None and youtube_api_key:
            self.youtube_client = build(
                "youtube", "v3", developerKey=youtube_api_key, cache_discovery=False
            )
        self.session = session or requests.Session()
        self.timeout_seconds = timeout_seconds
        self._cache = TTLCache(maxsize=cache_max_size, ttl=cache_ttl_seconds)
        self._lock = threading.Lock()

    @cachedmethod(lambda self: self._cache, lock=lambda self: self._lock)
    def fetch(self, video_id: str) -> VideoMetadata:
        if self.youtube_client is not None:
            return self._fetch_from_data_api(video_id)
        return self._fetch_from_oembed(video_id)

    def _fetch_from_data_api(self, video_id: str) -> VideoMetadata:
        videos_response = (
            self.youtube_client.videos().list(part="snippet", id=video_id).execute()
        )
        items = videos_response.get("items") or []
        if not items:
            raise Exception(f"No video found for ID: {video_id}")

        snippet = items[0]["snippet"]
        logger.info(f"Fetched metadata for {video_id} from the YouTube Data API")
        return VideoMetadata(
            title=snippet.get("title", ""),
            description=snippet.get("description") or None,
        )

    def _fetch_from_oembed(self, video_id: str) -> VideoMetadata:
        response = self.session.get(
            OEMBED_URL,
            params={
                "url": f"https://www.youtube.com/watch?v={video_id}",
                "format": "json",
            },
            timeout=self.timeout_seconds,
        )
        if response.status_code in (401, 403):
            # oEmbed answers 401 for private and embedding-disabled videos
            raise PermissionError(
                f"No permission to read video {video_id} (HTTP {response.status_code})"
            )
        response.raise_for_status()
        data = response.json()
        logger.info(f"Fetched metadata for {video_id} from oEmbed")
        return VideoMetadata(title=data.get("title", ""))
