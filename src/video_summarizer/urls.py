import re
from typing import Optional
from urllib.parse import urlparse

YOUTUBE_HOSTS = ("youtube.com", "youtu.be")
VIDEO_ID_LENGTH = 11

# Group 2 is whatever follows the recognised prefix, up to the first '#', '&' or '?'.
_VIDEO_ID_PATTERN = re.compile(
    r"^.*(youtu\.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*"
)


def is_valid_url(url: str) -> bool:
    """True for a well-formed absolute http(s) URL."""
    if not url or any(ch.isspace() for ch in url.strip()):
        return False
    parsed = urlparse(url.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_youtube_url(url: str) -> bool:
    return any(host in url for host in YOUTUBE_HOSTS)


def extract_video_id(url: str) -> Optional[str]:
    """
    Pull the video id out of the common YouTube URL shapes.

    Returns None unless the captured token is exactly 11 characters long.
    """
    if not url:
        return None
    match = _VIDEO_ID_PATTERN.match(url)
    if match and len(match.group(2)) == VIDEO_ID_LENGTH:
        return match.group(2)
    return None
