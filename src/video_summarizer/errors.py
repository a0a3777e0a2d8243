import enum
import logging
from typing import Optional

logger = logging.getLogger(__name__)

QUOTA_MESSAGE = "API quota exceeded. Please try again later."
PERMISSION_MESSAGE = "Unable to access the video. It might be private or age-restricted."
TRANSCRIPT_MESSAGE = (
    "Unable to get video transcript. The video might not have captions available."
)
GENERIC_PREFIX = "Failed to summarize video: "


class ErrorCategory(enum.Enum):
    INVALID_URL = "invalid_url"
    TRANSCRIPT = "transcript_unavailable"
    QUOTA = "quota_exceeded"
    PERMISSION = "permission_denied"
    GENERIC = "generic"


class SummarizationError(Exception):
    """A user-facing failure; ``str(exc)`` is safe to display."""

    category = ErrorCategory.GENERIC

    def __init__(self, message: str, category: Optional[ErrorCategory] = None):
        super().__init__(message)
        if category is not None:
            self.category = category


class InvalidUrlError(SummarizationError):
    category = ErrorCategory.INVALID_URL

    def __init__(self, message: str = "Invalid YouTube URL"):
        super().__init__(message)


class TranscriptUnavailableError(SummarizationError):
    category = ErrorCategory.TRANSCRIPT

    def __init__(self, video_id: str):
        self.video_id = video_id
        super().__init__(
            "Unable to fetch video transcript. "
            "The video might not have captions available."
        )


class GenerationError(SummarizationError):
    """Raised when every attempt at a language-model call has failed."""

    def __init__(self, attempts: int, last_error: BaseException):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Failed to generate summary after {attempts} attempts. {last_error}"
        )


def classify_error(exc: BaseException) -> ErrorCategory:
    message = str(exc)
    if "quota" in message:
        return ErrorCategory.QUOTA
    if "permission" in message:
        return ErrorCategory.PERMISSION
    if "transcript" in message:
        return ErrorCategory.TRANSCRIPT
    return ErrorCategory.GENERIC


def user_message(exc: BaseException) -> str:
    category = classify_error(exc)
    if category is ErrorCategory.QUOTA:
        return QUOTA_MESSAGE
    if category is ErrorCategory.PERMISSION:
        return PERMISSION_MESSAGE
    if category is ErrorCategory.TRANSCRIPT:
        return TRANSCRIPT_MESSAGE
    return f"{GENERIC_PREFIX}{exc}"


def to_user_error(exc: BaseException) -> SummarizationError:
    """Convert any pipeline failure into the error shown to the user."""
    category = classify_error(exc)
    if category is ErrorCategory.GENERIC and isinstance(exc, InvalidUrlError):
        category = ErrorCategory.INVALID_URL
    logger.error(f"Summarization failed ({category.value}): {exc}")
    return SummarizationError(user_message(exc), category)
