import enum
import logging
from typing import Optional

from video_summarizer.progress import ProgressSimulation
from video_summarizer.summarizer import MULTI, SummaryResult, Summarizer
from video_summarizer.urls import is_valid_url, is_youtube_url

logger = logging.getLogger(__name__)

SUBMIT_LABEL = "Summarize Video"
RETRY_LABEL = "Retry Summarization"
FALLBACK_ERROR = "An unexpected error occurred. Please try again."
QUOTA_HINT = "This might be due to high usage. Please try again in a few minutes."

# Error text that marks a failure worth retrying from the form
TRANSIENT_MARKERS = ("API quota", "try again")


class FormState(enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"
    SUCCESS = "success"


def validate_video_url(url: str) -> Optional[str]:
    """Return a validation message for ``url``, or None when it is acceptable."""
    if not is_valid_url(url):
        return "Please enter a valid URL"
    if not is_youtube_url(url):
        return "Must be a YouTube URL"
    return None


class SummaryForm:
    """State of one URL form: validation, submission, progress and results."""

    def __init__(
        self,
        summarizer: Summarizer,
        variant: str = MULTI,
        progress: Optional[ProgressSimulation] = None,
    ):
        self.summarizer = summarizer
        self.variant = variant
        self.progress = progress or ProgressSimulation()
        self.state = FormState.IDLE
        self.url = ""
        self.validation_error: Optional[str] = None
        self.error: Optional[str] = None
        self.result: Optional[SummaryResult] = None
        self.retry_count = 0

    @property
    def is_loading(self) -> bool:
        return self.state is FormState.LOADING

    @property
    def submit_label(self) -> str:
        return RETRY_LABEL if self.retry_count > 0 else SUBMIT_LABEL

    @property
    def error_hint(self) -> Optional[str]:
        if self.error and "API quota" in self.error:
            return QUOTA_HINT
        return None

    async def submit(self, url: str) -> FormState:
        self.url = (url or "").strip()
        self.validation_error = validate_video_url(self.url)
        if self.validation_error:
            self.state = FormState.ERROR
            return self.state

        self.state = FormState.LOADING
        self.error = None
        self.result = None
        self.retry_count = 0
        self.progress.start()
        try:
            self.result = await self.summarizer.summarize(self.url, self.variant)
        except Exception as e:
            self.progress.stop()
            self.error = str(e) or FALLBACK_ERROR
            self.state = FormState.ERROR
            if any(marker in self.error for marker in TRANSIENT_MARKERS):
                self.retry_count += 1
            logger.info(f"Form submission for {self.url} failed: {self.error}")
        else:
            self.progress.complete()
            self.state = FormState.SUCCESS
        return self.state
