import pytest

from video_summarizer.llm_providers import LLMProvider
from video_summarizer.metadata import VideoMetadata
from video_summarizer.summarizer import Summarizer

VIDEO_ID = "dQw4w9WgXcQ"
VIDEO_URL = f"https://www.youtube.com/watch?v={VIDEO_ID}"

TEST_PROMPTS = {
    "summary": "SUMMARY",
    "short_summary": "SHORT",
    "long_summary": "LONG",
    "key_points": "KEY_POINTS",
}

DEFAULT_REPLIES = {
    "SUMMARY": "A single summary of the video.",
    "SHORT": "Short take.",
    "LONG": "A much longer take on the video.",
    "KEY_POINTS": "1. First\n\n2. Second\n3. Third",
}


class FakeLLMProvider(LLMProvider):
    """
    Replies per prompt. A reply may be a string, an exception to raise, or a
    list of those consumed one per call.
    """

    def __init__(self, replies=None):
        self.replies = dict(DEFAULT_REPLIES)
        self.replies.update(replies or {})
        self.calls = []

    async def generate_content_async(self, prompt: str, content: str) -> str:
        self.calls.append((prompt, content))
        reply = self.replies[prompt]
        if isinstance(reply, list):
            reply = reply.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply


class FakeMetadataService:
    def __init__(self, metadata=None, error=None):
        self.metadata = metadata or VideoMetadata(title="Never Gonna Give You Up")
        self.error = error
        self.calls = []

    def fetch(self, video_id):
        self.calls.append(video_id)
        if self.error:
            raise self.error
        return self.metadata


class FakeTranscriptService:
    def __init__(self, text="never gonna give you up never gonna let you down"):
        self.text = text
        self.calls = []

    def fetch_text(self, video_id):
        self.calls.append(video_id)
        return self.text


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


@pytest.fixture
def llm():
    return FakeLLMProvider()


@pytest.fixture
def metadata_service():
    return FakeMetadataService()


@pytest.fixture
def transcript_service():
    return FakeTranscriptService()


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def make_summarizer(llm, metadata_service, transcript_service, sleep):
    def _make(**overrides):
        kwargs = dict(
            llm_provider=llm,
            metadata_service=metadata_service,
            transcript_service=transcript_service,
            prompts=TEST_PROMPTS,
            sleep=sleep,
        )
        kwargs.update(overrides)
        return Summarizer(**kwargs)

    return _make


@pytest.fixture
def summarizer(make_summarizer):
    return make_summarizer()
