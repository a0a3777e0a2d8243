import pytest
import requests

from video_summarizer.metadata import NO_DESCRIPTION, MetadataService, VideoMetadata


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self.payload = payload or {}

    def json(self):
        return self.payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.requests = []

    def get(self, url, params=None, timeout=None):
        self.requests.append((url, params))
        return self.response


class FakeRequest:
    def __init__(self, payload):
        self.payload = payload

    def execute(self):
        return self.payload


class FakeVideos:
    def __init__(self, payload):
        self.payload = payload
        self.calls = []

    def list(self, part, id):
        self.calls.append((part, id))
        return FakeRequest(self.payload)


class FakeYoutubeClient:
    def __init__(self, payload):
        self._videos = FakeVideos(payload)

    def videos(self):
        return self._videos


def test_data_api_metadata():
    client = FakeYoutubeClient(
        {"items": [{"snippet": {"title": "A talk", "description": "About things"}}]}
    )
    service = MetadataService(youtube_client=client)

    assert service.fetch("dQw4w9WgXcQ") == VideoMetadata("A talk", "About things")
    assert client.videos().calls == [("snippet", "dQw4w9WgXcQ")]


def test_data_api_unknown_video():
    service = MetadataService(youtube_client=FakeYoutubeClient({"items": []}))
    with pytest.raises(Exception, match="No video found"):
        service.fetch("dQw4w9WgXcQ")


def test_oembed_fallback_has_no_description():
    session = FakeSession(FakeResponse(payload={"title": "From oEmbed"}))
    service = MetadataService(session=session)

    metadata = service.fetch("dQw4w9WgXcQ")
    assert metadata.title == "From oEmbed"
    assert metadata.description_or_default == NO_DESCRIPTION
    url, params = session.requests[0]
    assert url == "https://www.youtube.com/oembed"
    assert params["url"] == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


def test_oembed_private_video_is_a_permission_error():
    service = MetadataService(session=FakeSession(FakeResponse(status_code=401)))
    with pytest.raises(PermissionError, match="permission"):
        service.fetch("dQw4w9WgXcQ")


def test_metadata_is_cached():
    session = FakeSession(FakeResponse(payload={"title": "Once"}))
    service = MetadataService(session=session)

    service.fetch("dQw4w9WgXcQ")
    service.fetch("dQw4w9WgXcQ")
    assert len(session.requests) == 1
