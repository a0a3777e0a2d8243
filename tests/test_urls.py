import pytest

from video_summarizer.urls import extract_video_id, is_valid_url, is_youtube_url


@pytest.mark.parametrize(
    "url",
    [
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=42s",
        "https://youtu.be/dQw4w9WgXcQ",
        "https://youtu.be/dQw4w9WgXcQ?si=abc",
        "https://www.youtube.com/embed/dQw4w9WgXcQ",
        "https://www.youtube.com/v/dQw4w9WgXcQ",
        "https://www.youtube.com/u/w/dQw4w9WgXcQ",
        "https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ",
    ],
)
def test_extract_video_id_known_shapes(url):
    assert extract_video_id(url) == "dQw4w9WgXcQ"


@pytest.mark.parametrize(
    "url",
    [
        "https://www.youtube.com/watch?v=dQw4w9WgXc",  # 10 characters
        "https://www.youtube.com/watch?v=dQw4w9WgXcQQ",  # 12 characters
        "https://youtu.be/",
        "https://example.com/page",
        "",
    ],
)
def test_extract_video_id_rejects_bad_ids(url):
    assert extract_video_id(url) is None


def test_is_valid_url():
    assert is_valid_url("https://www.youtube.com/watch?v=dQw4w9WgXcQ")
    assert is_valid_url("http://youtu.be/dQw4w9WgXcQ")
    assert not is_valid_url("www.youtube.com/watch?v=dQw4w9WgXcQ")
    assert not is_valid_url("not a url")
    assert not is_valid_url("ftp://youtube.com/file")
    assert not is_valid_url("")


def test_is_youtube_url():
    assert is_youtube_url("https://www.youtube.com/watch?v=dQw4w9WgXcQ")
    assert is_youtube_url("https://youtu.be/dQw4w9WgXcQ")
    assert not is_youtube_url("https://vimeo.com/12345")
