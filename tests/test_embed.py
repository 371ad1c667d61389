from urllib.parse import parse_qs, urlparse

from academy.models.enums import VideoType
from academy.videos.embed import (
    detect_video_type,
    is_embedded,
    resolve_embed_url,
    vimeo_embed_url,
    youtube_embed_url,
)


def _split(url: str) -> tuple[str, dict[str, list[str]]]:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}{parsed.path}", parse_qs(parsed.query)


def test_youtube_watch_url() -> None:
    base, params = _split(youtube_embed_url("https://www.youtube.com/watch?v=abc123XYZ&t=42"))
    assert base == "https://www.youtube-nocookie.com/embed/abc123XYZ"
    assert params["modestbranding"] == ["1"]
    assert params["rel"] == ["0"]
    assert params["playsinline"] == ["1"]


def test_youtube_short_and_embed_urls() -> None:
    assert youtube_embed_url("https://youtu.be/abc123").startswith(
        "https://www.youtube-nocookie.com/embed/abc123?"
    )
    assert youtube_embed_url("https://www.youtube.com/embed/xyz789?start=5").startswith(
        "https://www.youtube-nocookie.com/embed/xyz789?"
    )


def test_youtube_unrecognised_link_is_returned_unchanged() -> None:
    url = "https://www.youtube.com/channel/UC123"
    assert youtube_embed_url(url) == url


def test_vimeo_urls() -> None:
    base, params = _split(vimeo_embed_url("https://vimeo.com/123456789?fl=ip&fe=ec"))
    assert base == "https://player.vimeo.com/video/123456789"
    assert params["title"] == ["0"]
    assert params["autopause"] == ["0"]

    base, _ = _split(vimeo_embed_url("https://player.vimeo.com/video/987654"))
    assert base == "https://player.vimeo.com/video/987654"


def test_vimeo_numeric_last_segment_fallback() -> None:
    base, params = _split(vimeo_embed_url("https://vimeo.com/channels/staffpicks/555666"))
    assert base == "https://player.vimeo.com/video/555666"
    assert set(params) == {"title", "byline", "portrait", "badge"}


def test_vimeo_without_id_is_none() -> None:
    assert vimeo_embed_url("https://vimeo.com/user/showcase") is None


def test_resolve_embed_url_falls_back_to_raw_url() -> None:
    assert resolve_embed_url("https://cdn.example.com/aula1.mp4") == "https://cdn.example.com/aula1.mp4"
    assert resolve_embed_url("https://vimeo.com/user/showcase") == "https://vimeo.com/user/showcase"
    assert resolve_embed_url(None) is None
    assert resolve_embed_url("") is None


def test_detect_video_type() -> None:
    assert detect_video_type("https://youtu.be/abc") == VideoType.YOUTUBE
    assert detect_video_type("https://vimeo.com/1") == VideoType.VIMEO
    assert detect_video_type("https://cdn.example.com/a.mp4") == VideoType.URL


def test_is_embedded() -> None:
    assert is_embedded("https://youtu.be/abc") is True
    assert is_embedded("https://cdn.example.com/a.mp4", VideoType.URL) is False
    assert is_embedded(None) is False
