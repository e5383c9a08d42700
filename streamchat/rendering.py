"""
Rendering helpers for bot messages.

``strip_control_sequences`` is the default sanitizer for terminal output and
``embed_video_links`` is the post-render step that turns video links into
embeddable player URLs.
"""

import re
from urllib.parse import parse_qs, urlparse

YOUTUBE_HOSTS = {"www.youtube.com", "youtube.com"}
SHORT_HOST = "youtu.be"
EMBED_PREFIX = "/embed/"
EMBED_URL = "https://www.youtube.com/embed/{video_id}"

# CSI/OSC escape sequences, then remaining C0 controls except tab and newline.
_ANSI_RE = re.compile(r"\x1b(?:\[[0-?]*[ -/]*[@-~]|\][^\x07\x1b]*(?:\x07|\x1b\\)|[@-Z\\-_])")
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")
_URL_RE = re.compile(r"https?://[^\s)\]>\"']+")


def strip_control_sequences(text: str) -> str:
    """Remove terminal escape sequences and control characters."""
    return _CONTROL_RE.sub("", _ANSI_RE.sub("", text))


def video_id_from_url(url: str) -> str | None:
    """Return the YouTube video id for watch, embed or youtu.be links."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return None

    host = (parsed.hostname or "").lower()
    if host in YOUTUBE_HOSTS:
        if parsed.path == "/watch":
            ids = parse_qs(parsed.query).get("v")
            return ids[0] if ids and ids[0] else None
        if parsed.path.startswith(EMBED_PREFIX):
            return parsed.path[len(EMBED_PREFIX) :] or None
    elif host == SHORT_HOST:
        return parsed.path[1:] or None
    return None


def embed_video_links(text: str) -> str:
    """Rewrite every YouTube link in ``text`` to its embed player URL."""

    def _replace(match: re.Match[str]) -> str:
        url = match.group(0)
        video_id = video_id_from_url(url)
        if video_id is None:
            return url
        return EMBED_URL.format(video_id=video_id)

    return _URL_RE.sub(_replace, text)
