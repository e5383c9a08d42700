"""Tests for bot message rendering helpers."""

import pytest

from streamchat.presentation import MessageRole, display_role
from streamchat.rendering import embed_video_links, strip_control_sequences, video_id_from_url


class TestVideoIdFromUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
            "https://youtube.com/watch?v=dQw4w9WgXcQ&t=42",
            "https://www.youtube.com/embed/dQw4w9WgXcQ",
            "https://youtu.be/dQw4w9WgXcQ",
        ],
    )
    def test_supported_forms(self, url):
        assert video_id_from_url(url) == "dQw4w9WgXcQ"

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/watch?v=abc",
            "https://www.youtube.com/watch",
            "https://www.youtube.com/channel/xyz",
            "https://youtu.be/",
            "not a url",
        ],
    )
    def test_unsupported_forms(self, url):
        assert video_id_from_url(url) is None


class TestEmbedVideoLinks:
    def test_rewrites_links_in_text(self):
        text = "Watch https://youtu.be/abc123 or [this](https://www.youtube.com/watch?v=xyz)."
        assert embed_video_links(text) == (
            "Watch https://www.youtube.com/embed/abc123 or "
            "[this](https://www.youtube.com/embed/xyz)."
        )

    def test_other_links_untouched(self):
        text = "See https://example.com/page for details"
        assert embed_video_links(text) == text

    def test_idempotent(self):
        once = embed_video_links("https://youtu.be/abc123")
        assert embed_video_links(once) == once


class TestStripControlSequences:
    def test_removes_ansi_and_controls(self):
        assert strip_control_sequences("\x1b[31mred\x1b[0m\x07!") == "red!"

    def test_keeps_tabs_and_newlines(self):
        assert strip_control_sequences("a\tb\nc") == "a\tb\nc"

    def test_removes_osc_title_sequence(self):
        assert strip_control_sequences("\x1b]0;pwned\x07hello") == "hello"


class TestDisplayRole:
    def test_assistant_maps_to_bot(self):
        assert display_role("assistant") == MessageRole.BOT.value

    def test_other_roles_unchanged(self):
        assert display_role("user") == "user"
