"""Tests for the message assembly state machine."""

import pytest

from streamchat.assembler import AssemblerPhase, AssemblyState, MessageAssembler
from streamchat.streaming import (
    CachedMessageEvent,
    SemanticEvent,
    SemanticEventType,
    run_completed,
    run_failed,
    stream_end,
    text_delta,
)


@pytest.fixture
def assembler(presenter):
    assembler = MessageAssembler(presenter)
    assembler.begin()
    return assembler


class TestTextDeltas:
    def test_first_delta_opens_bubble(self, assembler, presenter):
        assert assembler.phase == AssemblerPhase.IDLE
        assembler.handle(text_delta("Hello"))
        assert presenter.names()[:2] == ["open_bot_bubble", "render_bot_bubble"]
        assert assembler.phase == AssemblerPhase.ACCUMULATING
        assert assembler.state.has_open_bubble
        assert assembler.state.active_content == "Hello"

    def test_renders_full_accumulated_text(self, assembler, presenter):
        assembler.handle(text_delta("Hello"))
        assembler.handle(text_delta(" world"))
        assert presenter.names().count("open_bot_bubble") == 1
        assert presenter.bubbles == [["Hello", "Hello world"]]

    def test_markdown_rendered_against_whole_text(self, assembler, presenter):
        for piece in ["**bo", "ld** and `co", "de`"]:
            assembler.handle(text_delta(piece))
        assert presenter.final_bubbles() == ["**bold** and `code`"]

    def test_post_process_hook_after_every_render(self, assembler, presenter):
        assembler.handle(text_delta("a"))
        assembler.handle(text_delta("b"))
        names = presenter.names()
        assert names == [
            "open_bot_bubble",
            "render_bot_bubble",
            "post_process_bubble",
            "render_bot_bubble",
            "post_process_bubble",
        ]


class TestTerminalEvents:
    def test_run_completed_resets_state(self, assembler, presenter):
        assembler.handle(text_delta("Hello"))
        assembler.handle(run_completed())
        assert assembler.state == AssemblyState(False, "", False)
        assert assembler.phase == AssemblerPhase.IDLE
        assert "hide_typing_indicator" in presenter.names()
        assert presenter.system_messages() == []

    def test_delta_after_completion_opens_new_bubble(self, assembler, presenter):
        assembler.handle(text_delta("first"))
        assembler.handle(run_completed())
        assembler.handle(text_delta("second"))
        assert presenter.names().count("open_bot_bubble") == 2
        assert presenter.final_bubbles() == ["first", "second"]
        assert assembler.state.active_content == "second"

    def test_run_failed_emits_one_system_message(self, assembler, presenter):
        assembler.handle(text_delta("partial"))
        assembler.handle(run_failed("boom"))
        assert presenter.system_messages() == ["Error: boom"]
        assert not assembler.state.is_streaming
        assert assembler.state.active_content == ""
        assert not assembler.state.has_open_bubble

    def test_stream_end_resets_state(self, assembler, presenter):
        assembler.handle(text_delta("x"))
        assembler.handle(stream_end("Stream closed by server."))
        assert assembler.state == AssemblyState()
        assert presenter.system_messages() == []

    def test_terminal_event_without_bubble(self, assembler, presenter):
        assembler.handle(run_completed())
        assert presenter.names() == ["hide_typing_indicator"]
        assert not assembler.state.is_streaming


class TestOtherEvents:
    def test_cached_message_appended_without_touching_bubble(self, assembler, presenter):
        assembler.handle(text_delta("streaming"))
        assembler.handle(
            CachedMessageEvent(type=SemanticEventType.CACHED_MESSAGE, role="bot", content="old")
        )
        assert presenter.transcript() == [("bot", "old")]
        assert assembler.state.active_content == "streaming"
        assert assembler.state.has_open_bubble

    def test_unknown_event_is_noop(self, assembler, presenter):
        assembler.handle(SemanticEvent(type=SemanticEventType.UNKNOWN, event_name="x"))
        assert presenter.calls == []
        assert assembler.state.is_streaming

    def test_begin_resets_previous_content(self, presenter):
        assembler = MessageAssembler(presenter)
        assembler.state.active_content = "stale"
        assembler.state.has_open_bubble = True
        assembler.begin()
        assert assembler.state == AssemblyState(True, "", False)
