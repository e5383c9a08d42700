"""
Terminal presenter for streaming chat output.

The open bot bubble lives in a single rich ``Live`` region and is re-rendered
as Markdown from the full accumulated text on every update; transcript and
system messages are printed above it.
"""

from collections.abc import Callable

from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.markdown import Markdown
from rich.panel import Panel
from rich.spinner import Spinner
from rich.text import Text

from ..presentation import MessageRole, Presenter
from ..rendering import embed_video_links, strip_control_sequences

MarkdownRenderer = Callable[[str], RenderableType]
Sanitizer = Callable[[str], str]

ROLE_STYLES = {
    MessageRole.BOT.value: "cyan",
    MessageRole.USER.value: "green",
}


class ConsolePresenter(Presenter):
    """
    Rich terminal UI.

    Args:
        console: Console to draw on (defaults to stdout)
        render_markdown: Turns sanitized text into a renderable
        sanitize: Applied to bot text before rendering; None disables it
        post_render: Bubble post-processing step; None disables it
    """

    def __init__(
        self,
        console: Console | None = None,
        render_markdown: MarkdownRenderer = Markdown,
        sanitize: Sanitizer | None = strip_control_sequences,
        post_render: Sanitizer | None = embed_video_links,
    ) -> None:
        self.console = console or Console()
        self.render_markdown = render_markdown
        self.sanitize = sanitize
        self.post_render = post_render
        self._live: Live | None = None
        self._bubble: str | None = None
        self._typing = False

    # Bubble

    def open_bot_bubble(self) -> None:
        self._commit()
        self._bubble = ""
        self._refresh()

    def render_bot_bubble(self, markdown_text: str) -> None:
        self._bubble = markdown_text
        self._refresh()

    def post_process_bubble(self) -> None:
        if self._bubble and self.post_render is not None:
            self._bubble = self.post_render(self._bubble)
            self._refresh()

    # Transcript

    def append_transcript_message(self, role: str, content: str) -> None:
        if role == MessageRole.BOT.value:
            text = content
            if self.post_render is not None:
                text = self.post_render(text)
            self.console.print(self._bot_panel(text))
            return
        label = Text(f"{role}: ", style=f"bold {ROLE_STYLES.get(role, 'magenta')}")
        self.console.print(label + Text(content))

    def append_system_message(self, text: str) -> None:
        self.console.print(Text(text, style="dim italic"))

    # Typing indicator

    def show_typing_indicator(self) -> None:
        if self._typing:
            return
        self._typing = True
        self._refresh()

    def hide_typing_indicator(self) -> None:
        self._typing = False
        self._commit()

    def close(self) -> None:
        """Stop any live region (e.g. on Ctrl-C mid-stream)."""
        self._typing = False
        self._commit()

    # Internals

    def _bot_panel(self, text: str) -> Panel:
        if self.sanitize is not None:
            text = self.sanitize(text)
        return Panel(
            self.render_markdown(text),
            title="[cyan]bot[/cyan]",
            title_align="left",
            border_style="cyan",
        )

    def _renderable(self) -> RenderableType | None:
        parts: list[RenderableType] = []
        if self._bubble is not None:
            parts.append(self._bot_panel(self._bubble))
        if self._typing:
            parts.append(Spinner("dots", text=Text("typing...", style="dim")))
        if not parts:
            return None
        return Group(*parts)

    def _refresh(self) -> None:
        renderable = self._renderable()
        if renderable is None:
            self._stop_live()
            return
        if self._live is None:
            self._live = Live(renderable, console=self.console, refresh_per_second=12)
            self._live.start()
        else:
            self._live.update(renderable, refresh=True)

    def _commit(self) -> None:
        """Freeze the current bubble in the output and forget it."""
        if self._live is None:
            self._bubble = None
            return
        if self._typing:
            # Keep the spinner live; print the finished bubble above it.
            if self._bubble is not None:
                self.console.print(self._bot_panel(self._bubble))
            self._bubble = None
            self._refresh()
            return
        renderable = self._renderable()
        if renderable is not None:
            self._live.update(renderable, refresh=True)
        self._bubble = None
        self._stop_live()

    def _stop_live(self) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None
