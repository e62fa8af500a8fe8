# chat_screen.py
# Description: Main chat screen: transcript, thinking indicator and input line
#
# Imports
from typing import Iterable
#
# Third-Party Imports
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.screen import Screen
from textual.widgets import Footer, Header, Input, Static
#
# Local Imports
from ai_chat.Chat.chat_models import ChatMessage
#
#######################################################################################################################
#
# Functions:

THINKING_TEXT = "AI is thinking..."

ROLE_LABELS = {
    "user": "user",
    "assistant": "ai",
    "system": "system",
}

ROLE_STYLES = {
    "user": "yellow",
    "assistant": "green",
    "system": "cyan",
}


def format_transcript_line(message: ChatMessage) -> Text:
    """``HH:MM:SS role: content`` with the role's colour."""
    label = ROLE_LABELS.get(message.role, message.role)
    line = Text(f"{message.timestamp:%H:%M:%S} ", style="dim")
    line.append(f"{label}: {message.content}", style=ROLE_STYLES.get(message.role, ""))
    return line


def render_transcript(messages: Iterable[ChatMessage]) -> Text:
    return Text("\n").join(format_transcript_line(m) for m in messages)


class ChatScreen(Screen):
    """The chat view. Holds no state of its own; the app repaints it from the controller."""

    DEFAULT_CSS = """
    #transcript-scroll {
        height: 1fr;
        padding: 0 1;
    }

    #thinking {
        height: 1;
        padding: 0 1;
        color: $text-muted;
        text-style: italic;
    }

    #chat-input {
        dock: bottom;
        margin-bottom: 1;
    }
    """

    def compose(self) -> ComposeResult:
        yield Header()
        with VerticalScroll(id="transcript-scroll"):
            yield Static("", id="transcript")
        yield Static("", id="thinking")
        yield Input(placeholder="Type a message and press Enter", id="chat-input")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#chat-input", Input).focus()

    def update_view(self, transcript: Iterable[ChatMessage], is_busy: bool) -> None:
        self.query_one("#transcript", Static).update(render_transcript(transcript))
        self.query_one("#thinking", Static).update(THINKING_TEXT if is_busy else "")

        chat_input = self.query_one("#chat-input", Input)
        was_disabled = chat_input.disabled
        chat_input.disabled = is_busy
        if was_disabled and not is_busy:
            chat_input.focus()

        self.query_one("#transcript-scroll", VerticalScroll).scroll_end(animate=False)

#
# End of chat_screen.py
#######################################################################################################################
