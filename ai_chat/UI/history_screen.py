"""
Modal screen listing saved chats, most recent first.
"""

from typing import List

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Button, Label, OptionList, Static
from textual.widgets.option_list import Option

from ai_chat.Chat.chat_models import SessionSummary
from ai_chat.messages import CloseRequested, NewChatRequested, SessionChosen


class HistoryScreen(ModalScreen):
    """Saved-session picker with a New Chat button."""

    DEFAULT_CSS = """
    HistoryScreen {
        align: center middle;
    }

    #history-container {
        width: 80%;
        height: auto;
        max-height: 90%;
        background: $surface;
        border: thick $primary;
        padding: 1;
    }

    #history-title {
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    #session-list {
        height: auto;
        max-height: 20;
    }

    #history-empty {
        color: $text-muted;
    }

    #new-chat-button {
        margin-top: 1;
        width: 100%;
    }
    """

    BINDINGS = [
        Binding("escape", "close", "Close"),
    ]

    def __init__(self, sessions: List[SessionSummary], **kwargs):
        super().__init__(**kwargs)
        self.sessions = list(sessions)

    def compose(self) -> ComposeResult:
        with Container(id="history-container"):
            yield Label("Chat History", id="history-title")
            yield OptionList(id="session-list")
            yield Static("No saved chats yet.", id="history-empty")
            yield Button("New Chat", id="new-chat-button", variant="primary")

    def on_mount(self) -> None:
        self._populate()

    def show_sessions(self, sessions: List[SessionSummary]) -> None:
        self.sessions = list(sessions)
        if self.is_mounted:
            self._populate()

    def _populate(self) -> None:
        session_list = self.query_one("#session-list", OptionList)
        session_list.clear_options()
        session_list.add_options([Option(s.label, id=s.id) for s in self.sessions])
        session_list.display = bool(self.sessions)
        self.query_one("#history-empty", Static).display = not self.sessions
        if self.sessions:
            session_list.highlighted = 0
            session_list.focus()
        else:
            self.query_one("#new-chat-button", Button).focus()

    @on(OptionList.OptionSelected, "#session-list")
    def session_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        if event.option_id:
            self.app.post_message(SessionChosen(event.option_id))

    @on(Button.Pressed, "#new-chat-button")
    def new_chat_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.app.post_message(NewChatRequested())

    def action_close(self) -> None:
        self.app.post_message(CloseRequested())
