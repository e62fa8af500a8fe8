"""Custom Textual messages for event-driven communication."""

from textual.message import Message


class ControllerChanged(Message):
    """Posted whenever the conversation controller reports a state change."""


class ProviderChosen(Message):
    """Posted by the settings screen when a provider is picked."""
    def __init__(self, provider: str):
        super().__init__()
        self.provider = provider


class ModelChosen(Message):
    """Posted by the settings screen when a model is picked."""
    def __init__(self, model: str):
        super().__init__()
        self.model = model


class SessionChosen(Message):
    """Posted by the history screen when a saved chat is picked."""
    def __init__(self, session_id: str):
        super().__init__()
        self.session_id = session_id


class NewChatRequested(Message):
    """Posted by the history screen's New Chat button."""


class CloseRequested(Message):
    """Posted by a modal screen that wants to return to the chat."""
