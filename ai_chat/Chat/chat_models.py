# chat_models.py
# Description: Data models for chat messages, sessions and the saved-session index
#
# Imports
import time
from dataclasses import dataclass
from datetime import datetime
from typing import List, Literal, Optional
#
# Third-Party Imports
from pydantic import BaseModel, ConfigDict, Field
#
#######################################################################################################################
#
# Constants

DEFAULT_TITLE = "New Chat"
TITLE_MAX_LENGTH = 30

# Roles that reach a backend and are persisted; "system" entries only live in the transcript
CONTEXT_ROLES = ("user", "assistant")

Role = Literal["user", "assistant", "system"]

_last_session_id = 0


def new_session_id() -> str:
    """
    Return a fresh session id: the current time in epoch milliseconds.

    Ids are strictly increasing within a process, so two sessions created in the
    same millisecond still get distinct ids (and distinct files on disk).
    """
    global _last_session_id
    candidate = int(time.time() * 1000)
    if candidate <= _last_session_id:
        candidate = _last_session_id + 1
    _last_session_id = candidate
    return str(candidate)


def derive_title(content: str) -> str:
    """Build a session title from the first user message."""
    text = " ".join(content.split())
    if len(text) > TITLE_MAX_LENGTH:
        return text[:TITLE_MAX_LENGTH] + "..."
    return text


#######################################################################################################################
#
# Classes:

class ChatMessage(BaseModel):
    """Individual chat message. Immutable once created."""
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str
    timestamp: datetime = Field(default_factory=datetime.now)

    @property
    def is_context_message(self) -> bool:
        return self.role in CONTEXT_ROLES


class ChatSession(BaseModel):
    """
    One conversation: metadata plus the full, untrimmed message history.

    Only ``user`` and ``assistant`` messages belong in ``messages``; status
    annotations stay in the controller's display transcript.
    """
    id: str = Field(default_factory=new_session_id)
    title: str = DEFAULT_TITLE
    provider: str
    model: str
    messages: List[ChatMessage] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def has_default_title(self) -> bool:
        return self.title == DEFAULT_TITLE

    def add_message(self, message: ChatMessage) -> None:
        """Append a user/assistant message to the session history."""
        if not message.is_context_message:
            raise ValueError(f"Only user/assistant messages can be stored in a session, got '{message.role}'")
        self.messages.append(message)

    def first_user_message(self) -> Optional[ChatMessage]:
        for message in self.messages:
            if message.role == "user":
                return message
        return None

    def user_turn_count(self) -> int:
        return sum(1 for message in self.messages if message.role == "user")

    def ensure_title(self) -> bool:
        """Derive the title from the first user message if it is still the default.

        Returns True if the title changed.
        """
        if not self.has_default_title:
            return False
        first = self.first_user_message()
        if first is None:
            return False
        title = derive_title(first.content)
        if not title:
            return False
        self.title = title
        return True


@dataclass(frozen=True)
class SessionSummary:
    """One row of the saved-session index shown on the history screen."""
    id: str
    title: str
    provider: str
    timestamp: int

    @property
    def label(self) -> str:
        return f"{self.title} ({self.provider})"

#
# End of chat_models.py
#######################################################################################################################
