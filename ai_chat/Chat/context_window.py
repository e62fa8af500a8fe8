# context_window.py
# Description: Bounded, FIFO-evicting log of the messages sent to a backend with each request
#
# Imports
from collections import deque
from typing import Deque, List
#
# Local Imports
from ai_chat.Chat.chat_models import ChatMessage
#
#######################################################################################################################
#
# Classes:

DEFAULT_CONTEXT_LIMIT = 10


class ContextWindow:
    """
    Ordered window of the most recent user/assistant messages.

    Holds at most ``capacity`` entries; appending past capacity evicts the
    oldest entries first. Messages with any other role are ignored so callers
    can route every message through ``append`` without filtering.
    """

    def __init__(self, capacity: int = DEFAULT_CONTEXT_LIMIT):
        if capacity < 1:
            raise ValueError(f"Context window capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._messages: Deque[ChatMessage] = deque()

    def append(self, message: ChatMessage) -> bool:
        """Add a message to the tail. Returns False if the role was rejected."""
        if not message.is_context_message:
            return False
        self._messages.append(message)
        while len(self._messages) > self.capacity:
            self._messages.popleft()
        return True

    def snapshot(self) -> List[ChatMessage]:
        """Copy of the retained messages, oldest first."""
        return list(self._messages)

    def clear(self) -> None:
        self._messages.clear()

    def __len__(self) -> int:
        return len(self._messages)

    def __repr__(self) -> str:
        return f"ContextWindow(capacity={self.capacity}, size={len(self._messages)})"

#
# End of context_window.py
#######################################################################################################################
