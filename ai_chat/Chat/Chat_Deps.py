# Chat_Deps.py
# Description: Exception types shared by the chat backends and the session store
#
# Imports
from typing import Optional
#
#######################################################################################################################
#
# Backend Errors

class ChatAPIError(Exception):
    """Base class for failures talking to a chat provider."""

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.provider = provider

    def __str__(self) -> str:
        return self.message


class ChatConfigurationError(ChatAPIError):
    """The provider has no credential configured."""


class ChatProviderError(ChatAPIError):
    """The provider answered with an error or could not be reached."""

    def __init__(self, message: str, provider: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message, provider)
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class ChatResponseError(ChatAPIError):
    """The provider answered, but not in the shape we expected."""


#######################################################################################################################
#
# Session Store Errors

class SessionStoreError(Exception):
    """Base class for persistence failures."""

    def __init__(self, message: str, session_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.session_id = session_id

    def __str__(self) -> str:
        return self.message


class SessionSaveError(SessionStoreError):
    """Writing a session record failed."""


class SessionNotFoundError(SessionStoreError):
    """No record exists for the requested session id."""


class SessionCorruptError(SessionStoreError):
    """A record exists but cannot be parsed or is missing required fields."""

#
# End of Chat_Deps.py
#######################################################################################################################
