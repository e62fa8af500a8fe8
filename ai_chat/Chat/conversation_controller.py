# conversation_controller.py
# Description: Owns the active session, context window, provider selection and screen state
#
# Imports
from enum import Enum
from typing import Callable, List, Optional
#
# Third-Party Imports
from loguru import logger
#
# Local Imports
from ai_chat.Chat.Chat_Deps import SessionStoreError
from ai_chat.Chat.chat_models import ChatMessage, ChatSession, SessionSummary
from ai_chat.Chat.context_window import DEFAULT_CONTEXT_LIMIT, ContextWindow
from ai_chat.Chat.markdown_stripper import strip_markdown
from ai_chat.Chat.session_store import SessionStore
from ai_chat.LLM_Calls.LLM_Backends import BackendGateway
from ai_chat.LLM_Calls.provider_registry import ProviderRegistry
from ai_chat.Logging_Config import truncate_for_log
from ai_chat.state.provider_state import ProviderSelection
#
#######################################################################################################################
#
# Constants:

KEY_HINTS = (
    "press ctrl+s for settings, ctrl+o for chat history, ctrl+n for a new chat, ctrl+q to quit.\n"
    "api keys are read from environment variables or the config file."
)

#
# Classes:

class Screen(str, Enum):
    CHAT = "chat"
    SETTINGS = "settings"
    HISTORY = "history"


class ConversationController:
    """
    Application state for one chat window, independent of any UI toolkit.

    Every user action is a method call. ``on_change`` is invoked after each
    observable mutation so a front end can repaint from the public attributes
    (``transcript``, ``screen``, ``selection``, ``is_busy``, ...).
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        store: SessionStore,
        gateway: BackendGateway,
        provider: Optional[str] = None,
        context_limit: int = DEFAULT_CONTEXT_LIMIT,
        autosave_interval: int = 1,
        on_change: Optional[Callable[[], None]] = None,
    ):
        if autosave_interval < 1:
            raise ValueError(f"autosave_interval must be at least 1, got {autosave_interval}")
        self.registry = registry
        self.store = store
        self.gateway = gateway
        self.selection = ProviderSelection.for_registry(registry, provider)
        self.context = ContextWindow(context_limit)
        self.session = self._fresh_session()
        self.transcript: List[ChatMessage] = []
        self.screen = Screen.CHAT
        self.session_index: List[SessionSummary] = []
        self.is_busy = False
        self.autosave_interval = autosave_interval
        self.on_change = on_change
        self._completed_turns = 0

    # --- Helpers ---

    @property
    def provider(self) -> str:
        return self.selection.active

    @property
    def model(self) -> str:
        return self.selection.active_model

    def _fresh_session(self) -> ChatSession:
        return ChatSession(provider=self.selection.active, model=self.selection.active_model)

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def _add(self, message: ChatMessage) -> None:
        """Route a message to the transcript and, for user/assistant, the context and session."""
        self.transcript.append(message)
        if self.context.append(message):
            self.session.add_message(message)

    def _append(self, role: str, content: str) -> ChatMessage:
        message = ChatMessage(role=role, content=content)
        self._add(message)
        return message

    def _system(self, content: str) -> None:
        logger.debug(f"System message: {content}")
        self._append("system", content)

    def _refuse_while_busy(self, action: str) -> bool:
        if self.is_busy:
            logger.info(f"Ignoring {action} while a reply is outstanding")
            return True
        return False

    # --- Lifecycle ---

    def start(self) -> None:
        self._system(f"welcome to ai-chat! you're now chatting with {self.provider} ({self.model}).\n{KEY_HINTS}")
        self._notify()

    def shutdown(self) -> None:
        """Final save on exit. Skipped while a turn is outstanding."""
        if self.is_busy:
            logger.info("Exiting with a reply outstanding; skipping final save")
            return
        self.save()

    # --- Screens ---

    def open_settings(self) -> None:
        if self.screen == Screen.CHAT:
            self.screen = Screen.SETTINGS
            self._notify()

    def toggle_settings(self) -> None:
        if self.screen == Screen.SETTINGS:
            self.close_screen()
        else:
            self.open_settings()

    def open_history(self) -> List[SessionSummary]:
        """Save the current chat, refresh the saved-session index and show it."""
        if self._refuse_while_busy("history"):
            return []
        self.save()
        self.session_index = self.store.list_sessions()
        self.screen = Screen.HISTORY
        self._notify()
        return self.session_index

    def toggle_history(self) -> None:
        if self.screen == Screen.HISTORY:
            self.close_screen()
        else:
            self.open_history()

    def close_screen(self) -> None:
        if self.screen != Screen.CHAT:
            self.screen = Screen.CHAT
            self._notify()

    # --- Provider / model ---

    def select_provider(self, provider: str) -> bool:
        if not self.selection.switch_provider(provider):
            return False
        self.gateway.reload(provider)
        logger.info(f"Provider changed to {self.provider} ({self.model})")
        self._system(f"provider changed to {self.provider} ({self.model})")
        self._notify()
        return True

    def select_model(self, model: str) -> bool:
        if not self.selection.choose_model(model):
            return False
        logger.info(f"Model changed to {model} for {self.provider}")
        self._system(f"model changed to {model}")
        self._notify()
        return True

    # --- Sessions ---

    def load_session(self, session_id: str) -> bool:
        if self._refuse_while_busy("load"):
            return False
        try:
            loaded = self.store.load(session_id)
        except SessionStoreError as e:
            logger.warning(f"Could not load session {session_id}: {e}")
            self._system(f"error loading chat: {e}")
            self._notify()
            return False

        self.session = loaded.session.model_copy(update={"messages": []})
        self.context.clear()
        self.transcript.clear()
        self._completed_turns = 0
        for message in loaded.session.messages:
            self._add(message)

        self.selection.apply(loaded.provider, loaded.model)
        self.gateway.reload(self.provider)
        self._system(f"loaded chat: {self.session.title}")
        self.screen = Screen.CHAT
        self._notify()
        return True

    def new_chat(self) -> bool:
        """Save the current chat, then start an empty one with the active provider and model."""
        if self._refuse_while_busy("new chat"):
            return False
        save_error = None
        try:
            self._persist()
        except SessionStoreError as e:
            save_error = e

        self.session = self._fresh_session()
        self.context.clear()
        self.transcript.clear()
        self._completed_turns = 0
        logger.info(f"Started new session {self.session.id}")
        if save_error is not None:
            self._system(f"error saving chat: {save_error}")
        self._system(f"started new chat with {self.provider} ({self.model})")
        self.screen = Screen.CHAT
        self._notify()
        return True

    def _persist(self) -> bool:
        self.session.provider = self.provider
        self.session.model = self.model
        return self.store.save(self.session)

    def save(self) -> bool:
        """Persist the current session. Errors become a system line; nothing is rolled back."""
        try:
            return self._persist()
        except SessionStoreError as e:
            self._system(f"error saving chat: {e}")
            self._notify()
            return False

    # --- Turns ---

    async def submit(self, text: str) -> bool:
        """Run one turn: user message, backend reply, optional autosave."""
        if not text or not text.strip():
            return False
        if self.is_busy or self.screen != Screen.CHAT:
            logger.debug(f"Rejecting input (busy={self.is_busy}, screen={self.screen.value})")
            return False

        provider, model = self.provider, self.model
        logger.info(f"User turn for {provider} ({model}): {truncate_for_log(text)}")
        self._append("user", text)
        self.is_busy = True
        self._notify()

        try:
            reply = await self.gateway.send(provider, model, self.context.snapshot())
        finally:
            self.is_busy = False

        self._append("assistant", strip_markdown(reply))
        self._completed_turns += 1
        if self._completed_turns % self.autosave_interval == 0:
            self.save()
        self._notify()
        return True

#
# End of conversation_controller.py
#######################################################################################################################
