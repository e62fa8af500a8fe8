# app.py
# Description: Textual front end and command-line entry point for ai-chat
#
# Imports
import argparse
from pathlib import Path
from typing import Optional, Sequence, Union
#
# Third-Party Imports
import httpx
from loguru import logger
from textual import on
from textual.app import App
from textual.binding import Binding
from textual.widgets import Input
#
# Local Imports
from ai_chat import __version__
from ai_chat.Chat.context_window import DEFAULT_CONTEXT_LIMIT
from ai_chat.Chat.conversation_controller import ConversationController, Screen
from ai_chat.Chat.session_store import SessionStore
from ai_chat.LLM_Calls.LLM_Backends import BackendGateway
from ai_chat.LLM_Calls.provider_registry import ProviderRegistry
from ai_chat.Logging_Config import configure_application_logging
from ai_chat.UI.chat_screen import ChatScreen
from ai_chat.UI.history_screen import HistoryScreen
from ai_chat.UI.settings_screen import SettingsScreen
from ai_chat.config import (
    get_api_settings,
    get_cli_log_file_path,
    get_cli_setting,
    get_history_dir,
    get_int_setting,
    set_config_path,
)
from ai_chat.messages import (
    CloseRequested,
    ControllerChanged,
    ModelChosen,
    NewChatRequested,
    ProviderChosen,
    SessionChosen,
)
#
#######################################################################################################################
#
# Classes:

class ChatApp(App):
    """
    Adapter between Textual events and the ConversationController.

    Key presses and widget events become controller calls; every controller
    change posts ``ControllerChanged`` and the app repaints from controller
    state (transcript, busy flag, active modal, window title).
    """

    TITLE = "AI Chat"

    BINDINGS = [
        Binding("ctrl+s", "toggle_settings", "Settings", priority=True),
        Binding("ctrl+o", "toggle_history", "History", priority=True),
        Binding("ctrl+n", "new_chat", "New Chat", priority=True),
        Binding("escape", "close_screen", "Close", show=False),
        Binding("ctrl+q", "quit", "Quit", priority=True),
        Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
    ]

    def __init__(self, controller: ConversationController, **kwargs):
        super().__init__(**kwargs)
        self.controller = controller
        self.chat_screen = ChatScreen()

    async def on_mount(self) -> None:
        await self.push_screen(self.chat_screen)
        self.controller.on_change = self._controller_changed
        self.controller.start()
        self.sync_from_controller()

    async def on_unmount(self) -> None:
        await self.controller.gateway.aclose()

    def _controller_changed(self) -> None:
        self.post_message(ControllerChanged())

    def on_controller_changed(self, message: ControllerChanged) -> None:
        self.sync_from_controller()

    # --- Repaint ---

    def sync_from_controller(self) -> None:
        controller = self.controller
        self.title = f"AI Chat ({controller.provider.upper()})"
        self.sub_title = controller.model
        if self.chat_screen.is_mounted:
            self.chat_screen.update_view(controller.transcript, controller.is_busy)
        self._sync_modal()

    def _sync_modal(self) -> None:
        wanted = self.controller.screen
        top = self.screen
        if wanted == Screen.SETTINGS:
            if isinstance(top, SettingsScreen):
                top.refresh_from_controller()
            else:
                self._close_modals()
                self.push_screen(SettingsScreen(self.controller))
        elif wanted == Screen.HISTORY:
            if isinstance(top, HistoryScreen):
                top.show_sessions(self.controller.session_index)
            else:
                self._close_modals()
                self.push_screen(HistoryScreen(self.controller.session_index))
        else:
            self._close_modals()

    def _close_modals(self) -> None:
        while isinstance(self.screen, (SettingsScreen, HistoryScreen)):
            self.pop_screen()

    # --- Input ---

    @on(Input.Submitted, "#chat-input")
    def chat_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        text = event.value
        if not text.strip() or self.controller.is_busy:
            return
        event.input.value = ""
        self.run_worker(self.controller.submit(text), name="chat-turn", group="chat-turn")

    def on_provider_chosen(self, message: ProviderChosen) -> None:
        self.controller.select_provider(message.provider)

    def on_model_chosen(self, message: ModelChosen) -> None:
        self.controller.select_model(message.model)

    def on_session_chosen(self, message: SessionChosen) -> None:
        self.controller.load_session(message.session_id)

    def on_new_chat_requested(self, message: NewChatRequested) -> None:
        self.controller.new_chat()

    def on_close_requested(self, message: CloseRequested) -> None:
        self.controller.close_screen()

    # --- Actions ---

    def action_toggle_settings(self) -> None:
        self.controller.toggle_settings()

    def action_toggle_history(self) -> None:
        self.controller.toggle_history()

    def action_new_chat(self) -> None:
        self.controller.new_chat()

    def action_close_screen(self) -> None:
        self.controller.close_screen()

    async def action_quit(self) -> None:
        """Save (unless a reply is outstanding) and exit without confirmation."""
        self.controller.shutdown()
        self.exit()


#######################################################################################################################
#
# Functions:

def build_controller(
    provider: Optional[str] = None,
    history_dir: Optional[Union[str, Path]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ConversationController:
    """Wire registry, store and gateway together from the loaded configuration."""
    registry = ProviderRegistry()

    provider = provider or get_cli_setting("general", "default_provider")
    if provider and not registry.has_provider(provider):
        logger.warning(f"Configured default provider '{provider}' is unknown; using {registry.providers()[0]}")
        provider = None

    store = SessionStore(history_dir or get_history_dir(), registry)
    gateway = BackendGateway(registry, api_settings=get_api_settings(), transport=transport)
    return ConversationController(
        registry,
        store,
        gateway,
        provider=provider,
        context_limit=get_int_setting("general", "context_limit", DEFAULT_CONTEXT_LIMIT),
        autosave_interval=get_int_setting("general", "autosave_interval", 1),
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ai-chat",
        description="Chat with OpenAI, Claude, Gemini or Grok from the terminal.",
    )
    parser.add_argument(
        "-p", "--provider",
        choices=ProviderRegistry().providers(),
        help="Provider to start with (default: general.default_provider from the config file)",
    )
    parser.add_argument("--config", metavar="PATH", help="Path to the TOML config file")
    parser.add_argument("--history-dir", metavar="PATH", help="Directory for saved chats")
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main_cli_runner(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point for the ai-chat command."""
    args = build_arg_parser().parse_args(argv)

    if args.config:
        set_config_path(args.config)

    log_level = "DEBUG" if args.debug else str(get_cli_setting("general", "log_level", "INFO"))
    configure_application_logging(log_level, get_cli_log_file_path())
    logger.info(f"Starting ai-chat {__version__}")

    controller = build_controller(provider=args.provider, history_dir=args.history_dir)
    ChatApp(controller).run()
    logger.info("ai-chat exited")


if __name__ == "__main__":
    main_cli_runner()

#
# End of app.py
#######################################################################################################################
