"""
Modal screen for choosing the provider and model.
"""

from typing import TYPE_CHECKING

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Label, OptionList, Static
from textual.widgets.option_list import Option

from ai_chat.config import get_config_path
from ai_chat.messages import CloseRequested, ModelChosen, ProviderChosen

if TYPE_CHECKING:
    from ai_chat.Chat.conversation_controller import ConversationController


def marked(label: str, active: bool) -> str:
    return f"* {label}" if active else f"  {label}"


class SettingsScreen(ModalScreen):
    """Provider list, model list for the active provider, and API key instructions."""

    DEFAULT_CSS = """
    SettingsScreen {
        align: center middle;
    }

    #settings-container {
        width: 80%;
        height: auto;
        max-height: 90%;
        background: $surface;
        border: thick $primary;
        padding: 1;
    }

    #settings-title {
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    .settings-column {
        width: 1fr;
        height: auto;
    }

    .settings-column OptionList {
        height: auto;
        max-height: 12;
    }

    #api-key-hint {
        margin-top: 1;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("escape", "close", "Close"),
    ]

    def __init__(self, controller: "ConversationController", **kwargs):
        super().__init__(**kwargs)
        self.controller = controller

    def compose(self) -> ComposeResult:
        with Container(id="settings-container"):
            yield Label("Settings", id="settings-title")
            with Horizontal():
                with Vertical(classes="settings-column"):
                    yield Label("Provider")
                    yield OptionList(id="provider-list")
                with Vertical(classes="settings-column"):
                    yield Label("Model")
                    yield OptionList(id="model-list")
            yield Static("", id="api-key-hint")

    def on_mount(self) -> None:
        self._populate()
        self.query_one("#provider-list", OptionList).focus()

    def refresh_from_controller(self) -> None:
        if self.is_mounted:
            self._populate()

    def _populate(self) -> None:
        registry = self.controller.registry
        active = self.controller.provider
        active_model = self.controller.model

        providers = self.query_one("#provider-list", OptionList)
        providers.clear_options()
        providers.add_options([
            Option(marked(f"{name} ({registry.info(name).display_name})", name == active), id=name)
            for name in registry.providers()
        ])
        providers.highlighted = registry.providers().index(active)

        models = self.query_one("#model-list", OptionList)
        models.clear_options()
        catalog = registry.models_for(active)
        models.add_options([Option(marked(m, m == active_model), id=m) for m in catalog])
        models.highlighted = catalog.index(active_model)

        self.query_one("#api-key-hint", Static).update(self.api_key_hint())

    def api_key_hint(self) -> str:
        info = self.controller.registry.info(self.controller.provider)
        return (
            f"{info.display_name} reads its API key from ${info.api_key_env_var}. "
            f"You can also set api_key under [api_settings.{info.name}] in {get_config_path()}."
        )

    @on(OptionList.OptionSelected, "#provider-list")
    def provider_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        if event.option_id:
            self.app.post_message(ProviderChosen(event.option_id))

    @on(OptionList.OptionSelected, "#model-list")
    def model_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        if event.option_id:
            self.app.post_message(ModelChosen(event.option_id))

    def action_close(self) -> None:
        self.app.post_message(CloseRequested())
