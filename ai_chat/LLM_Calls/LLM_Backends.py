# LLM_Backends.py
# Description: Backend registry and the gateway that sends one chat turn to the selected provider
#
# Imports
from typing import Any, Callable, Dict, List, Optional, Sequence, Type
#
# Third Party Libraries
import httpx
from loguru import logger
#
# Local Libraries
from ai_chat.Chat.Chat_Deps import ChatAPIError, ChatConfigurationError
from ai_chat.Chat.chat_models import ChatMessage
from ai_chat.LLM_Calls.base_backends import APIChatBackend, ChatBackendBase
from ai_chat.LLM_Calls.backends import (
    AnthropicChatBackend,
    GeminiChatBackend,
    GrokChatBackend,
    OpenAIChatBackend,
)
from ai_chat.LLM_Calls.provider_registry import ProviderRegistry
from ai_chat.config import get_api_key
#
#######################################################################################################################
#
# Functions

KeyResolver = Callable[[str, str], Optional[str]]


# --- Backend Registry ---
class BackendRegistry:
    """Registry for chat backend classes, keyed by provider name"""
    _registry: Dict[str, Type[APIChatBackend]] = {}

    @classmethod
    def register(cls, provider: str, backend_class: Type[APIChatBackend]):
        """Register a backend class"""
        cls._registry[provider] = backend_class
        logger.debug(f"Registered chat backend: {provider} -> {backend_class.__name__}")

    @classmethod
    def get(cls, provider: str) -> Optional[Type[APIChatBackend]]:
        return cls._registry.get(provider)

    @classmethod
    def list_backends(cls) -> List[str]:
        return list(cls._registry.keys())


def _register_builtin_backends():
    BackendRegistry.register("openai", OpenAIChatBackend)
    BackendRegistry.register("claude", AnthropicChatBackend)
    BackendRegistry.register("gemini", GeminiChatBackend)
    BackendRegistry.register("grok", GrokChatBackend)


_register_builtin_backends()


# --- Backend Gateway ---
class BackendGateway:
    """
    Sends one conversation turn to the selected provider and always returns text.

    A missing credential yields a "not configured" message and makes no network
    call; any transport, vendor or parsing failure yields ``"error: <message>"``.
    Backends are created on first use, reading the provider's API key at that
    point; ``reload`` re-reads it (used when the user switches provider).
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        api_settings: Optional[Dict[str, Dict[str, Any]]] = None,
        key_resolver: KeyResolver = get_api_key,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.registry = registry
        self.api_settings = api_settings or {}
        self.key_resolver = key_resolver
        self.transport = transport
        self._backends: Dict[str, ChatBackendBase] = {}

    def _resolve_key(self, provider: str) -> Optional[str]:
        info = self.registry.info(provider)
        return self.key_resolver(provider, info.api_key_env_var)

    def get_backend(self, provider: str) -> Optional[ChatBackendBase]:
        if provider in self._backends:
            return self._backends[provider]

        backend_class = BackendRegistry.get(provider)
        if backend_class is None or not self.registry.has_provider(provider):
            logger.error(f"BackendGateway: No backend registered for provider: {provider}")
            return None

        logger.info(f"BackendGateway: Creating backend for provider: {provider}")
        config = dict(self.api_settings.get(provider, {}))
        backend = backend_class(self._resolve_key(provider), config=config, transport=self.transport)
        if not backend.is_configured:
            logger.warning(f"BackendGateway: No API key configured for {provider}")
        self._backends[provider] = backend
        return backend

    def reload(self, provider: str) -> None:
        """Re-read the API key for ``provider`` on its next use."""
        backend = self._backends.get(provider)
        if backend is None or not self.registry.has_provider(provider):
            return
        backend.api_key = self._resolve_key(provider)
        logger.debug(f"BackendGateway: Reloaded credentials for {provider} (configured: {backend.is_configured})")

    def not_configured_message(self, provider: str) -> str:
        info = self.registry.info(provider)
        return (
            f"{info.display_name} API key not configured. "
            f"Set {info.api_key_env_var} in your environment or config file."
        )

    def unknown_provider_message(self, provider: str) -> str:
        known = self.registry.providers()
        if len(known) > 1:
            choices = f"{', '.join(known[:-1])}, or {known[-1]}"
        else:
            choices = known[0]
        return f"Unknown provider: {provider}. Please select {choices}."

    async def send(
        self,
        provider: str,
        model: str,
        context_snapshot: Sequence[ChatMessage],
        new_user_text: Optional[str] = None,
    ) -> str:
        """
        Send the conversation to ``provider`` and return the reply text.

        Args:
            provider: Provider name from the registry
            model: Model identifier for that provider
            context_snapshot: Messages to send, oldest first
            new_user_text: Appended as a trailing user turn when given. Pass it
                only if ``context_snapshot`` does not already end with it.

        Returns:
            The reply, a not-configured message, or ``"error: <message>"``.
            Never raises.
        """
        messages = list(context_snapshot)
        if new_user_text is not None:
            messages.append(ChatMessage(role="user", content=new_user_text))

        backend = self.get_backend(provider)
        if backend is None:
            return self.unknown_provider_message(provider)
        if not backend.is_configured:
            return self.not_configured_message(provider)

        logger.info(f"Sending {len(messages)} messages to {provider} ({model})")
        try:
            reply = await backend.send(model, messages)
        except ChatConfigurationError:
            return self.not_configured_message(provider)
        except ChatAPIError as e:
            logger.warning(f"{provider} request failed: {e}")
            return f"error: {e}"
        except httpx.HTTPError as e:
            logger.warning(f"{provider} transport error: {e}")
            return f"error: {e}"
        except Exception as e:
            logger.exception(f"Unexpected error talking to {provider}")
            return f"error: {e}"

        logger.debug(f"Received {len(reply)} chars from {provider}")
        return reply

    async def aclose(self):
        for provider, backend in self._backends.items():
            try:
                await backend.close()
            except Exception as e:
                logger.warning(f"Error closing {provider} backend: {e}")
        self._backends.clear()

#
# End of LLM_Backends.py
#######################################################################################################################
