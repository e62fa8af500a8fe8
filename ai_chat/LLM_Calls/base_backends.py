# base_backends.py
# Description: Base classes for chat provider backends
#
# Imports
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence
#
# Third-Party Imports
import httpx
from loguru import logger
#
# Local Imports
from ai_chat.Chat.Chat_Deps import ChatConfigurationError, ChatProviderError, ChatResponseError
from ai_chat.Chat.chat_models import ChatMessage
#
#######################################################################################################################
#
# Base Backend Classes

DEFAULT_TIMEOUT = 60.0


class ChatBackendBase(ABC):
    """A provider that turns an ordered message list into one reply."""

    provider_name: str = ""

    def __init__(self, api_key: Optional[str], config: Optional[Dict[str, Any]] = None):
        self.api_key = api_key
        self.config = config or {}

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @abstractmethod
    async def send(self, model: str, messages: Sequence[ChatMessage]) -> str:
        """
        Perform exactly one request and return the reply text.

        Raises:
            ChatConfigurationError: No API key is configured.
            ChatProviderError: Transport failure or an error answer from the vendor.
            ChatResponseError: The vendor answered in an unexpected shape.
        """

    @abstractmethod
    async def close(self):
        """Clean up resources."""


class APIChatBackend(ChatBackendBase):
    """Base class for HTTP JSON chat APIs (OpenAI, Anthropic, Gemini, xAI)."""

    default_base_url: str = ""

    def __init__(
        self,
        api_key: Optional[str],
        config: Optional[Dict[str, Any]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(api_key, config)
        self.base_url: str = self.config.get("base_url") or self.default_base_url
        timeout = float(self.config.get("timeout") or DEFAULT_TIMEOUT)
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self):
        """Clean up HTTP client"""
        await self.client.aclose()

    def _validate_api_key(self):
        if not self.api_key:
            logger.error(f"{self.__class__.__name__}: No API key configured")
            raise ChatConfigurationError(f"{self.provider_name} API key not configured", self.provider_name)

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
        }

    @staticmethod
    def _role_content_pairs(messages: Sequence[ChatMessage]) -> List[Dict[str, str]]:
        return [{"role": m.role, "content": m.content} for m in messages]

    async def _post_json(self, url: str, payload: Dict[str, Any], headers: Dict[str, str]) -> Dict[str, Any]:
        """POST ``payload`` and return the decoded JSON body, mapping failures to ChatAPIError types."""
        try:
            response = await self.client.post(url, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise ChatProviderError(f"request to {self.provider_name} timed out", self.provider_name) from e
        except httpx.HTTPError as e:
            raise ChatProviderError(f"could not reach {self.provider_name}: {e}", self.provider_name) from e

        if response.is_error:
            raise ChatProviderError(
                self._error_message(response), self.provider_name, status_code=response.status_code
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ChatResponseError(f"{self.provider_name} returned a non-JSON response", self.provider_name) from e
        if not isinstance(body, dict):
            raise ChatResponseError(f"{self.provider_name} returned an unexpected response", self.provider_name)
        return body

    def _error_message(self, response: httpx.Response) -> str:
        """Best description of a vendor error answer."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
            if isinstance(error, str) and error:
                return error
            if body.get("message"):
                return str(body["message"])
        return f"{self.provider_name} request failed: {response.reason_phrase or 'HTTP error'}"

#
# End of base_backends.py
#######################################################################################################################
