# anthropic.py
# Description: Anthropic Messages API backend for Claude models
#
# Imports
from typing import Any, Dict, List, Sequence
#
# Local imports
from ai_chat.Chat.Chat_Deps import ChatAPIError, ChatResponseError
from ai_chat.Chat.chat_models import ChatMessage
from ai_chat.LLM_Calls.base_backends import APIChatBackend
#
#######################################################################################################################
#
# Anthropic Backend Implementation

class AnthropicChatBackend(APIChatBackend):
    """Anthropic Messages API backend"""

    provider_name = "claude"
    default_base_url = "https://api.anthropic.com/v1/messages"
    anthropic_version = "2023-06-01"
    default_max_tokens = 1000

    def _get_headers(self) -> Dict[str, str]:
        headers = super()._get_headers()
        headers["x-api-key"] = self.api_key or ""
        headers["anthropic-version"] = self.anthropic_version
        return headers

    def _build_messages(self, messages: Sequence[ChatMessage]) -> List[Dict[str, str]]:
        pairs = self._role_content_pairs(messages)
        # The API rejects conversations that open with an assistant turn, which
        # happens once the context window has evicted the first user message.
        while pairs and pairs[0]["role"] != "user":
            pairs.pop(0)
        if not pairs:
            raise ChatAPIError("no user message to send", self.provider_name)
        return pairs

    async def send(self, model: str, messages: Sequence[ChatMessage]) -> str:
        self._validate_api_key()
        payload = {
            "model": model,
            "max_tokens": int(self.config.get("max_tokens") or self.default_max_tokens),
            "messages": self._build_messages(messages),
        }
        body = await self._post_json(self.base_url, payload, self._get_headers())
        return self._extract_reply(body)

    def _extract_reply(self, body: Dict[str, Any]) -> str:
        blocks = body.get("content")
        if not isinstance(blocks, list):
            raise ChatResponseError(f"{self.provider_name} response has no content", self.provider_name)
        texts = [
            block["text"] for block in blocks
            if isinstance(block, dict) and block.get("type", "text") == "text" and isinstance(block.get("text"), str)
        ]
        if not texts:
            raise ChatResponseError(f"{self.provider_name} returned no text content", self.provider_name)
        return "".join(texts)

#
# End of anthropic.py
#######################################################################################################################
