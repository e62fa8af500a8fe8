# openai.py
# Description: OpenAI chat completions backend
#
# Imports
from typing import Any, Dict, Sequence
#
# Local imports
from ai_chat.Chat.Chat_Deps import ChatResponseError
from ai_chat.Chat.chat_models import ChatMessage
from ai_chat.LLM_Calls.base_backends import APIChatBackend
#
#######################################################################################################################
#
# OpenAI Backend Implementation

class OpenAIChatBackend(APIChatBackend):
    """OpenAI Chat Completions API backend"""

    provider_name = "openai"
    default_base_url = "https://api.openai.com/v1/chat/completions"

    def _get_headers(self) -> Dict[str, str]:
        headers = super()._get_headers()
        headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def send(self, model: str, messages: Sequence[ChatMessage]) -> str:
        self._validate_api_key()
        payload = {
            "model": model,
            "messages": self._role_content_pairs(messages),
        }
        body = await self._post_json(self.base_url, payload, self._get_headers())
        return self._extract_reply(body)

    def _extract_reply(self, body: Dict[str, Any]) -> str:
        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ChatResponseError(f"{self.provider_name} response has no message content", self.provider_name) from e
        if content is None:
            raise ChatResponseError(f"{self.provider_name} returned an empty reply", self.provider_name)
        return str(content)

#
# End of openai.py
#######################################################################################################################
