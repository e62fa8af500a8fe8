# gemini.py
# Description: Google Gemini generateContent backend
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
# Gemini Backend Implementation

def flatten_transcript(messages: Sequence[ChatMessage]) -> str:
    """Render messages as ``role: content`` lines for single-prompt APIs."""
    return "\n".join(f"{m.role}: {m.content}" for m in messages)


class GeminiChatBackend(APIChatBackend):
    """
    Gemini backend.

    The conversation is sent as a single flattened prompt rather than as
    structured turns.
    """

    provider_name = "gemini"
    default_base_url = "https://generativelanguage.googleapis.com/v1beta/models"

    def _get_headers(self) -> Dict[str, str]:
        headers = super()._get_headers()
        headers["x-goog-api-key"] = self.api_key or ""
        return headers

    def _endpoint(self, model: str) -> str:
        return f"{self.base_url.rstrip('/')}/{model}:generateContent"

    async def send(self, model: str, messages: Sequence[ChatMessage]) -> str:
        self._validate_api_key()
        payload = {
            "contents": [
                {"role": "user", "parts": [{"text": flatten_transcript(messages)}]}
            ]
        }
        body = await self._post_json(self._endpoint(model), payload, self._get_headers())
        return self._extract_reply(body)

    def _extract_reply(self, body: Dict[str, Any]) -> str:
        candidates = body.get("candidates")
        if not candidates:
            block_reason = (body.get("promptFeedback") or {}).get("blockReason")
            if block_reason:
                raise ChatResponseError(f"{self.provider_name} blocked the prompt: {block_reason}", self.provider_name)
            raise ChatResponseError(f"{self.provider_name} returned no candidates", self.provider_name)
        try:
            parts = candidates[0]["content"]["parts"]
            text = "".join(part.get("text", "") for part in parts)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise ChatResponseError(f"{self.provider_name} response has no text parts", self.provider_name) from e
        if not text:
            raise ChatResponseError(f"{self.provider_name} returned an empty reply", self.provider_name)
        return text

#
# End of gemini.py
#######################################################################################################################
