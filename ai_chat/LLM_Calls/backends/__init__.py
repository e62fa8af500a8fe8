"""Chat provider backend implementations."""

from .anthropic import AnthropicChatBackend
from .gemini import GeminiChatBackend
from .grok import GrokChatBackend
from .openai import OpenAIChatBackend

__all__ = [
    "AnthropicChatBackend",
    "GeminiChatBackend",
    "GrokChatBackend",
    "OpenAIChatBackend",
]
