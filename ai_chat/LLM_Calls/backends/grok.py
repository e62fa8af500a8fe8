# grok.py
# Description: xAI Grok backend (OpenAI-compatible chat completions)
#
# Imports
from ai_chat.LLM_Calls.backends.openai import OpenAIChatBackend
#
#######################################################################################################################
#
# Grok Backend Implementation

class GrokChatBackend(OpenAIChatBackend):
    """xAI exposes the OpenAI request and response shapes under its own host."""

    provider_name = "grok"
    default_base_url = "https://api.x.ai/v1/chat/completions"

#
# End of grok.py
#######################################################################################################################
