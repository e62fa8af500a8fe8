"""
ai_chat - A Textual TUI for chatting with LLMs

Terminal chat client that talks to several interchangeable text-generation
providers (OpenAI, Claude, Gemini, Grok), lets the user switch provider and
model mid-conversation, and keeps every conversation on disk so it can be
resumed later from the history screen.
"""

__version__ = "1.0.0"
__license__ = "AGPLv3+"

# Version tuple for programmatic comparison
VERSION_TUPLE = (1, 0, 0)

__all__ = [
    "__version__",
    "VERSION_TUPLE",
]
