"""
State containers for the ai_chat application.
"""

from .provider_state import ProviderSelection

__all__ = [
    'ProviderSelection',
]
