# provider_registry.py
# Description: Static catalog of chat providers, their selectable models and default model
#
# Imports
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple
#
#######################################################################################################################
#
# Classes:

@dataclass(frozen=True)
class ProviderInfo:
    """Catalog entry for one provider."""
    name: str
    display_name: str
    models: Tuple[str, ...]
    default_model: str
    api_key_env_var: str


DEFAULT_PROVIDERS: Tuple[ProviderInfo, ...] = (
    ProviderInfo(
        name="openai",
        display_name="OpenAI",
        models=("gpt-4o", "gpt-4-turbo", "gpt-3.5-turbo"),
        default_model="gpt-4o",
        api_key_env_var="OPENAI_API_KEY",
    ),
    ProviderInfo(
        name="claude",
        display_name="Claude",
        models=("claude-3-5-sonnet-20240620", "claude-3-opus-20240229", "claude-3-haiku-20240307"),
        default_model="claude-3-5-sonnet-20240620",
        api_key_env_var="ANTHROPIC_API_KEY",
    ),
    ProviderInfo(
        name="gemini",
        display_name="Gemini",
        models=("gemini-1.5-pro", "gemini-1.5-flash", "gemini-1.0-pro"),
        default_model="gemini-1.5-pro",
        api_key_env_var="GEMINI_API_KEY",
    ),
    ProviderInfo(
        name="grok",
        display_name="Grok",
        models=("grok-1",),
        default_model="grok-1",
        api_key_env_var="GROK_API_KEY",
    ),
)


class ProviderRegistry:
    """
    Immutable lookup of providers and their model catalogs.

    Raises ValueError on construction if any provider has an empty catalog or a
    default model that is not part of its catalog; both are programming errors
    that must stop the application at startup.
    """

    def __init__(self, providers: Iterable[ProviderInfo] = DEFAULT_PROVIDERS):
        self._providers: Dict[str, ProviderInfo] = {}
        for info in providers:
            if not info.models:
                raise ValueError(f"Provider '{info.name}' has no models in its catalog")
            if info.default_model not in info.models:
                raise ValueError(
                    f"Default model '{info.default_model}' for provider '{info.name}' is not in its catalog"
                )
            if info.name in self._providers:
                raise ValueError(f"Provider '{info.name}' is registered twice")
            self._providers[info.name] = info
        if not self._providers:
            raise ValueError("Provider registry needs at least one provider")

    def providers(self) -> List[str]:
        return list(self._providers)

    def has_provider(self, provider: str) -> bool:
        return provider in self._providers

    def info(self, provider: str) -> ProviderInfo:
        try:
            return self._providers[provider]
        except KeyError:
            raise KeyError(f"Unknown provider: {provider}") from None

    def models_for(self, provider: str) -> List[str]:
        return list(self.info(provider).models)

    def default_model(self, provider: str) -> str:
        return self.info(provider).default_model

    def is_valid_model(self, provider: str, model: str) -> bool:
        return self.has_provider(provider) and model in self._providers[provider].models

    def validate_selection(self, provider: str, model: str) -> Tuple[Optional[str], Optional[str]]:
        """
        Check a stored provider/model pair against the catalog.

        Returns the provider (or None if unknown) and the model (or None if the
        provider is unknown or the model is not in its catalog).
        """
        if not self.has_provider(provider):
            return None, None
        if model not in self._providers[provider].models:
            return provider, None
        return provider, model

    def __contains__(self, provider: object) -> bool:
        return provider in self._providers

    def __iter__(self):
        return iter(self._providers.values())

#
# End of provider_registry.py
#######################################################################################################################
