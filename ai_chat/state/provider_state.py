"""
Provider selection state.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from ai_chat.LLM_Calls.provider_registry import ProviderRegistry


@dataclass
class ProviderSelection:
    """Active provider plus the model last chosen for every provider."""

    registry: ProviderRegistry
    active: str
    models: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.registry.has_provider(self.active):
            raise ValueError(f"Unknown provider: {self.active}")
        # Every provider remembers a model, even while inactive
        for provider in self.registry.providers():
            chosen = self.models.get(provider)
            if chosen is None or not self.registry.is_valid_model(provider, chosen):
                self.models[provider] = self.registry.default_model(provider)

    @classmethod
    def for_registry(cls, registry: ProviderRegistry, active: Optional[str] = None) -> "ProviderSelection":
        """Start on ``active`` (or the first provider) with every default model selected."""
        return cls(registry=registry, active=active or registry.providers()[0])

    @property
    def active_model(self) -> str:
        return self.models[self.active]

    def switch_provider(self, provider: str) -> bool:
        """Make ``provider`` active. Returns False if unknown or already active."""
        if provider == self.active or not self.registry.has_provider(provider):
            return False
        self.active = provider
        return True

    def choose_model(self, model: str) -> bool:
        """Select ``model`` for the active provider. Returns False if invalid or unchanged."""
        if not self.registry.is_valid_model(self.active, model):
            return False
        if self.models[self.active] == model:
            return False
        self.models[self.active] = model
        return True

    def apply(self, provider: Optional[str], model: Optional[str]) -> None:
        """Apply an already-validated provider/model pair; ``None`` fields are left alone."""
        if provider is None:
            return
        self.active = provider
        if model is not None:
            self.models[provider] = model
