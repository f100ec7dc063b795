"""
Provider Registry — selects a decision provider by name.
"""

from dataclasses import dataclass, field
from typing import Any, Callable

from teraverse.exceptions import ProviderError
from teraverse.providers.base import DecisionProvider
from teraverse.providers.builtin import CallableProvider, ManualProvider, RandomProvider
from teraverse.vocabulary import ProviderKind


ProviderFactory = Callable[..., DecisionProvider]


@dataclass
class ProviderRegistry:
    """
    Registry of provider factories keyed by name.

    External engines register a factory under their own name and become
    selectable from configuration.
    """
    _factories: dict[str, ProviderFactory] = field(default_factory=dict)

    def register(self, name: str, factory: ProviderFactory) -> None:
        """Register a factory."""
        self._factories[name] = factory

    def unregister(self, name: str) -> ProviderFactory | None:
        return self._factories.pop(name, None)

    def list_names(self) -> list[str]:
        return sorted(self._factories)

    def create(self, name: str | ProviderKind, **kwargs: Any) -> DecisionProvider:
        """
        Build a provider.

        Raises:
            ProviderError: Unknown name or the factory rejected its arguments
        """
        key = name.value if isinstance(name, ProviderKind) else name
        factory = self._factories.get(key)
        if factory is None:
            raise ProviderError(
                f"Unknown provider '{key}'. Available: {', '.join(self.list_names())}"
            )
        try:
            return factory(**kwargs)
        except TypeError as e:
            raise ProviderError(f"Cannot create provider '{key}': {e}") from e


def create_registry() -> ProviderRegistry:
    """Factory for a registry holding the built-in providers."""
    registry = ProviderRegistry()
    registry.register(ProviderKind.MANUAL.value, ManualProvider)
    registry.register(ProviderKind.RANDOM.value, RandomProvider)
    registry.register(ProviderKind.CALLABLE.value, CallableProvider)
    return registry


_default_registry = create_registry()


def get_registry() -> ProviderRegistry:
    """Get the process-wide registry."""
    return _default_registry


def create_provider(kind: str | ProviderKind, **kwargs: Any) -> DecisionProvider:
    """Build a provider from the process-wide registry."""
    return _default_registry.create(kind, **kwargs)
