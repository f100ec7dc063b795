"""
Providers — pluggable move pickers for auto-play.
"""

from teraverse.providers.base import BaseProvider, DecisionProvider
from teraverse.providers.builtin import CallableProvider, ManualProvider, RandomProvider
from teraverse.providers.registry import (
    ProviderRegistry,
    create_provider,
    create_registry,
    get_registry,
)

__all__ = [
    "BaseProvider",
    "DecisionProvider",
    "CallableProvider",
    "ManualProvider",
    "RandomProvider",
    "ProviderRegistry",
    "create_provider",
    "create_registry",
    "get_registry",
]
