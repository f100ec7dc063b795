"""
teraverse — Gigaverse dungeon controller.

Auto-play loop, energy refresh scheduling and bulk ROM claims over the
Gigaverse game API.
"""

__version__ = "0.1.0"

from teraverse.config import ControllerConfig
from teraverse.exceptions import (
    APIError,
    APITimeoutError,
    ConfigurationError,
    ProviderError,
    TeraverseError,
)
from teraverse.orchestrator import Controller, create_controller

__all__ = [
    "__version__",
    "ControllerConfig",
    "APIError",
    "APITimeoutError",
    "ConfigurationError",
    "ProviderError",
    "TeraverseError",
    "Controller",
    "create_controller",
]
