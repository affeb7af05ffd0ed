from typing import Dict, Type

from .base import BaseProvider, ListingSource, RentEstimator

ADAPTER_REGISTRY: Dict[str, Type[BaseProvider]] = {}


def register_adapter(name: str):
    """Decorator to register a provider class."""

    def decorator(cls: Type[BaseProvider]):
        ADAPTER_REGISTRY[name] = cls
        return cls

    return decorator


def get_adapter(provider_name: str, config: dict) -> BaseProvider:
    """Factory function to create provider instances."""
    adapter_class = ADAPTER_REGISTRY.get(provider_name)
    if not adapter_class:
        raise ValueError(f"Unknown provider: {provider_name}. Available: {', '.join(list_available_adapters())}")
    return adapter_class(config)


def list_available_adapters() -> list:
    """Return registered provider names, sorted."""
    return sorted(ADAPTER_REGISTRY)


# Import providers so they register themselves
from . import rentcast  # noqa: E402,F401

__all__ = [
    "BaseProvider",
    "ListingSource",
    "RentEstimator",
    "ADAPTER_REGISTRY",
    "get_adapter",
    "list_available_adapters",
    "register_adapter",
]
