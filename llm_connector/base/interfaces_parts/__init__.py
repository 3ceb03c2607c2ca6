"""Interface parts: one Protocol per module."""

from .provider_adapter import ProviderAdapter
from .supports_model_listing import SupportsModelListing
from .local_engine import LocalEngine

__all__ = ["ProviderAdapter", "SupportsModelListing", "LocalEngine"]
