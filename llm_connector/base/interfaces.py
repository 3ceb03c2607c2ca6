"""Connector interfaces public surface.

- ``ProviderAdapter``: send contract implemented by every backend adapter.
- ``SupportsModelListing``: optional model enumeration.
- ``LocalEngine``: shape of an in-process inference engine.
"""

from .interfaces_parts import LocalEngine, ProviderAdapter, SupportsModelListing

__all__ = ["ProviderAdapter", "SupportsModelListing", "LocalEngine"]
