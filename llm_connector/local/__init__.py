"""Local runtime provider package (in-process engine, no network)."""

from .client import EngineFactory, LocalAdapter, resolve_engine_factory

__all__ = ["EngineFactory", "LocalAdapter", "resolve_engine_factory"]
