"""Persistence for the config document."""

from browser_contexts.store.config import ConfigStore

__all__ = ["ConfigStore"]
