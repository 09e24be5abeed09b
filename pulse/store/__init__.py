"""Result storage backends."""

from pulse.store.duck_store import DuckStore

__all__ = ["DuckStore"]
