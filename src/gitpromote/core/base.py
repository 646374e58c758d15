"""Base classes for configuration and state models.

This module holds the foundations shared by config.py and log.py:
- Closeable Protocol for resource cleanup
- BaseCloseable for automatic cleanup cascade
- BaseConfig / BaseState semantic markers

Kept separate to avoid a circular import between config.py and
log.py.
"""

from __future__ import annotations

import sys
from typing import Protocol, runtime_checkable

from pydantic import BaseModel


@runtime_checkable
class Closeable(Protocol):
    """Protocol for objects that support close()."""

    def close(self) -> None:
        """Release resources."""
        ...


class BaseCloseable(BaseModel):
    """Pydantic model that closes its Closeable children.

    Walking the fields on close() gives a cleanup cascade:
    State -> Config.close() -> Logger.close() -> Sink.close()

    A failing child is reported on stderr and the remaining
    children are still closed.
    """

    def close(self):
        """Close every child field implementing Closeable."""
        for field_name in self.__class__.model_fields:
            child = getattr(self, field_name, None)
            if child is None:
                continue

            if isinstance(child, Closeable):
                try:
                    child.close()
                except Exception as e:
                    msg = f"Warning: Error closing {field_name}: {e}"
                    print(msg, file=sys.stderr)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):  # noqa: U100
        self.close()
        return False


class BaseConfig(BaseCloseable):
    """Marker base for configuration sections (YAML/env/CLI)."""
    pass


class BaseState(BaseCloseable):
    """Marker base for runtime state mutated during a run."""
    pass


__all__ = ["Closeable", "BaseCloseable", "BaseConfig", "BaseState"]
