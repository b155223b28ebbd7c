"""Server package: tool contract, handlers and dispatch table."""

from __future__ import annotations

from .registry import ToolRegistry, create_default_registry

__all__ = ["ToolRegistry", "create_default_registry"]
