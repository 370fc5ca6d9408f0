"""Launcher presentation layer: query results and context-menu entries."""

from ._plugin import ContextMenuEntry, QueryResult, ReporterFactory, ScoopPlugin

__all__ = [
    "ContextMenuEntry",
    "QueryResult",
    "ReporterFactory",
    "ScoopPlugin",
]
