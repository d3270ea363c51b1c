"""Dependency graph algorithms over a parsed lockfile.

Re-exports the transitive closure resolver so callers can write
``from locktranslate.core.dependency import ClosureResolver``.
"""

from locktranslate.core.dependency.closure import (
    ClosureResolver,
    group_by_name,
    resolve_closures,
)

__all__ = [
    "ClosureResolver",
    "group_by_name",
    "resolve_closures",
]
