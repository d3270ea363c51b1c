"""locktranslate: pnpm lockfile to build-system import/link translation."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
