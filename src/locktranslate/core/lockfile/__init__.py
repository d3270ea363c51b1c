"""pnpm lockfile model and parser.

The package is split into focused submodules:

- ``models``: frozen data classes (``PackageRecord``, ``Importer``,
  ``ParsedLockfile``) and the dependency specifier union
  (``RegistryVersion``, ``PackageAlias``, ``LocalLink``).
- ``parser``: YAML text to ``ParsedLockfile`` with structural validation.

All public names are re-exported here so callers can write
``from locktranslate.core.lockfile import parse_lockfile``.
"""

from locktranslate.core.lockfile.models import (
    LINK_PREFIX,
    DependencySpec,
    Importer,
    LocalLink,
    PackageAlias,
    PackageRecord,
    ParsedLockfile,
    RegistryVersion,
    parse_spec,
)
from locktranslate.core.lockfile.parser import (
    parse_lockfile,
    parse_lockfile_data,
    read_lockfile,
)

__all__ = [
    "LINK_PREFIX",
    "DependencySpec",
    "Importer",
    "LocalLink",
    "PackageAlias",
    "PackageRecord",
    "ParsedLockfile",
    "RegistryVersion",
    "parse_lockfile",
    "parse_lockfile_data",
    "parse_spec",
    "read_lockfile",
]
