"""Lockfile data models --- dependency specifiers, packages and importers.

These are pure data holders produced once by the parser and never mutated
afterwards. Dependency values are classified at parse time into a small
tagged union so that the rest of the pipeline never re-inspects string
prefixes:

- ``RegistryVersion``: a version resolved from the registry (``1.2.3`` or a
  peer-qualified ``1.2.3_peer@4.5.6``).
- ``PackageAlias``: a full package key (``/other-name@1.0.0``) used by
  pnpm for aliased installs.
- ``LocalLink``: a first-party workspace package (``link:../lib``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Union

from locktranslate.core.naming import compose_key, normalize_key

LINK_PREFIX = "link:"


# ---------------------------------------------------------------------------
# Dependency specifiers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RegistryVersion:
    """A dependency resolved to a registry package at ``version``."""

    version: str

    def key_for(self, name: str) -> str:
        return compose_key(name, self.version)

    @property
    def raw(self) -> str:
        return self.version


@dataclass(frozen=True)
class PackageAlias:
    """A dependency naming another package key directly (aliased install)."""

    key: str

    def key_for(self, name: str) -> str:
        return self.key

    @property
    def raw(self) -> str:
        return f"/{self.key}"


@dataclass(frozen=True)
class LocalLink:
    """A dependency on an in-workspace package, relative to the importer."""

    relative_path: str

    @property
    def raw(self) -> str:
        return f"{LINK_PREFIX}{self.relative_path}"


DependencySpec = Union[RegistryVersion, PackageAlias, LocalLink]


def parse_spec(value: str) -> DependencySpec:
    """Classify a raw dependency value from the lockfile."""
    if value.startswith(LINK_PREFIX):
        return LocalLink(value[len(LINK_PREFIX):])
    if value.startswith("/"):
        return PackageAlias(normalize_key(value))
    return RegistryVersion(value)


# ---------------------------------------------------------------------------
# PackageRecord: one entry of the ``packages`` section
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PackageRecord:
    """A resolved package from the lockfile ``packages`` section.

    Attributes:
        key: Normalized package key (``name@version[_peers]``).
        name: Package name, possibly scoped (``@types/node``).
        version: Resolved version, possibly peer-qualified.
        dependencies: Runtime dependency edges, name -> specifier.
        optional_dependencies: Optional dependency edges, name -> specifier.
        is_dev: True when the package is only needed by devDependencies.
        is_optional: True when the package is only reachable optionally.
        requires_build: True when the package declares lifecycle scripts.
        integrity: Content hash as recorded by the package manager.
    """

    key: str
    name: str
    version: str
    dependencies: Mapping[str, DependencySpec] = field(default_factory=dict)
    optional_dependencies: Mapping[str, DependencySpec] = field(default_factory=dict)
    is_dev: bool = False
    is_optional: bool = False
    requires_build: bool = False
    integrity: str = ""

    def edges(self, include_optional: bool = True) -> list[tuple[str, DependencySpec]]:
        """Return dependency edges, optional ones first so regular entries win."""
        merged: dict[str, DependencySpec] = {}
        if include_optional:
            merged.update(self.optional_dependencies)
        merged.update(self.dependencies)
        return list(merged.items())

    def merged_dependencies(self, include_optional: bool = True) -> dict[str, str]:
        """Return the dependency map as raw ``name -> version`` strings."""
        return {name: spec.raw for name, spec in self.edges(include_optional)}


# ---------------------------------------------------------------------------
# Importer: one entry of the ``importers`` section
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Importer:
    """A workspace location declaring its own direct dependencies.

    ``path`` is normalized: the workspace root is ``""``.
    """

    path: str
    dependencies: Mapping[str, DependencySpec] = field(default_factory=dict)
    dev_dependencies: Mapping[str, DependencySpec] = field(default_factory=dict)
    optional_dependencies: Mapping[str, DependencySpec] = field(default_factory=dict)

    def direct_dependencies(
        self,
        prod: bool = False,
        dev: bool = False,
        no_optional: bool = False,
    ) -> dict[str, DependencySpec]:
        """Return the direct dependencies linked into this location.

        ``prod`` drops devDependencies, ``dev`` keeps only devDependencies,
        ``no_optional`` drops optionalDependencies.
        """
        if dev:
            return dict(self.dev_dependencies)
        merged: dict[str, DependencySpec] = dict(self.dependencies)
        if not prod:
            merged.update(self.dev_dependencies)
        if not no_optional:
            merged.update(self.optional_dependencies)
        return merged

    def transitive_dependencies(self, no_optional: bool = False) -> dict[str, DependencySpec]:
        """Return the dependencies passed on when this location is linked.

        devDependencies of a first-party package are never passed on.
        """
        merged: dict[str, DependencySpec] = dict(self.dependencies)
        if not no_optional:
            merged.update(self.optional_dependencies)
        return merged


# ---------------------------------------------------------------------------
# ParsedLockfile
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ParsedLockfile:
    """Normalized lockfile: packages by key and importers by location.

    Both mappings preserve the iteration order of the source document.
    """

    packages: Mapping[str, PackageRecord]
    importers: Mapping[str, Importer]
    lockfile_version: str | None = None

    @property
    def package_count(self) -> int:
        return len(self.packages)

    def get_package(self, key: str) -> PackageRecord | None:
        """Look up a package by key, with or without the leading ``/``."""
        return self.packages.get(normalize_key(key))
