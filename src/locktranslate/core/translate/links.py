"""First-party link resolution for in-workspace packages.

Importers may depend on other workspace locations through ``link:``
specifiers. Such packages are never fetched from the registry; they are
linked from their source location. A first-party link is identified by
``(package name, resolved path)``: local packages carry no meaningful
version.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from typing import Any

from locktranslate.core.lockfile.models import (
    DependencySpec,
    LocalLink,
    PackageAlias,
    ParsedLockfile,
)
from locktranslate.core.naming import link_location, parse_key, repository_identifier
from locktranslate.core.translate.policy import TranslationPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FirstPartyLink:
    """A workspace package linked into one or more locations.

    Attributes:
        package: Package name as referenced by the importers.
        path: Workspace-relative location of the package sources.
        identifier: Synthetic identifier derived from name and path.
        link_packages: Locations referencing the package, first seen first.
        dependencies: Repository identifiers of the package's own direct
            dependencies (registry packages and nested links alike).
    """

    package: str
    path: str
    identifier: str
    link_packages: tuple[str, ...] = ()
    dependencies: tuple[str, ...] = ()

    @property
    def key(self) -> str:
        return link_key(self.package, self.path)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.identifier,
            "package": self.package,
            "path": self.path,
            "link_packages": list(self.link_packages),
            "deps": list(self.dependencies),
        }


def link_key(package: str, path: str) -> str:
    """Return the grouping key of a first-party link."""
    return f"{package}+{path}"


def resolve_first_party_links(
    lockfile: ParsedLockfile, policy: TranslationPolicy
) -> dict[str, FirstPartyLink]:
    """Discover first-party links across all importers.

    Returns:
        Links keyed by ``"<name>+<path>"`` in order of first discovery.

    Raises:
        InvalidLinkPath: If a ``link:`` specifier escapes the workspace root.
    """
    root = policy.root_package
    discovered: dict[str, tuple[str, str, list[str], list[str]]] = {}

    for importer in lockfile.importers.values():
        location = link_location(root, importer.path)
        direct = importer.direct_dependencies(
            prod=policy.prod, dev=policy.dev, no_optional=policy.no_optional
        )
        for dep_name, spec in direct.items():
            if not isinstance(spec, LocalLink):
                continue
            target_path = link_location(root, importer.path, spec.relative_path)
            key = link_key(dep_name, target_path)
            if key in discovered:
                referrers = discovered[key][2]
                if location not in referrers:
                    referrers.append(location)
                continue

            # Importer keys are relative to the lockfile, which may sit below the workspace root.
            target_importer = posixpath.normpath(posixpath.join(importer.path, spec.relative_path))
            if target_importer == ".":
                target_importer = ""
            dependencies = _link_dependencies(lockfile, policy, target_importer)
            discovered[key] = (dep_name, target_path, [location], dependencies)
            logger.debug("First-party link %s -> %s", dep_name, target_path or ".")

    return {
        key: FirstPartyLink(
            package=name,
            path=path,
            identifier=repository_identifier(policy.namespace, name, path),
            link_packages=tuple(referrers),
            dependencies=tuple(dependencies),
        )
        for key, (name, path, referrers, dependencies) in discovered.items()
    }


def _link_dependencies(
    lockfile: ParsedLockfile, policy: TranslationPolicy, importer_path: str
) -> list[str]:
    importer = lockfile.importers.get(importer_path)
    if importer is None:
        return []
    return [
        _dependency_identifier(lockfile, policy, importer_path, name, spec)
        for name, spec in importer.transitive_dependencies(policy.no_optional).items()
    ]


def _dependency_identifier(
    lockfile: ParsedLockfile,
    policy: TranslationPolicy,
    importer_path: str,
    name: str,
    spec: DependencySpec,
) -> str:
    if isinstance(spec, LocalLink):
        path = link_location(policy.root_package, importer_path, spec.relative_path)
        return repository_identifier(policy.namespace, name, path)

    record = lockfile.get_package(spec.key_for(name))
    if record is not None:
        return repository_identifier(policy.namespace, record.name, record.version)
    if isinstance(spec, PackageAlias):
        name, version, _ = parse_key(spec.key)
        return repository_identifier(policy.namespace, name, version)
    return repository_identifier(policy.namespace, name, spec.version)
