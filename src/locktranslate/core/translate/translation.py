"""Translation pipeline --- lockfile snapshot to import and link records.

``translate`` is a pure function of ``(lockfile, policy)``: the closure
resolver, import record generator and first-party link resolver run once,
in that order, and their results are bundled in an immutable
``Translation``. Any error aborts the whole run before output exists.

Determinism guarantee: ``to_json()`` produces byte-identical output for
identical input. Records keep lockfile and importer order, closures and
dependency maps are sorted, and no timestamp is embedded (build systems key
caches on this output).
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from locktranslate import __version__
from locktranslate.core.dependency.closure import ClosureResolver
from locktranslate.core.lockfile.models import ParsedLockfile
from locktranslate.core.lockfile.parser import read_lockfile
from locktranslate.core.naming import link_location, scope_of
from locktranslate.core.translate.imports import ImportRecord, generate_import_records
from locktranslate.core.translate.links import FirstPartyLink, resolve_first_party_links
from locktranslate.core.translate.policy import TranslationPolicy

logger = logging.getLogger(__name__)

MANIFEST_VERSION = "1"


@dataclass(frozen=True)
class Translation:
    """Result of one translation run.

    Attributes:
        imports: Import records in lockfile order.
        links: First-party links keyed by ``"<name>+<path>"``.
        link_locations: Every importer location, in importer order.
        root_package: Workspace directory holding the lockfile.
        namespace: Prefix used for repository identifiers.
    """

    imports: tuple[ImportRecord, ...]
    links: Mapping[str, FirstPartyLink]
    link_locations: tuple[str, ...]
    root_package: str = ""
    namespace: str = ""

    @property
    def scopes(self) -> list[str]:
        """Return package scopes across imports and links, first seen first."""
        scopes: list[str] = []
        names = [record.package for record in self.imports]
        names.extend(link.package for link in self.links.values())
        for name in names:
            scope = scope_of(name)
            if scope is not None and scope not in scopes:
                scopes.append(scope)
        return scopes

    def find_imports(self, package: str) -> list[ImportRecord]:
        """Return the import records of a package name (one per version)."""
        return [record for record in self.imports if record.package == package]

    def to_dict(self) -> dict[str, Any]:
        return {
            "manifest_version": MANIFEST_VERSION,
            "generated_by": f"locktranslate {__version__}",
            "namespace": self.namespace,
            "root_package": self.root_package,
            "link_packages": list(self.link_locations),
            "scopes": self.scopes,
            "imports": [record.to_dict() for record in self.imports],
            "links": [link.to_dict() for link in self.links.values()],
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to a deterministic JSON string (newline-terminated)."""
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True) + "\n"

    def write(self, path: Path) -> None:
        """Write the manifest atomically.

        The content goes to a temporary file in the target directory which
        then replaces ``path``; an interrupted write leaves any previous
        manifest untouched.
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        content = self.to_json()
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(content)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def translate(lockfile: ParsedLockfile, policy: TranslationPolicy | None = None) -> Translation:
    """Translate a parsed lockfile into import and link records.

    Raises:
        ConflictingFilter: If the policy sets both ``prod`` and ``dev``.
        DanglingDependency: If a dependency edge names an unknown package.
        InvalidLinkPath: If a location escapes the workspace root.
    """
    policy = policy or TranslationPolicy()
    policy.validate()

    resolver = ClosureResolver(
        lockfile.packages,
        include_dev=policy.include_dev,
        include_optional=policy.include_optional,
    )
    closures = resolver.resolve()
    imports = generate_import_records(lockfile, closures, policy)
    links = resolve_first_party_links(lockfile, policy)
    locations = tuple(
        link_location(policy.root_package, importer.path)
        for importer in lockfile.importers.values()
    )
    logger.info("Translated %d imports and %d first-party links", len(imports), len(links))
    return Translation(
        imports=tuple(imports),
        links=links,
        link_locations=locations,
        root_package=policy.root_package,
        namespace=policy.namespace,
    )


def translate_file(path: Path, policy: TranslationPolicy | None = None) -> Translation:
    """Read a lockfile from disk and translate it."""
    return translate(read_lockfile(path), policy)
