"""Import record generation --- one fetch declaration per registry package.

Joins the parsed lockfile, the per-package transitive closures and the
translation policy into an ordered list of immutable ``ImportRecord``
objects. Order follows the lockfile's package order so that repeated runs
produce identical output.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from locktranslate.core.dependency.closure import group_by_name
from locktranslate.core.lockfile.models import LocalLink, ParsedLockfile
from locktranslate.core.naming import link_location, repository_identifier
from locktranslate.core.translate.policy import TranslationPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportRecord:
    """A single registry package to fetch and link.

    Attributes:
        identifier: Synthetic repository identifier, stable across runs.
        key: Package key in the lockfile.
        package: Package name.
        version: Resolved version, peer qualifier included.
        integrity: Content hash from the lockfile.
        dependencies: Direct dependencies, name -> version (optional ones
            merged in unless the policy drops them).
        transitive_closure: Package keys reachable from this package,
            itself included.
        closure_by_name: The closure grouped as name -> sorted versions.
        link_packages: Workspace locations depending on this package
            directly, in importer order.
        run_lifecycle_hooks: Whether lifecycle scripts should run.
        patches: Patch files to apply after extraction.
        patch_args: Arguments for the patch tool.
        custom_postinstall: Extra command run after lifecycle scripts.
        root_package: Workspace directory holding the lockfile.
    """

    identifier: str
    key: str
    package: str
    version: str
    integrity: str
    dependencies: Mapping[str, str] = field(default_factory=dict)
    transitive_closure: frozenset[str] = frozenset()
    closure_by_name: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    link_packages: tuple[str, ...] = ()
    run_lifecycle_hooks: bool = False
    patches: tuple[str, ...] = ()
    patch_args: tuple[str, ...] = ()
    custom_postinstall: str | None = None
    root_package: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize with sorted collections for deterministic output."""
        entry: dict[str, Any] = {
            "name": self.identifier,
            "package": self.package,
            "version": self.version,
            "integrity": self.integrity,
            "root_package": self.root_package,
            "link_packages": list(self.link_packages),
            "deps": dict(sorted(self.dependencies.items())),
            "transitive_closure": {
                name: list(versions) for name, versions in self.closure_by_name.items()
            },
        }
        if self.patches:
            entry["patches"] = list(self.patches)
            if self.patch_args:
                entry["patch_args"] = list(self.patch_args)
        if self.run_lifecycle_hooks:
            entry["run_lifecycle_hooks"] = True
        if self.custom_postinstall:
            entry["custom_postinstall"] = self.custom_postinstall
        return entry


def direct_dependents(
    lockfile: ParsedLockfile, policy: TranslationPolicy
) -> dict[str, list[str]]:
    """Map each package key to the locations that depend on it directly.

    Local links are ignored. Locations appear in importer order, once each.
    """
    dependents: dict[str, list[str]] = {}
    for importer in lockfile.importers.values():
        location = link_location(policy.root_package, importer.path)
        direct = importer.direct_dependencies(
            prod=policy.prod, dev=policy.dev, no_optional=policy.no_optional
        )
        for dep_name, spec in direct.items():
            if isinstance(spec, LocalLink):
                continue
            locations = dependents.setdefault(spec.key_for(dep_name), [])
            if location not in locations:
                locations.append(location)
    return dependents


def generate_import_records(
    lockfile: ParsedLockfile,
    closures: Mapping[str, frozenset[str]],
    policy: TranslationPolicy,
) -> list[ImportRecord]:
    """Convert lockfile packages into import records.

    Args:
        lockfile: The parsed lockfile.
        closures: Closure per package key, as computed by
            ``ClosureResolver`` with the same policy.
        policy: Environment filters and overrides.

    Returns:
        One record per package surviving the filters, in lockfile order.

    Raises:
        ConflictingFilter: If the policy sets both ``prod`` and ``dev``.
        InvalidLinkPath: If an importer location escapes the workspace.
    """
    policy.validate()
    dependents = direct_dependents(lockfile, policy)

    records: list[ImportRecord] = []
    for record in lockfile.packages.values():
        if policy.excludes(record.is_dev, record.is_optional):
            logger.debug("Skipping %s (filtered by policy)", record.key)
            continue

        closure = closures[record.key]
        records.append(
            ImportRecord(
                identifier=repository_identifier(policy.namespace, record.name, record.version),
                key=record.key,
                package=record.name,
                version=record.version,
                integrity=record.integrity,
                dependencies=record.merged_dependencies(policy.include_optional),
                transitive_closure=closure,
                closure_by_name={
                    name: tuple(versions)
                    for name, versions in group_by_name(closure, lockfile.packages).items()
                },
                link_packages=tuple(dependents.get(record.key, ())),
                run_lifecycle_hooks=policy.runs_lifecycle_hooks(
                    record.name, record.version, record.requires_build
                ),
                patches=tuple(policy.patches_for(record.name, record.version)),
                patch_args=tuple(policy.patch_args_for(record.name, record.version)),
                custom_postinstall=policy.custom_postinstall_for(record.name, record.version),
                root_package=policy.root_package,
            )
        )

    logger.info(
        "Generated %d import records from %d packages", len(records), lockfile.package_count
    )
    return records
