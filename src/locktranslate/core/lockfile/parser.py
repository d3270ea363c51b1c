"""Lockfile parser --- raw YAML text to a ``ParsedLockfile``.

Only the structural shape is checked here: required top-level sections,
mapping-typed entries, and package keys that split into a name and a
version. Semantic problems such as dangling dependency edges are left to
the closure resolver, which is the first consumer that follows edges.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from locktranslate.core.lockfile.models import (
    DependencySpec,
    Importer,
    PackageRecord,
    ParsedLockfile,
    parse_spec,
)
from locktranslate.core.naming import link_location, normalize_key, parse_key
from locktranslate.exceptions import InvalidLinkPath, MalformedLockfile

logger = logging.getLogger(__name__)


def read_lockfile(path: Path) -> ParsedLockfile:
    """Read and parse a lockfile from disk.

    Raises:
        FileNotFoundError: If the file does not exist.
        MalformedLockfile: If the content is not a well-shaped lockfile.
    """
    return parse_lockfile(path.read_text(encoding="utf-8"))


def parse_lockfile(text: str) -> ParsedLockfile:
    """Parse lockfile text (YAML) into a normalized structure."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise MalformedLockfile(f"lockfile is not valid YAML: {exc}") from exc
    return parse_lockfile_data(data)


def parse_lockfile_data(data: Any) -> ParsedLockfile:
    """Normalize an already-decoded lockfile document."""
    if not isinstance(data, dict):
        raise MalformedLockfile("lockfile must be a mapping at the top level")

    raw_packages = data.get("packages")
    if not isinstance(raw_packages, dict):
        raise MalformedLockfile("expected a 'packages' mapping in the lockfile")
    raw_importers = data.get("importers")
    if not isinstance(raw_importers, dict):
        raise MalformedLockfile("expected an 'importers' mapping in the lockfile")

    packages: dict[str, PackageRecord] = {}
    for raw_key, entry in raw_packages.items():
        record = _parse_package(str(raw_key), entry)
        if record.key in packages:
            raise MalformedLockfile(f"duplicate package key {record.key!r}")
        packages[record.key] = record

    importers: dict[str, Importer] = {}
    for raw_path, entry in raw_importers.items():
        importer = _parse_importer(str(raw_path), entry)
        if importer.path in importers:
            raise MalformedLockfile(f"duplicate importer {importer.path or '.'!r}")
        importers[importer.path] = importer

    version = data.get("lockfileVersion")
    logger.debug(
        "Parsed lockfile (version %s): %d packages, %d importers",
        version, len(packages), len(importers),
    )
    return ParsedLockfile(
        packages=packages,
        importers=importers,
        lockfile_version=str(version) if version is not None else None,
    )


def _parse_package(raw_key: str, entry: Any) -> PackageRecord:
    if not isinstance(entry, dict):
        raise MalformedLockfile(f"package {raw_key!r} must be a mapping")

    key = normalize_key(raw_key)
    try:
        name, version, _ = parse_key(key)
    except MalformedLockfile:
        # Tarball and git packages carry their identity in the entry itself.
        if not (entry.get("name") and entry.get("version")):
            raise
        name, version = str(entry["name"]), str(entry["version"])
    name = str(entry.get("name") or name)

    integrity = entry.get("integrity")
    if not integrity:
        resolution = entry.get("resolution")
        if isinstance(resolution, dict):
            integrity = resolution.get("integrity")

    return PackageRecord(
        key=key,
        name=name,
        version=version,
        dependencies=_parse_dependency_map(entry, "dependencies", f"package {raw_key!r}"),
        optional_dependencies=_parse_dependency_map(
            entry, "optionalDependencies", f"package {raw_key!r}"
        ),
        is_dev=bool(entry.get("dev")),
        is_optional=bool(entry.get("optional")),
        requires_build=bool(entry.get("requiresBuild")),
        integrity=str(integrity or ""),
    )


def _parse_importer(raw_path: str, entry: Any) -> Importer:
    if not isinstance(entry, dict):
        raise MalformedLockfile(f"importer {raw_path!r} must be a mapping")
    try:
        path = link_location("", raw_path)
    except InvalidLinkPath as exc:
        raise MalformedLockfile(f"importer path {raw_path!r} is outside the workspace") from exc

    owner = f"importer {raw_path!r}"
    return Importer(
        path=path,
        dependencies=_parse_dependency_map(entry, "dependencies", owner),
        dev_dependencies=_parse_dependency_map(entry, "devDependencies", owner),
        optional_dependencies=_parse_dependency_map(entry, "optionalDependencies", owner),
    )


def _parse_dependency_map(entry: dict[str, Any], section: str, owner: str) -> dict[str, DependencySpec]:
    if section not in entry:
        return {}
    raw = entry[section]
    if not isinstance(raw, dict):
        raise MalformedLockfile(f"expected a mapping of {section} in {owner}")

    parsed: dict[str, DependencySpec] = {}
    for name, value in raw.items():
        # pnpm v9 style entries carry the resolved version under "version".
        if isinstance(value, dict) and "version" in value:
            value = value["version"]
        if isinstance(value, (dict, list)) or value is None:
            raise MalformedLockfile(
                f"{section} entry {name!r} in {owner} must be a version string"
            )
        parsed[str(name)] = parse_spec(str(value))
    return parsed
