"""Package key and name utilities.

Pure, stateless helpers for composing and decomposing package identifiers
as they appear in a pnpm lockfile:

- plain keys: ``name@1.2.3``
- peer-qualified keys: ``name@1.2.3_peer@4.5.6``
- scoped names: ``@scope/name@1.2.3``

and for deriving the build-system-safe synthetic repository identifiers
used to cross-reference generated artifacts.
"""

from __future__ import annotations

import posixpath
import string

from locktranslate.exceptions import InvalidLinkPath, MalformedLockfile

PEER_SEPARATOR = "_"
"""Marker separating a version from its peer-dependency qualifier."""

RESERVED_PREFIX = "aspect_rules_js.npm."
"""Namespace prefix dropped from repository identifiers to keep them short."""

_SAFE_CHARS = frozenset(string.ascii_letters + string.digits + "-_.")


def compose_key(name: str, version: str) -> str:
    """Return the package key for ``name`` at ``version``."""
    return f"{name}@{version}"


def parse_key(key: str) -> tuple[str, str, str]:
    """Split a package key into ``(name, version, peer_suffix)``.

    A leading ``/`` (pnpm v6 lockfile style) is ignored. The version keeps its
    peer qualifier; ``peer_suffix`` is the part after the first peer marker,
    or an empty string.

    Raises:
        MalformedLockfile: If the key has no name or no version.
    """
    raw = key[1:] if key.startswith("/") else key
    start = 1 if raw.startswith("@") else 0
    index = raw.find("@", start)
    if index <= start or index == len(raw) - 1:
        raise MalformedLockfile(f"unexpected package key {key!r}")
    name = raw[:index]
    version = raw[index + 1:]
    return name, version, peer_suffix(version)


def normalize_key(key: str) -> str:
    """Return ``key`` without the optional leading ``/``."""
    return key[1:] if key.startswith("/") else key


def strip_peer_suffix(version: str) -> str:
    """Remove peer dependency qualification from a version string.

    ``21.1.0_rollup@2.70.2`` becomes ``21.1.0``.
    """
    index = version.find(PEER_SEPARATOR)
    if index != -1:
        return version[:index]
    return version


def peer_suffix(version: str) -> str:
    """Return the peer qualifier of ``version`` (empty when unqualified)."""
    _, _, suffix = version.partition(PEER_SEPARATOR)
    return suffix


def friendly_name(name: str, version: str) -> str:
    """Return the developer-facing ``name@version`` form, without peer noise."""
    return f"{name}@{strip_peer_suffix(version)}"


def scope_of(name: str) -> str | None:
    """Return the scope segment of a scoped package name, or None."""
    if "/" not in name:
        return None
    return name.split("/", 1)[0]


def sanitize(text: str) -> str:
    """Make ``text`` safe for use in repository and target names.

    Only ``A-Z a-z 0-9 - _ .`` survive; everything else becomes ``_``. An
    ``@`` opening a segment (start of string or after ``_``) is spelled
    ``at`` so that ``@types/node`` reads ``at_types_node``.
    """
    result: list[str] = []
    for char in text:
        if char == "@" and (not result or result[-1] == "_"):
            result.append("at")
        result.append(char if char in _SAFE_CHARS else "_")
    return "".join(result)


def bazel_name(name: str, version: str | None = None) -> str:
    """Return a build-safe name for a package and, optionally, a version."""
    escaped_name = sanitize(name)
    if not version:
        return escaped_name
    own_version, _, peer = version.partition(PEER_SEPARATOR)
    escaped_version = sanitize(own_version)
    if peer:
        escaped_version = f"{escaped_version}__{sanitize(peer)}"
    return f"{escaped_name}__{escaped_version}"


def repository_identifier(namespace: str, name: str, version: str) -> str:
    """Return the synthetic repository identifier for a package.

    The identifier depends only on ``(namespace, name, version)`` so repeated
    runs yield identical output. The full peer-qualified version is kept to
    tell apart packages that differ only by their peers.
    """
    base = bazel_name(name, version)
    identifier = f"{namespace}__{base}" if namespace else base
    if identifier.startswith(RESERVED_PREFIX):
        identifier = identifier[len(RESERVED_PREFIX):]
    return identifier


def link_location(root: str, importer_path: str, relative: str = ".") -> str:
    """Resolve a workspace-relative location.

    Joins ``root``, ``importer_path`` and ``relative`` and normalizes the
    result. The workspace root is returned as ``""``.

    Raises:
        InvalidLinkPath: If the location escapes the workspace root.
    """
    joined = posixpath.join(root, importer_path, relative)
    location = posixpath.normpath(joined) if joined else "."
    if location == ".." or location.startswith("../") or posixpath.isabs(location):
        raise InvalidLinkPath(location)
    if location == ".":
        return ""
    return location
