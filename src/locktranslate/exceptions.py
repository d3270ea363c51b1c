"""locktranslate exception hierarchy.

All public exceptions inherit from LockTranslateError, giving callers a single
base class to catch when they want to handle any translation failure without
swallowing unrelated errors. Every error is fatal: a translation run that
raises produces no output at all.
"""

from __future__ import annotations


class LockTranslateError(Exception):
    """Base exception for all locktranslate errors."""


class MalformedLockfile(LockTranslateError):
    """Raised when the lockfile does not have the expected structural shape.

    Covers unparseable YAML, missing ``packages`` / ``importers`` sections,
    importer dependency sections that are not mappings, and package keys
    that cannot be split into a name and a version.
    """


class DanglingDependency(LockTranslateError):
    """Raised when a dependency edge names a package key absent from the lockfile."""

    def __init__(self, package_key: str, dependency_key: str) -> None:
        super().__init__(
            f"package {package_key!r} depends on {dependency_key!r} "
            f"which is not in the lockfile"
        )
        self.package_key = package_key
        self.dependency_key = dependency_key


class InvalidLinkPath(LockTranslateError):
    """Raised when a ``link:`` specifier resolves outside the workspace root."""

    def __init__(self, path: str) -> None:
        super().__init__(f"invalid link package outside of the workspace: {path!r}")
        self.path = path


class ConflictingFilter(LockTranslateError):
    """Raised when both the ``prod`` and ``dev`` filters are requested."""


class ConfigError(LockTranslateError):
    """Raised when a policy file cannot be loaded or contains invalid data."""
