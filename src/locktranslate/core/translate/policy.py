"""Translation policy --- environment filters and per-package overrides.

A ``TranslationPolicy`` carries every caller-controlled input of a run:

- environment filters: ``prod``, ``dev`` (mutually exclusive) and
  ``no_optional``;
- lifecycle hook policy: ``run_lifecycle_hooks`` and
  ``lifecycle_hooks_exclude``;
- per-package overrides keyed by package name or ``name@version``:
  ``patches``, ``patch_args`` and ``custom_postinstalls``;
- naming: ``namespace`` prefixed to repository identifiers and
  ``root_package``, the workspace directory holding the lockfile.

Override precedence: bare-name entries apply to every version of a package
and ``name@version`` entries compose additively after them. Lists are
concatenated; post-install commands are joined with ``&&``.

Policies can be loaded from a YAML (or JSON) file. Keys are accepted in
camelCase or snake_case. The file path may come from an explicit argument or
the ``LOCKTRANSLATE_POLICY`` environment variable.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from locktranslate.core.naming import friendly_name
from locktranslate.exceptions import ConfigError, ConflictingFilter

POLICY_PATH_ENV_VAR = "LOCKTRANSLATE_POLICY"
DEFAULT_NAMESPACE = "npm"

_KEY_ALIASES: dict[str, str] = {
    "prod": "prod",
    "dev": "dev",
    "noOptional": "no_optional",
    "no_optional": "no_optional",
    "runLifecycleHooks": "run_lifecycle_hooks",
    "run_lifecycle_hooks": "run_lifecycle_hooks",
    "lifecycleHooksExclude": "lifecycle_hooks_exclude",
    "lifecycle_hooks_exclude": "lifecycle_hooks_exclude",
    "patches": "patches",
    "patchArgs": "patch_args",
    "patch_args": "patch_args",
    "customPostinstalls": "custom_postinstalls",
    "custom_postinstalls": "custom_postinstalls",
    "namespace": "namespace",
    "rootPackage": "root_package",
    "root_package": "root_package",
}


@dataclass(frozen=True)
class TranslationPolicy:
    """Immutable policy for one translation run.

    Raises:
        ConflictingFilter: On construction when both ``prod`` and ``dev``
            are set.
    """

    prod: bool = False
    dev: bool = False
    no_optional: bool = False
    run_lifecycle_hooks: bool = True
    lifecycle_hooks_exclude: tuple[str, ...] = ()
    patches: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    patch_args: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    custom_postinstalls: Mapping[str, str] = field(default_factory=dict)
    namespace: str = DEFAULT_NAMESPACE
    root_package: str = ""

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check the filter combination.

        Raises:
            ConflictingFilter: If both ``prod`` and ``dev`` are set.
        """
        if self.prod and self.dev:
            raise ConflictingFilter("prod and dev filters cannot both be set")

    # -- Filters -------------------------------------------------------------

    @property
    def include_dev(self) -> bool:
        return not self.prod

    @property
    def include_optional(self) -> bool:
        return not self.no_optional

    def excludes(self, is_dev: bool, is_optional: bool) -> bool:
        """Return True when a package with these flags is filtered out."""
        if self.prod and is_dev:
            return True
        if self.dev and not is_dev:
            return True
        return self.no_optional and is_optional

    # -- Overrides -----------------------------------------------------------

    def patches_for(self, name: str, version: str) -> list[str]:
        return self._list_override(self.patches, name, version)

    def patch_args_for(self, name: str, version: str) -> list[str]:
        return self._list_override(self.patch_args, name, version)

    def custom_postinstall_for(self, name: str, version: str) -> str | None:
        """Return the post-install command for a package, or None.

        A ``name@version`` command runs after the bare-name command.
        """
        commands = [
            command
            for command in (
                self.custom_postinstalls.get(name),
                self.custom_postinstalls.get(friendly_name(name, version)),
            )
            if command
        ]
        return " && ".join(commands) if commands else None

    def runs_lifecycle_hooks(self, name: str, version: str, requires_build: bool) -> bool:
        """Decide whether lifecycle scripts of a package should run."""
        return (
            requires_build
            and self.run_lifecycle_hooks
            and name not in self.lifecycle_hooks_exclude
            and friendly_name(name, version) not in self.lifecycle_hooks_exclude
        )

    @staticmethod
    def _list_override(
        overrides: Mapping[str, tuple[str, ...]], name: str, version: str
    ) -> list[str]:
        values = list(overrides.get(name, ()))
        values.extend(overrides.get(friendly_name(name, version), ()))
        return values

    # -- Construction --------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TranslationPolicy:
        """Build a policy from a decoded configuration mapping.

        Raises:
            ConfigError: On unknown keys or values of the wrong type.
            ConflictingFilter: If both ``prod`` and ``dev`` are set.
        """
        kwargs: dict[str, Any] = {}
        for raw_key, value in data.items():
            attr = _KEY_ALIASES.get(str(raw_key))
            if attr is None:
                raise ConfigError(f"unknown policy key {raw_key!r}")
            kwargs[attr] = value

        for flag in ("prod", "dev", "no_optional", "run_lifecycle_hooks"):
            if flag in kwargs and not isinstance(kwargs[flag], bool):
                raise ConfigError(f"policy key {flag!r} must be a boolean")
        for text in ("namespace", "root_package"):
            if text in kwargs and not isinstance(kwargs[text], str):
                raise ConfigError(f"policy key {text!r} must be a string")

        if "lifecycle_hooks_exclude" in kwargs:
            kwargs["lifecycle_hooks_exclude"] = tuple(
                _string_list(kwargs["lifecycle_hooks_exclude"], "lifecycle_hooks_exclude")
            )
        for attr in ("patches", "patch_args"):
            if attr in kwargs:
                kwargs[attr] = _string_list_map(kwargs[attr], attr)
        if "custom_postinstalls" in kwargs:
            kwargs["custom_postinstalls"] = _string_map(
                kwargs["custom_postinstalls"], "custom_postinstalls"
            )
        return cls(**kwargs)


def _string_list(value: Any, key: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"policy key {key!r} must be a list of strings")
    return value


def _string_list_map(value: Any, key: str) -> dict[str, tuple[str, ...]]:
    if not isinstance(value, dict):
        raise ConfigError(f"policy key {key!r} must be a mapping")
    return {str(name): tuple(_string_list(items, key)) for name, items in value.items()}


def _string_map(value: Any, key: str) -> dict[str, str]:
    if not isinstance(value, dict) or not all(isinstance(v, str) for v in value.values()):
        raise ConfigError(f"policy key {key!r} must be a mapping of strings")
    return {str(name): command for name, command in value.items()}


def resolve_policy_path(path: Path | str | None = None) -> Path | None:
    """Resolve the policy file path.

    Priority:
    1. Explicit path argument
    2. LOCKTRANSLATE_POLICY environment variable
    3. None (built-in defaults)
    """
    if path is not None:
        return Path(path)
    env_path = os.environ.get(POLICY_PATH_ENV_VAR)
    if env_path:
        return Path(env_path)
    return None


def load_policy(path: Path | str) -> TranslationPolicy:
    """Load and validate a policy from a YAML or JSON file.

    An empty file yields the default policy.

    Raises:
        ConfigError: If the file cannot be read or contains invalid data.
        ConflictingFilter: If both ``prod`` and ``dev`` are set.
    """
    policy_path = Path(path)
    if not policy_path.exists():
        raise ConfigError(f"Policy file not found: {policy_path}")
    try:
        content = policy_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read policy file: {exc}") from exc
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in policy file: {exc}") from exc

    if data is None:
        return TranslationPolicy()
    if not isinstance(data, dict):
        raise ConfigError("Policy file must contain a mapping")
    return TranslationPolicy.from_dict(data)
