"""``locktranslate translate <lockfile>``: Write the import/link manifest.

Parses the lockfile, applies the translation policy (policy file, then
command-line overrides), and writes a deterministic JSON manifest of import
records and first-party links.

Exit Codes:
    0: Manifest written successfully.
    1: Translation failed (malformed lockfile, dangling dependency,
        invalid link path, conflicting filters, invalid policy or an
        unwritable output path). Any previously written manifest is left
        untouched.
"""

from __future__ import annotations

import dataclasses
import sys
from pathlib import Path

import click

from locktranslate.cli.output import print_error, print_json, print_translation_summary
from locktranslate.core.translate import (
    TranslationPolicy,
    load_policy,
    resolve_policy_path,
    translate_file,
)
from locktranslate.exceptions import LockTranslateError

DEFAULT_MANIFEST_NAME = "locktranslate.json"


def _build_policy(
    policy_path: str | None,
    prod: bool,
    dev: bool,
    no_optional: bool,
    no_lifecycle_hooks: bool,
    exclude_lifecycle: tuple[str, ...],
    namespace: str | None,
    root_package: str | None,
) -> TranslationPolicy:
    """Load the policy file (if any) and layer command-line flags on top."""
    resolved = resolve_policy_path(policy_path)
    policy = load_policy(resolved) if resolved is not None else TranslationPolicy()

    overrides: dict[str, object] = {}
    if prod:
        overrides["prod"] = True
    if dev:
        overrides["dev"] = True
    if no_optional:
        overrides["no_optional"] = True
    if no_lifecycle_hooks:
        overrides["run_lifecycle_hooks"] = False
    if exclude_lifecycle:
        overrides["lifecycle_hooks_exclude"] = (
            tuple(policy.lifecycle_hooks_exclude) + exclude_lifecycle
        )
    if namespace is not None:
        overrides["namespace"] = namespace
    if root_package is not None:
        overrides["root_package"] = root_package
    return dataclasses.replace(policy, **overrides) if overrides else policy


@click.command("translate")
@click.argument("lockfile", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help=f"Output path for the manifest (default: <lockfile dir>/{DEFAULT_MANIFEST_NAME}).",
)
@click.option(
    "--policy", "policy_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="YAML/JSON policy file (default: $LOCKTRANSLATE_POLICY).",
)
@click.option("--prod", is_flag=True, help="Only translate production dependencies.")
@click.option("--dev", is_flag=True, help="Only translate devDependencies.")
@click.option("--no-optional", is_flag=True, help="Drop optionalDependencies.")
@click.option(
    "--no-lifecycle-hooks", is_flag=True,
    help="Never run preinstall/install/postinstall scripts.",
)
@click.option(
    "--exclude-lifecycle", multiple=True,
    help="Package name or name@version whose lifecycle hooks must not run (repeatable).",
)
@click.option("--namespace", default=None, help="Prefix for repository identifiers (default: npm).")
@click.option("--root-package", default=None, help="Workspace directory holding the lockfile.")
@click.option("--json", "as_json", is_flag=True, help="Print the manifest as JSON instead of tables.")
def translate_command(
    lockfile: str,
    output: str | None,
    policy_path: str | None,
    prod: bool,
    dev: bool,
    no_optional: bool,
    no_lifecycle_hooks: bool,
    exclude_lifecycle: tuple[str, ...],
    namespace: str | None,
    root_package: str | None,
    as_json: bool,
) -> None:
    """Translate LOCKFILE into import records and first-party links.

    Exit code 0 on success, 1 on any translation error.
    """
    source = Path(lockfile)
    out_path = Path(output) if output else source.parent / DEFAULT_MANIFEST_NAME

    try:
        policy = _build_policy(
            policy_path, prod, dev, no_optional, no_lifecycle_hooks,
            exclude_lifecycle, namespace, root_package,
        )
        translation = translate_file(source, policy)
    except LockTranslateError as exc:
        print_error(str(exc))
        sys.exit(1)

    try:
        translation.write(out_path)
    except OSError as exc:
        print_error(f"cannot write manifest to {out_path}: {exc}")
        sys.exit(1)

    if as_json:
        print_json(translation.to_dict())
    else:
        print_translation_summary(translation)
        click.echo(f"\nManifest written to: {out_path}")
    sys.exit(0)
