"""Tests for TranslationPolicy filters, overrides and policy file loading."""

from __future__ import annotations

import dataclasses
import pathlib

import pytest

from locktranslate.core.translate import (
    POLICY_PATH_ENV_VAR,
    TranslationPolicy,
    load_policy,
    resolve_policy_path,
)
from locktranslate.exceptions import ConfigError, ConflictingFilter


class TestFilters:
    """prod / dev / no_optional semantics."""

    def test_defaults_keep_everything(self) -> None:
        policy = TranslationPolicy()
        assert policy.include_dev and policy.include_optional
        assert not policy.excludes(is_dev=True, is_optional=True)
        assert not policy.excludes(is_dev=False, is_optional=False)

    def test_prod_drops_dev_packages(self) -> None:
        policy = TranslationPolicy(prod=True)
        assert policy.excludes(is_dev=True, is_optional=False)
        assert not policy.excludes(is_dev=False, is_optional=False)
        assert policy.include_dev is False

    def test_dev_keeps_only_dev_packages(self) -> None:
        policy = TranslationPolicy(dev=True)
        assert policy.excludes(is_dev=False, is_optional=False)
        assert not policy.excludes(is_dev=True, is_optional=False)

    def test_no_optional(self) -> None:
        policy = TranslationPolicy(no_optional=True)
        assert policy.excludes(is_dev=False, is_optional=True)
        assert policy.include_optional is False

    def test_prod_and_dev_conflict(self) -> None:
        with pytest.raises(ConflictingFilter):
            TranslationPolicy(prod=True, dev=True)

    def test_conflict_via_replace(self) -> None:
        with pytest.raises(ConflictingFilter):
            dataclasses.replace(TranslationPolicy(prod=True), dev=True)


class TestOverrides:
    """Per-package patches, lifecycle hooks and post-install commands."""

    def test_name_then_version_patches(self) -> None:
        policy = TranslationPolicy(
            patches={"a@1.0.0": ("specific.patch",), "a": ("general.patch",)}
        )
        assert policy.patches_for("a", "1.0.0") == ["general.patch", "specific.patch"]
        assert policy.patches_for("a", "2.0.0") == ["general.patch"]

    def test_version_match_ignores_peer_suffix(self) -> None:
        policy = TranslationPolicy(patch_args={"d@2.0.0": ("-p1",)})
        assert policy.patch_args_for("d", "2.0.0_c@2.0.2") == ["-p1"]

    def test_no_patches(self) -> None:
        assert TranslationPolicy().patches_for("a", "1.0.0") == []

    def test_postinstall_joined(self) -> None:
        policy = TranslationPolicy(
            custom_postinstalls={"a": "echo name", "a@1.0.0": "echo version"}
        )
        assert policy.custom_postinstall_for("a", "1.0.0") == "echo name && echo version"
        assert policy.custom_postinstall_for("a", "2.0.0") == "echo name"
        assert policy.custom_postinstall_for("b", "1.0.0") is None

    def test_lifecycle_hooks_require_build(self) -> None:
        policy = TranslationPolicy()
        assert policy.runs_lifecycle_hooks("a", "1.0.0", requires_build=True)
        assert not policy.runs_lifecycle_hooks("a", "1.0.0", requires_build=False)

    def test_lifecycle_hooks_disabled(self) -> None:
        policy = TranslationPolicy(run_lifecycle_hooks=False)
        assert not policy.runs_lifecycle_hooks("a", "1.0.0", requires_build=True)

    @pytest.mark.parametrize("entry", ["a", "a@1.0.0"])
    def test_lifecycle_hooks_excluded(self, entry: str) -> None:
        policy = TranslationPolicy(lifecycle_hooks_exclude=(entry,))
        assert not policy.runs_lifecycle_hooks("a", "1.0.0", requires_build=True)
        assert policy.runs_lifecycle_hooks("b", "1.0.0", requires_build=True)


class TestFromDict:
    def test_camel_and_snake_case(self) -> None:
        policy = TranslationPolicy.from_dict({
            "noOptional": True,
            "run_lifecycle_hooks": False,
            "patches": {"a": ["fix.patch"]},
            "customPostinstalls": {"a": "make"},
            "rootPackage": "js",
            "namespace": "deps",
        })
        assert policy.no_optional is True
        assert policy.run_lifecycle_hooks is False
        assert policy.patches == {"a": ("fix.patch",)}
        assert policy.custom_postinstalls == {"a": "make"}
        assert policy.root_package == "js"
        assert policy.namespace == "deps"

    def test_unknown_key(self) -> None:
        with pytest.raises(ConfigError, match="unknown policy key"):
            TranslationPolicy.from_dict({"frobnicate": True})

    def test_wrong_flag_type(self) -> None:
        with pytest.raises(ConfigError, match="boolean"):
            TranslationPolicy.from_dict({"prod": "yes"})

    def test_wrong_list_type(self) -> None:
        with pytest.raises(ConfigError):
            TranslationPolicy.from_dict({"lifecycleHooksExclude": "a"})

    def test_wrong_patches_type(self) -> None:
        with pytest.raises(ConfigError):
            TranslationPolicy.from_dict({"patches": ["fix.patch"]})

    def test_conflict_from_dict(self) -> None:
        with pytest.raises(ConflictingFilter):
            TranslationPolicy.from_dict({"prod": True, "dev": True})


class TestLoading:
    """Policy file resolution and loading."""

    def test_load_yaml(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "policy.yaml"
        path.write_text("prod: true\nlifecycleHooksExclude:\n  - esbuild\n", encoding="utf-8")
        policy = load_policy(path)
        assert policy.prod is True
        assert policy.lifecycle_hooks_exclude == ("esbuild",)

    def test_load_json(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "policy.json"
        path.write_text('{"namespace": "js"}', encoding="utf-8")
        assert load_policy(path).namespace == "js"

    def test_empty_file_is_default(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "policy.yaml"
        path.write_text("", encoding="utf-8")
        assert load_policy(path) == TranslationPolicy()

    def test_missing_file(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_policy(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "policy.yaml"
        path.write_text("prod: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_policy(path)

    def test_not_a_mapping(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "policy.yaml"
        path.write_text("- prod\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="mapping"):
            load_policy(path)

    def test_explicit_path_wins(
        self, tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(POLICY_PATH_ENV_VAR, str(tmp_path / "env.yaml"))
        assert resolve_policy_path(tmp_path / "cli.yaml") == tmp_path / "cli.yaml"

    def test_env_var(self, tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(POLICY_PATH_ENV_VAR, str(tmp_path / "env.yaml"))
        assert resolve_policy_path() == tmp_path / "env.yaml"

    def test_no_policy(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(POLICY_PATH_ENV_VAR, raising=False)
        assert resolve_policy_path() is None
