"""Tests for package key composition, parsing and identifier derivation."""

from __future__ import annotations

import pytest

from locktranslate.core.naming import (
    bazel_name,
    compose_key,
    friendly_name,
    link_location,
    normalize_key,
    parse_key,
    peer_suffix,
    repository_identifier,
    sanitize,
    scope_of,
    strip_peer_suffix,
)
from locktranslate.exceptions import InvalidLinkPath, MalformedLockfile


class TestKeys:
    """compose_key / parse_key / normalize_key."""

    def test_compose_plain_key(self) -> None:
        assert compose_key("a", "1.0.0") == "a@1.0.0"

    def test_compose_scoped_key(self) -> None:
        assert compose_key("@types/node", "18.0.0") == "@types/node@18.0.0"

    def test_parse_plain_key(self) -> None:
        assert parse_key("a@1.0.0") == ("a", "1.0.0", "")

    def test_parse_peer_qualified_key(self) -> None:
        assert parse_key("d@2.0.0_c@2.0.2") == ("d", "2.0.0_c@2.0.2", "c@2.0.2")

    def test_parse_scoped_key_with_leading_slash(self) -> None:
        name, version, peers = parse_key("/@babel/core@7.18.2_supports-color@5.5.0")
        assert name == "@babel/core"
        assert version == "7.18.2_supports-color@5.5.0"
        assert peers == "supports-color@5.5.0"

    def test_parse_round_trips_compose(self) -> None:
        name, version, _ = parse_key(compose_key("@scope/pkg", "1.2.3_x@1.0.0"))
        assert (name, version) == ("@scope/pkg", "1.2.3_x@1.0.0")

    @pytest.mark.parametrize("key", ["a", "a@", "@scope/name", "@1.0.0", ""])
    def test_parse_malformed_key(self, key: str) -> None:
        with pytest.raises(MalformedLockfile):
            parse_key(key)

    def test_normalize_strips_leading_slash_only(self) -> None:
        assert normalize_key("/a@1.0.0") == "a@1.0.0"
        assert normalize_key("a@1.0.0") == "a@1.0.0"


class TestVersions:
    """Peer suffix handling and friendly names."""

    def test_strip_peer_suffix(self) -> None:
        assert strip_peer_suffix("21.1.0_rollup@2.70.2") == "21.1.0"

    def test_strip_peer_suffix_without_peers(self) -> None:
        assert strip_peer_suffix("1.0.0") == "1.0.0"

    def test_peer_suffix_multiple_peers(self) -> None:
        assert peer_suffix("1.0.0_a@1.0.0+b@2.0.0") == "a@1.0.0+b@2.0.0"

    def test_friendly_name_ignores_peers(self) -> None:
        assert friendly_name("d", "2.0.0_c@2.0.2") == "d@2.0.0"

    def test_friendly_name_scoped(self) -> None:
        assert friendly_name("@types/node", "18.0.0") == "@types/node@18.0.0"


class TestScope:
    def test_scoped_name(self) -> None:
        assert scope_of("@types/node") == "@types"

    def test_unscoped_name_has_no_scope(self) -> None:
        assert scope_of("lodash") is None


class TestIdentifiers:
    """sanitize / bazel_name / repository_identifier."""

    def test_sanitize_scope_marker(self) -> None:
        assert sanitize("@types/node") == "at_types_node"

    def test_sanitize_inner_at(self) -> None:
        assert sanitize("c@2.0.2") == "c_2.0.2"

    def test_sanitize_keeps_safe_characters(self) -> None:
        assert sanitize("a-b_c.d") == "a-b_c.d"

    def test_bazel_name_without_version(self) -> None:
        assert bazel_name("@scope/pkg") == "at_scope_pkg"

    def test_bazel_name_keeps_peer_qualifier(self) -> None:
        assert bazel_name("d", "2.0.0_c@2.0.2") == "d__2.0.0__c_2.0.2"

    def test_repository_identifier(self) -> None:
        assert repository_identifier("npm", "a", "1.0.0") == "npm__a__1.0.0"

    def test_repository_identifier_distinguishes_peers(self) -> None:
        plain = repository_identifier("npm", "d", "2.0.0")
        qualified = repository_identifier("npm", "d", "2.0.0_c@2.0.2")
        assert plain != qualified

    def test_repository_identifier_strips_reserved_prefix(self) -> None:
        identifier = repository_identifier("aspect_rules_js.npm.deps", "a", "1.0.0")
        assert identifier == "deps__a__1.0.0"

    def test_repository_identifier_without_namespace(self) -> None:
        assert repository_identifier("", "a", "1.0.0") == "a__1.0.0"


class TestLinkLocation:
    """Workspace path normalization."""

    def test_root_is_empty_string(self) -> None:
        assert link_location("", ".") == ""
        assert link_location("", "") == ""

    def test_relative_sibling(self) -> None:
        assert link_location("", "foo", "../bar") == "bar"

    def test_nested_root_package(self) -> None:
        assert link_location("js", "packages/a", "../b") == "js/packages/b"

    def test_escape_raises(self) -> None:
        with pytest.raises(InvalidLinkPath):
            link_location("", "foo", "../../outside")

    def test_absolute_path_raises(self) -> None:
        with pytest.raises(InvalidLinkPath):
            link_location("", "foo", "/etc")
