"""Shared fixtures for locktranslate tests."""

from __future__ import annotations

import pathlib
from collections.abc import Callable

import pytest

MINIMAL_CHAIN = """\
lockfileVersion: '6.0'
importers:
  .:
    dependencies:
      a: 1.0.0
packages:
  /a@1.0.0:
    integrity: sha512-aaa
    dependencies:
      b: 1.0.0
  /b@1.0.0:
    integrity: sha512-bbb
"""

WORKSPACE = """\
lockfileVersion: '6.0'
importers:
  .:
    dependencies:
      a: 1.0.0
    devDependencies:
      '@types/node': 18.0.0
  foo:
    dependencies:
      bar: link:../bar
      d: 2.0.0_c@2.0.2
  baz:
    dependencies:
      bar: link:../bar
      a: 1.0.0
  bar:
    dependencies:
      c: 2.0.2
      qux: link:../qux
    devDependencies:
      b: 1.0.0
  qux: {}
packages:
  /a@1.0.0:
    resolution: {integrity: sha512-aaa}
    dependencies:
      b: 1.0.0
  /b@1.0.0:
    resolution: {integrity: sha512-bbb}
  /c@2.0.2:
    resolution: {integrity: sha512-ccc}
  /d@2.0.0_c@2.0.2:
    resolution: {integrity: sha512-ddd}
    requiresBuild: true
    dependencies:
      c: 2.0.2
  /@types/node@18.0.0:
    resolution: {integrity: sha512-node}
    dev: true
"""

OPTIONAL = """\
lockfileVersion: '6.0'
importers:
  .:
    dependencies:
      e: 1.0.0
    devDependencies:
      f: 1.0.0
packages:
  /e@1.0.0:
    integrity: sha512-eee
    dev: false
    dependencies:
      g: 1.0.0
    optionalDependencies:
      c: 1.0.0
  /g@1.0.0:
    integrity: sha512-ggg
    dev: false
  /c@1.0.0:
    integrity: sha512-ccc
    optional: true
    requiresBuild: true
  /f@1.0.0:
    integrity: sha512-fff
    dev: true
    dependencies:
      g: 1.0.0
"""


@pytest.fixture
def minimal_chain_text() -> str:
    """A single chain: the root depends on a@1.0.0, which depends on b@1.0.0."""
    return MINIMAL_CHAIN


@pytest.fixture
def workspace_text() -> str:
    """A workspace with peer-qualified packages and first-party links."""
    return WORKSPACE


@pytest.fixture
def optional_text() -> str:
    """Lockfile mixing production, dev-only and optional-only packages."""
    return OPTIONAL


@pytest.fixture
def write_lockfile(tmp_path: pathlib.Path) -> Callable[..., pathlib.Path]:
    """Factory writing lockfile text to a temporary pnpm-lock.yaml."""

    def _write(text: str, name: str = "pnpm-lock.yaml") -> pathlib.Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
