"""Transitive closure resolver over the lockfile package graph.

For every package key K the resolver computes closure(K): the set of all
package keys reachable from K by following dependency edges, K included.

The traversal is a depth-first search with a memo table shared across all
roots, so every key's closure is computed at most once no matter how many
packages share a subgraph. Keys on the active search path are marked
in-progress; reaching one again means a cycle. Cycles are collapsed into
strongly connected components (Tarjan's algorithm) and every member of a
component receives the same closure, so the subset law

    K2 in deps(K1)  =>  closure(K2) is a subset of closure(K1)

holds even for pathological cyclic lockfiles.

The search is iterative: deep dependency chains cannot exhaust the
interpreter's recursion limit.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping

from locktranslate.core.lockfile.models import LocalLink, PackageRecord
from locktranslate.core.naming import normalize_key
from locktranslate.exceptions import DanglingDependency

logger = logging.getLogger(__name__)


class ClosureResolver:
    """Memoized transitive closure computation for a lockfile.

    Args:
        packages: Parsed ``packages`` map, key -> ``PackageRecord``.
        include_dev: When False, edges into dev-only packages are not
            traversed.
        include_optional: When False, ``optionalDependencies`` edges and
            edges into optional-only packages are not traversed.

    Thread safety: the memo table is filled lazily; share an instance across
    threads only with external synchronization.
    """

    def __init__(
        self,
        packages: Mapping[str, PackageRecord],
        include_dev: bool = True,
        include_optional: bool = True,
    ) -> None:
        self._packages = packages
        self._include_dev = include_dev
        self._include_optional = include_optional
        self._memo: dict[str, frozenset[str]] = {}

    def resolve(self) -> dict[str, frozenset[str]]:
        """Return the closure of every package, in lockfile order.

        Raises:
            DanglingDependency: If any edge names an unknown package key.
        """
        for key in self._packages:
            if key not in self._memo:
                self._visit(key)
        return {key: self._memo[key] for key in self._packages}

    def closure_of(self, key: str) -> frozenset[str]:
        """Return closure(key).

        Raises:
            KeyError: If ``key`` is not a package of the lockfile.
            DanglingDependency: If a reachable edge names an unknown key.
        """
        key = normalize_key(key)
        if key not in self._packages:
            raise KeyError(f"unknown package key {key!r}")
        if key not in self._memo:
            self._visit(key)
        return self._memo[key]

    def successors(self, key: str) -> list[str]:
        """Return the package keys directly reachable from ``key``."""
        record = self._packages[key]
        result: list[str] = []
        for dep_name, spec in record.edges(self._include_optional):
            if isinstance(spec, LocalLink):
                # First-party packages are linked, never fetched.
                continue
            dep_key = spec.key_for(dep_name)
            target = self._packages.get(dep_key)
            if target is None:
                raise DanglingDependency(key, dep_key)
            if not self._include_dev and target.is_dev:
                continue
            if not self._include_optional and target.is_optional:
                continue
            result.append(dep_key)
        return result

    def _visit(self, root: str) -> None:
        index: dict[str, int] = {root: 0}
        lowlink: dict[str, int] = {root: 0}
        edges: dict[str, list[str]] = {root: self.successors(root)}
        path: list[str] = [root]
        in_progress: set[str] = {root}
        work: list[tuple[str, Iterator[str]]] = [(root, iter(edges[root]))]

        while work:
            node, children = work[-1]
            descended = False
            for child in children:
                if child in self._memo:
                    continue
                if child not in index:
                    index[child] = lowlink[child] = len(index)
                    edges[child] = self.successors(child)
                    path.append(child)
                    in_progress.add(child)
                    work.append((child, iter(edges[child])))
                    descended = True
                    break
                if child in in_progress:
                    lowlink[node] = min(lowlink[node], index[child])
            if descended:
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                lowlink[parent] = min(lowlink[parent], lowlink[node])
            if lowlink[node] != index[node]:
                continue

            component: list[str] = []
            while True:
                member = path.pop()
                in_progress.discard(member)
                component.append(member)
                if member == node:
                    break
            self._complete(component, edges)

    def _complete(self, component: list[str], edges: Mapping[str, Iterable[str]]) -> None:
        closure: set[str] = set(component)
        for member in component:
            for child in edges[member]:
                if child in self._memo:
                    closure |= self._memo[child]
        frozen = frozenset(closure)
        for member in component:
            self._memo[member] = frozen
        if len(component) > 1:
            logger.debug("Dependency cycle among %s", ", ".join(sorted(component)))


def resolve_closures(
    packages: Mapping[str, PackageRecord],
    include_dev: bool = True,
    include_optional: bool = True,
) -> dict[str, frozenset[str]]:
    """Compute the closure of every package in one call."""
    resolver = ClosureResolver(packages, include_dev=include_dev, include_optional=include_optional)
    return resolver.resolve()


def group_by_name(
    closure: Iterable[str],
    packages: Mapping[str, PackageRecord],
) -> dict[str, list[str]]:
    """Render a closure as ``{name: [versions...]}``, sorted for stable output."""
    grouped: dict[str, list[str]] = {}
    for key in closure:
        record = packages[key]
        grouped.setdefault(record.name, []).append(record.version)
    return {name: sorted(grouped[name]) for name in sorted(grouped)}
