# src/boostrunner/catalog.py
#
"""
Defines the discovered test tree (module -> suites -> cases) of one executable.

A catalog is an immutable snapshot. Discovery builds a new one every cycle and
the coordinator swaps it in wholesale, so readers never observe a tree that is
half updated.
"""

from collections.abc import Iterable, Iterator
from typing import TypeAlias

from attrs import define, field

from boostrunner.exceptions import CatalogError

ID_SEPARATOR = "/"


def case_id(suite_id: str, label: str) -> str:
    """Compound identifier of a child of ``suite_id``."""
    return f"{suite_id}{ID_SEPARATOR}{label}"


@define(frozen=True, slots=True)
class TestCase:
    """A single executable test."""
    __test__ = False  # not a pytest class

    id: str
    label: str
    file: str | None = None
    line: int | None = None  # 0-based


@define(frozen=True, slots=True)
class TestSuite:
    """A named grouping of cases or nested suites."""
    __test__ = False

    id: str
    label: str
    file: str | None = None
    line: int | None = None  # 0-based
    children: tuple["TestNode", ...] = field(default=(), converter=tuple)


TestNode: TypeAlias = TestSuite | TestCase


def _walk(node: TestNode) -> Iterator[TestNode]:
    yield node
    if isinstance(node, TestSuite):
        for child in node.children:
            yield from _walk(child)


class Catalog:
    """Read-only view over a discovered test tree with lookup by identifier."""

    __slots__ = ("_root", "_index")

    def __init__(self, root: TestSuite):
        index: dict[str, TestNode] = {}
        for node in _walk(root):
            if node.id in index:
                raise CatalogError(f"Duplicate test identifier '{node.id}'")
            index[node.id] = node
        self._root = root
        self._index = index

    @property
    def root(self) -> TestSuite:
        return self._root

    @property
    def root_id(self) -> str:
        return self._root.id

    def find(self, node_id: str) -> TestNode | None:
        return self._index.get(node_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    def __len__(self) -> int:
        return len(self._index)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Catalog):
            return NotImplemented
        return self._root == other._root

    def __hash__(self) -> int:
        return hash(self._root)

    def __repr__(self) -> str:
        return f"Catalog(root_id={self.root_id!r}, nodes={len(self)})"

    def iter_nodes(self) -> Iterator[TestNode]:
        """All nodes in depth-first order, root first."""
        return _walk(self._root)

    def suites(self) -> list[TestSuite]:
        return [n for n in self.iter_nodes() if isinstance(n, TestSuite) and n is not self._root]

    def cases(self) -> list[TestCase]:
        return [n for n in self.iter_nodes() if isinstance(n, TestCase)]

    def is_run_all(self, ids: Iterable[str]) -> bool:
        """True when the request is exactly the root identifier."""
        return list(ids) == [self.root_id]

# 🔼⚙️
