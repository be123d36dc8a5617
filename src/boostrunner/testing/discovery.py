#
# src/boostrunner/testing/discovery.py
#
"""
Builds a Catalog from the output of ``--list_content`` / ``--list_content=DOT``.

Both parsers are all-or-nothing: any structural problem raises a
DiscoveryParseError and no partial tree is returned.
"""
import os
import re

import pydot
import structlog
from attrs import define

from boostrunner.catalog import Catalog, TestCase, TestNode, TestSuite, case_id
from boostrunner.exceptions import (
    EmptyGraphError,
    MalformedLabelError,
    MissingLabelError,
    MissingModuleError,
    MissingSuiteListError,
)
from boostrunner.telemetry import StructLogger

log: StructLogger = structlog.get_logger("testing.discovery")

PLAIN_SUITE_RE = re.compile(r"^(\w+)\*?$")
PLAIN_CASE_RE = re.compile(r"^\s+(\w+)\*?$")
DOT_LABEL_RE = re.compile(r"^(\w+)\|(.+)\((\d+)\)$")

# pydot reports default attribute statements as nodes with these names.
_DEFAULT_NODE_NAMES = frozenset({"node", "edge", "graph"})


@define(frozen=True, slots=True)
class NodeLabel:
    name: str
    file: str
    line: int  # as printed, 1-based


def _resolve_source(file: str, source_prefix: str | os.PathLike[str] | None) -> str:
    if source_prefix is None:
        return file
    return os.path.abspath(os.path.join(source_prefix, file))


def parse_plain_listing(
    text: str,
    root_id: str,
    root_file: str | None = None,
    source_prefix: str | os.PathLike[str] | None = None,
) -> Catalog:
    """
    Parse the indented plain-text listing.

    A line at column 0 opens a suite, an indented line adds a case to it.
    The trailing ``*`` Boost uses to mark enabled tests is ignored. The format
    carries no module name or source locations, so the root is labelled with
    the executable path.
    """
    suites: list[tuple[str, list[TestCase]]] = []

    for line in text.splitlines():
        if match := PLAIN_SUITE_RE.match(line):
            suites.append((match[1], []))
        elif (match := PLAIN_CASE_RE.match(line)) and suites:
            suite_id, cases = suites[-1]
            cases.append(TestCase(id=case_id(suite_id, match[1]), label=match[1]))

    root = TestSuite(
        id=root_id,
        label=root_id,
        file=root_file,
        children=[TestSuite(id=name, label=name, children=cases) for name, cases in suites],
    )
    log.debug("Parsed plain test listing", suites=len(suites), emoji_key="discover")
    return Catalog(root)


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def parse_label(node: pydot.Node) -> NodeLabel:
    """Split a ``name|file(line)`` label into its parts."""
    label = node.get("label")
    if label is None:
        raise MissingLabelError(f"Node '{node.get_name()}' does not have a label attribute")

    text = _unquote(str(label))
    match = DOT_LABEL_RE.match(text)
    if not match:
        raise MalformedLabelError(text)

    return NodeLabel(name=match[1], file=match[2], line=int(match[3]))


def _ordered_children(graph: pydot.Graph) -> list[pydot.Node | pydot.Subgraph]:
    """Nodes and subgraphs of ``graph`` in the order they were written."""
    items: list[pydot.Node | pydot.Subgraph] = [
        node for node in graph.get_node_list() if node.get_name() not in _DEFAULT_NODE_NAMES
    ]
    items.extend(graph.get_subgraph_list())
    return sorted(items, key=lambda item: item.get_sequence())


def _build_nodes(
    graph: pydot.Graph,
    parent_id: str | None,
    source_prefix: str | os.PathLike[str] | None,
) -> list[TestNode]:
    # A node directly followed by a subgraph is a suite holding the subgraph's
    # contents. At the top level every node is a suite, below it a node with
    # no subgraph is a case.
    items = _ordered_children(graph)
    nodes: list[TestNode] = []
    index = 0

    while index < len(items):
        item = items[index]
        index += 1
        if isinstance(item, pydot.Subgraph):
            log.debug("Skipping subgraph without a preceding node", parent=parent_id)
            continue

        info = parse_label(item)
        node_id = info.name if parent_id is None else case_id(parent_id, info.name)
        file = _resolve_source(info.file, source_prefix)
        line = info.line - 1

        following = items[index] if index < len(items) else None
        if isinstance(following, pydot.Subgraph):
            index += 1
            children = _build_nodes(following, node_id, source_prefix)
            nodes.append(TestSuite(id=node_id, label=info.name, file=file, line=line, children=children))
        elif parent_id is None:
            nodes.append(TestSuite(id=node_id, label=info.name, file=file, line=line))
        else:
            nodes.append(TestCase(id=node_id, label=info.name, file=file, line=line))

    return nodes


def parse_dot_listing(
    text: str,
    root_id: str,
    root_file: str | None = None,
    source_prefix: str | os.PathLike[str] | None = None,
) -> Catalog:
    """
    Parse the DOT graph listing.

    The graph holds one module node, whose label names the test module, and one
    subgraph listing the suites. Line numbers in labels are 1-based and are
    stored 0-based.

    Raises:
        EmptyGraphError, MissingModuleError, MissingLabelError,
        MissingSuiteListError, MalformedLabelError
    """
    try:
        graphs = pydot.graph_from_dot_data(text)
    except Exception as e:
        # pyparsing raises its own exception types on malformed input.
        raise EmptyGraphError(f"Failed to parse list of test cases: {e}") from e

    if not graphs:
        raise EmptyGraphError("Failed to parse list of test cases")

    top_level = _ordered_children(graphs[0])

    module = next((item for item in top_level if not isinstance(item, pydot.Subgraph)), None)
    if module is None:
        raise MissingModuleError("Cannot find test's module definition")

    module_label = module.get("label")
    if module_label is None:
        raise MissingLabelError("Cannot find the name of test module")

    suite_list = next((item for item in top_level if isinstance(item, pydot.Subgraph)), None)
    if suite_list is None:
        raise MissingSuiteListError("Cannot find a list of test suite")

    root = TestSuite(
        id=root_id,
        label=_unquote(str(module_label)),
        file=root_file,
        children=_build_nodes(suite_list, None, source_prefix),
    )
    log.debug("Parsed DOT test listing", suites=len(root.children), emoji_key="discover")
    return Catalog(root)

# 🔼⚙️
