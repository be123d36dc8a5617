# src/boostrunner/cli/console.py

"""
Rich console rendering of catalogs and run progress.
"""

from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from boostrunner.catalog import Catalog, TestNode, TestSuite
from boostrunner.testing.protocols import (
    CaseCancelled,
    CaseFailed,
    CasePassed,
    ProgressEvent,
    SuiteStarted,
)


def _location(node: TestNode) -> str:
    if not node.file:
        return ""
    # Stored lines are 0-based; humans count from one.
    line = f":{node.line + 1}" if node.line is not None else ""
    return f" [dim]{escape(node.file)}{line}[/]"


def _add_children(tree: Tree, suite: TestSuite) -> None:
    for child in suite.children:
        if isinstance(child, TestSuite):
            branch = tree.add(f"📦 [bold]{escape(child.label)}[/]{_location(child)}")
            _add_children(branch, child)
        else:
            tree.add(f"🧪 {escape(child.label)}{_location(child)}")


def render_catalog(catalog: Catalog) -> Tree:
    tree = Tree(f"🗂️  [bold cyan]{escape(catalog.root.label)}[/]")
    _add_children(tree, catalog.root)
    return tree


class ConsoleObserver:
    """Prints coordinator notifications and tallies case outcomes."""

    def __init__(self, console: Console | None = None, show_catalog: bool = False):
        self.console = console or Console()
        self.show_catalog = show_catalog
        self.passed = 0
        self.failed = 0
        self.cancelled = 0

    @property
    def has_failures(self) -> bool:
        return self.failed > 0 or self.cancelled > 0

    def on_discovery_started(self) -> None:
        self.console.print("[dim]🔎 Discovering tests...[/]")

    def on_discovery_finished(self, catalog: Catalog | None) -> None:
        if catalog is None:
            self.console.print("[yellow]⚠️  No tests discovered.[/]")
            return
        self.console.print(f"[dim]🔎 Discovered {len(catalog.cases())} test case(s).[/]")
        if self.show_catalog:
            self.console.print(render_catalog(catalog))

    def on_run_started(self, ids: Sequence[str]) -> None:
        self.passed = self.failed = self.cancelled = 0
        self.console.print(f"[bold]🏃 Running {', '.join(escape(i) for i in ids) or 'nothing'}[/]")

    def on_progress(self, event: ProgressEvent) -> None:
        if isinstance(event, SuiteStarted):
            self.console.print(f"📦 [bold]{escape(event.suite)}[/]")
        elif isinstance(event, CasePassed):
            self.passed += 1
            self.console.print(f"  [green]✔[/] {escape(event.test)}")
        elif isinstance(event, CaseFailed):
            self.failed += 1
            self.console.print(f"  [red]✘[/] {escape(event.test)}: {escape(event.message)}")
        elif isinstance(event, CaseCancelled):
            self.cancelled += 1
            self.console.print(f"  [yellow]■[/] {escape(event.test)} (cancelled)")

    def on_run_finished(self) -> None:
        style = "red" if self.has_failures else "green"
        self.console.print(
            f"[{style}]{self.passed} passed, {self.failed} failed"
            + (f", {self.cancelled} cancelled" if self.cancelled else "")
            + "[/]"
        )

# 🔼⚙️
