import stat
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from boostrunner.catalog import Catalog

if sys.platform == "win32":
    collect_ignore_glob = ["unit/test_session.py", "unit/test_executable.py", "unit/test_cli.py"]


SAMPLE_DOT_LISTING = """\
digraph G {rankdir=LR;
tu1[shape=ellipse,peripheries=2,fontname=Helvetica,color=green,label="example_module"];
{
tu65536[shape=Mrecord,fontname=Helvetica,color=green,label="MySuite|test_main.cpp(5)"];
tu1 -> tu65536;
{
tu65537[shape=Mrecord,fontname=Helvetica,color=green,label="case_one|test_main.cpp(7)"];
tu65536 -> tu65537;
tu65538[shape=Mrecord,fontname=Helvetica,color=green,label="case_two|test_main.cpp(12)"];
tu65536 -> tu65538;
}
tu65539[shape=Mrecord,fontname=Helvetica,color=green,label="OtherSuite|other.cpp(3)"];
tu1 -> tu65539;
{
tu65540[shape=Mrecord,fontname=Helvetica,color=green,label="lonely|other.cpp(4)"];
tu65539 -> tu65540;
}
}
}
"""

SAMPLE_PLAIN_LISTING = "MySuite*\n    case_one*\n    case_two*\n"

PASSING_RUN_OUTPUT = """\
Running 2 test cases...
test_main.cpp(1): Entering test module "example_module"
test_main.cpp(5): Entering test suite "MySuite"
test_main.cpp(7): Entering test case "case_one"
test_main.cpp(7): Leaving test case "case_one"; testing time: 11us
test_main.cpp(12): Entering test case "case_two"
test_main.cpp(12): Leaving test case "case_two"; testing time: 9us
test_main.cpp(5): Leaving test suite "MySuite"; testing time: 40us
test_main.cpp(1): Leaving test module "example_module"; testing time: 52us

*** No errors detected
"""

FAILING_RUN_OUTPUT = """\
test_main.cpp(5): Entering test suite "MySuite"
test_main.cpp(7): Entering test case "case_one"
test_main.cpp(9): error: in "MySuite/case_one": check 1 == 2 has failed [1 != 2]
test_main.cpp(7): Leaving test case "case_one"; testing time: 20us
test_main.cpp(5): Leaving test suite "MySuite"; testing time: 30us
"""


FakeExecutableFactory = Callable[..., Path]


@pytest.fixture
def fake_executable(tmp_path: Path) -> FakeExecutableFactory:
    """
    Writes a shell script that answers like a Boost.Test binary.

    Every invocation appends its arguments to ``<script>.args``. ``run_tail``
    is shell code executed after the run output, e.g. ``exec sleep 30`` to
    keep the process alive.
    """

    def _factory(
        name: str = "unit_tests",
        listing: str = SAMPLE_DOT_LISTING,
        run_output: str = PASSING_RUN_OUTPUT,
        list_exit: int = 0,
        run_exit: int = 0,
        run_tail: str = "",
    ) -> Path:
        script = tmp_path / name
        listing_file = tmp_path / f"{name}.listing"
        run_file = tmp_path / f"{name}.run"
        args_file = tmp_path / f"{name}.args"
        listing_file.write_text(listing)
        run_file.write_text(run_output)

        script.write_text(
            "#!/bin/sh\n"
            f'echo "$*" >> "{args_file}"\n'
            'case "$3" in\n'
            f'  --list_content*) cat "{listing_file}" >&2; exit {list_exit} ;;\n'
            f'  -l) cat "{run_file}"; {run_tail}\n'
            f"      exit {run_exit} ;;\n"
            "esac\n"
            "exit 3\n"
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _factory


def recorded_args(executable: Path) -> list[str]:
    args_file = executable.with_name(f"{executable.name}.args")
    if not args_file.exists():
        return []
    return args_file.read_text().splitlines()


class RecordingObserver:
    """Keeps every coordinator notification in order."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def on_discovery_started(self) -> None:
        self.calls.append(("discovery_started",))

    def on_discovery_finished(self, catalog: Catalog | None) -> None:
        self.calls.append(("discovery_finished", catalog))

    def on_run_started(self, ids) -> None:
        self.calls.append(("run_started", list(ids)))

    def on_progress(self, event) -> None:
        self.calls.append(("progress", event))

    def on_run_finished(self) -> None:
        self.calls.append(("run_finished",))

    @property
    def events(self) -> list:
        return [call[1] for call in self.calls if call[0] == "progress"]

    @property
    def names(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def recording_observer() -> RecordingObserver:
    return RecordingObserver()
