#
# src/boostrunner/testing/__init__.py
#
"""
Test executable driving sub-package for boostrunner.
"""
from .executable import TestExecutable
from .factory import get_listing_format
from .progress import RunOutputParser, RunParserState, parse_run_line
from .protocols import (
    CaseCancelled,
    CaseFailed,
    CasePassed,
    CaseRunning,
    ProgressEvent,
    SessionObserver,
    SuiteCompleted,
    SuiteStarted,
)
from .session import ProcessSession, build_test_filter

__all__ = [
    "CaseCancelled",
    "CaseFailed",
    "CasePassed",
    "CaseRunning",
    "ProcessSession",
    "ProgressEvent",
    "RunOutputParser",
    "RunParserState",
    "SessionObserver",
    "SuiteCompleted",
    "SuiteStarted",
    "TestExecutable",
    "build_test_filter",
    "get_listing_format",
    "parse_run_line",
]

# 🔼⚙️
