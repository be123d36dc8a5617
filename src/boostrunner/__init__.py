#
# src/boostrunner/__init__.py
#
"""
boostrunner: discover and run the test cases of a Boost.Test executable.
"""

from boostrunner.catalog import Catalog, TestCase, TestNode, TestSuite
from boostrunner.runtime.coordinator import SessionCoordinator
from boostrunner.testing.executable import TestExecutable

__all__ = [
    "Catalog",
    "SessionCoordinator",
    "TestCase",
    "TestExecutable",
    "TestNode",
    "TestSuite",
]

# 🔼⚙️
