# src/boostrunner/exceptions.py

"""
Custom exceptions for boostrunner.
"""


class BoostRunnerError(Exception):
    """Base class for all boostrunner errors."""

    pass


class ConfigurationError(BoostRunnerError):
    """Raised when configuration is missing, unreadable or invalid."""

    pass


class CatalogError(BoostRunnerError):
    """Raised when a catalog tree violates its structural rules."""

    pass


class ExecutableError(BoostRunnerError):
    """Base class for errors raised while driving the test executable."""

    def __init__(
        self,
        message: str,
        executable: str | None = None,
        details: Exception | None = None,
    ):
        self.executable = executable
        self.details = details
        full_message = message
        if executable:
            full_message += f" (Executable: '{executable}')"
        super().__init__(full_message)
        if details and hasattr(self, "add_note"):
            self.add_note(f"Original error: {type(details).__name__}: {details}")


class ExecutableMissingError(ExecutableError):
    """The executable does not exist or lacks execute permission."""

    pass


class ProcessLaunchError(ExecutableError):
    """The process could not be started or its streams could not be opened."""

    pass


class ProcessFailureError(ExecutableError):
    """The process exited with a nonzero code."""

    def __init__(self, message: str, exit_code: int, executable: str | None = None):
        self.exit_code = exit_code
        super().__init__(f"{message} (exit code {exit_code})", executable=executable)


class RunExecutionError(ExecutableError):
    """A test run failed while streaming its output."""

    pass


class DiscoveryParseError(BoostRunnerError):
    """Base class for malformed test listing output."""

    pass


class EmptyGraphError(DiscoveryParseError):
    """The listing output did not contain any graph."""

    pass


class MissingModuleError(DiscoveryParseError):
    """The graph has no module node."""

    pass


class MissingLabelError(DiscoveryParseError):
    """A node that must carry a label does not have one."""

    pass


class MissingSuiteListError(DiscoveryParseError):
    """The graph has no subgraph holding the test suites."""

    pass


class MalformedLabelError(DiscoveryParseError):
    """A node label is not of the form ``name|file(line)``."""

    def __init__(self, label: str):
        self.label = label
        super().__init__(f"Failed to extract label {label}")


# 🔼⚙️
