"""Errors that abort the setup run."""


class ProvisioningError(Exception):
    """A step failed and the run cannot continue."""

    exit_code = 1

    def __init__(self, message: str, exit_code: int = 0) -> None:
        super().__init__(message)
        if exit_code > 0:
            self.exit_code = exit_code


class MissingDependency(ProvisioningError):
    """A required tool is not on PATH."""

    def __init__(self, tool: str, hint: str) -> None:
        super().__init__(f"{tool} is not installed. {hint}")
        self.tool = tool


class AcquisitionFailure(ProvisioningError):
    """Cloning the repository failed."""


class GenerationFailure(ProvisioningError):
    """User credentials were not produced."""


class UserDeclined(ProvisioningError):
    """The operator answered no to a mandatory question."""


class BuildFailure(ProvisioningError):
    """The release build of the server failed."""


class WorkspaceError(ProvisioningError):
    """The checkout lacks a directory a later step works in."""
