"""
Deployment exceptions.

Custom exceptions for configuration and remote deployment failures with
actionable error messages.
"""

from typing import Optional, Sequence


class DeployError(Exception):
    """Base class for every error raised by armdeploy."""
    pass


class ConfigError(DeployError):
    """
    Raised when configuration cannot be resolved.

    Always raised before any remote I/O happens.
    """
    pass


class MissingRequiredError(ConfigError):
    """Raised when host, user or binary is empty after merging all sources."""

    def __init__(self, missing: Sequence[str]):
        self.missing = list(missing)
        flags = ", ".join(f"--{name}" for name in self.missing)
        super().__init__(
            f"{flags} {'is' if len(self.missing) == 1 else 'are'} required\n"
            f"Use --help for usage information"
        )


class ArtifactNotFoundError(ConfigError):
    """Raised when the binary path does not name an existing local file."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Binary file '{path}' does not exist")


class InvalidValueError(ConfigError):
    """Raised when a configuration value cannot be parsed (e.g. TIMEOUT=abc)."""
    pass


class RemoteOperationError(DeployError):
    """
    Raised when a mandatory remote phase fails.

    Examples:
        - ssh/scp exited non-zero
        - the invocation exceeded the connection timeout
        - the ssh/scp executable is not installed

    Aborts the remaining phases; the staging directory is still cleaned up.
    """

    def __init__(
        self,
        phase: str,
        message: str,
        returncode: Optional[int] = None,
        output: str = ""
    ):
        self.phase = phase
        self.returncode = returncode
        self.output = output
        super().__init__(message)


class CleanupError(DeployError):
    """
    Raised when removing the staging directory fails.

    Note: the orchestrator catches this and records it in a CleanupResult.
    It is never propagated to the exit code.
    """
    pass
