"""Protocol definitions for dependency injection.

This module defines Protocol-based abstractions for all external dependencies.
Protocols use structural typing (duck typing with type hints) which means any
class implementing these methods satisfies the Protocol without explicit inheritance.

Benefits:
- Easy to mock in tests (just implement the methods)
- No inheritance required
- Clear interface contracts between the orchestrator and the outside world
"""

from typing import Protocol, Dict, Any, Optional, List, Union
from pathlib import Path


class Logger(Protocol):
    """Abstraction for user-facing status output.

    Every phase marker and banner goes through this, so tests can assert
    on what the operator would have seen.
    """

    def info(self, message: str) -> None:
        """Log informational message."""
        ...

    def warning(self, message: str) -> None:
        """Log warning message."""
        ...

    def error(self, message: str) -> None:
        """Log error message."""
        ...

    def debug(self, message: str) -> None:
        """Log debug message."""
        ...


class FileSystemService(Protocol):
    """Abstraction for local filesystem operations.

    Wraps Path and file I/O operations to enable testing without
    real filesystem access.
    """

    def exists(self, path: Union[str, Path]) -> bool:
        """Check if path exists."""
        ...

    def is_file(self, path: Union[str, Path]) -> bool:
        """Check if path is a file."""
        ...

    def is_dir(self, path: Union[str, Path]) -> bool:
        """Check if path is a directory."""
        ...

    def read_file(self, path: Union[str, Path]) -> str:
        """Read entire file as string."""
        ...

    def write_file(self, path: Union[str, Path], content: str) -> None:
        """Write string content to file."""
        ...

    def mkdir(self, path: Union[str, Path], parents: bool = True, exist_ok: bool = True) -> None:
        """Create directory (with parents if specified)."""
        ...

    def make_executable(self, path: Union[str, Path]) -> None:
        """Add execute permission for user, group and others."""
        ...


class ProcessResult(Protocol):
    """Result of a finished process (shape of subprocess.CompletedProcess)."""

    returncode: int
    stdout: Optional[str]
    stderr: Optional[str]


class ProcessExecutor(Protocol):
    """Abstraction for blocking process execution.

    Wraps subprocess.run so the orchestrator can be exercised without
    spawning ssh/scp. Implementations raise subprocess.TimeoutExpired when
    the timeout elapses and FileNotFoundError when the executable is missing.
    """

    def run(
        self,
        cmd: List[str],
        input: Optional[str] = None,
        timeout: Optional[float] = None,
        env: Optional[Dict[str, str]] = None,
        merge_stderr: bool = False
    ) -> ProcessResult:
        """Run command to completion and return its captured result."""
        ...


class EnvironmentProvider(Protocol):
    """Abstraction for environment access.

    Wraps os.environ so configuration resolution and child-process
    environments can be tested without touching the real environment.
    """

    def get_environ(self) -> Dict[str, str]:
        """Get copy of environment variables."""
        ...


class ConfigLoader(Protocol):
    """Abstraction for configuration file loading.

    Wraps key=value env-file parsing to enable testing with mock
    configurations without requiring actual config files.
    """

    def load_env_file(self, path: Union[str, Path]) -> Dict[str, Any]:
        """Load key=value file and return parsed dictionary."""
        ...
