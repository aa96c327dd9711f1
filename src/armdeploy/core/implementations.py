"""Production implementations of dependency injection protocols.

This module provides real implementations that wrap actual external dependencies
(filesystem, subprocess, environment, env files). These are used in production code.

For testing, use mocks or test doubles instead of these implementations.
"""

import io
import os
import stat
import subprocess
import sys
from pathlib import Path
from typing import Dict, Any, Optional, List, Union

from dotenv import dotenv_values


class ConsoleLogger:
    """Production logger that prints to console (stdout/stderr)."""

    def info(self, message: str) -> None:
        """Print info message to stdout."""
        print(message, flush=True)

    def warning(self, message: str) -> None:
        """Print warning message to stdout."""
        print(f"Warning: {message}", flush=True)

    def error(self, message: str) -> None:
        """Print error message to stderr."""
        print(f"Error: {message}", file=sys.stderr, flush=True)

    def debug(self, message: str) -> None:
        """Print debug message to stdout."""
        print(f"Debug: {message}", flush=True)


class RealFileSystemService:
    """Production filesystem service using real pathlib operations."""

    def exists(self, path: Union[str, Path]) -> bool:
        """Check if path exists."""
        return Path(path).exists()

    def is_file(self, path: Union[str, Path]) -> bool:
        """Check if path is a file."""
        return Path(path).is_file()

    def is_dir(self, path: Union[str, Path]) -> bool:
        """Check if path is a directory."""
        return Path(path).is_dir()

    def read_file(self, path: Union[str, Path]) -> str:
        """Read entire file as string."""
        with open(path, 'r') as f:
            return f.read()

    def write_file(self, path: Union[str, Path], content: str) -> None:
        """Write string content to file."""
        with open(path, 'w') as f:
            f.write(content)

    def mkdir(self, path: Union[str, Path], parents: bool = True, exist_ok: bool = True) -> None:
        """Create directory."""
        Path(path).mkdir(parents=parents, exist_ok=exist_ok)

    def make_executable(self, path: Union[str, Path]) -> None:
        """Equivalent of chmod +x."""
        mode = os.stat(path).st_mode
        os.chmod(path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


class SubprocessExecutor:
    """Production process executor using real subprocess.run."""

    def run(
        self,
        cmd: List[str],
        input: Optional[str] = None,
        timeout: Optional[float] = None,
        env: Optional[Dict[str, str]] = None,
        merge_stderr: bool = False
    ) -> subprocess.CompletedProcess:
        """Run command and capture its output as text."""
        return subprocess.run(
            cmd,
            input=input,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT if merge_stderr else subprocess.PIPE,
            text=True,
            timeout=timeout,
            env=env,
            check=False
        )


class SystemEnvironmentProvider:
    """Production environment provider using the real os.environ."""

    def get_environ(self) -> Dict[str, str]:
        """Get copy of environment variables."""
        return dict(os.environ)


class DotenvConfigLoader:
    """Production env-file loader using python-dotenv."""

    def __init__(self, filesystem: 'RealFileSystemService'):
        """Initialize with filesystem service for reading files."""
        self.fs = filesystem

    def load_env_file(self, path: Union[str, Path]) -> Dict[str, Any]:
        """Parse KEY=value lines (quotes and `export` prefixes allowed).

        Keys declared without a value are dropped.
        """
        content = self.fs.read_file(path)
        values = dotenv_values(stream=io.StringIO(content))
        return {key: value for key, value in values.items() if value is not None}
