"""Core dependency injection infrastructure for armdeploy.

This module provides Protocol-based abstractions that keep the deployment
logic testable. All external dependencies (filesystem, subprocess,
environment, env files) are abstracted via Protocols with production
implementations.

Design:
- Protocol-based abstractions (typing.Protocol) for structural typing
- Production implementations for real-world use
- Easy mocking for unit tests
"""

from armdeploy.core.protocols import (
    Logger,
    FileSystemService,
    ProcessExecutor,
    ProcessResult,
    EnvironmentProvider,
    ConfigLoader,
)

from armdeploy.core.implementations import (
    ConsoleLogger,
    RealFileSystemService,
    SubprocessExecutor,
    SystemEnvironmentProvider,
    DotenvConfigLoader,
)

__all__ = [
    # Protocols
    "Logger",
    "FileSystemService",
    "ProcessExecutor",
    "ProcessResult",
    "EnvironmentProvider",
    "ConfigLoader",
    # Implementations
    "ConsoleLogger",
    "RealFileSystemService",
    "SubprocessExecutor",
    "SystemEnvironmentProvider",
    "DotenvConfigLoader",
]
