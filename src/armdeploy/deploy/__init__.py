"""
Remote deployment subsystem.

Stages a cross-compiled binary on an ARM64 host over SSH, runs the fixed
verification script, and removes the staging directory afterwards.

Public API:
    - ConfigResolver: env file + environment + CLI → DeploymentConfig
    - RemoteCommandBuilder: DeploymentConfig → RemoteSession
    - DeploymentOrchestrator: RemoteSession → DeploymentOutcome
    - render_verification_script: Remote script body
    - DeploymentConfig, RemoteSession, PhaseResult, CleanupResult, DeploymentOutcome
    - ConfigError (+ subclasses), RemoteOperationError, CleanupError
"""

from .base import (
    DeploymentConfig,
    RemoteSession,
    PhaseResult,
    CleanupResult,
    DeploymentOutcome,
)
from .config import ConfigResolver, DEFAULT_ENV_FILE
from .exceptions import (
    DeployError,
    ConfigError,
    MissingRequiredError,
    ArtifactNotFoundError,
    InvalidValueError,
    RemoteOperationError,
    CleanupError,
)
from .orchestrator import DeploymentOrchestrator
from .remote import RemoteCommandBuilder
from .report import write_report
from .verification import render_verification_script

__all__ = [
    # Types
    "DeploymentConfig",
    "RemoteSession",
    "PhaseResult",
    "CleanupResult",
    "DeploymentOutcome",

    # Components
    "ConfigResolver",
    "RemoteCommandBuilder",
    "DeploymentOrchestrator",
    "render_verification_script",
    "write_report",
    "DEFAULT_ENV_FILE",

    # Exceptions
    "DeployError",
    "ConfigError",
    "MissingRequiredError",
    "ArtifactNotFoundError",
    "InvalidValueError",
    "RemoteOperationError",
    "CleanupError",
]
