"""
Deployment data model.

Transient, single-run types passed between the resolver, the command
builder and the orchestrator. Nothing here is persisted.
"""

import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Mapping, Any

DEFAULT_SSH_OPTS = "-o StrictHostKeyChecking=no -o UserKnownHostsFile=/dev/null"
DEFAULT_TIMEOUT = 300


@dataclass(frozen=True)
class DeploymentConfig:
    """
    Fully resolved deployment configuration.

    Attributes:
        host: Target address (e.g., "10.0.0.5")
        user: Remote username (e.g., "pi")
        binary: Local artifact to stage
        test_mode: Parsed and reported, no behavioural effect
        ssh_key: Private key passed with -i (None: agent/default auth)
        ssh_opts: Extra transport options, split on whitespace
        ssh_askpass: Askpass helper (forces non-interactive auth)
        timeout: Per-invocation timeout in seconds

    Note on ssh_opts default:
        Host-key checking and known_hosts persistence are disabled. This is
        weak on purpose: lab boards get reflashed and change keys constantly.
    """
    host: str
    user: str
    binary: Path
    test_mode: bool = False
    ssh_key: Optional[str] = None
    ssh_opts: str = DEFAULT_SSH_OPTS
    ssh_askpass: Optional[str] = None
    timeout: int = DEFAULT_TIMEOUT

    @property
    def target(self) -> str:
        return f"{self.user}@{self.host}"


@dataclass(frozen=True)
class RemoteSession:
    """
    Remote-transport invocation parameters derived from a DeploymentConfig.

    Attributes:
        target: "user@host"
        ssh_base: argv prefix for ssh (executable + options)
        scp_base: argv prefix for scp (executable + options)
        env: Extra environment variables for every invocation
        timeout: Per-invocation timeout in seconds
    """
    target: str
    ssh_base: tuple
    scp_base: tuple
    env: Mapping[str, str] = field(default_factory=dict)
    timeout: int = DEFAULT_TIMEOUT

    def ssh_command(self, command: str) -> list[str]:
        """Build argv running `command` on the target."""
        return [*self.ssh_base, self.target, command]

    def scp_command(self, source: str, destination: str, recursive: bool = False) -> list[str]:
        """Build argv copying source to destination (either may be remote)."""
        flags = ["-r"] if recursive else []
        return [*self.scp_base, *flags, source, destination]

    def remote_path(self, path: str) -> str:
        """Qualify a remote path for scp ("user@host:/path")."""
        return f"{self.target}:{path}"

    def describe(self, argv: list[str]) -> str:
        """Render argv for logs."""
        return " ".join(shlex.quote(part) for part in argv)


@dataclass
class PhaseResult:
    """
    Result of one orchestrator phase.

    Attributes:
        name: Phase identifier (e.g., "upload_artifact")
        success: Whether the phase succeeded
        output: Captured stdout (combined stdout+stderr for verification)
        error: Failure description, empty on success
        critical: False for phases whose failure is logged, not propagated
        skipped: True when the phase was not attempted (no test data)
    """
    name: str
    success: bool
    output: str = ""
    error: str = ""
    critical: bool = True
    skipped: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "success": self.success,
            "critical": self.critical,
            "skipped": self.skipped,
            "output": self.output,
            "error": self.error,
        }


@dataclass
class CleanupResult:
    """
    Result of cleanup operation.

    Attributes:
        success: Whether cleanup succeeded
        errors: List of non-fatal issues encountered during cleanup
    """
    success: bool
    errors: list[str]


@dataclass
class DeploymentOutcome:
    """
    Result of a full staged run, built up phase by phase.

    success is derived: no fatal error and every critical phase succeeded.
    Cleanup is reported separately and never affects it.
    """
    phases: list[PhaseResult] = field(default_factory=list)
    cleanup: Optional[CleanupResult] = None
    error: Optional[str] = None
    failed_phase: Optional[str] = None

    @property
    def success(self) -> bool:
        if self.error is not None:
            return False
        return all(p.success for p in self.phases if p.critical)

    @property
    def cleanup_succeeded(self) -> bool:
        return self.cleanup is not None and self.cleanup.success

    def phase(self, name: str) -> Optional[PhaseResult]:
        for result in self.phases:
            if result.name == name:
                return result
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "failed_phase": self.failed_phase,
            "error": self.error,
            "phases": [p.to_dict() for p in self.phases],
            "cleanup": {
                "attempted": self.cleanup is not None,
                "success": self.cleanup_succeeded,
                "errors": list(self.cleanup.errors) if self.cleanup else [],
            },
        }
