"""
DeploymentOrchestrator - Stage, verify and clean up a binary over SSH.

Targets: ARM64 boards reachable with the OpenSSH client (Raspberry Pi, SBCs)
Strategy: mkdir → rm old binary → scp binary [+ test data] → verify script → rm -rf
"""

import logging
import shlex
import subprocess
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from armdeploy.core import EnvironmentProvider, FileSystemService, Logger, ProcessExecutor
from .base import CleanupResult, DeploymentOutcome, PhaseResult, RemoteSession
from .exceptions import CleanupError, RemoteOperationError
from .verification import DEFAULT_DIAGNOSTIC_TIMEOUT, render_verification_script

logger = logging.getLogger(__name__)

DEFAULT_STAGING_DIR = "/tmp/mujina-miner-test"
DEFAULT_BINARY_NAME = "mujina-minerd"

PREPARE_WORKSPACE = "prepare_workspace"
CLEAR_ARTIFACT = "clear_artifact"
UPLOAD_ARTIFACT = "upload_artifact"
UPLOAD_TEST_DATA = "upload_test_data"
VERIFY = "verify"
CLEANUP = "cleanup"

PHASES = (PREPARE_WORKSPACE, CLEAR_ARTIFACT, UPLOAD_ARTIFACT, UPLOAD_TEST_DATA, VERIFY, CLEANUP)

# Tail of remote output kept in error messages
ERROR_TAIL = 1000


class DeploymentOrchestrator:
    """
    Runs the fixed staging/verification pipeline against one host.

    Every remote call is blocking and bounded by session.timeout. There are
    no retries: the first failing mandatory phase aborts the run, and the
    staging directory is removed on every way out of run().
    """

    def __init__(
        self,
        process_executor: ProcessExecutor,
        filesystem: FileSystemService,
        env_provider: EnvironmentProvider,
        logger: Logger,
        staging_dir: str = DEFAULT_STAGING_DIR,
        binary_name: str = DEFAULT_BINARY_NAME,
        diagnostic_timeout: int = DEFAULT_DIAGNOSTIC_TIMEOUT
    ):
        """
        Initialize orchestrator.

        Args:
            process_executor: Runs ssh/scp
            filesystem: Local filesystem (test data lookup)
            env_provider: Base environment for child processes
            logger: User-facing status output
            staging_dir: Remote scratch directory, created and destroyed per run
            binary_name: File name of the uploaded binary inside staging_dir
            diagnostic_timeout: Seconds allowed for `<binary> --help` remotely
        """
        self.process = process_executor
        self.fs = filesystem
        self.env = env_provider
        self.log = logger
        self.staging_dir = staging_dir
        self.binary_name = binary_name
        self.diagnostic_timeout = diagnostic_timeout

    @property
    def remote_binary(self) -> str:
        return f"{self.staging_dir}/{self.binary_name}"

    def run(
        self,
        session: RemoteSession,
        artifact_path: Union[str, Path],
        test_data_dir: Optional[Union[str, Path]] = None
    ) -> DeploymentOutcome:
        """
        Deploy and verify: mkdir → clear → upload → [test data] → verify → cleanup.

        Args:
            session: Prebuilt ssh/scp invocation parameters
            artifact_path: Local binary to stage
            test_data_dir: Uploaded recursively if it exists locally

        Returns:
            DeploymentOutcome; never raises RemoteOperationError
        """
        outcome = DeploymentOutcome()

        try:
            with self.staging_directory(session, outcome):
                self._run_phase(
                    session, outcome, CLEAR_ARTIFACT, "Removing existing binary...",
                    session.ssh_command(f"rm -f {shlex.quote(self.remote_binary)}")
                )

                self._run_phase(
                    session, outcome, UPLOAD_ARTIFACT, "Uploading binary...",
                    session.scp_command(str(artifact_path), session.remote_path(self.remote_binary))
                )

                if test_data_dir is not None and self.fs.is_dir(test_data_dir):
                    self._run_phase(
                        session, outcome, UPLOAD_TEST_DATA, "Uploading test data...",
                        session.scp_command(
                            str(test_data_dir),
                            session.remote_path(f"{self.staging_dir}/"),
                            recursive=True
                        )
                    )
                else:
                    logger.debug("No test data directory at %s, skipping upload", test_data_dir)
                    outcome.phases.append(
                        PhaseResult(UPLOAD_TEST_DATA, success=True, critical=False, skipped=True)
                    )

                self._verify(session, outcome)

        except RemoteOperationError as e:
            outcome.error = str(e)
            outcome.failed_phase = e.phase
            self.log.error(str(e))

        return outcome

    @contextmanager
    def staging_directory(self, session: RemoteSession, outcome: DeploymentOutcome) -> Iterator[str]:
        """
        Create the remote staging directory and guarantee its removal.

        The cleanup in `finally` runs whether the body finished, a phase
        raised, or creating the directory itself failed.

        Usage:
            with orchestrator.staging_directory(session, outcome) as staging:
                # upload into staging ...

        Yields:
            Remote staging directory path
        """
        try:
            self._run_phase(
                session, outcome, PREPARE_WORKSPACE, "Setting up remote directory...",
                session.ssh_command(f"mkdir -p {shlex.quote(self.staging_dir)}")
            )
            yield self.staging_dir
        finally:
            outcome.cleanup = self.cleanup(session, outcome)

    def cleanup(self, session: RemoteSession, outcome: Optional[DeploymentOutcome] = None) -> CleanupResult:
        """
        Remove the staging directory (best effort).

        Returns:
            CleanupResult(success=True, errors=[]) on success

        Note:
            Never raises. Failures are logged as non-critical and only show
            up in the returned result.
        """
        self.log.info(f"{self._marker(CLEANUP)} Cleaning up remote files...")
        errors = []
        output = ""

        try:
            output = self._remove_staging(session)
        except CleanupError as e:
            errors.append(str(e))

        if errors:
            self.log.warning(f"Cleanup failed (non-critical): {errors[0]}")
        else:
            self.log.info("  ✓ Remote files removed")

        if outcome is not None:
            outcome.phases.append(PhaseResult(
                CLEANUP,
                success=not errors,
                output=output,
                error="; ".join(errors),
                critical=False
            ))

        return CleanupResult(success=not errors, errors=errors)

    def _remove_staging(self, session: RemoteSession) -> str:
        argv = session.ssh_command(f"rm -rf {shlex.quote(self.staging_dir)}")
        try:
            result = self._invoke(session, CLEANUP, argv)
        except RemoteOperationError as e:
            raise CleanupError(str(e))

        if result.returncode != 0:
            raise CleanupError(
                f"rm -rf {self.staging_dir} exited with {result.returncode} on {session.target}"
                f"{_tail(result.stderr)}"
            )
        return result.stdout or ""

    def _verify(self, session: RemoteSession, outcome: DeploymentOutcome) -> None:
        # ConfigResolver rejects timeouts below 2, so this stays under session.timeout
        diagnostic_timeout = min(self.diagnostic_timeout, max(1, session.timeout - 1))
        script = render_verification_script(self.staging_dir, self.binary_name, diagnostic_timeout)

        result = self._run_phase(
            session, outcome, VERIFY, "Running tests on ARM64 hardware...",
            session.ssh_command("bash -s"),
            input=script,
            merge_stderr=True
        )

        for line in (result.output or "").splitlines():
            self.log.info(line)

    def _run_phase(
        self,
        session: RemoteSession,
        outcome: DeploymentOutcome,
        phase: str,
        description: str,
        argv: list[str],
        input: Optional[str] = None,
        merge_stderr: bool = False
    ) -> PhaseResult:
        """Run one mandatory phase, record it, raise RemoteOperationError on failure."""
        self.log.info(f"{self._marker(phase)} {description}")

        try:
            result = self._invoke(session, phase, argv, input=input, merge_stderr=merge_stderr)
        except RemoteOperationError as e:
            outcome.phases.append(PhaseResult(phase, success=False, error=str(e)))
            self.log.info(f"  ✗ {phase} failed")
            raise

        output = result.stdout or ""
        if result.returncode != 0:
            # Verification merges stderr into stdout, everything else keeps it apart
            detail = output if merge_stderr else (result.stderr or "")
            error = RemoteOperationError(
                phase,
                f"{description.rstrip('.')} failed on {session.target} "
                f"(exit code {result.returncode}){_tail(detail)}",
                returncode=result.returncode,
                output=detail
            )
            outcome.phases.append(PhaseResult(phase, success=False, output=output, error=str(error)))
            self.log.info(f"  ✗ {phase} failed")
            raise error

        phase_result = PhaseResult(phase, success=True, output=output)
        outcome.phases.append(phase_result)
        self.log.info(f"  ✓ {phase} done")
        return phase_result

    def _invoke(
        self,
        session: RemoteSession,
        phase: str,
        argv: list[str],
        input: Optional[str] = None,
        merge_stderr: bool = False
    ):
        """Spawn ssh/scp with the session env layered over a copy of ours."""
        env = {**self.env.get_environ(), **session.env}
        logger.debug("[%s] %s", phase, session.describe(argv))

        try:
            return self.process.run(
                argv,
                input=input,
                timeout=session.timeout,
                env=env,
                merge_stderr=merge_stderr
            )
        except subprocess.TimeoutExpired:
            raise RemoteOperationError(
                phase,
                f"{phase} timed out after {session.timeout}s on {session.target}"
            )
        except OSError as e:
            raise RemoteOperationError(phase, f"Could not execute {argv[0]}: {e}")

    @staticmethod
    def _marker(phase: str) -> str:
        return f"[{PHASES.index(phase) + 1}/{len(PHASES)}]"


def _tail(text: Optional[str]) -> str:
    text = (text or "").strip()
    if not text:
        return ""
    return f"\n\nLast lines of output:\n{text[-ERROR_TAIL:]}"
