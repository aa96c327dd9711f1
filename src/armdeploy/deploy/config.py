"""
ConfigResolver - Merge env file, process environment and CLI arguments.

Precedence (lowest to highest):
    1. scripts/local_ci/arm-deployment.env (optional, KEY=value)
    2. Process environment (ARM_HOST, ARM_USER, SSH_KEY, ...)
    3. Explicit command-line arguments

Resolution is purely local: files are read and the binary is made
executable, but nothing is sent to the remote host.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from armdeploy.core import ConfigLoader, FileSystemService, Logger
from .base import DeploymentConfig, DEFAULT_SSH_OPTS, DEFAULT_TIMEOUT
from .exceptions import (
    ArtifactNotFoundError,
    InvalidValueError,
    MissingRequiredError,
)

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = "scripts/local_ci/arm-deployment.env"

# The on-board diagnostic needs at least one second less than the transport
MIN_TIMEOUT = 2

# Config field -> environment variable
ENV_KEYS = {
    "host": "ARM_HOST",
    "user": "ARM_USER",
    "binary": "ARM_BINARY",
    "test_mode": "ARM_TEST_MODE",
    "ssh_key": "SSH_KEY",
    "ssh_opts": "SSH_OPTS",
    "ssh_askpass": "SSH_ASKPASS",
    "timeout": "TIMEOUT",
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class ConfigResolver:
    """Builds a DeploymentConfig from all configuration sources."""

    def __init__(
        self,
        filesystem: FileSystemService,
        config_loader: ConfigLoader,
        logger: Logger
    ):
        self.fs = filesystem
        self.loader = config_loader
        self.log = logger

    def resolve(
        self,
        env_file: Optional[Union[str, Path]],
        process_env: Mapping[str, str],
        cli_args: Mapping[str, Any]
    ) -> DeploymentConfig:
        """
        Merge sources and validate.

        Args:
            env_file: Optional KEY=value file; silently ignored if absent
            process_env: Environment variables (usually os.environ)
            cli_args: Explicit arguments keyed by field name; None = not given

        Returns:
            Immutable DeploymentConfig

        Raises:
            MissingRequiredError: host, user or binary empty after merge
            ArtifactNotFoundError: binary is not an existing file
            InvalidValueError: unparseable TIMEOUT or ARM_TEST_MODE
        """
        merged: Dict[str, Any] = {}

        if env_file and self.fs.is_file(env_file):
            self.log.info(f"Loading configuration from {Path(env_file).name}...")
            self._merge_env(merged, self.loader.load_env_file(env_file))

        self._merge_env(merged, process_env)

        for name in ENV_KEYS:
            value = cli_args.get(name)
            # store_true flags arrive as False when absent
            if value is None or value is False or value == "":
                continue
            merged[name] = value

        missing = [name for name in ("host", "user", "binary") if not merged.get(name)]
        if missing:
            raise MissingRequiredError(missing)

        binary = Path(merged["binary"])
        if not self.fs.is_file(binary):
            raise ArtifactNotFoundError(binary)

        config = DeploymentConfig(
            host=str(merged["host"]),
            user=str(merged["user"]),
            binary=binary,
            test_mode=_parse_bool(merged.get("test_mode", False)),
            ssh_key=merged.get("ssh_key") or None,
            ssh_opts=merged.get("ssh_opts") or DEFAULT_SSH_OPTS,
            ssh_askpass=merged.get("ssh_askpass") or None,
            timeout=_parse_timeout(merged.get("timeout", DEFAULT_TIMEOUT)),
        )

        # scp preserves mode bits; the uploaded copy must be executable
        self.fs.make_executable(binary)
        logger.debug("Resolved configuration: %s", config)
        return config

    @staticmethod
    def _merge_env(merged: Dict[str, Any], source: Mapping[str, Any]) -> None:
        for name, key in ENV_KEYS.items():
            value = source.get(key)
            if value is not None and value != "":
                merged[name] = value


def _parse_timeout(value: Any) -> int:
    try:
        timeout = int(value)
    except (TypeError, ValueError):
        raise InvalidValueError(f"Invalid timeout '{value}': expected whole seconds")
    if timeout < MIN_TIMEOUT:
        raise InvalidValueError(
            f"Invalid timeout '{value}': must be at least {MIN_TIMEOUT} seconds"
        )
    return timeout


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise InvalidValueError(f"Invalid test mode '{value}': expected true or false")
