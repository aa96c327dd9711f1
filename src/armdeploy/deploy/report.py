"""Deployment report (JSON) written after a run when --report is given."""
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Union

from armdeploy.core import FileSystemService
from .base import DeploymentConfig, DeploymentOutcome


def build_report(config: DeploymentConfig, outcome: DeploymentOutcome, staging_dir: str) -> Dict[str, Any]:
    """Combine the run's configuration and outcome into one document.

    The askpass helper and key paths are reported as flags only.
    """
    return {
        "deployment": {
            "target": config.target,
            "binary": str(config.binary),
            "staging_dir": staging_dir,
            "test_mode": config.test_mode,
            "timeout_seconds": config.timeout,
            "ssh_key": config.ssh_key is not None,
            "askpass": config.ssh_askpass is not None,
            "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        },
        "outcome": outcome.to_dict(),
    }


def write_report(
    fs: FileSystemService,
    path: Union[str, Path],
    config: DeploymentConfig,
    outcome: DeploymentOutcome,
    staging_dir: str
) -> Path:
    """Write the report as indented JSON, creating parent directories."""
    path = Path(path)
    if str(path.parent) not in ("", "."):
        fs.mkdir(path.parent)
    fs.write_file(path, json.dumps(build_report(config, outcome, staging_dir), indent=2) + "\n")
    return path
