"""Remote verification script rendering.

The script body ships inside the package (scripts/verify.sh) and is
parameterised only through render_verification_script().
"""
import shlex
from importlib import resources
from string import Template

DEFAULT_DIAGNOSTIC_TIMEOUT = 30
TEMPLATE_NAME = "verify.sh"


def load_template() -> Template:
    """Read the packaged script template."""
    source = resources.files("armdeploy.deploy").joinpath("scripts").joinpath(TEMPLATE_NAME)
    return Template(source.read_text(encoding="utf-8"))


def render_verification_script(
    staging_dir: str,
    binary_name: str,
    diagnostic_timeout: int = DEFAULT_DIAGNOSTIC_TIMEOUT
) -> str:
    """Render the verification script for one staged binary.

    Args:
        staging_dir: Remote directory holding the uploaded binary
        binary_name: File name of the binary inside staging_dir
        diagnostic_timeout: Seconds allowed for `<binary> --help`

    Returns:
        Script text suitable for `bash -s` on the remote host

    Raises:
        ValueError: binary_name contains a path separator or
            diagnostic_timeout is not positive
    """
    if not binary_name or "/" in binary_name:
        raise ValueError(f"Invalid binary name: {binary_name!r}")
    if diagnostic_timeout <= 0:
        raise ValueError(f"Diagnostic timeout must be positive, got {diagnostic_timeout}")

    return load_template().substitute(
        staging_dir=shlex.quote(staging_dir),
        binary=shlex.quote(binary_name),
        diagnostic_timeout=int(diagnostic_timeout),
    )
