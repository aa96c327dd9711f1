"""
RemoteCommandBuilder - Turn a DeploymentConfig into ssh/scp argument templates.

Pure construction: no I/O, same config in, same RemoteSession out.
"""

import shlex

from .base import DeploymentConfig, RemoteSession

# Askpass only kicks in when DISPLAY is set, even though no X server exists.
ASKPASS_DISPLAY = "dummy:0"


class RemoteCommandBuilder:
    """Builds RemoteSession objects for the OpenSSH client tools."""

    def __init__(self, ssh_executable: str = "ssh", scp_executable: str = "scp"):
        self.ssh_executable = ssh_executable
        self.scp_executable = scp_executable

    def build(self, config: DeploymentConfig) -> RemoteSession:
        """
        Assemble option lists shared by every ssh and scp invocation.

        Options, in order:
            config.ssh_opts split shell-style
            -i <key>                       if ssh_key set (used directly, no agent)
            -o PasswordAuthentication=no   if ssh_askpass set

        Returns:
            RemoteSession with argv prefixes, target and per-call env
        """
        options = shlex.split(config.ssh_opts)

        if config.ssh_key:
            options += ["-i", config.ssh_key]

        env = {}
        if config.ssh_askpass:
            options += ["-o", "PasswordAuthentication=no"]
            env = {
                "SSH_ASKPASS": config.ssh_askpass,
                "DISPLAY": ASKPASS_DISPLAY,
            }

        return RemoteSession(
            target=config.target,
            ssh_base=(self.ssh_executable, *options),
            scp_base=(self.scp_executable, *options),
            env=env,
            timeout=config.timeout,
        )
