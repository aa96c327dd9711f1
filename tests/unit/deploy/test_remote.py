"""Unit tests for RemoteCommandBuilder and RemoteSession argv construction."""

from pathlib import Path

import pytest

from armdeploy.deploy.base import DeploymentConfig
from armdeploy.deploy.remote import RemoteCommandBuilder


def make_config(**overrides):
    values = dict(host="10.0.0.5", user="pi", binary=Path("minerd-arm64"))
    values.update(overrides)
    return DeploymentConfig(**values)


class TestRemoteCommandBuilder:
    """Option assembly."""

    def test_default_options(self):
        session = RemoteCommandBuilder().build(make_config())

        assert session.ssh_command("uname -a") == [
            "ssh",
            "-o", "StrictHostKeyChecking=no",
            "-o", "UserKnownHostsFile=/dev/null",
            "pi@10.0.0.5",
            "uname -a",
        ]
        assert session.env == {}
        assert session.timeout == 300

    def test_ssh_key_used_directly(self):
        session = RemoteCommandBuilder().build(make_config(ssh_key="/home/ci/.ssh/id_lab"))

        cmd = session.ssh_command("true")
        assert cmd[-4:] == ["-i", "/home/ci/.ssh/id_lab", "pi@10.0.0.5", "true"]
        assert session.scp_base[-2:] == ("-i", "/home/ci/.ssh/id_lab")

    def test_askpass_disables_password_auth(self):
        session = RemoteCommandBuilder().build(make_config(ssh_askpass="/usr/bin/ssh-askpass"))

        assert session.ssh_base[-2:] == ("-o", "PasswordAuthentication=no")
        assert session.scp_base[-2:] == ("-o", "PasswordAuthentication=no")
        assert session.env == {"SSH_ASKPASS": "/usr/bin/ssh-askpass", "DISPLAY": "dummy:0"}

    def test_key_and_askpass_order(self):
        session = RemoteCommandBuilder().build(
            make_config(ssh_opts="-p 2222", ssh_key="/k", ssh_askpass="/a")
        )

        assert list(session.ssh_base) == [
            "ssh", "-p", "2222", "-i", "/k", "-o", "PasswordAuthentication=no"
        ]

    def test_ssh_opts_split_shell_style(self):
        session = RemoteCommandBuilder().build(
            make_config(ssh_opts='-o "ProxyCommand=ssh -W %h:%p jump"  -o BatchMode=yes')
        )

        assert list(session.ssh_base) == [
            "ssh", "-o", "ProxyCommand=ssh -W %h:%p jump", "-o", "BatchMode=yes"
        ]

    def test_scp_command(self):
        session = RemoteCommandBuilder().build(make_config(ssh_opts=""))

        assert session.scp_command("a.bin", session.remote_path("/tmp/x/a")) == [
            "scp", "a.bin", "pi@10.0.0.5:/tmp/x/a"
        ]
        assert session.scp_command("test-data", session.remote_path("/tmp/x/"), recursive=True) == [
            "scp", "-r", "test-data", "pi@10.0.0.5:/tmp/x/"
        ]

    def test_scp_can_fetch(self):
        session = RemoteCommandBuilder().build(make_config(ssh_opts=""))

        assert session.scp_command(session.remote_path("/tmp/x/log"), "log") == [
            "scp", "pi@10.0.0.5:/tmp/x/log", "log"
        ]

    def test_timeout_carried_over(self):
        session = RemoteCommandBuilder().build(make_config(timeout=42))

        assert session.timeout == 42

    def test_custom_executables(self):
        session = RemoteCommandBuilder("/opt/ssh", "/opt/scp").build(make_config(ssh_opts=""))

        assert session.ssh_command("true")[0] == "/opt/ssh"
        assert session.scp_command("a", "b")[0] == "/opt/scp"


class TestRemoteCommandBuilderDeterminism:
    """Same config in, same session out."""

    @pytest.mark.parametrize("overrides", [
        {},
        {"ssh_key": "/k"},
        {"ssh_askpass": "/a", "timeout": 5},
    ])
    def test_build_is_idempotent(self, overrides):
        builder = RemoteCommandBuilder()

        first = builder.build(make_config(**overrides))
        second = builder.build(make_config(**overrides))
        third = RemoteCommandBuilder().build(make_config(**overrides))

        assert first == second == third
        assert first.ssh_command("ls") == third.ssh_command("ls")

    def test_build_does_not_share_option_lists(self):
        builder = RemoteCommandBuilder()
        config = make_config(ssh_key="/k")

        builder.build(config).ssh_command("x").append("junk")

        assert "junk" not in builder.build(config).ssh_command("x")

    def test_describe_quotes_arguments(self):
        session = RemoteCommandBuilder().build(make_config(ssh_opts=""))

        assert session.describe(session.ssh_command("rm -f /tmp/a")) == "ssh pi@10.0.0.5 'rm -f /tmp/a'"
