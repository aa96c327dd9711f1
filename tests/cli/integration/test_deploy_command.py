"""Integration tests for the `armdeploy deploy` command.

Runs the real argument parser, resolver and orchestrator; only the
ProcessExecutor (ssh/scp) and the logger are replaced.
"""

import argparse
import json
import os
import stat
import subprocess

import pytest
from unittest.mock import Mock

from armdeploy import main
from armdeploy.commands import deploy
from armdeploy.core import (
    DotenvConfigLoader,
    EnvironmentProvider,
    Logger,
    ProcessExecutor,
    RealFileSystemService,
)


def parse(argv):
    parser = argparse.ArgumentParser()
    deploy.setup_parser(parser)
    return parser.parse_args(argv)


def create_mock_process(fail_on=None):
    """ssh/scp stand-in; fail_on is a substring of the argv that should fail."""
    process = Mock(spec=ProcessExecutor)

    def mock_run(cmd, input=None, timeout=None, env=None, merge_stderr=False):
        returncode = 1 if fail_on and fail_on in " ".join(cmd) else 0
        return subprocess.CompletedProcess(cmd, returncode, stdout="", stderr="")

    process.run.side_effect = mock_run
    return process


def commands(process):
    return [" ".join(c.args[0]) for c in process.run.call_args_list]


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """Empty working directory with a non-executable binary in it."""
    monkeypatch.chdir(tmp_path)
    binary = tmp_path / "minerd-arm64"
    binary.write_bytes(b"\x7fELF")
    binary.chmod(0o644)
    return tmp_path


@pytest.fixture
def clean_env(monkeypatch):
    for key in ("ARM_HOST", "ARM_USER", "ARM_BINARY", "ARM_TEST_MODE",
                "SSH_KEY", "SSH_OPTS", "SSH_ASKPASS", "TIMEOUT"):
        monkeypatch.delenv(key, raising=False)


class TestDeployCommand:

    def setup_method(self):
        self.fs = RealFileSystemService()
        self.env = Mock(spec=EnvironmentProvider)
        self.env.get_environ.return_value = {}
        self.logger = Mock(spec=Logger)

    def run(self, argv, process):
        return deploy.run_deployment(
            parse(argv),
            filesystem=self.fs,
            process_executor=process,
            env_provider=self.env,
            config_loader=DotenvConfigLoader(self.fs),
            logger=self.logger
        )

    def logged(self):
        return [c.args[0] for c in self.logger.info.call_args_list]

    def test_successful_deployment(self, workspace):
        process = create_mock_process()

        code = self.run(["--host", "10.0.0.5", "--user", "pi", "--binary", "./minerd-arm64"], process)

        assert code == 0
        assert os.stat(workspace / "minerd-arm64").st_mode & stat.S_IXUSR
        first = process.run.call_args_list[0].args[0]
        assert "pi@10.0.0.5" in first
        assert commands(process)[-1].endswith("rm -rf /tmp/mujina-miner-test")
        assert self.logged()[-1] == "✅ ARM64 deployment and testing completed successfully!"
        assert "   Host: pi@10.0.0.5" in self.logged()
        assert "   Test Mode: false" in self.logged()

    def test_missing_binary_makes_no_remote_calls(self, workspace):
        process = create_mock_process()

        code = self.run(["--host", "10.0.0.5", "--user", "pi", "--binary", "./missing-file"], process)

        assert code == 1
        process.run.assert_not_called()
        assert "does not exist" in self.logger.error.call_args[0][0]

    def test_missing_host(self, workspace):
        process = create_mock_process()

        code = self.run(["--user", "pi", "--binary", "./minerd-arm64"], process)

        assert code == 1
        process.run.assert_not_called()
        assert "--host" in self.logger.error.call_args[0][0]

    def test_upload_failure_still_cleans_up(self, workspace):
        process = create_mock_process(fail_on="scp")

        code = self.run(["--host", "10.0.0.5", "--user", "pi", "--binary", "./minerd-arm64"], process)

        assert code == 1
        issued = commands(process)
        assert issued[-1].endswith("rm -rf /tmp/mujina-miner-test")
        assert not any(c.endswith("bash -s") for c in issued)
        assert self.logged()[-1] == "❌ ARM64 deployment or testing failed"

    def test_env_file_and_environment(self, workspace):
        env_dir = workspace / "scripts" / "local_ci"
        env_dir.mkdir(parents=True)
        (env_dir / "arm-deployment.env").write_text(
            "ARM_HOST=192.168.1.50\nARM_USER=file-user\nSSH_KEY=/keys/lab\n"
        )
        self.env.get_environ.return_value = {"ARM_USER": "env-user"}
        process = create_mock_process()

        code = self.run(["--binary", "minerd-arm64"], process)

        assert code == 0
        first = process.run.call_args_list[0].args[0]
        assert "env-user@192.168.1.50" in first
        assert first[first.index("-i") + 1] == "/keys/lab"
        assert "🔑 Using SSH key directly (skipping ssh-agent)..." in self.logged()

    def test_test_data_uploaded_when_present(self, workspace):
        (workspace / "test-data").mkdir()
        process = create_mock_process()

        code = self.run(["--host", "h", "--user", "u", "--binary", "minerd-arm64"], process)

        assert code == 0
        assert any(c.startswith("scp") and " -r test-data " in c for c in commands(process))

    def test_timeout_flag(self, workspace):
        process = create_mock_process()

        self.run(["--host", "h", "--user", "u", "--binary", "minerd-arm64", "--timeout", "45"], process)

        assert {c.kwargs["timeout"] for c in process.run.call_args_list} == {45}

    def test_test_mode_is_informational(self, workspace):
        normal = create_mock_process()
        test_mode = create_mock_process()

        self.run(["--host", "h", "--user", "u", "--binary", "minerd-arm64"], normal)
        self.run(["--host", "h", "--user", "u", "--binary", "minerd-arm64", "--test-mode"], test_mode)

        assert commands(normal) == commands(test_mode)
        assert "   Test Mode: true" in self.logged()

    def test_report_written(self, workspace):
        process = create_mock_process(fail_on="bash -s")

        code = self.run(
            ["--host", "h", "--user", "u", "--binary", "minerd-arm64", "--report", "out/report.json"],
            process
        )

        assert code == 1
        report = json.loads((workspace / "out" / "report.json").read_text())
        assert report["outcome"]["failed_phase"] == "verify"
        assert report["outcome"]["cleanup"]["attempted"] is True


class TestMainEntryPoint:
    """Exit codes of the console script."""

    def test_commands_is_a_regular_package(self):
        import armdeploy.commands

        assert armdeploy.commands.__file__.endswith("__init__.py")

    def test_help_exits_zero(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["deploy", "--help"])

        assert exc_info.value.code == 0
        assert "--binary" in capsys.readouterr().out

    def test_unknown_flag_exits_one(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["deploy", "--bogus"])

        assert exc_info.value.code == 1
        assert "--bogus" in capsys.readouterr().err

    def test_bad_timeout_exits_one(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["deploy", "--timeout", "soon"])

        assert exc_info.value.code == 1

    def test_no_command_exits_one(self):
        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 1

    def test_missing_artifact_exits_one(self, workspace, clean_env, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["deploy", "--host", "10.0.0.5", "--user", "pi", "--binary", "./missing-file"])

        assert exc_info.value.code == 1
        assert "does not exist" in capsys.readouterr().err
