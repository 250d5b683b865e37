"""Tests for argument building and the ObsidianCli process runner."""

import sys
import time
from unittest.mock import patch

import pytest

from core.cli import ObsidianCli, ProcessRunner, build_args
from core.errors import ErrorKind, ObsidianCliError
from core.models import CliResult


def python_cli(**kwargs) -> ObsidianCli:
    """An ObsidianCli whose 'binary' is the running interpreter."""
    return ObsidianCli(binary=sys.executable, **kwargs)


# ---------------------------------------------------------------------------
# build_args
# ---------------------------------------------------------------------------

class TestBuildArgs:
    def test_command_only(self):
        assert build_args("daily:read") == ["daily:read"]
        assert build_args("daily:read", {}) == ["daily:read"]

    def test_key_value_tokens(self):
        args = build_args("create", {"name": "foo", "content": "bar"})
        assert args == ["create", "name=foo", "content=bar"]

    def test_true_is_bare_flag(self):
        assert build_args("create", {"silent": True}) == ["create", "silent"]

    def test_false_and_none_are_omitted(self):
        assert build_args("create", {"overwrite": False}) == ["create"]
        assert build_args("create", {"overwrite": None}) == ["create"]

    def test_preserves_insertion_order(self):
        args = build_args("x", {"c": "3", "a": True, "b": 2, "skip": None, "d": "4"})
        assert args == ["x", "c=3", "a", "b=2", "d=4"]

    def test_numbers_in_decimal_form(self):
        assert build_args("search", {"limit": 20}) == ["search", "limit=20"]
        assert build_args("search", {"limit": 20.0}) == ["search", "limit=20"]
        assert build_args("search", {"limit": 2.5}) == ["search", "limit=2.5"]

    def test_values_are_not_quoted(self):
        args = build_args("create", {"name": "Session 1", "content": "a=b; $(rm -rf ~)"})
        assert args == ["create", "name=Session 1", "content=a=b; $(rm -rf ~)"]


# ---------------------------------------------------------------------------
# ObsidianCli.run with a mocked execute step
# ---------------------------------------------------------------------------

class TestRunClassification:
    def _run(self, result: CliResult, args=("vault",), cli=None, **run_kwargs):
        cli = cli or ObsidianCli()
        with patch.object(ObsidianCli, "_execute", return_value=result) as execute:
            return cli.run(list(args), **run_kwargs), execute

    def test_returns_trimmed_stdout(self):
        out, _ = self._run(CliResult("  vault info  \n", "", 0))
        assert out == "vault info"

    def test_passes_args_through(self):
        _, execute = self._run(CliResult("ok", "", 0), args=("read", "file=MyNote"))
        execute.assert_called_once_with(["read", "file=MyNote"], 15.0)

    def test_appends_explicit_vault_last(self):
        _, execute = self._run(CliResult("ok", "", 0), vault="My Vault")
        assert execute.call_args[0][0] == ["vault", "vault=My Vault"]

    def test_uses_default_vault(self):
        _, execute = self._run(
            CliResult("ok", "", 0), cli=ObsidianCli(default_vault="Test Vault")
        )
        assert execute.call_args[0][0] == ["vault", "vault=Test Vault"]

    def test_explicit_vault_wins_over_default(self):
        _, execute = self._run(
            CliResult("ok", "", 0), cli=ObsidianCli(default_vault="Env Vault"), vault="Option Vault"
        )
        assert execute.call_args[0][0] == ["vault", "vault=Option Vault"]

    def test_no_vault_token_without_vault(self):
        _, execute = self._run(CliResult("ok", "", 0))
        assert execute.call_args[0][0] == ["vault"]

    def test_custom_and_default_timeout(self):
        _, execute = self._run(CliResult("ok", "", 0), timeout=5)
        assert execute.call_args[0][1] == 5
        _, execute = self._run(CliResult("ok", "", 0), cli=ObsidianCli(timeout=30.0))
        assert execute.call_args[0][1] == 30.0

    def test_non_zero_exit_uses_stderr(self):
        with pytest.raises(ObsidianCliError) as exc_info:
            self._run(CliResult("ignored stdout", "vault not found\n", 1))
        err = exc_info.value
        assert err.message == "vault not found"
        assert err.exit_code == 1
        assert err.stderr == "vault not found\n"
        assert err.kind is ErrorKind.NON_ZERO_EXIT

    def test_non_zero_exit_falls_back_to_stdout(self):
        with pytest.raises(ObsidianCliError) as exc_info:
            self._run(CliResult("error in stdout\n", "   ", 2))
        assert exc_info.value.message == "error in stdout"
        assert exc_info.value.exit_code == 2

    def test_non_zero_exit_generic_message(self):
        with pytest.raises(ObsidianCliError, match="^Command failed$"):
            self._run(CliResult("", "", 1))

    def test_is_a_process_runner(self):
        assert isinstance(ObsidianCli(), ProcessRunner)


# ---------------------------------------------------------------------------
# ObsidianCli against a real process (the Python interpreter)
# ---------------------------------------------------------------------------

class TestRealProcess:
    def test_success(self):
        assert python_cli().run(["-c", "print('  hello  ')"]) == "hello"

    def test_vault_is_last_argument(self):
        out = python_cli(default_vault="My Vault").run(
            ["-c", "import sys; print(sys.argv[1:])", "name=x"]
        )
        assert out == "['name=x', 'vault=My Vault']"

    def test_arguments_are_not_shell_expanded(self):
        out = python_cli().run(["-c", "import sys; print(sys.argv[1])", "$HOME; echo hi"])
        assert out == "$HOME; echo hi"

    def test_exit_code_and_stderr(self):
        script = "import sys; sys.stdout.write('out'); sys.stderr.write('boom\\n'); sys.exit(3)"
        with pytest.raises(ObsidianCliError) as exc_info:
            python_cli().run(["-c", script])
        err = exc_info.value
        assert err.kind is ErrorKind.NON_ZERO_EXIT
        assert err.exit_code == 3
        assert err.message == "boom"
        assert err.stderr == "boom\n"

    def test_timeout_kills_and_classifies(self):
        script = "import sys, time; print('partial', flush=True); time.sleep(30)"
        with pytest.raises(ObsidianCliError) as exc_info:
            python_cli().run(["-c", script], timeout=0.5)
        err = exc_info.value
        assert err.kind is ErrorKind.TIMEOUT
        assert "timed out after 0.5s" in err.message
        assert "time.sleep(30)" in err.message

    def test_timeout_message_names_command(self):
        cli = ObsidianCli(binary=sys.executable, timeout=0.3)
        with pytest.raises(ObsidianCliError) as exc_info:
            cli.run(["-c", "import time; time.sleep(30)"])
        assert exc_info.value.message.startswith("Command timed out after 0.3s: ")
        assert exc_info.value.command[0] == sys.executable

    def test_output_cap_kills_process(self):
        cli = python_cli(max_output=1024)
        script = "import sys\nfor _ in range(1000):\n    sys.stdout.write('x' * 1024)"
        with pytest.raises(ObsidianCliError) as exc_info:
            cli.run(["-c", script])
        err = exc_info.value
        assert err.kind is ErrorKind.NON_ZERO_EXIT
        assert err.exit_code == 1
        assert err.message == "x" * 1024

    def test_missing_binary(self):
        cli = ObsidianCli(binary="obsidian-binary-that-does-not-exist")
        with pytest.raises(ObsidianCliError) as exc_info:
            cli.run(["vault"])
        assert exc_info.value.exit_code == 127
        assert "not found" in exc_info.value.message


# ---------------------------------------------------------------------------
# Launchers that start their own children
# ---------------------------------------------------------------------------

# Starts a child that inherits stdout/stderr and sleeps for 20s.
SPAWN_SLEEPER = (
    "import subprocess, sys; "
    "subprocess.Popen([sys.executable, '-c', 'import time; time.sleep(20)']); "
)


@pytest.mark.skipif(sys.platform == "win32", reason="process groups are POSIX-only")
class TestProcessGroup:
    def test_timeout_kills_grandchildren(self):
        script = SPAWN_SLEEPER + "import time; time.sleep(30)"
        started = time.monotonic()
        with pytest.raises(ObsidianCliError) as exc_info:
            python_cli().run(["-c", script], timeout=0.5)
        elapsed = time.monotonic() - started

        assert exc_info.value.kind is ErrorKind.TIMEOUT
        assert elapsed < 5, f"timeout 0.5s but run() returned after {elapsed:.1f}s"

    def test_overflow_kills_grandchildren(self):
        script = SPAWN_SLEEPER + "import sys\nwhile True:\n    sys.stdout.write('x' * 1024)"
        started = time.monotonic()
        with pytest.raises(ObsidianCliError) as exc_info:
            python_cli(max_output=1024).run(["-c", script], timeout=10)
        elapsed = time.monotonic() - started

        assert exc_info.value.exit_code == 1
        assert elapsed < 5

    def test_launcher_exit_does_not_wait_for_child(self):
        script = SPAWN_SLEEPER + "print('launched', flush=True)"
        started = time.monotonic()
        out = python_cli().run(["-c", script], timeout=10)
        elapsed = time.monotonic() - started

        assert out == "launched"
        assert elapsed < 5
