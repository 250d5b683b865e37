# =============================================================================
# core/cli.py  -  Obsidian CLI Wrapper (argument building + process running)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   The only place in the project that starts a process.  Every tool call
#   ends up here as a list of arguments for the official `obsidian` binary:
#
#     build_args("create", {"name": "Foo", "silent": True})
#       → ["create", "name=Foo", "silent"]
#
#     ObsidianCli().run(["create", "name=Foo", "silent"])
#       → runs:  obsidian create name=Foo silent [vault=<name>]
#
# NO SHELL, EVER:
#   Arguments go to subprocess as a list, so a note called "$(rm -rf ~)"
#   is just a note name.  There is no quoting to get wrong.
#
# OUTCOMES:
#   run() either returns trimmed stdout or raises ObsidianCliError with
#   kind TIMEOUT or NON_ZERO_EXIT.  There is no third state.
#
# The Obsidian CLI requires the Obsidian desktop app (v1.12+) to be running.
# =============================================================================

import logging
import os
import signal
import subprocess
import threading
from typing import IO, Callable, Optional, Protocol, Sequence, runtime_checkable

from core.config import DEFAULT_BINARY, DEFAULT_TIMEOUT_SECONDS
from core.errors import ErrorKind, ObsidianCliError
from core.models import CliResult, ParameterBag

logger = logging.getLogger(__name__)

MAX_OUTPUT_BYTES = 10 * 1024 * 1024  # 10 MiB per stream
_READ_CHUNK = 64 * 1024
_DRAIN_SECONDS = 1.0     # how long to wait for the pipes after the process is gone


def _format_value(value: object) -> str:
    """Render a parameter value for a key=value token."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_args(command: str, params: Optional[ParameterBag] = None) -> list[str]:
    """Build a CLI argument list from a command and a parameter mapping.

    Converts {"name": "foo", "content": "bar", "silent": True} into
    ["create", "name=foo", "content=bar", "silent"] (for command "create").

    Rules, applied in the mapping's insertion order:
      - None   → skipped
      - True   → bare flag ("silent")
      - False  → skipped (flags are only ever switched on)
      - other  → "key=value"
    """
    args = [command]

    if params:
        for key, value in params.items():
            if value is None:
                continue
            if isinstance(value, bool):
                if value:
                    args.append(key)
            else:
                args.append(f"{key}={_format_value(value)}")

    return args


# =============================================================================
# ProcessRunner - the capability boundary
# =============================================================================
# The dispatcher only ever talks to this protocol.  Tests hand it a fake
# that records argument lists and returns canned output, so no test needs
# Obsidian installed.
# =============================================================================
@runtime_checkable
class ProcessRunner(Protocol):
    def run(
        self,
        args: Sequence[str],
        *,
        timeout: Optional[float] = None,
        vault: Optional[str] = None,
    ) -> str: ...


class _StreamCollector(threading.Thread):
    """Drain one pipe, keeping at most `limit` bytes.

    Past the limit the rest is read and discarded so the child never blocks
    on a full pipe; `on_overflow` is called once so the caller can kill it.
    """

    def __init__(self, stream: IO[bytes], limit: int, on_overflow: Callable[[], None]) -> None:
        super().__init__(daemon=True)
        self._stream = stream
        self._limit = limit
        self._on_overflow = on_overflow
        self._chunks: list[bytes] = []
        self._size = 0
        self.overflowed = False

    def run(self) -> None:
        try:
            while True:
                chunk = self._stream.read1(_READ_CHUNK)
                if not chunk:
                    break
                if self.overflowed:
                    continue
                room = self._limit - self._size
                if len(chunk) > room:
                    self._chunks.append(chunk[:room])
                    self._size = self._limit
                    self.overflowed = True
                    self._on_overflow()
                else:
                    self._chunks.append(chunk)
                    self._size += len(chunk)
        finally:
            self._stream.close()

    def text(self) -> str:
        return b"".join(self._chunks).decode("utf-8", errors="replace")


class ObsidianCli:
    """Runs the obsidian binary and classifies the outcome.

    Args:
        binary: Executable name, resolved on PATH (default "obsidian").
        default_vault: Vault used when a call doesn't name one.  Usually
            Settings.vault (OBSIDIAN_VAULT).
        timeout: Default wall-clock limit in seconds.
        max_output: Per-stream capture limit in bytes.
    """

    def __init__(
        self,
        binary: str = DEFAULT_BINARY,
        default_vault: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        max_output: int = MAX_OUTPUT_BYTES,
    ) -> None:
        self.binary = binary
        self.default_vault = default_vault
        self.timeout = timeout
        self.max_output = max_output

    def run(
        self,
        args: Sequence[str],
        *,
        timeout: Optional[float] = None,
        vault: Optional[str] = None,
    ) -> str:
        """Run an Obsidian CLI command and return its trimmed stdout.

        The vault is the explicit `vault` argument if given, otherwise
        `default_vault`.  When set, `vault=<name>` is appended AFTER the
        command's own arguments; the CLI expects vault targeting last.

        Raises:
            ObsidianCliError: kind TIMEOUT if the process outlived the
                timeout (it is killed first), kind NON_ZERO_EXIT otherwise.
                The message is stderr, else stdout, else "Command failed".
        """
        target = vault if vault is not None else self.default_vault
        full_args = [*args, f"vault={target}"] if target else list(args)
        limit = self.timeout if timeout is None else timeout

        result = self._execute(full_args, limit)

        if result.exit_code != 0:
            message = result.stderr.strip() or result.stdout.strip() or "Command failed"
            logger.debug("obsidian %s exited %d: %s", full_args[0], result.exit_code, message)
            raise ObsidianCliError(
                message,
                result.exit_code,
                result.stderr,
                ErrorKind.NON_ZERO_EXIT,
                command=[self.binary, *full_args],
            )

        return result.stdout.strip()

    def _execute(self, args: list[str], timeout: float) -> CliResult:
        """Start the binary, collect capped output, enforce the timeout.

        The binary runs as the leader of its own process group, so a
        timeout or an output overflow kills everything it started, not
        just the launcher.  Non-zero exits come back inside the CliResult
        for run() to classify; only a timeout raises here.
        """
        command = [self.binary, *args]
        logger.debug("Running: %s", " ".join(command))

        try:
            proc = subprocess.Popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                start_new_session=True,
            )
        except FileNotFoundError:
            return CliResult(
                stdout="",
                stderr=f"{self.binary}: command not found on PATH",
                exit_code=127,
            )

        overflow = threading.Event()

        def _kill_on_overflow() -> None:
            if not overflow.is_set():
                overflow.set()
                logger.warning("obsidian output exceeded %d bytes; killing process", self.max_output)
                _kill_group(proc)

        stdout = _StreamCollector(proc.stdout, self.max_output, _kill_on_overflow)
        stderr = _StreamCollector(proc.stderr, self.max_output, _kill_on_overflow)
        stdout.start()
        stderr.start()

        try:
            proc.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            _kill_group(proc)
            proc.wait()
            _drain(stdout, stderr)
            raise ObsidianCliError(
                f"Command timed out after {timeout:g}s: {' '.join(command)}",
                1,
                stderr.text(),
                ErrorKind.TIMEOUT,
                command=command,
            )

        # A launcher may exit while something it started still holds the
        # pipes open; take what has arrived rather than wait for that.
        _drain(stdout, stderr)

        exit_code = 1 if overflow.is_set() else proc.returncode
        return CliResult(stdout=stdout.text(), stderr=stderr.text(), exit_code=exit_code)


def _kill_group(proc: subprocess.Popen) -> None:
    """SIGKILL the process and every process in its group."""
    if not hasattr(os, "killpg"):
        proc.kill()
        return
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass  # already gone


def _drain(*collectors: _StreamCollector) -> None:
    for collector in collectors:
        collector.join(timeout=_DRAIN_SECONDS)
        if collector.is_alive():
            logger.debug("obsidian output pipe still open after %.1fs; not waiting", _DRAIN_SECONDS)
