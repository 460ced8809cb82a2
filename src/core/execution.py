"""Process execution capability shared by probes and checks.

Checks never spawn processes directly. They go through a narrow
``CommandExecutor`` so decision logic can be driven by a fake in tests
and so a mode runner can terminate everything still alive on timeout.
"""

from __future__ import annotations

import os
import signal
import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence

from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command.

    Attributes:
        argv: Executed argument vector.
        exit_code: Process exit code, or None when the process never launched.
        output: Combined stdout and stderr text.
    """

    argv: tuple[str, ...]
    exit_code: int | None
    output: str

    @property
    def launched(self) -> bool:
        """Whether the process started at all."""
        return self.exit_code is not None


class CommandExecutor(Protocol):
    """Execution contract required by probes, checks, and fetchers."""

    def execute(
        self,
        argv: Sequence[str],
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> CommandResult: ...

    def terminate_all(self) -> None: ...


class SubprocessExecutor:
    """Run commands as child processes and track them for cancellation."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._live: set[subprocess.Popen[str]] = set()
        self._terminated = False

    def execute(
        self,
        argv: Sequence[str],
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        """Run one command to completion and capture its output.

        Launch failures and timeouts are reported through the result, never
        raised, so callers decide what an absent tool means.
        """
        command = tuple(argv)
        if not command:
            return CommandResult(argv=command, exit_code=None, output="empty command")
        with self._lock:
            if self._terminated:
                return CommandResult(argv=command, exit_code=None, output="executor terminated")
            try:
                process = subprocess.Popen(
                    command,
                    cwd=str(cwd) if cwd is not None else None,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.STDOUT,
                    stdin=subprocess.DEVNULL,
                    text=True,
                    start_new_session=True,
                )
            except OSError as error:
                _LOGGER.debug("command_launch_failed", argv=list(command), error=str(error))
                return CommandResult(argv=command, exit_code=None, output=str(error))
            self._live.add(process)
        try:
            output, _ = process.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            _kill_process_group(process)
            output, _ = process.communicate()
            _LOGGER.warning("command_timed_out", argv=list(command), timeout=timeout)
            return CommandResult(
                argv=command,
                exit_code=None,
                output=f"{output or ''}command timed out after {timeout}s",
            )
        finally:
            with self._lock:
                self._live.discard(process)
        return CommandResult(argv=command, exit_code=process.returncode, output=output or "")

    def terminate_all(self) -> None:
        """Kill every live process group and refuse new launches.

        Each command runs in its own session, so grandchildren such as the
        test binary started by ``go test`` die together with the command.
        """
        with self._lock:
            self._terminated = True
            live = list(self._live)
        for process in live:
            _kill_process_group(process)
        if live:
            _LOGGER.info("commands_terminated", count=len(live))


def _kill_process_group(process: subprocess.Popen[str]) -> None:
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        # Group already gone; reap the direct child if it is still around.
        if process.poll() is None:
            process.kill()
