"""Unit tests for the subprocess executor."""

from __future__ import annotations

import sys
import threading
import time
from pathlib import Path

from core.execution import SubprocessExecutor
from core.types import CheckPrerequisite


def test_execute_captures_exit_code_and_output(tmp_path: Path) -> None:
    """Exit code and combined output should be reported."""
    executor = SubprocessExecutor()

    result = executor.execute(
        [sys.executable, "-c", "import sys; print('hello'); sys.exit(3)"],
        cwd=tmp_path,
    )

    assert result.exit_code == 3 and "hello" in result.output


def test_execute_reports_launch_failure_without_raising(tmp_path: Path) -> None:
    """Unknown programs should produce a result with no exit code."""
    executor = SubprocessExecutor()

    result = executor.execute(["prevet-definitely-missing-binary"], cwd=tmp_path)

    assert not result.launched


def test_is_present_runs_real_probe() -> None:
    """Real probes compare the process exit code."""
    prerequisite = CheckPrerequisite(
        help_command=(sys.executable, "-c", "import sys; sys.exit(2)"),
        expected_exit_code=2,
        url="unused",
    )

    assert prerequisite.is_present(SubprocessExecutor())


def test_terminate_all_kills_running_process() -> None:
    """Cancellation should stop live children and block new launches."""
    executor = SubprocessExecutor()
    results = []
    worker = threading.Thread(
        target=lambda: results.append(
            executor.execute([sys.executable, "-c", "import time; time.sleep(30)"])
        )
    )
    worker.start()
    time.sleep(0.5)
    executor.terminate_all()
    worker.join(timeout=10)

    assert results and results[0].exit_code != 0
    assert not executor.execute([sys.executable, "-c", "pass"]).launched


def test_terminate_all_kills_grandchildren_holding_the_pipe() -> None:
    """A grandchild sharing stdout must not keep the check thread waiting."""
    executor = SubprocessExecutor()
    results = []
    spawn_sleeper = (
        "import subprocess, sys; "
        "subprocess.run([sys.executable, '-c', 'import time; time.sleep(30)'])"
    )
    worker = threading.Thread(
        target=lambda: results.append(executor.execute([sys.executable, "-c", spawn_sleeper]))
    )
    started_at = time.monotonic()
    worker.start()
    time.sleep(1.0)
    executor.terminate_all()
    worker.join(timeout=10)

    assert not worker.is_alive()
    assert time.monotonic() - started_at < 10
    assert results and results[0].exit_code != 0


def test_execute_timeout_kills_grandchildren(tmp_path: Path) -> None:
    """A timed-out command returns promptly even when it forked a child."""
    executor = SubprocessExecutor()
    spawn_sleeper = (
        "import subprocess, sys; "
        "subprocess.run([sys.executable, '-c', 'import time; time.sleep(30)'])"
    )
    started_at = time.monotonic()

    result = executor.execute([sys.executable, "-c", spawn_sleeper], cwd=tmp_path, timeout=1.0)

    assert not result.launched and "timed out" in result.output
    assert time.monotonic() - started_at < 10
