"""
Pytest configuration and shared fixtures for smallsh tests.

This module provides reusable test fixtures for:
- Shell state and an installed job controller
- Running the shell end to end in a subprocess
"""

import os
import subprocess
import sys
from pathlib import Path

import pytest

from smallsh.job_control import JobControl
from smallsh.state import ShellState

ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def shell_state():
    """
    Provides a fresh ShellState.

    Returns:
        ShellState: last status "exit value 0", foreground-only mode off
    """
    return ShellState()


@pytest.fixture
def job_control(shell_state):
    """
    Provides a JobControl with its signal bridge installed.

    Any background child a test leaves behind is waited for on teardown,
    then the original signal dispositions are restored.
    """
    jobs = JobControl(shell_state)
    jobs.install()
    try:
        yield jobs
    finally:
        for pid in list(jobs.background):
            try:
                os.waitpid(pid, 0)
            except ChildProcessError:
                pass
        jobs.background.clear()
        jobs.uninstall()


@pytest.fixture
def smallsh_env():
    """Environment that lets `python -m smallsh` import the package from the checkout."""
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(
        p for p in (str(ROOT), env.get("PYTHONPATH")) if p
    )
    return env


@pytest.fixture
def run_smallsh(tmp_path, smallsh_env):
    """
    Feed lines to a smallsh subprocess and collect its output.

    Returns:
        callable: run(lines) -> (CompletedProcess, pid)

    Example:
        def test_status(run_smallsh):
            result, pid = run_smallsh(["status", "exit"])
            assert "exit value 0" in result.stdout
    """
    def run(lines, timeout=30):
        proc = subprocess.Popen(
            [sys.executable, "-m", "smallsh"],
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            cwd=tmp_path,
            env=smallsh_env,
            text=True,
        )
        stdout, stderr = proc.communicate("\n".join(lines) + "\n", timeout=timeout)
        return subprocess.CompletedProcess(proc.args, proc.returncode, stdout, stderr), proc.pid

    return run
