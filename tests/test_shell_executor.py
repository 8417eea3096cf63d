import subprocess

import pytest

from xlibre_builder.common import shell_executor as shell_module
from xlibre_builder.common.shell_executor import ShellExecutor


class ScriptedExecutor(ShellExecutor):
    """Returns queued results instead of running anything"""

    def __init__(self, results):
        super().__init__()
        self.results = list(results)
        self.calls = 0

    def run_command(self, cmd, **kwargs):
        self.calls += 1
        returncode, stderr = self.results.pop(0)
        return subprocess.CompletedProcess(cmd, returncode, stdout="", stderr=stderr)


@pytest.fixture
def sleeps(monkeypatch):
    delays = []
    monkeypatch.setattr(shell_module.time, "sleep", delays.append)
    return delays


def test_transient_error_is_retried_with_backoff(sleeps):
    executor = ScriptedExecutor([
        (128, "fatal: the remote end hung up unexpectedly"),
        (128, "Could not resolve host: github.com"),
        (0, ""),
    ])

    result = executor.run_command_with_retry(["git", "clone", "x"], initial_delay=1.0)

    assert result.returncode == 0
    assert executor.calls == 3
    assert sleeps == [1.0, 2.0]


def test_permanent_error_is_not_retried(sleeps):
    executor = ScriptedExecutor([(128, "fatal: repository not found")])

    result = executor.run_command_with_retry(["git", "clone", "x"])

    assert result.returncode == 128
    assert executor.calls == 1
    assert sleeps == []


def test_gives_up_after_max_retries(sleeps):
    executor = ScriptedExecutor([(128, "500 Internal Server Error")] * 3)

    with pytest.raises(subprocess.CalledProcessError):
        executor.run_command_with_retry(["git", "pull"], max_retries=3, check=True)
    assert executor.calls == 3


def test_run_command_list_and_string(tmp_path):
    executor = ShellExecutor()

    result = executor.run_command(["echo", "hello world"], cwd=tmp_path)
    assert result.returncode == 0
    assert result.stdout == "hello world\n"

    result = executor.run_command("echo $LC_ALL", cwd=tmp_path)
    assert result.stdout == "C\n"


def test_run_command_check_raises(tmp_path):
    with pytest.raises(subprocess.CalledProcessError):
        ShellExecutor().run_command("exit 3", cwd=tmp_path, check=True)


def test_run_command_timeout_propagates(tmp_path):
    with pytest.raises(subprocess.TimeoutExpired):
        ShellExecutor().run_command(["sleep", "5"], cwd=tmp_path, timeout=0.2)
