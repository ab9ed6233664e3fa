# tests/conftest.py

"""
Pytest Fixtures - Shared building blocks for covserve tests

Everything binds to 127.0.0.1 with port 0 unless a test needs a specific,
occupied port. Grace periods are kept short so shutdown tests stay fast.
"""

import io
import socket
import logging
from pathlib import Path

import pytest

from covserve.domain.lifecycle import LifecycleFlag
from covserve.domain.models import RunReport, RunStatus, StepResult
from covserve.domain.settings import SessionSettings


# =============================================================================
# FAKES
# =============================================================================

class RecordingRunner:
    """Stands in for ProcessRunner; remembers every command it was given."""

    def __init__(self, fail: bool = False, raise_on: set[int] | None = None):
        self.commands: list[str] = []
        self.fail = fail
        self.raise_on = raise_on or set()

    def run(self, command_line: str) -> RunReport:
        self.commands.append(command_line)
        if len(self.commands) in self.raise_on:
            raise RuntimeError("boom")
        if self.fail:
            return RunReport(
                steps=(StepResult(command=command_line, exit_code=1),),
                status=RunStatus.FAILED,
            )
        return RunReport(steps=(StepResult(command=command_line, exit_code=0),))


# =============================================================================
# BASIC FIXTURES
# =============================================================================

@pytest.fixture
def logger():
    """Logger that stays off the terminal."""
    log = logging.getLogger("covserve.tests")
    log.propagate = False
    if not log.handlers:
        log.addHandler(logging.NullHandler())
    return log


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def flag():
    return LifecycleFlag()


@pytest.fixture
def runner():
    return RecordingRunner()


@pytest.fixture
def html_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "htmlcov"
    directory.mkdir()
    (directory / "index.html").write_text("<html><body>coverage here</body></html>")
    return directory


@pytest.fixture
def settings(tmp_path: Path, html_dir: Path) -> SessionSettings:
    return SessionSettings(
        port=0,
        html_dir=html_dir,
        log_dir=tmp_path / "logs",
        command_template="run {target}",
        grace_period_s=1.0,
        poll_interval_s=0.05,
    )


@pytest.fixture
def occupied_port():
    """A loopback port that something else is already listening on."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(1)
    try:
        yield sock.getsockname()[1]
    finally:
        sock.close()
