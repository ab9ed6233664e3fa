# src/covserve/infrastructure/process_runner.py
import sys
import shlex
import logging
import subprocess
from typing import TextIO
from dataclasses import dataclass

from ..domain.models import RunReport, RunStatus, StepResult


@dataclass(frozen=True)
class ProcessRunner:
    output: TextIO
    logger: logging.Logger
    separator: str = "&&"

    def split(self, command_line: str) -> list[str]:
        return [part.strip() for part in command_line.split(self.separator)]

    def run(self, command_line: str) -> RunReport:
        """
        Run every step of `command_line` in order, stopping at the first one
        that fails. Child processes write straight to our stdout/stderr.
        """
        self._say("Running coverage tests...")
        commands = self.split(command_line)
        steps: list[StepResult] = []

        for step in commands:
            self._say(f"Executing: {step}")
            result = self._run_step(step)
            steps.append(result)

            if not result.ok:
                if result.error is not None:
                    self._say(f"Command failed: {result.error}")
                else:
                    self._say(f"Command failed with exit code: {result.exit_code}")
                self.logger.warning(
                    "Step %d/%d failed: %r (exit_code=%s, error=%s)",
                    len(steps), len(commands), step,
                    result.exit_code, result.error,
                )
                return RunReport(steps=tuple(steps), status=RunStatus.FAILED)

        self._say("Coverage tests completed successfully!")
        self.logger.info("Command sequence succeeded: %r", command_line)
        return RunReport(steps=tuple(steps), status=RunStatus.SUCCEEDED)

    def _run_step(self, step: str) -> StepResult:
        try:
            argv = shlex.split(step, posix=not sys.platform.startswith("win"))
        except ValueError as e:
            # Stray quotes, e.g. "tests/it's_ok": fall back to plain whitespace splitting.
            self.logger.info("Quoting in %r is unbalanced (%s), splitting on whitespace", step, e)
            argv = step.split()

        if not argv:
            return StepResult(command=step, error="empty command")

        # Our buffered output must land before the child starts writing.
        self.output.flush()
        try:
            subprocess.run(argv, check=True)
        except subprocess.CalledProcessError as e:
            return StepResult(command=step, exit_code=e.returncode)
        except OSError as e:
            # Missing program, permission denied and friends.
            return StepResult(command=step, error=f"could not start {argv[0]!r}: {e.strerror or e}")

        return StepResult(command=step, exit_code=0)

    def _say(self, line: str) -> None:
        print(line, file=self.output, flush=True)
