# src/covserve/control/session_controller.py
import logging
from typing import Protocol, TextIO
from dataclasses import dataclass, field
from returns.result import safe

from ..domain.lifecycle import LifecycleFlag
from ..domain.models import RunReport
from ..domain.session import SessionState
from ..domain.settings import SessionSettings
from .service_supervisor import ServiceHandle

PROMPT = "> "


class CommandRunner(Protocol):
    def run(self, command_line: str) -> RunReport:
        ...


@dataclass
class SessionController:
    flag: LifecycleFlag
    runner: CommandRunner
    settings: SessionSettings
    input: TextIO
    output: TextIO
    logger: logging.Logger
    state: SessionState = field(init=False)

    def __post_init__(self) -> None:
        self.state = SessionState(target=self.settings.default_target)

    def run(self, service: ServiceHandle | None = None) -> SessionState:
        """
        Drive the prompt loop until the operator leaves, input ends or the
        lifecycle flag is cleared, then take the service down with us.
        """
        self._say("Press Enter to run coverage tests with the current test path, or enter a new path")
        self._say(f"Current test path: {self.state.target}")

        while self._iterate():
            pass

        self._stop(service)
        return self.state

    def _iterate(self) -> bool:
        if not self.flag.is_active():
            self.logger.info("Lifecycle flag cleared, leaving the prompt loop")
            return False

        self.output.write(PROMPT)
        self.output.flush()

        try:
            line = self.input.readline()
        except (OSError, ValueError) as e:
            self.logger.warning("Input stream failed: %s", e)
            return False

        if not line:
            self.logger.info("Input stream closed")
            return False

        trimmed = line.strip()
        if trimmed.lower() == self.settings.exit_keyword.lower():
            self.logger.info("Exit requested by operator")
            return False

        # Ctrl+C may have arrived while we were blocked on input.
        if not self.flag.is_active():
            return False

        if self.state.retarget(trimmed):
            self._say(f"Test path updated to: {self.state.target}")

        self._run_work_unit().alt(self._report_error)
        self._say(f"Current test path: {self.state.target}")
        return True

    @safe
    def _run_work_unit(self) -> RunReport:
        self.state.runs += 1
        command = self.settings.command_for(self.state.target)
        self.logger.info("Run #%d for target %r", self.state.runs, self.state.target)
        return self.runner.run(command)

    def _report_error(self, error: Exception) -> None:
        self.logger.error("Coverage run failed: %s", error, exc_info=error)
        self._say(f"Error running coverage: {error}")

    def _stop(self, service: ServiceHandle | None) -> None:
        self.state.stop()
        self.flag.deactivate()

        if service is not None and not service.join(self.settings.grace_period_s):
            self.logger.warning(
                "HTTP server thread still alive after %.1fs", self.settings.grace_period_s)
            self._say("Timed out waiting for server thread to join")

        self._say("Goodbye!")

    def _say(self, line: str) -> None:
        print(line, file=self.output, flush=True)
