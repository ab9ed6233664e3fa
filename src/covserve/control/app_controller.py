# src/covserve/control/app_controller.py
import logging
from pathlib import Path
from typing import Callable, TextIO
from dataclasses import dataclass
from returns.result import Result

from ..domain.lifecycle import LifecycleFlag
from ..domain.settings import SessionSettings
from ..application.asset_bootstrapper import AssetBootstrapper
from ..infrastructure.interpreter import locate_interpreter
from .service_supervisor import BackgroundServiceSupervisor, ServiceHandle
from .session_controller import SessionController
from .shutdown_coordinator import ShutdownCoordinator


@dataclass(frozen=True)
class AppController:
    settings: SessionSettings
    flag: LifecycleFlag
    bootstrapper: AssetBootstrapper
    supervisor: BackgroundServiceSupervisor
    coordinator: ShutdownCoordinator
    session: SessionController
    output: TextIO
    logger: logging.Logger
    locate: Callable[[], Result[str, Exception]] = locate_interpreter

    def run(self) -> Result[int, Exception]:
        self._announce_interpreter()

        # Without an html directory there is nothing to serve: fatal.
        return self.bootstrapper.ensure_assets(self.settings.html_dir).map(self._run_session)

    def _announce_interpreter(self) -> None:
        self.locate().map(
            lambda path: self._say(f"Python interpreter path: {path}")
        ).alt(self._interpreter_lookup_failed)

    def _interpreter_lookup_failed(self, err: Exception) -> None:
        self.logger.warning("Interpreter lookup failed: %s", err)
        self._say(f"Failed to determine Python interpreter path: {err}")

    def _run_session(self, index_path: Path) -> int:
        self.logger.info("Serving %s", index_path.parent)
        service = self.supervisor.start(self.flag)
        self._await_service(service)

        self.coordinator.install()
        try:
            state = self.session.run(service)
        finally:
            self.coordinator.mark_finished()
            self.coordinator.uninstall()

        self.logger.info("Session ended after %d coverage run(s)", state.runs)
        return 0

    def _await_service(self, service: ServiceHandle) -> None:
        # A server that cannot bind costs us the browser view, not the session.
        service.wait_started(self.settings.startup_timeout_s).map(
            lambda url: self._say("Coverage HTTP server started!")
        ).alt(self._service_unavailable)

    def _service_unavailable(self, err: Exception) -> None:
        self.logger.error("HTTP server unavailable for this session: %s", err)
        self._say(f"Continuing without the HTTP server: {err}")

    def _say(self, line: str) -> None:
        print(line, file=self.output, flush=True)
