# src/covserve/control/service_supervisor.py
import socket
import asyncio
import logging
import threading
from pathlib import Path
from typing import TextIO
from dataclasses import dataclass, field

import uvicorn
from returns.result import Failure, Result, Success

from ..domain.lifecycle import LifecycleFlag
from ..infrastructure.static_site import create_static_app


class ServiceStartupError(RuntimeError):
    pass


@dataclass
class ServiceHandle:
    """What the controlling thread gets to see of a running HTTP server."""

    thread: threading.Thread | None = None
    _started: threading.Event = field(default_factory=threading.Event)
    _startup: Result[str, Exception] | None = None
    _outcome: Result[None, Exception] | None = None

    def wait_started(self, timeout: float) -> Result[str, Exception]:
        """Success carries the URL being served, Failure the bind error."""
        if not self._started.wait(timeout) or self._startup is None:
            return Failure(ServiceStartupError(
                f"HTTP server did not report startup within {timeout}s"))
        return self._startup

    def join(self, timeout: float | None = None) -> bool:
        if self.thread is None:
            return True
        self.thread.join(timeout)
        return not self.thread.is_alive()

    def is_alive(self) -> bool:
        return self.thread is not None and self.thread.is_alive()

    def result(self) -> Result[None, Exception]:
        if self._outcome is None:
            return Failure(ServiceStartupError("HTTP server is still running"))
        return self._outcome

    def _report_started(self, startup: Result[str, Exception]) -> None:
        if self._started.is_set():
            return
        self._startup = startup
        self._started.set()

    def _finish(self, outcome: Result[None, Exception]) -> None:
        self._outcome = outcome
        # A thread that dies before binding still has to release waiters.
        self._report_started(outcome.map(lambda _: ""))


@dataclass(frozen=True)
class BackgroundServiceSupervisor:
    host: str
    port: int
    html_dir: Path
    output: TextIO
    logger: logging.Logger
    poll_interval_s: float = 0.1
    grace_period_s: float = 2.0

    def start(self, flag: LifecycleFlag) -> ServiceHandle:
        handle = ServiceHandle()
        thread = threading.Thread(
            target=self._run, args=(handle, flag), name="HTTPServer", daemon=True)
        handle.thread = thread
        thread.start()
        return handle

    # -------------------- service thread --------------------

    def _run(self, handle: ServiceHandle, flag: LifecycleFlag) -> None:
        try:
            asyncio.run(self._serve(handle, flag))
        except (Exception, SystemExit) as e:
            # uvicorn raises SystemExit when its own startup fails.
            self.logger.exception("HTTP server stopped with an error")
            self._say(f"HTTP server error: {e}")
            handle._finish(Failure(e if isinstance(e, Exception) else ServiceStartupError(str(e))))
            return

        if handle._outcome is None:
            handle._finish(Success(None))

    async def _serve(self, handle: ServiceHandle, flag: LifecycleFlag) -> None:
        app = create_static_app(self.html_dir)

        try:
            sock = self._bind()
        except OSError as e:
            self.logger.error("Cannot bind %s:%s: %s", self.host, self.port, e)
            self._say(f"HTTP server error: {e}")
            handle._finish(Failure(e))
            return

        host, port = sock.getsockname()[:2]
        self._say(f"Starting HTTP server on http://localhost:{port}")
        self._say("Navigate to this URL to view coverage reports")

        server = uvicorn.Server(uvicorn.Config(
            app=app,
            host=host,
            port=port,
            lifespan="off",
            log_config=None,
            log_level="warning",
            access_log=False,
            timeout_graceful_shutdown=max(1, int(self.grace_period_s)),
        ))

        watcher = asyncio.create_task(self._watch(flag, server))
        url = f"http://{host}:{port}"
        self.logger.info("HTTP server bound to %s", url)
        handle._report_started(Success(url))

        try:
            await server.serve(sockets=[sock])
        finally:
            watcher.cancel()
            sock.close()

        self._say("HTTP server shutdown complete")
        self.logger.info("HTTP server on %s stopped", url)

    async def _watch(self, flag: LifecycleFlag, server: uvicorn.Server) -> None:
        while flag.is_active():
            await asyncio.sleep(self.poll_interval_s)

        self._say("Shutting down HTTP server...")
        self.logger.info("Lifecycle flag cleared, requesting graceful stop")
        server.should_exit = True

    def _bind(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.host, self.port))
            # Listening right away means early clients queue instead of
            # being refused while uvicorn finishes starting.
            sock.listen(128)
        except OSError:
            sock.close()
            raise
        return sock

    def _say(self, line: str) -> None:
        print(line, file=self.output, flush=True)
