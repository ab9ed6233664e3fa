import os
import signal
import logging
import threading
from types import FrameType
from typing import Any, Callable, TextIO
from dataclasses import dataclass, field

from ..domain.lifecycle import LifecycleFlag


@dataclass
class ShutdownCoordinator:
    """
    Turns Ctrl+C into a bounded shutdown.

    The handler clears the lifecycle flag and arms a watchdog that races the
    cooperative path: whoever calls `mark_finished` within the grace period
    wins, otherwise the watchdog calls `force_exit(0)`.
    """

    flag: LifecycleFlag
    output: TextIO
    logger: logging.Logger
    grace_period_s: float = 2.0
    force_exit: Callable[[int], Any] = os._exit
    finished: threading.Event = field(default_factory=threading.Event)
    _arm_latch: threading.Lock = field(default_factory=threading.Lock)
    _previous_handler: Any = None

    def install(self) -> None:
        previous = signal.signal(signal.SIGINT, self._on_signal)
        # None means the old handler was not installed from Python.
        self._previous_handler = signal.SIG_DFL if previous is None else previous

    def uninstall(self) -> None:
        if self._previous_handler is None:
            return
        signal.signal(signal.SIGINT, self._previous_handler)
        self._previous_handler = None

    @property
    def armed(self) -> bool:
        return self._arm_latch.locked()

    def arm(self) -> bool:
        # Non-blocking test-and-set: a signal landing inside a running
        # handler must neither wait on the latch nor start a second timer.
        if not self._arm_latch.acquire(blocking=False):
            return False

        threading.Thread(
            target=self._watchdog, name="ShutdownWatchdog", daemon=True
        ).start()
        return True

    def mark_finished(self) -> None:
        self.finished.set()

    def _on_signal(self, signum: int, _: FrameType | None) -> None:
        self.flag.deactivate()
        self.arm()

    def _watchdog(self) -> None:
        print("Received Ctrl+C, shutting down...", file=self.output, flush=True)
        self.logger.info("Interrupt received, forcing exit in %.1fs unless shutdown completes",
                         self.grace_period_s)

        if self.finished.wait(self.grace_period_s):
            self.logger.info("Cooperative shutdown finished in time")
            return

        print("Forcing exit...", file=self.output, flush=True)
        self.logger.warning("Cooperative shutdown exceeded %.1fs, forcing exit", self.grace_period_s)
        # os._exit skips interpreter cleanup, so flush what we can first.
        for handler in self.logger.handlers:
            handler.flush()
        self.force_exit(0)
