# src/covserve/domain/lifecycle.py
from dataclasses import dataclass


@dataclass
class LifecycleFlag:
    """Shared "session is active" switch.

    One-way: it starts active and, once deactivated, stays inactive for the
    rest of the process. Reads and writes touch a single attribute, so no
    lock is needed to share it across threads.
    """

    _active: bool = True

    def is_active(self) -> bool:
        return self._active

    def deactivate(self) -> None:
        self._active = False
