from dataclasses import dataclass

from .models import SessionPhase


@dataclass
class SessionState:
    target: str
    phase: SessionPhase = SessionPhase.RUNNING
    runs: int = 0

    @property
    def active(self) -> bool:
        return self.phase is SessionPhase.RUNNING

    def retarget(self, raw_input: str) -> bool:
        """Adopt the trimmed input as the new target. Empty input keeps the old one."""
        trimmed = raw_input.strip()
        if not trimmed:
            return False
        self.target = trimmed
        return True

    def stop(self) -> None:
        self.phase = SessionPhase.STOPPED
