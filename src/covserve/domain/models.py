from pydantic import BaseModel, ConfigDict
from enum import Enum
from typing import Final

NO_INTERPRETER: Final[str] = "Python path not found"


class RunStatus(Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class SessionPhase(Enum):
    RUNNING = "running"
    STOPPED = "stopped"


class StepResult(BaseModel):
    model_config = ConfigDict(frozen=True)
    command: str
    exit_code: int | None = None
    # Set when the step could not be started at all.
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.exit_code == 0


class RunReport(BaseModel):
    model_config = ConfigDict(frozen=True)
    steps: tuple[StepResult, ...] = ()
    status: RunStatus = RunStatus.SUCCEEDED

    @property
    def failed_step(self) -> StepResult | None:
        return next((step for step in self.steps if not step.ok), None)
