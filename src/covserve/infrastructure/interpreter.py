import sys
import subprocess
from returns.result import safe

from ..domain.models import NO_INTERPRETER


def lookup_command(interpreter: str = "python") -> list[str]:
    finder = "where" if sys.platform.startswith("win") else "which"
    return [finder, interpreter]


@safe
def locate_interpreter(interpreter: str = "python") -> str:
    """
    Ask the platform's path finder where `interpreter` lives.
    A finder that runs but finds nothing yields NO_INTERPRETER; a finder
    that cannot be spawned at all is a Failure.
    """
    completed = subprocess.run(
        lookup_command(interpreter),
        capture_output=True,
        text=True,
        check=False,
    )
    if completed.returncode != 0:
        return NO_INTERPRETER

    # `where` may list several matches, one per line.
    lines = completed.stdout.strip().splitlines()
    return lines[0].strip() if lines else NO_INTERPRETER
