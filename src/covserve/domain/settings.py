import logging
from pathlib import Path
from typing import Any, Final, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX: Final[str] = "COVSERVE_"
DEFAULT_COMMAND: Final[str] = (
    "python -m coverage run -m pytest {target} && python -m coverage html"
)


class SessionSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", coerce_numbers_to_str=True)

    host: str = "127.0.0.1"
    port: int = Field(default=8080, ge=0, le=65535)
    html_dir: Path = Path("htmlcov")
    default_target: str = "."
    exit_keyword: str = "exit"
    command_template: str = DEFAULT_COMMAND
    command_separator: str = "&&"
    poll_interval_s: float = Field(default=0.1, gt=0)
    grace_period_s: float = Field(default=2.0, gt=0)
    startup_timeout_s: float = Field(default=5.0, gt=0)
    log_dir: Path = Path("logs")
    logfile_size_limit_mb: int = Field(default=10, gt=0)

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def command_for(self, target: str) -> str:
        return self.command_template.format(target=target)

    @staticmethod
    def load(path: Path, overrides: Mapping[str, Any] | None = None) -> "SessionSettings":
        """
        Build settings from the optional YAML file at `path`, then apply
        `overrides` on top. A missing file means defaults.
        """
        data: dict[str, Any] = {}
        if path.is_file():
            loaded = yaml.safe_load(path.read_text()) or {}
            if not isinstance(loaded, dict):
                raise ValueError(f"Expected a mapping in {path}, got {type(loaded).__name__}")
            data = loaded

        return SessionSettings(**{**data, **(overrides or {})})


def env_overrides(
    env_vars: Mapping[str, Any],
    logger: logging.Logger | None = None,
) -> dict[str, Any]:
    """
    Pick COVSERVE_* variables and map them onto settings field names.
    Prefixed variables that name no setting are logged and left out.
    """
    logger = logger or logging.getLogger(__name__)
    picked: dict[str, Any] = {}
    for key, value in env_vars.items():
        if not key.startswith(ENV_PREFIX):
            continue
        name = key[len(ENV_PREFIX):].lower()
        if name not in SessionSettings.model_fields:
            logger.warning("Ignoring %s: no setting named %r", key, name)
            continue
        picked[name] = value
    return picked
