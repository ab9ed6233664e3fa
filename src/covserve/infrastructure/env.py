from dataclasses import dataclass, field
from pathlib import Path
from dotenv import dotenv_values
from returns.result import safe
import os


@dataclass(frozen=True)
class Env:
    vars: dict[str, str | bool | int | float] = field(default_factory=dict)

    @safe
    def load(self, path_to_dotenv: str | Path = ".env", prefix: str = "") -> "Env":
        # Existing process variables win over the .env file; os.environ stays untouched.
        from_file = {k: v for k, v in dotenv_values(path_to_dotenv).items() if v is not None}
        merged = {**from_file, **os.environ}
        loaded_vars = {
            k: self._parse_value(v)
            for k, v in merged.items()
            if v and k.startswith(prefix)
        }
        return Env(vars=loaded_vars)

    @staticmethod
    def _parse_value(value: str) -> str | bool | int | float:
        if value.lower() in {"true", "false"}:
            return value.lower() == "true"
        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            return value
