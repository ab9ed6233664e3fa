import sys
from typing import Any
from pathlib import Path
from returns.result import Result, safe

from .app_controller import AppController
from .dependency_container import Container


def main() -> None:
    config: dict[str, Any] = {
        "config_file": Path("covserve.yaml"),
        "dotenv_path": Path(".env"),
        "settings_overrides": {},
    }

    result = run_app(config)
    result.alt(
        lambda err: print(f"covserve failed: {err}", file=sys.stderr)
    )
    sys.exit(result.value_or(1))


def run_app(config: dict[str, Any], container: Container | None = None) -> Result[int, Exception]:
    container = container or Container()
    container.config.from_dict(config)

    return build_controller(container).bind(lambda controller: controller.run())


@safe
def build_controller(container: Container) -> AppController:
    # Settings validation happens here, on first resolution.
    return container.app_controller()


if __name__ == "__main__":
    main()
