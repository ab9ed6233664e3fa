import os
import sys
from pathlib import Path
from typing import Any
from dependency_injector import containers, providers

from ..infrastructure.env import Env
from ..infrastructure.logging import create_logger
from ..infrastructure.fs import FileSystem, IFileSystem
from ..infrastructure.process_runner import ProcessRunner
from ..domain.lifecycle import LifecycleFlag
from ..domain.settings import ENV_PREFIX, SessionSettings, env_overrides
from ..application.asset_bootstrapper import AssetBootstrapper
from .app_controller import AppController
from .service_supervisor import BackgroundServiceSupervisor
from .session_controller import SessionController
from .shutdown_coordinator import ShutdownCoordinator

# ------------------------ Factory / Provider functions ------


def env_provider_func(path: str | Path | None) -> Env:
    return Env().load(path or ".env", prefix=ENV_PREFIX).unwrap()


def settings_provider_func(
    config_file: str | Path | None,
    env: Env,
    overrides: dict[str, Any] | None,
) -> SessionSettings:
    # Explicit overrides beat COVSERVE_* variables, which beat the YAML file.
    return SessionSettings.load(
        Path(config_file or "covserve.yaml"),
        {**env_overrides(env.vars), **(overrides or {})},
    )


# ------------------------ Dependency Container ------------------------


class Container(containers.DeclarativeContainer):
    config = providers.Configuration()

    # -------------------- Terminal --------------------

    stdin = providers.Object(sys.stdin)
    stdout = providers.Object(sys.stdout)
    force_exit = providers.Object(os._exit)

    # -------------------- Infrastructure --------------------

    env: providers.Singleton[Env] = providers.Singleton(
        env_provider_func,
        path=config.dotenv_path,
    )

    settings: providers.Singleton[SessionSettings] = providers.Singleton(
        settings_provider_func,
        config_file=config.config_file,
        env=env,
        overrides=config.settings_overrides,
    )

    fs: providers.Singleton[IFileSystem] = providers.Singleton(FileSystem)

    logger = providers.Singleton(
        create_logger,
        name="covserve",
        log_dir=settings.provided.log_dir,
        logfile_size_limit_mb=settings.provided.logfile_size_limit_mb,
    )

    runner: providers.Factory[ProcessRunner] = providers.Factory(
        ProcessRunner,
        output=stdout,
        logger=logger,
        separator=settings.provided.command_separator,
    )

    # -------------------- Domain --------------------

    flag: providers.Singleton[LifecycleFlag] = providers.Singleton(LifecycleFlag)

    # -------------------- Application --------------------

    bootstrapper: providers.Factory[AssetBootstrapper] = providers.Factory(
        AssetBootstrapper,
        fs=fs,
        output=stdout,
        logger=logger,
    )

    # -------------------- Control --------------------

    supervisor: providers.Factory[BackgroundServiceSupervisor] = providers.Factory(
        BackgroundServiceSupervisor,
        host=settings.provided.host,
        port=settings.provided.port,
        html_dir=settings.provided.html_dir,
        output=stdout,
        logger=logger,
        poll_interval_s=settings.provided.poll_interval_s,
        grace_period_s=settings.provided.grace_period_s,
    )

    coordinator: providers.Singleton[ShutdownCoordinator] = providers.Singleton(
        ShutdownCoordinator,
        flag=flag,
        output=stdout,
        logger=logger,
        grace_period_s=settings.provided.grace_period_s,
        force_exit=force_exit,
    )

    session: providers.Factory[SessionController] = providers.Factory(
        SessionController,
        flag=flag,
        runner=runner,
        settings=settings,
        input=stdin,
        output=stdout,
        logger=logger,
    )

    app_controller: providers.Factory[AppController] = providers.Factory(
        AppController,
        settings=settings,
        flag=flag,
        bootstrapper=bootstrapper,
        supervisor=supervisor,
        coordinator=coordinator,
        session=session,
        output=stdout,
        logger=logger,
    )
