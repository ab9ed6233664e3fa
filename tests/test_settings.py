# tests/test_settings.py

"""
Configuration Tests - defaults, YAML file, COVSERVE_* environment layering
"""

import os
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from covserve.control.dependency_container import settings_provider_func
from covserve.domain.settings import DEFAULT_COMMAND, SessionSettings, env_overrides
from covserve.infrastructure.env import Env


class TestDefaults:

    def test_defaults_match_original_tool(self):
        settings = SessionSettings()
        assert settings.host == "127.0.0.1"
        assert settings.port == 8080
        assert settings.html_dir == Path("htmlcov")
        assert settings.default_target == "."
        assert settings.exit_keyword == "exit"
        assert settings.poll_interval_s == pytest.approx(0.1)
        assert settings.grace_period_s == pytest.approx(2.0)
        assert settings.url == "http://127.0.0.1:8080"

    def test_command_for_target(self):
        command = SessionSettings().command_for("tests/unit")
        assert command == DEFAULT_COMMAND.format(target="tests/unit")
        assert command.startswith("python -m coverage run -m pytest tests/unit &&")

    def test_settings_are_frozen(self):
        with pytest.raises(ValidationError):
            SessionSettings().port = 1

    @pytest.mark.parametrize("bad", [{"port": -1}, {"grace_period_s": 0}, {"no_such_key": 1}])
    def test_invalid_values_rejected(self, bad):
        with pytest.raises(ValidationError):
            SessionSettings(**bad)


class TestLayering:

    def test_missing_file_means_defaults(self, tmp_path):
        assert SessionSettings.load(tmp_path / "absent.yaml") == SessionSettings()

    def test_yaml_then_overrides(self, tmp_path):
        path = tmp_path / "covserve.yaml"
        path.write_text("port: 9000\ndefault_target: tests\nexit_keyword: quit\n")

        settings = SessionSettings.load(path, {"port": 9100})

        assert settings.port == 9100
        assert settings.default_target == "tests"
        assert settings.exit_keyword == "quit"

    def test_non_mapping_yaml_rejected(self, tmp_path):
        path = tmp_path / "covserve.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ValueError, match="Expected a mapping"):
            SessionSettings.load(path)

    def test_env_overrides_pick_prefixed_keys(self):
        picked = env_overrides({"COVSERVE_PORT": 9001, "HOME": "/root", "COVSERVE_HTML_DIR": "out"})
        assert picked == {"port": 9001, "html_dir": "out"}

    def test_environment_beats_yaml(self, tmp_path, monkeypatch):
        (tmp_path / "covserve.yaml").write_text("port: 9000\ngrace_period_s: 5\n")
        monkeypatch.setenv("COVSERVE_PORT", "9200")
        env = Env().load(tmp_path / ".env", prefix="COVSERVE_").unwrap()

        settings = settings_provider_func(tmp_path / "covserve.yaml", env, None)

        assert settings.port == 9200
        assert settings.grace_period_s == pytest.approx(5.0)

    def test_dotenv_file_is_read(self, tmp_path):
        (tmp_path / ".env").write_text("COVSERVE_DEFAULT_TARGET=tests/integration\n")

        env = Env().load(tmp_path / ".env", prefix="COVSERVE_").unwrap()
        settings = settings_provider_func(tmp_path / "absent.yaml", env, {})

        assert settings.default_target == "tests/integration"

    def test_dotenv_file_leaves_process_environment_alone(self, tmp_path, monkeypatch):
        """Child processes must not inherit the project's .env."""
        monkeypatch.delenv("PROJECT_SECRET_MODE", raising=False)
        (tmp_path / ".env").write_text("PROJECT_SECRET_MODE=staging\nCOVSERVE_PORT=9300\n")
        before = dict(os.environ)

        env = Env().load(tmp_path / ".env").unwrap()

        assert env.vars["PROJECT_SECRET_MODE"] == "staging"
        assert env.vars["COVSERVE_PORT"] == 9300
        assert dict(os.environ) == before
        assert "PROJECT_SECRET_MODE" not in os.environ

    def test_process_environment_beats_dotenv_file(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("COVSERVE_EXIT_KEYWORD=quit\n")
        monkeypatch.setenv("COVSERVE_EXIT_KEYWORD", "bye")

        env = Env().load(tmp_path / ".env", prefix="COVSERVE_").unwrap()

        assert env.vars["COVSERVE_EXIT_KEYWORD"] == "bye"

    def test_missing_dotenv_file_is_fine(self, tmp_path):
        assert Env().load(tmp_path / "absent.env", prefix="COVSERVE_").unwrap() is not None

    def test_unknown_prefixed_variable_is_ignored_and_logged(self, caplog):
        log = logging.getLogger("covserve_settings_test")
        log.propagate = True

        with caplog.at_level(logging.WARNING, logger="covserve_settings_test"):
            picked = env_overrides({"COVSERVE_TOKEN": "abc", "COVSERVE_PORT": 9001}, log)

        assert picked == {"port": 9001}
        assert "COVSERVE_TOKEN" in caplog.text

    def test_unknown_prefixed_variable_does_not_abort_startup(self, tmp_path, monkeypatch):
        monkeypatch.setenv("COVSERVE_TOKEN", "abc")
        env = Env().load(tmp_path / ".env", prefix="COVSERVE_").unwrap()

        settings = settings_provider_func(tmp_path / "absent.yaml", env, {"port": 0})

        assert settings.port == 0


class TestEnvParsing:

    @pytest.mark.parametrize("raw, parsed", [
        ("true", True),
        ("False", False),
        ("8080", 8080),
        ("2.5", 2.5),
        ("127.0.0.1", "127.0.0.1"),
        ("tests/unit", "tests/unit"),
    ])
    def test_parse_value(self, raw, parsed):
        assert Env._parse_value(raw) == parsed
