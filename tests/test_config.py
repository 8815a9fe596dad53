"""Unit tests for automana.engine.config — Pydantic models and automana.yaml loading."""

import pytest
import yaml
from pydantic import ValidationError

import automana.engine.config as cfg_mod
from automana.engine.config import (
    AsanaConfig,
    LoggingConfig,
    PlatformConfig,
    SchedulerConfig,
    get_platform_config,
    load_platform_config,
)
from automana.engine.errors import AutomanaConfigError


class TestModels:
    def test_defaults(self):
        config = PlatformConfig()
        assert config.asana.base_url == "https://app.asana.com/api/1.0"
        assert config.asana.token == ""
        assert config.scheduler.iteration_interval_seconds == 15.0
        assert config.logging.level == "INFO"
        assert config.rules_module is None

    def test_page_size_bounds(self):
        with pytest.raises(ValidationError):
            AsanaConfig(page_size=0)
        with pytest.raises(ValidationError):
            AsanaConfig(page_size=101)

    def test_negative_interval(self):
        with pytest.raises(ValidationError):
            SchedulerConfig(iteration_interval_seconds=-1)

    def test_zero_interval_allowed(self):
        assert SchedulerConfig(iteration_interval_seconds=0).iteration_interval_seconds == 0

    def test_level_uppercased(self):
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_bad_level(self):
        with pytest.raises(ValidationError):
            LoggingConfig(level="chatty")


class TestLoading:
    def test_no_file_gives_defaults(self):
        config = load_platform_config()
        assert config == PlatformConfig()

    def test_discovers_file(self, tmp_path):
        (tmp_path / "automana.yaml").write_text(yaml.safe_dump({
            "name": "Home",
            "scheduler": {"iteration_interval_seconds": 60},
            "rules_module": "myrules",
        }))
        config = load_platform_config()
        assert config.name == "Home"
        assert config.scheduler.iteration_interval_seconds == 60
        assert config.rules_module == "myrules"

    def test_discovers_file_in_parent(self, tmp_path, monkeypatch):
        (tmp_path / "automana.yaml").write_text("name: Parent\n")
        child = tmp_path / "a" / "b"
        child.mkdir(parents=True)
        monkeypatch.chdir(child)
        assert load_platform_config().name == "Parent"

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "other.yaml"
        path.write_text("asana:\n  page_size: 10\n")
        assert load_platform_config(str(path)).asana.page_size == 10

    def test_explicit_missing_path(self, tmp_path):
        with pytest.raises(AutomanaConfigError, match="not found"):
            load_platform_config(str(tmp_path / "missing.yaml"))

    def test_non_mapping(self, tmp_path):
        (tmp_path / "automana.yaml").write_text("- a\n- b\n")
        with pytest.raises(AutomanaConfigError, match="mapping"):
            load_platform_config()

    def test_empty_file(self, tmp_path):
        (tmp_path / "automana.yaml").write_text("")
        assert load_platform_config() == PlatformConfig()

    def test_env_overrides(self, tmp_path, monkeypatch):
        (tmp_path / "automana.yaml").write_text(yaml.safe_dump({
            "asana": {"token": "from-file", "timeout": 5},
            "rules_module": "file_rules",
        }))
        monkeypatch.setenv("ASANA_TOKEN", "from-env")
        monkeypatch.setenv("AUTOMANA_RULES", "env_rules")

        config = load_platform_config()
        assert config.asana.token == "from-env"
        assert config.asana.timeout == 5
        assert config.rules_module == "env_rules"

    def test_get_platform_config_caches(self):
        first = get_platform_config()
        assert get_platform_config() is first
        assert cfg_mod._platform_config is first
