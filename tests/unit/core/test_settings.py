"""Tests for sitecheck configuration management."""

from pathlib import Path
from unittest.mock import patch

import pytest
import yaml
from pydantic import ValidationError

from sitecheck.core.exceptions import ConfigurationError
from sitecheck.core.settings import (
    LighthouseSettings,
    LoggingSettings,
    SiteCheckSettings,
    _find_config_file,
    _load_yaml_config,
    generate_example_config,
    get_settings,
)


class TestSiteCheckSettings:
    """Tests for SiteCheckSettings class."""

    def test_default_values(self) -> None:
        settings = SiteCheckSettings(_skip_file_loading=True)
        assert settings.lighthouse.url == "http://localhost:8000"
        assert settings.lighthouse.thresholds == {
            "performance": 90,
            "accessibility": 95,
            "best-practices": 90,
            "seo": 95,
        }
        assert settings.browser.browsers == ["chromium", "firefox", "webkit"]
        assert [v.width for v in settings.browser.viewports] == [320, 768, 1024, 1440]
        assert settings.deployment.domain == "www.autoracex.dev"
        assert settings.deployment.request_timeout == 10.0
        assert settings.integration.run_local is True
        assert settings.integration.install_dependencies is False
        assert settings.logging.level == "INFO"

    def test_nested_values(self) -> None:
        settings = SiteCheckSettings(
            _skip_file_loading=True,
            deployment={"domain": "www.example.com"},
        )
        assert settings.deployment.domain == "www.example.com"
        assert settings.deployment.github_repo == "autoracex/toukon_elixir"

    def test_env_override(self) -> None:
        with patch.dict(
            "os.environ",
            {
                "SITECHECK_DEPLOYMENT__DOMAIN": "env.example.com",
                "SITECHECK_LOGGING__LEVEL": "debug",
            },
        ):
            settings = SiteCheckSettings(_skip_file_loading=True)
        assert settings.deployment.domain == "env.example.com"
        assert settings.logging.level == "DEBUG"


class TestValidation:
    def test_threshold_out_of_range(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            LighthouseSettings(thresholds={"performance": 120})
        assert "performance" in str(exc_info.value)

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValidationError):
            LoggingSettings(level="LOUD")

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            SiteCheckSettings(
                _skip_file_loading=True, deployment={"request_timeout": 0}
            )


class TestConfigFile:
    """Tests for YAML loading and discovery."""

    def test_load_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "sitecheck.config.yaml"
        path.write_text(yaml.safe_dump({"deployment": {"domain": "a.example"}}))
        assert _load_yaml_config(path) == {"deployment": {"domain": "a.example"}}

    def test_load_empty_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "sitecheck.config.yaml"
        path.write_text("")
        assert _load_yaml_config(path) == {}

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "sitecheck.config.yaml"
        path.write_text("deployment: [unclosed")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            _load_yaml_config(path)

    def test_non_mapping_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "sitecheck.config.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            _load_yaml_config(path)

    def test_find_config_in_parent(self, tmp_path: Path) -> None:
        config = tmp_path / "sitecheck.config.yml"
        config.write_text("{}")
        child = tmp_path / "a" / "b"
        child.mkdir(parents=True)
        assert _find_config_file(child) == config

    def test_discovered_file_is_merged(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "sitecheck.config.yaml").write_text(
            yaml.safe_dump({"deployment": {"domain": "file.example"}})
        )
        monkeypatch.chdir(tmp_path)
        settings = SiteCheckSettings()
        assert settings.deployment.domain == "file.example"


class TestGetSettings:
    def test_explicit_file_with_overrides(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "deployment": {
                        "domain": "file.example",
                        "github_repo": "me/site",
                    }
                }
            )
        )
        settings = get_settings(
            config_file=path, deployment={"domain": "override.example"}
        )
        assert settings.deployment.domain == "override.example"
        assert settings.deployment.github_repo == "me/site"

    def test_env_wins_over_explicit_file(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "deployment": {
                        "domain": "file.example",
                        "github_repo": "me/site",
                    },
                    "logging": {"level": "ERROR"},
                }
            )
        )
        with patch.dict(
            "os.environ", {"SITECHECK_DEPLOYMENT__DOMAIN": "env.example"}
        ):
            settings = get_settings(config_file=path)
        assert settings.deployment.domain == "env.example"
        assert settings.deployment.github_repo == "me/site"
        assert settings.logging.level == "ERROR"

    def test_explicit_file_disables_discovery(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "sitecheck.config.yaml").write_text(
            yaml.safe_dump({"deployment": {"github_repo": "discovered/site"}})
        )
        path = tmp_path / "custom.yaml"
        path.write_text(yaml.safe_dump({"deployment": {"domain": "file.example"}}))
        monkeypatch.chdir(tmp_path)

        settings = get_settings(config_file=path)
        assert settings.deployment.domain == "file.example"
        assert settings.deployment.github_repo == "autoracex/toukon_elixir"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            get_settings(config_file=tmp_path / "nope.yaml")

    def test_example_config_is_valid(self, tmp_path: Path) -> None:
        path = tmp_path / "sitecheck.config.yaml"
        path.write_text(generate_example_config())
        settings = get_settings(config_file=path)
        assert settings.lighthouse.thresholds["seo"] == 95
        assert settings.integration.run_deployment is True
