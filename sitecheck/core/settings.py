"""sitecheck configuration management.

Configuration is loaded from multiple sources with the following priority
(highest to lowest):
1. Explicit overrides (CLI arguments)
2. Environment variables (with SITECHECK_ prefix)
3. Configuration files (sitecheck.config.yaml)
4. Default values

Example usage:
    from sitecheck.core.settings import get_settings

    settings = get_settings()
    print(settings.lighthouse.thresholds)

Environment variable support:
    SITECHECK_LOGGING__LEVEL=DEBUG
    SITECHECK_DEPLOYMENT__DOMAIN=www.example.com
    SITECHECK_LIGHTHOUSE__URL=http://localhost:3000
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sitecheck.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = ["sitecheck.config.yaml", "sitecheck.config.yml"]

SECTIONS = ("lighthouse", "browser", "deployment", "integration", "build", "logging")

DEFAULT_LOCAL_URL = "http://localhost:8000"


def _find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find configuration file by searching current directory and parents.

    Args:
        start_dir: Directory to start search from.
            Defaults to current working directory.

    Returns:
        Path to config file if found, None otherwise.
    """
    search_dir = start_dir or Path.cwd()

    # Limit search depth to prevent infinite loops
    for _ in range(10):
        for filename in CONFIG_FILE_NAMES:
            config_path = search_dir / filename
            if config_path.exists():
                return config_path

        parent = search_dir.parent
        if parent == search_dir:
            break
        search_dir = parent

    return None


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Dictionary of configuration values.

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    try:
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {config_path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping")
    return config


def _merge_sections(
    file_config: dict[str, Any], data: dict[str, Any]
) -> dict[str, Any]:
    """Merge file values under explicit values, section by section."""
    merged = {**file_config, **data}
    for section in SECTIONS:
        file_section = file_config.get(section)
        data_section = data.get(section)
        if isinstance(file_section, dict) and isinstance(data_section, dict):
            merged[section] = {**file_section, **data_section}
    return merged


class Viewport(BaseModel):
    """Browser viewport used by responsive checks."""

    name: str
    width: int = Field(..., ge=1)
    height: int = Field(..., ge=1)


class LighthouseSettings(BaseModel):
    """Performance audit settings."""

    url: str = Field(default=DEFAULT_LOCAL_URL, description="URL to audit")
    output_dir: Path = Field(
        default=Path("lighthouse-reports"),
        description="Directory for Lighthouse reports",
    )
    thresholds: dict[str, int] = Field(
        default_factory=lambda: {
            "performance": 90,
            "accessibility": 95,
            "best-practices": 90,
            "seo": 95,
        },
        description="Minimum score per Lighthouse category (0-100)",
    )
    chrome_flags: str = Field(
        default="--headless --no-sandbox --disable-dev-shm-usage",
        description="Flags passed to the headless browser",
    )
    timeout_seconds: int = Field(
        default=300,
        ge=1,
        le=3600,
        description="Audit process timeout in seconds",
    )

    @field_validator("thresholds")
    @classmethod
    def validate_thresholds(cls, v: dict[str, int]) -> dict[str, int]:
        """Thresholds are percentages."""
        for category, threshold in v.items():
            if not 0 <= threshold <= 100:
                raise ValueError(
                    f"Threshold for '{category}' must be 0-100, got {threshold}"
                )
        return v


class BrowserSettings(BaseModel):
    """Cross-browser compatibility test settings."""

    url: str = Field(default=DEFAULT_LOCAL_URL, description="URL under test")
    output_dir: Path = Field(
        default=Path("browser-test-reports"),
        description="Directory for generated specs, screenshots and summaries",
    )
    browsers: list[str] = Field(
        default_factory=lambda: ["chromium", "firefox", "webkit"],
        description="Playwright projects to run",
    )
    viewports: list[Viewport] = Field(
        default_factory=lambda: [
            Viewport(name="Mobile", width=320, height=568),
            Viewport(name="Tablet", width=768, height=1024),
            Viewport(name="Desktop", width=1024, height=768),
            Viewport(name="Large Desktop", width=1440, height=900),
        ],
    )
    expected_title: str = Field(
        default="闘魂Elixir",
        description="Text the page title must contain",
    )
    max_load_ms: int = Field(
        default=3000,
        ge=1,
        description="Maximum acceptable network-idle time in milliseconds",
    )
    timeout_seconds: int = Field(default=600, ge=1, le=3600)


class DeploymentSettings(BaseModel):
    """GitHub Pages deployment verification settings."""

    domain: str = Field(default="www.autoracex.dev", description="Custom domain")
    github_repo: str = Field(default="autoracex/toukon_elixir")
    output_dir: Path = Field(default=Path("deployment-test-reports"))
    workflow_path: Path = Field(default=Path(".github/workflows/deploy.yml"))
    cname_path: Path = Field(default=Path("CNAME"))
    content_marker: str = Field(
        default="闘魂Elixir",
        description="Text expected in the served page",
    )
    request_timeout: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="Network request timeout in seconds",
    )
    required_workflow_components: list[str] = Field(
        default_factory=lambda: [
            "name:",
            "on:",
            "push:",
            "jobs:",
            "runs-on:",
            "actions/checkout",
            "actions/setup-node",
            "npm run build",
            "actions/deploy-pages",
        ],
    )


class IntegrationSettings(BaseModel):
    """Integration run settings."""

    output_dir: Path = Field(default=Path("integration-test-reports"))
    run_local: bool = Field(
        default=True, description="Run suites that need the local server"
    )
    run_deployment: bool = Field(
        default=True, description="Run the deployment verification suite"
    )
    install_dependencies: bool = Field(
        default=False,
        description="Install lighthouse and @playwright/test before running",
    )
    dependencies: list[str] = Field(
        default_factory=lambda: ["lighthouse", "@playwright/test"],
    )
    title: str = Field(default="Integration Tests - 闘魂Elixir Landing Page")
    requirements: dict[str, str] = Field(
        default_factory=lambda: {
            "2.1": "GitHub Actions自動デプロイ",
            "2.2": "カスタムドメインHTTPS接続",
            "5.1": "3秒以内のファーストビュー表示",
        },
        description="Requirement id to description, shown in reports",
    )


class BuildSettings(BaseModel):
    """Minifier settings."""

    root: Path = Field(default=Path("."))
    css_source: str = Field(default="styles.css")
    js_source: str = Field(default="script.js")


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_output: bool | None = Field(
        default=None,
        description="Output logs in JSON format (auto-detected when unset)",
    )
    file: str | None = Field(default=None, description="Log file path")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v


class SiteCheckSettings(BaseSettings):
    """Main sitecheck configuration.

    Built once per invocation and passed to each component; nothing reads
    it from module state.

    Example:
        settings = SiteCheckSettings(_skip_file_loading=True)
        print(settings.deployment.domain)
    """

    model_config = SettingsConfigDict(
        env_prefix="SITECHECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    lighthouse: LighthouseSettings = Field(default_factory=LighthouseSettings)
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    deployment: DeploymentSettings = Field(default_factory=DeploymentSettings)
    integration: IntegrationSettings = Field(default_factory=IntegrationSettings)
    build: BuildSettings = Field(default_factory=BuildSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @model_validator(mode="before")
    @classmethod
    def load_from_config_file(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Merge values from sitecheck.config.yaml under ``data``.

        ``data`` already holds environment variables and explicit overrides,
        so both win over the file. ``_config_file`` names the file instead of
        discovering it.
        """
        explicit_path = data.pop("_config_file", None)
        if data.get("_skip_file_loading"):
            data.pop("_skip_file_loading", None)
            return data

        config_path = Path(explicit_path) if explicit_path else _find_config_file()
        if config_path:
            file_config = _load_yaml_config(config_path)
            if file_config:
                logger.debug("Loaded configuration from %s", config_path)
                return _merge_sections(file_config, data)

        return data


def get_settings(
    config_file: Path | None = None,
    **overrides: Any,
) -> SiteCheckSettings:
    """Build a settings instance.

    Args:
        config_file: Optional explicit path to a YAML configuration file.
            Disables discovery of sitecheck.config.yaml.
        **overrides: Explicit configuration overrides, by section.

    Returns:
        Configured SiteCheckSettings instance.

    Raises:
        ConfigurationError: If the explicit file is missing or invalid.
    """
    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        return SiteCheckSettings(_config_file=config_file, **overrides)

    return SiteCheckSettings(**overrides)


def generate_example_config() -> str:
    """Return a commented example sitecheck.config.yaml."""
    return """\
# sitecheck configuration
# Environment variables override these values with the SITECHECK_ prefix
# Example: SITECHECK_DEPLOYMENT__DOMAIN=www.example.com

lighthouse:
  url: http://localhost:8000
  output_dir: lighthouse-reports
  thresholds:
    performance: 90
    accessibility: 95
    best-practices: 90
    seo: 95

browser:
  url: http://localhost:8000
  output_dir: browser-test-reports
  browsers: [chromium, firefox, webkit]

deployment:
  domain: www.autoracex.dev
  github_repo: autoracex/toukon_elixir
  output_dir: deployment-test-reports
  request_timeout: 10

integration:
  output_dir: integration-test-reports
  run_local: true
  run_deployment: true
  install_dependencies: false

logging:
  level: INFO
  # json_output: true
  # file: sitecheck.log
"""
