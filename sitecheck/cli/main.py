"""Main CLI entry point for sitecheck."""

import asyncio
import platform
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError as PydanticValidationError

from sitecheck import __version__
from sitecheck.build.minify import build as build_assets
from sitecheck.core.exceptions import ConfigurationError, SiteCheckError
from sitecheck.core.logging import configure_logging, get_logger, run_context
from sitecheck.core.settings import (
    SiteCheckSettings,
    generate_example_config,
    get_settings,
)
from sitecheck.reporters.base import ReportMeta, Reporter
from sitecheck.reporters.html_reporter import HTMLReporter
from sitecheck.reporters.json_reporter import JSONReporter
from sitecheck.reporters.registry import create_reporter
from sitecheck.runner.integration import IntegrationRunner
from sitecheck.runner.models import Summary
from sitecheck.runner.orchestrator import SuiteRunner
from sitecheck.suites.base import Suite
from sitecheck.suites.browser import BrowserSuite
from sitecheck.suites.deployment import DeploymentSuite
from sitecheck.suites.lighthouse import LighthouseSuite
from sitecheck.verify import CheckLevel, verify_setup

# Exit codes
EXIT_SUCCESS = 0  # No suite failed
EXIT_FAILURE = 1  # At least one suite failed
EXIT_ERROR = 2  # Error (invalid config, unwritable report, etc.)


class ConfigContext:
    """Context object to hold configuration state."""

    def __init__(self) -> None:
        """Initialize config context."""
        self.config_file: Path | None = None
        self.verbose: bool = False
        self.log_level: str | None = None
        self.json_logs: bool = False
        self._settings: SiteCheckSettings | None = None

    def load_settings(self) -> SiteCheckSettings:
        """Build settings once and configure logging from them.

        Raises:
            ConfigurationError: If the configuration is missing or invalid.
        """
        if self._settings is not None:
            return self._settings

        try:
            settings = get_settings(self.config_file)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        level = self.log_level or ("DEBUG" if self.verbose else settings.logging.level)
        json_output = True if self.json_logs else settings.logging.json_output
        configure_logging(
            level, json_output=json_output, log_file=settings.logging.file
        )

        self._settings = settings
        return settings


pass_config = click.make_pass_decorator(ConfigContext, ensure=True)


def _fail(error: Exception) -> None:
    click.echo(f"Error: {error}", err=True)
    sys.exit(EXIT_ERROR)


def output_options(f: Callable[..., None]) -> Callable[..., None]:
    """Add --output and --output-file to a suite command."""
    f = click.option(
        "--output-file",
        type=click.Path(dir_okay=False, path_type=Path),
        help="Write the json or html output to this file instead of stdout",
    )(f)
    return click.option(
        "--output",
        "output_format",
        type=click.Choice(["console", "json", "html"]),
        default="console",
        help="Output format (console, json, or html)",
    )(f)


def _make_reporter(
    output_format: str, output_file: Path | None, verbose: bool
) -> Reporter:
    """Create the reporter for --output, checked before any suite runs.

    Raises:
        ConfigurationError: If --output-file is given with console output.
    """
    config: dict[str, Any] = {}
    if output_format == "console":
        if output_file is not None:
            raise ConfigurationError("--output-file requires --output json or html")
        config["verbose"] = verbose
    elif output_file is not None:
        config["output_file"] = output_file
    return create_reporter(output_format, config)


def _report(reporter: Reporter, summary: Summary, meta: ReportMeta) -> None:
    """Output the summary; raises ReportWriteError if a file cannot be written."""
    reporter.report(summary, meta)
    if isinstance(reporter, JSONReporter | HTMLReporter) and reporter.written_path:
        click.echo(f"Report written: {reporter.written_path}", err=True)


def _run_standalone(
    config_ctx: ConfigContext,
    make_suite: Callable[[SiteCheckSettings], Suite],
    output_format: str = "console",
    output_file: Path | None = None,
) -> None:
    """Run one suite on its own and exit with its verdict.

    A standalone suite does not skip on a missing precondition: an
    unreachable local server is a failure.
    """
    try:
        reporter = _make_reporter(output_format, output_file, config_ctx.verbose)
        settings = config_ctx.load_settings()
        suite = make_suite(settings)
        with run_context():
            summary = asyncio.run(SuiteRunner(honor_preconditions=False).run([suite]))
        _report(reporter, summary, ReportMeta(title=suite.description))
    except SiteCheckError as e:
        _fail(e)
        return

    sys.exit(EXIT_SUCCESS if summary.success else EXIT_FAILURE)


@click.group(invoke_without_command=True)
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(path_type=Path),
    help="Path to sitecheck.config.yaml configuration file",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output and debug logging",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Override the configured log level",
)
@click.option(
    "--json-logs",
    is_flag=True,
    help="Output logs as JSON (auto-detected by default)",
)
@click.version_option(version=__version__, prog_name="sitecheck")
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: Path | None,
    verbose: bool,
    log_level: str | None,
    json_logs: bool,
) -> None:
    """sitecheck - landing page verification toolkit.

    Audits performance with Lighthouse, runs cross-browser tests with
    Playwright and verifies the GitHub Pages deployment.

    Examples:

      # Run every suite and write the integration report
      sitecheck run

      # Only the checks against the deployed site
      sitecheck run --deployment-only

      # Minify styles.css and script.js
      sitecheck build
    """
    ctx.ensure_object(ConfigContext)
    config_ctx = ctx.obj
    config_ctx.config_file = config_file
    config_ctx.verbose = verbose
    config_ctx.log_level = log_level.upper() if log_level else None
    config_ctx.json_logs = json_logs

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command(name="version")
def version_cmd() -> None:
    """Show sitecheck version information."""
    click.echo(f"sitecheck v{__version__}")
    click.echo(f"Python: {sys.version.split()[0]}")
    click.echo(f"Platform: {sys.platform} ({platform.machine()})")


@cli.command(name="run")
@click.option(
    "--local-only",
    "scope",
    flag_value="local",
    help="Only run the suites against the local server",
)
@click.option(
    "--deployment-only",
    "scope",
    flag_value="deployment",
    help="Only run the deployment verification",
)
@click.option(
    "--install-deps",
    is_flag=True,
    help="npm install lighthouse and @playwright/test before running",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for the integration report",
)
@output_options
@pass_config
def run_cmd(
    config_ctx: ConfigContext,
    scope: str | None,
    install_deps: bool,
    output_dir: Path | None,
    output_format: str,
    output_file: Path | None,
) -> None:
    """Run all suites and write the integration report.

    Suites needing the local server are skipped when it is not running.

    Examples:

      sitecheck run
      sitecheck run --local-only --install-deps
      sitecheck run --output=json > summary.json
    """
    try:
        reporter = _make_reporter(output_format, output_file, config_ctx.verbose)
        settings = config_ctx.load_settings()
        integration = settings.integration
        if scope == "local":
            integration.run_deployment = False
        elif scope == "deployment":
            integration.run_local = False
        if install_deps:
            integration.install_dependencies = True
        if output_dir is not None:
            integration.output_dir = output_dir

        runner = IntegrationRunner(settings)
        with run_context():
            outcome = asyncio.run(runner.run())
        _report(reporter, outcome.summary, outcome.meta)
    except SiteCheckError as e:
        _fail(e)
        return

    # Keep stdout parseable when it carries a json or html document
    to_stderr = output_format != "console"
    click.echo(err=to_stderr)
    click.echo(f"JSON report: {outcome.json_path}", err=to_stderr)
    if outcome.html_path:
        click.echo(f"HTML report: {outcome.html_path}", err=to_stderr)
    if outcome.meta.requirements:
        click.echo("Requirements:", err=to_stderr)
        for req_id, text in outcome.meta.requirements.items():
            click.echo(f"  {req_id}: {text}", err=to_stderr)

    sys.exit(EXIT_SUCCESS if outcome.summary.success else EXIT_FAILURE)


@cli.command(name="lighthouse")
@output_options
@pass_config
def lighthouse_cmd(
    config_ctx: ConfigContext, output_format: str, output_file: Path | None
) -> None:
    """Run the Lighthouse performance audit against the local server."""
    _run_standalone(
        config_ctx, lambda s: LighthouseSuite(s.lighthouse), output_format, output_file
    )


@cli.command(name="browser")
@output_options
@pass_config
def browser_cmd(
    config_ctx: ConfigContext, output_format: str, output_file: Path | None
) -> None:
    """Run the cross-browser compatibility tests against the local server."""
    _run_standalone(
        config_ctx, lambda s: BrowserSuite(s.browser), output_format, output_file
    )


@cli.command(name="deployment")
@output_options
@pass_config
def deployment_cmd(
    config_ctx: ConfigContext, output_format: str, output_file: Path | None
) -> None:
    """Verify the GitHub Pages deployment of the configured domain."""
    _run_standalone(
        config_ctx, lambda s: DeploymentSuite(s.deployment), output_format, output_file
    )


@cli.command(name="build")
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory holding the sources (default: current directory)",
)
@pass_config
def build_cmd(config_ctx: ConfigContext, root: Path | None) -> None:
    """Minify styles.css and script.js into .min files."""
    try:
        settings = config_ctx.load_settings()
        if root is not None:
            settings.build.root = root
        stats = build_assets(settings.build)
    except SiteCheckError as e:
        _fail(e)
        return

    if not stats:
        click.echo("Nothing to minify.")
    for item in stats:
        click.echo(f"{item.source} -> {item.target}")
        click.echo(f"  Original: {item.original_size} bytes")
        click.echo(f"  Minified: {item.minified_size} bytes")
        click.echo(f"  Reduction: {item.reduction_percent}%")
    sys.exit(EXIT_SUCCESS)


@cli.command(name="verify")
@pass_config
def verify_cmd(config_ctx: ConfigContext) -> None:
    """Check the workflow file, CNAME and report directories."""
    try:
        settings = config_ctx.load_settings()
    except SiteCheckError as e:
        _fail(e)
        return

    report = verify_setup(settings)
    markers = {
        CheckLevel.OK: "✓",
        CheckLevel.WARNING: "!",
        CheckLevel.ERROR: "✗",
    }
    for check in report.checks:
        click.echo(f"  {markers[check.level]} {check.name}: {check.message}")

    if report.ok:
        click.echo("Setup looks good.")
        sys.exit(EXIT_SUCCESS)
    click.echo("Some setup checks failed.", err=True)
    sys.exit(EXIT_FAILURE)


@cli.command(name="init-config")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("sitecheck.config.yaml"),
    show_default=True,
)
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def init_config_cmd(output: Path, force: bool) -> None:
    """Write an example configuration file."""
    if output.exists() and not force:
        click.echo(f"Error: {output} already exists (use --force)", err=True)
        sys.exit(EXIT_ERROR)
    try:
        output.write_text(generate_example_config(), encoding="utf-8")
    except OSError as e:
        _fail(e)
        return
    get_logger(__name__).debug("config_written", path=str(output))
    click.echo(f"Wrote {output}")


def main() -> None:
    """Main entry point for the CLI."""
    cli(auto_envvar_prefix="SITECHECK")


if __name__ == "__main__":
    main()
