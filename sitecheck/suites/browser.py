"""Cross-browser compatibility suite driven by Playwright."""

from datetime import datetime
from pathlib import Path

import structlog
from jinja2 import BaseLoader, Environment

from sitecheck.core.settings import BrowserSettings
from sitecheck.reporters.writer import ReportWriter
from sitecheck.runner.models import SuiteStatus
from sitecheck.runner.tools import ToolRunner

from .base import LocalServerSuite, filesystem_timestamp

SPEC_FILE_NAME = "browser-tests.spec.js"

PLAYWRIGHT_TEMPLATE = """\
const { test, expect } = require('@playwright/test');

const URL = {{ url | tojson }};
const EXPECTED_TITLE = {{ expected_title | tojson }};
const MAX_LOAD_MS = {{ max_load_ms }};
const SCREENSHOT_DIR = {{ screenshot_dir | tojson }};
const VIEWPORTS = {{ viewports | tojson }};

VIEWPORTS.forEach(viewport => {
  test(`Responsive design - ${viewport.name} (${viewport.width}x${viewport.height})`, async ({ page }) => {
    const errors = [];
    page.on('console', msg => {
      if (msg.type() === 'error') {
        errors.push(msg.text());
      }
    });

    await page.setViewportSize({ width: viewport.width, height: viewport.height });
    await page.goto(URL);
    await page.waitForLoadState('networkidle');

    expect(await page.title()).toContain(EXPECTED_TITLE);
    await expect(page.locator('.hero-image')).toBeVisible();
    await expect(page.locator('nav[role="navigation"]')).toBeVisible();
    await expect(page.locator('main[role="main"]')).toBeVisible();

    await page.keyboard.press('Tab');
    const focused = await page.evaluate(() => document.activeElement.tagName);
    expect(['A', 'BUTTON', 'INPUT'].includes(focused)).toBeTruthy();

    await page.screenshot({
      path: `${SCREENSHOT_DIR}/${viewport.name.toLowerCase().replace(/ /g, '-')}-screenshot.png`,
      fullPage: true
    });

    await page.reload();
    await page.waitForLoadState('networkidle');
    if (errors.length > 0) {
      console.warn(`Console errors on ${viewport.name}:`, errors);
    }
  });
});

test('Animation and interaction tests', async ({ page }) => {
  await page.goto(URL);
  await page.waitForLoadState('networkidle');
  await expect(page.locator('.hero-picture')).toBeVisible();

  await page.emulateMedia({ reducedMotion: 'reduce' });
  await page.reload();
  await page.waitForLoadState('networkidle');

  const animationDuration = await page.evaluate(() => {
    const element = document.querySelector('.hero-picture');
    return window.getComputedStyle(element).animationDuration;
  });
  expect(animationDuration === '0s' || parseFloat(animationDuration) < 0.1).toBeTruthy();
});

test('Accessibility compliance', async ({ page }) => {
  await page.goto(URL);
  await page.waitForLoadState('networkidle');

  await expect(page.locator('.skip-link')).toBeInViewport({ ratio: 0 });

  await page.keyboard.press('Tab');
  await expect(page.locator(':focus')).toBeVisible();

  expect(await page.locator('[aria-label]').count()).toBeGreaterThan(0);
  await expect(page.locator('main[role="main"]')).toBeVisible();
  await expect(page.locator('nav[role="navigation"]')).toBeVisible();
  expect(await page.locator('h1').count()).toBe(1);
});

test('Performance metrics', async ({ page }) => {
  await page.goto(URL);

  const startTime = Date.now();
  await page.waitForLoadState('networkidle');
  expect(Date.now() - startTime).toBeLessThan(MAX_LOAD_MS);

  for (const img of await page.locator('img').all()) {
    expect(await img.evaluate(el => el.naturalWidth)).toBeGreaterThan(0);
    expect(await img.evaluate(el => el.naturalHeight)).toBeGreaterThan(0);
  }
});

test('WebP image support', async ({ page }) => {
  await page.goto(URL);
  await page.waitForLoadState('networkidle');

  for (const picture of await page.locator('picture').all()) {
    expect(await picture.locator('source[type="image/webp"]').count()).toBeGreaterThan(0);
  }
});
"""

_env = Environment(loader=BaseLoader(), autoescape=False, keep_trailing_newline=True)


def render_playwright_spec(settings: BrowserSettings) -> str:
    """Render the Playwright test file for the configured site."""
    template = _env.from_string(PLAYWRIGHT_TEMPLATE)
    return template.render(
        url=settings.url,
        expected_title=settings.expected_title,
        max_load_ms=settings.max_load_ms,
        screenshot_dir=settings.output_dir.as_posix(),
        viewports=[v.model_dump() for v in settings.viewports],
    )


class BrowserSuite(LocalServerSuite):
    """Runs the generated Playwright tests once per configured browser."""

    description = "Cross-browser compatibility tests"
    details = "Responsive design, animations, and accessibility across browsers"

    def __init__(
        self,
        settings: BrowserSettings,
        tools: ToolRunner | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        super().__init__(tools=tools, logger=logger)
        self.settings = settings
        self.url = settings.url
        self.browser_results: dict[str, SuiteStatus] = {}
        self.summary_path: Path | None = None

    @property
    def name(self) -> str:
        return "browser_tests"

    def write_spec(self) -> Path:
        """Write the Playwright test file, replacing any previous one."""
        output_dir = self._ensure_output_dir(self.settings.output_dir)
        spec_path = output_dir / SPEC_FILE_NAME
        spec_path.write_text(render_playwright_spec(self.settings), encoding="utf-8")
        self._logger.info("browser_spec_generated", path=str(spec_path))
        return spec_path

    async def install_browsers(self) -> bool:
        result = await self.tools.run(
            ["npx", "playwright", "install"], timeout=self.settings.timeout_seconds
        )
        if not result.ok:
            self._logger.warning(
                "playwright_install_failed", error=result.error, continuing=True
            )
        return result.ok

    async def run(self) -> bool:
        await self.ensure_server()

        spec_path = self.write_spec()
        await self.install_browsers()

        results: dict[str, SuiteStatus] = {}
        for browser in self.settings.browsers:
            self._logger.info("browser_test_started", browser=browser)
            result = await self.tools.run(
                [
                    "npx",
                    "playwright",
                    "test",
                    str(spec_path),
                    f"--project={browser}",
                    "--reporter=line",
                ],
                timeout=self.settings.timeout_seconds,
            )
            if result.missing:
                result.raise_for_status()
            status = SuiteStatus.PASSED if result.ok else SuiteStatus.FAILED
            results[browser] = status
            self._logger.info(
                "browser_test_finished",
                browser=browser,
                status=status.value,
                error=result.error,
            )

        self.browser_results = results
        self.summary_path = self._write_summary(results)

        passed = all(s is SuiteStatus.PASSED for s in results.values())
        self._logger.info(
            "browser_tests_completed",
            passed=passed,
            summary=str(self.summary_path),
        )
        return passed

    def _write_summary(self, results: dict[str, SuiteStatus]) -> Path:
        now = datetime.now()
        data = {
            "timestamp": now.isoformat(),
            "url": self.settings.url,
            "results": {browser: status.value for browser, status in results.items()},
            "viewports": [v.model_dump() for v in self.settings.viewports],
        }
        writer = ReportWriter(self.settings.output_dir, logger=self._logger)
        return writer.write_json(
            data, f"browser-test-summary-{filesystem_timestamp(now)}"
        )
