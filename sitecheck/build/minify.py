"""Minify the site's stylesheet and script.

The transforms are regex based and tuned for the hand-written sources of a
single landing page; they are not general-purpose minifiers.
"""

import re
from pathlib import Path

import structlog
from pydantic import BaseModel

from sitecheck.core.exceptions import SiteCheckError
from sitecheck.core.logging import get_logger
from sitecheck.core.settings import BuildSettings

_BLOCK_COMMENT = re.compile(r"/\*[\s\S]*?\*/")
_WHITESPACE = re.compile(r"\s+")
_CSS_PUNCTUATION = re.compile(r"\s*([{}:;,>+~])\s*")
# Line comments, skipped when the rest of the line holds a quote (URLs, strings)
_JS_LINE_COMMENT = re.compile(r"//(?![^\n]*['\"`]).*$", re.MULTILINE)
_JS_PUNCTUATION = re.compile(r"\s*([{}();,=+\-*/<>!&|])\s*")


class MinifyStats(BaseModel):
    """Size change of one minified file."""

    source: Path
    target: Path
    original_size: int
    minified_size: int

    @property
    def reduction_percent(self) -> float:
        if self.original_size == 0:
            return 0.0
        return round(
            (self.original_size - self.minified_size) / self.original_size * 100, 1
        )


def minify_css(css: str) -> str:
    css = _BLOCK_COMMENT.sub("", css)
    css = _WHITESPACE.sub(" ", css)
    css = _CSS_PUNCTUATION.sub(r"\1", css)
    return css.replace(";}", "}").strip()


def minify_js(js: str) -> str:
    js = _JS_LINE_COMMENT.sub("", js)
    js = _BLOCK_COMMENT.sub("", js)
    js = _WHITESPACE.sub(" ", js)
    js = _JS_PUNCTUATION.sub(r"\1", js)
    return js.replace(";}", "}").strip()


def minified_name(source: Path) -> Path:
    """``styles.css`` -> ``styles.min.css``."""
    return source.with_name(f"{source.stem}.min{source.suffix}")


def _minify_file(source: Path, transform) -> MinifyStats:
    target = minified_name(source)
    try:
        original = source.read_text(encoding="utf-8")
        minified = transform(original)
        target.write_text(minified, encoding="utf-8")
    except OSError as e:
        raise SiteCheckError(f"Failed to minify {source}: {e}") from e
    return MinifyStats(
        source=source,
        target=target,
        original_size=len(original.encode("utf-8")),
        minified_size=len(minified.encode("utf-8")),
    )


def build(
    settings: BuildSettings,
    logger: structlog.stdlib.BoundLogger | None = None,
) -> list[MinifyStats]:
    """Write ``.min`` variants of the configured CSS and JS sources.

    Sources that do not exist are skipped.

    Returns:
        Stats for each file written.

    Raises:
        SiteCheckError: If a source cannot be read or a target written.
    """
    log = logger or get_logger(__name__)
    jobs = [
        (settings.root / settings.css_source, minify_css),
        (settings.root / settings.js_source, minify_js),
    ]

    stats = []
    for source, transform in jobs:
        if not source.exists():
            log.info("minify_source_missing", source=str(source))
            continue
        result = _minify_file(source, transform)
        log.info(
            "minified",
            source=str(result.source),
            target=str(result.target),
            original_size=result.original_size,
            minified_size=result.minified_size,
            reduction_percent=result.reduction_percent,
        )
        stats.append(result)
    return stats
