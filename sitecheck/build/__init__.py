"""Asset minification."""

from sitecheck.build.minify import MinifyStats, build, minify_css, minify_js

__all__ = ["MinifyStats", "build", "minify_css", "minify_js"]
