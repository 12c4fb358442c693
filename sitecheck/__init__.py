"""sitecheck - verification toolkit for a static landing page."""

__version__ = "1.0.0"
