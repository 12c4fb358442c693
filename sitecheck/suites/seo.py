"""SEO metadata checks over a served HTML page.

All functions here are pure: they take page HTML and return findings.
A missing tag is a failed check, never an exception.
"""

import json

from bs4 import BeautifulSoup
from pydantic import BaseModel, Field


class MetaCheck(BaseModel):
    """A tag the page is expected to carry.

    The value is read from ``value_attr`` of the first matching tag, or from
    its text when ``value_attr`` is None.
    """

    name: str
    tag: str = "meta"
    attrs: dict[str, str] = Field(default_factory=dict)
    value_attr: str | None = "content"
    required: bool = True


class MetaCheckResult(BaseModel):
    """Outcome of a single MetaCheck."""

    name: str
    required: bool
    found: bool
    value: str | None = None


class SeoReport(BaseModel):
    """All SEO findings for one page."""

    meta: list[MetaCheckResult] = Field(default_factory=list)
    structured_data: list[str] = Field(
        default_factory=list,
        description="@type of each JSON-LD block ('Invalid JSON-LD' if unparsable)",
    )
    favicon: str | None = None

    @property
    def passed(self) -> bool:
        """True when every required tag was found."""
        return all(r.found for r in self.meta if r.required)

    @property
    def missing_required(self) -> list[str]:
        return [r.name for r in self.meta if r.required and not r.found]


META_CHECKS = [
    MetaCheck(name="Title", tag="title", value_attr=None),
    MetaCheck(name="Description", attrs={"name": "description"}),
    MetaCheck(name="OG Title", attrs={"property": "og:title"}),
    MetaCheck(name="OG Description", attrs={"property": "og:description"}),
    MetaCheck(name="OG Image", attrs={"property": "og:image"}),
    MetaCheck(name="OG URL", attrs={"property": "og:url"}),
    MetaCheck(name="Twitter Card", attrs={"name": "twitter:card"}),
    MetaCheck(
        name="Canonical URL",
        tag="link",
        attrs={"rel": "canonical"},
        value_attr="href",
    ),
    MetaCheck(name="Theme Color", attrs={"name": "theme-color"}, required=False),
]


def soup_of(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def _check_value(soup: BeautifulSoup, check: MetaCheck) -> str | None:
    tag = soup.find(check.tag, attrs=check.attrs)
    if tag is None:
        return None
    if check.value_attr is None:
        value = tag.get_text()
    else:
        value = tag.get(check.value_attr)
    value = str(value or "").strip()
    return value or None


def check_meta_tags(
    html: str, checks: list[MetaCheck] | None = None
) -> list[MetaCheckResult]:
    """Run each MetaCheck against ``html``.

    A tag that is present but empty counts as missing.
    """
    soup = soup_of(html)
    results = []
    for check in checks if checks is not None else META_CHECKS:
        value = _check_value(soup, check)
        results.append(
            MetaCheckResult(
                name=check.name,
                required=check.required,
                found=value is not None,
                value=value,
            )
        )
    return results


def structured_data_types(html: str) -> list[str]:
    types = []
    for block in soup_of(html).find_all("script", type="application/ld+json"):
        try:
            data = json.loads((block.string or "").strip())
        except json.JSONDecodeError:
            types.append("Invalid JSON-LD")
            continue
        if isinstance(data, dict):
            types.append(str(data.get("@type", "Unknown type")))
        else:
            types.append("Unknown type")
    return types


def find_favicon(html: str) -> str | None:
    # rel is multi-valued, so "icon" also matches "shortcut icon"
    tag = soup_of(html).find("link", rel="icon", href=True)
    return str(tag["href"]) if tag is not None else None


def analyze_page(html: str) -> SeoReport:
    """Run all SEO checks against a page."""
    return SeoReport(
        meta=check_meta_tags(html),
        structured_data=structured_data_types(html),
        favicon=find_favicon(html),
    )
