"""SEO issue detection over the fixed, fully aggregated page set.

Rules
-----
Per page, in this order:

``title`` / ``description``
    Missing or empty is an **error**; longer than 60 / 155 characters is a
    **warning**.

``duplicate-title`` / ``duplicate-description``
    Exact-string repeats are **warnings** on every page except the first one
    (in load order) to use the string, and name that first page.

``canonical``, ``open-graph``
    A missing canonical link, ``og:title``, ``og:description`` or ``og:image``
    is a **warning** each.

``image-alt``
    An ``<img>`` without an ``alt`` attribute is an **error**; an empty ``alt``
    is a **warning** (valid for decorative images, worth a review).

``broken-link``
    Every internal link occurrence that does not resolve against the site
    index is an **error**.

``thin-content``
    A content page below ``min_word_count`` words is a **warning**.

Across pages, after all of the above:

``orphan-page``
    A content page that no internal link resolves to is a **warning**.
"""

import logging
from typing import List, Optional

from seo_checker.models.audit_config import AuditConfig
from seo_checker.models.finding import Finding, Severity
from seo_checker.models.page import Page
from seo_checker.services.autofix import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH
from seo_checker.services.site_graph import SiteGraph

logger = logging.getLogger(__name__)

# Image sources are shortened to this many characters in messages
_SRC_PREVIEW = 80


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class _Findings:
    """Append-only collector bound to the page being checked."""

    def __init__(self) -> None:
        self.items: List[Finding] = []

    def add(self, severity: Severity, url_path: str, category: str, message: str) -> None:
        self.items.append(
            Finding(severity=severity, url_path=url_path, category=category, message=message)
        )


def _check_title(page: Page, graph: SiteGraph, out: _Findings) -> None:
    loc = page.url_path
    if _blank(page.title):
        out.add("error", loc, "title", "Missing <title> tag")
        return
    if len(page.title) > TITLE_MAX_LENGTH:
        out.add(
            "warning",
            loc,
            "title",
            f"Title is {len(page.title)} chars (recommended ≤{TITLE_MAX_LENGTH})",
        )
    first = graph.title_owners.get(page.title)
    if first is not None and first != loc:
        out.add("warning", loc, "duplicate-title", f"Duplicate title with {first}")


def _check_description(page: Page, graph: SiteGraph, out: _Findings) -> None:
    loc = page.url_path
    if _blank(page.description):
        out.add("error", loc, "description", "Missing meta description")
        return
    if len(page.description) > DESCRIPTION_MAX_LENGTH:
        out.add(
            "warning",
            loc,
            "description",
            f"Meta description is {len(page.description)} chars "
            f"(recommended ≤{DESCRIPTION_MAX_LENGTH})",
        )
    first = graph.description_owners.get(page.description)
    if first is not None and first != loc:
        out.add("warning", loc, "duplicate-description", f"Duplicate description with {first}")


def _check_head_tags(page: Page, out: _Findings) -> None:
    loc = page.url_path
    if _blank(page.canonical):
        out.add("warning", loc, "canonical", "Missing canonical tag")
    for name, value in (
        ("og:title", page.og_title),
        ("og:description", page.og_description),
        ("og:image", page.og_image),
    ):
        if _blank(value):
            out.add("warning", loc, "open-graph", f"Missing {name}")


def _check_images(page: Page, out: _Findings) -> None:
    for image in page.images:
        src = image.src[:_SRC_PREVIEW]
        if not image.has_alt:
            out.add("error", page.url_path, "image-alt", f"Image missing alt attribute: {src}")
        elif image.alt == "":
            out.add(
                "warning",
                page.url_path,
                "image-alt",
                f"Image has empty alt (OK if decorative): {src}",
            )


def _check_links(page: Page, graph: SiteGraph, out: _Findings) -> None:
    for href in graph.broken_links.get(page.url_path, []):
        out.add("error", page.url_path, "broken-link", f"Broken internal link: {href}")


def _check_thin_content(page: Page, config: AuditConfig, out: _Findings) -> None:
    if config.is_content_page(page.url_path) and page.word_count < config.min_word_count:
        out.add(
            "warning",
            page.url_path,
            "thin-content",
            f"Thin content: {page.word_count} words (minimum: {config.min_word_count})",
        )


def detect_issues(pages: List[Page], graph: SiteGraph, config: AuditConfig) -> List[Finding]:
    """Evaluate every rule against *pages* and return findings in detection order.

    *pages* must be in load order and *graph* must have been built from the
    same list, since duplicate ownership depends on it.
    """
    out = _Findings()
    for page in pages:
        _check_title(page, graph, out)
        _check_description(page, graph, out)
        _check_head_tags(page, out)
        _check_images(page, out)
        _check_links(page, graph, out)
        _check_thin_content(page, config, out)

    for page in pages:
        if config.is_content_page(page.url_path) and graph.inbound(page.url_path) == 0:
            out.add(
                "warning",
                page.url_path,
                "orphan-page",
                "Orphan page: no inbound internal links detected",
            )

    logger.info("Detector: %d finding(s) across %d pages", len(out.items), len(pages))
    return out.items
