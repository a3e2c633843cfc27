"""Whole-site aggregation: URL index, inbound link counts, duplicate owners.

Nothing here is global.  :func:`build_site_graph` folds over the complete,
load-ordered page list and returns a :class:`SiteGraph` that the issue
detector consumes; it must only be called once every page has been extracted
and fixed.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from seo_checker.models.page import Page
from seo_checker.services.paths import candidate_forms, toggle_trailing_slash

logger = logging.getLogger(__name__)


class SiteIndex:
    """Known URL paths plus their slash-toggled variants.

    Every member maps to the canonical ``url_path`` of the page that owns it.
    When a variant of one page is the canonical path of another (``/a`` from
    ``a.html`` next to ``/a/`` from ``a/index.html``), the canonical owner wins.
    """

    def __init__(self, url_paths: Iterable[str]):
        canonical = list(url_paths)
        self._owners: Dict[str, str] = {}
        for path in canonical:
            self._owners.setdefault(toggle_trailing_slash(path), path)
        for path in canonical:
            self._owners[path] = path

    def __contains__(self, path: str) -> bool:
        return path in self._owners

    def __len__(self) -> int:
        return len(self._owners)

    def resolve(self, href: str) -> Optional[str]:
        """Return the canonical path *href* points at, or ``None`` if it is broken.

        *href* resolves when it, its with-slash form or its without-slash form
        is in the index.  The forms are tried in that order and the first hit
        decides the single owner.
        """
        for form in candidate_forms(href):
            owner = self._owners.get(form)
            if owner is not None:
                return owner
        return None


@dataclass
class SiteGraph:
    index: SiteIndex
    inbound_counts: Dict[str, int]
    broken_links: Dict[str, List[str]]  # url_path -> unresolved hrefs, per occurrence
    title_owners: Dict[str, str] = field(default_factory=dict)
    description_owners: Dict[str, str] = field(default_factory=dict)

    def inbound(self, url_path: str) -> int:
        return self.inbound_counts.get(url_path, 0)


def build_site_graph(pages: List[Page]) -> SiteGraph:
    """Aggregate *pages* (in load order) into a :class:`SiteGraph`.

    Each internal link occurrence increments the inbound count of exactly one
    page, the one it resolves to; unresolved occurrences are recorded against
    the linking page.  Title and description owners record the first page, in
    load order, to use each exact string.
    """
    index = SiteIndex(page.url_path for page in pages)
    inbound_counts: Dict[str, int] = {page.url_path: 0 for page in pages}
    broken_links: Dict[str, List[str]] = {}
    title_owners: Dict[str, str] = {}
    description_owners: Dict[str, str] = {}

    for page in pages:
        for href in page.internal_links:
            owner = index.resolve(href)
            if owner is None:
                broken_links.setdefault(page.url_path, []).append(href)
            else:
                inbound_counts[owner] += 1

        if page.title:
            title_owners.setdefault(page.title, page.url_path)
        if page.description:
            description_owners.setdefault(page.description, page.url_path)

    logger.info(
        "Site graph: %d pages, %d indexed paths, %d broken link(s)",
        len(pages),
        len(index),
        sum(len(hrefs) for hrefs in broken_links.values()),
    )
    return SiteGraph(
        index=index,
        inbound_counts=inbound_counts,
        broken_links=broken_links,
        title_owners=title_owners,
        description_owners=description_owners,
    )
