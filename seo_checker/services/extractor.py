"""Tolerant SEO field extraction from rendered HTML.

This is a best-match scanner built on regular expressions, not an HTML
parser.  Its behaviour is deliberate and stable:

* first match wins: only the first ``<title>``, matching ``<meta>`` or
  canonical ``<link>`` is read;
* no nesting awareness: tags are matched as flat text;
* malformed or unterminated tags simply do not match, and the field is
  reported absent (``None``) rather than raising;
* attribute values must be quoted and may not contain ``>`` or either quote
  character.

The same patterns are used by :mod:`seo_checker.services.autofix` to locate
the spans it rewrites, so a document is always read and repaired the same way.
"""

import re
from functools import lru_cache
from typing import List, NamedTuple, Optional, Pattern

from seo_checker.models.page import ImageRef
from seo_checker.services.normalizer import count_words, strip_html

TITLE_RE = re.compile(r"<title[^>]*>([\s\S]*?)</title>", re.IGNORECASE)

CANONICAL_RE = re.compile(
    r"<link\s+(?:"
    r"[^>]*?rel=[\"']canonical[\"'][^>]*?href=[\"']([^\"']*)[\"']"
    r"|[^>]*?href=[\"']([^\"']*)[\"'][^>]*?rel=[\"']canonical[\"']"
    r")",
    re.IGNORECASE,
)

IMG_RE = re.compile(r"<img\s+([^>]*)>", re.IGNORECASE)

# The look-behind keeps data-src / data-alt from being read as src / alt
_SRC_RE = re.compile(r"(?<![\w-])src=[\"']([^\"']*?)[\"']", re.IGNORECASE)
_ALT_VALUE_RE = re.compile(r"(?<![\w-])alt=[\"']([^\"']*?)[\"']", re.IGNORECASE)
_ALT_PRESENT_RE = re.compile(r"(?<![\w-])alt(?=\s*=|[\s/]|$)", re.IGNORECASE)
_QUOTED_VALUE_RE = re.compile(r"\"[^\"]*\"|'[^']*'")

ANCHOR_RE = re.compile(
    r"<a\s+[^>]*?(?<![\w-])href=[\"']([^\"']*?)[\"'][^>]*>", re.IGNORECASE
)


class PageFields(NamedTuple):
    title: Optional[str]
    description: Optional[str]
    og_title: Optional[str]
    og_description: Optional[str]
    og_image: Optional[str]
    canonical: Optional[str]
    images: List[ImageRef]
    internal_links: List[str]
    word_count: int


@lru_cache(maxsize=None)
def meta_pattern(name: str) -> Pattern[str]:
    """Return the pattern for a ``<meta>`` tag whose name or property is *name*.

    Either ``name``/``property`` or ``content`` may come first in the tag.
    """
    target = re.escape(name)
    return re.compile(
        r"<meta\s+(?:"
        rf"[^>]*?(?:name|property)=[\"']{target}[\"'][^>]*?content=[\"']([^\"']*)[\"']"
        rf"|[^>]*?content=[\"']([^\"']*)[\"'][^>]*?(?:name|property)=[\"']{target}[\"']"
        r")",
        re.IGNORECASE,
    )


def _first_group(match) -> str:
    """Return the first participating group of an either-order match."""
    for value in match.groups():
        if value is not None:
            return value
    return ""


def extract_title(html: str) -> Optional[str]:
    match = TITLE_RE.search(html)
    return match.group(1).strip() if match else None


def extract_meta(html: str, name: str) -> Optional[str]:
    """Return the trimmed ``content`` of the first matching ``<meta>`` tag."""
    match = meta_pattern(name).search(html)
    return _first_group(match).strip() if match else None


def extract_canonical(html: str) -> Optional[str]:
    match = CANONICAL_RE.search(html)
    return _first_group(match).strip() if match else None


def parse_image_attrs(attrs: str) -> ImageRef:
    """Build an :class:`ImageRef` from the attribute text of one ``<img>`` tag.

    ``has_alt`` is true whenever an ``alt`` attribute appears at all, including
    ``alt=""`` and a bare ``alt``; both of those yield an empty ``alt``.
    """
    src_match = _SRC_RE.search(attrs)
    alt_match = _ALT_VALUE_RE.search(attrs)
    has_alt = (
        alt_match is not None
        or _ALT_PRESENT_RE.search(_QUOTED_VALUE_RE.sub('""', attrs)) is not None
    )
    if alt_match:
        alt: Optional[str] = alt_match.group(1).strip()
    elif has_alt:
        alt = ""
    else:
        alt = None
    return ImageRef(src=src_match.group(1) if src_match else "", alt=alt, has_alt=has_alt)


def extract_images(html: str) -> List[ImageRef]:
    return [parse_image_attrs(match.group(1)) for match in IMG_RE.finditer(html)]


def extract_internal_links(html: str) -> List[str]:
    """Return site-internal hrefs in document order, duplicates included.

    Internal means starting with a single ``/``; ``//host/...`` is
    protocol-relative and therefore external.  Fragments and query strings are
    removed.
    """
    links: List[str] = []
    for match in ANCHOR_RE.finditer(html):
        href = match.group(1)
        if href.startswith("/") and not href.startswith("//"):
            links.append(href.split("#")[0].split("?")[0])
    return links


def extract(html: str) -> PageFields:
    """Extract every SEO-relevant field from *html*.  Pure; never raises on bad markup."""
    return PageFields(
        title=extract_title(html),
        description=extract_meta(html, "description"),
        og_title=extract_meta(html, "og:title"),
        og_description=extract_meta(html, "og:description"),
        og_image=extract_meta(html, "og:image"),
        canonical=extract_canonical(html),
        images=extract_images(html),
        internal_links=extract_internal_links(html),
        word_count=count_words(strip_html(html)),
    )
