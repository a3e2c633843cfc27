"""Deterministic, idempotent repairs applied to a page before it is checked.

Every rule only fires on a condition its own output removes (an over-long
title, an absent tag, an ``<img>`` without ``alt``), so running the engine
again over its own output applies no further fixes.  Each repair updates both
the markup and the :class:`~seo_checker.models.page.Page` fields, so the
checks that follow see exactly what was written to disk.
"""

import html as html_lib
import logging
import os
import re
from typing import List, Optional, Tuple
from urllib.parse import unquote

from seo_checker.models.audit_config import AuditConfig
from seo_checker.models.finding import Fix
from seo_checker.models.page import Page
from seo_checker.services.extractor import IMG_RE, TITLE_RE, extract, parse_image_attrs
from seo_checker.services.normalizer import body_text

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 60
# A word-boundary cut this close to the start would lose most of the title
_TITLE_MIN_WORD_CUT = 20

DESCRIPTION_MAX_LENGTH = 155
_DESCRIPTION_MIN_CUT = 80
_DESCRIPTION_MIN_LENGTH = 20
_ELLIPSIS = "..."
_SENTENCE_TERMINATORS = ".!?"

_HEAD_CLOSE_RE = re.compile(r"</head\s*>", re.IGNORECASE)
_IMG_OPEN_RE = re.compile(r"^<img", re.IGNORECASE)
_SEPARATOR_RE = re.compile(r"[-_\s]+")
_ABSOLUTE_URL_RE = re.compile(r"^(?:[a-z][a-z0-9+.-]*:)?//", re.IGNORECASE)

# Filename tokens rendered in capitals when an alt text is derived
_ACRONYMS = {
    "ai",
    "api",
    "cms",
    "css",
    "cta",
    "faq",
    "gif",
    "html",
    "http",
    "jpg",
    "js",
    "json",
    "og",
    "pdf",
    "png",
    "rss",
    "seo",
    "sql",
    "svg",
    "ui",
    "url",
    "ux",
    "xml",
}


# ---------------------------------------------------------------------------
# Text generation
# ---------------------------------------------------------------------------

def truncate_title(title: str) -> str:
    """Shorten *title* to at most 60 characters.

    Cuts at the last space at or before position 60 when that space lies past
    position 20, otherwise hard-cuts at 60.  The result is always a prefix of
    *title*.
    """
    if len(title) <= TITLE_MAX_LENGTH:
        return title
    cut = title.rfind(" ", 0, TITLE_MAX_LENGTH + 1)
    if cut > _TITLE_MIN_WORD_CUT:
        return title[:cut].rstrip()
    return title[:TITLE_MAX_LENGTH].rstrip()


def generate_description(text: str, max_length: int = DESCRIPTION_MAX_LENGTH) -> str:
    """Derive a meta description of at most *max_length* characters from body *text*."""
    text = text.strip()
    if len(text) <= max_length:
        return text

    window = text[:max_length]
    sentence_end = max(window.rfind(char) for char in _SENTENCE_TERMINATORS)
    if sentence_end > _DESCRIPTION_MIN_CUT:
        return window[: sentence_end + 1]

    room = max_length - len(_ELLIPSIS)
    space = text.rfind(" ", 0, room + 1)
    if space > _DESCRIPTION_MIN_CUT:
        return text[:space].rstrip() + _ELLIPSIS
    return text[:room].rstrip() + _ELLIPSIS


def alt_from_src(src: str) -> str:
    """Turn an image URL into readable alt text.

    ``/img/seo-audit_checklist.png`` becomes ``SEO audit checklist``.
    """
    path = src.split("#")[0].split("?")[0]
    name = unquote(path.rstrip("/").rsplit("/", 1)[-1])
    stem, _ext = os.path.splitext(name)
    words = [word for word in _SEPARATOR_RE.split(stem) if word]
    words = [word.upper() if word.lower() in _ACRONYMS else word for word in words]
    text = " ".join(words)
    return text[:1].upper() + text[1:]


def absolute_url(site_url: str, path: str) -> str:
    """Join a root-relative *path* onto *site_url*; absolute URLs pass through."""
    if not site_url or _ABSOLUTE_URL_RE.match(path):
        return path
    return site_url.rstrip("/") + "/" + path.lstrip("/")


# ---------------------------------------------------------------------------
# Markup edits
# ---------------------------------------------------------------------------

def _attr(value: str) -> str:
    """Escape *value* for a double-quoted attribute without double-escaping."""
    return html_lib.escape(html_lib.unescape(value), quote=True)


def _inject_head(html: str, tag: str) -> str:
    """Insert *tag* right before ``</head>``, or at the start of the document."""
    match = _HEAD_CLOSE_RE.search(html)
    if match:
        return f"{html[: match.start()]}{tag}\n{html[match.start():]}"
    return f"{tag}\n{html}"


def _replace_title(html: str, title: str) -> str:
    match = TITLE_RE.search(html)
    if not match:
        return html
    start, end = match.span(1)
    return html[:start] + title + html[end:]


def _meta_tag(name: str, content: str) -> str:
    attr = "property" if name.startswith("og:") else "name"
    return f'<meta {attr}="{name}" content="{_attr(content)}">'


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

def _fix_title(page: Page, html: str, fixes: List[Fix]) -> str:
    if page.title is None or len(page.title) <= TITLE_MAX_LENGTH:
        return html
    original = page.title
    page.title = truncate_title(original)
    fixes.append(
        Fix(
            url_path=page.url_path,
            field="title",
            description=f"Truncated title from {len(original)} to {len(page.title)} chars",
        )
    )
    return _replace_title(html, page.title)


def _fix_description(page: Page, html: str, fixes: List[Fix]) -> str:
    if page.description is not None:
        return html
    text = body_text(html)
    # Measured on the escaped attribute value, as the extractor reads it back
    limit = DESCRIPTION_MAX_LENGTH
    candidate = _attr(generate_description(text, limit))
    while len(candidate) > DESCRIPTION_MAX_LENGTH and limit > _DESCRIPTION_MIN_LENGTH:
        limit -= 1
        candidate = _attr(generate_description(text, limit))
    if len(candidate) <= _DESCRIPTION_MIN_LENGTH or len(candidate) > DESCRIPTION_MAX_LENGTH:
        logger.warning(
            "Auto-fix: no usable description for %s (%d chars)",
            page.url_path,
            len(candidate),
        )
        return html
    page.description = candidate
    fixes.append(
        Fix(
            url_path=page.url_path,
            field="description",
            description=f"Generated meta description from page content ({len(candidate)} chars)",
        )
    )
    return _inject_head(html, _meta_tag("description", candidate))


def _fix_canonical(page: Page, html: str, site_url: str, fixes: List[Fix]) -> str:
    if page.canonical is not None or not site_url:
        return html
    page.canonical = f"{site_url}{page.url_path}"
    fixes.append(
        Fix(
            url_path=page.url_path,
            field="canonical",
            description=f"Added canonical link {page.canonical}",
        )
    )
    return _inject_head(html, f'<link rel="canonical" href="{_attr(page.canonical)}">')


def _fix_og_copy(
    page: Page,
    html: str,
    field: str,
    source: Optional[str],
    fixes: List[Fix],
) -> str:
    """Add ``og:title`` / ``og:description`` copied from *source* when it is usable."""
    attr = field.replace(":", "_")
    if getattr(page, attr) is not None or not source:
        return html
    setattr(page, attr, source)
    source_name = field.split(":", 1)[1]
    fixes.append(
        Fix(url_path=page.url_path, field=field, description=f"Added {field} from page {source_name}")
    )
    return _inject_head(html, _meta_tag(field, source))


def _fix_og_image(
    page: Page, html: str, config: AuditConfig, site_url: str, fixes: List[Fix]
) -> str:
    if page.og_image is not None or not config.default_og_image:
        return html
    page.og_image = absolute_url(site_url, config.default_og_image)
    fixes.append(
        Fix(
            url_path=page.url_path,
            field="og:image",
            description=f"Added default og:image {page.og_image}",
        )
    )
    return _inject_head(html, _meta_tag("og:image", page.og_image))


def _fix_image_alts(page: Page, html: str, fixes: List[Fix]) -> str:
    position = 0

    def _rewrite(match) -> str:
        nonlocal position
        index = position
        position += 1
        image = parse_image_attrs(match.group(1))
        if image.has_alt or not image.src:
            return match.group(0)
        alt = alt_from_src(image.src)
        if not alt:
            return match.group(0)
        if index < len(page.images):
            page.images[index] = image.model_copy(update={"alt": alt, "has_alt": True})
        fixes.append(
            Fix(
                url_path=page.url_path,
                field="img-alt",
                description=f'Added alt="{alt}" to {image.src[:80]}',
            )
        )
        return _IMG_OPEN_RE.sub(f'<img alt="{_attr(alt)}"', match.group(0), count=1)

    return IMG_RE.sub(_rewrite, html)


def apply_fixes(
    page: Page,
    html: str,
    config: AuditConfig,
    site_url: str = "",
) -> Tuple[str, List[Fix]]:
    """Repair *page* in place and return the rewritten markup with the fix log.

    *site_url* is the resolved base URL (see
    :meth:`~seo_checker.models.audit_config.AuditConfig.resolve_site_url`);
    without it no canonical link is synthesised and og:image stays relative.
    """
    fixes: List[Fix] = []
    html = _fix_title(page, html, fixes)
    html = _fix_description(page, html, fixes)
    html = _fix_canonical(page, html, site_url, fixes)
    html = _fix_og_copy(page, html, "og:title", page.title, fixes)
    html = _fix_og_copy(page, html, "og:description", page.description, fixes)
    html = _fix_og_image(page, html, config, site_url, fixes)
    html = _fix_image_alts(page, html, fixes)

    if fixes:
        _sync_fields(page, html)
        logger.debug("Auto-fix: %d fix(es) for %s", len(fixes), page.url_path)
    return html, fixes


def _sync_fields(page: Page, html: str) -> None:
    """Reset *page*'s extracted fields to what the rewritten *html* yields."""
    fields = extract(html)
    page.title = fields.title
    page.description = fields.description
    page.og_title = fields.og_title
    page.og_description = fields.og_description
    page.og_image = fields.og_image
    page.canonical = fields.canonical
    page.images = fields.images
    page.word_count = fields.word_count
