"""Content normalisation: rendered markup to plain text and a word count."""

import re

from seo_checker.services.sanitizer import sanitize

_WHITESPACE_RE = re.compile(r"\s+")


def _collapse(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def strip_html(html: str) -> str:
    """Return all remaining text of *html* with whitespace collapsed.

    Script, style, nav, header and footer blocks are dropped entirely, as are
    named entities and every other tag.  Head text such as the ``<title>``
    is kept.
    """
    return _collapse(sanitize(html).get_text(separator=" "))


def body_text(html: str) -> str:
    """Like :func:`strip_html`, restricted to the ``<body>`` of *html*."""
    soup = sanitize(html)
    node = soup.body or soup
    return _collapse(node.get_text(separator=" "))


def count_words(text: str) -> int:
    """Count maximal runs of non-whitespace characters in *text*."""
    return len(text.split())
