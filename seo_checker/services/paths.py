"""Path normalisation: built file locations to canonical site URL paths."""

import re
from typing import Tuple

_INDEX_RE = re.compile(r"/index\.html$")
_HTML_RE = re.compile(r"\.html$")


def url_path_for(file_path: str) -> str:
    """Map a site-relative file path to its canonical URL path.

    ``/blog/foo/index.html`` becomes ``/blog/foo/`` and ``/about.html`` becomes
    ``/about``.  Backslashes are treated as separators and a leading ``/`` is
    added when missing.
    """
    path = file_path.replace("\\", "/")
    if not path.startswith("/"):
        path = "/" + path
    if _INDEX_RE.search(path):
        return _INDEX_RE.sub("/", path)
    return _HTML_RE.sub("", path)


def toggle_trailing_slash(path: str) -> str:
    """Return *path* with its trailing slash removed, or added when absent."""
    if path.endswith("/"):
        return path[:-1]
    return path + "/"


def candidate_forms(href: str) -> Tuple[str, str, str]:
    """Return the equivalence forms of *href*: (as given, with slash, without slash)."""
    with_slash = href if href.endswith("/") else href + "/"
    without_slash = href[:-1] if href.endswith("/") else href
    return href, with_slash, without_slash
