import re

from bs4 import BeautifulSoup, Comment

# Named HTML entities such as &nbsp; or &mdash; are dropped, not decoded
_NAMED_ENTITY_RE = re.compile(r"&[a-z]+;", re.IGNORECASE)

# Tags whose entire subtree never counts as page content: scripting, styling,
# and the site chrome repeated on every page.
_REMOVE_TAGS = {
    "script",
    "style",
    "nav",
    "header",
    "footer",
}


def strip_named_entities(html: str) -> str:
    """Replace every named entity in *html* with a space."""
    return _NAMED_ENTITY_RE.sub(" ", html)


def sanitize(html: str) -> BeautifulSoup:
    """Remove non-content blocks from *html* and return the pruned BeautifulSoup tree."""
    soup = BeautifulSoup(strip_named_entities(html), "lxml")

    for tag in soup.find_all(_REMOVE_TAGS):
        tag.decompose()

    # Comments are not rendered text
    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    return soup
