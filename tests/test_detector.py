"""Tests for seo_checker.services.detector.detect_issues."""

from seo_checker.models.audit_config import AuditConfig
from seo_checker.models.page import ImageRef, Page
from seo_checker.services.detector import detect_issues
from seo_checker.services.site_graph import build_site_graph


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _page(url_path: str = "/about", **overrides) -> Page:
    """A page with every field populated, so tests only see what they break."""
    values = dict(
        file_path=url_path,
        url_path=url_path,
        title=f"Title of {url_path}",
        description=f"Description of {url_path}",
        og_title="OG title",
        og_description="OG description",
        og_image="/og.png",
        canonical=f"https://example.com{url_path}",
        images=[],
        internal_links=[],
        word_count=1000,
    )
    values.update(overrides)
    return Page(**values)


def _detect(pages, **config):
    return detect_issues(pages, build_site_graph(pages), AuditConfig(**config))


def _categories(findings, severity=None):
    return [f.category for f in findings if severity is None or f.severity == severity]


# ---------------------------------------------------------------------------
# Title and description
# ---------------------------------------------------------------------------

class TestTitle:
    def test_clean_page_has_no_findings(self):
        assert _detect([_page()]) == []

    def test_missing_title_is_single_error(self):
        findings = _detect([_page(title=None), _page("/other", title=None)])
        first_page = [f for f in findings if f.url_path == "/about"]
        assert [(f.severity, f.category) for f in first_page] == [("error", "title")]
        assert "duplicate-title" not in _categories(findings)

    def test_empty_title_is_error(self):
        assert _categories(_detect([_page(title="  ")]), "error") == ["title"]

    def test_long_title_warning(self):
        findings = _detect([_page(title="x" * 61)])
        assert [(f.severity, f.category) for f in findings] == [("warning", "title")]
        assert "61 chars" in findings[0].message

    def test_sixty_char_title_ok(self):
        assert _detect([_page(title="x" * 60)]) == []

    def test_duplicate_title_on_second_page(self):
        findings = _detect([_page("/a", title="Home"), _page("/b", title="Home")])
        dupes = [f for f in findings if f.category == "duplicate-title"]
        assert len(dupes) == 1
        assert dupes[0].url_path == "/b"
        assert dupes[0].severity == "warning"
        assert "/a" in dupes[0].message


class TestDescription:
    def test_missing_description_error(self):
        assert _categories(_detect([_page(description=None)])) == ["description"]

    def test_long_description_warning(self):
        findings = _detect([_page(description="d" * 156)])
        assert [(f.severity, f.category) for f in findings] == [("warning", "description")]

    def test_155_chars_ok(self):
        assert _detect([_page(description="d" * 155)]) == []

    def test_duplicate_description_first_wins(self):
        pages = [
            _page("/a", description="Same text"),
            _page("/b", description="Same text"),
            _page("/c", description="Same text"),
        ]
        dupes = [f for f in _detect(pages) if f.category == "duplicate-description"]
        assert [f.url_path for f in dupes] == ["/b", "/c"]
        assert all("/a" in f.message for f in dupes)


# ---------------------------------------------------------------------------
# Head tags and images
# ---------------------------------------------------------------------------

class TestHeadTags:
    def test_missing_canonical_warning(self):
        assert _categories(_detect([_page(canonical=None)]), "warning") == ["canonical"]

    def test_each_missing_og_tag_warns(self):
        findings = _detect([_page(og_title=None, og_description=None, og_image="")])
        assert [f.message for f in findings] == [
            "Missing og:title",
            "Missing og:description",
            "Missing og:image",
        ]


class TestImages:
    def test_missing_alt_error_and_empty_alt_warning(self):
        images = [
            ImageRef(src="/a.png", alt=None, has_alt=False),
            ImageRef(src="/b.png", alt="", has_alt=True),
            ImageRef(src="/c.png", alt="Fine", has_alt=True),
        ]
        findings = _detect([_page(images=images)])
        assert [(f.severity, f.category) for f in findings] == [
            ("error", "image-alt"),
            ("warning", "image-alt"),
        ]
        assert findings[0].message.endswith("/a.png")
        assert findings[1].message.endswith("/b.png")

    def test_long_src_shortened(self):
        src = "/" + "x" * 200 + ".png"
        findings = _detect([_page(images=[ImageRef(src=src)])])
        assert findings[0].message.endswith(src[:80])


# ---------------------------------------------------------------------------
# Links and content pages
# ---------------------------------------------------------------------------

class TestBrokenLinks:
    def test_missing_page_is_one_error(self):
        findings = _detect([_page("/", internal_links=["/missing-page/"])])
        assert [(f.severity, f.category) for f in findings] == [("error", "broken-link")]
        assert "/missing-page/" in findings[0].message

    def test_trailing_slash_variant_resolves(self):
        pages = [
            _page("/", internal_links=["/blog/post"]),
            _page("/blog/post/", word_count=1000),
        ]
        assert "broken-link" not in _categories(_detect(pages))


class TestThinContent:
    def test_below_minimum_warns(self):
        pages = [_page("/", internal_links=["/blog/post/"]), _page("/blog/post/", word_count=250)]
        findings = _detect(pages, min_word_count=300)
        assert _categories(findings) == ["thin-content"]
        assert findings[0].url_path == "/blog/post/"

    def test_at_minimum_ok(self):
        pages = [_page("/", internal_links=["/blog/post/"]), _page("/blog/post/", word_count=300)]
        assert _detect(pages, min_word_count=300) == []

    def test_non_content_page_not_checked(self):
        assert _detect([_page("/about", word_count=3)]) == []

    def test_post_marker_is_content(self):
        pages = [_page("/", internal_links=["/post/x/"]), _page("/post/x/", word_count=10)]
        assert _categories(_detect(pages)) == ["thin-content"]


class TestOrphans:
    def test_unlinked_content_page_is_orphan(self):
        findings = _detect([_page("/"), _page("/blog/a/")])
        assert [(f.url_path, f.category) for f in findings] == [("/blog/a/", "orphan-page")]

    def test_single_inbound_link_suppresses(self):
        pages = [_page("/", internal_links=["/blog/a"]), _page("/blog/a/")]
        assert _detect(pages) == []

    def test_orphans_reported_after_per_page_findings(self):
        pages = [_page("/blog/a/"), _page("/z", title=None)]
        assert _categories(_detect(pages)) == ["title", "orphan-page"]

    def test_custom_markers(self):
        pages = [_page("/"), _page("/guides/a/")]
        findings = _detect(pages, content_markers=["/guides/"])
        assert _categories(findings) == ["orphan-page"]
