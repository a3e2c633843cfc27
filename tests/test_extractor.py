"""Tests for seo_checker.services.extractor."""

from seo_checker.services.extractor import (
    extract,
    extract_canonical,
    extract_images,
    extract_internal_links,
    extract_meta,
    extract_title,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _page(head: str = "", body: str = "") -> str:
    return f"<!DOCTYPE html><html><head>{head}</head><body>{body}</body></html>"


# ---------------------------------------------------------------------------
# Title
# ---------------------------------------------------------------------------

class TestExtractTitle:
    def test_reads_and_trims(self):
        assert extract_title(_page("<title>  Hello World \n</title>")) == "Hello World"

    def test_first_title_wins(self):
        assert extract_title(_page("<title>First</title><title>Second</title>")) == "First"

    def test_title_with_attributes(self):
        assert extract_title('<title data-x="1">Attr</title>') == "Attr"

    def test_missing_is_none(self):
        assert extract_title(_page()) is None

    def test_unterminated_is_none(self):
        assert extract_title("<head><title>Broken</head>") is None

    def test_empty_is_empty_string(self):
        assert extract_title("<title></title>") == ""

    def test_case_insensitive(self):
        assert extract_title("<TITLE>Upper</TITLE>") == "Upper"


# ---------------------------------------------------------------------------
# Meta
# ---------------------------------------------------------------------------

class TestExtractMeta:
    def test_name_before_content(self):
        html = _page('<meta name="description" content=" A page. ">')
        assert extract_meta(html, "description") == "A page."

    def test_content_before_name(self):
        html = _page("<meta content='Reversed' name='description'>")
        assert extract_meta(html, "description") == "Reversed"

    def test_property_attribute(self):
        html = _page('<meta property="og:title" content="OG Title">')
        assert extract_meta(html, "og:title") == "OG Title"

    def test_og_description_is_not_description(self):
        html = _page('<meta property="og:description" content="Only OG">')
        assert extract_meta(html, "description") is None
        assert extract_meta(html, "og:description") == "Only OG"

    def test_first_match_wins(self):
        html = _page(
            '<meta name="description" content="One">'
            '<meta name="description" content="Two">'
        )
        assert extract_meta(html, "description") == "One"

    def test_missing_content_attribute_is_absent(self):
        assert extract_meta(_page('<meta name="description">'), "description") is None

    def test_empty_content_is_empty_string(self):
        assert extract_meta(_page('<meta name="description" content="">'), "description") == ""


# ---------------------------------------------------------------------------
# Canonical
# ---------------------------------------------------------------------------

class TestExtractCanonical:
    def test_rel_before_href(self):
        html = _page('<link rel="canonical" href="https://example.com/a/">')
        assert extract_canonical(html) == "https://example.com/a/"

    def test_href_before_rel(self):
        html = _page('<link href="https://example.com/b/" rel="canonical">')
        assert extract_canonical(html) == "https://example.com/b/"

    def test_other_link_rel_ignored(self):
        assert extract_canonical(_page('<link rel="stylesheet" href="/s.css">')) is None


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------

class TestExtractImages:
    def test_src_and_alt(self):
        (image,) = extract_images('<img src="/a.png" alt=" Logo ">')
        assert image.src == "/a.png"
        assert image.alt == "Logo"
        assert image.has_alt is True

    def test_missing_alt(self):
        (image,) = extract_images('<img src="/a.png">')
        assert image.alt is None
        assert image.has_alt is False

    def test_empty_alt_is_present(self):
        (image,) = extract_images('<img src="/a.png" alt="">')
        assert image.alt == ""
        assert image.has_alt is True

    def test_bare_alt_is_present(self):
        (image,) = extract_images('<img src="/a.png" alt>')
        assert image.alt == ""
        assert image.has_alt is True

    def test_missing_src(self):
        (image,) = extract_images('<img alt="x">')
        assert image.src == ""

    def test_data_attributes_are_not_src_or_alt(self):
        (image,) = extract_images('<img data-src="/lazy.png" data-alt="nope">')
        assert image.src == ""
        assert image.has_alt is False

    def test_alt_word_inside_other_value_is_not_alt(self):
        (image,) = extract_images('<img src="/a.png" title="alt text here">')
        assert image.has_alt is False

    def test_order_preserved(self):
        images = extract_images('<img src="/1.png"><p></p><img src="/2.png" />')
        assert [image.src for image in images] == ["/1.png", "/2.png"]


# ---------------------------------------------------------------------------
# Internal links
# ---------------------------------------------------------------------------

class TestExtractInternalLinks:
    def test_keeps_root_relative(self):
        assert extract_internal_links('<a href="/about/">About</a>') == ["/about/"]

    def test_skips_protocol_relative_and_external(self):
        html = (
            '<a href="//cdn.example.com/x">cdn</a>'
            '<a href="https://example.com/">ext</a>'
            '<a href="relative/page">rel</a>'
            '<a href="#top">top</a>'
        )
        assert extract_internal_links(html) == []

    def test_strips_fragment_and_query(self):
        html = '<a href="/blog/post/#comments">c</a><a href="/search?q=x#r">s</a>'
        assert extract_internal_links(html) == ["/blog/post/", "/search"]

    def test_duplicates_preserved(self):
        html = '<a href="/a/">1</a><a href="/a/">2</a>'
        assert extract_internal_links(html) == ["/a/", "/a/"]

    def test_href_after_other_attributes(self):
        assert extract_internal_links('<a class="btn" href="/x">x</a>') == ["/x"]

    def test_data_href_ignored(self):
        assert extract_internal_links('<a data-href="/x">x</a>') == []


# ---------------------------------------------------------------------------
# Full extraction
# ---------------------------------------------------------------------------

class TestExtract:
    def test_all_fields(self):
        html = _page(
            '<title>Post</title>'
            '<meta name="description" content="Desc">'
            '<meta property="og:title" content="OG">'
            '<meta property="og:description" content="OGD">'
            '<meta property="og:image" content="/img.png">'
            '<link rel="canonical" href="https://example.com/post/">',
            '<nav><a href="/">Home</a></nav><p>one two three</p><img src="/p.png" alt="P">',
        )
        fields = extract(html)
        assert fields.title == "Post"
        assert fields.description == "Desc"
        assert fields.og_title == "OG"
        assert fields.og_description == "OGD"
        assert fields.og_image == "/img.png"
        assert fields.canonical == "https://example.com/post/"
        assert fields.internal_links == ["/"]
        assert len(fields.images) == 1
        assert fields.word_count == 4  # the title counts too

    def test_empty_document(self):
        fields = extract("")
        assert fields.title is None
        assert fields.description is None
        assert fields.images == []
        assert fields.internal_links == []
        assert fields.word_count == 0
