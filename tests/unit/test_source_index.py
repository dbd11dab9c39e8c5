"""
Unit tests for source index construction.
"""

import pytest

from pagediff.document import SoupDocument
from pagediff.models import LinkRecord
from pagediff.source_index import build_source_index, image_candidate_names

SOURCE_HTML = """
<html>
<head><title>Shop</title></head>
<body>
    <h1>Welcome   to the  Shop</h1>
    <p>Special Offer</p>
    <a href="/buy">Buy</a>
    <a href="https://example.com/learn">Learn more</a>
    <a href="/buy">Buy Now</a>
    <a href="/empty"></a>
    <a name="top">Top</a>
    <img src="/img/logo.png" srcset="/img/logo-2x.png 2x, /img/logo-3x.png 3x">
    <img src="https://cdn.example.com/hero.jpg?v=2">
    <script>var ignored = "script";</script>
</body>
</html>
"""


@pytest.fixture
def source_document():
    return SoupDocument.from_html(SOURCE_HTML, url="https://example.com/")


class TestBuildSourceIndex:
    """Tests for build_source_index."""

    def test_texts_are_normalized(self, source_document):
        """Test that every text leaf is stored normalized."""
        index = build_source_index(source_document)
        assert "welcome to the shop" in index.texts
        assert "special offer" in index.texts
        assert index.has_text("learn more")

    def test_script_and_head_text_excluded(self, source_document):
        """Test that script content and head text are not indexed."""
        index = build_source_index(source_document)
        assert 'var ignored = "script";' not in index.texts
        assert "shop" not in index.texts

    def test_text_order_is_first_seen_and_unique(self, source_document):
        """Test the deterministic ordering of indexed texts."""
        index = build_source_index(source_document)
        assert index.text_order[:2] == ("welcome to the shop", "special offer")
        assert len(index.text_order) == len(index.texts)

    def test_links_by_url_last_writer_wins(self, source_document):
        """Test that duplicate URLs keep the last anchor."""
        index = build_source_index(source_document)
        record = index.links_by_url["https://example.com/buy"]
        assert record == LinkRecord(url="https://example.com/buy", text="buy now", label="Buy Now")

    def test_links_by_text_skips_empty_text(self, source_document):
        """Test that anchors without text are only indexed by URL."""
        index = build_source_index(source_document)
        assert "https://example.com/empty" in index.links_by_url
        assert "" not in index.links_by_text
        assert index.links_by_text["buy"].url == "https://example.com/buy"
        assert index.links_by_text["learn more"].url == "https://example.com/learn"

    def test_anchors_without_href_are_not_links(self, source_document):
        """Test that named anchors are not indexed as links."""
        index = build_source_index(source_document)
        assert "top" not in index.links_by_text

    def test_image_names_include_responsive_variants(self, source_document):
        """Test that src and srcset names are all indexed."""
        index = build_source_index(source_document)
        assert index.image_names == {"logo.png", "logo-2x.png", "logo-3x.png", "hero.jpg"}

    def test_index_is_read_only(self, source_document):
        """Test that the index cannot be modified after construction."""
        index = build_source_index(source_document)
        with pytest.raises(TypeError):
            index.links_by_url["https://evil.example/"] = LinkRecord(url="x", text="x")
        with pytest.raises(AttributeError):
            index.texts.add("new")

    def test_source_tree_not_mutated(self, source_document):
        """Test that building the index leaves the markup untouched."""
        before = source_document.to_html()
        build_source_index(source_document)
        assert source_document.to_html() == before


class TestImageCandidateNames:
    """Tests for image_candidate_names."""

    def test_primary_first_then_srcset(self):
        """Test candidate ordering."""
        document = SoupDocument.from_html(
            '<body><img src="a/main.png" srcset="a/small.png 1x, a/main.png 2x"></body>',
            url="https://example.com/",
        )
        image = document.elements_by_tag("img")[0]
        assert image_candidate_names(document, image) == ["main.png", "small.png"]

    def test_image_without_sources(self):
        """Test that an image with no usable source has no candidates."""
        document = SoupDocument.from_html('<body><img alt="x"></body>')
        image = document.elements_by_tag("img")[0]
        assert image_candidate_names(document, image) == []
