"""
Unit tests for the document adapter and tree walker.
"""

from pagediff.document import SoupDocument
from pagediff.models import CompareOptions
from pagediff.walker import (
    TagKind,
    classify_tag,
    collect_text_leaves,
    element_text,
    iter_preorder,
    nearest_ancestor,
)


def leaf_values(document, **kwargs):
    return [document.text_value(node).strip() for node in collect_text_leaves(document, **kwargs)]


class TestClassifyTag:
    """Tests for classify_tag."""

    def test_headings(self):
        """Test that h1-h6 are headings."""
        for level in range(1, 7):
            assert classify_tag(f"h{level}") is TagKind.HEADING
            assert classify_tag(f"H{level}") is TagKind.HEADING

    def test_known_tags(self):
        """Test the remaining closed set of kinds."""
        assert classify_tag("p") is TagKind.PARAGRAPH
        assert classify_tag("a") is TagKind.ANCHOR
        assert classify_tag("button") is TagKind.BUTTON
        assert classify_tag("img") is TagKind.IMAGE

    def test_everything_else_is_other(self):
        """Test that unknown or missing tags map to OTHER."""
        assert classify_tag("div") is TagKind.OTHER
        assert classify_tag("h7") is TagKind.OTHER
        assert classify_tag(None) is TagKind.OTHER


class TestSoupDocument:
    """Tests for SoupDocument."""

    def test_root_is_body(self):
        """Test that traversal starts at the body."""
        document = SoupDocument.from_html("<html><head><title>T</title></head><body><p>x</p></body></html>")
        assert document.tag_name(document.root) == "body"

    def test_base_url_from_document_url(self):
        """Test that the document URL is the base URI by default."""
        document = SoupDocument.from_html("<p>x</p>", url="https://example.com/page")
        assert document.base_url == "https://example.com/page"
        assert document.resolve_url("/about") == "https://example.com/about"

    def test_base_tag_overrides_document_url(self):
        """Test that a <base href> changes the base URI."""
        html = '<html><head><base href="/static/"></head><body></body></html>'
        document = SoupDocument.from_html(html, url="https://example.com/page")
        assert document.base_url == "https://example.com/static/"
        assert document.resolve_url("logo.png") == "https://example.com/static/logo.png"

    def test_elements_by_tag_in_document_order(self):
        """Test enumeration of elements by tag name."""
        html = '<body><a href="/1">one</a><div><a href="/2">two</a></div><a href="/3">three</a></body>'
        document = SoupDocument.from_html(html)
        anchors = document.elements_by_tag("a")
        assert [document.get_attribute(a, "href") for a in anchors] == ["/1", "/2", "/3"]

    def test_multi_valued_attribute_joined(self):
        """Test that class attributes come back as a single string."""
        document = SoupDocument.from_html('<body><p class="lead big">x</p></body>')
        paragraph = document.elements_by_tag("p")[0]
        assert document.get_attribute(paragraph, "class") == "lead big"
        assert document.get_attribute(paragraph, "missing") is None

    def test_node_key_distinguishes_identical_elements(self):
        """Test that structurally equal elements have distinct identities."""
        document = SoupDocument.from_html("<body><p>same</p><p>same</p></body>")
        first, second = document.elements_by_tag("p")
        assert document.node_key(first) != document.node_key(second)


class TestCollectTextLeaves:
    """Tests for collect_text_leaves."""

    def test_document_order(self):
        """Test that leaves come out depth-first, pre-order."""
        html = "<body><h1>Title</h1><div><p>First <b>bold</b> tail</p></div><span>Last</span></body>"
        document = SoupDocument.from_html(html)
        assert leaf_values(document) == ["Title", "First", "bold", "tail", "Last"]

    def test_blank_text_skipped(self):
        """Test that whitespace-only text nodes are not leaves."""
        html = "<body>\n  <div>\n    <p>Only</p>\n  </div>\n</body>"
        document = SoupDocument.from_html(html)
        assert leaf_values(document) == ["Only"]

    def test_script_style_and_comments_excluded(self):
        """Test that script, style and comment content is skipped."""
        html = """
        <body>
            <script>var hidden = "script text";</script>
            <style>.x { color: red; }</style>
            <!-- a comment -->
            <p>Visible</p>
        </body>
        """
        document = SoupDocument.from_html(html)
        assert leaf_values(document) == ["Visible"]

    def test_ui_container_excluded(self):
        """Test that the injected annotation container is skipped."""
        html = '<body><p>Page</p><div id="pce-ui-container"><h3>Summary</h3></div></body>'
        document = SoupDocument.from_html(html)
        assert leaf_values(document) == ["Page"]

    def test_custom_container_id(self):
        """Test that the excluded container id is configurable."""
        html = '<body><p>Page</p><div id="overlay"><p>Panel</p></div></body>'
        document = SoupDocument.from_html(html)
        assert leaf_values(document, options=CompareOptions(ui_container_id="overlay")) == ["Page"]

    def test_restartable(self):
        """Test that calling again yields the same sequence."""
        document = SoupDocument.from_html("<body><p>a</p><p>b</p></body>")
        assert leaf_values(document) == leaf_values(document)

    def test_root_inside_excluded_subtree_yields_nothing(self):
        """Test that starting inside an excluded subtree yields no leaves."""
        html = '<body><div id="pce-ui-container"><p>Panel</p></div></body>'
        document = SoupDocument.from_html(html)
        paragraph = document.elements_by_tag("p")[0]
        assert list(collect_text_leaves(document, root=paragraph)) == []


class TestTraversalHelpers:
    """Tests for iter_preorder, nearest_ancestor and element_text."""

    def test_iter_preorder_skip_prunes_subtree(self):
        """Test that skipped elements hide their descendants."""
        document = SoupDocument.from_html("<body><div><p>in</p></div><span>out</span></body>")
        names = [
            document.tag_name(node)
            for node in iter_preorder(document, document.root, skip=lambda n: document.tag_name(n) == "div")
            if document.is_element(node)
        ]
        assert names == ["span"]

    def test_nearest_ancestor(self):
        """Test ancestor lookup by predicate."""
        document = SoupDocument.from_html('<body><a href="/x"><span><em>deep</em></span></a></body>')
        em = document.elements_by_tag("em")[0]
        anchor = nearest_ancestor(document, em, lambda e: document.tag_name(e) == "a")
        assert anchor is document.elements_by_tag("a")[0]
        assert nearest_ancestor(document, em, lambda e: document.tag_name(e) == "button") is None

    def test_element_text_concatenates_descendants(self):
        """Test that element text joins descendant text like textContent."""
        document = SoupDocument.from_html('<body><a href="/x">Buy <b>now</b><script>x()</script></a></body>')
        anchor = document.elements_by_tag("a")[0]
        assert element_text(document, anchor) == "Buy now"
