"""
Document adapters for the comparison engine.

The engine only talks to the abstract Document interface, so it can run
against any tree representation the host supplies. SoupDocument is the
BeautifulSoup-backed implementation used by the CLI.
"""

from abc import ABC, abstractmethod
from typing import Any

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

from .normalizer import resolve_url


class Document(ABC):
    """
    Abstract interface over a parsed document tree.

    Nodes are opaque to the engine; every question about a node goes
    through the document that owns it.
    """

    @property
    @abstractmethod
    def root(self) -> Any:
        """Element that bounds text traversal (usually the body)."""

    @property
    @abstractmethod
    def base_url(self) -> str | None:
        """Base URI relative URLs are resolved against."""

    @abstractmethod
    def children(self, node: Any) -> list[Any]:
        """Child nodes of an element, in document order."""

    @abstractmethod
    def parent(self, node: Any) -> Any | None:
        """Parent element of a node, or None at the top of the tree."""

    @abstractmethod
    def tag_name(self, node: Any) -> str | None:
        """Lower-case tag name of an element, None for non-element nodes."""

    @abstractmethod
    def text_value(self, node: Any) -> str | None:
        """Value of a text node, None for anything else."""

    @abstractmethod
    def get_attribute(self, node: Any, name: str) -> str | None:
        """Attribute value of an element, None when absent."""

    @abstractmethod
    def elements_by_tag(self, name: str) -> list[Any]:
        """All elements with the given tag name, in document order."""

    def node_key(self, node: Any) -> int:
        """Opaque identity handle for a node, stable for the document's lifetime."""
        return id(node)

    def is_element(self, node: Any) -> bool:
        return self.tag_name(node) is not None

    def resolve_url(self, raw_url: str | None) -> str | None:
        """Resolve a URL against this document's base URI."""
        return resolve_url(self.base_url, raw_url)


class SoupDocument(Document):
    """
    Document backed by a BeautifulSoup tree.

    The tree is parsed with lxml. Comments, doctypes, CDATA sections and
    processing instructions are not treated as text nodes.
    """

    def __init__(self, soup: BeautifulSoup, url: str | None = None):
        """
        Wrap an already parsed tree.

        Args:
            soup: Parsed BeautifulSoup tree
            url: URL the markup was retrieved from (optional)
        """
        self.soup = soup
        self.url = url
        self._base_url = self._compute_base_url()

    @classmethod
    def from_html(cls, html: str, url: str | None = None) -> "SoupDocument":
        """
        Parse HTML markup into a document.

        Args:
            html: HTML string to parse
            url: URL the markup was retrieved from (optional)

        Returns:
            SoupDocument over the parsed tree
        """
        return cls(BeautifulSoup(html, "lxml"), url=url)

    def _compute_base_url(self) -> str | None:
        base_tag = self.soup.find("base", href=True)
        if base_tag is None:
            return self.url
        return resolve_url(self.url, base_tag["href"]) or self.url

    @property
    def root(self) -> Tag:
        return self.soup.body or self.soup

    @property
    def base_url(self) -> str | None:
        return self._base_url

    def children(self, node: Any) -> list[Any]:
        if isinstance(node, Tag):
            return list(node.contents)
        return []

    def parent(self, node: Any) -> Tag | None:
        return node.parent

    def tag_name(self, node: Any) -> str | None:
        if isinstance(node, Tag):
            return node.name.lower()
        return None

    def text_value(self, node: Any) -> str | None:
        if isinstance(node, NavigableString) and not isinstance(node, PreformattedString):
            return str(node)
        return None

    def get_attribute(self, node: Any, name: str) -> str | None:
        if not isinstance(node, Tag):
            return None
        value = node.get(name)
        if isinstance(value, list):
            # Multi-valued attributes such as class
            return " ".join(value)
        return value

    def elements_by_tag(self, name: str) -> list[Tag]:
        return self.soup.find_all(name)

    def to_html(self) -> str:
        """Serialize the (possibly annotated) tree back to markup."""
        return str(self.soup)
