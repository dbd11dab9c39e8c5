"""
HTML annotator for presenting differences on the current page.

Marks every targeted element according to its visual kind and appends a
summary panel listing all differences. Presentation only: nothing here
feeds back into classification.
"""

import logging

from bs4 import BeautifulSoup
from bs4.element import Tag

from .document import SoupDocument
from .models import CompareOptions, Difference, VisualKind

logger = logging.getLogger(__name__)

MARKED_ATTRIBUTE = "data-pce-marked"

SUMMARY_STYLES = """
.pce-focus-highlight { outline: 3px solid #00BFFF; box-shadow: 0 0 15px rgba(0, 191, 255, 0.7); }
.pce-marker { display:inline-block; width:16px; height:16px; margin-left:5px; cursor:pointer; }
.pce-marker-dot { display:block; width:100%; height:100%; border-radius:50%; border:1px solid white; box-shadow:0 0 5px rgba(0,0,0,0.7); }
#pce-summary-panel { position:fixed; top:10px; right:10px; width:550px; max-width:90vw; max-height:80vh; overflow:auto; background:white; border-radius:8px; box-shadow:0 4px 15px rgba(0,0,0,0.2); z-index:999999; }
#pce-summary-panel.pce-collapsed { transform:translateX(calc(100% - 60px)); }
#pce-header { display:flex; align-items:center; gap:8px; background:#005A9C; color:white; padding:8px; }
#pce-summary-table { width:100%; border-collapse:collapse; font-size:12px; }
#pce-summary-table th, #pce-summary-table td { padding:6px; border-bottom:1px solid #ddd; text-align:left; }
"""


class HtmlAnnotator:
    """
    Annotates a parsed current document with its differences.

    The summary panel is injected under the configured container id, which
    the tree walker skips, so an annotated page can be compared again.
    """

    def __init__(self, options: CompareOptions | None = None):
        self.options = options or CompareOptions()

    def annotate(self, document: SoupDocument, differences: list[Difference]) -> str:
        """
        Mark differences on the document and return the annotated markup.

        Any summary panel from a previous annotation is replaced.

        Args:
            document: Current document the differences were classified on
            differences: Registered differences (with ids)

        Returns:
            Annotated HTML string
        """
        soup = document.soup
        self._remove_previous_summary(soup)

        marked = 0
        for difference in differences:
            if isinstance(difference.target, Tag):
                self._mark_element(soup, difference)
                marked += 1

        container = self._build_summary(soup, differences)
        (soup.body or soup).append(container)
        self._add_styles(soup)

        logger.info("Annotated %d elements, %d differences listed", marked, len(differences))
        return document.to_html()

    def _remove_previous_summary(self, soup: BeautifulSoup):
        previous = soup.find(id=self.options.ui_container_id)
        if previous is not None:
            previous.decompose()
        for style in soup.find_all("style", attrs={"data-pce-styles": True}):
            style.decompose()

    def _mark_element(self, soup: BeautifulSoup, difference: Difference):
        element = difference.target
        kind = difference.visual_kind

        element[MARKED_ATTRIBUTE] = "true"
        element["data-pce-id"] = difference.id
        if not element.get("id"):
            element["id"] = difference.id

        declarations = ["cursor:pointer"]
        if kind.treatment == "background":
            declarations.append(f"background-color:{kind.color}")
        elif kind.treatment == "border":
            declarations.append(f"border:3px solid {kind.color}")
            declarations.append("padding:2px")
        elif kind.treatment == "marker":
            element.insert_after(self._build_marker(soup, difference))

        existing = (element.get("style") or "").strip().rstrip(";")
        element["style"] = ";".join(filter(None, [existing] + declarations))

    def _build_marker(self, soup: BeautifulSoup, difference: Difference) -> Tag:
        marker = soup.new_tag("span", attrs={"class": "pce-marker", "data-pce-target": difference.id})
        dot = soup.new_tag(
            "span",
            attrs={
                "class": "pce-marker-dot",
                "style": f"background-color:{difference.visual_kind.color}",
            },
        )
        marker.append(dot)
        return marker

    def _build_summary(self, soup: BeautifulSoup, differences: list[Difference]) -> Tag:
        container = soup.new_tag("div", attrs={"id": self.options.ui_container_id})

        panel_class = "pce-collapsed" if not differences else ""
        panel = soup.new_tag("div", attrs={"id": "pce-summary-panel", "class": panel_class})
        container.append(panel)

        header = soup.new_tag("div", attrs={"id": "pce-header"})
        title = soup.new_tag("h3")
        title.append("Page Difference Summary (")
        count = soup.new_tag("span", attrs={"id": "pce-summary-count"})
        count.string = str(len(differences))
        title.append(count)
        title.append(")")
        header.append(title)
        panel.append(header)

        table = soup.new_tag("table", attrs={"id": "pce-summary-table"})
        thead = soup.new_tag("thead")
        head_row = soup.new_tag("tr")
        for label in ("Type", "Category", "Details"):
            cell = soup.new_tag("th")
            cell.string = label
            head_row.append(cell)
        thead.append(head_row)
        table.append(thead)

        tbody = soup.new_tag("tbody", attrs={"id": "pce-summary-table-body"})
        for difference in differences:
            tbody.append(self._build_row(soup, difference))
        table.append(tbody)
        panel.append(table)

        return container

    def _build_row(self, soup: BeautifulSoup, difference: Difference) -> Tag:
        kind: VisualKind = difference.visual_kind
        row = soup.new_tag(
            "tr",
            attrs={
                "data-element-id": difference.id,
                "style": f"background-color:{kind.color}33",
            },
        )
        for value in (kind.icon, difference.category.label, difference.detail):
            cell = soup.new_tag("td")
            cell.string = value
            row.append(cell)
        return row

    def _add_styles(self, soup: BeautifulSoup):
        style = soup.new_tag("style", attrs={"data-pce-styles": "true"})
        style.string = SUMMARY_STYLES
        (soup.head or soup.body or soup).append(style)
