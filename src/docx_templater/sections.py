from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import lxml.html
from loguru import logger
from lxml import etree


SECTION_TYPES = ("heading", "paragraph", "list", "table", "group")

DEFAULT_STYLES: Dict[str, str] = {
    "heading": "heading",
    "paragraph": "body",
    "list": "featureList",
    "table": "comparisonTable",
    "group": "body",
}

_HEADING_TAG = re.compile(r"^h([1-6])$")


@dataclass
class Section:
    """One orderable unit of extracted document content."""

    id: str
    type: str  # heading | paragraph | list | table | group
    content: str
    html_content: str
    style_id: str
    order: int
    level: Optional[int] = None

    @property
    def text(self) -> str:
        return self.content.strip()

    def to_dict(self) -> Dict:
        data = {
            "id": self.id,
            "type": self.type,
            "content": self.content,
            "htmlContent": self.html_content,
            "styleNode": self.style_id,
            "order": self.order,
        }
        if self.level is not None:
            data["level"] = self.level
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> "Section":
        section_type = data.get("type", "paragraph")
        if section_type not in SECTION_TYPES:
            raise ValueError(f"Unknown section type: {section_type!r}")
        order = int(data["order"])
        return cls(
            id=str(data.get("id") or f"section-{order}"),
            type=section_type,
            content=data.get("content") or "",
            html_content=data.get("htmlContent") or "",
            style_id=data.get("styleNode") or DEFAULT_STYLES[section_type],
            order=order,
            level=data.get("level"),
        )


def sections_to_json(sections: Iterable[Section], **json_kwargs) -> str:
    return json.dumps([s.to_dict() for s in sections], ensure_ascii=False, **json_kwargs)


def sections_from_json(text: str) -> List[Section]:
    return [Section.from_dict(item) for item in json.loads(text)]


def outer_html(el: lxml.html.HtmlElement) -> str:
    """Serialize an element without the text that trails it."""
    return lxml.html.tostring(el, encoding="unicode", with_tail=False)


def parse_document(html: str) -> Optional[lxml.html.HtmlElement]:
    """Parse a fragment or a full document and return its body element."""
    if not html or not html.strip():
        return None
    try:
        root = lxml.html.document_fromstring(html)
    except etree.ParserError:
        return None
    body = root.find("body")
    return body if body is not None else root


def iter_content_elements(root: lxml.html.HtmlElement):
    """Yield (type, element) pairs for content elements in document order.

    Recursion stops at the first heading, non-empty paragraph, list or table;
    everything else is treated as a container and descended into.
    """
    for child in root:
        if not isinstance(child.tag, str):
            continue
        tag = child.tag.lower()
        if _HEADING_TAG.match(tag):
            yield "heading", child
        elif tag == "p":
            if child.text_content().strip():
                yield "paragraph", child
        elif tag in {"ul", "ol"}:
            yield "list", child
        elif tag == "table":
            yield "table", child
        else:
            yield from iter_content_elements(child)


def parse_sections(html: str) -> List[Section]:
    """Flatten an HTML fragment into an ordered list of typed sections."""
    root = parse_document(html)
    if root is None:
        return []

    sections: List[Section] = []
    for order, (section_type, el) in enumerate(iter_content_elements(root)):
        level = int(el.tag[1]) if section_type == "heading" else None
        sections.append(
            Section(
                id=f"section-{order}",
                type=section_type,
                content=el.text_content(),
                html_content=outer_html(el),
                style_id=DEFAULT_STYLES[section_type],
                order=order,
                level=level,
            )
        )
    logger.debug("Parsed {} sections", len(sections))
    return sections
