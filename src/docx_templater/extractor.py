"""
Convert uploaded documents into an HTML fragment the section parser can walk.

DOCX files are read straight from the zip archive: ``word/document.xml`` is
walked with lxml and rebuilt as plain HTML (headings, paragraphs, lists,
tables). Plain text goes through a line-based converter that guesses
headings from the shape of each line.
"""

from __future__ import annotations

import io
import re
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Dict, List, Optional, Tuple, Union

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from loguru import logger
from lxml import etree

from .errors import ExtractionError


NS = {
    "w": "http://schemas.openxmlformats.org/wordprocessingml/2006/main",
}
W = f"{{{NS['w']}}}"

Source = Union[str, Path, bytes, BinaryIO]

_HEADING_STYLE = re.compile(r"^heading\s*([1-6])$", re.IGNORECASE)
_LIST_STYLE = re.compile(r"^list\s*(bullet|number)\s*(\d)?$", re.IGNORECASE)
_FALSE_VALUES = {"0", "false", "off"}

# line-based converter thresholds
SHORT_LINE_CHARS = 60
SHORT_LINE_WORDS = 8
SENTENCE_END = (".", "!", "?", ":", ";", ",")


def _strip_ns(tag: str) -> str:
    """Strip the XML namespace from a tag name."""
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag


def _open_source(source: Source) -> Union[str, BinaryIO]:
    if isinstance(source, (bytes, bytearray)):
        return io.BytesIO(source)
    if isinstance(source, Path):
        return str(source)
    return source


def _serialize(elements: List[etree._Element]) -> str:
    return "\n".join(
        etree.tostring(el, method="html", encoding="unicode") for el in elements
    )


def _toggle_on(rpr: Optional[etree._Element], name: str) -> bool:
    if rpr is None:
        return False
    node = rpr.find(f"w:{name}", NS)
    if node is None:
        return False
    return (node.get(f"{W}val") or "true").lower() not in _FALSE_VALUES


def _append_text(parent: etree._Element, text: str) -> None:
    """Append text after the last child of ``parent`` (or as its text)."""
    if not text:
        return
    if len(parent):
        last = parent[-1]
        last.tail = (last.tail or "") + text
    else:
        parent.text = (parent.text or "") + text


@dataclass
class ListInfo:
    num_id: Optional[str] = None
    ilvl: Optional[str] = None
    ordered: bool = False

    def is_list_item(self) -> bool:
        return self.num_id is not None and self.ilvl is not None

    @property
    def level(self) -> int:
        try:
            return int(self.ilvl or 0)
        except ValueError:
            return 0


class DocxExtractor:
    """Convert the body of a DOCX file into an HTML fragment."""

    def __init__(self, source: Source):
        self.name = str(source) if isinstance(source, (str, Path)) else "<upload>"
        try:
            self._zip = zipfile.ZipFile(_open_source(source))
        except (zipfile.BadZipFile, OSError) as exc:
            raise ExtractionError(f"{self.name} is not a readable DOCX archive") from exc
        self.numbering: Dict[str, Dict[str, str]] = self._load_numbering()

    def to_html(self) -> str:
        root = self._read_xml("word/document.xml")
        body = root.find("w:body", NS)
        if body is None:
            raise ExtractionError(f"{self.name} has no document body")

        elements: List[etree._Element] = []
        list_stack: List[Tuple[int, etree._Element]] = []
        for child in body:
            tag = _strip_ns(child.tag) if isinstance(child.tag, str) else ""
            if tag == "p":
                info = self._list_info(child)
                heading = _HEADING_STYLE.match(self._style_id(child).replace(" ", ""))
                if info.is_list_item() and not heading:
                    self._add_list_item(child, info, elements, list_stack)
                    continue
                list_stack.clear()
                el = self._convert_paragraph(child)
                if el is not None:
                    elements.append(el)
            elif tag == "tbl":
                list_stack.clear()
                elements.append(self._convert_table(child))
            # sectPr, bookmarks and other body-level markup carry no content

        logger.debug("Extracted {} top-level elements from {}", len(elements), self.name)
        return _serialize(elements)

    # --- internal parsing helpers -------------------------------------------------

    def _read_xml(self, member: str) -> etree._Element:
        try:
            data = self._zip.read(member)
        except KeyError as exc:
            raise ExtractionError(f"{self.name} is missing {member}") from exc
        try:
            return etree.fromstring(data)
        except etree.XMLSyntaxError as exc:
            raise ExtractionError(f"{member} in {self.name} is malformed: {exc}") from exc

    def _load_numbering(self) -> Dict[str, Dict[str, str]]:
        """Return mapping of numId -> {ilvl: numFmt}."""
        try:
            data = self._zip.read("word/numbering.xml")
        except KeyError:
            return {}
        try:
            root = etree.fromstring(data)
        except etree.XMLSyntaxError:
            logger.warning("Ignoring malformed numbering.xml in {}", self.name)
            return {}

        abstract: Dict[str, Dict[str, str]] = {}
        for node in root.xpath("./w:abstractNum", namespaces=NS):
            levels: Dict[str, str] = {}
            for lvl in node.xpath("./w:lvl", namespaces=NS):
                fmt = lvl.find("w:numFmt", NS)
                levels[lvl.get(f"{W}ilvl")] = fmt.get(f"{W}val") if fmt is not None else "bullet"
            abstract[node.get(f"{W}abstractNumId")] = levels

        numbering: Dict[str, Dict[str, str]] = {}
        for num in root.xpath("./w:num", namespaces=NS):
            ref = num.find("w:abstractNumId", NS)
            if ref is not None:
                numbering[num.get(f"{W}numId")] = abstract.get(ref.get(f"{W}val"), {})
        return numbering

    def _style_id(self, para: etree._Element) -> str:
        nodes = para.xpath("./w:pPr/w:pStyle", namespaces=NS)
        return nodes[0].get(f"{W}val", "") if nodes else ""

    def _list_info(self, para: etree._Element) -> ListInfo:
        """Extract numbering details for list detection."""
        num_id_nodes = para.xpath("./w:pPr/w:numPr/w:numId", namespaces=NS)
        ilvl_nodes = para.xpath("./w:pPr/w:numPr/w:ilvl", namespaces=NS)
        num_id = num_id_nodes[0].get(f"{W}val") if num_id_nodes else None
        ilvl = ilvl_nodes[0].get(f"{W}val") if ilvl_nodes else None

        if num_id is not None and num_id != "0":
            ilvl = ilvl or "0"
            fmt = self.numbering.get(num_id, {}).get(ilvl, "bullet")
            return ListInfo(num_id=num_id, ilvl=ilvl, ordered=fmt not in {"bullet", "none"})

        # "List Bullet" / "List Number 2" keep their numbering in the style
        match = _LIST_STYLE.match(self._style_id(para).replace(" ", ""))
        if match:
            level = int(match.group(2) or 1) - 1
            return ListInfo(
                num_id=f"style:{match.group(1).lower()}",
                ilvl=str(level),
                ordered=match.group(1).lower() == "number",
            )
        return ListInfo()

    def _add_list_item(
        self,
        para: etree._Element,
        info: ListInfo,
        elements: List[etree._Element],
        stack: List[Tuple[int, etree._Element]],
    ) -> None:
        tag = "ol" if info.ordered else "ul"
        level = info.level
        while stack and stack[-1][0] > level:
            stack.pop()
        if stack and stack[-1][0] == level and stack[-1][1].tag != tag:
            stack.pop()

        if not stack or stack[-1][0] < level:
            new_list = etree.Element(tag)
            if stack:
                parent = stack[-1][1]
                if not len(parent):
                    etree.SubElement(parent, "li")
                parent[-1].append(new_list)
            else:
                elements.append(new_list)
            stack.append((level, new_list))

        li = etree.SubElement(stack[-1][1], "li")
        self._fill_inline(li, para)

    def _convert_paragraph(self, para: etree._Element) -> Optional[etree._Element]:
        style = self._style_id(para).replace(" ", "")
        match = _HEADING_STYLE.match(style)
        if style.lower() == "title":
            tag = "h1"
        elif match:
            tag = f"h{match.group(1)}"
        else:
            tag = "p"
        el = etree.Element(tag)
        self._fill_inline(el, para)
        if not len(el) and not (el.text or "").strip():
            return None
        return el

    def _convert_table(self, tbl: etree._Element) -> etree._Element:
        table = etree.Element("table")
        for row in tbl.xpath("./w:tr", namespaces=NS):
            tr = etree.SubElement(table, "tr")
            for cell in row.xpath("./w:tc", namespaces=NS):
                td = etree.SubElement(tr, "td")
                for para in cell.xpath("./w:p", namespaces=NS):
                    p = etree.Element("p")
                    self._fill_inline(p, para)
                    if len(p) or (p.text or "").strip():
                        td.append(p)
        return table

    def _fill_inline(self, target: etree._Element, para: etree._Element) -> None:
        def walk(node: etree._Element):
            for child in node:
                if not isinstance(child.tag, str):
                    continue
                tag = _strip_ns(child.tag)
                if tag in {"del", "moveFrom", "pPr"}:
                    # deleted text is intentionally excluded from the output
                    continue
                if tag == "r":
                    self._append_run(target, child)
                else:
                    walk(child)

        walk(para)

    def _append_run(self, target: etree._Element, run: etree._Element) -> None:
        rpr = run.find("w:rPr", NS)
        bold = _toggle_on(rpr, "b")
        italic = _toggle_on(rpr, "i")
        for node in run:
            tag = _strip_ns(node.tag) if isinstance(node.tag, str) else ""
            if tag == "t":
                text = node.text or ""
            elif tag == "tab":
                text = "\t"
            elif tag in {"br", "cr"}:
                etree.SubElement(target, "br")
                continue
            else:
                continue
            if not text:
                continue
            if bold or italic:
                wrapper = etree.SubElement(target, "strong" if bold else "em")
                inner = wrapper
                if bold and italic:
                    inner = etree.SubElement(wrapper, "em")
                inner.text = text
            else:
                _append_text(target, text)


def extract_text(source: Source) -> str:
    """Return the document's paragraph text, one line per paragraph."""
    try:
        document = Document(_open_source(source))
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as exc:
        raise ExtractionError("Document could not be opened as DOCX") from exc
    return "\n".join(p.text for p in document.paragraphs)


def classify_line(line: str) -> str:
    """Guess the HTML tag for one line of plain text."""
    if line.isupper():
        return "h2"
    if (
        len(line) <= SHORT_LINE_CHARS
        and len(line.split()) <= SHORT_LINE_WORDS
        and not line.endswith(SENTENCE_END)
    ):
        return "h3"
    return "p"


def convert_plain_text(text: str) -> str:
    """Turn plain text into an HTML fragment, one element per non-blank line."""
    elements: List[etree._Element] = []
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        el = etree.Element(classify_line(line))
        el.text = line
        elements.append(el)
    return _serialize(elements)


def extract_html(filename: str, data: bytes, plain_text: bool = False) -> str:
    """Dispatch an upload to the right converter based on its extension.

    ``plain_text`` forces DOCX uploads through the line-based converter,
    which ignores Word styles entirely.
    """
    suffix = Path(filename or "").suffix.lower()
    if suffix == ".docx":
        if plain_text:
            return convert_plain_text(extract_text(data))
        return DocxExtractor(data).to_html()
    if suffix == ".txt":
        try:
            return convert_plain_text(data.decode("utf-8-sig"))
        except UnicodeDecodeError as exc:
            raise ExtractionError(f"{filename} is not UTF-8 text") from exc
    raise ExtractionError(f"Unsupported file type: {filename!r}")


def load_html(path: Union[str, Path], plain_text: bool = False) -> str:
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise ExtractionError(f"Cannot read {path}") from exc
    return extract_html(path.name, data, plain_text=plain_text)
