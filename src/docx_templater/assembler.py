"""
Slot classified document content into one of the two page skeletons.

Extracted text is HTML-escaped before interpolation unless the caller passes
``escape=False``, in which case the text is inserted verbatim.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import jinja2
import lxml.html
from loguru import logger
from lxml import etree
from markupsafe import Markup, escape as escape_html

from .classifier import BONUS, CONS, GAMES, PROS, PROS_AND_CONS, detect_section_type
from .config import DEFAULT_STYLESHEET
from .errors import AssemblyError
from .sections import Section, parse_sections


TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

ELEMENTOR_TEMPLATE_ID = "1128"

_ENV = jinja2.Environment(
    loader=jinja2.FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=jinja2.select_autoescape(["html"]),
    keep_trailing_newline=True,
)


class AssemblyMode(str, Enum):
    COMPARISON = "comparison"
    SINGLE = "single"


ASSEMBLY_MODES: Dict[AssemblyMode, Dict[str, str]] = {
    AssemblyMode.COMPARISON: {
        "name": "Multi-Casino Comparison",
        "description": "Best for comparison articles, listicles, and multiple brand reviews",
        "icon": "📊",
    },
    AssemblyMode.SINGLE: {
        "name": "Single Casino Review",
        "description": "Best for in-depth single brand/product reviews",
        "icon": "🎰",
    },
}

SLOT_NAMES = ("overview", "bonuses", "games", "pros_and_cons", "general")

CATEGORY_SLOTS = {
    BONUS: "bonuses",
    GAMES: "games",
    PROS_AND_CONS: "pros_and_cons",
    PROS: "pros_and_cons",
    CONS: "pros_and_cons",
}


@dataclass
class StructuredContent:
    title: Optional[Section]
    intro: List[Section]
    body: List[Section] = field(default_factory=list)


def extract_structured_content(html: str) -> StructuredContent:
    """Split parsed sections into title heading, intro paragraphs and the rest."""
    sections = parse_sections(html)
    title = next((s for s in sections if s.type == "heading"), None)
    intro = [s for s in sections if s.type == "paragraph"][:2]
    taken = {s.id for s in intro}
    if title is not None:
        taken.add(title.id)
    body = [s for s in sections if s.id not in taken]
    return StructuredContent(title=title, intro=intro, body=body)


class _Fragments:
    """Build HTML fragments from sections under one escaping policy."""

    def __init__(self, escape: bool = True):
        self.escape = escape

    def text(self, value: str) -> Markup:
        value = value.strip()
        return escape_html(value) if self.escape else Markup(value)

    def heading(self, section: Section, level: int) -> Markup:
        return Markup(f"<h{level}>{self.text(section.content)}</h{level}>\n")

    def paragraph(self, section: Section) -> Markup:
        return Markup(f"<p>{self.text(section.content)}</p>\n")

    def bullet_list(self, section: Section) -> Markup:
        el = lxml.html.fragment_fromstring(section.html_content)
        tag = "ol" if el.tag == "ol" else "ul"
        items = [li.text_content().strip() for li in el.findall("li")]
        lines = [f"<{tag}>\n"]
        lines.extend(f"  <li>{self.text(item)}</li>\n" for item in items if item)
        lines.append(f"</{tag}>\n")
        return Markup("".join(lines))

    def table(self, section: Section) -> Markup:
        el = lxml.html.fragment_fromstring(section.html_content)
        rows = []
        for tr in el.iter("tr"):
            cells = [c.text_content().strip() for c in tr.xpath("./td|./th")]
            if cells:
                rows.append(cells)
        if not rows:
            return Markup("")
        lines = [
            '<div class="table-container">\n<div class="table-responsive">\n'
            '<table class="platform-table">\n<tbody>\n'
        ]
        for row in rows:
            lines.append("<tr>\n")
            for idx, cell in enumerate(row):
                if idx == 0:
                    lines.append(f'  <th scope="row">{self.text(cell)}</th>\n')
                else:
                    lines.append(f"  <td>{self.text(cell)}</td>\n")
            lines.append("</tr>\n")
        lines.append("</tbody>\n</table>\n</div>\n</div>\n")
        return Markup("".join(lines))

    def section(self, section: Section, heading_level: int) -> Markup:
        if section.type == "heading":
            return self.heading(section, heading_level)
        if section.type == "list":
            return self.bullet_list(section)
        if section.type == "table":
            return self.table(section)
        return self.paragraph(section)


def _clamp(level: Optional[int], low: int, high: int) -> int:
    return max(low, min(high, level or low))


def _page_context(
    content: StructuredContent,
    fragments: _Fragments,
    default_title: str,
    stylesheet: str,
    updated: Optional[datetime.date],
) -> Dict:
    updated = updated or datetime.date.today()
    title = content.title.content if content.title is not None else default_title
    return {
        "title": fragments.text(title),
        "intro": [fragments.text(p.content) for p in content.intro],
        "stylesheet": stylesheet,
        "embed_id": ELEMENTOR_TEMPLATE_ID,
        "updated_iso": updated.strftime("%Y-%m"),
        "updated_label": updated.strftime("%B %Y"),
    }


def generate_comparison_html(
    html: str,
    escape: bool = True,
    stylesheet: str = DEFAULT_STYLESHEET,
    updated: Optional[datetime.date] = None,
) -> str:
    """Multi-subject layout: everything after the intro goes into one body section."""
    content = extract_structured_content(html)
    fragments = _Fragments(escape)
    parts: List[str] = []
    for section in content.body:
        if section.type == "heading":
            logger.debug(
                "Heading {!r} tagged as {}", section.text, detect_section_type(section.text)
            )
        parts.append(fragments.section(section, _clamp(section.level, 2, 4)))

    context = _page_context(content, fragments, "Your Article Title", stylesheet, updated)
    context["body"] = Markup("".join(parts))
    return _ENV.get_template("comparison.html").render(**context)


def bucket_sections(
    body: Sequence[Section],
    fragments: _Fragments,
) -> Dict[str, object]:
    """Route sections into the named single-review slots by heading category."""
    slots: Dict[str, List[str]] = {name: [] for name in SLOT_NAMES}
    current = "overview"
    pros_cons_detected = False
    for section in body:
        if section.type == "heading":
            current = CATEGORY_SLOTS.get(detect_section_type(section.text), "general")
            pros_cons_detected = pros_cons_detected or current == "pros_and_cons"
            level = 3 if (section.level or 2) <= 2 else 4
            slots[current].append(fragments.heading(section, level))
        elif section.type == "list" and current not in {"bonuses", "games", "pros_and_cons"}:
            target = next((name for name in ("games", "bonuses") if not slots[name]), "general")
            slots[target].append(fragments.bullet_list(section))
        else:
            slots[current].append(fragments.section(section, 4))
    result: Dict[str, object] = {name: Markup("".join(parts)) for name, parts in slots.items()}
    result["pros_cons_detected"] = pros_cons_detected
    return result


def generate_single_review_html(
    html: str,
    escape: bool = True,
    stylesheet: str = DEFAULT_STYLESHEET,
    updated: Optional[datetime.date] = None,
    include_detected_pros_cons: bool = False,
) -> str:
    """Single-subject layout: a tabbed platform card fed from named slots."""
    content = extract_structured_content(html)
    fragments = _Fragments(escape)
    slots = bucket_sections(content.body, fragments)
    if slots["pros_and_cons"] and not include_detected_pros_cons:
        logger.debug("Replacing detected pros/cons content with placeholders")

    context = _page_context(content, fragments, "Casino Review 2025", stylesheet, updated)
    context.update(slots)
    context["include_detected_pros_cons"] = include_detected_pros_cons
    return _ENV.get_template("single_review.html").render(**context)


def assemble(
    html: str,
    mode: AssemblyMode = AssemblyMode.COMPARISON,
    escape: bool = True,
    stylesheet: str = DEFAULT_STYLESHEET,
    updated: Optional[datetime.date] = None,
    include_detected_pros_cons: bool = False,
) -> str:
    """Assemble extracted HTML into a complete page for the chosen mode."""
    mode = AssemblyMode(mode)
    logger.info("Assembling {} page (escape={})", mode.value, escape)
    try:
        if mode is AssemblyMode.COMPARISON:
            return generate_comparison_html(html, escape, stylesheet, updated)
        return generate_single_review_html(
            html, escape, stylesheet, updated, include_detected_pros_cons
        )
    except (etree.ParserError, jinja2.TemplateError) as exc:
        raise AssemblyError(f"Could not assemble {mode.value} page: {exc}") from exc


def render_editor_shell(body: str, stylesheet: str) -> str:
    return _ENV.get_template("editor_shell.html").render(
        body=Markup(body), stylesheet=stylesheet, embed_id=ELEMENTOR_TEMPLATE_ID
    )
