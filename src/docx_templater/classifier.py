"""Keyword heuristics that assign a semantic category to section headings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from .sections import Section


FAQ = "faq"
PROS_AND_CONS = "proscons"
PROS = "pros"
CONS = "cons"
FEATURES = "features"
COMPARISON = "comparison"
BONUS = "bonus"
GAMES = "games"
PAYMENT = "payment"
SUPPORT = "support"
SECURITY = "security"
GENERAL = "general"


def _any(*keywords: str) -> Callable[[str], bool]:
    return lambda text: any(k in text for k in keywords)


def _all(*keywords: str) -> Callable[[str], bool]:
    return lambda text: all(k in text for k in keywords)


# Evaluated top to bottom, first match wins. The combined pros/cons rule
# must precede the singular pros and cons rules.
RULES: Tuple[Tuple[str, Callable[[str], bool]], ...] = (
    (FAQ, _any("faq", "question")),
    (PROS_AND_CONS, _all("pro", "con")),
    (PROS, _any("pros", "advantages")),
    (CONS, _any("cons", "disadvantages")),
    (FEATURES, _any("feature")),
    (COMPARISON, _any("comparison", "compare")),
    (BONUS, _any("bonus")),
    (GAMES, _any("game")),
    (PAYMENT, _any("payment", "banking")),
    (SUPPORT, _any("support")),
    (SECURITY, _any("security", "license")),
)

CATEGORIES = tuple(name for name, _ in RULES) + (GENERAL,)


def detect_section_type(heading: str) -> str:
    lower = heading.lower()
    for category, matches in RULES:
        if matches(lower):
            return category
    return GENERAL


@dataclass
class ContentBlock:
    """A heading and the sections that follow it up to the next heading."""

    heading: Optional[Section]
    category: str
    sections: List[Section] = field(default_factory=list)


def group_blocks(sections: Sequence[Section]) -> List[ContentBlock]:
    """Split sections into heading-bounded blocks, keeping document order.

    Content before the first heading is returned as a block without a
    heading, categorised as ``general``.
    """
    blocks: List[ContentBlock] = []
    current: Optional[ContentBlock] = None
    for section in sorted(sections, key=lambda s: s.order):
        if section.type == "heading":
            current = ContentBlock(section, detect_section_type(section.text))
            blocks.append(current)
        else:
            if current is None:
                current = ContentBlock(None, GENERAL)
                blocks.append(current)
            current.sections.append(section)
    return blocks
