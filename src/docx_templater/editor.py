from __future__ import annotations

from typing import Iterable, List, Optional

from loguru import logger

from .assembler import render_editor_shell
from .config import DEFAULT_EDITOR_STYLESHEET
from .errors import InvalidSectionsError, SectionNotFoundError
from .sections import Section, parse_sections
from .styles import get_style, render_with_style


def _checked(sections: Iterable[Section]) -> List[Section]:
    """Return the sections as a list, rejecting duplicate ids or orders."""
    sections = list(sections)
    for attr in ("id", "order"):
        seen = set()
        for section in sections:
            value = getattr(section, attr)
            if value in seen:
                raise InvalidSectionsError(f"Duplicate section {attr}: {value!r}")
            seen.add(value)
    return sections


class SectionEditor:
    """In-memory section list with user-adjustable style assignments.

    Every mutation keeps ``order`` a total ranking of the sections; values
    are never re-sequenced, so gaps left by deletions are preserved.
    """

    def __init__(
        self,
        sections: Optional[Iterable[Section]] = None,
        stylesheet: str = DEFAULT_EDITOR_STYLESHEET,
    ):
        self.sections: List[Section] = _checked(sections or [])
        self.stylesheet = stylesheet

    @classmethod
    def from_html(cls, html: str, stylesheet: str = DEFAULT_EDITOR_STYLESHEET) -> "SectionEditor":
        return cls(parse_sections(html), stylesheet=stylesheet)

    def __len__(self) -> int:
        return len(self.sections)

    def ordered(self) -> List[Section]:
        return sorted(self.sections, key=lambda s: s.order)

    def get(self, section_id: str) -> Section:
        for section in self.sections:
            if section.id == section_id:
                return section
        raise SectionNotFoundError(section_id)

    def apply_suggestions(self, sections: Iterable[Section]) -> None:
        """Replace the whole list with sections from the assisted classifier."""
        self.sections = _checked(sections)
        logger.info("Replaced editor state with {} suggested sections", len(self.sections))

    def assign_style(self, section_id: str, style_id: str) -> Section:
        get_style(style_id)
        section = self.get(section_id)
        section.style_id = style_id
        return section

    def move(self, section_id: str, offset: int) -> None:
        """Move a section ``offset`` positions within the ordered sequence.

        Moves past either end are clamped; a move that goes nowhere is a no-op.
        """
        ordered = self.ordered()
        index = next((i for i, s in enumerate(ordered) if s.id == section_id), None)
        if index is None:
            raise SectionNotFoundError(section_id)
        target = max(0, min(len(ordered) - 1, index + offset))
        if target == index:
            return
        ranks = [s.order for s in ordered]
        ordered.insert(target, ordered.pop(index))
        for section, rank in zip(ordered, ranks):
            section.order = rank

    def move_up(self, section_id: str) -> None:
        self.move(section_id, -1)

    def move_down(self, section_id: str) -> None:
        self.move(section_id, 1)

    def delete(self, section_id: str) -> Section:
        section = self.get(section_id)
        self.sections = [s for s in self.sections if s is not section]
        return section

    def render(self) -> str:
        """Wrap each section in its style template and join them in order."""
        body = "\n".join(
            render_with_style(section.style_id, section.html_content)
            for section in self.ordered()
        )
        return render_editor_shell(body, self.stylesheet)
