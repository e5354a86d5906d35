"""
Registry of style templates that wrap a section's HTML during final rendering.

The set is closed and fixed: ``STYLE_TEMPLATES`` is a read-only mapping from
style id to :class:`StyleTemplate`. Ids double as the wire names used by the
editor and the assisted classifier, so they keep their camelCase spelling.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, Mapping

from .errors import UnknownStyleError


@dataclass(frozen=True)
class StyleTemplate:
    id: str
    name: str
    description: str
    icon: str
    category: str  # structure | content | interactive
    render: Callable[[str], str]

    def describe(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "category": self.category,
        }


def _body(content: str) -> str:
    return f'<div class="body-text">{content}</div>'


def _platform_card(content: str) -> str:
    return f"""
      <div class="platform-card">
        <div class="platform-card__header">
          <div class="platform-card__title-section">
            {content}
          </div>
        </div>
        <div class="platform-card__body">
          <div class="platform-card__content">
            {content}
          </div>
        </div>
      </div>"""


def _hero(content: str) -> str:
    return f"""
      <div class="hero-section">
        <div class="hero-section__content">
          {content}
        </div>
      </div>"""


def _faq_item(content: str) -> str:
    return f"""
      <div class="faq-item">
        <div class="faq-item__question">
          {content}
        </div>
        <div class="faq-item__answer">
          {content}
        </div>
      </div>"""


def _comparison_table(content: str) -> str:
    return f"""
      <div class="comparison-table-container">
        <table class="comparison-table">
          {content}
        </table>
      </div>"""


def _feature_list(content: str) -> str:
    return f"""
      <div class="feature-list">
        <ul class="feature-list__items">
          {content}
        </ul>
      </div>"""


def _pros_cons(content: str) -> str:
    return f"""
      <div class="pros-cons-section">
        <div class="pros-cons-section__grid">
          {content}
        </div>
      </div>"""


def _stats_bar(content: str) -> str:
    return f"""
      <div class="stats-bar">
        <div class="stats-bar__content">
          {content}
        </div>
      </div>"""


def _tab_content(content: str) -> str:
    return f"""
      <div class="tab-content">
        {content}
      </div>"""


def _heading(content: str) -> str:
    return f'<h2 class="section-heading">{content}</h2>'


_TEMPLATES = (
    StyleTemplate("body", "Body Text", "Standard paragraph text", "📄", "content", _body),
    StyleTemplate(
        "platformCard",
        "Platform Card",
        "Casino/platform review card with styling",
        "🎰",
        "structure",
        _platform_card,
    ),
    StyleTemplate("hero", "Hero Section", "Large intro section with emphasis", "🎯", "structure", _hero),
    StyleTemplate("faqItem", "FAQ Item", "Question and answer format", "❓", "interactive", _faq_item),
    StyleTemplate(
        "comparisonTable",
        "Comparison Table",
        "Styled comparison table",
        "📊",
        "content",
        _comparison_table,
    ),
    StyleTemplate(
        "featureList",
        "Feature List",
        "Highlighted feature list with icons",
        "✨",
        "content",
        _feature_list,
    ),
    StyleTemplate("proscons", "Pros & Cons", "Two-column pros and cons layout", "⚖️", "content", _pros_cons),
    StyleTemplate("statsBar", "Stats Bar", "Visual statistics bar", "📈", "interactive", _stats_bar),
    StyleTemplate("tabContent", "Tab Content", "Content within a tab", "📑", "structure", _tab_content),
    StyleTemplate("heading", "Heading", "Section heading", "📌", "structure", _heading),
)

STYLE_TEMPLATES: Mapping[str, StyleTemplate] = MappingProxyType({t.id: t for t in _TEMPLATES})

DEFAULT_STYLE_ID = "body"


def get_style(style_id: str) -> StyleTemplate:
    try:
        return STYLE_TEMPLATES[style_id]
    except KeyError:
        raise UnknownStyleError(style_id) from None


def render_with_style(style_id: str, content: str) -> str:
    """Wrap ``content`` in a style template; unknown ids leave it untouched."""
    template = STYLE_TEMPLATES.get(style_id)
    if template is None:
        return content
    return template.render(content)


def style_catalog() -> Dict[str, Dict[str, str]]:
    """Return id -> {name, description, icon, category} for every style."""
    return {style_id: t.describe() for style_id, t in STYLE_TEMPLATES.items()}
