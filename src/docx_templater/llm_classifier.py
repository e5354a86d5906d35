from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional

import google.generativeai as genai
from dotenv import load_dotenv
from loguru import logger

from .config import DEFAULT_MODEL
from .errors import ClassificationError
from .sections import SECTION_TYPES, Section
from .styles import DEFAULT_STYLE_ID, style_catalog


MAX_OUTPUT_TOKENS = 4096

_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")


@dataclass
class SuggestedSection:
    type: str
    content: str
    html_content: str
    suggested_style: Optional[str] = None
    reasoning: str = ""

    @classmethod
    def from_dict(cls, data: Mapping) -> "SuggestedSection":
        return cls(
            type=str(data.get("type") or "group"),
            content=str(data.get("content") or ""),
            html_content=str(data.get("htmlContent") or ""),
            suggested_style=data.get("suggestedStyle") or None,
            reasoning=str(data.get("reasoning") or ""),
        )

    def to_dict(self) -> Dict:
        return {
            "type": self.type,
            "content": self.content,
            "htmlContent": self.html_content,
            "suggestedStyle": self.suggested_style,
            "reasoning": self.reasoning,
        }


class SectionAnalyzer:
    """Very small wrapper around Gemini to split HTML into styled sections."""

    def __init__(self, model: str = DEFAULT_MODEL, api_key: Optional[str] = None):
        load_dotenv()
        api_key = api_key or os.getenv("GOOGLE_API_KEY")
        if not api_key:
            raise ClassificationError("GOOGLE_API_KEY is not set")
        genai.configure(api_key=api_key)
        self.model_name = model

    def analyze(
        self,
        html: str,
        style_nodes: Optional[Mapping[str, Mapping[str, str]]] = None,
    ) -> List[SuggestedSection]:
        """Send the HTML and style catalogue to the model, return its suggestions."""
        prompt = build_prompt(html, style_nodes if style_nodes is not None else style_catalog())
        model = genai.GenerativeModel(self.model_name)
        logger.info("Requesting section analysis from {}", self.model_name)
        try:
            response = model.generate_content(
                prompt,
                generation_config=genai.types.GenerationConfig(
                    max_output_tokens=MAX_OUTPUT_TOKENS
                ),
            )
            text = response.text or ""
        except Exception as exc:
            raise ClassificationError(f"Section analysis request failed: {exc}") from exc
        suggestions = parse_suggestions(text)
        logger.info("Model suggested {} sections", len(suggestions))
        return suggestions


PROMPT_TEMPLATE = """\
You are an expert content analyzer for HTML conversion. Analyze the following HTML content and break it down into logical sections. For each section, suggest the most appropriate style template.

Available style templates:
{style_list}

HTML to analyze:
{html}

Analyze this HTML and return a JSON array of sections. Each section should have:
- type: 'heading' | 'paragraph' | 'list' | 'table' | 'group'
- content: Plain text content (first 100 chars)
- htmlContent: The actual HTML for this section
- suggestedStyle: The ID of the most appropriate style template
- reasoning: Brief explanation of why this style fits

Break down nested structures intelligently. Group related content together when appropriate. Focus on semantic meaning and context.

Return ONLY valid JSON, no additional text."""


def build_prompt(html: str, style_nodes: Mapping[str, Mapping[str, str]]) -> str:
    style_list = "\n".join(
        f"- {style_id}: {node.get('name', '')} - {node.get('description', '')}"
        for style_id, node in style_nodes.items()
    )
    return PROMPT_TEMPLATE.format(style_list=style_list, html=html)


def parse_suggestions(text: str) -> List[SuggestedSection]:
    """Parse the first JSON array found in the model output.

    Prose around the array is ignored; output without any array yields an
    empty list. An array that is not valid JSON raises ClassificationError.
    """
    match = _JSON_ARRAY.search(text or "")
    if not match:
        logger.warning("Model response contained no JSON array")
        return []
    try:
        items = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise ClassificationError(f"Model returned malformed JSON: {exc}") from exc
    return [SuggestedSection.from_dict(item) for item in items if isinstance(item, dict)]


def suggestions_to_sections(suggestions: Iterable[SuggestedSection]) -> List[Section]:
    """Turn model suggestions into a fresh, zero-based section list."""
    sections: List[Section] = []
    for index, suggestion in enumerate(suggestions):
        section_type = suggestion.type if suggestion.type in SECTION_TYPES else "group"
        sections.append(
            Section(
                id=f"section-{index}",
                type=section_type,
                content=suggestion.content,
                html_content=suggestion.html_content,
                style_id=suggestion.suggested_style or DEFAULT_STYLE_ID,
                order=index,
                level=2 if section_type == "heading" else None,
            )
        )
    return sections
