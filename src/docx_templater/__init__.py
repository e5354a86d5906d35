"""
Convert Word documents into template-styled HTML pages, and let an editor
reassign style templates to the detected sections before export.
"""

from .assembler import AssemblyMode, assemble
from .classifier import detect_section_type
from .editor import SectionEditor
from .extractor import DocxExtractor, convert_plain_text, extract_html
from .llm_classifier import SectionAnalyzer
from .sections import Section, parse_sections
from .styles import STYLE_TEMPLATES, StyleTemplate

__all__ = [
    "AssemblyMode",
    "DocxExtractor",
    "STYLE_TEMPLATES",
    "Section",
    "SectionAnalyzer",
    "SectionEditor",
    "StyleTemplate",
    "assemble",
    "convert_plain_text",
    "detect_section_type",
    "extract_html",
    "parse_sections",
]
