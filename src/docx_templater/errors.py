"""Exceptions raised by the conversion pipeline."""

from __future__ import annotations


class DocxTemplaterError(Exception):
    """Base class for all errors raised by docx_templater."""


class ExtractionError(DocxTemplaterError):
    """The uploaded document could not be read or converted to HTML."""


class AssemblyError(DocxTemplaterError):
    """Parsed content could not be assembled into a document skeleton."""


class ClassificationError(DocxTemplaterError):
    """The assisted classification request failed."""


class UnknownStyleError(DocxTemplaterError, KeyError):
    """A style template id is not in the registry."""


class SectionNotFoundError(DocxTemplaterError, KeyError):
    """A section id is not present in the editor state."""


class InvalidSectionsError(DocxTemplaterError, ValueError):
    """A section list is malformed or its ids/orders are not unique."""
