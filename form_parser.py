"""
PDF form parsing interface with fallback handling.
Provides a single entry point over the acroform_schema pipeline.
"""

import time
from typing import List, Optional, Any

from acroform_schema import (
    RawWidget,
    FormSection,
    PersistenceRecord,
    ParseResult,
    FormParseError,
    DocumentLoadError,
    EmptyFormError,
    UnexpectedStructuralError,
    read_widgets,
    build_fields,
    group_fields_into_sections,
    get_fallback_template,
    count_fields,
    to_persistence_records as _to_persistence_records,
)
from config import DEFAULT_BACKEND, DEFAULT_FALLBACK_VARIANT, SUPPORTED_BACKENDS
from logging_utils import ParseLogger, collision_summary


class PDFFormParser:
    """Turns a fillable PDF into sections of logical fields.

    Never raises for document content: unreadable documents, documents without
    widgets and structuring failures all yield the whole fallback template.
    """

    def __init__(self, fallback_variant: str = DEFAULT_FALLBACK_VARIANT, backend: str = DEFAULT_BACKEND,
                 logger: Optional[ParseLogger] = None):
        if backend not in SUPPORTED_BACKENDS:
            raise ValueError(f"Unknown extraction backend: {backend!r}")
        # Fail on a bad variant at construction, not on the first fallback
        get_fallback_template(fallback_variant)
        self.fallback_variant = fallback_variant
        self.backend = backend
        self.logger = logger or ParseLogger()

    def parse_pdf(self, buffer: bytes) -> ParseResult:
        """
        Parse a PDF buffer into a structured form schema.

        Args:
            buffer: Raw PDF file bytes

        Returns:
            ParseResult with sections and total logical field count
        """
        started = time.time()
        try:
            try:
                widgets = read_widgets(buffer, backend=self.backend, on_skip=self.logger.log_skipped_widget)
            except DocumentLoadError:
                raise
            except Exception as e:  # malformed object trees surface as reader-specific errors
                raise DocumentLoadError(f"{type(e).__name__}: {e}") from e
        except DocumentLoadError as e:
            self.logger.log_fallback(e.error_code, e.message)
            result = self._fallback(e.error_code)
            self.logger.log_parse_summary(result, started, {"backend": self.backend})
            return result

        self.logger.log_widgets_read(len(widgets), self.backend)
        result = self._structure(widgets)
        self.logger.log_parse_summary(result, started, {
            "backend": self.backend,
            "collisions": collision_summary(result.collisions),
        })
        return result

    def parse_widgets(self, widgets: List[RawWidget]) -> ParseResult:
        """Same policy as parse_pdf, starting from an already extracted widget list."""
        started = time.time()
        result = self._structure(widgets)
        self.logger.log_parse_summary(result, started)
        return result

    def convert_to_db_fields(self, sections: List[FormSection], form_id: Any) -> List[PersistenceRecord]:
        return _to_persistence_records(sections, form_id)

    def fallback_sections(self) -> List[FormSection]:
        return get_fallback_template(self.fallback_variant)

    def _structure(self, widgets: List[RawWidget]) -> ParseResult:
        try:
            if not widgets:
                raise EmptyFormError("No form fields found in PDF")
            try:
                fields, collisions = build_fields(widgets)
                sections = group_fields_into_sections(fields)
            except Exception as e:
                raise UnexpectedStructuralError(f"{type(e).__name__}: {e}") from e
        except FormParseError as e:
            self.logger.log_fallback(e.error_code, e.message)
            return self._fallback(e.error_code, widget_count=len(widgets or []))

        for key in collisions:
            self.logger.log_collision(key)
        self.logger.log_extracted(len(widgets), len(fields))
        return ParseResult(
            sections=sections,
            total_fields=len(fields),
            widget_count=len(widgets),
            collisions=collisions,
        )

    def _fallback(self, reason: str, widget_count: int = 0) -> ParseResult:
        sections = self.fallback_sections()
        return ParseResult(
            sections=sections,
            total_fields=count_fields(sections),
            used_fallback=True,
            fallback_reason=reason,
            widget_count=widget_count,
        )


pdf_form_parser = PDFFormParser()


def parse(buffer: bytes) -> ParseResult:
    return pdf_form_parser.parse_pdf(buffer)


def parse_widgets(widgets: List[RawWidget]) -> ParseResult:
    return pdf_form_parser.parse_widgets(widgets)


def to_persistence_records(sections: List[FormSection], form_id: Any) -> List[PersistenceRecord]:
    return pdf_form_parser.convert_to_db_fields(sections, form_id)
