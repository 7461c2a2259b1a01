"""AcroForm schema extraction package.

Reads the flat widget list of a fillable PDF and rebuilds a sectioned, typed
form schema plus a flat persistence-ready field list. A static fallback
template stands in whenever extraction is impossible or yields nothing.
"""
from .schema import RawWidget, FieldNameParts, FieldOption, FormField, FormSection, PersistenceRecord, ParseResult
from .errors import (
    FormParseError,
    DocumentLoadError,
    NotPDFError,
    EncryptedPDFError,
    EmptyFormError,
    UnexpectedStructuralError,
)
from .extract import read_widgets
from .naming import parse_field_name, generate_field_label
from .grouping import build_fields
from .sections import group_fields_into_sections
from .templates import get_fallback_template, current_template, legacy_template, count_fields
from .persistence import to_persistence_records, parse_pdf_field_ids

__all__ = [
    "RawWidget",
    "FieldNameParts",
    "FieldOption",
    "FormField",
    "FormSection",
    "PersistenceRecord",
    "ParseResult",
    "FormParseError",
    "DocumentLoadError",
    "NotPDFError",
    "EncryptedPDFError",
    "EmptyFormError",
    "UnexpectedStructuralError",
    "read_widgets",
    "parse_field_name",
    "generate_field_label",
    "build_fields",
    "group_fields_into_sections",
    "get_fallback_template",
    "current_template",
    "legacy_template",
    "count_fields",
    "to_persistence_records",
    "parse_pdf_field_ids",
]
