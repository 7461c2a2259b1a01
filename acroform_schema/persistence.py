"""Flatten structured sections into persistence records.

Options keep their labels only. Grouped widget ids are stored as a JSON array
string in ``pdf_field_id``; single ids are stored verbatim.
"""
from __future__ import annotations
import json
from typing import List, Any, Optional

from .schema import FormSection, FormField, PersistenceRecord


def serialize_widget_ids(f: FormField) -> Optional[str]:
    if f.source_widget_id:
        return f.source_widget_id
    if f.source_widget_ids:
        return json.dumps(list(f.source_widget_ids))
    return None


def parse_pdf_field_ids(pdf_field_id: Optional[str]) -> List[str]:
    """Recover widget ids from a stored ``pdf_field_id``."""
    if not pdf_field_id:
        return []
    if pdf_field_id.startswith("["):
        try:
            ids = json.loads(pdf_field_id)
        except json.JSONDecodeError:
            return [pdf_field_id]
        if isinstance(ids, list) and all(isinstance(i, str) for i in ids):
            return ids
    return [pdf_field_id]


def to_persistence_records(sections: List[FormSection], form_id: Any) -> List[PersistenceRecord]:
    records: List[PersistenceRecord] = []
    for section in sections:
        for f in section.fields:
            records.append(PersistenceRecord(
                form_id=form_id,
                field_name=f.field_name,
                field_type=f.field_type,
                field_label=f.field_label,
                is_required=f.is_required,
                options=f.option_labels(),
                default_value=f.default_value or None,
                validation=f.validation or None,
                position=f.position,
                section=f.section or section.title,
                pdf_field_id=serialize_widget_ids(f),
            ))
    return records
