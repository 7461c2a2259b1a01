from __future__ import annotations
from typing import List, Dict

from config import COLLAPSED_SECTION_TITLE, DEFAULT_SECTION
from .schema import FormField, FormSection
from .naming import generate_field_label


def group_fields_into_sections(fields: List[FormField]) -> List[FormSection]:
    """Partition fields by their section key, or a single section when that adds nothing.

    A single bucket, or two buckets where "general" already holds every field,
    collapses into one "Form Fields" section in original field order.
    """
    buckets: Dict[str, List[FormField]] = {}
    for f in fields:
        buckets.setdefault(f.section, []).append(f)

    general = buckets.get(DEFAULT_SECTION)
    if len(buckets) == 1 or (len(buckets) == 2 and general is not None and len(general) == len(fields)):
        return [FormSection(title=COLLAPSED_SECTION_TITLE, order=1, fields=list(fields))]

    return [
        FormSection(title=generate_field_label(key), order=order, fields=bucket)
        for order, (key, bucket) in enumerate(buckets.items(), start=1)
    ]
