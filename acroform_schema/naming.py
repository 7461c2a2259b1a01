"""Field-name convention helpers.

Widget names follow ``section_fieldname_optiontype[_optionvalue]``, e.g.

  - merchant_business_entity_radio_partnership
  - merchant_company_email_text
  - agent_name_text

The first token found in the option-type vocabulary marks the type. A field
name that itself contains a vocabulary word before the real type token (e.g.
``contact_email_preference_select_yes``) resolves to the earlier word; callers
that need to special-case such names can check ``is_structured``.
"""
from __future__ import annotations
import re
from typing import List

from config import FIELD_NAME_SEPARATOR, OPTION_TYPES, DEFAULT_SECTION
from .schema import FieldNameParts

_SEPARATORS_RE = re.compile(r"[_-]")
_CAPITAL_RE = re.compile(r"([A-Z])")
_WORD_START_RE = re.compile(r"\b\w")
_SPACES_RE = re.compile(r"\s+")
_NON_SLUG_RE = re.compile(r"[^a-z0-9_]")


def parse_field_name(name: str) -> FieldNameParts:
    parts: List[str] = name.split(FIELD_NAME_SEPARATOR)

    if len(parts) < 2:
        return FieldNameParts(section=DEFAULT_SECTION, field_name=name)

    option_type_index = -1
    for i, token in enumerate(parts):
        if token in OPTION_TYPES:
            option_type_index = i
            break

    if option_type_index > 0:
        option_value = None
        if option_type_index + 1 < len(parts):
            option_value = FIELD_NAME_SEPARATOR.join(parts[option_type_index + 1:])
        return FieldNameParts(
            section=parts[0],
            field_name=FIELD_NAME_SEPARATOR.join(parts[1:option_type_index]),
            option_type=parts[option_type_index],
            option_value=option_value,
            is_structured=True,
        )

    # Legacy format: just section_fieldname
    return FieldNameParts(
        section=parts[0],
        field_name=FIELD_NAME_SEPARATOR.join(parts[1:]),
    )


def generate_field_label(field_name: str) -> str:
    """Human-readable label, e.g. "TaxID" -> "Tax I D", "company_email" -> "Company Email"."""
    label = _SEPARATORS_RE.sub(" ", field_name)
    label = _CAPITAL_RE.sub(r" \1", label)
    label = _WORD_START_RE.sub(lambda m: m.group(0).upper(), label)
    return _SPACES_RE.sub(" ", label).strip()


def slugify_option(text: str, strict: bool = False) -> str:
    slug = _SPACES_RE.sub("_", text.lower())
    if strict:
        slug = _NON_SLUG_RE.sub("", slug)
    return slug
