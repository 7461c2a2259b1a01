from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Tuple, Literal

WidgetKind = Literal["text", "multiline-text", "dropdown", "checkbox", "radio-group"]

WIDGET_KINDS: Tuple[str, ...] = ("text", "multiline-text", "dropdown", "checkbox", "radio-group")

FieldType = Literal[
    "text", "number", "date", "select", "checkbox", "textarea", "phone", "email",
    "url", "mcc-select", "zipcode", "ein", "radio", "boolean",
]


@dataclass(frozen=True)
class RawWidget:
    """One terminal AcroForm field as read from the document.

    ``kind`` is the primitive widget kind. Text kinds carry their current text in
    ``value``; dropdown and radio groups carry the selected export value in
    ``value`` and their choices in ``options``; checkboxes carry the on-state
    name in ``value`` when checked and ``None`` when not.
    """
    name: str
    kind: WidgetKind
    value: Optional[str] = None
    options: Optional[Tuple[str, ...]] = None

    def __post_init__(self):
        if self.kind not in WIDGET_KINDS:
            raise ValueError(f"Unknown widget kind: {self.kind!r}")

    @property
    def multiline(self) -> bool:
        return self.kind == "multiline-text"

    @property
    def checked(self) -> bool:
        return self.kind == "checkbox" and self.value is not None

    @property
    def selected(self) -> Optional[str]:
        if self.kind in ("dropdown", "radio-group"):
            return self.value
        return None


@dataclass(frozen=True)
class FieldNameParts:
    section: str
    field_name: str
    option_type: Optional[str] = None
    option_value: Optional[str] = None
    is_structured: bool = False

    def group_key(self) -> Tuple[str, ...]:
        if self.option_type:
            return (self.section, self.field_name, self.option_type)
        return (self.section, self.field_name)


@dataclass
class FieldOption:
    label: str
    value: str
    source_widget_id: str

    def to_public(self) -> Dict[str, Any]:
        return {"label": self.label, "value": self.value, "source_widget_id": self.source_widget_id}


@dataclass
class FormField:
    """A logical form field, backed by one widget or a group of widgets.

    Extracted fields carry exactly one of ``source_widget_id`` (single widget) or
    ``source_widget_ids`` (grouped widgets). Fallback template fields carry neither
    and may add ``help_text`` / ``placeholder`` for the rendering layer.
    """
    field_name: str
    field_type: FieldType
    field_label: str
    position: int
    section: str
    is_required: bool = False
    options: Optional[List[FieldOption]] = None
    default_value: Optional[str] = None
    validation: Optional[str] = None  # JSON string of validation hints
    source_widget_id: Optional[str] = None
    source_widget_ids: Optional[List[str]] = None
    help_text: Optional[str] = None
    placeholder: Optional[str] = None

    @property
    def widget_ids(self) -> List[str]:
        if self.source_widget_ids:
            return list(self.source_widget_ids)
        if self.source_widget_id:
            return [self.source_widget_id]
        return []

    def option_labels(self) -> Optional[List[str]]:
        if self.options is None:
            return None
        return [o.label for o in self.options]

    def to_public(self) -> Dict[str, Any]:  # stable outward shape
        return {
            "field_name": self.field_name,
            "field_type": self.field_type,
            "field_label": self.field_label,
            "is_required": self.is_required,
            "position": self.position,
            "section": self.section,
            **({"options": [o.to_public() for o in self.options]} if self.options is not None else {}),
            **({"default_value": self.default_value} if self.default_value is not None else {}),
            **({"validation": self.validation} if self.validation else {}),
            **({"source_widget_id": self.source_widget_id} if self.source_widget_id else {}),
            **({"source_widget_ids": list(self.source_widget_ids)} if self.source_widget_ids else {}),
            **({"help_text": self.help_text} if self.help_text else {}),
            **({"placeholder": self.placeholder} if self.placeholder else {}),
        }


@dataclass
class FormSection:
    title: str
    order: int
    fields: List[FormField] = field(default_factory=list)
    description: Optional[str] = None

    def to_public(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "order": self.order,
            **({"description": self.description} if self.description else {}),
            "fields": [f.to_public() for f in self.fields],
        }


@dataclass
class PersistenceRecord:
    form_id: Any
    field_name: str
    field_type: str
    field_label: str
    is_required: bool
    options: Optional[List[str]]
    default_value: Optional[str]
    validation: Optional[str]
    position: int
    section: Optional[str]
    pdf_field_id: Optional[str]

    def to_public(self) -> Dict[str, Any]:
        return {
            "form_id": self.form_id,
            "field_name": self.field_name,
            "field_type": self.field_type,
            "field_label": self.field_label,
            "is_required": self.is_required,
            "options": list(self.options) if self.options is not None else None,
            "default_value": self.default_value,
            "validation": self.validation,
            "position": self.position,
            "section": self.section,
            "pdf_field_id": self.pdf_field_id,
        }


@dataclass
class ParseResult:
    sections: List[FormSection]
    total_fields: int
    used_fallback: bool = False
    fallback_reason: Optional[str] = None
    widget_count: int = 0
    collisions: List[Tuple[str, ...]] = field(default_factory=list)

    def to_public_dict(self) -> Dict[str, Any]:
        """Return a public dictionary consumed by the rendering layer."""
        return {
            "sections": [s.to_public() for s in self.sections],
            "total_fields": self.total_fields,
            "metadata": {
                "used_fallback": self.used_fallback,
                "fallback_reason": self.fallback_reason,
                "widget_count": self.widget_count,
                "collision_count": len(self.collisions),
            },
        }
