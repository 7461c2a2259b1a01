"""Grouping and type reconciliation.

Widgets sharing (section, field_name, option_type) become one logical field.
The field type comes from the naming convention when present, otherwise from
the primitive widget kind upgraded by field-name substrings.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Dict, Optional, Tuple

from .schema import RawWidget, FieldNameParts, FieldOption, FormField
from .naming import parse_field_name, generate_field_label, slugify_option

# Primitive widget kind -> default field type
PRIMITIVE_FIELD_TYPES = {
    "text": "text",
    "multiline-text": "textarea",
    "dropdown": "select",
    "checkbox": "checkbox",
    "radio-group": "radio",
}

# Case-insensitive field-name substrings that upgrade a text field; first match wins
TEXT_TYPE_HINTS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("date",), "date"),
    (("email",), "email"),
    (("phone",), "phone"),
    (("zip", "postal"), "zipcode"),
    (("taxid", "ein"), "ein"),
)

OPTION_TYPE_ALIASES = {"bool": "boolean"}


@dataclass
class WidgetMember:
    widget: RawWidget
    parts: FieldNameParts
    position: int


@dataclass
class WidgetGroup:
    key: Tuple[str, ...]
    members: List[WidgetMember] = field(default_factory=list)

    @property
    def first(self) -> WidgetMember:
        return self.members[0]

    @property
    def parts(self) -> FieldNameParts:
        return self.first.parts

    @property
    def position(self) -> int:
        return self.first.position


def normalize_option_type(option_type: str) -> str:
    return OPTION_TYPE_ALIASES.get(option_type, option_type)


def infer_primitive_type(widget: RawWidget, field_name: str) -> str:
    field_type = PRIMITIVE_FIELD_TYPES[widget.kind]
    if widget.kind not in ("text", "multiline-text"):
        return field_type
    lower = field_name.lower()
    for needles, hinted in TEXT_TYPE_HINTS:
        if any(n in lower for n in needles):
            return hinted
    return field_type


def _primitive_default(widget: RawWidget) -> Optional[str]:
    if widget.kind == "checkbox":
        return "true" if widget.checked else "false"
    if widget.kind in ("dropdown", "radio-group"):
        return widget.selected or None
    return widget.value or None


def _primitive_options(widget: RawWidget) -> Optional[List[FieldOption]]:
    if widget.kind not in ("dropdown", "radio-group") or not widget.options:
        return None
    return [
        FieldOption(label=opt, value=slugify_option(opt), source_widget_id=widget.name)
        for opt in widget.options
    ]


def group_widgets(widgets: List[RawWidget]) -> Tuple[List[WidgetGroup], List[Tuple[str, ...]]]:
    """Group widgets by key in encounter order.

    Unstructured widgets never form multi-member groups: a repeated unstructured
    key replaces the earlier widget (last writer wins, first position kept) and
    is reported in the returned collision list.
    """
    groups: Dict[Tuple[str, ...], WidgetGroup] = {}
    collisions: List[Tuple[str, ...]] = []

    for index, widget in enumerate(widgets):
        parts = parse_field_name(widget.name)
        key = parts.group_key()
        member = WidgetMember(widget=widget, parts=parts, position=index + 1)
        group = groups.get(key)
        if group is None:
            groups[key] = WidgetGroup(key=key, members=[member])
        elif parts.option_type:
            group.members.append(member)
        else:
            collisions.append(key)
            member.position = group.position
            group.members[0] = member

    return list(groups.values()), collisions


def reconcile_group(group: WidgetGroup) -> FormField:
    parts = group.parts
    full_name = f"{parts.section}_{parts.field_name}"
    label = generate_field_label(parts.field_name)

    if parts.is_structured and parts.option_type and len(group.members) > 1:
        options = [
            FieldOption(
                label=generate_field_label(m.parts.option_value or ""),
                value=m.parts.option_value or "",
                source_widget_id=m.widget.name,
            )
            for m in group.members
        ]
        return FormField(
            field_name=full_name,
            field_type=normalize_option_type(parts.option_type),
            field_label=label,
            position=group.position,
            section=parts.section,
            options=options,
            source_widget_ids=[m.widget.name for m in group.members],
        )

    widget = group.first.widget
    if parts.is_structured and parts.option_type:
        return FormField(
            field_name=full_name,
            field_type=normalize_option_type(parts.option_type),
            field_label=label,
            position=group.position,
            section=parts.section,
            source_widget_id=widget.name,
        )

    return FormField(
        field_name=full_name,
        field_type=infer_primitive_type(widget, parts.field_name),
        field_label=label,
        position=group.position,
        section=parts.section,
        options=_primitive_options(widget),
        default_value=_primitive_default(widget),
        source_widget_id=widget.name,
    )


def build_fields(widgets: List[RawWidget]) -> Tuple[List[FormField], List[Tuple[str, ...]]]:
    groups, collisions = group_widgets(widgets)
    fields = [reconcile_group(g) for g in groups]
    return fields, collisions
