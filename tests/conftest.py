"""Pytest configuration and shared fixtures.

PDF fixtures are built in memory with pypdf generic objects so that field
trees (radio groups with kids, hierarchical names, push buttons) are exact.
"""

import io
from typing import Any, Dict, List

import pytest
from pypdf import PdfWriter
from pypdf.generic import (
    ArrayObject,
    DictionaryObject,
    FloatObject,
    NameObject,
    NumberObject,
    TextStringObject,
)

from acroform_schema import RawWidget
from config import FF_MULTILINE, FF_RADIO, FF_PUSHBUTTON


def _rect() -> ArrayObject:
    return ArrayObject([FloatObject(10), FloatObject(10), FloatObject(120), FloatObject(30)])


def _widget_base(name: str) -> DictionaryObject:
    return DictionaryObject({
        NameObject("/Type"): NameObject("/Annot"),
        NameObject("/Subtype"): NameObject("/Widget"),
        NameObject("/T"): TextStringObject(name),
        NameObject("/Rect"): _rect(),
    })


def _appearance(states: List[str]) -> DictionaryObject:
    normal = DictionaryObject({NameObject(f"/{s}"): DictionaryObject() for s in states})
    normal[NameObject("/Off")] = DictionaryObject()
    return DictionaryObject({NameObject("/N"): normal})


def _add_field(writer: PdfWriter, field_def: Dict[str, Any], parent=None):
    kind = field_def["kind"]
    name = field_def["name"]

    if kind == "parent":
        node = DictionaryObject({NameObject("/T"): TextStringObject(name)})
        ref = writer._add_object(node)
        node[NameObject("/Kids")] = ArrayObject([_add_field(writer, kid, parent=ref) for kid in field_def["kids"]])
        return ref

    node = _widget_base(name)
    if kind == "text":
        node[NameObject("/FT")] = NameObject("/Tx")
        if field_def.get("multiline"):
            node[NameObject("/Ff")] = NumberObject(FF_MULTILINE)
        if field_def.get("value") is not None:
            node[NameObject("/V")] = TextStringObject(field_def["value"])
    elif kind == "choice":
        node[NameObject("/FT")] = NameObject("/Ch")
        node[NameObject("/Opt")] = ArrayObject([
            ArrayObject([TextStringObject(o[0]), TextStringObject(o[1])]) if isinstance(o, tuple)
            else TextStringObject(o)
            for o in field_def["options"]
        ])
        if field_def.get("value") is not None:
            node[NameObject("/V")] = TextStringObject(field_def["value"])
    elif kind == "checkbox":
        node[NameObject("/FT")] = NameObject("/Btn")
        node[NameObject("/AP")] = _appearance(["Yes"])
        state = "/Yes" if field_def.get("checked") else "/Off"
        node[NameObject("/V")] = NameObject(state)
        node[NameObject("/AS")] = NameObject(state)
    elif kind == "push":
        node[NameObject("/FT")] = NameObject("/Btn")
        node[NameObject("/Ff")] = NumberObject(FF_PUSHBUTTON)
    elif kind == "radio":
        node = DictionaryObject({
            NameObject("/FT"): NameObject("/Btn"),
            NameObject("/Ff"): NumberObject(FF_RADIO),
            NameObject("/T"): TextStringObject(name),
        })
        selected = field_def.get("selected")
        node[NameObject("/V")] = NameObject(f"/{selected}" if selected else "/Off")
        ref = writer._add_object(node)
        kids = ArrayObject()
        for state in field_def["states"]:
            kid = DictionaryObject({
                NameObject("/Type"): NameObject("/Annot"),
                NameObject("/Subtype"): NameObject("/Widget"),
                NameObject("/Parent"): ref,
                NameObject("/Rect"): _rect(),
                NameObject("/AP"): _appearance([state]),
                NameObject("/AS"): NameObject(f"/{state}" if state == selected else "/Off"),
            })
            kids.append(writer._add_object(kid))
        node[NameObject("/Kids")] = kids
        if parent is not None:
            node[NameObject("/Parent")] = parent
        return ref
    else:
        raise ValueError(kind)

    if parent is not None:
        node[NameObject("/Parent")] = parent
    return writer._add_object(node)


def build_acroform_pdf(fields: List[Dict[str, Any]], with_acroform: bool = True) -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    if with_acroform:
        refs = ArrayObject([_add_field(writer, field_def) for field_def in fields])
        writer._root_object[NameObject("/AcroForm")] = DictionaryObject({NameObject("/Fields"): refs})
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


@pytest.fixture
def pdf_builder():
    return build_acroform_pdf


@pytest.fixture
def merchant_pdf() -> bytes:
    """Sectioned form using the naming convention, including a grouped radio choice."""
    return build_acroform_pdf([
        {"kind": "text", "name": "merchant_legalName", "value": "Acme LLC"},
        {"kind": "text", "name": "merchant_companyEmail"},
        {"kind": "checkbox", "name": "owner_entity_radio_partnership"},
        {"kind": "checkbox", "name": "owner_entity_radio_llc", "checked": True},
        {"kind": "checkbox", "name": "owner_entity_radio_corp"},
        {"kind": "radio", "name": "owner_payout", "states": ["Daily", "Weekly"], "selected": "Weekly"},
        {"kind": "choice", "name": "owner_state", "options": ["CA", ("NY", "New York")], "value": "CA"},
    ])


@pytest.fixture
def entity_widgets() -> List[RawWidget]:
    return [
        RawWidget(name="owner_entity_radio_partnership", kind="checkbox"),
        RawWidget(name="owner_entity_radio_llc", kind="checkbox"),
        RawWidget(name="owner_entity_radio_corp", kind="checkbox"),
    ]


@pytest.fixture
def mixed_widgets() -> List[RawWidget]:
    return [
        RawWidget(name="merchant_legalName", kind="text", value="Acme LLC"),
        RawWidget(name="merchant_notes", kind="multiline-text"),
        RawWidget(name="owner_entity_radio_partnership", kind="checkbox"),
        RawWidget(name="owner_agree", kind="checkbox", value="Yes"),
        RawWidget(name="owner_entity_radio_llc", kind="checkbox"),
        RawWidget(name="owner_state", kind="dropdown", value="NY", options=("CA", "NY")),
        RawWidget(name="x_flag_bool_true", kind="checkbox"),
        RawWidget(name="y_flag_boolean_false", kind="checkbox"),
    ]
