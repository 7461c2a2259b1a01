"""Tests for the parser facade: end-to-end parsing and fallback policy."""

import json
import logging

import pytest

import form_parser
from form_parser import PDFFormParser
from acroform_schema import RawWidget, current_template, legacy_template, parse_pdf_field_ids
from config import LOGGER_NAME


def _public(sections):
    return [s.to_public() for s in sections]


@pytest.fixture
def parser():
    return PDFFormParser()


class TestEndToEnd:

    def test_merchant_form(self, parser, merchant_pdf):
        result = parser.parse_pdf(merchant_pdf)

        assert result.used_fallback is False
        assert result.fallback_reason is None
        assert result.widget_count == 7
        assert result.total_fields == 5
        assert [(s.title, s.order, len(s.fields)) for s in result.sections] == [
            ("Merchant", 1, 2),
            ("Owner", 2, 3),
        ]

        merchant, owner = result.sections
        assert merchant.fields[0].default_value == "Acme LLC"
        assert merchant.fields[1].field_type == "email"

        entity, payout, state = owner.fields
        assert entity.field_name == "owner_entity"
        assert entity.field_type == "radio"
        assert [o.value for o in entity.options] == ["partnership", "llc", "corp"]
        assert payout.field_type == "radio"
        assert payout.default_value == "Weekly"
        assert [o.label for o in payout.options] == ["Daily", "Weekly"]
        assert state.field_type == "select"
        assert state.option_labels() == ["CA", "New York"]
        assert [f.position for f in owner.fields] == [3, 6, 7]

    def test_parse_is_idempotent(self, parser, merchant_pdf):
        assert parser.parse_pdf(merchant_pdf).to_public_dict() == parser.parse_pdf(merchant_pdf).to_public_dict()

    def test_records_round_trip(self, parser, merchant_pdf):
        result = parser.parse_pdf(merchant_pdf)
        records = parser.convert_to_db_fields(result.sections, form_id=42)

        assert len(records) == result.total_fields
        entity = next(r for r in records if r.field_name == "owner_entity")
        assert parse_pdf_field_ids(entity.pdf_field_id) == [
            "owner_entity_radio_partnership",
            "owner_entity_radio_llc",
            "owner_entity_radio_corp",
        ]
        assert entity.options == ["Partnership", "Llc", "Corp"]
        assert entity.section == "owner"

    def test_unsectioned_form_collapses(self, parser, pdf_builder):
        pdf = pdf_builder([
            {"kind": "text", "name": "firstName"},
            {"kind": "text", "name": "companyEmail"},
        ])
        result = parser.parse_pdf(pdf)
        assert [s.title for s in result.sections] == ["Form Fields"]
        assert result.sections[0].fields[1].field_type == "email"

    def test_public_dict_shape(self, parser, merchant_pdf):
        public = parser.parse_pdf(merchant_pdf).to_public_dict()
        assert public["total_fields"] == 5
        assert public["metadata"] == {
            "used_fallback": False,
            "fallback_reason": None,
            "widget_count": 7,
            "collision_count": 0,
        }
        json.dumps(public)


class TestFallbackPolicy:

    def test_empty_widget_list(self, parser):
        result = parser.parse_widgets([])
        assert result.used_fallback
        assert result.fallback_reason == "no_fields"
        assert result.total_fields == 43
        assert _public(result.sections) == _public(current_template())

    def test_not_pdf(self):
        result = form_parser.parse(b"not a pdf at all")
        assert result.used_fallback
        assert result.fallback_reason == "not_pdf"
        assert result.total_fields == 43

    def test_unreadable_pdf(self, parser):
        result = parser.parse_pdf(b"%PDF-1.4\n%garbage with no objects")
        assert result.used_fallback
        assert result.fallback_reason == "parse_failed"

    def test_blank_pdf_warns(self, parser, pdf_builder, caplog):
        caplog.set_level(logging.WARNING, logger=LOGGER_NAME)
        result = parser.parse_pdf(pdf_builder([], with_acroform=False))

        assert result.fallback_reason == "no_fields"
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert any("Using fallback form template" in r.getMessage() for r in warnings)

    def test_structural_error(self, parser, monkeypatch, caplog):
        def boom(widgets):
            raise KeyError("section")

        monkeypatch.setattr(form_parser, "build_fields", boom)
        caplog.set_level(logging.ERROR, logger=LOGGER_NAME)

        result = parser.parse_widgets([RawWidget(name="merchant_name", kind="text")])
        assert result.used_fallback
        assert result.fallback_reason == "structural_error"
        assert result.widget_count == 1
        assert any(r.levelno == logging.ERROR for r in caplog.records)

    def test_legacy_variant(self, pdf_builder):
        parser = PDFFormParser(fallback_variant="legacy")
        result = parser.parse_pdf(pdf_builder([], with_acroform=False))
        assert result.total_fields == 42
        assert [f.field_name for f in result.sections[0].fields] == [
            f.field_name for f in legacy_template()[0].fields
        ]

    def test_fallback_never_mixes_with_extracted_fields(self, parser):
        result = parser.parse_widgets([])
        for section in result.sections:
            for f in section.fields:
                assert f.widget_ids == []

    @pytest.mark.parametrize("kwargs", [{"backend": "pdfminer"}, {"fallback_variant": "draft"}])
    def test_bad_configuration(self, kwargs):
        with pytest.raises(ValueError):
            PDFFormParser(**kwargs)


class TestLogging:

    def test_collisions_reported(self, parser, caplog):
        caplog.set_level(logging.WARNING, logger=LOGGER_NAME)
        widgets = [
            RawWidget(name="merchant_name", kind="text", value="first"),
            RawWidget(name="merchant_name", kind="text", value="second"),
        ]
        result = parser.parse_widgets(widgets)

        assert result.collisions == [("merchant", "name")]
        assert result.total_fields == 1
        assert any("merchant_name" in r.getMessage() for r in caplog.records)

    def test_summary_record(self, parser, merchant_pdf, caplog):
        caplog.set_level(logging.INFO, logger=LOGGER_NAME)
        parser.parse_pdf(merchant_pdf)

        summaries = [json.loads(r.getMessage()) for r in caplog.records if r.getMessage().startswith("{")]
        assert len(summaries) == 1
        summary = summaries[0]
        assert summary["backend"] == "pypdf"
        assert summary["total_fields"] == 5
        assert summary["section_titles"] == ["Merchant", "Owner"]
        assert summary["used_fallback"] is False


class TestPymupdfParser:

    def test_parse_with_pymupdf_backend(self):
        fitz = pytest.importorskip("fitz")
        doc = fitz.open()
        page = doc.new_page()
        for i, name in enumerate(["merchant_name", "owner_name"]):
            w = fitz.Widget()
            w.field_type = fitz.PDF_WIDGET_TYPE_TEXT
            w.field_name = name
            w.rect = fitz.Rect(50, 50 + i * 40, 250, 70 + i * 40)
            page.add_widget(w)
        data = doc.tobytes()
        doc.close()

        result = PDFFormParser(backend="pymupdf").parse_pdf(data)
        assert result.used_fallback is False
        assert [s.title for s in result.sections] == ["Merchant", "Owner"]
