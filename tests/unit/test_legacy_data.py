"""
Unit tests for reading legacy company data shapes
"""
import pytest

from app.core.errors import LegacyFormatError
from app.services.legacy_data import (
    DEFAULT_IMPORT_NAME,
    FIELD_ROWS,
    SNAPSHOT,
    WIDE_ROW,
    camel_to_snake,
    detect_storage_shape,
    group_field_rows,
    normalize_company_record,
    normalize_payload,
    normalize_value,
    to_snapshot,
)

SNAPSHOT_RECORD = {
    "user_id": "user-1",
    "data": {"name": "TechFlow", "industry": "SaaS/Software", "targetMarket": "SMBs", "theme": "dark"},
    "lastUpdated": "2024-03-01T10:00:00Z",
    "version": "1.0",
}

WIDE_RECORD = {
    "id": 12,
    "user_id": "user-1",
    "name": "Brightside",
    "company_size": "Startup (1-10 employees)",
    "target_market": "Parents",
    "main_offerings": ["Tutoring", "Workbooks"],
    "logo_url": "https://cdn/logo.png",
    "updated_at": "2024-02-01",
}

FIELD_ROWS_RECORD = [
    {"company_id": 3, "field_name": "name", "field_value": "Northwind", "version": 1},
    {"company_id": 3, "field_name": "industry", "field_value": "Retail", "version": 1},
    {"company_id": 3, "field_name": "industry", "field_value": "E-commerce", "version": 3},
    {"company_id": 3, "field_name": "pain_points_solved", "field_value": "Stockouts", "version": 1},
]


def test_case_conversion():
    assert camel_to_snake("painPointsSolved") == "pain_points_solved"


def test_normalize_value():
    assert normalize_value(None) == ""
    assert normalize_value("  hi ") == "hi"
    assert normalize_value(["a", " ", "b"]) == "a, b"
    assert normalize_value({"b": 1, "a": 2}) == '{"a": 2, "b": 1}'
    assert normalize_value(42) == "42"


class TestDetectStorageShape:
    def test_snapshot(self):
        assert detect_storage_shape(SNAPSHOT_RECORD) == SNAPSHOT

    def test_flat_camel_case_dict_is_snapshot(self):
        assert detect_storage_shape({"name": "A", "targetMarket": "SMBs"}) == SNAPSHOT

    def test_wide_row(self):
        assert detect_storage_shape(WIDE_RECORD) == WIDE_ROW
        assert detect_storage_shape({"name": "A", "created_at": "2024-01-01"}) == WIDE_ROW

    def test_field_rows(self):
        assert detect_storage_shape(FIELD_ROWS_RECORD) == FIELD_ROWS
        assert detect_storage_shape({"fieldName": "name", "fieldValue": "A"}) == FIELD_ROWS

    @pytest.mark.parametrize("record", [{"foo": "bar"}, [], [{"foo": 1}], "text", 3])
    def test_unknown_shapes(self, record):
        with pytest.raises(LegacyFormatError):
            detect_storage_shape(record)


def test_normalize_snapshot_keeps_extras_apart():
    company = normalize_company_record(SNAPSHOT_RECORD)
    assert company.name == "TechFlow"
    assert company.source_shape == SNAPSHOT
    assert company.user_id == "user-1"
    assert company.updated_at == "2024-03-01T10:00:00Z"
    assert company.fields == {"name": "TechFlow", "industry": "SaaS/Software", "targetMarket": "SMBs"}
    assert company.extras == {"theme": "dark"}


def test_normalize_wide_row_maps_columns():
    company = normalize_company_record(WIDE_RECORD)
    assert company.source_shape == WIDE_ROW
    assert company.legacy_id == "12"
    assert company.fields["companySize"] == "Startup (1-10 employees)"
    assert company.fields["targetMarket"] == "Parents"
    assert company.fields["mainOfferings"] == "Tutoring, Workbooks"
    assert company.extras == {"logo_url": "https://cdn/logo.png"}
    assert company.updated_at == "2024-02-01"


def test_normalize_field_rows_highest_version_wins():
    company = normalize_company_record(FIELD_ROWS_RECORD)
    assert company.name == "Northwind"
    assert company.legacy_id == "3"
    assert company.fields["industry"] == "E-commerce"
    assert company.fields["painPointsSolved"] == "Stockouts"


def test_missing_name_gets_default():
    company = normalize_company_record({"industry": "Retail"})
    assert company.name == DEFAULT_IMPORT_NAME
    assert company.fields["name"] == DEFAULT_IMPORT_NAME


def test_nameless_records_named_after_owner():
    rows = normalize_company_record([{"company_id": 9, "field_name": "industry", "field_value": "Retail"}])
    assert rows.name == "Imported Company 9"
    assert rows.fields["name"] == "Imported Company 9"
    assert normalize_company_record({"id": 4, "target_market": "Parents"}).name == "Imported Company 4"
    assert normalize_company_record({"user_id": "u-2", "data": {"industry": "SaaS"}}).name == "Imported Company u-2"


def test_filled_fields_drops_blank_values():
    company = normalize_company_record({"name": "A", "industry": "  ", "location": None})
    assert company.filled_fields() == {"name": "A"}


def test_group_field_rows_by_owner():
    rows = [
        {"company_id": 1, "field_name": "name", "field_value": "One"},
        {"company_id": 2, "field_name": "name", "field_value": "Two"},
        {"company_id": 1, "field_name": "industry", "field_value": "Retail"},
    ]
    groups = group_field_rows(rows)
    assert [len(g) for g in groups] == [2, 1]


def test_normalize_payload_mixed_export():
    payload = {"companies": [SNAPSHOT_RECORD, WIDE_RECORD, {"nothing": "here"}] + FIELD_ROWS_RECORD}
    companies, errors = normalize_payload(payload)
    assert [c.name for c in companies] == ["TechFlow", "Brightside", "Northwind"]
    assert len(errors) == 1
    assert errors[0].startswith("record 2:")


def test_normalize_payload_company_data_rows():
    companies, errors = normalize_payload({"company_data": FIELD_ROWS_RECORD})
    assert errors == []
    assert companies[0].source_shape == FIELD_ROWS


def test_normalize_payload_rejects_scalars():
    with pytest.raises(LegacyFormatError):
        normalize_payload("not json data")


def test_to_snapshot_orders_fields():
    snapshot = to_snapshot({"industry": "Retail", "name": "A"}, "user-1", "2024-01-01T00:00:00Z")
    assert snapshot == {
        "user_id": "user-1",
        "data": {"name": "A", "industry": "Retail"},
        "lastUpdated": "2024-01-01T00:00:00Z",
        "version": "1.0",
    }
    assert list(snapshot["data"]) == ["name", "industry"]
