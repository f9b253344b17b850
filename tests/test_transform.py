"""Tests for the record transform pipeline."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from rxt.core.transform import (
    EXPORT_FORMAT_VERSION,
    EXPORT_VERSION_FIELD,
    EXPORTED_AT_FIELD,
    add_metadata,
    filter_records,
    format_timestamp,
    select_fields,
    transform,
)
from rxt.exceptions import TransformError
from rxt.models.options import ExportOptions

FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


@pytest.fixture
def users():
    """Heterogeneous user records."""
    return [
        {"id": 1, "name": "Alice", "status": "active", "age": 31},
        {"id": 2, "name": "Bob", "status": "inactive"},
        {"id": 3, "name": "Carol", "status": "active", "tags": ["admin"]},
        {"id": 4, "status": "active"},
    ]


class TestIdentity:
    """Transform with no options set."""

    def test_no_options_returns_equal_collection(self, users):
        """Test identity when no filter, selection or metadata is configured."""
        assert transform(users, ExportOptions(), FIXED_NOW) == users

    def test_none_options_returns_equal_collection(self, users):
        """Test that None options behave like defaults."""
        assert transform(users, None, FIXED_NOW) == users

    def test_returns_new_dicts(self, users):
        """Test that output records are copies, not the input objects."""
        result = transform(users, None, FIXED_NOW)
        result[0]["name"] = "Mallory"
        assert users[0]["name"] == "Alice"

    def test_empty_collection(self):
        """Test that an empty collection yields an empty collection."""
        options = ExportOptions(include_metadata=True, fields=["id"], filters={"id": 1})
        assert transform([], options, FIXED_NOW) == []


class TestFilter:
    """Exact-match filtering."""

    def test_filter_keeps_matching_records(self):
        """Test filtering on status keeps only the active record."""
        records = [{"id": 1, "status": "active"}, {"id": 2, "status": "inactive"}]
        result = transform(records, ExportOptions(filters={"status": "active"}), FIXED_NOW)
        assert result == [{"id": 1, "status": "active"}]

    def test_every_output_record_matches_filter(self, users):
        """Test filter invariant: every output value equals the filter value."""
        result = filter_records(users, {"status": "active"})
        assert len(result) <= len(users)
        assert all(record["status"] == "active" for record in result)
        assert [r["id"] for r in result] == [1, 3, 4]

    def test_missing_field_does_not_match(self, users):
        """Test that records without the filtered field are dropped."""
        result = filter_records(users, {"name": "Alice", "age": 31})
        assert [r["id"] for r in result] == [1]

    def test_no_type_coercion(self):
        """Test that string and number values never match each other."""
        records = [{"id": 1}, {"id": "1"}]
        assert filter_records(records, {"id": "1"}) == [{"id": "1"}]
        assert filter_records(records, {"id": 1}) == [{"id": 1}]

    def test_boolean_does_not_match_integer(self):
        """Test that True does not match 1 and False does not match 0."""
        records = [{"flag": True}, {"flag": 1}, {"flag": 0}, {"flag": False}]
        assert filter_records(records, {"flag": True}) == [{"flag": True}]
        assert filter_records(records, {"flag": 0}) == [{"flag": 0}]

    def test_none_filter_value_matches_explicit_null_only(self):
        """Test that a None filter value requires the field to be present."""
        records = [{"id": 1, "deleted_at": None}, {"id": 2}]
        assert filter_records(records, {"deleted_at": None}) == [{"id": 1, "deleted_at": None}]

    def test_preserves_order(self):
        """Test that filtering keeps source order."""
        records = [{"n": i, "even": i % 2 == 0} for i in range(10)]
        result = filter_records(records, {"even": True})
        assert [r["n"] for r in result] == [0, 2, 4, 6, 8]


class TestProjection:
    """Field selection."""

    def test_selection_order_is_preserved(self):
        """Test that output fields follow the selection order."""
        records = [{"b": 2, "a": 1, "c": 3}]
        result = select_fields(records, ["c", "a"])
        assert list(result[0].keys()) == ["c", "a"]

    def test_absent_fields_are_omitted(self, users):
        """Test that missing fields are not filled with None."""
        result = transform(users, ExportOptions(fields=["name", "age"]), FIXED_NOW)
        assert result[0] == {"name": "Alice", "age": 31}
        assert result[1] == {"name": "Bob"}
        assert result[3] == {}

    def test_field_set_is_subset_of_selection(self, users):
        """Test projection invariant over heterogeneous records."""
        selection = ["tags", "id", "missing"]
        for record in transform(users, ExportOptions(fields=selection), FIXED_NOW):
            assert set(record) <= set(selection)
            assert list(record) == [f for f in selection if f in record]

    def test_filter_runs_before_projection(self, users):
        """Test that filtering on a field that is projected away still works."""
        options = ExportOptions(filters={"status": "inactive"}, fields=["id"])
        assert transform(users, options, FIXED_NOW) == [{"id": 2}]


class TestMetadata:
    """Metadata annotation."""

    def test_adds_reserved_fields(self, users):
        """Test that every record gets the same timestamp and version."""
        result = transform(users, ExportOptions(include_metadata=True), FIXED_NOW)
        assert all(r[EXPORTED_AT_FIELD] == "2024-01-02T03:04:05.000Z" for r in result)
        assert all(r[EXPORT_VERSION_FIELD] == EXPORT_FORMAT_VERSION for r in result)

    def test_metadata_appended_after_projection(self):
        """Test that metadata fields follow the selected fields."""
        records = [{"id": 1, "name": "Alice"}]
        options = ExportOptions(include_metadata=True, fields=["name"])
        result = transform(records, options, FIXED_NOW)
        assert list(result[0]) == ["name", EXPORTED_AT_FIELD, EXPORT_VERSION_FIELD]

    def test_overwrites_existing_reserved_fields(self):
        """Test that pre-existing reserved fields are replaced."""
        records = [{"id": 1, EXPORTED_AT_FIELD: "yesterday", EXPORT_VERSION_FIELD: "0.1"}]
        result = add_metadata(records, FIXED_NOW)
        assert result[0][EXPORTED_AT_FIELD] == "2024-01-02T03:04:05.000Z"
        assert result[0][EXPORT_VERSION_FIELD] == EXPORT_FORMAT_VERSION

    def test_does_not_mutate_input(self):
        """Test that annotation builds new records."""
        records = [{"id": 1}]
        add_metadata(records, FIXED_NOW)
        assert records == [{"id": 1}]

    def test_accepts_preformatted_timestamp(self):
        """Test that a string timestamp is used verbatim."""
        result = add_metadata([{"id": 1}], "2020-01-01T00:00:00.000Z")
        assert result[0][EXPORTED_AT_FIELD] == "2020-01-01T00:00:00.000Z"


class TestFormatTimestamp:
    """Timestamp rendering."""

    def test_utc_with_milliseconds(self):
        """Test ISO-8601 rendering with a Z suffix."""
        moment = datetime(2024, 5, 1, 12, 30, 0, 123456, tzinfo=timezone.utc)
        assert format_timestamp(moment) == "2024-05-01T12:30:00.123Z"

    def test_converts_other_timezones(self):
        """Test conversion of offset-aware datetimes to UTC."""
        moment = datetime(2024, 5, 1, 14, 30, tzinfo=timezone(timedelta(hours=2)))
        assert format_timestamp(moment) == "2024-05-01T12:30:00.000Z"

    def test_naive_is_treated_as_utc(self):
        """Test that naive datetimes are not shifted."""
        assert format_timestamp(datetime(2024, 5, 1)) == "2024-05-01T00:00:00.000Z"


class TestInvalidInput:
    """Input validation."""

    def test_none_collection_raises(self):
        """Test that None is rejected."""
        with pytest.raises(TransformError, match="must not be None"):
            transform(None, None, FIXED_NOW)

    def test_non_mapping_record_raises(self):
        """Test that non-mapping records are rejected with their position."""
        with pytest.raises(TransformError, match="position 1"):
            transform([{"id": 1}, ["not", "a", "record"]], None, FIXED_NOW)


class TestExportOptions:
    """ExportOptions validation."""

    def test_empty_selection_rejected(self):
        """Test that an empty field selection is invalid."""
        with pytest.raises(PydanticValidationError, match="must not be empty"):
            ExportOptions(fields=[])

    def test_duplicate_fields_collapse(self):
        """Test that the selection behaves as an ordered set."""
        assert ExportOptions(fields=["b", "a", "b"]).fields == ["b", "a"]

    def test_unknown_option_rejected(self):
        """Test that extra keys are forbidden."""
        with pytest.raises(PydanticValidationError):
            ExportOptions(columns=["id"])
