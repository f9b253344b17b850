"""Tests for configuration and record file loading."""

import json

import pytest

from rxt.exceptions import ValidationError
from rxt.utils.yaml_parser import load_export_config, load_records, load_yaml, substitute_env_vars


class TestSubstituteEnvVars:
    """Environment variable substitution."""

    def test_substitutes_set_variable(self, monkeypatch):
        monkeypatch.setenv("EXPORT_FORMAT", "json")
        assert substitute_env_vars("${EXPORT_FORMAT}") == "json"

    def test_set_variable_wins_over_default(self, monkeypatch):
        monkeypatch.setenv("EXPORT_FORMAT", "pdf")
        assert substitute_env_vars("${EXPORT_FORMAT:-csv}") == "pdf"

    def test_default_used_when_unset(self, monkeypatch):
        monkeypatch.delenv("EXPORT_FORMAT", raising=False)
        assert substitute_env_vars("${EXPORT_FORMAT:-csv}") == "csv"

    def test_missing_variable_raises(self, monkeypatch):
        """Test that an unset variable without default is an error."""
        monkeypatch.delenv("EXPORT_FORMAT", raising=False)
        with pytest.raises(ValidationError, match="EXPORT_FORMAT"):
            substitute_env_vars({"format": "${EXPORT_FORMAT}"})

    def test_nested_structures(self, monkeypatch):
        """Test recursion into dicts and lists, leaving other types alone."""
        monkeypatch.setenv("STATUS", "active")
        data = {"filters": {"status": "${STATUS}"}, "fields": ["id", "${STATUS}"], "n": 3}
        assert substitute_env_vars(data) == {
            "filters": {"status": "active"},
            "fields": ["id", "active"],
            "n": 3,
        }


class TestLoadExportConfig:
    """Export configuration files."""

    def test_valid_config(self, tmp_path):
        """Test a complete configuration."""
        path = tmp_path / "export.yaml"
        path.write_text(
            "format: CSV\n"
            "options:\n"
            "  include_metadata: true\n"
            "  fields: [id, name]\n"
            "  filters:\n"
            "    status: active\n"
            "encoders:\n"
            "  tsv: rxt.encoders.tabular.CSVEncoder\n"
        )

        export_config = load_export_config(path)

        assert export_config.format == "csv"
        assert export_config.options.include_metadata is True
        assert export_config.options.fields == ["id", "name"]
        assert export_config.options.filters == {"status": "active"}
        assert export_config.encoders == {"tsv": "rxt.encoders.tabular.CSVEncoder"}

    def test_minimal_config(self, tmp_path):
        """Test defaults for omitted sections."""
        path = tmp_path / "export.yaml"
        path.write_text("format: json\n")

        export_config = load_export_config(path)

        assert export_config.options.include_metadata is False
        assert export_config.options.fields is None
        assert export_config.encoders == {}

    def test_invalid_options(self, tmp_path):
        """Test that an empty field selection is rejected."""
        path = tmp_path / "export.yaml"
        path.write_text("format: csv\noptions:\n  fields: []\n")

        with pytest.raises(ValidationError, match="Invalid export configuration"):
            load_export_config(path)

    def test_unknown_key(self, tmp_path):
        """Test that unknown top-level keys are rejected."""
        path = tmp_path / "export.yaml"
        path.write_text("format: csv\ndestination: s3\n")

        with pytest.raises(ValidationError):
            load_export_config(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        with pytest.raises(ValidationError, match="Empty YAML file"):
            load_yaml(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- csv\n- json\n")
        with pytest.raises(ValidationError, match="Expected a mapping"):
            load_yaml(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("format: [csv\n")
        with pytest.raises(ValidationError, match="Invalid YAML"):
            load_yaml(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValidationError, match="File not found"):
            load_yaml(tmp_path / "missing.yaml")


class TestLoadRecords:
    """Record files."""

    def test_json_list(self, tmp_path):
        """Test a plain JSON array."""
        path = tmp_path / "records.json"
        path.write_text(json.dumps([{"id": 1}, {"id": 2}]))
        assert load_records(path) == [{"id": 1}, {"id": 2}]

    def test_json_envelope(self, tmp_path):
        """Test that a previous JSON export can be read back."""
        path = tmp_path / "export.json"
        path.write_text(json.dumps({"metadata": {"recordCount": 1}, "data": [{"id": 1}]}))
        assert load_records(path) == [{"id": 1}]

    def test_json_lines(self, tmp_path):
        """Test JSON Lines with blank lines."""
        path = tmp_path / "records.jsonl"
        path.write_text('{"id": 1}\n\n{"id": 2}\n')
        assert load_records(path) == [{"id": 1}, {"id": 2}]

    def test_yaml_list(self, tmp_path):
        """Test a YAML sequence of mappings."""
        path = tmp_path / "records.yaml"
        path.write_text("- id: 1\n  name: Alice\n- id: 2\n  name: Bob\n")
        assert load_records(path) == [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]

    def test_non_list_rejected(self, tmp_path):
        path = tmp_path / "object.json"
        path.write_text(json.dumps({"id": 1}))
        with pytest.raises(ValidationError, match="Expected a list of records"):
            load_records(path)

    def test_non_object_record_rejected(self, tmp_path):
        path = tmp_path / "scalars.json"
        path.write_text(json.dumps([{"id": 1}, 2]))
        with pytest.raises(ValidationError, match="Record 1"):
            load_records(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{")
        with pytest.raises(ValidationError, match="Invalid record file"):
            load_records(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValidationError, match="File not found"):
            load_records(tmp_path / "missing.json")
