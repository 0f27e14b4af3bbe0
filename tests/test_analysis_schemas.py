"""
Unit tests for decoding model replies into SQLResponse and ChartSelectResponse.
"""

import json

import pytest

from opendatabot.core.errors import ResponseDecodeError
from opendatabot.schemas.analysis import (
    ChartSelectResponse,
    ChartType,
    SQLResponse,
    decode_reply,
)


class TestDecodeSQLResponse:
    """Tests for decode_reply(SQLResponse, ...)."""

    def test_valid_reply(self) -> None:
        content = json.dumps({
            "Schema": "operating_budget(year, program)",
            "Applicability": "Yes",
            "SQL": "SELECT year FROM operating_budget",
            "MissingData": "",
        })
        resp = decode_reply(SQLResponse, content)
        assert resp.sql_schema == "operating_budget(year, program)"
        assert resp.applicability == "Yes"
        assert resp.sql == "SELECT year FROM operating_budget"
        assert resp.missing_data == ""

    def test_keys_match_case_insensitively(self) -> None:
        content = '{"sql": "SELECT 1", "missingdata": "ward boundaries", "schema": "t"}'
        resp = decode_reply(SQLResponse, content)
        assert resp.sql == "SELECT 1"
        assert resp.missing_data == "ward boundaries"
        assert resp.sql_schema == "t"

    def test_missing_and_null_fields_are_empty(self) -> None:
        resp = decode_reply(SQLResponse, '{"SQL": null}')
        assert resp.sql == ""
        assert resp.applicability == ""

    def test_unknown_keys_ignored(self) -> None:
        resp = decode_reply(SQLResponse, '{"SQL": "SELECT 1", "Confidence": 0.9}')
        assert resp.sql == "SELECT 1"

    def test_fenced_reply_decodes(self) -> None:
        resp = decode_reply(SQLResponse, '```json\n{"SQL": "SELECT 1"}\n```')
        assert resp.sql == "SELECT 1"

    def test_invalid_json_raises_with_content(self) -> None:
        content = "Sure! Here is the SQL: SELECT 1"
        with pytest.raises(ResponseDecodeError) as exc_info:
            decode_reply(SQLResponse, content)
        assert exc_info.value.content == content
        assert exc_info.value.message.startswith("unmarshalling response")

    def test_non_object_raises(self) -> None:
        with pytest.raises(ResponseDecodeError):
            decode_reply(SQLResponse, '["SELECT 1"]')

    def test_empty_reply_raises(self) -> None:
        with pytest.raises(ResponseDecodeError):
            decode_reply(SQLResponse, "")

    def test_serializes_with_reply_keys(self) -> None:
        resp = decode_reply(SQLResponse, '{"SQL": "SELECT 1"}')
        assert resp.model_dump(by_alias=True) == {
            "Schema": "",
            "Applicability": "",
            "SQL": "SELECT 1",
            "MissingData": "",
        }


class TestDecodeChartSelectResponse:
    """Tests for decode_reply(ChartSelectResponse, ...)."""

    def test_valid_reply(self) -> None:
        content = json.dumps({
            "Chart": "bar",
            "Title": "Budget by program",
            "Data": [{"Label": "Police", "Value": 1.5}, {"Label": "Library", "Value": 2}],
            "ValueIsCurrency": True,
        })
        resp = decode_reply(ChartSelectResponse, content)
        assert resp.chart_type is ChartType.BAR
        assert resp.title == "Budget by program"
        assert [(d.label, d.value) for d in resp.data] == [("Police", 1.5), ("Library", 2.0)]
        assert resp.value_is_currency is True

    def test_nested_keys_match_case_insensitively(self) -> None:
        content = '{"chart": "Pie", "data": [{"label": "A", "value": 3}], "valueIsCurrency": false}'
        resp = decode_reply(ChartSelectResponse, content)
        assert resp.chart_type is ChartType.PIE
        assert resp.data[0].label == "A"
        assert resp.data[0].value == 3.0

    def test_missing_data_defaults_to_empty_list(self) -> None:
        resp = decode_reply(ChartSelectResponse, '{"Chart": "line"}')
        assert resp.data == []
        assert resp.value_is_currency is False

    def test_non_numeric_value_raises(self) -> None:
        content = '{"Chart": "bar", "Data": [{"Label": "A", "Value": "a lot"}]}'
        with pytest.raises(ResponseDecodeError):
            decode_reply(ChartSelectResponse, content)

    def test_string_number_value_raises(self) -> None:
        with pytest.raises(ResponseDecodeError):
            decode_reply(ChartSelectResponse, '{"Data": [{"Label": "A", "Value": "123"}]}')

    def test_string_bool_currency_flag_raises(self) -> None:
        with pytest.raises(ResponseDecodeError):
            decode_reply(ChartSelectResponse, '{"ValueIsCurrency": "false", "Data": []}')

    def test_integer_value_is_accepted(self) -> None:
        resp = decode_reply(ChartSelectResponse, '{"Data": [{"Label": "A", "Value": 123}], "ValueIsCurrency": true}')
        assert resp.data[0].value == 123.0
        assert resp.value_is_currency is True

    def test_data_not_a_list_raises(self) -> None:
        with pytest.raises(ResponseDecodeError):
            decode_reply(ChartSelectResponse, '{"Chart": "bar", "Data": "none"}')


class TestChartType:
    """Tests for ChartType.from_name()."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("bar", ChartType.BAR),
            ("Line", ChartType.LINE),
            (" PIE ", ChartType.PIE),
            ("scatter", ChartType.SCATTER),
            ("histogram", ChartType.UNKNOWN),
            ("", ChartType.UNKNOWN),
            (None, ChartType.UNKNOWN),
        ],
    )
    def test_from_name(self, name, expected) -> None:
        assert ChartType.from_name(name) is expected

    def test_unknown_is_zero(self) -> None:
        assert int(ChartType.UNKNOWN) == 0
