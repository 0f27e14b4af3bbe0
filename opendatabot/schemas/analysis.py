"""Schemas for the model replies: SQL generation and chart selection."""

import json
from enum import IntEnum
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from opendatabot.core.errors import ResponseDecodeError
from opendatabot.services.text_processing import strip_code_fences


class ChartType(IntEnum):
    UNKNOWN = 0
    BAR = 1
    LINE = 2
    PIE = 3
    SCATTER = 4

    @classmethod
    def from_name(cls, name: str | None) -> "ChartType":
        """Map a chart name from the model ('bar', 'Line', ...) to a ChartType; anything else is UNKNOWN."""
        key = (name or "").strip().upper()
        try:
            return cls[key]
        except KeyError:
            return cls.UNKNOWN


class _ReplyModel(BaseModel):
    """
    Base for models decoded from a free-text model reply.

    Keys match fields case-insensitively (by alias or by name), unknown keys are
    ignored and null or missing values fall back to the field's zero value.
    Scalar values are strict: "123" is not a number and "false" is not a bool.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _fold_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        lookup: dict[str, str] = {}
        for name, field in cls.model_fields.items():
            lookup[name.lower()] = field.alias or name
            lookup[name.replace("_", "").lower()] = field.alias or name
            if field.alias:
                lookup[field.alias.lower()] = field.alias
        folded: dict[str, Any] = {}
        for key, value in data.items():
            target = lookup.get(str(key).lower())
            if target is None or value is None:
                continue
            folded[target] = value
        return folded


class SQLResponse(_ReplyModel):
    """Reply to the sql_gen prompt."""

    sql_schema: str = Field("", alias="Schema", strict=True, description="Tables and columns the model considered relevant.")
    applicability: str = Field("", alias="Applicability", strict=True, description="Whether and how the data can answer the question.")
    sql: str = Field("", alias="SQL", strict=True, description="Generated SQL query; empty when the question cannot be answered.")
    missing_data: str = Field("", alias="MissingData", strict=True, description="Data the model would need but the database lacks.")


class DataEntry(_ReplyModel):
    label: str = Field("", alias="Label", strict=True)
    value: float = Field(0.0, alias="Value", strict=True)


class ChartSelectResponse(_ReplyModel):
    """Reply to the chart_select prompt."""

    chart: str = Field("", alias="Chart", strict=True, description="Chart type name: bar, line, pie or scatter.")
    title: str = Field("", alias="Title", strict=True)
    data: list[DataEntry] = Field(default_factory=list, alias="Data")
    value_is_currency: bool = Field(False, alias="ValueIsCurrency", strict=True)

    @property
    def chart_type(self) -> ChartType:
        return ChartType.from_name(self.chart)


ReplyT = TypeVar("ReplyT", bound=_ReplyModel)


def decode_reply(model_cls: type[ReplyT], content: str) -> ReplyT:
    """
    Decode a model reply into `model_cls`.
    Raises ResponseDecodeError on invalid JSON, a non-object reply, or mismatched value types.
    """
    raw = content or ""
    try:
        data = json.loads(strip_code_fences(raw))
    except json.JSONDecodeError as e:
        raise ResponseDecodeError(raw, str(e)) from e
    if not isinstance(data, dict):
        raise ResponseDecodeError(raw, f"expected a JSON object, got {type(data).__name__}")
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        raise ResponseDecodeError(raw, str(e)) from e
