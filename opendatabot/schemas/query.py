"""Schemas for the question, results, chart and publish endpoints."""

from pydantic import BaseModel, Field

from opendatabot.schemas.analysis import ChartSelectResponse, SQLResponse


class QuestionRequest(BaseModel):
    """Request body for POST /sql and POST /ask/stream."""

    question: str = Field(..., min_length=1, description="Natural-language question about the open data.")


class ResultsRequest(BaseModel):
    """Request body for POST /results."""

    sql: str = Field(..., min_length=1, description="SQL query to run against the open data database.")


class ResultsResponse(BaseModel):
    table: str = Field(..., description="Rendered data table; empty when the query returned no rows.")


class ChartRequest(BaseModel):
    """Request body for POST /chart."""

    question: str = Field(..., min_length=1, description="Question the table answers; used as the chart's working title.")
    table: str = Field(..., min_length=1, description="Rendered data table from POST /results.")


class AskRequest(BaseModel):
    """Request body for POST /ask."""

    question: str = Field(..., min_length=1, description="Natural-language question about the open data.")
    publish: bool = Field(False, description="Publish the result as a module page in the graph store.")
    user: str = Field("", description="Creator credited on the published module.")
    feature_image: str = Field("", description="Feature image URL for the published module.")


class AskResponse(BaseModel):
    """Response for POST /ask."""

    question: str
    sql: SQLResponse
    table: str = Field("", description="Rendered data table; empty when no SQL was generated or no rows matched.")
    chart: ChartSelectResponse | None = Field(None, description="Chart selection; null when there was no data to chart.")
    module_path: str | None = Field(None, description="Path of the published module, when publish was requested.")
    module_url: str | None = Field(None, description="Public URL of the published module.")


class PublishRequest(BaseModel):
    """Request body for POST /publish."""

    id: str | None = Field(None, description="Module UUID; a new one is generated when omitted.")
    title: str = Field(..., min_length=1)
    body: str = Field(..., description="Module body HTML.")
    js: str = Field("", description="Module script.")
    feature_image: str = ""
    user: str = Field(..., min_length=1, description="Creator credited on the module.")


class PublishResultRequest(BaseModel):
    """Request body for POST /publish/result: an /ask result to render and publish as-is."""

    question: str = Field(..., min_length=1)
    sql: SQLResponse
    table: str = ""
    chart: ChartSelectResponse
    user: str = Field(..., min_length=1, description="Creator credited on the module.")
    feature_image: str = ""


class PublishResponse(BaseModel):
    path: str = Field(..., description="Module path, /mod/<slug id>/<slug title>.")
    url: str = Field(..., description="Public URL of the module.")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "path": "/mod/2Qd8x0ZlJ3k5bW1nYtZ9aP/police-budget-by-year",
                    "url": "https://localhost:8000/mod/2Qd8x0ZlJ3k5bW1nYtZ9aP/police-budget-by-year",
                }
            ]
        }
    }
