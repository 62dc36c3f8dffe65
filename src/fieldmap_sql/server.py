"""FastAPI server exposing query generation over HTTP."""

import logging
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import Settings
from .errors import FieldQueryError
from .metadata_loader import DEFAULT_SYSTEM, FieldDefinition
from .query_service import QueryGenerator

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


class GenerateQueryRequest(BaseModel):
    description: str
    system: str = DEFAULT_SYSTEM
    limit: int = Field(default=0, ge=0)

    @field_validator("description")
    @classmethod
    def _require_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("description must not be empty")
        return value

    @field_validator("system")
    @classmethod
    def _default_system(cls, value: str) -> str:
        return value.strip() or DEFAULT_SYSTEM


class MatchedFieldOut(BaseModel):
    column_name: str
    table_name: str
    field_description: str
    match_score: float
    system_alias: Optional[str] = None


class JoinOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_table: str = Field(alias="from")
    to_table: str = Field(alias="to")
    condition: str


class GenerateQueryResponse(BaseModel):
    query: str
    matched_fields: List[MatchedFieldOut]
    joins_used: List[JoinOut]
    confidence: float
    processing_time_ms: int


class FieldOut(BaseModel):
    column_name: str
    table_name: str
    system_a_fieldmap: str = ""
    system_b_fieldmap: str = ""
    field_description: str
    field_type: str = ""
    join_key: Optional[str] = None
    foreign_table: Optional[str] = None
    foreign_key: Optional[str] = None

    @classmethod
    def from_definition(cls, definition: FieldDefinition) -> "FieldOut":
        return cls(
            column_name=definition.column_name,
            table_name=definition.table_name,
            system_a_fieldmap=definition.aliases.get("system_a", ""),
            system_b_fieldmap=definition.aliases.get("system_b", ""),
            field_description=definition.description,
            field_type=definition.field_type,
            join_key=definition.join_key,
            foreign_table=definition.foreign_table,
            foreign_key=definition.foreign_key,
        )


class FieldListResponse(BaseModel):
    fields: List[FieldOut]


def create_app(generator: Optional[QueryGenerator] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the API around a query generator.

    When no generator is passed the catalog is loaded from ``settings`` right
    away, so a missing or unreadable CSV stops startup.
    """

    settings = settings or Settings.from_env()
    if generator is None:
        generator = QueryGenerator.from_settings(settings)

    app = FastAPI(title="Field Mapping SQL Generator")
    app.state.generator = generator

    # Allow CORS for local development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post(
        f"{API_PREFIX}/generate-query",
        response_model=GenerateQueryResponse,
        response_model_by_alias=True,
    )
    def generate_query(req: GenerateQueryRequest):
        """Generate SQL for a natural-language description."""
        try:
            result = generator.generate(req.description, system=req.system, limit=req.limit)
        except FieldQueryError as exc:
            logger.warning(f"Query generation failed for {req.description!r}: {exc}")
            raise HTTPException(status_code=400, detail=f"Failed to generate query: {exc}") from exc

        return GenerateQueryResponse(
            query=result.query,
            matched_fields=[MatchedFieldOut(**match.to_dict()) for match in result.matched_fields],
            joins_used=[
                JoinOut(from_table=join.from_table, to_table=join.to_table, condition=join.condition)
                for join in result.joins_used
            ],
            confidence=result.confidence,
            processing_time_ms=result.processing_time_ms,
        )

    @app.get(f"{API_PREFIX}/fields", response_model=FieldListResponse)
    def list_fields(system: str = DEFAULT_SYSTEM):
        """List catalog entries, optionally only those mapped in ``system``."""
        definitions = generator.catalog.get_all_fields(system)
        return FieldListResponse(fields=[FieldOut.from_definition(d) for d in definitions])

    return app


if __name__ == "__main__":
    import uvicorn

    settings = Settings.from_env()
    uvicorn.run(create_app(settings=settings), host=settings.host, port=settings.port)
