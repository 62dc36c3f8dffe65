from pathlib import Path
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from fieldmap_sql.config import Settings
from fieldmap_sql.graph_builder import build_relationship_graph
from fieldmap_sql.metadata_loader import FieldCatalog, FieldDefinition
from fieldmap_sql.query_service import QueryGenerator
from fieldmap_sql.server import create_app

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SAMPLE_CSV = PROJECT_ROOT / "data" / "field_mappings.csv"

CSV_HEADER = (
    "column_name,table_name,system_a_fieldmap,system_b_fieldmap,field_description,"
    "field_type,join_key,foreign_table,foreign_key\n"
)


def make_field(
    table: str,
    column: str,
    description: str,
    foreign_table: Optional[str] = None,
    foreign_key: Optional[str] = None,
    system_a: str = "",
    system_b: str = "",
) -> FieldDefinition:
    return FieldDefinition(
        column_name=column,
        table_name=table,
        description=description,
        field_type="string",
        aliases={"system_a": system_a, "system_b": system_b},
        foreign_table=foreign_table,
        foreign_key=foreign_key,
    )


@pytest.fixture
def scenario_catalog() -> FieldCatalog:
    """Two tables linked by a single foreign key."""
    return FieldCatalog([
        make_field("users", "email", "User email address", system_a="usr_email"),
        make_field("orders", "total_amount", "Total order value", system_b="ord_total"),
        make_field("orders", "user_id", "Buyer reference", "users", "user_id"),
    ])


@pytest.fixture
def chain_catalog() -> FieldCatalog:
    """users -> orders -> order_items -> products."""
    return FieldCatalog([
        make_field("users", "username", "Unique handle names chosen at signup"),
        make_field("orders", "user_id", "Buyer reference", "users", "user_id"),
        make_field("orders", "total_amount", "Total order value"),
        make_field("order_items", "order_id", "Parent purchase", "orders", "order_id"),
        make_field("order_items", "product_id", "Catalogue item bought", "products", "product_id"),
        make_field("products", "product_name", "Product name as ordered"),
    ])


@pytest.fixture
def chain_graph(chain_catalog):
    return build_relationship_graph(chain_catalog)


@pytest.fixture
def scenario_generator(scenario_catalog) -> QueryGenerator:
    return QueryGenerator(scenario_catalog)


@pytest.fixture
def chain_generator(chain_catalog) -> QueryGenerator:
    return QueryGenerator(chain_catalog)


@pytest.fixture
def sample_csv() -> Path:
    return SAMPLE_CSV


@pytest.fixture
def write_csv(tmp_path):
    """Write CSV rows (header added) to a temp file and return its path."""

    def _write(*rows: str, header: bool = True) -> Path:
        path = tmp_path / "field_mappings.csv"
        body = "".join(row + "\n" for row in rows)
        path.write_text((CSV_HEADER if header else "") + body, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def client() -> TestClient:
    settings = Settings(csv_path=SAMPLE_CSV)
    app = create_app(settings=settings)
    return TestClient(app)
