import logging

import pytest

from fieldmap_sql.errors import CatalogLoadError
from fieldmap_sql.metadata_loader import (
    FieldCatalog,
    load_field_catalog,
    normalize_system,
    parse_field_row,
)

from conftest import make_field


def test_load_reads_all_nine_columns(write_csv):
    path = write_csv(
        "user_id,orders,ord_usr_id,customer_ref,Account that placed the purchase,integer,user_id,users,user_id",
    )
    catalog = load_field_catalog(path)

    assert len(catalog) == 1
    field = catalog.fields[0]
    assert field.column_name == "user_id"
    assert field.table_name == "orders"
    assert field.aliases == {"system_a": "ord_usr_id", "system_b": "customer_ref"}
    assert field.description == "Account that placed the purchase"
    assert field.field_type == "integer"
    assert field.join_key == "user_id"
    assert field.foreign_table == "users"
    assert field.foreign_key == "user_id"
    assert field.has_relationship


def test_blank_optional_cells_become_none(write_csv):
    catalog = load_field_catalog(write_csv("email,users,usr_email,,User email address,string,,,"))
    field = catalog.fields[0]
    assert field.join_key is None
    assert field.foreign_table is None
    assert field.foreign_key is None
    assert not field.has_relationship


def test_short_rows_are_skipped_with_warning(write_csv, caplog):
    path = write_csv(
        "email,users,usr_email,,User email address,string,,,",
        "broken,row,only",
        "name,products,prod_name,display_name,Product display name,string,,,",
    )
    with caplog.at_level(logging.WARNING, logger="fieldmap_sql.metadata_loader"):
        catalog = load_field_catalog(path)

    assert [f.qualified_name for f in catalog] == ["users.email", "products.name"]
    assert any("Skipping invalid CSV row" in record.message for record in caplog.records)


def test_header_only_file_gives_empty_catalog(write_csv):
    catalog = load_field_catalog(write_csv())
    assert len(catalog) == 0
    assert catalog.get_all_fields("default") == []


def test_missing_file_is_fatal(tmp_path):
    with pytest.raises(CatalogLoadError):
        load_field_catalog(tmp_path / "does_not_exist.csv")


def test_parse_field_row_rejects_short_records():
    assert parse_field_row(["a", "b", "c"]) is None


def test_sample_catalog_loads(sample_csv):
    catalog = load_field_catalog(sample_csv)
    assert len(catalog) >= 9
    assert catalog.tables == ["users", "orders", "order_items", "products"]
    assert catalog.get_field("users", "email").description == "User email address"


def test_get_all_fields_filters_by_system():
    catalog = FieldCatalog([
        make_field("users", "email", "User email address", system_a="usr_email", system_b="contact_email"),
        make_field("users", "first_name", "User first name", system_a="usr_fname"),
        make_field("orders", "status", "Order status", system_b="purchase_state"),
    ])

    assert len(catalog.get_all_fields("default")) == 3
    assert len(catalog.get_all_fields("")) == 3
    assert [f.column_name for f in catalog.get_all_fields("system_a")] == ["email", "first_name"]
    assert [f.column_name for f in catalog.get_all_fields("SystemB")] == ["email", "status"]
    assert catalog.get_all_fields("system_c") == []


def test_alias_resolution():
    catalog = FieldCatalog([make_field("users", "email", "User email address", system_a="usr_email")])

    assert catalog.resolve_alias("users", "email", "SystemA") == "usr_email"
    assert catalog.resolve_alias("users", "email", "system-a") == "usr_email"
    assert catalog.resolve_alias("users", "email", "system_b") is None
    assert catalog.resolve_alias("users", "email", "default") is None
    assert catalog.resolve_alias("users", "missing", "system_a") is None


def test_normalize_system():
    assert normalize_system("SystemA") == normalize_system("system_a") == "systema"
    assert normalize_system(None) == ""
