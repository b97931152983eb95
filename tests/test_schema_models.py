"""
Schema model tests: defaults, back-references and validation.
"""
from __future__ import annotations

import json

import pytest

from stiquery.core.schema import SchemaError, camelize, load_database, parse_database


def _doc(children, **table_extra):
    table = {
        "name": "employee",
        "columns": [
            {"name": "id", "type": "INTEGER"},
            {"name": "class_key", "inheritance": "single", "inheritances": children},
        ],
    }
    table.update(table_extra)
    return {"name": "company", "tables": [table]}


def test_camelize():
    assert camelize("book_club_member") == "BookClubMember"
    assert camelize("employee") == "Employee"
    assert camelize("") == ""


def test_php_name_defaults_to_camelized_table_name(company_db):
    assert company_db.get_table("employee").php_name == "Employee"


def test_explicit_php_name_is_kept():
    db = parse_database(_doc([{"key": "a", "class": "A"}], phpName="Staff"))
    assert db.get_table("employee").php_name == "Staff"
    assert db.has_table_by_php_name("Staff")
    assert not db.has_table_by_php_name("Employee")


def test_back_references(employee):
    column = employee.children_column
    assert column.name == "class_key"
    assert column.get_table() is employee
    child = column.children[0]
    assert child.get_column() is column
    assert child.get_table() is employee
    assert employee.get_database().name == "company"


def test_aliases_and_python_names_both_accepted():
    db = parse_database(
        _doc([
            {"key": "a", "class": "A"},
            {"key": "b", "class_name": "B", "ancestor": "A"},
        ])
    )
    children = db.get_table("employee").children_column.children
    assert [c.class_name for c in children] == ["A", "B"]
    assert children[1].ancestor == "A"


def test_constant_names(employee):
    column = employee.children_column
    assert column.constant_name == "COL_CLASS_KEY"
    assert column.children[0].constant_suffix == "MANAGER"


def test_inheritance_tables(company_db):
    assert [t.name for t in company_db.inheritance_tables()] == ["employee", "vehicle"]
    assert not company_db.get_table("person").has_children_column


def test_get_child_by_class_name(employee):
    column = employee.children_column
    assert column.get_child("Supervisor").key == "supervisor"
    assert column.get_child("Nobody") is None


def test_empty_key_rejected():
    with pytest.raises(SchemaError, match="must not be empty"):
        parse_database(_doc([{"key": " ", "class": "A"}]))


def test_keys_colliding_once_upper_cased_rejected():
    with pytest.raises(SchemaError, match="collide"):
        parse_database(_doc([{"key": "admin", "class": "A"}, {"key": "ADMIN", "class": "B"}]))


def test_two_inheritance_columns_rejected():
    doc = {
        "tables": [
            {
                "name": "t",
                "columns": [
                    {"name": "a", "inheritance": "single"},
                    {"name": "b", "inheritance": "single"},
                ],
            }
        ]
    }
    with pytest.raises(SchemaError, match="only one single-inheritance column"):
        parse_database(doc)


def test_duplicate_table_rejected():
    with pytest.raises(SchemaError, match="duplicate table"):
        parse_database({"tables": [{"name": "t"}, {"name": "t"}]})


def test_database_wrapper_is_optional():
    a = parse_database({"database": _doc([{"key": "a", "class": "A"}])})
    b = parse_database(_doc([{"key": "a", "class": "A"}]))
    assert a.name == b.name == "company"


def test_non_mapping_document_rejected():
    with pytest.raises(SchemaError, match="must be a mapping"):
        parse_database(["not", "a", "mapping"])


def test_load_yaml_fixture(company_db):
    assert company_db.namespace == "Acme\\Model"
    assert company_db.package == "acme.model"
    assert len(company_db.get_table("employee").children_column.children) == 4


def test_load_json(tmp_path):
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(_doc([{"key": "a", "class": "A"}])), encoding="utf-8")
    db = load_database(path)
    assert db.get_table("employee").children_column.children[0].class_name == "A"


def test_load_missing_file(tmp_path):
    with pytest.raises(SchemaError, match="Cannot read schema file"):
        load_database(tmp_path / "missing.yaml")


def test_load_malformed_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("tables: [unclosed", encoding="utf-8")
    with pytest.raises(SchemaError, match="as YAML"):
        load_database(path)


def test_load_malformed_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{", encoding="utf-8")
    with pytest.raises(SchemaError, match="as JSON"):
        load_database(path)
