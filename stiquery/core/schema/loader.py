"""
Schema file loader.

Reads a YAML or JSON schema document describing one database:

    database:
      name: bookstore
      namespace: 'Acme\\Model'
      package: acme.model
      tables:
        - name: employee
          columns:
            - name: class_key
              type: VARCHAR
              inheritance: single
              inheritances:
                - {key: manager, class: Manager}
                - {key: cashier, class: Cashier, extends: Manager}

The top-level `database:` wrapper is optional.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import ValidationError

from stiquery.core.schema.models import Database

_log = logging.getLogger("stiquery.schema")


class SchemaError(Exception):
    pass


def parse_database(raw: Any) -> Database:
    """Validate an already-decoded schema document."""
    if isinstance(raw, dict) and isinstance(raw.get("database"), dict):
        raw = raw["database"]

    if not isinstance(raw, dict):
        raise SchemaError(f"Schema document must be a mapping, got {type(raw).__name__}")

    try:
        database = Database.model_validate(raw)
    except ValidationError as exc:
        raise SchemaError(f"Invalid schema: {exc}") from exc

    _log.debug(
        "Parsed database %s with %d tables (%d with inheritance)",
        database.name,
        len(database.tables),
        len(database.inheritance_tables()),
    )
    return database


def load_database(path: Union[str, Path]) -> Database:
    resolved = Path(path)
    try:
        raw_text = resolved.read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaError(f"Cannot read schema file {resolved}: {exc}") from exc

    if resolved.suffix.lower() == ".json":
        try:
            data = json.loads(raw_text)
        except json.JSONDecodeError as exc:
            raise SchemaError(f"Failed to parse schema file {resolved} as JSON: {exc}") from exc
    else:
        try:
            data = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise SchemaError(f"Failed to parse schema file {resolved} as YAML: {exc}") from exc

    database = parse_database(data)
    _log.info("Loaded schema %s from %s", database.name, resolved)
    return database
