"""
Namespace and package placement of generated subtype query classes.

Subtype query classes live one "Base" segment below their table, next to
the table's generic base query class.
"""
from __future__ import annotations

from typing import Optional

from stiquery.core.generators.naming import QueryClassNaming, join_namespace
from stiquery.core.schema.models import Table

BASE_SEGMENT = "Base"


def derive_package(table: Table, naming: Optional[QueryClassNaming] = None) -> str:
    package = (naming or QueryClassNaming()).table_package(table)
    return f"{package}.{BASE_SEGMENT}" if package else BASE_SEGMENT


def derive_namespace(table: Table, naming: Optional[QueryClassNaming] = None) -> str:
    namespace = (naming or QueryClassNaming()).table_namespace(table)
    if namespace:
        return join_namespace(namespace, BASE_SEGMENT)
    return BASE_SEGMENT
