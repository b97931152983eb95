"""
Class naming contract shared with the generic (per-table) query generator.

The inheritance builder never invents names of its own: table query classes,
subtype query classes and table map classes all come from here, so a
subtype unit references exactly the identifiers the generic generator emits.
"""
from __future__ import annotations

import re
from typing import Optional

from stiquery.core.schema.models import Database, Inheritance, Table

NAMESPACE_SEPARATOR = "\\"


def classname(qualified_name: str) -> str:
    """Strip the namespace (or dotted package) from a class name."""
    name = (qualified_name or "").strip()
    pos = max(name.rfind("."), name.rfind(NAMESPACE_SEPARATOR))
    return name[pos + 1:] if pos >= 0 else name


def snake_case(name: str) -> str:
    s = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s).lower()


def join_namespace(*segments: Optional[str]) -> str:
    return NAMESPACE_SEPARATOR.join(s.strip(NAMESPACE_SEPARATOR) for s in segments if s)


def module_path(namespace: str, class_name: str) -> str:
    """Acme\\Model\\Base + AdminQuery -> acme.model.base.admin_query"""
    parts = [snake_case(p) for p in (namespace or "").split(NAMESPACE_SEPARATOR) if p]
    parts.append(snake_case(class_name))
    return ".".join(parts)


def _database_of(table: Table) -> Optional[Database]:
    try:
        return table.get_database()
    except LookupError:
        return None


class QueryClassNaming:
    def table_namespace(self, table: Table) -> str:
        if table.namespace:
            return table.namespace
        database = _database_of(table)
        return (database.namespace or "") if database else ""

    def table_package(self, table: Table) -> str:
        if table.package:
            return table.package
        database = _database_of(table)
        return (database.package or "") if database else ""

    def table_query_class(self, table: Table) -> str:
        return f"{table.php_name}Query"

    def child_query_class(self, child: Inheritance) -> str:
        return f"{child.class_name}Query"

    def table_map_class(self, table: Table) -> str:
        return f"{table.php_name}TableMap"

    def table_map_namespace(self, table: Table) -> str:
        return join_namespace(self.table_namespace(table), "Map")

    def class_key_constant(self, child: Inheritance) -> str:
        return f"CLASSKEY_{child.constant_suffix}"
