"""
Query inheritance generator.

Emits, for every subtype of a single-table-inheritance table, the base query
class that extends the right ancestor query class and narrows select, update
and delete queries to the rows carrying that subtype's class key.

    builder = QueryInheritanceBuilder(GeneratorSettings(language="php"))
    unit = builder.build(table, table.children_column.children[0])
    unit.source      # PHP source text
    unit.namespace   # e.g. "Acme\\Model\\Base"
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional

from stiquery.core.config import GeneratorSettings
from stiquery.core.generators.declarations import (
    METHOD_KINDS,
    ROLE_CHILD,
    ROLE_CONNECTION,
    ROLE_CRITERIA,
    ROLE_PARENT,
    ROLE_TABLE_MAP,
    ROLE_TABLE_QUERY,
    ClassKeyCondition,
    ImportDecl,
    MethodDecl,
    QueryInheritanceClass,
)
from stiquery.core.generators.errors import BuildError, UnresolvedAncestorError
from stiquery.core.generators.inheritance_graph import InheritanceGraph, ParentNode
from stiquery.core.generators.naming import QueryClassNaming
from stiquery.core.generators.placement import derive_namespace, derive_package
from stiquery.core.generators.renderers import relative_path, render_query_inheritance
from stiquery.core.observability.metrics import inc_generated
from stiquery.core.schema.models import Database, Inheritance, Table

log = logging.getLogger("stiquery.generator")

RUNTIME_MODULE = "stiquery.runtime"
CONNECTION_NAMESPACE = "Propel\\Runtime\\Connection"
CRITERIA_NAMESPACE = "Propel\\Runtime\\ActiveQuery"


@dataclass(frozen=True)
class GeneratedUnit:
    class_name: str
    parent_class_name: str
    namespace: str
    package: str
    language: str
    table_name: str
    key: str
    relative_path: str
    source: str

    def as_dict(self) -> Dict[str, str]:
        return {
            "class_name": self.class_name,
            "parent_class_name": self.parent_class_name,
            "namespace": self.namespace,
            "package": self.package,
            "language": self.language,
            "table_name": self.table_name,
            "key": self.key,
            "relative_path": self.relative_path,
            "source": self.source,
        }


def _now() -> str:
    return datetime.now().strftime("%c")


class QueryInheritanceBuilder:
    def __init__(
        self,
        settings: Optional[GeneratorSettings] = None,
        naming: Optional[QueryClassNaming] = None,
        clock: Callable[[], str] = _now,
    ):
        self.settings = settings or GeneratorSettings()
        self.naming = naming or QueryClassNaming()
        self.clock = clock

    # ------------------------------------------------------------------
    # Hierarchy
    # ------------------------------------------------------------------
    def graph(self, table: Table) -> InheritanceGraph:
        """A fresh hierarchy of `table`; the builder keeps no per-table state."""
        return InheritanceGraph(table, self.naming)

    def _parent_node(
        self,
        table: Table,
        child: Inheritance,
        graph: Optional[InheritanceGraph] = None,
    ) -> ParentNode:
        if graph is None:
            graph = self.graph(table)
        parent = graph.parent_of(child)
        if parent is not None:
            return parent

        if self.settings.unresolved_ancestor == "root":
            log.warning(
                "Ancestor %s of %s not found on table %s; extending %s",
                child.ancestor,
                child.class_name,
                table.name,
                self.naming.table_query_class(table),
            )
            return ParentNode(table=table)

        raise UnresolvedAncestorError(child.class_name, child.ancestor or "", table.name)

    def resolve_parent_class_name(self, table: Table, child: Inheritance) -> str:
        name = self._parent_node(table, child).query_class_name(self.naming)
        log.debug("Resolved parent of %s on %s: %s", child.class_name, table.name, name)
        return name

    # ------------------------------------------------------------------
    # Declaration
    # ------------------------------------------------------------------
    def _require_child(self, child: Optional[Inheritance]) -> Inheritance:
        if child is None:
            raise BuildError(
                "The query inheritance builder needs to be told which child class to build "
                "(pass the Inheritance to build()) before it can build the stub class."
            )
        return child

    def _parent_import(self, table: Table, parent: ParentNode) -> ImportDecl:
        if parent.child is not None:
            namespace = derive_namespace(table, self.naming)
        else:
            namespace = self.naming.table_namespace(parent.table)
        return ImportDecl(ROLE_PARENT, namespace, parent.query_class_name(self.naming))

    def declare(
        self,
        table: Table,
        child: Optional[Inheritance],
        graph: Optional[InheritanceGraph] = None,
    ) -> QueryInheritanceClass:
        child = self._require_child(child)
        column = child.get_column()
        parent = self._parent_node(table, child, graph)

        class_name = self.naming.child_query_class(child)
        table_namespace = self.naming.table_namespace(table)
        table_map = self.naming.table_map_class(table)
        factory_alias = f"Child{class_name}"

        imports = [
            ImportDecl(ROLE_TABLE_QUERY, table_namespace, self.naming.table_query_class(table)),
            self._parent_import(table, parent),
            ImportDecl(ROLE_TABLE_MAP, self.naming.table_map_namespace(table), table_map),
            ImportDecl(ROLE_CONNECTION, CONNECTION_NAMESPACE, "ConnectionInterface", module=RUNTIME_MODULE),
            ImportDecl(ROLE_CRITERIA, CRITERIA_NAMESPACE, "Criteria", module=RUNTIME_MODULE),
            ImportDecl(ROLE_CHILD, table_namespace, class_name, alias=factory_alias),
        ]

        target = f"Filters the query to target only {child.class_name} objects."
        summaries = {
            "factory": "Returns a new query object, or adopts an existing one.",
            "pre_select": target,
            "pre_update": target,
            "pre_delete": target,
            "do_delete_all": (
                "Issue a DELETE query based on the current ModelCriteria deleting all rows "
                f"in the table having the {child.class_name} class."
            ),
        }
        methods = [MethodDecl(kind, summaries[kind]) for kind in METHOD_KINDS]

        generated_at = self.clock() if self.settings.add_timestamp else None

        return QueryInheritanceClass(
            class_name=class_name,
            parent_class_name=parent.query_class_name(self.naming),
            namespace=derive_namespace(table, self.naming),
            package=derive_package(table, self.naming),
            table_name=table.name,
            child_class_name=child.class_name,
            key=child.key,
            factory_class_name=factory_alias,
            condition=ClassKeyCondition(
                table_map_class=table_map,
                column_constant=column.constant_name,
                key_constant=self.naming.class_key_constant(child),
            ),
            table_description=table.description or None,
            generated_at=generated_at,
            version=self.settings.version if generated_at else None,
            imports=imports,
            methods=methods,
        )

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def build(
        self,
        table: Table,
        child: Optional[Inheritance],
        graph: Optional[InheritanceGraph] = None,
    ) -> GeneratedUnit:
        decl = self.declare(table, child, graph)
        language = self.settings.language
        source = render_query_inheritance(decl, language)
        inc_generated(language)
        log.info("Generated %s %s (extends %s) for table %s", language, decl.class_name, decl.parent_class_name, table.name)

        return GeneratedUnit(
            class_name=decl.class_name,
            parent_class_name=decl.parent_class_name,
            namespace=decl.namespace,
            package=decl.package,
            language=language,
            table_name=table.name,
            key=decl.key,
            relative_path=relative_path(decl, language),
            source=source,
        )

    def build_table(self, table: Table) -> List[GeneratedUnit]:
        """Every subtype of `table`, ancestors first."""
        if not table.has_children_column:
            return []
        graph = self.graph(table)
        return [self.build(table, child, graph) for child in graph.topological_order()]

    def build_database(self, database: Database) -> List[GeneratedUnit]:
        units: List[GeneratedUnit] = []
        for table in database.inheritance_tables():
            units.extend(self.build_table(table))
        return units
