from __future__ import annotations

import logging
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Dict, List, Optional

from stiquery.core.generators.errors import CircularInheritanceError
from stiquery.core.generators.naming import QueryClassNaming, classname
from stiquery.core.schema.models import Database, Inheritance, Table

log = logging.getLogger("stiquery.generator")


@dataclass(frozen=True)
class ParentNode:
    """Parent of a subtype: either a table root or another subtype of the same column."""

    table: Table
    child: Optional[Inheritance] = None

    @property
    def is_table(self) -> bool:
        return self.child is None

    def query_class_name(self, naming: QueryClassNaming) -> str:
        if self.child is not None:
            return naming.child_query_class(self.child)
        return naming.table_query_class(self.table)


class InheritanceGraph:
    """
    Subtype hierarchy of one table.

    Nodes are the subtypes of the table's discriminator column (by class name)
    plus table roots; every subtype has at most one parent edge. Ancestor names
    are matched against table names of the database first, then against the
    class names of sibling subtypes.
    """

    def __init__(self, table: Table, naming: Optional[QueryClassNaming] = None):
        self.table = table
        self.naming = naming or QueryClassNaming()
        self.nodes: Dict[str, Inheritance] = {}
        self.edges: Dict[str, Optional[ParentNode]] = {}
        self.unresolved: Dict[str, str] = {}
        self.children: Dict[str, List[str]] = defaultdict(list)

        column = table.children_column
        for child in column.children if column else []:
            self.nodes.setdefault(child.class_name, child)

        for name, child in self.nodes.items():
            parent = self._resolve(child)
            self.edges[name] = parent
            if parent is not None and parent.child is not None:
                self.children[parent.child.class_name].append(name)

        self._check_acyclic()

    def _database(self) -> Optional[Database]:
        try:
            return self.table.get_database()
        except LookupError:
            return None

    def _resolve(self, child: Inheritance) -> Optional[ParentNode]:
        if not child.ancestor:
            return ParentNode(table=self.table)

        ancestor = classname(child.ancestor)

        database = self._database()
        if database is not None:
            other = database.get_table_by_php_name(ancestor)
            if other is not None:
                return ParentNode(table=other)

        sibling = self.nodes.get(ancestor)
        if sibling is not None:
            return ParentNode(table=self.table, child=sibling)

        self.unresolved[child.class_name] = child.ancestor
        log.debug("Ancestor %s of %s not found on table %s", child.ancestor, child.class_name, self.table.name)
        return None

    def _check_acyclic(self) -> None:
        in_degree: Dict[str, int] = {name: 0 for name in self.nodes}
        for deps in self.children.values():
            for name in deps:
                in_degree[name] += 1

        queue = deque(n for n, d in in_degree.items() if d == 0)
        seen = 0
        while queue:
            current = queue.popleft()
            seen += 1
            for nxt in self.children.get(current, []):
                in_degree[nxt] -= 1
                if in_degree[nxt] == 0:
                    queue.append(nxt)

        if seen == len(self.nodes):
            return

        start = next(n for n, d in in_degree.items() if d > 0)
        cycle = [start]
        current = self.edges[start].child.class_name
        while current not in cycle:
            cycle.append(current)
            current = self.edges[current].child.class_name
        cycle = cycle[cycle.index(current):] + [current]
        raise CircularInheritanceError(cycle)

    def parent_of(self, child: Inheritance) -> Optional[ParentNode]:
        """Immediate ancestor of `child`, None when its ancestor name does not resolve."""
        if self.nodes.get(child.class_name) is child:
            return self.edges[child.class_name]
        return self._resolve(child)

    def parent_class_name(self, child: Inheritance) -> Optional[str]:
        parent = self.parent_of(child)
        return parent.query_class_name(self.naming) if parent is not None else None

    def lineage(self, child: Inheritance) -> List[str]:
        """Query class names from the immediate ancestor up to the table root."""
        out: List[str] = []
        parent = self.parent_of(child)
        while parent is not None:
            out.append(parent.query_class_name(self.naming))
            if parent.is_table:
                break
            parent = self.edges[parent.child.class_name]
        return out

    def topological_order(self) -> List[Inheritance]:
        """All subtypes, every ancestor before its descendants, declaration order otherwise."""
        roots = [
            name
            for name, parent in self.edges.items()
            if parent is None or parent.is_table
        ]
        queue = deque(roots)
        order: List[Inheritance] = []
        while queue:
            current = queue.popleft()
            order.append(self.nodes[current])
            queue.extend(self.children.get(current, []))
        return order
