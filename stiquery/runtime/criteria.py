"""
Minimal query runtime extended by generated Python query classes.

A Criteria is an ordered list of conditions plus an optional model alias.
ModelCriteria adds the lifecycle hooks (`pre_select`, `pre_update`,
`pre_delete`) that generated subtype queries override, and routes
`find`/`update`/`delete` through them to a connection.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

log = logging.getLogger("stiquery.runtime")

OPERATORS = ("=", "!=", "<", "<=", ">", ">=", "IN")


@dataclass(frozen=True)
class Condition:
    column: str
    operator: str
    value: Any

    @property
    def field(self) -> str:
        """Column name without its table or alias prefix."""
        return self.column.rsplit(".", 1)[-1]

    def matches(self, row: Dict[str, Any]) -> bool:
        actual = row.get(self.field)
        if self.operator == "=":
            return actual == self.value
        if self.operator == "!=":
            return actual != self.value
        if self.operator == "IN":
            return actual in self.value
        if actual is None:
            return False
        if self.operator == "<":
            return actual < self.value
        if self.operator == "<=":
            return actual <= self.value
        if self.operator == ">":
            return actual > self.value
        return actual >= self.value


class ConnectionInterface(Protocol):
    def select(self, criteria: "Criteria") -> List[Dict[str, Any]]:
        ...

    def update(self, criteria: "Criteria", values: Dict[str, Any]) -> int:
        ...

    def delete(self, criteria: "Criteria") -> int:
        ...


class Criteria:
    def __init__(self, model_alias: Optional[str] = None):
        self.model_alias = model_alias
        self.conditions: List[Condition] = []

    def add(self, column: str, value: Any, operator: str = "=") -> "Criteria":
        if operator not in OPERATORS:
            raise ValueError(f"Unsupported operator {operator!r}")
        self.conditions.append(Condition(column, operator, value))
        return self

    def set_model_alias(self, alias: Optional[str]) -> "Criteria":
        self.model_alias = alias
        return self

    def merge_with(self, criteria: "Criteria") -> "Criteria":
        """Adopt the conditions of `criteria`, and its alias when none is set here."""
        self.conditions.extend(criteria.conditions)
        if self.model_alias is None and criteria.model_alias is not None:
            self.model_alias = criteria.model_alias
        return self

    def matches(self, row: Dict[str, Any]) -> bool:
        return all(c.matches(row) for c in self.conditions)


class ModelCriteria(Criteria):
    def add_using_alias(self, column: str, value: Any, operator: str = "=") -> "ModelCriteria":
        """Add a condition, with the column's table prefix replaced by the model alias when one is set."""
        if self.model_alias and "." in column:
            column = f"{self.model_alias}.{column.rsplit('.', 1)[-1]}"
        self.add(column, value, operator)
        return self

    # Lifecycle hooks, overridden by generated subtype queries
    def pre_select(self, con: Optional[ConnectionInterface]) -> None:
        pass

    def pre_update(
        self,
        values: Dict[str, Any],
        con: Optional[ConnectionInterface],
        force_individual_saves: bool = False,
    ) -> None:
        pass

    def pre_delete(self, con: Optional[ConnectionInterface]) -> None:
        pass

    def find(self, con: ConnectionInterface) -> List[Dict[str, Any]]:
        self.pre_select(con)
        return con.select(self)

    def update(
        self,
        values: Dict[str, Any],
        con: ConnectionInterface,
        force_individual_saves: bool = False,
    ) -> int:
        self.pre_update(values, con, force_individual_saves)
        return con.update(self, values)

    def delete(self, con: Optional[ConnectionInterface] = None) -> int:
        self.pre_delete(con)
        return self.do_delete(con)

    def do_delete(self, con: Optional[ConnectionInterface] = None) -> int:
        if con is None:
            log.debug("delete() without a connection; nothing to do")
            return 0
        return con.delete(self)

    def delete_all(self, con: Optional[ConnectionInterface] = None) -> int:
        return self.do_delete_all(con)

    def do_delete_all(self, con: Optional[ConnectionInterface] = None) -> int:
        return self.do_delete(con)


class InMemoryConnection:
    """Row store used by tests and examples: rows are plain dicts."""

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None):
        self.rows: List[Dict[str, Any]] = [dict(r) for r in rows or []]

    def select(self, criteria: Criteria) -> List[Dict[str, Any]]:
        return [dict(r) for r in self.rows if criteria.matches(r)]

    def update(self, criteria: Criteria, values: Dict[str, Any]) -> int:
        count = 0
        for row in self.rows:
            if criteria.matches(row):
                row.update(values)
                count += 1
        return count

    def delete(self, criteria: Criteria) -> int:
        kept = [r for r in self.rows if not criteria.matches(r)]
        count = len(self.rows) - len(kept)
        self.rows = kept
        return count
