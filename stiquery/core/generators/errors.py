from __future__ import annotations

from typing import Optional


class BuildError(Exception):
    pass


class UnresolvedAncestorError(BuildError):
    def __init__(self, class_name: str, ancestor: str, table_name: Optional[str] = None):
        self.class_name = class_name
        self.ancestor = ancestor
        self.table_name = table_name
        where = f" on table '{table_name}'" if table_name else ""
        super().__init__(
            f"Cannot resolve ancestor '{ancestor}' of '{class_name}'{where}: "
            "it matches neither a table nor a sibling subtype"
        )


class CircularInheritanceError(BuildError):
    def __init__(self, cycle: list[str]):
        self.cycle = list(cycle)
        super().__init__("Circular inheritance detected: " + " -> ".join(self.cycle))
