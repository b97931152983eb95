"""
Language-neutral shape of a generated subtype query class.

The builder fills these in; renderers only decide syntax.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from stiquery.core.generators.errors import BuildError
from stiquery.core.generators.naming import join_namespace

# Import roles
ROLE_TABLE_QUERY = "table_query"
ROLE_PARENT = "parent"
ROLE_TABLE_MAP = "table_map"
ROLE_CONNECTION = "connection"
ROLE_CRITERIA = "criteria"
ROLE_CHILD = "child"

# Method kinds, in emission order
METHOD_KINDS: tuple[str, ...] = ("factory", "pre_select", "pre_update", "pre_delete", "do_delete_all")


@dataclass(frozen=True)
class ImportDecl:
    role: str
    namespace: str
    class_name: str
    alias: Optional[str] = None
    # Fixed Python module for runtime classes; derived from the namespace otherwise
    module: Optional[str] = None

    @property
    def qualified_name(self) -> str:
        return join_namespace(self.namespace, self.class_name)

    @property
    def local_name(self) -> str:
        return self.alias or self.class_name


@dataclass(frozen=True)
class ClassKeyCondition:
    table_map_class: str
    column_constant: str
    key_constant: str


@dataclass(frozen=True)
class MethodDecl:
    kind: str
    summary: str

    def __post_init__(self):
        if self.kind not in METHOD_KINDS:
            raise BuildError(f"Unknown method kind {self.kind!r} (expected one of {METHOD_KINDS})")


@dataclass
class QueryInheritanceClass:
    class_name: str
    parent_class_name: str
    namespace: str
    package: str
    table_name: str
    child_class_name: str
    key: str
    factory_class_name: str
    condition: ClassKeyCondition
    table_description: Optional[str] = None
    generated_at: Optional[str] = None
    version: Optional[str] = None
    imports: List[ImportDecl] = field(default_factory=list)
    methods: List[MethodDecl] = field(default_factory=list)

    def imports_for(self, *roles: str) -> List[ImportDecl]:
        seen: set[tuple[str, Optional[str]]] = set()
        out: List[ImportDecl] = []
        for imp in self.imports:
            if imp.role not in roles:
                continue
            marker = (imp.qualified_name, imp.alias)
            if marker in seen:
                continue
            seen.add(marker)
            out.append(imp)
        return out
