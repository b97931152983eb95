"""
Schema model consumed by the query inheritance generator.

A Database owns Tables; a Table may own one discriminator ("children")
column whose `inheritance` is "single"; that Column owns the ordered
Inheritance descriptors, one per class key value.

Field aliases follow the schema file vocabulary (`phpName`, `class`,
`extends`, `inheritances`); the Python names are accepted as well.
"""
from __future__ import annotations

import re
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator


def camelize(name: str) -> str:
    """book_club_member -> BookClubMember"""
    parts = [p for p in re.split(r"[_\W]+", name or "") if p]
    return "".join(p[:1].upper() + p[1:] for p in parts)


class Inheritance(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    key: str
    class_name: str = Field(alias="class")
    ancestor: Optional[str] = Field(default=None, alias="extends")
    description: Optional[str] = None

    _column: Optional["Column"] = PrivateAttr(default=None)

    def get_column(self) -> "Column":
        if self._column is None:
            raise LookupError(f"Inheritance '{self.class_name}' is not attached to a column")
        return self._column

    def get_table(self) -> "Table":
        return self.get_column().get_table()

    @property
    def constant_suffix(self) -> str:
        return self.key.upper()


class Column(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    type: str = "VARCHAR"
    inheritance: Optional[Literal["single", "false"]] = None
    children: List[Inheritance] = Field(default_factory=list, alias="inheritances")

    _table: Optional["Table"] = PrivateAttr(default=None)

    @model_validator(mode="after")
    def _check_children(self) -> "Column":
        seen: dict[str, str] = {}
        for child in self.children:
            if not child.key.strip():
                raise ValueError(f"Column '{self.name}': inheritance key must not be empty")
            if not child.class_name.strip():
                raise ValueError(f"Column '{self.name}': inheritance class must not be empty")
            folded = child.key.upper()
            if folded in seen:
                raise ValueError(
                    f"Column '{self.name}': inheritance keys '{seen[folded]}' and '{child.key}' "
                    "collide once upper-cased"
                )
            seen[folded] = child.key
            child._column = self
        return self

    @property
    def is_inheritance(self) -> bool:
        return self.inheritance == "single"

    @property
    def constant_name(self) -> str:
        return "COL_" + self.name.upper()

    def get_table(self) -> "Table":
        if self._table is None:
            raise LookupError(f"Column '{self.name}' is not attached to a table")
        return self._table

    def get_child(self, class_name: str) -> Optional[Inheritance]:
        for child in self.children:
            if child.class_name == class_name:
                return child
        return None


class Table(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    php_name: Optional[str] = Field(default=None, alias="phpName")
    namespace: Optional[str] = None
    package: Optional[str] = None
    description: Optional[str] = None
    columns: List[Column] = Field(default_factory=list)

    _database: Optional["Database"] = PrivateAttr(default=None)

    @model_validator(mode="after")
    def _finish(self) -> "Table":
        if not self.php_name:
            self.php_name = camelize(self.name)

        single = [c.name for c in self.columns if c.is_inheritance]
        if len(single) > 1:
            raise ValueError(
                f"Table '{self.name}': only one single-inheritance column is supported, got {single}"
            )

        for column in self.columns:
            column._table = self
        return self

    @property
    def children_column(self) -> Optional[Column]:
        for column in self.columns:
            if column.is_inheritance:
                return column
        return None

    @property
    def has_children_column(self) -> bool:
        return self.children_column is not None

    def get_column(self, name: str) -> Optional[Column]:
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def get_database(self) -> "Database":
        if self._database is None:
            raise LookupError(f"Table '{self.name}' is not attached to a database")
        return self._database


class Database(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = "default"
    namespace: Optional[str] = None
    package: Optional[str] = None
    tables: List[Table] = Field(default_factory=list)

    @model_validator(mode="after")
    def _attach_tables(self) -> "Database":
        names: set[str] = set()
        for table in self.tables:
            if table.name in names:
                raise ValueError(f"Database '{self.name}': duplicate table '{table.name}'")
            names.add(table.name)
            table._database = self
        return self

    def get_table(self, name: str) -> Optional[Table]:
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def get_table_by_php_name(self, php_name: str) -> Optional[Table]:
        for table in self.tables:
            if table.php_name == php_name:
                return table
        return None

    def has_table_by_php_name(self, php_name: str) -> bool:
        return self.get_table_by_php_name(php_name) is not None

    def inheritance_tables(self) -> List[Table]:
        return [t for t in self.tables if t.has_children_column]
