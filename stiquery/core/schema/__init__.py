from .models import Column, Database, Inheritance, Table, camelize
from .loader import SchemaError, load_database, parse_database

__all__ = [
    "Column",
    "Database",
    "Inheritance",
    "Table",
    "camelize",
    "SchemaError",
    "load_database",
    "parse_database",
]
