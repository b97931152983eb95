"""Single-table-inheritance query class generator."""

__version__ = "0.1.0"
