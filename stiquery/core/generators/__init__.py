from .errors import BuildError, CircularInheritanceError, UnresolvedAncestorError
from .inheritance_graph import InheritanceGraph, ParentNode
from .naming import QueryClassNaming, classname
from .placement import derive_namespace, derive_package
from .query_inheritance import GeneratedUnit, QueryInheritanceBuilder

__all__ = [
    "BuildError",
    "CircularInheritanceError",
    "UnresolvedAncestorError",
    "InheritanceGraph",
    "ParentNode",
    "QueryClassNaming",
    "classname",
    "derive_namespace",
    "derive_package",
    "GeneratedUnit",
    "QueryInheritanceBuilder",
]
