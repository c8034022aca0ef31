"""
XSD Metadata Tree Domain

Normalizes a loaded XML Schema into a cycle-safe metadata tree:
- Schema graph loading (XSD documents, include/import/redefine links)
- Type resolution (restriction/list/union chains to primitive labels)
- Particle flattening (sequence/choice/all/group references)
- Complex type expansion (inheritance merge, recursion guard)
- Reports (text structure, element paths, dict export)
"""

from .builder import MetadataTreeBuilder, build_metadata_tree
from .expander import ComplexTypeExpander, RecursionGuard
from .graph import UNBOUNDED, QName, SchemaGraph
from .loader import SchemaLoadError, build_schema_graph, load_schema_graph
from .metadata import MetadataNode, NodeKind
from .particles import ElementOccurrence, ParticleFlattener
from .report import enumerate_paths, flatten_tree_to_list, format_structure, tree_to_dict
from .type_resolver import TypeResolver

__all__ = [
    # Schema graph
    "QName",
    "SchemaGraph",
    "SchemaLoadError",
    "build_schema_graph",
    "load_schema_graph",
    # Resolution
    "TypeResolver",
    "ParticleFlattener",
    "ElementOccurrence",
    "ComplexTypeExpander",
    "RecursionGuard",
    "MetadataTreeBuilder",
    "build_metadata_tree",
    # Tree
    "MetadataNode",
    "NodeKind",
    "UNBOUNDED",
    # Reports
    "enumerate_paths",
    "flatten_tree_to_list",
    "format_structure",
    "tree_to_dict",
]
