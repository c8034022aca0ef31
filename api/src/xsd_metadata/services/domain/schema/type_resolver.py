#!/usr/bin/env python3
"""Resolve type references to a display label for their primitive base.

Restriction chains are walked down to the built-in XSD type they bottom out
in; list types wrap their item label, union types collapse to a fixed label.
XSD forbids circular simple-type derivation, so no cycle tracking is done here.
"""

import logging
from typing import Optional

from .graph import (
    ComplexTypeDefinition,
    ContentKind,
    Derivation,
    QName,
    SchemaGraph,
    SimpleTypeDefinition,
    TypeRef,
)
from .metadata import UNION_LABEL, UNKNOWN_LABEL, builtin_label, list_label

logger = logging.getLogger(__name__)

SIMPLE_CONTENT = (ContentKind.SIMPLE_EXTENSION, ContentKind.SIMPLE_RESTRICTION)


class TypeResolver:
    """Map a type reference to the label of its ultimate primitive base."""

    def __init__(self, graph: SchemaGraph):
        self.graph = graph

    def resolve(self, ref: Optional[TypeRef]) -> Optional[str]:
        """Resolve a QName or an inline type definition to a display label.

        Args:
            ref: Qualified type name, inline definition, or None

        Returns:
            "xs:<name>" for built-ins, "list of <label>" for lists, "union" for
            unions, the type's local name when nothing further applies, "unknown"
            for unresolvable references, or None when ``ref`` is None
        """
        if ref is None:
            return None

        if isinstance(ref, QName):
            return self._resolve_qname(ref)

        return self.resolve_definition(ref)

    def _resolve_qname(self, qname: QName) -> str:
        if self.graph.is_builtin(qname):
            return builtin_label(qname.local)

        type_def = self.graph.get_type(qname)
        if type_def is None:
            logger.debug(f"Unresolvable type reference '{qname}'")
            return UNKNOWN_LABEL

        return self.resolve_definition(type_def)

    def resolve_definition(self, type_def: TypeRef) -> str:
        if isinstance(type_def, SimpleTypeDefinition):
            if type_def.derivation == Derivation.RESTRICTION and type_def.base is not None:
                return self.resolve(type_def.base)
            if type_def.derivation == Derivation.LIST and type_def.base is not None:
                return list_label(self.resolve(type_def.base))
            if type_def.derivation == Derivation.UNION:
                return UNION_LABEL

        elif isinstance(type_def, ComplexTypeDefinition):
            if type_def.content in SIMPLE_CONTENT and type_def.base is not None:
                return self.resolve(type_def.base)

        return type_def.name or UNKNOWN_LABEL
