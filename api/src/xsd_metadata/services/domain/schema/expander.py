#!/usr/bin/env python3
"""Expand complex types into metadata nodes.

Inherited content is merged first and the derived type's own children and
attributes are written on top, so same-named derived declarations win.

Self-referential types (a ``Node`` type with ``Node`` children) are legal XSD.
The recursion guard tracks the types being expanded on the current
root-to-leaf path; a type met again on that path is emitted as a shallow node
labelled with the type name instead of being expanded.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from .graph import (
    ANY_TYPE,
    AttributeGroupRef,
    AttributeItem,
    AttributeUse,
    AttributeUseKind,
    ComplexTypeDefinition,
    ContentKind,
    QName,
    SchemaGraph,
    TypeDefinition,
)
from .metadata import COMPLEX_LABEL, UNKNOWN_LABEL, MetadataNode, NodeKind
from .particles import ElementOccurrence, ParticleFlattener
from .type_resolver import TypeResolver

logger = logging.getLogger(__name__)

DERIVED_CONTENT = (ContentKind.COMPLEX_EXTENSION, ContentKind.COMPLEX_RESTRICTION)
SIMPLE_CONTENT = (ContentKind.SIMPLE_EXTENSION, ContentKind.SIMPLE_RESTRICTION)


class RecursionGuard:
    """Set of complex types currently being expanded on the active path."""

    def __init__(self):
        self._in_progress: set[ComplexTypeDefinition] = set()

    def is_active(self, type_def: ComplexTypeDefinition) -> bool:
        return type_def in self._in_progress

    @contextmanager
    def active(self, type_def: ComplexTypeDefinition) -> Iterator[None]:
        """Mark ``type_def`` as in progress for the duration of the block."""
        self._in_progress.add(type_def)
        try:
            yield
        finally:
            self._in_progress.discard(type_def)

    def __len__(self) -> int:
        return len(self._in_progress)


class ComplexTypeExpander:
    """Populate metadata nodes from complex type definitions."""

    def __init__(
        self,
        graph: SchemaGraph,
        resolver: Optional[TypeResolver] = None,
        guard: Optional[RecursionGuard] = None,
    ):
        self.graph = graph
        self.resolver = resolver or TypeResolver(graph)
        self.guard = guard or RecursionGuard()
        self.flattener = ParticleFlattener(graph, self.expand_element)
        self.cycle_breaks = 0

    def expand_element(self, occurrence: ElementOccurrence) -> MetadataNode:
        """Build the metadata node for one element occurrence."""
        node = MetadataNode(
            kind=NodeKind.ELEMENT,
            name=occurrence.name,
            min_occurs=occurrence.min_occurs,
            max_occurs=occurrence.max_occurs,
        )

        declaration = occurrence.declaration
        if declaration is None:
            node.resolved_base_type = UNKNOWN_LABEL
            return node

        type_def = declaration.inline_type
        if type_def is None:
            type_ref = declaration.type_ref or ANY_TYPE
            if self.graph.is_builtin(type_ref):
                node.resolved_base_type = self.resolver.resolve(type_ref)
                return node

            type_def = self.graph.get_type(type_ref)
            if type_def is None:
                logger.debug(f"Type '{type_ref}' of element '{declaration.name}' not found")
                node.resolved_base_type = UNKNOWN_LABEL
                return node

        self._apply_type(type_def, node)
        return node

    def _apply_type(self, type_def: TypeDefinition, node: MetadataNode) -> None:
        if isinstance(type_def, ComplexTypeDefinition):
            self.expand(type_def, node)
        else:
            node.resolved_base_type = self.resolver.resolve_definition(type_def)

    def expand(self, type_def: ComplexTypeDefinition, node: MetadataNode) -> None:
        """Populate ``node`` from ``type_def``, inherited content first."""
        if self.guard.is_active(type_def):
            # Cycle on the current path: leave this occurrence shallow
            node.resolved_base_type = type_def.name or COMPLEX_LABEL
            self.cycle_breaks += 1
            logger.debug(f"Recursive type '{node.resolved_base_type}' under '{node.name}' - not expanded")
            return

        with self.guard.active(type_def):
            if type_def.content in DERIVED_CONTENT:
                self._inherit(type_def.base, node)
                node.resolved_base_type = self.resolver.resolve(type_def.base)
                self.flattener.flatten_into(type_def.particle, node)

            elif type_def.content in SIMPLE_CONTENT:
                self._inherit(type_def.base, node)
                node.resolved_base_type = self.resolver.resolve(type_def.base)

            else:
                self.flattener.flatten_into(type_def.particle, node)

            self._apply_attributes(type_def.attributes, node, frozenset())

    def _inherit(self, base: Optional[QName], node: MetadataNode) -> None:
        """Expand a user-defined complex base type into ``node``."""
        if base is None or self.graph.is_builtin(base):
            return

        base_def = self.graph.get_type(base)
        if isinstance(base_def, ComplexTypeDefinition):
            self.expand(base_def, node)
        elif base_def is None:
            logger.debug(f"Base type '{base}' not found in schema graph")

    def _apply_attributes(
        self,
        items: list[AttributeItem],
        node: MetadataNode,
        group_path: frozenset,
    ) -> None:
        for item in items:
            if isinstance(item, AttributeGroupRef):
                self._apply_attribute_group(item.ref, node, group_path)
            elif isinstance(item, AttributeUse):
                self._apply_attribute_use(item, node)

    def _apply_attribute_group(self, ref: QName, node: MetadataNode, group_path: frozenset) -> None:
        if ref in group_path:
            logger.warning(f"Circular attribute group reference '{ref}' - skipping")
            return

        group = self.graph.get_attribute_group(ref)
        if group is None:
            logger.debug(f"Attribute group '{ref}' not found in schema graph")
            return

        self._apply_attributes(group.attributes, node, group_path | {ref})

    def _apply_attribute_use(self, attribute_use: AttributeUse, node: MetadataNode) -> None:
        declaration = attribute_use.declaration
        if declaration is None and attribute_use.ref is not None:
            declaration = self.graph.get_attribute(attribute_use.ref)

        name = declaration.name if declaration else (attribute_use.ref.local if attribute_use.ref else None)

        if attribute_use.use == AttributeUseKind.PROHIBITED:
            if name:
                node.attributes.pop(name, None)
            return

        attribute = MetadataNode(
            kind=NodeKind.ATTRIBUTE,
            name=name,
            required=attribute_use.use == AttributeUseKind.REQUIRED,
        )

        if declaration is None:
            attribute.resolved_base_type = UNKNOWN_LABEL
        elif declaration.inline_type is not None:
            attribute.resolved_base_type = self.resolver.resolve_definition(declaration.inline_type)
        else:
            attribute.resolved_base_type = self.resolver.resolve(declaration.type_ref)

        if not node.add_attribute(attribute):
            logger.debug(f"Dropping unnamed attribute under '{node.name}'")
