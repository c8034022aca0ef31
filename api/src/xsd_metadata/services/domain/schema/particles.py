#!/usr/bin/env python3
"""Flatten XSD content-model particles into element occurrences.

Sequence, choice and all groups are all walked member by member; a choice
contributes every alternative, since the metadata tree has no way to say
"exactly one of". Named group references are expanded in place.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from .graph import (
    ElementDeclaration,
    ElementParticle,
    GroupRefParticle,
    MaxOccurs,
    ModelGroup,
    Particle,
    ParticleKind,
    QName,
    SchemaGraph,
)
from .metadata import MetadataNode

logger = logging.getLogger(__name__)


@dataclass
class ElementOccurrence:
    """An element reachable from a particle, with the bounds stated at its position."""
    name: Optional[str]
    declaration: Optional[ElementDeclaration]
    min_occurs: int = 1
    max_occurs: MaxOccurs = 1


ElementBuilder = Callable[[ElementOccurrence], MetadataNode]


class ParticleFlattener:
    """Walk a particle tree and yield the element occurrences it contains."""

    def __init__(self, graph: SchemaGraph, element_builder: Optional[ElementBuilder] = None):
        self.graph = graph
        self.element_builder = element_builder
        self._handlers = {
            ParticleKind.ELEMENT: self._flatten_element,
            ParticleKind.SEQUENCE: self._flatten_model_group,
            ParticleKind.CHOICE: self._flatten_model_group,
            ParticleKind.ALL: self._flatten_model_group,
            ParticleKind.GROUP_REF: self._flatten_group_ref,
            ParticleKind.WILDCARD: self._flatten_wildcard,
        }

    def flatten(self, particle: Optional[Particle]) -> Iterator[ElementOccurrence]:
        """Yield every element occurrence reachable from ``particle`` in declaration order."""
        yield from self._flatten(particle, frozenset())

    def flatten_into(self, particle: Optional[Particle], node: MetadataNode) -> int:
        """Build a node for each occurrence and insert it into ``node.child_elements``.

        An occurrence with ``maxOccurs="0"`` removes any same-named child instead,
        which is how a complex restriction drops an inherited element.

        Returns:
            Number of child nodes inserted (same-named children overwrite earlier ones)
        """
        if self.element_builder is None:
            raise RuntimeError("ParticleFlattener.flatten_into requires an element builder")

        inserted = 0
        for occurrence in self.flatten(particle):
            if occurrence.max_occurs == 0:
                if occurrence.name:
                    node.child_elements.pop(occurrence.name, None)
                continue

            child = self.element_builder(occurrence)
            if node.add_child_element(child):
                inserted += 1
            else:
                logger.debug(f"Dropping unnamed child element under '{node.name}'")
        return inserted

    def _flatten(self, particle: Optional[Particle], group_path: frozenset) -> Iterator[ElementOccurrence]:
        if particle is None:
            return
        handler = self._handlers[particle.kind]
        yield from handler(particle, group_path)

    def _flatten_element(self, particle: ElementParticle, group_path: frozenset) -> Iterator[ElementOccurrence]:
        declaration = particle.declaration
        name = declaration.name if declaration is not None else None

        if declaration is None and particle.ref is not None:
            declaration = self.graph.get_element(particle.ref)
            if declaration is None:
                logger.debug(f"Element reference '{particle.ref}' not found in schema graph")
                name = particle.ref.local
            else:
                name = declaration.name

        yield ElementOccurrence(
            name=name,
            declaration=declaration,
            min_occurs=particle.min_occurs,
            max_occurs=particle.max_occurs,
        )

    def _flatten_model_group(self, group: ModelGroup, group_path: frozenset) -> Iterator[ElementOccurrence]:
        for member in group.particles:
            yield from self._flatten(member, group_path)

    def _flatten_group_ref(self, particle: GroupRefParticle, group_path: frozenset) -> Iterator[ElementOccurrence]:
        ref: QName = particle.ref
        if ref in group_path:
            logger.warning(f"Circular model group reference '{ref}' - skipping")
            return

        group = self.graph.get_group(ref)
        if group is None or group.particle is None:
            logger.debug(f"Model group '{ref}' not found or empty")
            return

        yield from self._flatten(group.particle, group_path | {ref})

    def _flatten_wildcard(self, particle, group_path: frozenset) -> Iterator[ElementOccurrence]:
        # xs:any carries no element declaration
        return iter(())
