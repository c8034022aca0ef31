#!/usr/bin/env python3
"""Build the metadata tree for every global element of a schema graph."""

import logging

from .expander import ComplexTypeExpander, RecursionGuard
from .graph import SchemaGraph
from .metadata import MetadataNode, create_root
from .particles import ElementOccurrence
from .type_resolver import TypeResolver

logger = logging.getLogger(__name__)


class MetadataTreeBuilder:
    """Top-level driver turning a SchemaGraph into a MetadataNode tree."""

    def __init__(self, graph: SchemaGraph):
        self.graph = graph
        self.resolver = TypeResolver(graph)

    def build(self) -> MetadataNode:
        """Build the tree under a synthetic root.

        Each call uses a fresh recursion guard, so the builder can be reused.

        Returns:
            Synthetic root node whose children are the global elements, keyed by name
        """
        root = create_root()
        expander = ComplexTypeExpander(self.graph, self.resolver, RecursionGuard())

        for declaration in self.graph.global_elements():
            if self.graph.is_reserved_namespace(declaration.namespace):
                continue

            # Global declarations carry no occurrence constraints of their own
            node = expander.expand_element(
                ElementOccurrence(name=declaration.name, declaration=declaration)
            )
            root.add_child_element(node)

        logger.info(
            f"Built metadata tree with {len(root.child_elements)} global elements "
            f"({expander.cycle_breaks} recursive type occurrences left unexpanded)"
        )
        return root


def build_metadata_tree(graph: SchemaGraph) -> MetadataNode:
    """Build the metadata tree for ``graph``.

    Args:
        graph: Loaded schema graph

    Returns:
        Synthetic root MetadataNode
    """
    return MetadataTreeBuilder(graph).build()
