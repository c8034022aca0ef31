#!/usr/bin/env python3
"""Metadata tree node model and display labels."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

from .graph import UNBOUNDED, MaxOccurs

# Display labels
BUILTIN_PREFIX = "xs:"
LIST_PREFIX = "list of "
UNION_LABEL = "union"
UNKNOWN_LABEL = "unknown"
COMPLEX_LABEL = "complex"

ROOT_NAME = "XSD_ROOT"


class NodeKind(str, Enum):
    """Kind of node in the metadata tree."""
    ELEMENT = "element"
    ATTRIBUTE = "attribute"
    ROOT = "root"


@dataclass
class MetadataNode:
    """Node in the metadata tree."""
    kind: NodeKind
    name: Optional[str] = None
    resolved_base_type: Optional[str] = None   # e.g. "xs:string", "list of xs:int", "union"
    min_occurs: int = 1
    max_occurs: MaxOccurs = 1                  # int or UNBOUNDED
    required: bool = False                     # attributes only
    attributes: dict[str, "MetadataNode"] = field(default_factory=dict)
    child_elements: dict[str, "MetadataNode"] = field(default_factory=dict)

    def add_attribute(self, attribute: "MetadataNode") -> bool:
        """Insert an attribute node keyed by name; unnamed nodes are dropped."""
        if not attribute.name:
            return False
        self.attributes[attribute.name] = attribute
        return True

    def add_child_element(self, child: "MetadataNode") -> bool:
        """Insert a child element node keyed by name; unnamed nodes are dropped."""
        if not child.name:
            return False
        self.child_elements[child.name] = child
        return True

    @property
    def is_unbounded(self) -> bool:
        return self.max_occurs == UNBOUNDED

    @property
    def cardinality(self) -> str:
        return f"{self.min_occurs}..{self.max_occurs}"

    def iter_elements(self) -> Iterator["MetadataNode"]:
        """Depth-first walk over this node and all descendant elements."""
        yield self
        for child in self.child_elements.values():
            yield from child.iter_elements()

    def __repr__(self) -> str:
        return (
            f"MetadataNode(kind={self.kind.value!r}, name={self.name!r}, "
            f"resolved_base_type={self.resolved_base_type!r}, "
            f"occurs={self.cardinality!r}, required={self.required}, "
            f"attributes={list(self.attributes)}, child_elements={list(self.child_elements)})"
        )


def builtin_label(local_name: str) -> str:
    return f"{BUILTIN_PREFIX}{local_name}"


def list_label(item_label: str) -> str:
    return f"{LIST_PREFIX}{item_label}"


def create_root() -> MetadataNode:
    return MetadataNode(kind=NodeKind.ROOT, name=ROOT_NAME)
