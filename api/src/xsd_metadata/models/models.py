#!/usr/bin/env python3

from typing import Optional, Union

from pydantic import BaseModel

from ..services.domain.schema.metadata import MetadataNode

# Pydantic Models


class MetadataNodeModel(BaseModel):
    """Metadata tree node as returned by the API."""
    kind: str  # 'element', 'attribute', 'root'
    name: str | None = None
    resolved_base_type: str | None = None  # e.g. 'xs:string', 'list of xs:int', 'union'
    min_occurs: int = 1
    max_occurs: Union[int, str] = 1  # integer or 'unbounded'
    required: bool = False
    attributes: dict[str, "MetadataNodeModel"] = {}
    child_elements: dict[str, "MetadataNodeModel"] = {}

    @classmethod
    def from_node(cls, node: MetadataNode) -> "MetadataNodeModel":
        return cls(
            kind=node.kind.value,
            name=node.name,
            resolved_base_type=node.resolved_base_type,
            min_occurs=node.min_occurs,
            max_occurs=node.max_occurs,
            required=node.required,
            attributes={name: cls.from_node(attr) for name, attr in node.attributes.items()},
            child_elements={name: cls.from_node(child) for name, child in node.child_elements.items()},
        )


MetadataNodeModel.model_rebuild()


class SchemaGraphSummary(BaseModel):
    documents: int = 0
    types: int = 0
    elements: int = 0
    attributes: int = 0
    groups: int = 0
    attribute_groups: int = 0


class MetadataTreeResponse(BaseModel):
    primary_file: str
    element_count: int  # Number of global elements under the root
    graph: SchemaGraphSummary
    tree: MetadataNodeModel
    warnings: list[str] = []


class MetadataPath(BaseModel):
    path: str  # e.g. 'Order/Item/Name'
    resolved_base_type: Optional[str] = None


class MetadataPathsResponse(BaseModel):
    primary_file: str
    paths: list[MetadataPath] = []
    total: int = 0
