#!/usr/bin/env python3
"""Read-only views over a metadata tree: text rendering, element paths, dict export."""

from typing import Any, Optional

from .metadata import MetadataNode, NodeKind

PATH_SEPARATOR = "/"


def format_structure(node: MetadataNode, indent: str = "  ") -> str:
    """Render the tree as indented text.

    Element lines show name, cardinality and resolved base type; attribute lines
    are prefixed with '@' and marked required or optional.
    """
    lines: list[str] = []

    def render(current: MetadataNode, depth: int):
        prefix = indent * depth
        if current.kind == NodeKind.ROOT:
            lines.append(f"{prefix}{current.name}")
        else:
            base = f" : {current.resolved_base_type}" if current.resolved_base_type else ""
            lines.append(f"{prefix}{current.name} [{current.cardinality}]{base}")

        for name, attribute in current.attributes.items():
            usage = "required" if attribute.required else "optional"
            lines.append(f"{prefix}{indent}@{name} : {attribute.resolved_base_type} ({usage})")

        for child in current.child_elements.values():
            render(child, depth + 1)

    render(node, 0)
    return "\n".join(lines)


def enumerate_paths(node: MetadataNode) -> list[tuple[str, Optional[str]]]:
    """List every leaf element path with its resolved base type.

    The synthetic root is not part of the paths. A shallow node left by a
    recursive type counts as a leaf.

    Returns:
        List of (path, resolved_base_type) tuples in tree order
    """
    paths: list[tuple[str, Optional[str]]] = []

    def walk(current: MetadataNode, current_path: str):
        if current.kind == NodeKind.ROOT:
            full_path = current_path
        else:
            full_path = f"{current_path}{PATH_SEPARATOR}{current.name}" if current_path else current.name
            if not current.child_elements:
                paths.append((full_path, current.resolved_base_type))

        for child in current.child_elements.values():
            walk(child, full_path)

    walk(node, "")
    return paths


def tree_to_dict(node: MetadataNode) -> dict[str, Any]:
    """Convert a node and its subtree to plain dictionaries (JSON/YAML friendly)."""
    return {
        "kind": node.kind.value,
        "name": node.name,
        "resolved_base_type": node.resolved_base_type,
        "min_occurs": node.min_occurs,
        "max_occurs": node.max_occurs,
        "required": node.required,
        "attributes": {name: tree_to_dict(attr) for name, attr in node.attributes.items()},
        "child_elements": {name: tree_to_dict(child) for name, child in node.child_elements.items()},
    }


def flatten_tree_to_list(root: MetadataNode) -> list[dict]:
    """Flatten the element nodes of a tree to a list of dictionaries.

    Args:
        root: Root node (synthetic root or any element node)

    Returns:
        One dictionary per element node, parents before children
    """
    result = []

    def flatten_recursive(node: MetadataNode, parent_path: Optional[str], depth: int):
        path = f"{parent_path}{PATH_SEPARATOR}{node.name}" if parent_path else node.name
        result.append({
            "path": path,
            "name": node.name,
            "parent_path": parent_path,
            "depth": depth,
            "resolved_base_type": node.resolved_base_type,
            "cardinality": node.cardinality,
            "attributes": sorted(node.attributes),
            "children": list(node.child_elements),
        })

        for child in node.child_elements.values():
            flatten_recursive(child, path, depth + 1)

    if root.kind == NodeKind.ROOT:
        for child in root.child_elements.values():
            flatten_recursive(child, None, 0)
    else:
        flatten_recursive(root, None, 0)

    return result
