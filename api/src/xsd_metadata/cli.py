#!/usr/bin/env python3
"""Command line entry point: print the metadata tree of an XSD on disk."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import yaml

from .core.logging import setup_logging
from .services.domain.schema import (
    SchemaLoadError,
    build_metadata_tree,
    enumerate_paths,
    flatten_tree_to_list,
    format_structure,
    load_schema_graph,
    tree_to_dict,
)

logger = logging.getLogger(__name__)

FORMATS = ("text", "json", "yaml", "flat")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xsd-metadata",
        description="Resolve an XSD into a cycle-safe metadata tree",
    )
    parser.add_argument("schema", help="Path to the primary .xsd file")
    parser.add_argument("--format", choices=FORMATS, default="text", help="Output format")
    parser.add_argument("--paths", action="store_true", help="Also list every leaf element path (text format)")
    parser.add_argument("--out", default=None, help="Write output to this file instead of stdout")
    parser.add_argument("--strict", action="store_true", help="Fail on unresolvable schemaLocation links")
    parser.add_argument("--log-level", default=None, help="Override METADATA_LOG_LEVEL")
    return parser


def render(root, output_format: str, include_paths: bool = False) -> str:
    """Render a metadata tree in the requested format."""
    if output_format == "json":
        return json.dumps(tree_to_dict(root), indent=2)
    if output_format == "yaml":
        return yaml.safe_dump(tree_to_dict(root), sort_keys=False)
    if output_format == "flat":
        # one JSON object per element, parents before children
        return json.dumps(flatten_tree_to_list(root), indent=2)

    text = format_structure(root)
    if include_paths:
        lines = [f"{path} : {base_type}" for path, base_type in enumerate_paths(root)]
        text = "\n".join([text, "", "Paths:", *lines])
    return text


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        graph = load_schema_graph(Path(args.schema), strict=args.strict)
    except SchemaLoadError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    root = build_metadata_tree(graph)
    output = render(root, args.format, args.paths)

    if args.out:
        Path(args.out).write_text(output + "\n", encoding="utf-8")
        logger.info(f"Wrote metadata tree to {args.out}")
    else:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
