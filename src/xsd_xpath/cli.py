#!/usr/bin/env python3
"""
Command line XPath extraction.

Extracts the XPath of each element in the source schema and writes a CSV
file with the node name and parent as well as the full XPath.

Example:
    xsd-xpath-export -s Source.xsd -t XPaths.csv -i MetaData -i Error \
        -a annotation:deprecated -a annotation:deprecated-reason
"""

import argparse
import io
import logging
import os
import sys
from pathlib import Path

from .core.config import ExportConfig
from .core.logging import setup_logging
from .services.domain.schema import DependencyGraphVisitor, SchemaError, SchemaLoader, extract_xpaths

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="xsd-xpath-export",
        description="Extracts XPaths for each element in the source schema and creates a CSV file "
                    "with the node name and parent as well as full XPath.",
    )
    ap.add_argument("-s", "--source", required=True,
                    help="The SOURCE xsd file to use to generate the XPaths")
    ap.add_argument("-t", "--target",
                    help="The TARGET csv file containing the extracted XPaths (required unless --list-roots)")
    ap.add_argument("-r", "--root",
                    help="The ROOT element or type to start from. Defaults to the first root node found")
    ap.add_argument("-i", "--ignore", action="append", metavar="ELEMENT",
                    help="An element or attribute to ignore when generating the XPaths (repeatable)")
    ap.add_argument("-a", "--add", action="append", metavar="ATTRIBUTE",
                    help="An additional attribute to extract from each element, e.g. annotation:deprecated (repeatable)")
    ap.add_argument("--list-roots", action="store_true",
                    help="Print the root nodes and sorted dependencies instead of writing the CSV")
    ap.add_argument("--expand-groups", action="store_true", default=None,
                    help="Traverse named model groups as dependency roots")
    ap.add_argument("--log-level", help="Log level (default: LOG_LEVEL or INFO)")
    return ap


def validate_file_arguments(source: str, target: str = None) -> str | None:
    """Check the source exists and the target can be written.

    Returns:
        An error message, or None when the arguments are usable
    """
    if not Path(source).is_file():
        return f"Missing source file specified: '{source}'"

    if target is None:
        return None

    target_path = Path(target)
    target_dir = target_path.parent.resolve()
    if not target_dir.is_dir():
        return f"Missing target directory specified: '{target_dir}'"

    if target_path.exists() and not os.access(target_path, os.W_OK):
        return f"Target file '{target_path.name}' is read only. Please make it writable."

    return None


def main(argv: list[str] = None) -> int:
    args = build_parser().parse_args(argv)
    config = ExportConfig()

    setup_logging(args.log_level or config.LOG_LEVEL)

    if not args.list_roots and not args.target:
        logger.error("A target csv file is required unless --list-roots is given")
        return 1

    error = validate_file_arguments(args.source, None if args.list_roots else args.target)
    if error:
        logger.error(error)
        return 1

    expand_groups = config.EXPAND_GROUPS if args.expand_groups is None else args.expand_groups
    nodes_to_skip = args.ignore if args.ignore is not None else config.SKIP_NODES
    additional_attributes = args.add if args.add is not None else config.ADDITIONAL_ATTRIBUTES

    try:
        logger.info("Loading schemas...")
        loader = SchemaLoader()
        schema_set = loader.load(args.source)

        logger.info(f"{len(loader.loaded_schemas)} files loaded")
        for name in sorted(loader.loaded_schemas):
            document = loader.loaded_schemas[name]
            logger.info(f"File: {name}, Namespace: {document.target_namespace}", extra={"schema_file": name})

        if args.list_roots:
            graph = DependencyGraphVisitor(schema_set, expand_groups, config.STRICT_SORT).build()
            print("Root nodes: " + ",".join(graph.root_nodes))  # noqa: T201
            print("Sorted dependencies: " + ",".join(graph.sorted_dependencies))  # noqa: T201
            return 0

        output = io.StringIO()
        result = extract_xpaths(
            schema_set,
            output,
            nodes_to_skip=nodes_to_skip,
            additional_attributes=additional_attributes,
            root_name=args.root,
            expand_groups=expand_groups,
        )
    except SchemaError as e:
        logger.error(f"XPath extraction failed: {e}", extra={"schema_file": args.source, "root_node": args.root})
        return 1

    with open(args.target, "w", encoding="utf-8", newline="") as f:
        f.write(output.getvalue())

    logger.info(
        f"Wrote {result.record_count} records from root {result.root_name} to {args.target}",
        extra={"root_node": result.root_name}
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
