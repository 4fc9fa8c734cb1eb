"""DepBridge command line.

Loads a repository checkout from disk, analyzes the dependency bridge of one
file in it and writes the result as BridgeData JSON, a text summary, or the
whole-repository graph in node-link JSON.
"""

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from .builder import build_graph, build_repository_graph
from .config import DEFAULT_CONFIG
from .corpus import load_corpus
from .errors import BridgeError
from .exporters import to_json, to_node_link, to_text


def _parse_alias(value: str):
    prefix, sep, target = value.partition("=")
    if not sep or not prefix:
        raise argparse.ArgumentTypeError(f"alias must look like PREFIX=TARGET, got {value!r}")
    return prefix, target


def parse_args(args=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="depbridge",
        description="Show the import/export neighbourhood of one file in a repository.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  depbridge . src/app/page.tsx                 # Text summary
  depbridge . src/app/page.tsx -f json -o bridge.json
  depbridge . src/app/page.tsx --alias '~/=src/'
  depbridge . -f graph -o repo.json            # Whole-repository graph
        """,
    )

    parser.add_argument("root", help="Repository root directory")
    parser.add_argument("file", nargs="?", default=None, help="Path of the file to analyze, relative to root")
    parser.add_argument("-o", "--output", default=None, help="Output file (default: stdout)")
    parser.add_argument(
        "-f", "--format",
        choices=["text", "json", "graph"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--alias",
        action="append",
        type=_parse_alias,
        default=None,
        help="Extra import alias PREFIX=TARGET (repeatable, default @/=src/)",
    )
    parser.add_argument("--source-root", default=DEFAULT_CONFIG.source_root, help="Prefix stripped by the fallback probe")
    parser.add_argument("--rows-per-column", type=int, default=DEFAULT_CONFIG.rows_per_column, help="Layout rows per lane column")
    parser.add_argument("--workers", type=int, default=1, help="Threads used to scan files")
    parser.add_argument("--max-depth", type=int, default=None, help="Maximum directory depth to load")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return parser.parse_args(args)


def main(args=None):
    """Main entry point."""
    parsed = parse_args(args)
    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    alias_map = dict(DEFAULT_CONFIG.alias_map)
    if parsed.alias:
        alias_map.update(dict(parsed.alias))

    try:
        config = DEFAULT_CONFIG.with_overrides(
            alias_map=alias_map,
            source_root=parsed.source_root,
            rows_per_column=parsed.rows_per_column,
            max_workers=parsed.workers,
            max_depth=parsed.max_depth,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    root = Path(parsed.root)
    if not root.is_dir():
        print(f"Error: '{parsed.root}' is not a directory", file=sys.stderr)
        return 1

    print(f"Loading files from {root}...", file=sys.stderr)
    corpus = load_corpus(str(root), config)
    print(f"Found {len(corpus)} files to analyze", file=sys.stderr)

    if parsed.format == "graph":
        output = json.dumps(to_node_link(build_repository_graph(corpus, config)), indent=2)
    else:
        if not parsed.file:
            print("Error: a file to analyze is required for text and json output", file=sys.stderr)
            return 1
        source_path = parsed.file.replace("\\", "/")
        if source_path.startswith("./"):
            source_path = source_path[2:]
        try:
            graph = build_graph(source_path, corpus, config)
        except BridgeError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        if parsed.format == "json":
            output = to_json(graph, analyzed_at=datetime.now(timezone.utc).isoformat())
        else:
            output = to_text(graph)

        print(
            f"{graph.summary['total']} dependencies "
            f"({graph.summary['critical']} critical, {graph.summary['high']} high, "
            f"{graph.summary['medium']} medium, {graph.summary['low']} low), "
            f"{len(graph.dependent_nodes)} dependents",
            file=sys.stderr,
        )

    if parsed.output:
        try:
            output_path = Path(parsed.output)
            output_path.write_text(output, encoding="utf-8")
            print(f"Output written to: {output_path}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    else:
        print(output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
