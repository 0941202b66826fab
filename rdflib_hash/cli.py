#!/usr/bin/env python3
"""Print the digest of an RDF graph loaded from a file or URL."""

from __future__ import annotations

import argparse
import logging
import os
import sys

from . import HashedGraph, __version__
from .loader import HTTP_TIMEOUT_S, LoadError, load_graph

log = logging.getLogger(__name__)

CREDENTIALS_MESSAGE = "You must provide both --username and --password, or neither"


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser for `rdf-hash`."""
    parser = argparse.ArgumentParser(
        prog="rdf-hash",
        description="Compute a digest of an RDF graph that ignores triple order and blank node labels.",
        epilog=(
            "Notes: --baseuri and --format default to the file URI and the format "
            "guessed from the extension for files, and to the URL and the response "
            "content type for URLs. --username/--password default to "
            "RDF_HASH_USERNAME/RDF_HASH_PASSWORD."
        ),
    )
    parser.add_argument("-s", "--source", required=True, help="Source of the RDF graph: file path or http(s) URL.")
    parser.add_argument("-b", "--baseuri", default=None, help="Base URI used to resolve relative IRIs.")
    parser.add_argument("-f", "--format", default=None, help="rdflib format name (e.g. turtle, nt, xml, json-ld).")
    parser.add_argument(
        "-u", "--username", default=os.environ.get("RDF_HASH_USERNAME"), help="Username for HTTP basic authentication."
    )
    parser.add_argument(
        "-p", "--password", default=os.environ.get("RDF_HASH_PASSWORD"), help="Password for HTTP basic authentication."
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=os.environ.get("RDF_HASH_TIMEOUT") or str(HTTP_TIMEOUT_S),
        help=f"HTTP timeout in seconds (default: RDF_HASH_TIMEOUT or {HTTP_TIMEOUT_S:g}).",
    )
    parser.add_argument(
        "-d", "--debug", action="store_true", help="Print the canonical string of the graph before the digest."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log loading and encoding details to stderr.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the `rdf-hash` command-line interface."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if (args.username is None) != (args.password is None):
        parser.exit(status=1, message=CREDENTIALS_MESSAGE + "\n")
    if args.timeout <= 0:
        parser.exit(status=1, message="--timeout must be positive\n")

    try:
        graph = load_graph(
            args.source,
            base_uri=args.baseuri,
            format=args.format,
            username=args.username,
            password=args.password,
            timeout=args.timeout,
        )
    except LoadError as exc:
        log.warning("%s", exc)
        print("No graph loaded", file=sys.stderr)
        return 1

    hashed = HashedGraph(graph)
    if args.debug:
        print(hashed.canonical)
    print(hashed.digest)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
