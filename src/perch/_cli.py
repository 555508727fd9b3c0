"""Perch CLI — perch routes / perch serve.

Entry point for the ``perch`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the perch CLI."""
    parser = argparse.ArgumentParser(
        prog="perch",
        description="Convention-based REST routes for chirp.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # perch routes
    routes_parser = subparsers.add_parser(
        "routes",
        help="List the routes derived from the api directory",
    )
    routes_parser.add_argument("root", nargs="?", default=".", help="Application root directory")
    routes_parser.add_argument("--prefix", default=None, help="Override the URL prefix")

    # perch serve
    serve_parser = subparsers.add_parser(
        "serve",
        help="Mount the api directory and run the server",
    )
    serve_parser.add_argument("root", nargs="?", default=".", help="Application root directory")
    serve_parser.add_argument("--host", default=None, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port")
    serve_parser.add_argument("--debug", action="store_true", default=None, help="Debug mode")

    return parser


def _get_version() -> str:
    """Get the package version."""
    from perch import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from perch._errors import PerchError

    try:
        if args.command == "routes":
            from perch.app import collect_routes
            from perch.banner import print_route_table

            routes, collector = collect_routes(args.root, url_prefix=args.prefix)
            print_route_table(routes, warnings=collector.warnings())
        elif args.command == "serve":
            from perch.app import serve

            serve(root=args.root, host=args.host, port=args.port, debug=args.debug)
    except PerchError as exc:
        print(f"perch: error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
