"""Warren CLI — warren routes / warren serve.

Entry point for the ``warren`` command-line interface.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from warren._errors import WarrenError


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the warren CLI."""
    parser = argparse.ArgumentParser(
        prog="warren",
        description="File-system routing for chirp.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log discovery details")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # warren routes
    routes_parser = subparsers.add_parser(
        "routes",
        help="List the routes discovered under a directory",
    )
    _add_discovery_args(routes_parser)

    # warren serve
    serve_parser = subparsers.add_parser(
        "serve",
        help="Discover routes and serve them with chirp",
    )
    _add_discovery_args(serve_parser)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")

    return parser


def _add_discovery_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("root", nargs="?", default="routes", help="Routes directory")
    parser.add_argument("--pattern", default=None, help="Template file name to match")
    parser.add_argument("--pattern-regex", default=None, help="Template file name regex")
    parser.add_argument("--export", default=None, help="Template render export name")
    parser.add_argument(
        "--warn-missing-exports",
        action="store_true",
        help="Warn about route files that export no handlers",
    )


def _get_version() -> str:
    """Get the package version."""
    from warren import __version__

    return __version__


def _load(args: argparse.Namespace) -> object:
    from warren.config_loader import load_config

    root = Path(args.root).resolve()
    return load_config(
        root,
        config_dir=Path.cwd(),
        pattern=args.pattern,
        pattern_regex=args.pattern_regex,
        export=args.export,
        missing_export="warn" if args.warn_missing_exports else None,
    )


def _print_routes(routes: list) -> None:
    """Print a METHOD / PATH / SOURCE table."""
    if not routes:
        print("No routes discovered.")
        return

    rows = [
        (method, route.url_path, str(route.source))
        for route in routes
        for method in sorted(route.methods)
    ]
    max_method = max(6, *(len(r[0]) for r in rows))
    max_path = max(4, *(len(r[1]) for r in rows))
    fmt = f"{{:<{max_method}}}  {{:<{max_path}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "SOURCE"))
    print("-" * min(max_method + max_path + 4 + max(len(r[2]) for r in rows), 80))
    for row in rows:
        print(fmt.format(*row))


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    from warren.app import discover_routes, get_routes

    try:
        config = _load(args)
        if args.command == "routes":
            _print_routes(asyncio.run(discover_routes(config)))
            return
        app = asyncio.run(get_routes(config))
    except WarrenError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    app.run(host=args.host, port=args.port)


if __name__ == "__main__":
    main()
