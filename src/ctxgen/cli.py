from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys

from .config import GenerateOptions, default_target_file, go_binary
from .errors import ConfigurationError, CtxGenError


def _version() -> str:
    try:
        return importlib.metadata.version("ctxgen")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ctxgen",
        description="Generate context-free forwarders for exported Go `...WithContext` functions.",
    )
    parser.add_argument(
        "-f",
        "--file",
        default=default_target_file(),
        help="Target Go file (default: $GOFILE, as set by `go generate`).",
    )
    parser.add_argument("-d", "--dir", dest="directory", default=None, help="Target directory.")
    parser.add_argument("-o", "--out", dest="output", default=None, help="Output file (default: stdout).")
    parser.add_argument(
        "--no-package",
        action="store_true",
        help="Emit declarations only, for appending to an existing file.",
    )
    parser.add_argument("--no-gofmt", action="store_true", help="Skip the final go/format pass.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for debug).")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_version()}")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)

    opts = GenerateOptions(
        file=args.file,
        directory=args.directory,
        output=args.output,
        include_package=not args.no_package,
        gofmt=not args.no_gofmt,
        go=go_binary(),
    )

    from .pipeline import run

    try:
        run(opts)
    except ConfigurationError as e:
        parser.error(str(e))
    except CtxGenError as e:
        raise SystemExit(f"ctxgen: {e}") from e
