from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys

from .config import DEFAULT_FORMAT, DEFAULT_SEPARATOR
from .errors import GitVerDiffError, UnknownTokenError
from .formatter import format_tokens_help
from .generate import Options, generate_version_hash

FORMAT_TOKENS_HELP = format_tokens_help(DEFAULT_FORMAT)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitverdiff",
        description="Print a version hash built from the Git state and modified file contents.",
        epilog=FORMAT_TOKENS_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("include", nargs="*", help="Glob patterns to include files.")
    parser.add_argument(
        "--ignore",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Glob pattern to exclude files (repeatable).",
    )
    parser.add_argument(
        "--format",
        default=None,
        metavar="TOKENS",
        help="Comma-separated list of format tokens to compose the version hash.",
    )
    parser.add_argument(
        "--separator",
        default=None,
        metavar="SEP",
        help=f"Separator string used to join tokens (default: '{DEFAULT_SEPARATOR}').",
    )
    parser.add_argument(
        "--package-root",
        default=None,
        metavar="DIR",
        help="Package directory to fingerprint (default: current directory).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log diagnostics to stderr.")
    parser.add_argument("--version", action="store_true", help="Print gitverdiff version.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="gitverdiff: %(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    if args.version:
        try:
            print(importlib.metadata.version("gitverdiff"))
        except importlib.metadata.PackageNotFoundError:
            print("0.0.0")
        return 0

    opts = Options(
        include=args.include,
        ignore=args.ignore,
        format=args.format,
        package_root=args.package_root,
        separator=args.separator,
    )
    try:
        print(generate_version_hash(opts))
    except UnknownTokenError as e:
        print(f"Error: {e}", file=sys.stderr)
        print(FORMAT_TOKENS_HELP, file=sys.stderr)
        return 1
    except (GitVerDiffError, OSError) as e:
        print(f"Error generating version hash: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
