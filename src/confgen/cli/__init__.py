"""Command-line interface for confgen.

Usage:
    confgen generate [--main-dir D] [--contrib-dir D] [--output-dir D]
                     [--active | --passive] [--no-copy] [--dry-run]
    confgen extract <file> [--tag TOKEN]
    confgen tags
    confgen check [--main-dir D]
"""

import argparse
import logging
import sys

from confgen.cli.generate import cmd_check, cmd_generate
from confgen.cli.tags import cmd_extract, cmd_tags


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="confgen",
        description="Generate build manifest and config source from extension docstrings",
    )
    parser.add_argument(
        "--config", default=None,
        help="Path to confgen.yaml (default: ./confgen.yaml if present)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Log each extension and template processed",
    )
    sub = parser.add_subparsers(dest="command")

    # generate
    gen = sub.add_parser("generate", help="Generate manifest and config from templates")
    gen.add_argument(
        "--main-dir", default=None,
        help="Directory holding the templates",
    )
    gen.add_argument(
        "--contrib-dir", default=None,
        help="Directory of extension sources",
    )
    gen.add_argument(
        "--output-dir", default=None,
        help="Where generated files go (default: contrib dir)",
    )
    mode = gen.add_mutually_exclusive_group()
    mode.add_argument(
        "--active", dest="mode", action="store_const", const="active",
        help="Insert contributions uncommented",
    )
    mode.add_argument(
        "--passive", dest="mode", action="store_const", const="passive",
        help="Insert contributions commented out (default)",
    )
    gen.add_argument(
        "--no-copy", action="store_true",
        help="Use templates already present in the output dir",
    )
    gen.add_argument(
        "--dry-run", action="store_true",
        help="Report without writing",
    )

    # extract
    ext = sub.add_parser("extract", help="Show tag payloads found in one file")
    ext.add_argument("file", help="Extension source file")
    ext.add_argument(
        "--tag", default=None,
        help="Only this tag token (e.g. %%keybind)",
    )

    # tags
    sub.add_parser("tags", help="List the tag catalog")

    # check
    chk = sub.add_parser("check", help="Verify templates carry every marker")
    chk.add_argument(
        "--main-dir", default=None,
        help="Directory holding the templates",
    )

    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="[%(name)s] %(levelname)s: %(message)s",
            stream=sys.stderr,
        )

    if not args.command:
        parser.print_help()
        return 0

    dispatch = {
        "generate": cmd_generate,
        "extract": cmd_extract,
        "tags": cmd_tags,
        "check": cmd_check,
    }
    return dispatch[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
