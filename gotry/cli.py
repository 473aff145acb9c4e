"""Command-line entry point: gotry [flags] [path ...]."""
from __future__ import annotations

import argparse
import sys

from .commands import cmd_run
from .config import load_config, make_config
from .errors import ConfigError
from .utils import PROJECT_ROOT, c, log


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gotry",
        usage="gotry [flags] [path ...]",
        description="List and rewrite try candidate statements in Go source.",
        allow_abbrev=False,
    )
    # main operation modes
    parser.add_argument("-l", dest="list_positions", action="store_true",
                        help="list positions of potential try candidate statements")
    parser.add_argument("-r", dest="rewrite", action="store_true",
                        help="rewrite potential try candidate statements to use try")
    # customization
    parser.add_argument("-err", dest="err_name", default=None, metavar="NAME",
                        help='name of error variable; using "" permits any name')
    parser.add_argument("-ignore", dest="ignore", default=None, metavar="REGEX",
                        help="ignore files with paths matching this pattern (default: vendor)")
    parser.add_argument("-type", dest="error_type", default=None, metavar="NAME",
                        help="name of the error result type (default: error)")
    parser.add_argument("-v", dest="verbose", action="store_true",
                        help="log each processed file to stderr")
    parser.add_argument("paths", nargs="*", metavar="path")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        settings = load_config(PROJECT_ROOT)
    except ConfigError as ex:
        log(c(str(ex), "red", sys.stderr))
        return 2
    config = make_config(
        settings,
        list_positions=args.list_positions,
        rewrite=args.rewrite,
        err_name=args.err_name,
        ignore=args.ignore,
        error_type=args.error_type,
        verbose=args.verbose,
    )
    return cmd_run(config, args.paths)
