"""File discovery, per-file processing and the run command."""
from __future__ import annotations

import os
import re
import stat
import sys
from pathlib import Path
from typing import Iterator

from .config import Config
from .errors import GotryError
from .fixers.common import write_with_backup
from .parser import parse_file
from .printer import render
from .stats import Stats
from .utils import c, log, rel
from .walker import walk


def is_go_file(name: str) -> bool:
    return not name.startswith(".") and name.endswith(".go")


def find_go_files(path: str | Path, ignore_rx: re.Pattern | None = None) -> Iterator[str]:
    """Yield the Go files below path in sorted order, minus ignored paths."""
    for root, dirs, files in os.walk(path):
        dirs.sort()
        for name in sorted(files):
            filepath = os.path.join(root, name)
            if not is_go_file(name):
                continue
            if ignore_rx is not None and ignore_rx.search(filepath):
                continue
            yield filepath


def process_file(path: str | Path, config: Config, stats: Stats) -> bool:
    """Parse and walk one file; in rewrite mode write it back if it changed.

    Returns True if the file had try candidates rewritten. OSError and
    ParseError propagate.
    """
    file = parse_file(path)
    if not walk(file, config, stats) or not config.rewrite:
        return False
    write_with_backup(path, file.source, render(file))
    if config.verbose:
        log(c(f"  rewrote {rel(path)}", "green", sys.stderr))
    return True


class _Run:
    """State of one gotry invocation: counters, file count and exit code."""

    def __init__(self, config: Config):
        self.config = config
        self.stats = Stats()
        self.file_count = 0
        self.exit_code = 0

    def report(self, msg: str) -> None:
        log(c(msg, "red", sys.stderr))
        self.exit_code = 2

    def visit(self, path: str, walking: bool = False) -> None:
        self.file_count += 1
        if self.config.verbose:
            log(c(f"  {rel(path)}", "dim", sys.stderr))
        try:
            process_file(path, self.config, self.stats)
        except FileNotFoundError as ex:
            # removed while the directory was being walked
            if not walking:
                self.report(f"{path}: {ex.strerror}")
        except OSError as ex:
            self.report(f"{path}: {ex.strerror or ex}")
        except GotryError as ex:
            self.report(str(ex))

    def run(self, paths: list[str], ignore_rx: re.Pattern | None) -> None:
        for path in paths:
            try:
                is_dir = stat.S_ISDIR(os.stat(path).st_mode)
            except OSError as ex:
                self.report(f"{path}: {ex.strerror}")
                continue
            if is_dir:
                for filepath in find_go_files(path, ignore_rx):
                    self.visit(filepath, walking=True)
            else:
                self.visit(path)

    def print_report(self) -> None:
        if not self.file_count:
            return
        if self.config.list_positions:
            for line in self.stats.format_positions():
                print(line)
        for line in self.stats.format_counts(listed=self.config.list_positions):
            print(line)


def cmd_run(config: Config, paths: list[str]) -> int:
    """Process paths (files or directories) and print the report.

    Returns the process exit code: 0, or 2 if any error was reported.
    """
    run = _Run(config)
    try:
        ignore_rx = config.ignore_rx()
    except GotryError as ex:
        run.report(str(ex))
        return run.exit_code
    run.run(paths, ignore_rx)
    run.print_report()
    return run.exit_code
