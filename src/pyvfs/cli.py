"""Command-line entrypoint for the pyvfs generator."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TextIO

from pyvfs.config import DEFAULT_MODULE_NAME, CliOverrides, load_effective_config
from pyvfs.errors import GenerationError, MappingError, MissingOperandError
from pyvfs.generator import generate
from pyvfs.logging import JsonlEventLog, Reporter

DESCRIPTION = """\
Embed files and directories into a Python module by generating a
mini virtual file system.

PATTERN is a shell glob file name pattern. If a PATTERN matches
directories each directory is copied recursively.

TARGETDIR is a virtual absolute slash separated path in the
generated virtual file system. Multiple PATTERN::TARGETDIR pairs
can be specified.

The virtual file system is only generated if -o is specified;
without it the mappings are validated and nothing is written.
"""


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for generator options and mapping operands."""
    parser = argparse.ArgumentParser(
        prog="pyvfs",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-o",
        dest="output",
        default=None,
        help="path to output file, for example vfs/vfs.py",
    )
    parser.add_argument(
        "-p",
        dest="module_name",
        default=None,
        help=f"custom module name (default: {DEFAULT_MODULE_NAME})",
    )
    parser.add_argument(
        "-t",
        dest="test_file",
        default=None,
        help=(
            "path to a file in the virtual file system that will be used to "
            "generate tests, interpreted only if -o is specified"
        ),
    )
    parser.add_argument("--config", default=None, help="path to pyvfs.toml")
    parser.add_argument("--log-file", default=None, help="append JSONL events to this file")
    parser.add_argument("--chunk-bytes", type=int, default=None, help="source read size")
    parser.add_argument("mappings", nargs="*", metavar="PATTERN::TARGETDIR")
    return parser


def main(
    argv: list[str] | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Entrypoint for the generator process."""
    out = stdout if stdout is not None else sys.stdout
    err = stderr if stderr is not None else sys.stderr
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not args.mappings:
        error = MissingOperandError()
        print(error.message, file=err)
        parser.print_help(err)
        return error.exit_code

    overrides = CliOverrides(
        output=args.output,
        module_name=args.module_name,
        test_file=args.test_file,
        chunk_bytes=args.chunk_bytes,
        events_path=args.log_file,
    )
    try:
        config = load_effective_config(
            config_path=Path(args.config) if args.config is not None else None,
            overrides=overrides,
        )
        event_log = (
            JsonlEventLog(config.logging.events_path)
            if config.logging.events_path is not None
            else None
        )
    except (OSError, ValueError) as config_error:
        print(f"Error: {config_error}", file=err)
        return 1

    reporter = Reporter(stream=out, event_log=event_log)
    try:
        generate(args.mappings, config, reporter=reporter)
    except GenerationError as error:
        reporter.run_failed(error)
        print(f"Error: {error.message}", file=err)
        if isinstance(error, MappingError):
            parser.print_usage(err)
        return error.exit_code
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
