#!/usr/bin/env python3
"""
Command Line Interface for the Pipeline Reassembler

    pipeline-reassembler run [--input FILE] [--config FILE] [--discard-invalid-next-id]
    pipeline-reassembler check [--input FILE]

Records are read until end of input or the first empty line. The rendered
pipelines go to stdout; diagnostics go to stderr.
"""

import io
import os
import sys
import logging
import argparse
from contextlib import contextmanager
from typing import Iterator, List, Optional, TextIO

from . import __version__
from .config_utils import (
    LoggingSettings, load_config, logging_settings_from_dict, registry_config_from_dict,
)
from .errors import ConfigError, RecordParseError
from .ingest import ingest_lines
from .record import parse_record
from .registry import PipelineRegistry, RegistryConfig

logger = logging.getLogger(__name__)


def _has_file_handler(root_logger: logging.Logger, log_file) -> bool:
    path = os.path.abspath(str(log_file))
    return any(isinstance(h, logging.FileHandler) and h.baseFilename == path
               for h in root_logger.handlers)


def setup_logging(settings: LoggingSettings, debug: bool = False):
    """Configure the root logger for a command line run"""
    level = logging.DEBUG if debug else settings.level_number

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Add handler if none exists
    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter('%(levelname)s:%(name)s:%(message)s'))
        root_logger.addHandler(handler)
    else:
        for handler in root_logger.handlers:
            handler.setLevel(level)

    # One file handler per log path, however often this is called
    if settings.log_file and not _has_file_handler(root_logger, settings.log_file):
        file_handler = logging.FileHandler(settings.log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s'))
        root_logger.addHandler(file_handler)

    if debug:
        logging.debug("DEBUG logging enabled")


@contextmanager
def open_input(path: Optional[str]) -> Iterator[TextIO]:
    """
    Yield the input file, or stdin when no path is given.

    Bytes that are not valid UTF-8 become U+FFFD, so one bad line never
    stops the rest of the input from being read.
    """
    if path is None or path == '-':
        buffer = getattr(sys.stdin, 'buffer', None)
        if buffer is None:
            # Already a text stream without a byte buffer
            yield sys.stdin
            return
        stream = io.TextIOWrapper(buffer, encoding='utf-8', errors='replace')
        try:
            yield stream
        finally:
            # Leave sys.stdin's buffer open
            stream.detach()
    else:
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            yield f


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='pipeline-reassembler',
        description='Reassemble per-pipeline message sequences from unordered records',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Run command
    run_parser = subparsers.add_parser('run', help='Reassemble records and print pipelines')
    run_parser.add_argument('--input', '-i', help='Input file (default: stdin)')
    run_parser.add_argument('--config', '-c', help='Configuration file path (TOML)')
    run_parser.add_argument('--discard-invalid-next-id', action='store_true', default=None,
                            help='Drop records whose id is not the expected next id')
    run_parser.add_argument('--stats', action='store_true',
                            help='Print ingest statistics to stderr')
    run_parser.add_argument('--debug', '-d', action='store_true', help='Enable DEBUG logging')

    # Check command
    check_parser = subparsers.add_parser('check', help='Validate record lines without reassembling')
    check_parser.add_argument('--input', '-i', help='Input file (default: stdin)')
    check_parser.add_argument('--debug', '-d', action='store_true', help='Enable DEBUG logging')

    return parser


def run_command(args: argparse.Namespace) -> int:
    config = {}
    if args.config:
        try:
            config = load_config(args.config)
        except ConfigError as e:
            print(f"❌ {e}", file=sys.stderr)
            return 1

    try:
        registry_config = registry_config_from_dict(config)
        logging_settings = logging_settings_from_dict(config)
    except ConfigError as e:
        print(f"❌ Invalid configuration: {e}", file=sys.stderr)
        return 1

    # Command line flag overrides the config file
    if args.discard_invalid_next_id is not None:
        registry_config = RegistryConfig(discard_invalid_next_id=args.discard_invalid_next_id)

    setup_logging(logging_settings, debug=args.debug)
    logger.debug(f"Registry config: {registry_config}")

    registry = PipelineRegistry(registry_config)
    try:
        with open_input(args.input) as source:
            metrics = ingest_lines(registry, source)
    except OSError as e:
        print(f"❌ Cannot read input: {e}", file=sys.stderr)
        return 1

    sys.stdout.write(registry.render())

    if args.stats:
        for key, value in metrics.to_dict().items():
            print(f"{key}: {value}", file=sys.stderr)

    return 0


def check_command(args: argparse.Namespace) -> int:
    setup_logging(LoggingSettings(), debug=args.debug)

    rejected = 0
    total = 0
    try:
        with open_input(args.input) as source:
            for line_number, raw_line in enumerate(source, start=1):
                line = raw_line.rstrip('\r\n')
                if not line:
                    break
                total += 1
                try:
                    parse_record(line)
                except RecordParseError as e:
                    rejected += 1
                    print(f"line {line_number}: {type(e).__name__}: {e}")
    except OSError as e:
        print(f"❌ Cannot read input: {e}", file=sys.stderr)
        return 1

    print(f"{total - rejected}/{total} records valid")
    return 1 if rejected else 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the pipeline-reassembler command"""
    parser = build_parser()
    args = parser.parse_args(argv)

    # If no command specified, show help
    if not args.command:
        parser.print_help()
        return 1

    if args.command == 'run':
        return run_command(args)
    elif args.command == 'check':
        return check_command(args)

    parser.print_help()
    return 1


if __name__ == '__main__':
    sys.exit(main())
