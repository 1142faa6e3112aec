#!/usr/bin/env python3
"""
Line Ingest

Feeds text lines into a PipelineRegistry until the first empty line.
Lines that fail to parse are logged and skipped; they never stop the run.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable

from .errors import RecordParseError
from .pipeline import Outcome
from .record import parse_record
from .registry import PipelineRegistry

logger = logging.getLogger(__name__)


@dataclass
class IngestMetrics:
    """Counters for one ingest run"""
    lines_read: int = 0
    records_parsed: int = 0
    parse_errors: int = 0
    stored: int = 0
    decode_failures: int = 0
    dropped_closed: int = 0
    dropped_out_of_sequence: int = 0
    stopped_at_blank_line: bool = False

    def count(self, outcome: Outcome):
        if outcome is Outcome.STORED:
            self.stored += 1
        elif outcome is Outcome.DECODE_FAILED:
            self.decode_failures += 1
        elif outcome is Outcome.DROPPED_CLOSED:
            self.dropped_closed += 1
        elif outcome is Outcome.DROPPED_OUT_OF_SEQUENCE:
            self.dropped_out_of_sequence += 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            'lines_read': self.lines_read,
            'records_parsed': self.records_parsed,
            'parse_errors': self.parse_errors,
            'stored': self.stored,
            'decode_failures': self.decode_failures,
            'dropped_closed': self.dropped_closed,
            'dropped_out_of_sequence': self.dropped_out_of_sequence,
            'stopped_at_blank_line': self.stopped_at_blank_line,
        }


def ingest_lines(registry: PipelineRegistry, lines: Iterable[str]) -> IngestMetrics:
    """
    Parse and insert lines until input ends or an empty line is reached.

    Args:
        registry: Registry receiving the parsed records
        lines: Text lines; trailing '\\n' / '\\r\\n' are stripped

    Returns:
        IngestMetrics for this run
    """
    metrics = IngestMetrics()

    for raw_line in lines:
        line = raw_line.rstrip('\r\n')
        if not line:
            metrics.stopped_at_blank_line = True
            logger.debug("Empty line, end of input")
            break

        metrics.lines_read += 1
        try:
            record = parse_record(line)
        except RecordParseError as e:
            metrics.parse_errors += 1
            logger.warning(f"Could not parse line `{line}` with err: {e}")
            continue

        metrics.records_parsed += 1
        metrics.count(registry.insert(record))

    logger.info(
        f"Ingested {metrics.lines_read} lines: {metrics.stored} stored, "
        f"{metrics.parse_errors} rejected, {metrics.decode_failures} undecodable, "
        f"{metrics.dropped_closed + metrics.dropped_out_of_sequence} dropped"
    )
    return metrics
