"""
Pipeline Reassembler - ordered message reconstruction from unordered records

Each input record names its pipeline, its own id, a payload encoding, and the
id expected to follow it. The registry checks every record against its
pipeline's chain, decodes the payload, and renders each pipeline's messages
in ascending id order.

Quick Start:
    from pipeline_reassembler import PipelineRegistry, RegistryConfig, ingest_lines

    registry = PipelineRegistry(RegistryConfig(discard_invalid_next_id=False))
    ingest_lines(registry, ["1 0 0 hello 1", "1 1 0 world -1"])
    print(registry.render(), end='')
    # Pipeline:1
    #     0| hello
    #     1| world
    # (message lines are indented with a single tab)

Flow:
    line → parse_record → PipelineRegistry.insert → Pipeline.apply → render
"""

__version__ = "1.0.0"
__author__ = "Pipeline Reassembler Project"

from .errors import (
    ReassemblerError,
    RecordParseError,
    MalformedRecordError,
    UnknownEncodingError,
    InvalidNextIdError,
    DecodeError,
    ConfigError,
)
from .encoding import Encoding, decode
from .record import Record, parse_record
from .pipeline import Pipeline, PipelineState, Open, Closed, Message, Outcome
from .registry import PipelineRegistry, RegistryConfig
from .ingest import IngestMetrics, ingest_lines

__all__ = [
    # === Core ===
    "PipelineRegistry",
    "RegistryConfig",
    "Pipeline",
    "PipelineState",
    "Open",
    "Closed",
    "Message",
    "Outcome",
    # === Records ===
    "Record",
    "parse_record",
    "Encoding",
    "decode",
    # === Ingest ===
    "IngestMetrics",
    "ingest_lines",
    # === Errors ===
    "ReassemblerError",
    "RecordParseError",
    "MalformedRecordError",
    "UnknownEncodingError",
    "InvalidNextIdError",
    "DecodeError",
    "ConfigError",
]
