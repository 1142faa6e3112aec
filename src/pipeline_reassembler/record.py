#!/usr/bin/env python3
"""
Record Parser

Turns one input line into a Record:

    <pipeline_id> <message_id> <encoding> <body> <next_id> [ignored...]

Fields are separated by single spaces, so two consecutive spaces produce an
empty field and the line is rejected. Fields are consumed left to right and
the first bad one decides the error. A next_id of -1 terminates the chain.
"""

import re
from dataclasses import dataclass
from typing import Iterator, Optional

from .encoding import Encoding
from .errors import InvalidNextIdError, MalformedRecordError

BYTE_MAX = 255
CHAIN_END = -1          # next_id sentinel: no record follows
NEXT_ID_MIN = -32768    # next_id is a 16-bit signed field
NEXT_ID_MAX = 32767

_UNSIGNED_RE = re.compile(r'\+?[0-9]+')
_SIGNED_RE = re.compile(r'[+-]?[0-9]+')


@dataclass(frozen=True)
class Record:
    """One parsed input line"""
    pipeline_id: int              # 0-255
    message_id: int               # 0-255
    encoding: Encoding
    raw_body: str                 # Undecoded body token
    declared_next: Optional[int]  # 0-255, None closes the pipeline

    @property
    def closes_pipeline(self) -> bool:
        return self.declared_next is None


def _to_int(token: str, pattern: re.Pattern, field_name: str) -> int:
    if not pattern.fullmatch(token):
        raise MalformedRecordError(f"Invalid {field_name} value: {token!r}")
    try:
        return int(token)
    except ValueError as e:
        # Digit strings past the interpreter's conversion limit
        raise MalformedRecordError(f"Invalid {field_name} value: {e}") from e


def _parse_byte(token: str, field_name: str) -> int:
    value = _to_int(token, _UNSIGNED_RE, field_name)
    if value > BYTE_MAX:
        raise MalformedRecordError(f"Invalid {field_name} value: {token!r} (out of range)")
    return value


def _parse_next_id(token: str) -> Optional[int]:
    value = _to_int(token, _SIGNED_RE, 'next id')
    if not NEXT_ID_MIN <= value <= NEXT_ID_MAX:
        raise MalformedRecordError(f"Invalid next id value: {token!r} (out of range)")
    if value == CHAIN_END:
        return None
    if not 0 <= value <= BYTE_MAX:
        raise InvalidNextIdError(value)
    return value


def _next_field(tokens: Iterator[str], field_name: str) -> str:
    token = next(tokens, None)
    if token is None:
        raise MalformedRecordError(f"Missing {field_name}")
    return token


def parse_record(line: str) -> Record:
    """
    Parse one input line into a Record.

    Args:
        line: Text of a single line, without its line terminator

    Returns:
        Parsed Record

    Raises:
        MalformedRecordError: a field is missing or not a valid integer,
            including a next_id outside the 16-bit signed range
        UnknownEncodingError: encoding code is a byte with no Encoding
        InvalidNextIdError: next_id is a 16-bit integer outside [-1, 255]
    """
    tokens = iter(line.split(' '))

    pipeline_id = _parse_byte(_next_field(tokens, 'pipeline id'), 'pipeline id')
    message_id = _parse_byte(_next_field(tokens, 'id'), 'id')
    encoding = Encoding.from_code(
        _parse_byte(_next_field(tokens, 'encoding'), 'encoding'))
    raw_body = _next_field(tokens, 'msg')
    declared_next = _parse_next_id(_next_field(tokens, 'next_id'))

    # Anything after the fifth field is ignored
    return Record(
        pipeline_id=pipeline_id,
        message_id=message_id,
        encoding=encoding,
        raw_body=raw_body,
        declared_next=declared_next,
    )
