"""
Exception hierarchy for the reassembler.

Line-level parse failures derive from RecordParseError so the ingest loop can
reject a whole line with a single except clause. Payload decode failures are
reported separately since they do not reject the record's chain step.
"""

from typing import Optional


class ReassemblerError(Exception):
    """Base class for all reassembler errors"""


class RecordParseError(ReassemblerError):
    """A line could not be turned into a Record"""


class MalformedRecordError(RecordParseError):
    """Missing token or a numeric token that is not a valid integer"""


class UnknownEncodingError(RecordParseError):
    """Encoding code is a valid byte but names no known encoding"""

    def __init__(self, code: int):
        super().__init__(f"Not a valid encoding: {code}")
        self.code = code


class InvalidNextIdError(RecordParseError):
    """next_id is an integer outside [-1, 255]"""

    def __init__(self, value: int):
        super().__init__(f"Incorrect next id {value}")
        self.value = value


class DecodeError(ReassemblerError):
    """Payload could not be decoded under its declared encoding"""

    def __init__(self, message: str, encoding: Optional[object] = None,
                 raw_body: Optional[str] = None):
        super().__init__(message)
        self.encoding = encoding
        self.raw_body = raw_body


class ConfigError(ReassemblerError):
    """Configuration file is missing, unreadable or invalid"""
