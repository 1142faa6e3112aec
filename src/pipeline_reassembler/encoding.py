#!/usr/bin/env python3
"""
Payload Encodings

Each record names the scheme its body was written in. The set of schemes is
closed: adding one means adding an Encoding member and a branch in decode().
"""

import binascii
from enum import Enum

from .errors import DecodeError, UnknownEncodingError


class Encoding(Enum):
    """Payload encodings, valued by their wire code"""
    ASCII = 0   # Body is used as-is
    HEX = 1     # Body is hex digits of UTF-8 bytes

    @classmethod
    def from_code(cls, code: int) -> 'Encoding':
        """
        Map a wire code to its Encoding.

        Raises:
            UnknownEncodingError: code names no encoding
        """
        try:
            return cls(code)
        except ValueError:
            raise UnknownEncodingError(code) from None

    def decode(self, raw_body: str) -> str:
        """Decode raw_body under this encoding (see module-level decode)"""
        return decode(self, raw_body)


def decode(encoding: Encoding, raw_body: str) -> str:
    """
    Decode a raw body token into text.

    Args:
        encoding: Scheme the body was written in
        raw_body: Body token exactly as it appeared on the line

    Returns:
        Decoded text

    Raises:
        DecodeError: hex is odd-length or has non-hex characters, or the
            decoded bytes are not valid UTF-8
    """
    if encoding is Encoding.ASCII:
        return raw_body

    if encoding is Encoding.HEX:
        # unhexlify rejects odd lengths, whitespace and non-hex digits
        try:
            data = binascii.unhexlify(raw_body)
        except ValueError as e:
            raise DecodeError(f"Failed to decode message as hex: {e}",
                              encoding=encoding, raw_body=raw_body) from e
        try:
            return data.decode('utf-8')
        except UnicodeDecodeError as e:
            raise DecodeError(f"Decoded bytes are not valid UTF-8: {e}",
                              encoding=encoding, raw_body=raw_body) from e

    raise DecodeError(f"Invalid encoding value: {encoding!r}",
                      encoding=encoding, raw_body=raw_body)
