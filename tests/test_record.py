#!/usr/bin/env python3
"""
Tests for the record line parser
"""

import pytest

from pipeline_reassembler import (
    Encoding, InvalidNextIdError, MalformedRecordError, Record, RecordParseError,
    UnknownEncodingError, parse_record,
)


class TestParseValid:

    def test_full_record(self):
        record = parse_record("1 0 0 hello 1")
        assert record == Record(pipeline_id=1, message_id=0, encoding=Encoding.ASCII,
                                raw_body="hello", declared_next=1)

    def test_hex_record_keeps_raw_body(self):
        record = parse_record("13 1 1 66616E63792031335F31 2")
        assert record.encoding is Encoding.HEX
        assert record.raw_body == "66616E63792031335F31"

    def test_chain_end(self):
        record = parse_record("1 1 0 world -1")
        assert record.declared_next is None
        assert record.closes_pipeline

    def test_trailing_tokens_ignored(self):
        record = parse_record("1 0 0 message_10 1 This text should be ignored")
        assert record.raw_body == "message_10"
        assert record.declared_next == 1

    def test_byte_bounds(self):
        record = parse_record("255 255 0 x 255")
        assert (record.pipeline_id, record.message_id, record.declared_next) == (255, 255, 255)
        record = parse_record("0 0 0 x 0")
        assert (record.pipeline_id, record.message_id, record.declared_next) == (0, 0, 0)

    def test_explicit_plus_sign(self):
        record = parse_record("+1 +2 +0 x +3")
        assert (record.pipeline_id, record.message_id, record.declared_next) == (1, 2, 3)

    def test_empty_body_token(self):
        record = parse_record("1 0 0  1")
        assert record.raw_body == ""


class TestParseMalformed:

    @pytest.mark.parametrize("line", [
        "",
        "err",
        "1",
        "1 0",
        "1 0 0",
        "1 0 0 body",
    ])
    def test_missing_fields(self, line):
        with pytest.raises(MalformedRecordError):
            parse_record(line)

    def test_non_numeric_encoding(self):
        with pytest.raises(MalformedRecordError):
            parse_record("12 8 m...")

    def test_leading_spaces_make_empty_field(self):
        with pytest.raises(MalformedRecordError):
            parse_record("      1 0 0 message_10 1")

    def test_double_space_between_fields(self):
        with pytest.raises(MalformedRecordError):
            parse_record("1  0 0 x 1")

    @pytest.mark.parametrize("line", [
        "256 0 0 x 1",
        "1 256 0 x 1",
        "-1 0 0 x 1",
        "1 -0 0 x 1",
        "1 0 0 x one",
        "1_0 0 0 x 1",
        "1 0 0 x 1.0",
        "1 0 0 x --1",
    ])
    def test_bad_integers(self, line):
        with pytest.raises(MalformedRecordError):
            parse_record(line)

    def test_encoding_out_of_byte_range(self):
        with pytest.raises(MalformedRecordError):
            parse_record("1 0 300 x 1")

    def test_is_a_record_parse_error(self):
        with pytest.raises(RecordParseError):
            parse_record("err")


class TestParseEncodingAndNextId:

    def test_unknown_encoding(self):
        with pytest.raises(UnknownEncodingError):
            parse_record("1 0 2 x 1")

    def test_unknown_encoding_reported_before_missing_body(self):
        # Fields are checked left to right
        with pytest.raises(UnknownEncodingError):
            parse_record("1 0 9")

    @pytest.mark.parametrize("value", [-2, 256, 1000, 32767, -32768])
    def test_next_id_out_of_range(self, value):
        with pytest.raises(InvalidNextIdError) as exc_info:
            parse_record(f"1 0 0 x {value}")
        assert exc_info.value.value == value

    @pytest.mark.parametrize("token", ["40000", "32768", "-32769", "99999999999"])
    def test_next_id_beyond_16_bits_is_malformed(self, token):
        with pytest.raises(MalformedRecordError):
            parse_record(f"1 0 0 x {token}")
