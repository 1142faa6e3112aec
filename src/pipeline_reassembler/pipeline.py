#!/usr/bin/env python3
"""
Pipeline - per-stream chain state machine

A pipeline tracks the id it expects next and accumulates decoded messages.

States:
    Open(expected_next)  - accepting records; expected_next is None until the
                           first chain-accepted record declares a successor
    Closed               - terminal; every further record is ignored

Chain state advances on every chain-accepted record, including records whose
payload fails to decode. Only the decode result decides whether a Message is
stored.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .encoding import decode
from .errors import DecodeError
from .record import Record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Open:
    """Pipeline is accepting records"""
    expected_next: Optional[int] = None


@dataclass(frozen=True)
class Closed:
    """Pipeline received its chain terminator"""


PipelineState = Union[Open, Closed]


class Outcome(Enum):
    """What apply() did with a record"""
    STORED = "stored"                                    # Chain-accepted, message kept
    DECODE_FAILED = "decode_failed"                      # Chain-accepted, payload lost
    DROPPED_CLOSED = "dropped_closed"                    # Pipeline already closed
    DROPPED_OUT_OF_SEQUENCE = "dropped_out_of_sequence"  # Discard policy rejected it

    @property
    def chain_accepted(self) -> bool:
        return self in (Outcome.STORED, Outcome.DECODE_FAILED)


@dataclass(frozen=True)
class Message:
    """A decoded message; ordered by message_id only"""
    message_id: int
    body: str


class Pipeline:
    """
    One logical stream of messages.

    Messages are kept in arrival order and stably sorted on read, so records
    that reuse an id keep their relative arrival order.
    """

    def __init__(self, pipeline_id: int):
        self.pipeline_id = pipeline_id
        self.state: PipelineState = Open()
        self._messages: List[Message] = []

        # Statistics
        self.decode_failures = 0
        self.dropped = 0

        logger.debug(f"Pipeline {pipeline_id} created")

    @property
    def closed(self) -> bool:
        return isinstance(self.state, Closed)

    @property
    def expected_next(self) -> Optional[int]:
        """Id the chain expects next (None if unset or closed)"""
        if isinstance(self.state, Open):
            return self.state.expected_next
        return None

    def apply(self, record: Record, discard_invalid_next_id: bool = False) -> Outcome:
        """
        Apply one record addressed to this pipeline.

        Args:
            record: Parsed record with record.pipeline_id == self.pipeline_id
            discard_invalid_next_id: Drop records whose id is not the
                expected one instead of accepting them into the chain

        Returns:
            Outcome describing what happened to the record
        """
        if isinstance(self.state, Closed):
            self.dropped += 1
            logger.debug(f"The following message was ignored because the pipeline "
                         f"was closed: {record}")
            return Outcome.DROPPED_CLOSED

        expected = self.state.expected_next
        if expected is not None and record.message_id != expected and discard_invalid_next_id:
            self.dropped += 1
            logger.debug(f"Message {record} was ignored because it's not supposed to be "
                         f"received, should have been id {expected}")
            return Outcome.DROPPED_OUT_OF_SEQUENCE

        try:
            body = decode(record.encoding, record.raw_body)
        except DecodeError as e:
            self.decode_failures += 1
            logger.warning(f"Pipeline {self.pipeline_id}: message {record.message_id} "
                           f"is not valid: {e}")
            outcome = Outcome.DECODE_FAILED
        else:
            self._messages.append(Message(record.message_id, body))
            outcome = Outcome.STORED

        # Advances even when decoding failed
        if record.declared_next is None:
            self.state = Closed()
            logger.debug(f"Pipeline {self.pipeline_id} closed by message {record.message_id}")
        else:
            self.state = Open(record.declared_next)

        return outcome

    @property
    def messages(self) -> List[Message]:
        """Stored messages in ascending id order (a new list each call)"""
        return sorted(self._messages, key=lambda m: m.message_id)

    def __len__(self) -> int:
        return len(self._messages)

    def render(self) -> str:
        """Render this pipeline's block: header line plus one line per message"""
        lines = [f"Pipeline:{self.pipeline_id}\n"]
        for msg in self.messages:
            lines.append(f"\t{msg.message_id}| {msg.body}\n")
        return ''.join(lines)

    def get_stats(self) -> Dict[str, Any]:
        """Get pipeline statistics"""
        return {
            'pipeline_id': self.pipeline_id,
            'state': 'closed' if self.closed else 'open',
            'expected_next': self.expected_next,
            'messages': len(self._messages),
            'decode_failures': self.decode_failures,
            'dropped': self.dropped,
        }

    def __repr__(self):
        return (f"Pipeline(pipeline_id={self.pipeline_id}, state={self.state}, "
                f"messages={len(self._messages)})")
