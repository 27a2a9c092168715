"""
Message labels, participant roles and the envelope codec.

Every message carries an integer label that alone decides how the payload
is interpreted:

    TASK        coordinator -> worker   file path
    READY       worker -> coordinator   no payload
    TERMINATE   coordinator -> worker   no payload
    HIST_COUNT  worker -> coordinator   number of entries to follow
    HIST_WORD   worker -> coordinator   one word, repeated per entry
    HIST_FREQ   worker -> coordinator   its frequency, right after the word
    ABORT       any -> any              the run is lost
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Hashable, Optional

from google.protobuf.message import DecodeError

from wcdist.common import mailbox_pb2
from wcdist.common.errors import ProtocolViolation

ANY_SOURCE = None
ANY_TAG = None


class Tag(IntEnum):
    TASK = 0
    READY = 1
    TERMINATE = 2
    HIST_COUNT = 3
    HIST_WORD = 4
    HIST_FREQ = 5
    ABORT = 6


CONTROL_TAGS = frozenset({Tag.TASK, Tag.READY, Tag.TERMINATE})
DATA_TAGS = frozenset({Tag.HIST_COUNT, Tag.HIST_WORD, Tag.HIST_FREQ})


class Role(Enum):
    """Part a process plays in a run, chosen at startup."""
    COORDINATOR = "coordinator"
    WORKER = "worker"


@dataclass(frozen=True)
class Message:
    source: Hashable
    tag: Tag
    payload: Any = None


def matches(message: Message, source: Optional[Hashable], tag: Optional[Tag]) -> bool:
    """True if message satisfies a receive filter (None matches anything)."""
    if source is not ANY_SOURCE and message.source != source:
        return False
    if tag is not ANY_TAG and message.tag != tag:
        return False
    return True


def expect(message: Message, tag: Tag, payload_type: Optional[type] = None) -> Any:
    """
    Check a received message against the label and payload type the
    protocol requires at this point, and return its payload.

    Raises:
        ProtocolViolation: On a label or payload mismatch
    """
    if message.tag != tag:
        raise ProtocolViolation(
            f"Expected {tag.name} from {message.source!r}, got {message.tag.name}",
            source=message.source, tag=message.tag
        )
    payload = message.payload
    if payload_type is not None:
        # bool is an int subclass but never a valid count
        if not isinstance(payload, payload_type) or isinstance(payload, bool):
            raise ProtocolViolation(
                f"{tag.name} from {message.source!r} carries {type(payload).__name__}, "
                f"expected {payload_type.__name__}",
                source=message.source, tag=message.tag
            )
    return payload


def to_envelope(message: Message) -> mailbox_pb2.Envelope:
    """
    Build the protobuf envelope for a message.

    Raises:
        ProtocolViolation: If the payload is neither None, str nor int
    """
    envelope = mailbox_pb2.Envelope(source=str(message.source), tag=int(message.tag))
    payload = message.payload
    if isinstance(payload, bool):
        raise ProtocolViolation(f"Cannot encode bool payload for {message.tag.name}", tag=message.tag)
    if isinstance(payload, str):
        envelope.text = payload
    elif isinstance(payload, int):
        envelope.number = payload
    elif payload is not None:
        raise ProtocolViolation(
            f"Cannot encode {type(payload).__name__} payload for {message.tag.name}", tag=message.tag
        )
    return envelope


def from_envelope(envelope: mailbox_pb2.Envelope) -> Message:
    """
    Turn a received envelope back into a message.

    Raises:
        ProtocolViolation: If the envelope carries an unknown label
    """
    try:
        tag = Tag(envelope.tag)
    except ValueError:
        raise ProtocolViolation(f"Unknown label {envelope.tag} from {envelope.source!r}",
                                source=envelope.source)
    kind = envelope.WhichOneof('payload')
    payload = getattr(envelope, kind) if kind is not None else None
    return Message(source=envelope.source, tag=tag, payload=payload)


def encode_envelope(message: Message) -> bytes:
    """Serialize a message for transports that move raw bytes."""
    return to_envelope(message).SerializeToString()


def decode_envelope(data: bytes) -> Message:
    """
    Parse bytes produced by encode_envelope.

    Raises:
        ProtocolViolation: If the bytes are not a well-formed envelope
    """
    try:
        envelope = mailbox_pb2.Envelope.FromString(data)
    except DecodeError as e:
        raise ProtocolViolation(f"Malformed envelope: {e}")
    return from_envelope(envelope)
