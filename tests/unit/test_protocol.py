"""
Unit tests for message labels and the envelope codec
"""

import pytest

from wcdist.common import mailbox_pb2
from wcdist.common.errors import ProtocolViolation
from wcdist.common.protocol import (
    ANY_SOURCE, ANY_TAG, CONTROL_TAGS, DATA_TAGS, Message, Tag,
    decode_envelope, encode_envelope, expect, from_envelope, matches, to_envelope
)


class TestTags:

    def test_label_values_are_stable(self):
        """Labels travel on the wire as integers"""
        assert [int(tag) for tag in Tag] == [0, 1, 2, 3, 4, 5, 6]
        assert Tag.TASK == 0 and Tag.READY == 1 and Tag.TERMINATE == 2

    def test_control_and_data_tags_are_disjoint(self):
        assert not CONTROL_TAGS & DATA_TAGS
        assert Tag.ABORT not in CONTROL_TAGS | DATA_TAGS


class TestMatching:

    def test_wildcards_match_everything(self):
        message = Message(source=3, tag=Tag.READY)
        assert matches(message, ANY_SOURCE, ANY_TAG)

    def test_source_and_tag_filters(self):
        message = Message(source=3, tag=Tag.READY)
        assert matches(message, 3, Tag.READY)
        assert not matches(message, 2, ANY_TAG)
        assert not matches(message, ANY_SOURCE, Tag.TASK)

    def test_source_zero_is_not_a_wildcard(self):
        assert not matches(Message(source=1, tag=Tag.TASK), 0, ANY_TAG)


class TestExpect:

    def test_returns_payload(self):
        assert expect(Message(0, Tag.TASK, 'a.txt'), Tag.TASK, str) == 'a.txt'
        assert expect(Message(1, Tag.READY), Tag.READY) is None

    def test_wrong_label_raises(self):
        with pytest.raises(ProtocolViolation) as exc_info:
            expect(Message(1, Tag.HIST_WORD, 'fox'), Tag.HIST_FREQ, int)
        assert exc_info.value.source == 1
        assert exc_info.value.tag == Tag.HIST_WORD

    def test_wrong_payload_type_raises(self):
        with pytest.raises(ProtocolViolation):
            expect(Message(1, Tag.HIST_COUNT, '3'), Tag.HIST_COUNT, int)

    def test_bool_is_not_an_int_payload(self):
        with pytest.raises(ProtocolViolation):
            expect(Message(1, Tag.HIST_FREQ, True), Tag.HIST_FREQ, int)


class TestEnvelope:

    def test_decode_restores_message(self):
        message = Message(source='localhost:50052', tag=Tag.HIST_WORD, payload='fox')
        decoded = decode_envelope(encode_envelope(message))

        assert decoded == message
        assert isinstance(decoded.tag, Tag)

    def test_empty_payload(self):
        message = Message(source='localhost:50051', tag=Tag.TERMINATE)
        assert decode_envelope(encode_envelope(message)).payload is None

    def test_zero_count_payload_survives(self):
        """A count of zero is a payload, not a missing one"""
        count = Message(source='w:1', tag=Tag.HIST_COUNT, payload=0)
        assert decode_envelope(encode_envelope(count)).payload == 0

    def test_envelope_fields(self):
        envelope = to_envelope(Message(source=3, tag=Tag.HIST_FREQ, payload=7))

        assert isinstance(envelope, mailbox_pb2.Envelope)
        assert envelope.source == '3'
        assert envelope.tag == 5
        assert envelope.WhichOneof('payload') == 'number'
        assert from_envelope(envelope).payload == 7

    @pytest.mark.parametrize("payload", [True, 1.5, ['a'], {'a': 1}])
    def test_unsupported_payload_rejected(self, payload):
        with pytest.raises(ProtocolViolation):
            encode_envelope(Message(source='a', tag=Tag.TASK, payload=payload))

    def test_unknown_label_rejected(self):
        data = mailbox_pb2.Envelope(source='a', tag=99).SerializeToString()
        with pytest.raises(ProtocolViolation):
            decode_envelope(data)

    @pytest.mark.parametrize("data", [
        mailbox_pb2.Envelope(source='localhost:50052').SerializeToString()[:-1],
        b'\xff',
    ])
    def test_malformed_envelope_raises(self, data):
        with pytest.raises(ProtocolViolation):
            decode_envelope(data)
