"""
Client and server classes for the Mailbox service in mailbox.proto.
"""

import grpc
from google.protobuf import empty_pb2 as google_dot_protobuf_dot_empty__pb2

from wcdist.common import mailbox_pb2 as wcdist_dot_mailbox__pb2


class MailboxStub(object):
    """Delivers envelopes to a remote participant."""

    def __init__(self, channel):
        """Constructor.

        Args:
            channel: A grpc.Channel.
        """
        self.Deliver = channel.unary_unary(
                '/wcdist.Mailbox/Deliver',
                request_serializer=wcdist_dot_mailbox__pb2.Envelope.SerializeToString,
                response_deserializer=google_dot_protobuf_dot_empty__pb2.Empty.FromString,
                )


class MailboxServicer(object):
    """Accepts envelopes for the local participant."""

    def Deliver(self, request, context):
        context.set_code(grpc.StatusCode.UNIMPLEMENTED)
        context.set_details('Method not implemented!')
        raise NotImplementedError('Method not implemented!')


def add_MailboxServicer_to_server(servicer, server):
    rpc_method_handlers = {
            'Deliver': grpc.unary_unary_rpc_method_handler(
                    servicer.Deliver,
                    request_deserializer=wcdist_dot_mailbox__pb2.Envelope.FromString,
                    response_serializer=google_dot_protobuf_dot_empty__pb2.Empty.SerializeToString,
            ),
    }
    generic_handler = grpc.method_handlers_generic_handler(
            'wcdist.Mailbox', rpc_method_handlers)
    server.add_generic_rpc_handlers((generic_handler,))
