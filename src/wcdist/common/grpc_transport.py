"""
gRPC transport.

Every participant runs a small gRPC server implementing the Mailbox service
from mailbox.proto. Its single unary method, Deliver, drops the received
envelope into the local inbox. Sending is a blocking Deliver call on the
peer, so messages from one sender reach the peer's inbox in send order.
"""

import queue
import logging
import threading
from concurrent import futures
from typing import Dict, Hashable

import grpc
from google.protobuf import empty_pb2

from wcdist.common import mailbox_pb2_grpc
from wcdist.common.errors import ProtocolViolation, TransportError
from wcdist.common.protocol import Message, Tag, from_envelope, to_envelope
from wcdist.common.transport import Transport

logger = logging.getLogger(__name__)

CHANNEL_OPTIONS = [
    ('grpc.max_send_message_length', 100 * 1024 * 1024),
    ('grpc.max_receive_message_length', 100 * 1024 * 1024),
]


def open_channel(address: str, timeout: float = 10):
    """
    Open a channel to a peer and wait until it is ready.

    Args:
        address: Peer address in format 'host:port' (e.g., 'worker-1:50052')
        timeout: Connection timeout in seconds (default: 10)

    Returns:
        grpc.Channel ready for calls

    Raises:
        TransportError: If the peer is not reachable within timeout
    """
    channel = grpc.insecure_channel(address, options=CHANNEL_OPTIONS)
    try:
        grpc.channel_ready_future(channel).result(timeout=timeout)
    except grpc.FutureTimeoutError:
        channel.close()
        raise TransportError(f"Failed to connect to {address} within {timeout}s")
    return channel


class MailboxServicer(mailbox_pb2_grpc.MailboxServicer):
    """Implements the Mailbox service by queueing envelopes into an inbox."""

    def __init__(self, inbox: queue.Queue):
        self.inbox = inbox

    def Deliver(self, request, context):
        try:
            message = from_envelope(request)
        except ProtocolViolation as e:
            logger.error(f"Rejected envelope: {e}")
            context.abort(grpc.StatusCode.INVALID_ARGUMENT, str(e))
        self.inbox.put(message)
        return empty_pb2.Empty()


class GrpcTransport(Transport):
    """Transport where each participant is reachable at a 'host:port' address."""

    def __init__(self, port: int = 0, bind_host: str = '[::]', advertise_host: str = 'localhost',
                 advertise: str = None, connect_timeout: float = 10, max_workers: int = 10):
        """
        Start the local inbox server.

        Args:
            port: Port to listen on; 0 picks a free port
            bind_host: Interface to bind
            advertise_host: Host name peers use to reach this participant
            advertise: Full 'host:port' identity, overriding advertise_host
            connect_timeout: Seconds to wait for a peer channel to become ready
            max_workers: Server threads accepting inbound deliveries
        """
        super().__init__()
        self.connect_timeout = connect_timeout
        self._inbox = queue.Queue()
        self._channels: Dict[Hashable, grpc.Channel] = {}
        self._stubs: Dict[Hashable, mailbox_pb2_grpc.MailboxStub] = {}
        self._lock = threading.Lock()

        self.server = grpc.server(futures.ThreadPoolExecutor(max_workers=max_workers))
        self.servicer = MailboxServicer(self._inbox)
        mailbox_pb2_grpc.add_MailboxServicer_to_server(self.servicer, self.server)
        self.port = self.server.add_insecure_port(f'{bind_host}:{port}')
        if self.port == 0:
            raise TransportError(f"Could not bind {bind_host}:{port}")
        self.server.start()

        self.address = advertise or f'{advertise_host}:{self.port}'
        logger.info(f"Mailbox server started on {bind_host}:{self.port} as {self.address}")

    def _stub(self, dest: str) -> mailbox_pb2_grpc.MailboxStub:
        with self._lock:
            stub = self._stubs.get(dest)
            if stub is None:
                channel = open_channel(dest, timeout=self.connect_timeout)
                stub = mailbox_pb2_grpc.MailboxStub(channel)
                self._channels[dest] = channel
                self._stubs[dest] = stub
            return stub

    def send(self, dest: str, tag: Tag, payload=None):
        envelope = to_envelope(Message(source=self.address, tag=Tag(tag), payload=payload))
        try:
            self._stub(dest).Deliver(envelope, wait_for_ready=True)
        except grpc.RpcError as e:
            raise TransportError(f"Failed to deliver {Tag(tag).name} to {dest}: {e}")

    def _next_message(self) -> Message:
        return self._inbox.get()

    def close(self):
        with self._lock:
            for channel in self._channels.values():
                channel.close()
            self._channels.clear()
            self._stubs.clear()
        self.server.stop(0)
        logger.info(f"Mailbox server {self.address} stopped")
