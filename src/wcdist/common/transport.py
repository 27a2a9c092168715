"""
Blocking point-to-point messaging between coordinator and workers.

A transport delivers labelled messages to one participant's inbox. Receives
block until a message matching the requested source and label arrives;
messages that do not match are held back, in arrival order, for a later
receive. Messages from one sender are received in the order they were sent.
"""

import logging
from collections import deque
from typing import Deque, Hashable, Iterable, Mapping, Optional

from wcdist.common.errors import ProtocolViolation, RunAborted
from wcdist.common.protocol import ANY_SOURCE, ANY_TAG, Message, Tag, matches

logger = logging.getLogger(__name__)


class Transport:
    """Base class for message transports."""

    address: Hashable = None

    def __init__(self):
        self._pending: Deque[Message] = deque()

    def send(self, dest: Hashable, tag: Tag, payload=None):
        """Deliver one message to dest."""
        raise NotImplementedError

    def _next_message(self) -> Message:
        """Block until the next inbound message arrives and return it."""
        raise NotImplementedError

    def recv(self, source: Optional[Hashable] = ANY_SOURCE,
             tag: Optional[Tag] = ANY_TAG) -> Message:
        """
        Receive the oldest message matching source and tag.

        Blocks without timeout.

        Raises:
            RunAborted: If a peer aborted the run
        """
        for message in self._pending:
            if matches(message, source, tag):
                self._pending.remove(message)
                return message

        while True:
            message = self._next_message()
            if message.tag == Tag.ABORT:
                raise RunAborted(message.source)
            if matches(message, source, tag):
                return message
            logger.debug(f"{self.address!r}: holding {message.tag.name} from {message.source!r}")
            self._pending.append(message)

    def abort(self, peers: Iterable[Hashable]):
        """Tell every peer that the run is lost."""
        for peer in peers:
            try:
                self.send(peer, Tag.ABORT)
            except Exception as e:
                logger.error(f"{self.address!r}: could not deliver ABORT to {peer!r}: {e}")

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


class QueueTransport(Transport):
    """
    Transport over one inbox queue per participant.

    Works with queue.Queue for participants running as threads and with
    multiprocessing queues for participants running as processes.
    """

    def __init__(self, address: Hashable, inboxes: Mapping):
        super().__init__()
        if address not in inboxes:
            raise ValueError(f"No inbox for address {address!r}")
        self.address = address
        self.inboxes = inboxes

    def send(self, dest: Hashable, tag: Tag, payload=None):
        try:
            inbox = self.inboxes[dest]
        except KeyError:
            raise ProtocolViolation(f"Unknown destination {dest!r}", source=self.address, tag=tag)
        inbox.put(Message(source=self.address, tag=Tag(tag), payload=payload))

    def _next_message(self) -> Message:
        return self.inboxes[self.address].get()
