"""
MPI transport, for runs launched with mpiexec.

Participants are addressed by their rank in the communicator and message
labels travel as MPI tags. Requires the optional mpi4py dependency.
"""

import logging
from typing import Hashable, Iterable, List

from mpi4py import MPI

from wcdist.common.protocol import Message, Role, Tag
from wcdist.common.transport import Transport

logger = logging.getLogger(__name__)


class MpiTransport(Transport):
    """Transport over an MPI communicator (COMM_WORLD by default)."""

    def __init__(self, comm=None):
        super().__init__()
        self.comm = comm if comm is not None else MPI.COMM_WORLD
        self.address = self.comm.Get_rank()
        self.size = self.comm.Get_size()

    def role(self, coordinator_rank: int = 0) -> Role:
        """Role of this process given which rank was chosen to coordinate."""
        if not 0 <= coordinator_rank < self.size:
            raise ValueError(f"Coordinator rank {coordinator_rank} outside communicator of size {self.size}")
        return Role.COORDINATOR if self.address == coordinator_rank else Role.WORKER

    def peers(self) -> List[int]:
        return [rank for rank in range(self.size) if rank != self.address]

    def send(self, dest: int, tag: Tag, payload=None):
        self.comm.send(payload, dest=dest, tag=int(tag))

    def _next_message(self) -> Message:
        # Take whatever arrives first; Transport.recv holds back what the
        # caller did not ask for, which keeps ABORT from being starved.
        status = MPI.Status()
        payload = self.comm.recv(source=MPI.ANY_SOURCE, tag=MPI.ANY_TAG, status=status)
        return Message(source=status.Get_source(), tag=Tag(status.Get_tag()), payload=payload)

    def abort(self, peers: Iterable[Hashable] = (), code: int = 1):
        logger.critical(f"Rank {self.address}: aborting the MPI job")
        self.comm.Abort(code)
