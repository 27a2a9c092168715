"""
Command-line entry point for counting word frequencies across workers.
"""

import sys
import logging
import argparse

from wcdist.cluster import LOG_FORMAT, run_local
from wcdist.common.errors import ConfigurationError, WcdistError
from wcdist.common.grpc_transport import GrpcTransport
from wcdist.config import Settings
from wcdist.coordinator.metrics import MetricsCollector
from wcdist.coordinator.reporter import write_csv
from wcdist.coordinator.server import Coordinator
from wcdist.coordinator.task_list import load_task_list
from wcdist.worker.server import run_worker

logger = logging.getLogger(__name__)


def _finish(histogram, metrics, args):
    """Write the report and print the run summary."""
    write_csv(histogram, args.output)
    print(f"Output written to {args.output}")
    print()
    print(metrics.format_summary())
    if args.metrics:
        metrics.save_to_file(args.metrics)
        print(f"Metrics saved to {args.metrics}")


def run_command(args):
    """Run coordinator and workers on this machine."""
    task_list = load_task_list(args.filelist, args.max_files)
    mode = 'thread' if args.threads else 'process'
    print(f"Word count with {args.workers} workers ({mode} mode)")

    result = run_local(task_list, args.workers, mode=mode, chunk_size=args.chunk_size)
    _finish(result.histogram, result.metrics, args)
    return 0


def coordinator_command(args):
    """Coordinate remote gRPC workers."""
    task_list = load_task_list(args.filelist, args.max_files)
    workers = args.worker or []
    duplicates = sorted({w for w in workers if workers.count(w) > 1})
    if duplicates:
        raise ConfigurationError(f"Worker listed more than once: {', '.join(duplicates)}")
    collector = MetricsCollector(processes=len(workers) + 1, files=len(task_list))

    transport = GrpcTransport(port=args.port, advertise=args.advertise,
                              connect_timeout=args.connect_timeout)
    try:
        coordinator = Coordinator(transport, workers, task_list, args.chunk_size)
        histogram = coordinator.run()
    finally:
        transport.close()

    metrics = collector.finish(histogram, tasks_per_worker=coordinator.tasks_per_worker,
                               files_unavailable=len(coordinator.unavailable))
    _finish(histogram, metrics, args)
    return 0


def worker_command(args):
    """Serve a remote gRPC coordinator."""
    transport = GrpcTransport(port=args.port, advertise=args.advertise,
                              connect_timeout=args.connect_timeout)
    try:
        report = run_worker(transport, args.coordinator, args.chunk_size)
    finally:
        transport.close()

    print(f"Worker {report.address} completed {report.tasks_completed} tasks, "
          f"sent {report.unique_words_sent} unique words")
    return 0


def mpi_command(args):
    """Run one rank of an mpiexec launch."""
    from wcdist.common.mpi_transport import MpiTransport
    from wcdist.common.protocol import Role

    transport = MpiTransport()
    role = transport.role(args.coordinator_rank)

    if role is Role.WORKER:
        run_worker(transport, args.coordinator_rank, args.chunk_size)
        return 0

    print(f"Number of processes: {transport.size}")
    task_list = load_task_list(args.filelist, args.max_files)
    collector = MetricsCollector(processes=transport.size, files=len(task_list))
    workers = transport.peers()
    coordinator = Coordinator(transport if workers else None, workers, task_list, args.chunk_size)
    histogram = coordinator.run()
    metrics = collector.finish(histogram, tasks_per_worker=coordinator.tasks_per_worker,
                               files_unavailable=len(coordinator.unavailable))
    _finish(histogram, metrics, args)
    return 0


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Distributed word frequency counter")
    parser.add_argument("--log-level", default=settings.log_level,
                        help="Logging level (default: %(default)s)")
    parser.add_argument("--chunk-size", type=int, default=settings.chunk_size,
                        help="Bytes read per tokenizer call (default: %(default)s)")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    def add_job_arguments(sub):
        sub.add_argument("--filelist", default=settings.filelist,
                         help="File listing one input path per line (default: %(default)s)")
        sub.add_argument("--output", default=settings.output,
                         help="CSV file to write (default: %(default)s)")
        sub.add_argument("--max-files", type=int, default=settings.max_files,
                         help="Maximum number of files read from the list (default: %(default)s)")
        sub.add_argument("--metrics", default=settings.metrics_path,
                         help="Optional JSON file for run metrics")

    # Local run
    run_parser = subparsers.add_parser("run", help="Run coordinator and workers locally")
    add_job_arguments(run_parser)
    run_parser.add_argument("--workers", "-n", type=int, default=settings.workers,
                            help="Number of worker processes (default: %(default)s)")
    run_parser.add_argument("--threads", action="store_true",
                            help="Run workers as threads instead of processes")
    run_parser.set_defaults(func=run_command)

    # gRPC coordinator
    coord_parser = subparsers.add_parser("coordinator", help="Coordinate gRPC workers")
    add_job_arguments(coord_parser)
    coord_parser.add_argument("--port", type=int, default=settings.coordinator_port,
                              help="Coordinator port (default: %(default)s)")
    coord_parser.add_argument("--advertise", default=None,
                              help="host:port workers use to reach this coordinator")
    coord_parser.add_argument("--worker", action="append", metavar="HOST:PORT",
                              help="Worker address; repeat once per worker")
    coord_parser.add_argument("--connect-timeout", type=float, default=settings.connect_timeout,
                              help="Seconds to wait for a peer (default: %(default)s)")
    coord_parser.set_defaults(func=coordinator_command)

    # gRPC worker
    worker_parser = subparsers.add_parser("worker", help="Serve a gRPC coordinator")
    worker_parser.add_argument("--port", type=int, default=settings.worker_port,
                               help="Worker port (default: %(default)s)")
    worker_parser.add_argument("--advertise", default=None,
                               help="host:port the coordinator uses to reach this worker")
    worker_parser.add_argument("--coordinator", default=None,
                               help="Coordinator address; default binds to the first sender")
    worker_parser.add_argument("--connect-timeout", type=float, default=settings.connect_timeout,
                               help="Seconds to wait for a peer (default: %(default)s)")
    worker_parser.set_defaults(func=worker_command)

    # MPI
    mpi_parser = subparsers.add_parser("mpi", help="Run under mpiexec")
    add_job_arguments(mpi_parser)
    mpi_parser.add_argument("--coordinator-rank", type=int, default=0,
                            help="Rank that coordinates (default: %(default)s)")
    mpi_parser.set_defaults(func=mpi_command)

    return parser


def main(argv=None):
    settings = Settings.from_env()
    parser = build_parser(settings)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format=LOG_FORMAT
    )

    if not args.command:
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except WcdistError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
