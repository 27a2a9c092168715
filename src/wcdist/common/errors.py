"""
Exception types shared by the coordinator, workers and transports.
"""


class WcdistError(Exception):
    """Base class for all wcdist errors."""


class ProtocolViolation(WcdistError):
    """A message arrived with an unexpected label, source or payload."""

    def __init__(self, message, source=None, tag=None):
        super().__init__(message)
        self.source = source
        self.tag = tag


class ResourceExhaustion(WcdistError):
    """A participant ran out of memory; the whole run is lost."""


class RunAborted(ResourceExhaustion):
    """Another participant aborted the run."""

    def __init__(self, source):
        super().__init__(f"Run aborted by participant {source!r}")
        self.source = source


class TaskListError(WcdistError):
    """The file list could not be loaded."""


class TransportError(WcdistError):
    """A peer could not be reached."""


class ConfigurationError(WcdistError, ValueError):
    """Run parameters are inconsistent, e.g. duplicate worker addresses."""
