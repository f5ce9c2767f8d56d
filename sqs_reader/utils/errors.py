"""Error taxonomy for the reader.

Every error is fatal to the run: they propagate to ``main()`` which reports
them and exits non-zero.
"""
from typing import Optional


class SQSReaderError(Exception):
    """Base class for all reader errors."""


class ConfigurationError(SQSReaderError):
    """The run was configured in a way that cannot work (e.g. no output sink)."""


class ResolutionError(SQSReaderError):
    """A queue name could not be resolved to a queue URL."""

    def __init__(self, queue_name: str, reason: str = ""):
        self.queue_name = queue_name
        message = f"fetching queue url for {queue_name}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class SizeUnavailable(SQSReaderError):
    """ApproximateNumberOfMessages could not be read as an integer."""

    def __init__(self, queue_url: Optional[str] = None, reason: str = ""):
        self.queue_url = queue_url
        message = "could not get approximate queue size"
        if queue_url:
            message = f"{message} for {queue_url}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class QueueClientError(SQSReaderError):
    """A receive, delete or send call failed at the service or transport level."""

    def __init__(self, operation: str, queue_url: str, reason: str = ""):
        self.operation = operation
        self.queue_url = queue_url
        message = f"{operation} failed for {queue_url}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MissingField(SQSReaderError):
    """A service response lacked a field the reader relies on."""

    def __init__(
        self,
        field: str,
        context: str,
        message_id: Optional[str] = None,
        queue: Optional[str] = None
    ):
        self.field = field
        self.context = context
        self.message_id = message_id
        self.queue = queue
        detail = f"{context} response is missing {field}"
        if queue:
            detail = f"{context} response from {queue} is missing {field}"
        if message_id:
            detail = f"{detail} (message {message_id})"
        super().__init__(detail)
