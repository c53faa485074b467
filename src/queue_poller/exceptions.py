"""
Module: exceptions.py
Description: Exception hierarchy and control-flow signals for queue operations.

Key Components:
- ConfigurationError: Invalid poll parameters, raised before any network call
- ArgumentError: Malformed request parameters detected client-side
- ServiceError / NonExistentQueueError: Errors returned by SQS
- StopPolling / SkipDelete: Signals raised from hooks and handlers

Dependencies: botocore
"""

from typing import Optional

from botocore.exceptions import ClientError

NON_EXISTENT_QUEUE_CODES = (
    "AWS.SimpleQueueService.NonExistentQueue",
    "QueueDoesNotExist",
)


class QueuePollerError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(QueuePollerError, ValueError):
    """Poll configuration is outside the accepted bounds."""


class ArgumentError(QueuePollerError, ValueError):
    """Request parameters are malformed and were rejected before dispatch."""


class ServiceError(QueuePollerError):
    """
    Error returned by the queue service.

    Attributes:
        code: Service error code (e.g. 'AWS.SimpleQueueService.NonExistentQueue')
        message: Service error message
        operation_name: Client operation that failed
    """

    def __init__(self, code: str, message: str, operation_name: Optional[str] = None):
        super().__init__(f"{operation_name or 'request'} failed: {code}: {message}")
        self.code = code
        self.message = message
        self.operation_name = operation_name

    @classmethod
    def from_client_error(cls, error: ClientError) -> "ServiceError":
        """
        Build the matching ServiceError subclass from a botocore ClientError.

        Args:
            error: ClientError raised by botocore

        Returns:
            NonExistentQueueError for missing queues, ServiceError otherwise
        """
        details = error.response.get("Error", {})
        code = details.get("Code", "Unknown")
        message = details.get("Message", "")

        if code in NON_EXISTENT_QUEUE_CODES:
            return NonExistentQueueError(code, message, error.operation_name)
        return ServiceError(code, message, error.operation_name)


class NonExistentQueueError(ServiceError):
    """The referenced queue does not exist."""


class StopPolling(Exception):
    """
    Raised from a before-request hook or a handler to end a poll session.

    The poller checks for it once per iteration, immediately before
    issuing the next receive request, and returns cleanly.
    """


class SkipDelete(Exception):
    """Raised from a handler to keep the current batch on the queue."""
