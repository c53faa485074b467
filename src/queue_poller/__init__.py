"""
Package: queue_poller
Description: Async SQS client and queue poller.

Provides an aioboto3-backed SQS client with client-side validation and
a QueuePoller that runs a receive-process-delete loop with batching,
visibility timeout handling and cooperative stop signals.
"""

from queue_poller.exceptions import (
    ArgumentError,
    ConfigurationError,
    NonExistentQueueError,
    QueuePollerError,
    ServiceError,
    SkipDelete,
    StopPolling,
)
from queue_poller.models import (
    BatchDeleteResult,
    DeleteBatchEntry,
    Message,
    PollConfiguration,
    PollStatsSnapshot,
    SendMessageResult,
)
from queue_poller.poller import QueuePoller
from queue_poller.sqs_queue import QueueClient, SQSClient

__version__ = "0.1.0"

__all__ = [
    "ArgumentError",
    "BatchDeleteResult",
    "ConfigurationError",
    "DeleteBatchEntry",
    "Message",
    "NonExistentQueueError",
    "PollConfiguration",
    "PollStatsSnapshot",
    "QueueClient",
    "QueuePoller",
    "QueuePollerError",
    "SQSClient",
    "SendMessageResult",
    "ServiceError",
    "SkipDelete",
    "StopPolling",
]
