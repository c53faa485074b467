"""
Module: models
Description: Data models for messages, poll configuration and client results.
"""

from queue_poller.models.message import Message, DeleteBatchEntry
from queue_poller.models.poll import PollConfiguration, PollStats, PollStatsSnapshot
from queue_poller.models.response import BatchDeleteResult, BatchResultError, SendMessageResult

__all__ = [
    "Message",
    "DeleteBatchEntry",
    "PollConfiguration",
    "PollStats",
    "PollStatsSnapshot",
    "BatchDeleteResult",
    "BatchResultError",
    "SendMessageResult",
]
