"""
Package: sqs_queue
Description: SQS queue client operations.

Provides the abstract QueueClient consumed by the poller and the
aioboto3-backed SQSClient with queue and message operations.
"""

from queue_poller.sqs_queue.base import QueueClient
from queue_poller.sqs_queue.sqs import SQSClient, validate_queue_url

__all__ = ["QueueClient", "SQSClient", "validate_queue_url"]
