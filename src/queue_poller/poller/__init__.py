"""
Package: poller
Description: Long-polling consumer loop for SQS queues.
"""

from queue_poller.poller.poller import QueuePoller

__all__ = ["QueuePoller"]
