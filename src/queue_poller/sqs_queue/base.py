"""
Module: base.py
Description: Abstract queue client consumed by the QueuePoller.

The poller depends only on this interface, so tests and alternative
backends can substitute their own implementation.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Union

from queue_poller.models.message import DeleteBatchEntry, Message
from queue_poller.models.response import BatchDeleteResult


class QueueClient(ABC):
    """Receive/delete operations the poll loop needs from a queue backend."""

    @abstractmethod
    async def receive_message(
        self,
        queue_url: str,
        max_number_of_messages: int = 1,
        wait_time_seconds: Optional[int] = None,
        visibility_timeout: Optional[int] = None,
        attribute_names: Optional[List[str]] = None,
        message_attribute_names: Optional[List[str]] = None,
    ) -> List[Message]:
        """Return up to max_number_of_messages messages, in service order."""

    @abstractmethod
    async def delete_message(self, queue_url: str, receipt_handle: str) -> None:
        """Delete a single message by receipt handle."""

    @abstractmethod
    async def delete_message_batch(
        self,
        queue_url: str,
        entries: Sequence[Union[DeleteBatchEntry, Dict[str, Any]]],
    ) -> BatchDeleteResult:
        """Delete up to ten messages in one call, reporting per-entry outcome."""

    @abstractmethod
    async def change_message_visibility(
        self,
        queue_url: str,
        receipt_handle: str,
        visibility_timeout: int,
    ) -> None:
        """Change how long a received message stays hidden from other consumers."""
