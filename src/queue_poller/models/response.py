"""
Module: response.py
Description: Result models for SQS client operations.

Key Components:
- SendMessageResult: Identifier and digest of a sent message
- BatchResultError: One failed entry of a batch request
- BatchDeleteResult: Per-entry outcome of delete_message_batch

Dependencies: pydantic, typing
"""

from typing import Dict, Any, Optional, List
from pydantic import BaseModel, Field, ConfigDict


class SendMessageResult(BaseModel):
    """Result of a send_message call."""

    model_config = ConfigDict(frozen=True)

    message_id: str = Field(..., description="Service-assigned message identifier")
    md5_of_body: Optional[str] = Field(default=None, description="MD5 of the sent body")
    sequence_number: Optional[str] = Field(
        default=None,
        description="Sequence number (FIFO queues only)"
    )


class BatchResultError(BaseModel):
    """A single entry that failed within a batch request."""

    model_config = ConfigDict(frozen=True)

    id: str
    code: str
    message: Optional[str] = None
    sender_fault: bool = False


class BatchDeleteResult(BaseModel):
    """
    Outcome of a delete_message_batch call.

    SQS reports success per entry: a call can succeed as a whole while
    some entries fail (e.g. an expired receipt handle).

    Attributes:
        successful: Ids of entries that were deleted
        failed: Entries that could not be deleted
    """

    model_config = ConfigDict(frozen=True)

    successful: List[str] = Field(default_factory=list)
    failed: List[BatchResultError] = Field(default_factory=list)

    @property
    def is_successful(self) -> bool:
        """True when every entry was deleted."""
        return not self.failed

    @classmethod
    def from_sqs(cls, response: Dict[str, Any]) -> "BatchDeleteResult":
        """
        Build a result from a DeleteMessageBatch response.

        Args:
            response: Response dictionary as returned by botocore

        Returns:
            Parsed BatchDeleteResult
        """
        return cls(
            successful=[entry['Id'] for entry in response.get('Successful', [])],
            failed=[
                BatchResultError(
                    id=entry['Id'],
                    code=entry.get('Code', 'Unknown'),
                    message=entry.get('Message'),
                    sender_fault=entry.get('SenderFault', False),
                )
                for entry in response.get('Failed', [])
            ],
        )
