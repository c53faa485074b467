"""
Module: message.py
Description: Message data models for SQS receive and delete operations.

Defines the immutable Message model handed to poll handlers and the
DeleteBatchEntry model used to build delete_message_batch requests.

Key Components:
- Message: A received SQS message (body, receipt handle, attributes)
- DeleteBatchEntry: One {id, receipt_handle} entry of a batch delete
- Validation: Pydantic v2 with field constraints

Dependencies: pydantic, typing
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel, Field, ConfigDict


class Message(BaseModel):
    """
    A message received from an SQS queue.

    Messages are immutable once received. The receipt handle is a
    single-use token tied to this receive; it authorizes deletion and
    visibility changes and must not be reused across poll iterations.

    Attributes:
        message_id: Service-assigned message identifier
        receipt_handle: Token authorizing deletion of this delivery
        body: Message payload
        attributes: System attributes (SentTimestamp, ApproximateReceiveCount, ...)
        message_attributes: User-defined typed attributes
        md5_of_body: MD5 digest of the body as computed by SQS
    """

    model_config = ConfigDict(frozen=True)

    message_id: str = Field(default="", description="Message identifier")
    receipt_handle: str = Field(default="", description="Receipt handle for this delivery")
    body: str = Field(default="", description="Message payload")
    attributes: Dict[str, str] = Field(
        default_factory=dict,
        description="System attributes requested with AttributeNames"
    )
    message_attributes: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict,
        description="User attributes requested with MessageAttributeNames"
    )
    md5_of_body: Optional[str] = Field(default=None, description="MD5 of the message body")

    @classmethod
    def from_sqs(cls, raw: Dict[str, Any]) -> "Message":
        """
        Build a Message from one entry of a ReceiveMessage response.

        Args:
            raw: Message dictionary as returned by botocore

        Returns:
            Parsed Message instance
        """
        return cls(
            message_id=raw.get('MessageId', ''),
            receipt_handle=raw.get('ReceiptHandle', ''),
            body=raw.get('Body', ''),
            attributes=raw.get('Attributes', {}),
            message_attributes=raw.get('MessageAttributes', {}),
            md5_of_body=raw.get('MD5OfBody'),
        )


class DeleteBatchEntry(BaseModel):
    """One entry of a delete_message_batch request."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(
        ...,
        min_length=1,
        max_length=80,
        pattern=r"^[A-Za-z0-9_-]+$",
        description="Batch-unique entry identifier"
    )
    receipt_handle: str = Field(..., min_length=1, description="Receipt handle to delete")

    def to_sqs(self) -> Dict[str, str]:
        """Serialize to the botocore request shape."""
        return {'Id': self.id, 'ReceiptHandle': self.receipt_handle}
