"""
Module: sqs.py
Description: SQS client for queue and message operations.

Wraps aioboto3 with client-side argument validation, response parsing
into pydantic models and mapping of botocore errors onto the package's
exception hierarchy.

Key Components:
- SQSClient: QueueClient implementation plus queue CRUD operations
- Validation: ArgumentError raised before any request is dispatched
- Error mapping: ClientError -> ServiceError / NonExistentQueueError

Dependencies: aioboto3, botocore, pydantic
"""

import re
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence, Union
from urllib.parse import urlparse

import aioboto3
from botocore.exceptions import ClientError, ParamValidationError
from pydantic import ValidationError

from queue_poller.config.settings import settings
from queue_poller.exceptions import ArgumentError, ServiceError
from queue_poller.models.message import DeleteBatchEntry, Message
from queue_poller.models.response import BatchDeleteResult, SendMessageResult
from queue_poller.sqs_queue.base import QueueClient
from queue_poller.utils.batch_helpers import validate_batch_size
from queue_poller.utils.logger import get_logger

logger = get_logger(__name__)

QUEUE_NAME_PATTERN = re.compile(r'^[A-Za-z0-9_-]{1,80}(\.fifo)?$')
MAX_DELAY_SECONDS = 900


def validate_queue_url(queue_url: Any) -> str:
    """
    Check that queue_url looks like an SQS queue URL.

    Args:
        queue_url: Value supplied as the queue reference

    Returns:
        The queue URL unchanged

    Raises:
        ArgumentError: If queue_url is empty, not a string or not an http(s) URL with a path
    """
    if not queue_url or not isinstance(queue_url, str):
        raise ArgumentError("queue_url must be a non-empty string")

    parsed = urlparse(queue_url)
    if parsed.scheme not in ('http', 'https') or not parsed.netloc or parsed.path in ('', '/'):
        raise ArgumentError(f"queue_url is not a valid queue URL: {queue_url!r}")

    return queue_url


def _require_string(value: Any, name: str) -> str:
    if not value or not isinstance(value, str):
        raise ArgumentError(f"{name} must be a non-empty string")
    return value


class SQSClient(QueueClient):
    """
    SQS client for queue and message operations.

    Every public method validates its arguments before contacting SQS and
    raises ArgumentError for malformed input. Errors returned by the
    service are logged and re-raised as ServiceError (NonExistentQueueError
    when the queue is missing) with the botocore error chained.

    Attributes:
        region_name: AWS region used for the SQS endpoint
        endpoint_url: Optional endpoint override (local emulators)
        session: aioboto3 session shared by all calls

    Example:
        >>> client = SQSClient()
        >>> queue_url = await client.create_queue("orders")
        >>> await client.send_message(queue_url, "hello")
        >>> messages = await client.receive_message(queue_url, max_number_of_messages=10)
    """

    def __init__(
        self,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        session: Optional[aioboto3.Session] = None
    ):
        """
        Initialize SQS client.

        Args:
            region_name: AWS region (defaults to settings.aws_region)
            endpoint_url: Endpoint override (defaults to settings.sqs_endpoint_url)
            session: Pre-built aioboto3 session
        """
        self.region_name = region_name or settings.aws_region
        self.endpoint_url = endpoint_url or settings.sqs_endpoint_url
        self.session = session or aioboto3.Session()

        logger.info(
            "SQS client initialized",
            region_name=self.region_name,
            endpoint_url=self.endpoint_url
        )

    @asynccontextmanager
    async def _sqs(self, operation: str, **context) -> AsyncIterator[Any]:
        """Open an SQS client and map botocore errors raised while it is in use."""
        try:
            async with self.session.client(
                'sqs',
                region_name=self.region_name,
                endpoint_url=self.endpoint_url
            ) as sqs:
                yield sqs

        except ClientError as e:
            logger.error(
                f"SQS {operation} failed",
                error_code=e.response['Error']['Code'],
                error_message=e.response['Error'].get('Message'),
                **context
            )
            raise ServiceError.from_client_error(e) from e

        except ParamValidationError as e:
            logger.error(
                f"SQS {operation} rejected parameters",
                error=str(e),
                **context
            )
            raise ArgumentError(str(e)) from e

    async def create_queue(
        self,
        queue_name: str,
        attributes: Optional[Dict[str, str]] = None
    ) -> str:
        """
        Create a queue, or return the URL of an existing one with identical attributes.

        Args:
            queue_name: Queue name (letters, digits, '-' and '_', optional '.fifo')
            attributes: Queue attributes such as VisibilityTimeout

        Returns:
            URL of the queue

        Raises:
            ArgumentError: If queue_name is missing or malformed
            ServiceError: If SQS rejects the request
        """
        _require_string(queue_name, "queue_name")
        if not QUEUE_NAME_PATTERN.match(queue_name):
            raise ArgumentError(f"queue_name is not a valid queue name: {queue_name!r}")

        params: Dict[str, Any] = {'QueueName': queue_name}
        if attributes:
            params['Attributes'] = attributes

        async with self._sqs('create_queue', queue_name=queue_name) as sqs:
            response = await sqs.create_queue(**params)

        queue_url = response['QueueUrl']
        logger.info("Queue created", queue_name=queue_name, queue_url=queue_url)
        return queue_url

    async def get_queue_url(self, queue_name: str) -> str:
        """
        Look up a queue URL by name.

        Raises:
            ArgumentError: If queue_name is missing
            NonExistentQueueError: If no queue has that name
        """
        _require_string(queue_name, "queue_name")

        async with self._sqs('get_queue_url', queue_name=queue_name) as sqs:
            response = await sqs.get_queue_url(QueueName=queue_name)

        return response['QueueUrl']

    async def get_queue_attributes(
        self,
        queue_url: str,
        attribute_names: Optional[List[str]] = None
    ) -> Dict[str, str]:
        """
        Fetch queue attributes.

        Args:
            queue_url: URL of the queue
            attribute_names: Attributes to return (defaults to ['All'])

        Returns:
            Mapping of attribute name to string value

        Raises:
            ArgumentError: If queue_url is invalid
            NonExistentQueueError: If the queue does not exist
        """
        validate_queue_url(queue_url)

        async with self._sqs('get_queue_attributes', queue_url=queue_url) as sqs:
            response = await sqs.get_queue_attributes(
                QueueUrl=queue_url,
                AttributeNames=list(attribute_names or ['All'])
            )

        return dict(response.get('Attributes', {}))

    async def purge_queue(self, queue_url: str) -> None:
        """
        Delete every message in a queue.

        Raises:
            ArgumentError: If queue_url is invalid
            NonExistentQueueError: If the queue does not exist
        """
        validate_queue_url(queue_url)

        async with self._sqs('purge_queue', queue_url=queue_url) as sqs:
            await sqs.purge_queue(QueueUrl=queue_url)

        logger.info("Queue purged", queue_url=queue_url)

    async def delete_queue(self, queue_url: str) -> None:
        """
        Delete a queue and all of its messages.

        Raises:
            ArgumentError: If queue_url is invalid
            NonExistentQueueError: If the queue does not exist
        """
        validate_queue_url(queue_url)

        async with self._sqs('delete_queue', queue_url=queue_url) as sqs:
            await sqs.delete_queue(QueueUrl=queue_url)

        logger.info("Queue deleted", queue_url=queue_url)

    async def send_message(
        self,
        queue_url: str,
        message_body: str,
        delay_seconds: int = 0,
        message_attributes: Optional[Dict[str, Dict[str, Any]]] = None,
        message_group_id: Optional[str] = None,
        message_deduplication_id: Optional[str] = None
    ) -> SendMessageResult:
        """
        Send a message to a queue.

        Args:
            queue_url: URL of the queue
            message_body: Message payload
            delay_seconds: Delay before the message becomes visible (0-900)
            message_attributes: Typed user attributes
            message_group_id: Message group (FIFO queues)
            message_deduplication_id: Deduplication token (FIFO queues)

        Returns:
            SendMessageResult with the assigned message id

        Raises:
            ArgumentError: If queue_url or message_body is invalid
            ServiceError: If SQS operation fails
        """
        validate_queue_url(queue_url)
        _require_string(message_body, "message_body")
        if not 0 <= delay_seconds <= MAX_DELAY_SECONDS:
            raise ArgumentError(f"delay_seconds must be between 0 and {MAX_DELAY_SECONDS}")

        params: Dict[str, Any] = {
            'QueueUrl': queue_url,
            'MessageBody': message_body,
            'DelaySeconds': delay_seconds
        }
        if message_attributes:
            params['MessageAttributes'] = message_attributes
        if message_group_id:
            params['MessageGroupId'] = message_group_id
        if message_deduplication_id:
            params['MessageDeduplicationId'] = message_deduplication_id

        async with self._sqs('send_message', queue_url=queue_url) as sqs:
            response = await sqs.send_message(**params)

        result = SendMessageResult(
            message_id=response['MessageId'],
            md5_of_body=response.get('MD5OfMessageBody'),
            sequence_number=response.get('SequenceNumber')
        )
        logger.info(
            "Message sent to SQS",
            message_id=result.message_id,
            queue_url=queue_url
        )
        return result

    async def receive_message(
        self,
        queue_url: str,
        max_number_of_messages: int = 1,
        wait_time_seconds: Optional[int] = None,
        visibility_timeout: Optional[int] = None,
        attribute_names: Optional[List[str]] = None,
        message_attribute_names: Optional[List[str]] = None
    ) -> List[Message]:
        """
        Receive up to max_number_of_messages messages.

        Args:
            queue_url: URL of the queue
            max_number_of_messages: Batch size (1-10)
            wait_time_seconds: Long-poll duration; None uses the queue default
            visibility_timeout: Visibility timeout; None uses the queue default
            attribute_names: System attributes to return
            message_attribute_names: User attributes to return

        Returns:
            Messages in the order SQS returned them (possibly empty)

        Raises:
            ArgumentError: If queue_url or batch size is invalid
            NonExistentQueueError: If the queue does not exist
        """
        validate_queue_url(queue_url)
        if not isinstance(max_number_of_messages, int) or not 1 <= max_number_of_messages <= 10:
            raise ArgumentError("max_number_of_messages must be between 1 and 10")

        params: Dict[str, Any] = {
            'QueueUrl': queue_url,
            'MaxNumberOfMessages': max_number_of_messages
        }
        if wait_time_seconds is not None:
            params['WaitTimeSeconds'] = wait_time_seconds
        if visibility_timeout is not None:
            params['VisibilityTimeout'] = visibility_timeout
        if attribute_names:
            params['AttributeNames'] = list(attribute_names)
        if message_attribute_names:
            params['MessageAttributeNames'] = list(message_attribute_names)

        async with self._sqs('receive_message', queue_url=queue_url) as sqs:
            response = await sqs.receive_message(**params)

        messages = [Message.from_sqs(raw) for raw in response.get('Messages', [])]
        logger.debug(
            "Messages received from SQS",
            queue_url=queue_url,
            message_count=len(messages)
        )
        return messages

    async def delete_message(self, queue_url: str, receipt_handle: str) -> None:
        """
        Delete a message by receipt handle.

        Raises:
            ArgumentError: If queue_url or receipt_handle is invalid
            NonExistentQueueError: If the queue does not exist
        """
        validate_queue_url(queue_url)
        _require_string(receipt_handle, "receipt_handle")

        async with self._sqs('delete_message', queue_url=queue_url) as sqs:
            await sqs.delete_message(QueueUrl=queue_url, ReceiptHandle=receipt_handle)

        logger.debug("Message deleted from SQS", queue_url=queue_url)

    async def delete_message_batch(
        self,
        queue_url: str,
        entries: Sequence[Union[DeleteBatchEntry, Dict[str, Any]]]
    ) -> BatchDeleteResult:
        """
        Delete up to ten messages in a single request.

        Args:
            queue_url: URL of the queue
            entries: DeleteBatchEntry models or {'id', 'receipt_handle'} dictionaries

        Returns:
            BatchDeleteResult listing successful and failed entry ids

        Raises:
            ArgumentError: If entries is empty, not a list, has more than ten
                entries, repeats an id, or any entry lacks an id or receipt handle
            NonExistentQueueError: If the queue does not exist
        """
        validate_queue_url(queue_url)
        if not isinstance(entries, (list, tuple)):
            raise ArgumentError("entries must be a list of {id, receipt_handle} entries")

        try:
            validate_batch_size(list(entries))
            parsed = [
                entry if isinstance(entry, DeleteBatchEntry) else DeleteBatchEntry(**entry)
                for entry in entries
            ]
        except (ValidationError, TypeError, ValueError) as e:
            raise ArgumentError(f"Invalid delete batch entries: {e}") from e

        ids = [entry.id for entry in parsed]
        if len(set(ids)) != len(ids):
            raise ArgumentError("delete batch entry ids must be distinct")

        async with self._sqs('delete_message_batch', queue_url=queue_url) as sqs:
            response = await sqs.delete_message_batch(
                QueueUrl=queue_url,
                Entries=[entry.to_sqs() for entry in parsed]
            )

        result = BatchDeleteResult.from_sqs(response)
        if not result.is_successful:
            logger.warning(
                "Some messages could not be deleted",
                queue_url=queue_url,
                failed_ids=[failure.id for failure in result.failed],
                error_codes=[failure.code for failure in result.failed]
            )
        return result

    async def change_message_visibility(
        self,
        queue_url: str,
        receipt_handle: str,
        visibility_timeout: int
    ) -> None:
        """
        Change the visibility timeout of a received message.

        Raises:
            ArgumentError: If any argument is invalid
            ServiceError: If SQS rejects the change (e.g. expired receipt handle)
        """
        validate_queue_url(queue_url)
        _require_string(receipt_handle, "receipt_handle")
        if not isinstance(visibility_timeout, int) or not 0 <= visibility_timeout <= 43200:
            raise ArgumentError("visibility_timeout must be between 0 and 43200 seconds")

        async with self._sqs('change_message_visibility', queue_url=queue_url) as sqs:
            await sqs.change_message_visibility(
                QueueUrl=queue_url,
                ReceiptHandle=receipt_handle,
                VisibilityTimeout=visibility_timeout
            )
