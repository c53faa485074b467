"""
Module: conftest.py
Description: Shared pytest fixtures for queue poller tests.

Provides a mocked aioboto3 session for SQSClient tests, an in-memory
QueueClient for poller tests, and sample messages and settings.
"""

from typing import Any, Dict, List, Optional, Sequence, Union
from unittest.mock import AsyncMock, MagicMock

import pytest
from botocore.exceptions import ClientError
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from queue_poller.models.message import DeleteBatchEntry, Message
from queue_poller.models.response import BatchDeleteResult
from queue_poller.sqs_queue.base import QueueClient
from queue_poller.sqs_queue.sqs import SQSClient


class TestSettings(BaseSettings):
    """Test settings that don't require environment variables."""

    model_config = SettingsConfigDict(
        env_file=None,  # Disable .env file loading for tests
        case_sensitive=False,
        extra="ignore"
    )

    app_name: str = Field(default="SQS Queue Poller Test")
    log_level: str = Field(default="DEBUG")
    aws_region: str = Field(default="us-east-1")
    sqs_endpoint_url: Optional[str] = Field(default=None)

    poll_max_number_of_messages: int = Field(default=5)
    poll_wait_time_seconds: Optional[int] = Field(default=0)
    poll_visibility_timeout: Optional[int] = Field(default=30)
    poll_skip_delete: bool = Field(default=False)
    poll_idle_timeout: Optional[int] = Field(default=2)


class FakeQueueClient(QueueClient):
    """
    In-memory QueueClient returning scripted receive results.

    Each receive pops the next entry of `receives`; an entry is either a
    list of messages or an exception to raise. The last entry repeats
    once the script is exhausted.
    """

    def __init__(
        self,
        receives: List[Union[List[Message], Exception]],
        delete_results: Optional[List[Union[BatchDeleteResult, Exception]]] = None
    ):
        self.receives = list(receives)
        self.delete_results = list(delete_results or [])
        self.receive_calls: List[Dict[str, Any]] = []
        self.delete_batch_calls: List[List[Dict[str, Any]]] = []
        self.delete_calls: List[str] = []
        self.visibility_calls: List[Dict[str, Any]] = []

    async def receive_message(
        self,
        queue_url: str,
        max_number_of_messages: int = 1,
        wait_time_seconds: Optional[int] = None,
        visibility_timeout: Optional[int] = None,
        attribute_names: Optional[List[str]] = None,
        message_attribute_names: Optional[List[str]] = None,
    ) -> List[Message]:
        self.receive_calls.append({
            'queue_url': queue_url,
            'max_number_of_messages': max_number_of_messages,
            'wait_time_seconds': wait_time_seconds,
            'visibility_timeout': visibility_timeout,
            'attribute_names': attribute_names,
            'message_attribute_names': message_attribute_names,
        })
        result = self.receives.pop(0) if len(self.receives) > 1 else self.receives[0]
        if isinstance(result, Exception):
            raise result
        return list(result)

    async def delete_message(self, queue_url: str, receipt_handle: str) -> None:
        self.delete_calls.append(receipt_handle)

    async def delete_message_batch(
        self,
        queue_url: str,
        entries: Sequence[Union[DeleteBatchEntry, Dict[str, Any]]],
    ) -> BatchDeleteResult:
        self.delete_batch_calls.append([dict(entry) for entry in entries])
        if self.delete_results:
            result = self.delete_results.pop(0)
            if isinstance(result, Exception):
                raise result
            return result
        return BatchDeleteResult(successful=[entry['id'] for entry in entries])

    async def change_message_visibility(
        self,
        queue_url: str,
        receipt_handle: str,
        visibility_timeout: int,
    ) -> None:
        self.visibility_calls.append({
            'receipt_handle': receipt_handle,
            'visibility_timeout': visibility_timeout,
        })


def make_client_error(code: str, operation_name: str, message: str = "Test error") -> ClientError:
    """Build a botocore ClientError as SQS would return it."""
    return ClientError(
        error_response={'Error': {'Code': code, 'Message': message}},
        operation_name=operation_name
    )


@pytest.fixture
def test_settings():
    """Provide test configuration settings without reading the environment."""
    return TestSettings()


@pytest.fixture
def queue_url():
    return "https://sqs.us-west-2.amazonaws.com/123456789012/orders-queue"


@pytest.fixture
def sample_messages():
    """Two messages in the order the service returned them."""
    return [
        Message(message_id="something", receipt_handle="something", body="something"),
        Message(message_id="anything", receipt_handle="anything", body="anything"),
    ]


@pytest.fixture
def mock_sqs():
    """
    Provide the mocked botocore SQS client.

    Every operation is an AsyncMock; configure return_value or side_effect
    per test.
    """
    return AsyncMock()


@pytest.fixture
def mock_session(mock_sqs):
    """aioboto3 session whose client() context manager yields mock_sqs."""
    session = MagicMock()
    session.client.return_value.__aenter__.return_value = mock_sqs
    session.client.return_value.__aexit__.return_value = False
    return session


@pytest.fixture
def sqs_client(mock_session):
    """Provide an SQSClient wired to the mocked session."""
    return SQSClient(region_name="us-west-2", session=mock_session)


@pytest.fixture
def fake_client_factory():
    """Return the FakeQueueClient class for building scripted clients."""
    return FakeQueueClient


@pytest.fixture
def client_error():
    """Return the ClientError builder."""
    return make_client_error
