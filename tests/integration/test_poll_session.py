"""
Module: test_poll_session.py
Description: End-to-end poll sessions over SQSClient.

Runs QueuePoller with a real SQSClient whose aioboto3 session is mocked,
checking the botocore requests issued across a whole session.
"""

import pytest

from queue_poller.exceptions import NonExistentQueueError, StopPolling
from queue_poller.poller.poller import QueuePoller


SQS_MESSAGES = [
    {'MessageId': 'something', 'ReceiptHandle': 'something', 'Body': 'something'},
    {'MessageId': 'anything', 'ReceiptHandle': 'anything', 'Body': 'anything'},
]


class TestPollSession:

    @pytest.mark.asyncio
    async def test_poll_with_skip_delete(self, sqs_client, mock_sqs, queue_url):
        """Stubbed messages are delivered in order and never deleted."""
        mock_sqs.receive_message.return_value = {'Messages': SQS_MESSAGES}
        poller = QueuePoller(
            queue_url,
            {"max_number_of_messages": 10, "skip_delete": True, "wait_time_seconds": None, "visibility_timeout": 60},
            client=sqs_client
        )

        @poller.before_request
        def stop_after_two(stats):
            if stats.received_message_count >= 2:
                raise StopPolling()

        received = []
        stats = await poller.poll(lambda messages, stats: received.extend(messages))

        assert [m.body for m in received] == ["something", "anything"]
        assert stats.received_message_count == 2
        mock_sqs.receive_message.assert_awaited_once_with(
            QueueUrl=queue_url,
            MaxNumberOfMessages=10,
            VisibilityTimeout=60
        )
        mock_sqs.delete_message_batch.assert_not_called()

    @pytest.mark.asyncio
    async def test_poll_deletes_and_stops_when_idle(self, sqs_client, mock_sqs, queue_url):
        mock_sqs.receive_message.side_effect = [
            {'Messages': SQS_MESSAGES},
            {'Messages': []},
        ]
        mock_sqs.delete_message_batch.return_value = {'Successful': [{'Id': '0'}, {'Id': '1'}]}
        poller = QueuePoller(
            queue_url,
            {"wait_time_seconds": 20, "idle_timeout": 1},
            client=sqs_client
        )

        stats = await poller.poll(lambda messages, stats: None)

        assert stats.request_count == 2
        assert stats.delete_failure_count == 0
        mock_sqs.delete_message_batch.assert_awaited_once_with(
            QueueUrl=queue_url,
            Entries=[
                {'Id': '0', 'ReceiptHandle': 'something'},
                {'Id': '1', 'ReceiptHandle': 'anything'},
            ]
        )

    @pytest.mark.asyncio
    async def test_poll_missing_queue_fails_fast(self, sqs_client, mock_sqs, queue_url, client_error):
        mock_sqs.receive_message.side_effect = client_error(
            "AWS.SimpleQueueService.NonExistentQueue", "ReceiveMessage"
        )
        poller = QueuePoller(queue_url, {}, client=sqs_client)
        handled = []

        with pytest.raises(NonExistentQueueError):
            await poller.poll(lambda messages, stats: handled.append(messages))

        assert handled == []

    @pytest.mark.asyncio
    async def test_poll_empty_queue_bounded_by_idle_timeout(self, sqs_client, mock_sqs, queue_url):
        mock_sqs.receive_message.return_value = {'Messages': []}
        poller = QueuePoller(queue_url, {"idle_timeout": 1}, client=sqs_client)
        handled = []

        stats = await poller.poll(lambda messages, stats: handled.append(messages))

        assert handled == []
        assert stats.request_count == 1
