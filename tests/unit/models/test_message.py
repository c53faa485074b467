"""
Module: test_message.py
Description: Unit tests for Message and DeleteBatchEntry models.
"""

import pytest
from pydantic import ValidationError

from queue_poller.models.message import DeleteBatchEntry, Message
from queue_poller.models.response import BatchDeleteResult


class TestMessage:

    def test_from_sqs(self):
        message = Message.from_sqs({
            'MessageId': 'something',
            'ReceiptHandle': 'handle-1',
            'Body': '{"order_id": "12345"}',
            'MD5OfBody': 'abc',
            'Attributes': {'ApproximateReceiveCount': '1'},
            'MessageAttributes': {'EventId': {'StringValue': 'evt_1', 'DataType': 'String'}}
        })

        assert message.message_id == 'something'
        assert message.receipt_handle == 'handle-1'
        assert message.body == '{"order_id": "12345"}'
        assert message.md5_of_body == 'abc'
        assert message.attributes['ApproximateReceiveCount'] == '1'
        assert message.message_attributes['EventId']['StringValue'] == 'evt_1'

    def test_from_sqs_minimal(self):
        message = Message.from_sqs({'Body': 'something'})

        assert message.body == 'something'
        assert message.message_id == ''
        assert message.attributes == {}

    def test_message_is_immutable(self):
        message = Message(message_id="m1", receipt_handle="r1", body="x")

        with pytest.raises(ValidationError):
            message.body = "changed"


class TestDeleteBatchEntry:

    def test_to_sqs(self):
        entry = DeleteBatchEntry(id="something", receipt_handle="handle")

        assert entry.to_sqs() == {'Id': 'something', 'ReceiptHandle': 'handle'}

    @pytest.mark.parametrize("data", [
        {'id': None, 'receipt_handle': 'handle'},
        {'id': 'something', 'receipt_handle': None},
        {'id': '', 'receipt_handle': 'handle'},
        {'id': 'has spaces', 'receipt_handle': 'handle'},
        {'receipt_handle': 'handle'},
    ])
    def test_invalid_entries(self, data):
        with pytest.raises(ValidationError):
            DeleteBatchEntry(**data)


class TestBatchDeleteResult:

    def test_from_sqs_without_failures(self):
        result = BatchDeleteResult.from_sqs({'Successful': [{'Id': 'a'}, {'Id': 'b'}]})

        assert result.is_successful
        assert result.successful == ['a', 'b']
        assert result.failed == []

    def test_from_sqs_with_failures(self):
        result = BatchDeleteResult.from_sqs({
            'Successful': [],
            'Failed': [{'Id': 'a', 'Code': 'ReceiptHandleIsInvalid', 'SenderFault': True}]
        })

        assert not result.is_successful
        assert result.failed[0].code == 'ReceiptHandleIsInvalid'
        assert result.failed[0].message is None
