"""Shared fixtures: an in-memory queue client that records every call."""
from typing import Dict, List, Optional

import pytest

from sqs_reader.models import Message, SendAck
from sqs_reader.utils.config import Settings
from sqs_reader.utils.errors import QueueClientError
from sqs_reader.utils.logger import setup_logging

setup_logging(Settings(_env_file=None))


class PollBudgetExceeded(Exception):
    """Raised by the fake once a test's receive budget is used up."""


def make_message(message_id: str, body: Optional[str] = None, handle: Optional[str] = None) -> Message:
    """Create a message with predictable body and receipt handle."""
    return Message(
        message_id=message_id,
        body=body if body is not None else f"body-{message_id}",
        receipt_handle=handle or f"handle-{message_id}",
        attributes={"ApproximateReceiveCount": "1"},
        md5_of_body=f"md5-{message_id}",
    )


class FakeSQSClient:
    """Scripted stand-in for SQSClient.

    ``deliveries`` is consumed one receive call at a time; once exhausted
    every receive returns an empty list.
    """

    def __init__(self):
        self.deliveries: List[List[Message]] = []
        self.approximate_size: Optional[int] = 0
        self.size_error: Optional[Exception] = None
        self.urls: Dict[str, str] = {}
        self.calls: List[tuple] = []
        self.fail_send_for: set = set()
        self.fail_delete_for: set = set()
        self.poll_budget: Optional[int] = None
        self.receives = 0

    def deliver(self, *batches: List[Message]) -> "FakeSQSClient":
        self.deliveries.extend(batches)
        return self

    def resolve_queue_url(self, queue_name: str) -> str:
        self.calls.append(("resolve", queue_name))
        return self.urls.get(queue_name, f"https://sqs.local/000000000000/{queue_name}")

    def get_approximate_size(self, queue_url: str) -> int:
        self.calls.append(("size", queue_url))
        if self.size_error is not None:
            raise self.size_error
        return self.approximate_size

    def receive(self, queue_url, visibility_timeout, max_messages=1, want_attributes=True):
        if self.poll_budget is not None and self.receives >= self.poll_budget:
            raise PollBudgetExceeded(self.receives)
        self.receives += 1
        self.calls.append(("receive", queue_url, visibility_timeout, max_messages, want_attributes))
        if self.deliveries:
            return list(self.deliveries.pop(0))
        return []

    def send_message(self, queue_url: str, body: str) -> SendAck:
        self.calls.append(("send", queue_url, body))
        if body in self.fail_send_for:
            raise QueueClientError("SendMessage", queue_url, "throttled")
        return SendAck(message_id=f"fwd-{body}", md5_of_message_body=f"md5-fwd-{body}")

    def delete_message(self, queue_url: str, receipt_handle: str) -> None:
        self.calls.append(("delete", queue_url, receipt_handle))
        if receipt_handle in self.fail_delete_for:
            raise QueueClientError("DeleteMessage", queue_url, "receipt handle expired")

    def calls_of(self, op: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == op]


@pytest.fixture
def fake_client():
    """Create an empty fake queue client."""
    return FakeSQSClient()
