"""Data structures passed between the reader components."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from .utils.errors import MissingField


@dataclass
class Message:
    """One delivery of a queue item.

    ``message_id`` is the deduplication key; ``receipt_handle`` is only valid
    for the lease of this particular delivery.
    """

    message_id: str
    body: str
    receipt_handle: str
    attributes: Dict[str, str] = field(default_factory=dict)
    md5_of_body: Optional[str] = None

    @classmethod
    def from_sqs(cls, raw: Dict[str, Any], queue: Optional[str] = None) -> "Message":
        """Build a Message from a raw ``receive_message`` entry.

        Args:
            raw: One entry of the response's ``Messages`` list
            queue: Queue the entry was received from, named in errors

        Raises:
            MissingField: If MessageId, Body or ReceiptHandle is absent
        """
        message_id = raw.get("MessageId")
        if not message_id:
            raise MissingField("MessageId", "ReceiveMessage", queue=queue)
        for key in ("Body", "ReceiptHandle"):
            if raw.get(key) is None:
                raise MissingField(key, "ReceiveMessage", message_id=message_id, queue=queue)

        return cls(
            message_id=message_id,
            body=raw["Body"],
            receipt_handle=raw["ReceiptHandle"],
            attributes=dict(raw.get("Attributes") or {}),
            md5_of_body=raw.get("MD5OfBody"),
        )

    def to_record(self) -> Dict[str, Any]:
        """Full-record output form."""
        return {
            "Body": self.body,
            "ReceiptHandle": self.receipt_handle,
            "MD5OfBody": self.md5_of_body,
            "MessageId": self.message_id,
            "Attributes": self.attributes,
        }


@dataclass
class SendAck:
    """Acknowledgement returned by the destination queue for a forwarded body."""

    message_id: str
    md5_of_message_body: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        return {
            "MD5OfMessageBody": self.md5_of_message_body,
            "MessageId": self.message_id,
        }


class CountMode(str, Enum):
    """How the number of messages to collect is chosen."""

    FIXED = "fixed"
    ALL = "all"
    DEFAULT = "default"


class CollectionState(str, Enum):
    """Terminal states of the collection loop."""

    SATISFIED = "satisfied"
    STARVED = "starved"


class DeletePolicy(str, Enum):
    """When collected messages are removed from the source queue.

    AFTER_EACH deletes a message only once its output and forwarding are
    done. BEFORE_OUTPUT deletes the whole set straight after polling to
    release the queue sooner; a crash before output then loses messages.
    """

    AFTER_EACH = "after_each"
    BEFORE_OUTPUT = "before_output"


@dataclass
class ReaderOptions:
    """Run configuration handed to the reader by the CLI."""

    source_queue: str
    destination_queue: Optional[str] = None
    stdout: bool = False
    full: bool = False
    mode: CountMode = CountMode.DEFAULT
    count: Optional[int] = None
    block: bool = False
    drain: bool = False
    delete_policy: DeletePolicy = DeletePolicy.AFTER_EACH
    lease_seconds: Optional[int] = None


@dataclass
class DispositionOutcome:
    """What happened to one collected message."""

    message_id: str
    printed: bool = False
    forwarded_id: Optional[str] = None
    deleted: bool = False
