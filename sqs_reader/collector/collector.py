"""Polling loop that collects distinct messages from a queue."""
from dataclasses import dataclass, field
from typing import Dict

from ..models import CollectionState, Message
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class CollectionResult:
    """Outcome of one collection run."""

    messages: Dict[str, Message] = field(default_factory=dict)
    state: CollectionState = CollectionState.SATISFIED
    polls: int = 0
    duplicates: int = 0


class DeduplicatingCollector:
    """Polls a queue one message at a time until enough distinct ids are seen.

    Receiving a single message per call keeps the duplicate bookkeeping exact.
    Duplicate deliveries overwrite the earlier entry so the stored receipt
    handle is always the newest one.
    """

    def __init__(self, client, queue_url: str):
        self.client = client
        self.queue_url = queue_url

    def collect(self, target: int, blocking: bool, lease_seconds: int) -> CollectionResult:
        """Poll until ``target`` distinct messages are held.

        Args:
            target: Number of distinct messages to collect
            blocking: Keep polling through empty receives instead of stopping
            lease_seconds: Visibility timeout for each receive; 0 leaves the
                messages visible to other consumers

        Returns:
            CollectionResult ending SATISFIED, or STARVED when a non-blocking
            poll came back empty first

        Raises:
            QueueClientError: On any receive failure; polling is not retried
        """
        result = CollectionResult()

        logger.info(
            "collection_started",
            queue=self.queue_url,
            target=target,
            blocking=blocking,
            lease_seconds=lease_seconds
        )

        while len(result.messages) < target:
            messages = self.client.receive(
                self.queue_url,
                visibility_timeout=lease_seconds,
                max_messages=1,
                want_attributes=True
            )
            result.polls += 1

            if not messages:
                if blocking:
                    continue
                result.state = CollectionState.STARVED
                break

            for message in messages:
                if message.message_id in result.messages:
                    result.duplicates += 1
                    logger.debug(
                        "sqs_duplicate_delivery",
                        message_id=message.message_id,
                        queue=self.queue_url
                    )
                result.messages[message.message_id] = message

        logger.info(
            "collection_finished",
            queue=self.queue_url,
            state=result.state.value,
            target=target,
            collected=len(result.messages),
            polls=result.polls,
            duplicates=result.duplicates
        )
        return result
