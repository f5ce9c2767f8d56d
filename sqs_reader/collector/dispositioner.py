"""Print, forward and delete collected messages."""
import json
import sys
from dataclasses import dataclass
from typing import Dict, List, Optional, TextIO

from ..models import DeletePolicy, DispositionOutcome, Message
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class DispositionSinks:
    """Which side effects are active for a run."""

    stdout: bool = False
    full: bool = False
    destination_url: Optional[str] = None
    delete: bool = False
    delete_policy: DeletePolicy = DeletePolicy.AFTER_EACH


class Dispositioner:
    """Applies the configured side effects to every collected message.

    Under ``DeletePolicy.AFTER_EACH`` each message is printed, then forwarded,
    then deleted, and a step only runs once the previous one returned. Any
    error propagates, so a message whose forward failed is never deleted.
    """

    def __init__(self, client, source_url: str, sinks: DispositionSinks, out: TextIO = None):
        self.client = client
        self.source_url = source_url
        self.sinks = sinks
        self.out = out or sys.stdout

    def dispose(self, collected: Dict[str, Message]) -> List[DispositionOutcome]:
        """Consume the collected set.

        Returns:
            One outcome per message
        """
        outcomes = {
            message_id: DispositionOutcome(message_id=message_id)
            for message_id in collected
        }

        delete_first = self.sinks.delete and self.sinks.delete_policy == DeletePolicy.BEFORE_OUTPUT
        if delete_first:
            logger.warning(
                "sqs_deleting_before_output",
                queue=self.source_url,
                count=len(collected)
            )
            for message in collected.values():
                self._delete(message)
                outcomes[message.message_id].deleted = True

        for message in collected.values():
            outcome = outcomes[message.message_id]

            if self.sinks.stdout:
                self._emit(message)
                outcome.printed = True

            if self.sinks.destination_url:
                ack = self.client.send_message(self.sinks.destination_url, message.body)
                self._write(json.dumps(ack.to_record()))
                outcome.forwarded_id = ack.message_id

            if self.sinks.delete and not delete_first:
                self._delete(message)
                outcome.deleted = True

        logger.info(
            "disposition_finished",
            queue=self.source_url,
            total=len(outcomes),
            forwarded=sum(1 for o in outcomes.values() if o.forwarded_id),
            deleted=sum(1 for o in outcomes.values() if o.deleted)
        )
        return list(outcomes.values())

    def _emit(self, message: Message) -> None:
        if self.sinks.full:
            self._write(json.dumps(message.to_record()))
        else:
            self._write(message.body)

    def _delete(self, message: Message) -> None:
        self.client.delete_message(self.source_url, message.receipt_handle)
        logger.debug("sqs_message_drained", message_id=message.message_id, queue=self.source_url)

    def _write(self, line: str) -> None:
        self.out.write(line + "\n")
        self.out.flush()
