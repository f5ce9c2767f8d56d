"""SQS client for resolving, receiving, deleting and sending messages."""
from typing import List, Optional
import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..models import Message, SendAck
from ..utils.errors import MissingField, QueueClientError, ResolutionError, SizeUnavailable
from ..utils.logger import get_logger

logger = get_logger(__name__)

NON_EXISTENT_QUEUE_CODES = (
    "AWS.SimpleQueueService.NonExistentQueue",
    "QueueDoesNotExist",
)


def _error_code(error: Exception) -> str:
    if isinstance(error, ClientError):
        return error.response.get('Error', {}).get('Code', '')
    return type(error).__name__


class SQSClient:
    """Thin adapter over the boto3 SQS client.

    Every failing call is logged and re-raised as one of the reader's own
    errors with the botocore exception chained; nothing is retried here.
    """

    def __init__(
        self,
        region: str = "us-east-1",
        endpoint_url: Optional[str] = None,
        wait_time_seconds: int = 0
    ):
        """Initialize SQS client.

        Args:
            region: AWS region
            endpoint_url: Optional endpoint URL (for LocalStack)
            wait_time_seconds: Long polling wait time used by receive
        """
        self.region = region
        self.wait_time_seconds = wait_time_seconds

        self.sqs = boto3.client(
            'sqs',
            region_name=region,
            endpoint_url=endpoint_url
        )

        logger.info(
            "sqs_client_initialized",
            region=region,
            endpoint=endpoint_url or "AWS"
        )

    def resolve_queue_url(self, queue_name: str) -> str:
        """Resolve a queue name to its URL.

        Raises:
            ResolutionError: If the queue does not exist or the lookup fails
            MissingField: If the response carries no QueueUrl
        """
        try:
            response = self.sqs.get_queue_url(QueueName=queue_name)
        except (ClientError, BotoCoreError) as e:
            error_code = _error_code(e)
            if error_code in NON_EXISTENT_QUEUE_CODES:
                logger.error("sqs_queue_not_found", queue=queue_name)
                raise ResolutionError(queue_name, "queue does not exist") from e
            logger.error(
                "sqs_queue_url_failed",
                error=str(e),
                error_code=error_code,
                queue=queue_name
            )
            raise ResolutionError(queue_name, str(e)) from e

        queue_url = response.get('QueueUrl')
        if not queue_url:
            raise MissingField("QueueUrl", "GetQueueUrl", queue=queue_name)

        logger.debug("sqs_queue_resolved", queue=queue_name, queue_url=queue_url)
        return queue_url

    def get_approximate_size(self, queue_url: str) -> int:
        """Read ApproximateNumberOfMessages for a queue.

        Raises:
            SizeUnavailable: If the call fails or the value is not an integer
        """
        try:
            response = self.sqs.get_queue_attributes(
                QueueUrl=queue_url,
                AttributeNames=['ApproximateNumberOfMessages']
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "sqs_queue_size_failed",
                error=str(e),
                error_code=_error_code(e),
                queue=queue_url
            )
            raise SizeUnavailable(queue_url, str(e)) from e

        raw_size = response.get('Attributes', {}).get('ApproximateNumberOfMessages')
        try:
            size = int(raw_size)
        except (TypeError, ValueError) as e:
            raise SizeUnavailable(queue_url, f"unusable value {raw_size!r}") from e
        if size < 0:
            raise SizeUnavailable(queue_url, f"unusable value {raw_size!r}")

        logger.info("sqs_queue_size", queue=queue_url, approximate_size=size)
        return size

    def receive(
        self,
        queue_url: str,
        visibility_timeout: int,
        max_messages: int = 1,
        want_attributes: bool = True
    ) -> List[Message]:
        """Receive messages from a queue.

        Args:
            queue_url: Queue to read from
            visibility_timeout: Seconds the received messages stay hidden
            max_messages: Maximum number of messages to retrieve (1-10)
            want_attributes: Request all system attributes

        Returns:
            List of messages, empty when the queue had nothing to deliver
        """
        params = {
            'QueueUrl': queue_url,
            'MaxNumberOfMessages': max_messages,
            'VisibilityTimeout': visibility_timeout,
            'WaitTimeSeconds': self.wait_time_seconds,
        }
        if want_attributes:
            params['AttributeNames'] = ['All']

        try:
            response = self.sqs.receive_message(**params)
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "sqs_receive_failed",
                error=str(e),
                error_code=_error_code(e),
                queue=queue_url
            )
            raise QueueClientError("ReceiveMessage", queue_url, str(e)) from e

        messages = [Message.from_sqs(raw, queue=queue_url) for raw in response.get('Messages', [])]

        logger.debug(
            "sqs_messages_polled",
            message_count=len(messages),
            queue=queue_url
        )

        return messages

    def delete_message(self, queue_url: str, receipt_handle: str) -> None:
        """Delete a message using the receipt handle of its latest delivery."""
        try:
            self.sqs.delete_message(
                QueueUrl=queue_url,
                ReceiptHandle=receipt_handle
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "sqs_message_delete_failed",
                error=str(e),
                error_code=_error_code(e),
                queue=queue_url
            )
            raise QueueClientError("DeleteMessage", queue_url, str(e)) from e

        logger.info("sqs_message_deleted", queue=queue_url)

    def send_message(self, queue_url: str, body: str) -> SendAck:
        """Send a body to a queue.

        Message attributes are not forwarded; only the body is sent.

        Returns:
            The destination's checksum and assigned message id
        """
        try:
            response = self.sqs.send_message(
                QueueUrl=queue_url,
                MessageBody=body
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "sqs_send_failed",
                error=str(e),
                error_code=_error_code(e),
                queue=queue_url
            )
            raise QueueClientError("SendMessage", queue_url, str(e)) from e

        message_id = response.get('MessageId')
        if not message_id:
            raise MissingField("MessageId", "SendMessage", queue=queue_url)

        logger.info("sqs_message_sent", message_id=message_id, queue=queue_url)

        return SendAck(
            message_id=message_id,
            md5_of_message_body=response.get('MD5OfMessageBody')
        )
