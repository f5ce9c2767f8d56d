"""SQS integration module."""
from .sqs_client import SQSClient

__all__ = ["SQSClient"]
