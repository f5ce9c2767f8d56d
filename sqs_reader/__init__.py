"""Bounded, deduplicating SQS queue reader."""

__version__ = "0.1.0"
