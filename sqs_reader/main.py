#!/usr/bin/env python3
"""
SQS Reader - bounded, deduplicating queue reader
Handles: resolve queues → pick target → poll until satisfied → print / forward / drain
"""
import argparse
import sys
from typing import Any, Dict, List, Optional, TextIO

from pydantic import ValidationError

from .utils.logger import setup_logging, get_logger
from .utils.config import Settings, get_settings
from .utils.errors import ConfigurationError, SQSReaderError
from .models import CountMode, DeletePolicy, ReaderOptions
from .collector import DeduplicatingCollector, DispositionSinks, Dispositioner, TargetResolver
from .queue.sqs_client import SQSClient

logger = get_logger(__name__)


DESCRIPTION = """
Simple SQS queue reader. Automatically retries and deduplicates until the
desired number of messages have been read.

Can either output messages to stdout or transfer them to another queue.
"""

EPILOG = """
NOTE: transferring message attributes is currently not supported, and thus
custom attributes will not be preserved when moving messages.
"""


class SQSReader:
    """
    Orchestrates one reader run.

    Workflow:
    1. Validate options (no queue calls before this succeeds)
    2. Resolve the source and optional destination queue URLs
    3. Resolve the collection target
    4. Poll until the target is met or the queue runs dry
    5. Print, forward and/or delete the collected messages
    """

    def __init__(
        self,
        options: ReaderOptions,
        client: Optional[SQSClient] = None,
        settings: Optional[Settings] = None,
        out: Optional[TextIO] = None
    ):
        self.options = options
        self.settings = settings or get_settings()
        self.out = out or sys.stdout
        self._client = client

    @property
    def client(self) -> SQSClient:
        if self._client is None:
            self._client = SQSClient(
                region=self.settings.aws_region,
                endpoint_url=self.settings.sqs_endpoint_url,
                wait_time_seconds=self.settings.sqs_wait_time_seconds
            )
        return self._client

    def validate(self) -> None:
        """Reject configurations that cannot work.

        Raises:
            ConfigurationError: On a missing output sink or a bad count
        """
        options = self.options
        if not options.stdout and not options.destination_queue:
            raise ConfigurationError("Either --stdout or an output queue name must be provided")
        if options.mode == CountMode.FIXED and (options.count is None or options.count < 0):
            raise ConfigurationError(f"Could not parse --count: {options.count!r}")
        if options.lease_seconds is not None and options.lease_seconds < 0:
            raise ConfigurationError("--lease must not be negative")
        if options.lease_seconds is not None and not options.drain:
            raise ConfigurationError("--lease only applies together with --drain or --drain-first")

    @property
    def lease_seconds(self) -> int:
        """Visibility timeout for receives; 0 unless messages will be deleted."""
        if not self.options.drain:
            return 0
        if self.options.lease_seconds is not None:
            return self.options.lease_seconds
        return self.settings.sqs_visibility_timeout

    def run(self) -> Dict[str, Any]:
        """Execute the run end-to-end.

        Returns:
            Summary of the run
        """
        self.validate()
        options = self.options

        source_url = self.client.resolve_queue_url(options.source_queue)
        destination_url = None
        if options.destination_queue:
            destination_url = self.client.resolve_queue_url(options.destination_queue)

        resolver = TargetResolver(self.client, default_count=self.settings.default_count)
        target = resolver.resolve(
            source_url,
            options.mode,
            count=options.count,
            blocking=options.block
        )

        if options.block:
            logger.warning(
                "blocking_collection",
                queue=source_url,
                target=target,
                message="Will wait until the target is met; leased messages stay invisible meanwhile."
            )

        collector = DeduplicatingCollector(self.client, source_url)
        result = collector.collect(target, blocking=options.block, lease_seconds=self.lease_seconds)

        sinks = DispositionSinks(
            stdout=options.stdout,
            full=options.full,
            destination_url=destination_url,
            delete=options.drain,
            delete_policy=options.delete_policy
        )
        outcomes = Dispositioner(self.client, source_url, sinks, out=self.out).dispose(result.messages)

        summary = {
            "queue": source_url,
            "target": target,
            "state": result.state.value,
            "collected": len(result.messages),
            "polls": result.polls,
            "duplicates": result.duplicates,
            "forwarded": sum(1 for o in outcomes if o.forwarded_id),
            "deleted": sum(1 for o in outcomes if o.deleted),
        }
        logger.info("sqs_reader_run_completed", **summary)
        return summary


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="sqs-reader",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("in_queue", metavar="in-queue", help="Name of the queue to read from.")
    parser.add_argument(
        "out_queue", metavar="out-queue", nargs="?", default=None,
        help="Optional queue to transfer message bodies to."
    )
    parser.add_argument("--stdout", action="store_true", help="Dump messages to stdout.")

    count_group = parser.add_mutually_exclusive_group()
    count_group.add_argument(
        "--all", action="store_true",
        help="Read all messages from queue. Uses ApproximateNumberOfMessages "
             "to guess number of messages in the queue."
    )
    count_group.add_argument(
        "--count", type=int, default=None, metavar="N",
        help="Number of messages to attempt to read [default: 1]."
    )

    parser.add_argument(
        "--block", action="store_true",
        help="Block until the desired number of messages has been read. Can "
             "result in this process holding all messages on the queue (and "
             "thus rendering them invisible to other readers) for an "
             "indeterminate amount of time. Use with caution."
    )
    parser.add_argument(
        "--drain", action="store_true",
        help="Remove each message from the queue after it has been printed/transferred."
    )
    parser.add_argument(
        "--drain-first", action="store_true",
        help="Remove all collected messages before printing/transferring them. "
             "Releases the queue sooner but a crash can lose messages. Implies --drain."
    )
    parser.add_argument(
        "--full", action="store_true",
        help="Print full response with message attributes instead of just "
             "printing the message body."
    )
    parser.add_argument(
        "--lease", type=int, default=None, metavar="SECONDS",
        help="Visibility timeout held on messages while draining. Requires --drain or --drain-first."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr.")
    return parser


def options_from_args(args: argparse.Namespace) -> ReaderOptions:
    """Fold parsed arguments into the reader configuration."""
    if args.all:
        mode = CountMode.ALL
    elif args.count is not None:
        mode = CountMode.FIXED
    else:
        mode = CountMode.DEFAULT

    return ReaderOptions(
        source_queue=args.in_queue,
        destination_queue=args.out_queue,
        stdout=args.stdout,
        full=args.full,
        mode=mode,
        count=args.count,
        block=args.block,
        drain=args.drain or args.drain_first,
        delete_policy=DeletePolicy.BEFORE_OUTPUT if args.drain_first else DeletePolicy.AFTER_EACH,
        lease_seconds=args.lease
    )


def describe_validation_error(error: ValidationError) -> str:
    """Collapse a settings validation error into one line."""
    return "; ".join(
        f"{'.'.join(str(part) for part in detail['loc']).upper()}: {detail['msg']}"
        for detail in error.errors()
    )


def main(argv: Optional[List[str]] = None, client: Optional[SQSClient] = None) -> None:
    """
    Command-line entry point.

    Usage:
        sqs-reader <in-queue> [<out-queue>] [--stdout] [--all | --count N] [--block] [--drain] [--full]
    """
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"error: invalid configuration: {describe_validation_error(e)}", file=sys.stderr)
        sys.exit(1)

    setup_logging(settings, level="INFO" if args.verbose else None)
    reader = SQSReader(options_from_args(args), client=client, settings=settings)

    try:
        reader.run()
    except KeyboardInterrupt:
        logger.info("sqs_reader_interrupted_by_user")
        print("Interrupted; undeleted messages remain on the queue.", file=sys.stderr)
        sys.exit(130)
    except SQSReaderError as e:
        logger.error("sqs_reader_failed", error_type=type(e).__name__, error=str(e))
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logger.error("unexpected_error", error=str(e), exc_info=True)
        print(f"error: unexpected failure: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
