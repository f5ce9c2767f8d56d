"""Decide how many distinct messages a run should collect."""
from typing import Optional

from ..models import CountMode
from ..utils.errors import ConfigurationError, SizeUnavailable
from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_COUNT = 1


def needs_queue_size(mode: CountMode, blocking: bool) -> bool:
    """Whether resolving ``mode`` depends on the queue's approximate size."""
    if mode == CountMode.FIXED:
        return False
    if mode == CountMode.ALL:
        return True
    return not blocking


def resolve_target(
    mode: CountMode,
    approximate_size: Optional[int],
    count: Optional[int] = None,
    blocking: bool = False,
    default_count: int = DEFAULT_COUNT
) -> int:
    """Compute the collection target.

    Args:
        mode: How the count was chosen
        approximate_size: ApproximateNumberOfMessages, ignored for FIXED and
            for DEFAULT when blocking
        count: The fixed count for FIXED mode
        blocking: Whether the collector may wait for future arrivals
        default_count: Count used when none was given

    Returns:
        Number of distinct messages to collect
    """
    if mode == CountMode.FIXED:
        if count is None or count < 0:
            raise ConfigurationError(f"count must be a non-negative integer, got {count!r}")
        return count

    if mode == CountMode.DEFAULT and blocking:
        return default_count

    if approximate_size is None:
        raise SizeUnavailable(reason=f"{mode.value} mode requires the approximate queue size")

    if mode == CountMode.ALL:
        return approximate_size
    return min(approximate_size, default_count)


class TargetResolver:
    """Resolves the target, querying the queue size only when it matters."""

    def __init__(self, client, default_count: int = DEFAULT_COUNT):
        self.client = client
        self.default_count = default_count

    def resolve(
        self,
        queue_url: str,
        mode: CountMode,
        count: Optional[int] = None,
        blocking: bool = False
    ) -> int:
        approximate_size = None
        if needs_queue_size(mode, blocking):
            # Raises SizeUnavailable; fatal for the modes that get here
            approximate_size = self.client.get_approximate_size(queue_url)

        target = resolve_target(
            mode,
            approximate_size,
            count=count,
            blocking=blocking,
            default_count=self.default_count
        )

        logger.info(
            "collection_target_resolved",
            queue=queue_url,
            mode=mode.value,
            blocking=blocking,
            approximate_size=approximate_size,
            target=target
        )
        return target
