"""Tests for collection target resolution."""
import pytest

from sqs_reader.collector.target import TargetResolver, needs_queue_size, resolve_target
from sqs_reader.models import CountMode
from sqs_reader.utils.errors import ConfigurationError, SizeUnavailable


class TestResolveTarget:
    """Pure target computation."""

    @pytest.mark.parametrize("size", [0, 1, 5, 1000])
    def test_fixed_ignores_queue_size(self, size):
        assert resolve_target(CountMode.FIXED, size, count=7) == 7

    def test_fixed_works_without_size(self):
        assert resolve_target(CountMode.FIXED, None, count=3) == 3

    def test_all_uses_approximate_size(self):
        assert resolve_target(CountMode.ALL, 37) == 37

    def test_default_non_blocking_never_exceeds_backlog(self):
        assert resolve_target(CountMode.DEFAULT, 0, blocking=False) == 0
        assert resolve_target(CountMode.DEFAULT, 12, blocking=False) == 1

    def test_default_blocking_ignores_backlog(self):
        assert resolve_target(CountMode.DEFAULT, 0, blocking=True) == 1
        assert resolve_target(CountMode.DEFAULT, None, blocking=True) == 1

    def test_custom_default_count(self):
        assert resolve_target(CountMode.DEFAULT, 2, default_count=5) == 2
        assert resolve_target(CountMode.DEFAULT, 9, default_count=5) == 5

    def test_negative_fixed_count_rejected(self):
        with pytest.raises(ConfigurationError):
            resolve_target(CountMode.FIXED, 10, count=-1)

    def test_missing_size_is_size_unavailable(self):
        with pytest.raises(SizeUnavailable):
            resolve_target(CountMode.ALL, None)
        with pytest.raises(SizeUnavailable):
            resolve_target(CountMode.DEFAULT, None, blocking=False)


class TestNeedsQueueSize:

    def test_modes(self):
        assert needs_queue_size(CountMode.FIXED, False) is False
        assert needs_queue_size(CountMode.FIXED, True) is False
        assert needs_queue_size(CountMode.ALL, True) is True
        assert needs_queue_size(CountMode.DEFAULT, False) is True
        assert needs_queue_size(CountMode.DEFAULT, True) is False


class TestTargetResolver:
    """Resolver against a fake queue."""

    QUEUE_URL = "https://sqs.local/000000000000/in"

    def test_fixed_does_not_query_size(self, fake_client):
        fake_client.size_error = SizeUnavailable(self.QUEUE_URL, "boom")
        resolver = TargetResolver(fake_client)

        assert resolver.resolve(self.QUEUE_URL, CountMode.FIXED, count=4) == 4
        assert fake_client.calls_of("size") == []

    def test_all_queries_size(self, fake_client):
        fake_client.approximate_size = 37
        resolver = TargetResolver(fake_client)

        assert resolver.resolve(self.QUEUE_URL, CountMode.ALL) == 37
        assert fake_client.calls_of("size") == [("size", self.QUEUE_URL)]

    def test_size_unavailable_is_fatal_for_all(self, fake_client):
        fake_client.size_error = SizeUnavailable(self.QUEUE_URL, "no count provided")
        resolver = TargetResolver(fake_client)

        with pytest.raises(SizeUnavailable):
            resolver.resolve(self.QUEUE_URL, CountMode.ALL)

    def test_size_unavailable_is_fatal_for_default_non_blocking(self, fake_client):
        fake_client.size_error = SizeUnavailable(self.QUEUE_URL, "no count provided")
        resolver = TargetResolver(fake_client)

        with pytest.raises(SizeUnavailable):
            resolver.resolve(self.QUEUE_URL, CountMode.DEFAULT, blocking=False)

    def test_default_blocking_skips_size(self, fake_client):
        fake_client.size_error = SizeUnavailable(self.QUEUE_URL, "no count provided")
        resolver = TargetResolver(fake_client)

        assert resolver.resolve(self.QUEUE_URL, CountMode.DEFAULT, blocking=True) == 1
