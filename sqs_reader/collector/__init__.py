"""Target resolution, deduplicating collection and message disposition."""
from .collector import CollectionResult, DeduplicatingCollector
from .dispositioner import DispositionSinks, Dispositioner
from .target import TargetResolver, resolve_target

__all__ = [
    "CollectionResult",
    "DeduplicatingCollector",
    "DispositionSinks",
    "Dispositioner",
    "TargetResolver",
    "resolve_target",
]
