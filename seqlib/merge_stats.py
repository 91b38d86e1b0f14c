"""
Merge Statistics
================
Counters collected while a merge runs.  Passing a ``MergeStats`` to any
merge entry point fills it in; omitting it costs nothing beyond a few
``None`` checks.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass
class MergeStats:
    """Snapshot of the work done by one top-level merge call."""
    comparisons: int = 0      # comparator invocations made by the engine
    swaps: int = 0            # element exchanges, rotations included
    rotations: int = 0        # middle-block rotations performed
    buffer_merges: int = 0    # terminal buffer-assisted merges
    buffer_capacity: int = 0  # capacity actually allocated
    max_depth: int = 0        # deepest engine call; top level is 1
    elapsed_ms: float = 0.0   # wall-clock time of the top-level call

    def reset(self):
        for name in self.__dataclass_fields__:
            setattr(self, name, type(getattr(self, name))())

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)
