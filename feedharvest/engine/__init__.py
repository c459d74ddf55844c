"""Collection engine.

Data flows one way:

    PaginationController -> CollectionCycle -> FieldExtractor
        -> ThreadReconstructor -> is_new -> RunState.accumulated

The engine only touches the page through a view
(:mod:`feedharvest.views`) and only reports through a notifier
(:mod:`feedharvest.notify`).
"""

from .schema import (
    CandidateRecord,
    DateRange,
    Phase,
    RetainedItem,
    RunState,
    ScrapeConfig,
    ScrapeMode,
)
from .dedup import FingerprintIndex, fingerprint, is_new
from .extractor import FieldExtractor
from .threads import ThreadReconstructor
from .cycle import CollectionCycle, CycleResult
from .controller import PaginationController
from .service import HarvestService

__all__ = [
    "CandidateRecord",
    "CollectionCycle",
    "CycleResult",
    "DateRange",
    "FieldExtractor",
    "FingerprintIndex",
    "HarvestService",
    "PaginationController",
    "Phase",
    "RetainedItem",
    "RunState",
    "ScrapeConfig",
    "ScrapeMode",
    "ThreadReconstructor",
    "fingerprint",
    "is_new",
]
