"""Work queue - filtering and ordering of actionable tickets."""

from shipyard.work_queue.builder import EXCLUDED_STATUSES, QueueBuilder, queue_order
from shipyard.work_queue.models import QueueItem

__all__ = [
    "EXCLUDED_STATUSES",
    "QueueBuilder",
    "QueueItem",
    "queue_order",
]
