"""
Catalog ingestion.

Modules:
    orchestrator - Manual, bulk-image and PDF catalog ingestion
    batch - Batch and per-item outcome tracking
    pricing - Price parsing and the optional price boost
"""

from .batch import BatchItem, BatchMode, BatchState, IngestionBatch, ItemStatus, Stage
from .orchestrator import IngestionOrchestrator, ManualEntry
from .pricing import PriceBoostPolicy, parse_price

__all__ = [
    'IngestionOrchestrator',
    'ManualEntry',
    'IngestionBatch',
    'BatchItem',
    'BatchMode',
    'BatchState',
    'ItemStatus',
    'Stage',
    'PriceBoostPolicy',
    'parse_price',
]
