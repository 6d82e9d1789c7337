"""
Ingestion batch state.

A batch is an ordered list of items, each with its own outcome. Items are
independent: a failed item never rolls back an earlier success.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ItemStatus(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class Stage(str, Enum):
    """Pipeline step an item failed in."""
    NORMALIZE = "normalize"
    UPLOAD = "upload"
    WRITE = "write"


class BatchState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class BatchMode(str, Enum):
    BULK_IMAGES = "bulk"
    DOCUMENT = "pdf"


@dataclass
class BatchItem:
    """
    One pending catalog product.

    payload is raw image bytes (normalized before upload) for bulk images,
    or an already-encoded page image for document batches.
    """
    index: int                      # 1-based position in the batch
    name: str
    price: float
    payload: bytes = field(repr=False)
    filename: str
    needs_normalize: bool
    description: str = ""
    category: Optional[str] = None

    status: ItemStatus = ItemStatus.PENDING
    product_id: Optional[str] = None
    image_url: Optional[str] = None
    error: Optional[str] = None
    failed_stage: Optional[Stage] = None

    @property
    def orphaned_upload(self) -> bool:
        """True when the image was uploaded but no catalog record exists."""
        return self.status is ItemStatus.FAILED and self.failed_stage is Stage.WRITE \
            and bool(self.image_url)


@dataclass
class IngestionBatch:
    """A bulk-image or document submission and its per-item outcomes."""
    mode: BatchMode
    store_id: str
    items: List[BatchItem] = field(default_factory=list)
    state: BatchState = BatchState.IDLE
    processed: int = 0

    @property
    def total(self) -> int:
        return len(self.items)

    @property
    def succeeded(self) -> List[BatchItem]:
        return [i for i in self.items if i.status is ItemStatus.SUCCEEDED]

    @property
    def failed(self) -> List[BatchItem]:
        return [i for i in self.items if i.status is ItemStatus.FAILED]

    @property
    def pending(self) -> List[BatchItem]:
        return [i for i in self.items if i.status is ItemStatus.PENDING]

    @property
    def orphaned_urls(self) -> List[str]:
        return [i.image_url for i in self.items if i.orphaned_upload]

    def get_stats(self) -> dict:
        """Return batch statistics."""
        return {
            'mode': self.mode.value,
            'state': self.state.value,
            'total': self.total,
            'succeeded': len(self.succeeded),
            'failed': len(self.failed),
            'pending': len(self.pending),
            'orphaned_uploads': len(self.orphaned_urls),
        }
