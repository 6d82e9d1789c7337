"""
Ingestion Orchestrator

Creates catalog products from three kinds of input:

- Manual: one product with name, price, image and optional category/description
- Bulk images: many images sharing one price, named after their files
- PDF catalog: one product per rendered page

Every item runs normalize -> upload -> write. Items are processed one at a
time so only one decoded image is in memory and only one upload is in
flight. A failed item is recorded and the batch moves on.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from ..catalog.writer import CatalogWriter
from ..common.config_loader import ImageProfile
from ..common.errors import IngestionBusyError, MinistoreError, ValidationError
from ..common.text_utils import normalize_category, strip_extension
from ..imaging import DocumentRasterizer, ImageNormalizer
from ..models import ProductAttributes, RasterizedPage, SourceAsset
from ..remote import RemoteAssetUploader
from .batch import BatchItem, BatchMode, BatchState, IngestionBatch, ItemStatus, Stage
from .pricing import PriceBoostPolicy, parse_price

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[IngestionBatch, BatchItem], None]


@dataclass
class ManualEntry:
    """Seller input for a single product."""
    name: str
    price: str
    image: Optional[SourceAsset] = None
    category: Optional[str] = None
    description: Optional[str] = None


class IngestionOrchestrator:
    """
    Drives the three ingestion modes for one store.

    Usage:
        orchestrator = IngestionOrchestrator(
            store_id="store-1",
            normalizer=ImageNormalizer(),
            uploader=RemoteAssetUploader(api_key="..."),
            writer=CatalogWriter(client),
            rasterizer=DocumentRasterizer(),
            price_policy=PriceBoostPolicy(enabled=True),
        )
        batch = orchestrator.submit_bulk(files, price="200")
        for item in batch.failed:
            print(item.name, item.failed_stage, item.error)
    """

    def __init__(
        self,
        store_id: str,
        normalizer: ImageNormalizer,
        uploader: RemoteAssetUploader,
        writer: CatalogWriter,
        rasterizer: Optional[DocumentRasterizer] = None,
        price_policy: PriceBoostPolicy = PriceBoostPolicy(),
        product_profile: ImageProfile = ImageProfile(800, 0.7),
    ):
        """
        Args:
            store_id: Store that receives the products
            normalizer: Image normalizer for manual and bulk images
            uploader: Image host uploader
            writer: Catalog writer
            rasterizer: PDF rasterizer, required for document mode
            price_policy: Price boost applied to every item
            product_profile: Size/quality bound for product images
        """
        if not store_id:
            raise ValueError("store_id is required")
        self.store_id = store_id
        self.normalizer = normalizer
        self.uploader = uploader
        self.writer = writer
        self.rasterizer = rasterizer
        self.price_policy = price_policy
        self.product_profile = product_profile

        self.current_batch: Optional[IngestionBatch] = None
        self._busy = False
        self._cancel_requested = False

    # ── State ────────────────────────────────────────────────────────────────

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def state(self) -> BatchState:
        if self.current_batch is None:
            return BatchState.IDLE
        return self.current_batch.state

    def cancel(self) -> None:
        """
        Stop the running batch before its next item.

        Items already written stay written; remaining items stay pending.
        Typically called from a progress callback.
        """
        if self._busy:
            logger.info("Cancellation requested")
            self._cancel_requested = True

    @contextmanager
    def _exclusive(self):
        if self._busy:
            raise IngestionBusyError("Another submission is still running")
        self._busy = True
        self._cancel_requested = False
        try:
            yield
        finally:
            self._busy = False

    @contextmanager
    def _validating(self, mode: BatchMode):
        """Expose a new batch in the validating state; drop it if validation fails."""
        if self._busy:
            raise IngestionBusyError("Another submission is still running")
        batch = IngestionBatch(mode=mode, store_id=self.store_id, state=BatchState.VALIDATING)
        previous, self.current_batch = self.current_batch, batch
        try:
            yield batch
        except ValidationError:
            self.current_batch = previous
            raise

    # ── Manual mode ──────────────────────────────────────────────────────────

    def submit_manual(self, entry: ManualEntry) -> str:
        """
        Create one product from manual input.

        Nothing remote is touched until name, price and image are all present.

        Returns:
            The new product id

        Raises:
            ValidationError: Missing image, name or price
            EncodingError, NetworkError, UploadError, PersistenceError: A
                pipeline step failed; no product was created
        """
        if entry.image is None or not entry.image.data:
            raise ValidationError("image: please select an image")
        if not entry.name or not entry.name.strip():
            raise ValidationError("name: required")
        price = self.price_policy.final_price(parse_price(entry.price))

        with self._exclusive():
            data = self.normalizer.normalize_with(entry.image.data, self.product_profile)
            url = self.uploader.upload(data, filename=_jpeg_name(entry.image.filename))
            product_id = self.writer.create_product(self.store_id, ProductAttributes(
                name=entry.name.strip(),
                price=price,
                image=url,
                category=normalize_category(entry.category),
                description=entry.description,
            ))

        logger.info("Added product %s (%s)", product_id, entry.name[:50])
        return product_id

    # ── Bulk image mode ──────────────────────────────────────────────────────

    def submit_bulk(
        self,
        files: Sequence[SourceAsset],
        price: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> IngestionBatch:
        """
        Create one product per image, all with the same price.

        Product names are the filenames without extension.

        Raises:
            ValidationError: No files or no price (nothing is processed)
        """
        with self._validating(BatchMode.BULK_IMAGES) as batch:
            if not files:
                raise ValidationError("files: select at least one image")
            if price is None or not str(price).strip():
                raise ValidationError("price: set a price for all images")
            final = self.price_policy.final_price(parse_price(price))

            batch.items = [
                BatchItem(
                    index=i,
                    name=strip_extension(f.filename),
                    price=final,
                    payload=f.data,
                    filename=_jpeg_name(f.filename),
                    needs_normalize=True,
                )
                for i, f in enumerate(files, 1)
            ]
        return self._run(batch, batch.items, on_progress)

    # ── Document mode ────────────────────────────────────────────────────────

    def prepare_document(self, document: SourceAsset) -> List[RasterizedPage]:
        """
        Render a PDF catalog into page previews.

        Raises:
            DocumentParseError: The file is empty or not a readable PDF
        """
        if self.rasterizer is None:
            raise ValueError("No document rasterizer configured")
        return self.rasterizer.rasterize_pages(document.data)

    def submit_document(
        self,
        document_name: str,
        pages: Sequence[RasterizedPage],
        price: str = "",
        on_progress: Optional[ProgressCallback] = None,
    ) -> IngestionBatch:
        """
        Create one product per rendered page.

        Page n becomes "Catalog Item n" with description "Page n of <file>".
        A blank price means 0.

        Raises:
            ValidationError: No pages (nothing is processed) or invalid price
        """
        with self._validating(BatchMode.DOCUMENT) as batch:
            if not pages:
                raise ValidationError("pages: no document pages to import")
            final = self.price_policy.final_price(parse_price(price, allow_empty=True))

            batch.items = [
                BatchItem(
                    index=page.number,
                    name=f"Catalog Item {page.number}",
                    description=f"Page {page.number} of {document_name}",
                    price=final,
                    payload=page.data,
                    filename=f"page-{page.number}.jpg",
                    needs_normalize=False,
                )
                for page in sorted(pages, key=lambda p: p.number)
            ]
        return self._run(batch, batch.items, on_progress)

    # ── Retry ────────────────────────────────────────────────────────────────

    def retry_failed(
        self,
        batch: IngestionBatch,
        on_progress: Optional[ProgressCallback] = None,
    ) -> IngestionBatch:
        """
        Re-run the failed items of a batch.

        Items that failed while writing reuse their uploaded image URL, so
        the image is not uploaded a second time. Other failed items start
        again from the first step.
        """
        failed = batch.failed
        if not failed:
            return batch

        for item in failed:
            if item.failed_stage is not Stage.WRITE:
                item.image_url = None
            item.status = ItemStatus.PENDING
            item.error = None
            item.failed_stage = None

        logger.info("Retrying %d failed items", len(failed))
        return self._run(batch, failed, on_progress)

    # ── Processing ───────────────────────────────────────────────────────────

    def _run(
        self,
        batch: IngestionBatch,
        items: List[BatchItem],
        on_progress: Optional[ProgressCallback],
    ) -> IngestionBatch:
        with self._exclusive():
            self.current_batch = batch
            batch.processed = batch.total - len(items)
            batch.state = BatchState.PROCESSING
            logger.info("Ingesting %d items (%s)", len(items), batch.mode.value)

            finished = False
            try:
                for item in items:
                    if self._cancel_requested:
                        batch.state = BatchState.CANCELLED
                        logger.warning("Batch cancelled with %d items pending", len(batch.pending))
                        break

                    logger.info("[%d/%d] %s...", item.index, batch.total, item.name[:60])
                    self._process_item(item)
                    batch.processed += 1

                    if on_progress is not None:
                        on_progress(batch, item)
                finished = True
            finally:
                # An unexpected exception still leaves the batch in a final state
                if not finished:
                    batch.state = BatchState.FAILED
                    logger.error("Batch aborted after %d of %d items",
                                 batch.processed, batch.total)
                elif batch.state is not BatchState.CANCELLED:
                    batch.state = BatchState.FAILED if batch.failed else BatchState.COMPLETED

        stats = batch.get_stats()
        logger.info("Batch %s: %d succeeded, %d failed, %d pending",
                    stats['state'], stats['succeeded'], stats['failed'], stats['pending'])
        return batch

    def _process_item(self, item: BatchItem) -> None:
        """Run one item through the pipeline and record its outcome."""
        stage = Stage.NORMALIZE
        try:
            if item.image_url is None:
                data = item.payload
                if item.needs_normalize:
                    data = self.normalizer.normalize_with(data, self.product_profile)
                stage = Stage.UPLOAD
                item.image_url = self.uploader.upload(data, filename=item.filename)

            stage = Stage.WRITE
            item.product_id = self.writer.create_product(self.store_id, ProductAttributes(
                name=item.name,
                price=item.price,
                image=item.image_url,
                category=item.category,
                description=item.description,
            ))
        except MinistoreError as e:
            item.status = ItemStatus.FAILED
            item.failed_stage = stage
            item.error = f"{type(e).__name__}: {e}"
            logger.error("Item %d (%s) failed at %s: %s",
                         item.index, item.name[:50], stage.value, item.error)
            if item.orphaned_upload:
                logger.warning("Uploaded image has no catalog record: %s", item.image_url)
            return

        item.status = ItemStatus.SUCCEEDED
        logger.info("OK: %s -> %s", item.name[:50], item.product_id)


def _jpeg_name(filename: str) -> str:
    return f"{strip_extension(filename) or 'image'}.jpg"
