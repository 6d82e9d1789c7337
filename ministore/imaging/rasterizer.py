"""
Document Rasterizer

Renders every page of a PDF catalog to a JPEG preview with PyMuPDF.
Each page later becomes one catalog product.
"""

import logging
from typing import Iterator, List

import fitz  # PyMuPDF
from PIL import Image

from ..common.errors import DocumentParseError
from ..models import RasterizedPage
from .normalizer import encode_jpeg

logger = logging.getLogger(__name__)


class DocumentRasterizer:
    """
    Converts a paginated document into page images, in page order.

    Usage:
        rasterizer = DocumentRasterizer(scale=0.5, quality=0.8)
        pages = rasterizer.rasterize_pages(pdf_bytes)
    """

    def __init__(self, scale: float = 0.5, quality: float = 0.8):
        """
        Args:
            scale: Render scale relative to native page size
            quality: JPEG quality as a 0-1 fraction
        """
        if scale <= 0:
            raise ValueError(f"scale must be positive (got {scale})")
        self.scale = scale
        self.quality = quality

    def _open(self, document: bytes) -> "fitz.Document":
        if not document:
            raise DocumentParseError("Document is empty")
        try:
            doc = fitz.open(stream=document, filetype="pdf")
        except (RuntimeError, ValueError) as e:
            raise DocumentParseError(f"Not a readable document: {e}") from e
        if doc.page_count == 0:
            doc.close()
            raise DocumentParseError("Document has no pages")
        return doc

    def page_count(self, document: bytes) -> int:
        doc = self._open(document)
        try:
            return doc.page_count
        finally:
            doc.close()

    def iter_pages(self, document: bytes) -> Iterator[RasterizedPage]:
        """
        Yield pages one at a time, numbered from 1.

        Opening the document happens on the first next() call; use
        rasterize_pages() when errors must surface immediately.
        """
        doc = self._open(document)
        matrix = fitz.Matrix(self.scale, self.scale)
        try:
            for index in range(doc.page_count):
                try:
                    pix = doc.load_page(index).get_pixmap(matrix=matrix, alpha=False)
                except (RuntimeError, ValueError) as e:
                    raise DocumentParseError(f"Cannot render page {index + 1}: {e}") from e
                img = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
                yield RasterizedPage(
                    number=index + 1,
                    data=encode_jpeg(img, self.quality),
                    width=pix.width,
                    height=pix.height,
                )
        finally:
            doc.close()

    def rasterize_pages(self, document: bytes) -> List[RasterizedPage]:
        """
        Render all pages eagerly.

        Args:
            document: PDF bytes

        Returns:
            One RasterizedPage per page, ordered 1..N

        Raises:
            DocumentParseError: If the bytes are empty or not a readable PDF
        """
        pages = list(self.iter_pages(document))
        logger.info("Rasterized %d pages at scale %.2f", len(pages), self.scale)
        return pages
