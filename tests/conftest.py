"""Shared test fixtures."""

import io
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import fitz
import pytest
from PIL import Image

from ministore.catalog import CatalogWriter
from ministore.models import Product, SourceAsset, Store
from ministore.remote import FirestoreClient, RemoteAssetUploader

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_image(width: int, height: int, fmt: str = "PNG", mode: str = "RGB") -> bytes:
    """Encode a solid-colour image of the given size."""
    color = (200, 30, 30, 128) if mode == "RGBA" else (200, 30, 30)
    if mode == "L":
        color = 128
    img = Image.new(mode, (width, height), color)
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


def make_pdf(page_count: int, width: float = 400, height: float = 600) -> bytes:
    """Build a PDF whose page n carries the text 'Page n'."""
    doc = fitz.open()
    for n in range(1, page_count + 1):
        page = doc.new_page(width=width, height=height)
        page.insert_text((72, 72), f"Page {n}", fontsize=24)
    data = doc.tobytes()
    doc.close()
    return data


def iso(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def image_file():
    """A 1600x1200 PNG upload."""
    return SourceAsset(filename="red shirt.png", data=make_image(1600, 1200))


@pytest.fixture
def store():
    return Store(
        id="store-1",
        name="Asha Boutique",
        whatsapp="+91 98765-43210",
        handle="asha-boutique",
        owner_id="user-1",
        theme_color="#ff6600",
    )


@pytest.fixture
def scenario_products():
    """Two products: a new cheap shirt and older expensive pants."""
    return [
        Product(id="p1", store_id="store-1", name="Shirt", price=200.0,
                image="https://i.ibb.co/1/shirt.jpg", category="tops",
                created_at=iso(NOW)),
        Product(id="p2", store_id="store-1", name="Pants", price=500.0,
                image="https://i.ibb.co/2/pants.jpg", category="bottoms",
                created_at=iso(NOW - timedelta(days=10))),
    ]


@pytest.fixture
def mock_client():
    """FirestoreClient double with the real method signatures."""
    return MagicMock(spec=FirestoreClient)


@pytest.fixture
def mock_uploader():
    uploader = MagicMock(spec=RemoteAssetUploader)
    uploader.upload.side_effect = lambda data, filename="image.jpg": f"https://i.ibb.co/x/{filename}"
    return uploader


@pytest.fixture
def mock_writer():
    writer = MagicMock(spec=CatalogWriter)
    counter = iter(range(1, 1000))
    writer.create_product.side_effect = lambda store_id, attrs: f"prod-{next(counter)}"
    return writer
