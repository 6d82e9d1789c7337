"""
Store Directory

Reads and saves store profiles and lists a store's products.
Stores are addressed by their document id or by their unique handle.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from ..common.config_loader import ImageProfile
from ..common.errors import ValidationError
from ..common.text_utils import normalize_handle, to_iso, utc_now
from ..imaging import ImageNormalizer
from ..models import Product, SourceAsset, Store
from ..remote import FirestoreClient, RemoteAssetUploader
from .writer import PRODUCTS_COLLECTION

logger = logging.getLogger(__name__)

STORES_COLLECTION = "stores"


class StoreDirectory:
    """
    Store lookups and store settings persistence.

    Usage:
        directory = StoreDirectory(client, uploader=uploader)
        store = directory.resolve("my-shop")          # id or handle
        products = directory.list_products(store.id)
    """

    def __init__(
        self,
        client: FirestoreClient,
        uploader: Optional[RemoteAssetUploader] = None,
        normalizer: Optional[ImageNormalizer] = None,
        logo_profile: ImageProfile = ImageProfile(400, 0.8),
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Args:
            client: Document store client
            uploader: Image uploader, required only for saving a new logo
            normalizer: Image normalizer for logos
            logo_profile: Size/quality bound for logos
            clock: Source of the current time
        """
        self.client = client
        self.uploader = uploader
        self.normalizer = normalizer or ImageNormalizer()
        self.logo_profile = logo_profile
        self.clock = clock

    # ── Lookups ──────────────────────────────────────────────────────────────

    def get_store(self, store_id: str) -> Optional[Store]:
        fields = self.client.get_document(STORES_COLLECTION, store_id)
        if fields is None:
            return None
        return Store.from_fields(store_id, fields)

    def find_by_handle(self, handle: str) -> Optional[Store]:
        matches = self.client.query_equal(STORES_COLLECTION, "handle", handle, limit=1)
        if not matches:
            return None
        doc_id, fields = matches[0]
        return Store.from_fields(doc_id, fields)

    def resolve(self, id_or_handle: str) -> Optional[Store]:
        """
        Find a store from a public link segment.

        The segment is tried as a document id first, then as a handle.
        """
        if not id_or_handle:
            return None
        store = self.get_store(id_or_handle)
        if store is None:
            store = self.find_by_handle(id_or_handle)
        if store is None:
            logger.info("Store not found: %s", id_or_handle)
        return store

    def find_by_owner(self, owner_id: str) -> Optional[Store]:
        """Return the store owned by a user, if any."""
        matches = self.client.query_equal(STORES_COLLECTION, "ownerId", owner_id, limit=1)
        if not matches:
            return None
        doc_id, fields = matches[0]
        return Store.from_fields(doc_id, fields)

    def list_products(self, store_id: str) -> List[Product]:
        """All products of a store, in document store order."""
        docs = self.client.query_equal(PRODUCTS_COLLECTION, "storeId", store_id)
        return [Product.from_fields(doc_id, fields) for doc_id, fields in docs]

    # ── Settings ─────────────────────────────────────────────────────────────

    def _check_handle_available(self, handle: str, store_id: str) -> None:
        for doc_id, _ in self.client.query_equal(STORES_COLLECTION, "handle", handle):
            if doc_id != store_id:
                raise ValidationError(f"handle: '{handle}' is already taken")

    def save_store(self, store: Store, logo: Optional[SourceAsset] = None) -> Store:
        """
        Create or update a store profile.

        The handle is normalized and must not belong to another store.
        A new logo is normalized with the logo profile and uploaded before
        the document is written.

        Args:
            store: Store to save; an empty id creates a new store
            logo: Optional new logo file

        Returns:
            The saved store (with id, handle, logo URL and timestamps set)

        Raises:
            ValidationError: Missing name/owner or handle already taken
            EncodingError, NetworkError, UploadError: Logo processing failed
            PersistenceError: The write failed
        """
        if not store.name or not store.name.strip():
            raise ValidationError("name: required")
        if not store.owner_id:
            raise ValidationError("owner_id: required")

        store.handle = normalize_handle(store.handle) if store.handle else ""
        if store.handle:
            self._check_handle_available(store.handle, store.id)

        if logo is not None:
            if self.uploader is None:
                raise ValidationError("logo: no uploader configured")
            data = self.normalizer.normalize_with(logo.data, self.logo_profile)
            store.logo = self.uploader.upload(data, filename=logo.filename)

        now = to_iso(self.clock())
        store.updated_at = now

        if store.id:
            fields = store.to_fields()
            fields.pop("createdAt", None)
            self.client.set_document(STORES_COLLECTION, store.id, fields, merge=True)
            logger.info("Updated store %s (%s)", store.id, store.name)
        else:
            store.created_at = now
            store.id = self.client.create_document(STORES_COLLECTION, store.to_fields())
            logger.info("Created store %s (%s)", store.id, store.name)

        return store
