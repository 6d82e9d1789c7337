"""
Remote service integrations.

Modules:
    firestore_client - REST client for the catalog document store
    firestore_codec - Typed value encoding for Firestore documents
    uploader - Image hosting uploads
"""

from .firestore_client import FirestoreClient, generate_document_id
from .uploader import RemoteAssetUploader

__all__ = [
    'FirestoreClient',
    'generate_document_id',
    'RemoteAssetUploader',
]
