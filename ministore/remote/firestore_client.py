"""
Firestore REST Client

Client for the Cloud Firestore REST API (v1) used as the catalog's
document store. Handles authentication, rate limiting, retries on
throttling and server errors, and translation of failures into
PersistenceError.
"""

import logging
import secrets
import string
import time
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, List, Optional, Tuple

import requests

from ..common.errors import PersistenceError
from .firestore_codec import decode_fields, document_id, encode_fields, encode_value

logger = logging.getLogger(__name__)

_AUTO_ID_ALPHABET = string.ascii_letters + string.digits


def generate_document_id(length: int = 20) -> str:
    """Random id in the same shape as Firestore auto ids."""
    return ''.join(secrets.choice(_AUTO_ID_ALPHABET) for _ in range(length))


def retry_delay(retry_after: Optional[str], attempt: int) -> int:
    """
    Seconds to wait before the next attempt.

    Retry-After may be delta-seconds or an HTTP date. Missing or
    unparseable values fall back to exponential backoff.

    Example:
        >>> retry_delay("3", 0)
        3
        >>> retry_delay(None, 2)
        4
    """
    backoff = 2 ** attempt
    if not retry_after:
        return backoff
    try:
        return max(0, int(retry_after))
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(retry_after)
    except (TypeError, ValueError):
        return backoff
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max(0, int((when - datetime.now(timezone.utc)).total_seconds()))


class FirestoreClient:
    """
    Client for one Firestore database.

    Handles:
    - Authentication (API key and optional user ID token)
    - Rate limiting (5 requests/second)
    - Retries on 429/5xx
    - Explicit per-request timeouts

    Usage:
        client = FirestoreClient(project_id="ministore-demo", api_key="AIza...")

        doc_id = client.create_document("products", {"name": "Shirt", "price": 200})
        fields = client.get_document("products", doc_id)
        matches = client.query_equal("products", "storeId", "store-1")
    """

    BASE_URL = "https://firestore.googleapis.com/v1"
    MAX_RETRIES = 4
    RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

    def __init__(
        self,
        project_id: str,
        api_key: str = "",
        id_token: str = "",
        database: str = "(default)",
        timeout: float = 30.0,
    ):
        """
        Initialize the client.

        Args:
            project_id: Google Cloud project id
            api_key: Web API key (sent as ?key=)
            id_token: Signed-in user's ID token (sent as Bearer), optional
            database: Database id
            timeout: Request timeout in seconds
        """
        if not project_id:
            raise ValueError("Firestore project_id is required")

        self.project_id = project_id
        self.api_key = api_key
        self.timeout = timeout
        self.database_path = f"projects/{project_id}/databases/{database}"
        self.documents_url = f"{self.BASE_URL}/{self.database_path}/documents"

        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if id_token:
            self.session.headers["Authorization"] = f"Bearer {id_token}"

        # Rate limiting
        self.requests_made = 0
        self.last_request_time = 0.0
        self.min_request_interval = 0.2  # 5 req/sec

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def _rate_limit(self):
        """Implement rate limiting (5 requests/second max)."""
        now = time.time()
        elapsed = now - self.last_request_time

        if elapsed < self.min_request_interval:
            time.sleep(self.min_request_interval - elapsed)

        self.last_request_time = time.time()
        self.requests_made += 1

    def _request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict] = None,
        allow_missing: bool = False,
        conflict_ok_on_retry: bool = False,
    ) -> Optional[Any]:
        """
        Make a request with rate limiting and retries.

        Args:
            method: HTTP method
            url: Full URL
            params: Query parameters (API key is added automatically)
            data: JSON body
            allow_missing: Return None instead of raising on 404
            conflict_ok_on_retry: Treat 409 on a retried attempt as success
                (a create whose first attempt reached the server)

        Returns:
            Parsed JSON body ({} for empty bodies) or None for an allowed 404

        Raises:
            PersistenceError: On HTTP errors, transport failures or exhausted retries
        """
        query = dict(params or {})
        if self.api_key:
            query["key"] = self.api_key

        for attempt in range(self.MAX_RETRIES):
            self._rate_limit()

            try:
                response = self.session.request(
                    method, url, params=query, json=data, timeout=self.timeout
                )
            except requests.exceptions.Timeout as e:
                logger.error("Firestore timeout: %s %s", method, url)
                raise PersistenceError(f"Request timed out: {method} {url}") from e
            except requests.exceptions.RequestException as e:
                logger.error("Firestore request failed: %s", e)
                raise PersistenceError(f"Request failed: {e}") from e

            # Retry on rate limiting or server errors
            if response.status_code in self.RETRYABLE_STATUS_CODES:
                if attempt == self.MAX_RETRIES - 1:
                    logger.warning("HTTP %d on %s, no retries left",
                                   response.status_code, method)
                    break
                retry_after = retry_delay(response.headers.get("Retry-After"), attempt)
                logger.warning("HTTP %d on %s, retry %d/%d in %ds...",
                               response.status_code, method, attempt + 1,
                               self.MAX_RETRIES, retry_after)
                time.sleep(retry_after)
                continue

            if response.status_code == 404 and allow_missing:
                return None

            if response.status_code == 409 and conflict_ok_on_retry and attempt > 0:
                logger.info("Document already created by an earlier attempt")
                return {}

            if response.status_code >= 400:
                error_msg = response.text[:200]
                logger.error("Firestore error %d: %s", response.status_code, error_msg)
                raise PersistenceError(
                    f"Firestore error {response.status_code}: {error_msg}",
                    status_code=response.status_code,
                )

            if not response.content:
                return {}
            try:
                return response.json()
            except ValueError as e:
                logger.error("Firestore returned a non-JSON body (HTTP %d): %s",
                             response.status_code, response.text[:200])
                raise PersistenceError(
                    f"Invalid response from Firestore (HTTP {response.status_code})",
                    status_code=response.status_code,
                ) from e

        logger.error("Max retries (%d) exceeded for %s %s", self.MAX_RETRIES, method, url)
        raise PersistenceError(f"Max retries exceeded for {method} {url}")

    # ── Document operations ──────────────────────────────────────────────────

    def create_document(
        self,
        collection: str,
        fields: Dict[str, Any],
        doc_id: Optional[str] = None,
    ) -> str:
        """
        Create a document.

        The id is generated client-side so a retried create cannot
        produce a duplicate.

        Returns:
            The new document id
        """
        doc_id = doc_id or generate_document_id()
        self._request(
            "POST",
            f"{self.documents_url}/{collection}",
            params={"documentId": doc_id},
            data={"fields": encode_fields(fields)},
            conflict_ok_on_retry=True,
        )
        logger.debug("Created %s/%s", collection, doc_id)
        return doc_id

    def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a document's fields, or None if it does not exist."""
        result = self._request(
            "GET", f"{self.documents_url}/{collection}/{doc_id}", allow_missing=True
        )
        if result is None:
            return None
        return decode_fields(result.get("fields", {}))

    def set_document(
        self,
        collection: str,
        doc_id: str,
        fields: Dict[str, Any],
        merge: bool = False,
    ) -> None:
        """
        Create or overwrite a document.

        With merge=True only the given fields are written and any other
        fields already on the document are kept.
        """
        params = {"updateMask.fieldPaths": list(fields)} if merge else None
        self._request(
            "PATCH",
            f"{self.documents_url}/{collection}/{doc_id}",
            params=params,
            data={"fields": encode_fields(fields)},
        )

    def delete_document(self, collection: str, doc_id: str) -> None:
        """Delete a document. Deleting a missing document is not an error."""
        self._request("DELETE", f"{self.documents_url}/{collection}/{doc_id}")

    def query_equal(
        self,
        collection: str,
        field: str,
        value: Any,
        limit: Optional[int] = None,
    ) -> List[Tuple[str, Dict[str, Any]]]:
        """
        Run an equality query on one field.

        Returns:
            List of (document id, fields) in server order
        """
        structured_query: Dict[str, Any] = {
            "from": [{"collectionId": collection}],
            "where": {
                "fieldFilter": {
                    "field": {"fieldPath": field},
                    "op": "EQUAL",
                    "value": encode_value(value),
                }
            },
        }
        if limit:
            structured_query["limit"] = limit

        result = self._request(
            "POST",
            f"{self.documents_url}:runQuery",
            data={"structuredQuery": structured_query},
        )

        documents = []
        for entry in result or []:
            doc = entry.get("document")
            if not doc:
                continue
            documents.append((document_id(doc["name"]), decode_fields(doc.get("fields", {}))))

        logger.debug("Query %s.%s == %r: %d documents", collection, field, value, len(documents))
        return documents
