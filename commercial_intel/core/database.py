"""Tenant-partitioned document store backed by Supabase."""

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from functools import lru_cache
from typing import Optional, Dict, Any, List
from supabase import create_client, Client
from supabase.lib.client_options import ClientOptions

from commercial_intel.core.config import get_settings
from commercial_intel.core.errors import DocumentStoreError

logger = logging.getLogger(__name__)


class DocumentStore(ABC):
    """
    Document database contract used by every service.

    Paths are collection paths such as ``orgs/o1/projects/p1/risks``.
    Documents are plain JSON dicts and always carry their ``id``.
    """

    @abstractmethod
    async def get(self, path: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Fetch one document, or None when absent."""

    @abstractmethod
    async def query(
        self,
        path: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        List documents matching all equality filters.

        With ``order_by``, documents lacking that field are left out.
        """

    @abstractmethod
    async def create(self, path: str, data: Dict[str, Any]) -> str:
        """Create a document with a generated id and return the id."""

    @abstractmethod
    async def set(self, path: str, doc_id: str, data: Dict[str, Any]) -> None:
        """Create or replace a document under a caller-chosen id."""

    @abstractmethod
    async def update(self, path: str, doc_id: str, fields: Dict[str, Any]) -> None:
        """Merge top-level fields into an existing document in one write."""

    async def health_check(self) -> bool:
        """Check connectivity to the backing database."""
        return True


def generate_document_id() -> str:
    """Generate a random document id."""
    return uuid.uuid4().hex


class SupabaseDocumentStore(DocumentStore):
    """
    Document store over a single Supabase table.

    Each row is ``(collection, id, data, created_at, updated_at)`` where
    ``data`` is JSONB. Equality filters use JSONB containment so booleans and
    numbers compare with their JSON types. Updates go through the
    ``merge_function`` Postgres function (see README) so the merge is a single
    statement.
    """

    def __init__(
        self,
        client: Optional[Client] = None,
        table_name: Optional[str] = None,
        merge_function: Optional[str] = None
    ):
        settings = get_settings()
        self._client = client
        self.table_name = table_name or settings.SUPABASE_DOCUMENTS_TABLE
        self.merge_function = merge_function or settings.SUPABASE_MERGE_FUNCTION

    @property
    def client(self) -> Client:
        """Lazy initialization of Supabase client."""
        if self._client is None:
            settings = get_settings()
            if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
                raise ValueError("Supabase credentials not configured")

            self._client = create_client(
                settings.SUPABASE_URL,
                settings.SUPABASE_KEY,
                options=ClientOptions(
                    postgrest_client_timeout=30,
                    storage_client_timeout=30
                )
            )
            logger.info("Supabase client initialized")
        return self._client

    def _table(self):
        return self.client.table(self.table_name)

    @staticmethod
    def _to_document(row: Dict[str, Any]) -> Dict[str, Any]:
        document = dict(row.get("data") or {})
        document["id"] = row["id"]
        return document

    # ===========================================
    # Read Operations
    # ===========================================

    async def get(self, path: str, doc_id: str) -> Optional[Dict[str, Any]]:
        try:
            response = (
                self._table()
                .select("id, data")
                .eq("collection", path)
                .eq("id", doc_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to get {path}/{doc_id}: {e}")
            raise DocumentStoreError(f"get {path}/{doc_id} failed") from e

        if response.data:
            return self._to_document(response.data[0])
        return None

    async def query(
        self,
        path: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        try:
            request = self._table().select("id, data").eq("collection", path)
            if filters:
                request = request.contains("data", filters)
            if order_by:
                # DESC would put nulls first
                request = (
                    request.not_.is_(f"data->>{order_by}", "null")
                    .order(f"data->>{order_by}", desc=descending)
                )
            if limit is not None:
                request = request.limit(limit)
            response = request.execute()
        except Exception as e:
            logger.error(f"Failed to query {path} with {filters}: {e}")
            raise DocumentStoreError(f"query {path} failed") from e

        return [self._to_document(row) for row in response.data or []]

    # ===========================================
    # Write Operations
    # ===========================================

    async def create(self, path: str, data: Dict[str, Any]) -> str:
        doc_id = generate_document_id()
        await self.set(path, doc_id, {**data, "id": doc_id})
        return doc_id

    async def set(self, path: str, doc_id: str, data: Dict[str, Any]) -> None:
        # created_at is filled by the column default on insert only
        row = {
            "collection": path,
            "id": doc_id,
            "data": {**data, "id": doc_id},
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            self._table().upsert(row, on_conflict="collection,id").execute()
        except Exception as e:
            logger.error(f"Failed to set {path}/{doc_id}: {e}")
            raise DocumentStoreError(f"set {path}/{doc_id} failed") from e

        logger.debug(f"Stored {path}/{doc_id}")

    async def update(self, path: str, doc_id: str, fields: Dict[str, Any]) -> None:
        # Merged in Postgres as data || fields
        try:
            response = self.client.rpc(self.merge_function, {
                "p_collection": path,
                "p_id": doc_id,
                "p_fields": fields,
            }).execute()
        except Exception as e:
            logger.error(f"Failed to update {path}/{doc_id}: {e}")
            raise DocumentStoreError(f"update {path}/{doc_id} failed") from e

        if not response.data:
            raise DocumentStoreError(f"update {path}/{doc_id} failed: document missing")

        logger.info(f"Updated {path}/{doc_id}: {list(fields.keys())}")

    # ===========================================
    # Health Check
    # ===========================================

    async def health_check(self) -> bool:
        """Check database connectivity."""
        try:
            self._table().select("id").limit(1).execute()
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False


@lru_cache()
def get_document_store() -> DocumentStore:
    """Get the process-wide Supabase document store (FastAPI dependency)."""
    return SupabaseDocumentStore()
