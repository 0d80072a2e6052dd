"""Core module - Configuration, storage, identity and errors."""

from commercial_intel.core.config import get_settings, Settings, tenant_path
from commercial_intel.core.database import DocumentStore, SupabaseDocumentStore, get_document_store
from commercial_intel.core.errors import (
    ServiceError,
    Unauthenticated,
    PermissionDenied,
    InvalidArgument,
    NotFound,
    DocumentStoreError,
)

__all__ = [
    "get_settings",
    "Settings",
    "tenant_path",
    "DocumentStore",
    "SupabaseDocumentStore",
    "get_document_store",
    "ServiceError",
    "Unauthenticated",
    "PermissionDenied",
    "InvalidArgument",
    "NotFound",
    "DocumentStoreError",
]
