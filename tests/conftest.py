"""Pytest fixtures and configuration for Commercial Intelligence tests."""

import copy
import os
import pytest
from datetime import datetime, timezone
from typing import Any, Dict, Generator, List, Optional, Set
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

# Set test environment variables before importing app
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-key")
os.environ.setdefault("SCHEDULER_TOKEN", "scheduler-test-token")
os.environ.setdefault("DEBUG", "true")

from commercial_intel.core.auth import CallerIdentity, get_caller  # noqa: E402
from commercial_intel.core.config import Settings, tenant_path  # noqa: E402
from commercial_intel.core.database import (  # noqa: E402
    DocumentStore,
    generate_document_id,
    get_document_store,
)
from commercial_intel.core.errors import DocumentStoreError  # noqa: E402


FIXED_NOW = datetime(2026, 10, 19, 8, 0, 0, tzinfo=timezone.utc)


# ===========================================
# In-Memory Document Store
# ===========================================

class InMemoryDocumentStore(DocumentStore):
    """
    Dict-backed DocumentStore for tests.

    ``fail_paths`` makes any read or write under a path prefix raise
    DocumentStoreError, to exercise failure propagation.
    """

    def __init__(self):
        self.collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.fail_paths: Set[str] = set()
        self.writes: List[tuple] = []

    def _check(self, path: str) -> None:
        for prefix in self.fail_paths:
            if path.startswith(prefix):
                raise DocumentStoreError(f"simulated failure on {path}")

    def seed(self, path: str, doc_id: str, data: Dict[str, Any]) -> None:
        """Insert a document without recording a write."""
        self.collections.setdefault(path, {})[doc_id] = {**copy.deepcopy(data), "id": doc_id}

    def documents(self, path: str) -> List[Dict[str, Any]]:
        return [copy.deepcopy(d) for d in self.collections.get(path, {}).values()]

    async def get(self, path: str, doc_id: str) -> Optional[Dict[str, Any]]:
        self._check(path)
        document = self.collections.get(path, {}).get(doc_id)
        return copy.deepcopy(document) if document is not None else None

    async def query(
        self,
        path: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        self._check(path)
        results = [
            d for d in self.collections.get(path, {}).values()
            if all(d.get(key) == value for key, value in (filters or {}).items())
        ]
        if order_by:
            # Ordered queries leave out documents without the field
            results = sorted(
                (d for d in results if d.get(order_by) is not None),
                key=lambda d: d[order_by],
                reverse=descending
            )
        if limit is not None:
            results = results[:limit]
        return [copy.deepcopy(d) for d in results]

    async def create(self, path: str, data: Dict[str, Any]) -> str:
        doc_id = generate_document_id()
        await self.set(path, doc_id, data)
        return doc_id

    async def set(self, path: str, doc_id: str, data: Dict[str, Any]) -> None:
        self._check(path)
        self.writes.append(("set", path, doc_id))
        self.collections.setdefault(path, {})[doc_id] = {**copy.deepcopy(data), "id": doc_id}

    async def update(self, path: str, doc_id: str, fields: Dict[str, Any]) -> None:
        self._check(path)
        document = self.collections.get(path, {}).get(doc_id)
        if document is None:
            raise DocumentStoreError(f"update {path}/{doc_id} failed: document missing")
        self.writes.append(("update", path, doc_id))
        document.update(copy.deepcopy(fields))


# ===========================================
# Store & Settings Fixtures
# ===========================================

@pytest.fixture
def store() -> InMemoryDocumentStore:
    """Empty in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def settings() -> Settings:
    """Settings with default heuristics and a known scheduler token."""
    return Settings(
        SUPABASE_URL="https://test.supabase.co",
        SUPABASE_KEY="test-key",
        SCHEDULER_TOKEN="scheduler-test-token",
    )


@pytest.fixture
def fixed_clock():
    """Clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


# ===========================================
# Sample Data Fixtures
# ===========================================

def add_member(store: InMemoryDocumentStore, org_id: str, uid: str, role: str) -> None:
    store.seed(tenant_path(org_id, "members"), uid, {"role": role, "email": f"{uid}@example.com"})


def add_completed_project(
    store: InMemoryDocumentStore,
    org_id: str,
    project_id: str,
    financial: Optional[Dict[str, Any]] = None,
    risk_categories: Optional[List[Optional[str]]] = None,
    status: str = "completed"
) -> None:
    store.seed(tenant_path(org_id, "projects"), project_id, {"name": project_id, "status": status})
    if financial is not None:
        store.seed(tenant_path(org_id, "projects", project_id, "financials"), f"fin-{project_id}", financial)
    for index, category in enumerate(risk_categories or []):
        risk = {"title": f"risk {index}"}
        if category is not None:
            risk["category"] = category
        store.seed(tenant_path(org_id, "projects", project_id, "risks"), f"risk-{project_id}-{index}", risk)


@pytest.fixture
def org_with_members(store: InMemoryDocumentStore) -> str:
    """Active org with one member per role."""
    org_id = "org_acme"
    store.seed("orgs", org_id, {"name": "Acme Consulting", "status": "active"})
    add_member(store, org_id, "user_admin", "admin")
    add_member(store, org_id, "user_staff", "staff")
    add_member(store, org_id, "user_client", "client")
    return org_id


@pytest.fixture
def sample_proposal() -> Dict[str, Any]:
    """Stored proposal document with allowlisted and extra fields."""
    return {
        "title": "Operating Model Redesign",
        "executiveSummary": "Redesign the delivery operating model.",
        "diagnosis": "Handoffs between sales and delivery lose context.",
        "scope": "Discovery, design and pilot.",
        "methodology": "Three two-week sprints.",
        "deliverables": [
            {"name": "Current state map", "description": "As-is process map", "acceptanceCriteria": ["Signed off"]}
        ],
        "timeline": {"estimatedDuration": 6, "milestones": [{"name": "Pilot", "description": "Pilot live", "dueOffset": 30}]},
        "pricing": {"currency": "GBP", "totalAmount": 24000, "lineItems": [{"name": "Discovery", "amount": 8000}]},
        "assumptions": ["Client provides SME access"],
        "terms": "50% deposit, balance on completion.",
        "status": "draft",
        "locked": False,
        "internalNotes": "Discounted for referral",
        "clientId": "client_42",
    }


# ===========================================
# Client Fixtures
# ===========================================

@pytest.fixture
def caller_holder() -> Dict[str, Optional[CallerIdentity]]:
    """Mutable holder so tests can switch the authenticated caller."""
    return {"caller": None}


@pytest.fixture
def client(store, caller_holder) -> Generator[TestClient, None, None]:
    """Test client on the in-memory store with an overridable caller."""
    from commercial_intel.main import app

    app.dependency_overrides[get_document_store] = lambda: store
    app.dependency_overrides[get_caller] = lambda: caller_holder["caller"]
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def mock_supabase_client() -> MagicMock:
    """Mock Supabase client with chainable table queries."""
    client = MagicMock()
    table = client.table.return_value
    for method in ("select", "eq", "contains", "is_", "order", "limit", "update", "upsert"):
        getattr(table, method).return_value = table
    table.not_ = table
    table.execute.return_value.data = []
    client.rpc.return_value.execute.return_value.data = True
    return client


def login(caller_holder: Dict[str, Optional[CallerIdentity]], uid: str) -> None:
    caller_holder["caller"] = CallerIdentity(uid=uid)


# ===========================================
# Pytest Configuration
# ===========================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
