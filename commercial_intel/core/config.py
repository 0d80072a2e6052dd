"""Configuration management for the Commercial Intelligence service."""

from functools import lru_cache
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ===========================================
    # Supabase Configuration
    # ===========================================
    SUPABASE_URL: str = Field(default="", description="Supabase project URL")
    SUPABASE_KEY: str = Field(default="", description="Supabase service role key")
    SUPABASE_DOCUMENTS_TABLE: str = Field(
        default="documents",
        description="Table holding tenant documents as JSONB"
    )
    SUPABASE_MERGE_FUNCTION: str = Field(
        default="merge_document_fields",
        description="Postgres function merging fields into a document's data"
    )

    # ===========================================
    # Server Configuration
    # ===========================================
    DEBUG: bool = Field(default=True, description="Debug mode")
    SCHEDULER_TOKEN: str = Field(
        default="",
        description="Shared secret the scheduler sends to trigger jobs"
    )

    # ===========================================
    # Commercial Heuristics
    # ===========================================
    WEAK_MARGIN_PERCENT: float = Field(
        default=20.0,
        description="Estimated margin below this percentage is weak"
    )
    SCOPE_CREEP_RATIO: float = Field(
        default=0.3,
        description="Additional scope above this share of quoted value is scope creep"
    )

    # ===========================================
    # Pattern Detection Job
    # ===========================================
    PATTERN_EXAMPLE_LIMIT: int = Field(
        default=10,
        description="Maximum project ids stored as pattern examples"
    )
    PATTERN_JOB_ISOLATE_TENANT_FAILURES: bool = Field(
        default=False,
        description="Log and skip a failing tenant instead of aborting the run"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# ===========================================
# Document Paths
# ===========================================
# All tenant data lives under orgs/{orgId}/...

ORGS_COLLECTION = "orgs"


def tenant_path(org_id: str, *segments: str) -> str:
    """
    Build a collection path scoped under a tenant.

    Args:
        org_id: Tenant identifier
        segments: Alternating collection names and document ids

    Returns:
        Slash-joined path, e.g. ``orgs/o1/projects/p1/risks``
    """
    if not org_id:
        raise ValueError("org_id is required for tenant-scoped paths")
    return "/".join((ORGS_COLLECTION, org_id) + tuple(segments))


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
