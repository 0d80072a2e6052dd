"""Pattern Detection Service - Monthly cross-project commercial patterns."""

import logging
from typing import Dict, List, Optional

from commercial_intel.core.clock import Clock, utc_now
from commercial_intel.core.config import Settings, get_settings, tenant_path, ORGS_COLLECTION
from commercial_intel.core.database import DocumentStore
from commercial_intel.intelligence import evaluate_financials, build_pattern_candidates
from commercial_intel.models import (
    CommercialPattern,
    FinancialRecord,
    OrgStatus,
    PatternCandidate,
    PatternJobResult,
    PatternStatus,
    Project,
    ProjectStatus,
    RiskRecord,
)

logger = logging.getLogger(__name__)

SYSTEM_ACTOR = "system"


class PatternAggregator:
    """
    Scans completed projects per tenant and writes draft commercial patterns.

    Tenants are processed one after another with no shared state. Patterns
    are written one document at a time; a failure part way through a tenant
    leaves the patterns already written in place.
    """

    def __init__(
        self,
        store: DocumentStore,
        settings: Optional[Settings] = None,
        clock: Clock = utc_now
    ):
        self.store = store
        self.settings = settings or get_settings()
        self.clock = clock

    async def run(self) -> PatternJobResult:
        """
        Scheduled entry point: process every active tenant.

        By default the first tenant failure propagates to the scheduler and
        stops the run. With ``PATTERN_JOB_ISOLATE_TENANT_FAILURES`` the
        failure is logged and the run moves to the next tenant.
        """
        orgs = await self.store.query(ORGS_COLLECTION, filters={"status": OrgStatus.ACTIVE.value})
        logger.info(f"Pattern detection started for {len(orgs)} active orgs")

        result = PatternJobResult()
        for org in orgs:
            org_id = org["id"]
            if not self.settings.PATTERN_JOB_ISOLATE_TENANT_FAILURES:
                patterns = await self.identify_patterns_for_org(org_id)
            else:
                try:
                    patterns = await self.identify_patterns_for_org(org_id)
                except Exception:
                    logger.exception(f"Pattern detection failed for org {org_id}")
                    result.failed_orgs.append(org_id)
                    continue

            result.orgs_processed += 1
            result.patterns_created += len(patterns)

        logger.info(
            f"Pattern detection finished: {result.orgs_processed} orgs, "
            f"{result.patterns_created} patterns, {len(result.failed_orgs)} failed"
        )
        return result

    async def identify_patterns_for_org(self, org_id: str) -> List[CommercialPattern]:
        """
        Aggregate completed projects of one tenant into patterns.

        Steps:
        1. Load completed projects
        2. Evaluate each project's financial record and bucket its risks
        3. Apply the threshold tiers
        4. Write one draft pattern per qualifying candidate

        Returns:
            The stored patterns
        """
        projects = await self.store.query(
            tenant_path(org_id, "projects"),
            filters={"status": ProjectStatus.COMPLETED.value}
        )

        weak_margin_projects: List[str] = []
        scope_creep_projects: List[str] = []
        risk_categories: Dict[str, List[str]] = {}

        for project in (Project.model_validate(p) for p in projects):
            project_id = project.id

            financials = await self.store.query(
                tenant_path(org_id, "projects", project_id, "financials"),
                limit=1
            )
            financial = FinancialRecord.model_validate(financials[0]) if financials else None
            flags = evaluate_financials(
                financial,
                weak_margin_threshold=self.settings.WEAK_MARGIN_PERCENT,
                scope_creep_ratio=self.settings.SCOPE_CREEP_RATIO
            )
            if flags.weak_margin:
                weak_margin_projects.append(project_id)
            if flags.scope_creep:
                scope_creep_projects.append(project_id)

            risks = await self.store.query(tenant_path(org_id, "projects", project_id, "risks"))
            for risk in risks:
                category = RiskRecord.model_validate(risk).get_category()
                bucket = risk_categories.setdefault(category, [])
                # A project counts once per category
                if project_id not in bucket:
                    bucket.append(project_id)

        candidates = build_pattern_candidates(
            total_projects=len(projects),
            weak_margin_projects=weak_margin_projects,
            scope_creep_projects=scope_creep_projects,
            risk_categories=risk_categories,
            example_limit=self.settings.PATTERN_EXAMPLE_LIMIT,
            weak_margin_threshold=self.settings.WEAK_MARGIN_PERCENT,
            scope_creep_ratio=self.settings.SCOPE_CREEP_RATIO
        )

        patterns = []
        for candidate in candidates:
            patterns.append(await self._save_pattern(org_id, candidate))

        logger.info(f"Patterns saved for org {org_id}: {len(patterns)}")
        return patterns

    async def _save_pattern(self, org_id: str, candidate: PatternCandidate) -> CommercialPattern:
        pattern = CommercialPattern(
            **candidate.model_dump(),
            org_id=org_id,
            status=PatternStatus.DRAFT,
            created_by=SYSTEM_ACTOR,
            created_at=self.clock(),
        )
        pattern_id = await self.store.create(
            tenant_path(org_id, "commercialPatterns"),
            pattern.model_dump(mode="json", by_alias=True, exclude_none=True)
        )
        pattern.id = pattern_id
        return pattern
