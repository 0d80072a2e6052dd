"""Tests for access-gated actions and tenant role checks."""

import pytest

from commercial_intel.core.auth import CallerIdentity
from commercial_intel.core.config import tenant_path
from commercial_intel.core.errors import PermissionDenied, Unauthenticated
from commercial_intel.models import ActionRequest, Role
from commercial_intel.services import GATED_ACTIONS, GatedActionService, get_action
from commercial_intel.services.access import get_member_role, require_member_role

from conftest import add_member, login


class TestRoles:
    """Tests for the role ordering."""

    def test_declaration_order(self):
        """public < client < staff < admin."""
        assert Role.PUBLIC < Role.CLIENT < Role.STAFF < Role.ADMIN
        assert Role.ADMIN >= Role.STAFF
        assert not Role.CLIENT >= Role.STAFF

    def test_at_least(self):
        """Allow-sets are upward closed."""
        assert Role.at_least(Role.STAFF) == {Role.STAFF, Role.ADMIN}
        assert Role.at_least(Role.PUBLIC) == set(Role)


class TestAccess:
    """Tests for tenant membership checks."""

    @pytest.mark.asyncio
    async def test_unknown_role_is_not_a_member(self, store, org_with_members):
        """Roles outside the enum do not grant access."""
        add_member(store, org_with_members, "user_odd", "owner")

        assert await get_member_role(store, org_with_members, "user_odd") is None
        assert await get_member_role(store, org_with_members, "user_admin") == Role.ADMIN

    @pytest.mark.asyncio
    async def test_membership_is_per_tenant(self, store, org_with_members):
        """Admin of one tenant has no role in another."""
        caller = CallerIdentity(uid="user_admin")

        with pytest.raises(PermissionDenied):
            await require_member_role(store, caller, "org_other", {Role.STAFF, Role.ADMIN})

    @pytest.mark.asyncio
    async def test_anonymous_caller(self, store, org_with_members):
        """No caller is unauthenticated before any lookup."""
        with pytest.raises(Unauthenticated):
            await require_member_role(store, None, org_with_members, {Role.ADMIN})


class TestGatedActionService:
    """Tests for the action pipeline at the service level."""

    def test_registered_actions(self):
        """All four actions are registered."""
        assert set(GATED_ACTIONS) == {
            "acknowledge-ai-output",
            "acknowledge-operating-summary",
            "approve-commercial-pattern",
            "reject-commercial-pattern",
        }

    @pytest.mark.asyncio
    async def test_stamps_actor_and_time(self, store, org_with_members, fixed_clock):
        """Fixed updates are written with the caller and server time."""
        store.seed(tenant_path(org_with_members, "aiExecutions"), "exec1", {"humanReviewed": False})
        service = GatedActionService(store, clock=fixed_clock)

        response = await service.perform(
            get_action("acknowledge-ai-output"),
            CallerIdentity(uid="user_staff"),
            ActionRequest(org_id=org_with_members, target_id="exec1"),
        )

        assert response.acknowledged is True
        execution = store.documents(tenant_path(org_with_members, "aiExecutions"))[0]
        assert execution["humanReviewed"] is True
        assert execution["humanReviewedBy"] == "user_staff"
        assert execution["humanReviewedAt"] == "2026-10-19T08:00:00+00:00"

        audit = store.documents(tenant_path(org_with_members, "auditLogs"))[0]
        assert audit["eventType"] == "acknowledge_ai_output"
        assert audit["targetType"] == "ai_execution"
        assert audit["metadata"] == {"humanReviewed": True}

    @pytest.mark.asyncio
    async def test_denied_caller_writes_nothing(self, store, org_with_members):
        """A role failure leaves the target untouched."""
        store.seed(tenant_path(org_with_members, "operatingSummaries"), "sum1", {"isFinalized": False})

        with pytest.raises(PermissionDenied) as exc_info:
            await GatedActionService(store).perform(
                get_action("acknowledge-operating-summary"),
                CallerIdentity(uid="user_client"),
                ActionRequest(org_id=org_with_members, target_id="sum1"),
            )

        assert exc_info.value.message == "staff/admin only"
        assert store.writes == []


class TestActionEndpoints:
    """Tests for POST /actions/{action}."""

    def test_unauthenticated(self, client, org_with_members):
        """No caller returns 401."""
        response = client.post(
            "/actions/acknowledge-ai-output",
            json={"orgId": org_with_members, "targetId": "exec1"}
        )

        assert response.status_code == 401
        assert response.json() == {"error": "unauthenticated", "message": "Must be authenticated"}

    @pytest.mark.parametrize("payload", [{}, {"orgId": "org_acme"}, {"targetId": "exec1"}, {"orgId": "", "targetId": "x"}])
    def test_missing_fields(self, client, caller_holder, org_with_members, payload):
        """orgId and targetId are both required."""
        login(caller_holder, "user_staff")

        response = client.post("/actions/acknowledge-ai-output", json=payload)

        assert response.status_code == 400
        assert response.json()["message"] == "orgId and targetId required"

    def test_empty_body(self, client, caller_holder, org_with_members):
        """A missing body is treated as missing fields."""
        login(caller_holder, "user_staff")

        response = client.post("/actions/acknowledge-ai-output")

        assert response.status_code == 400

    def test_client_role_denied(self, client, caller_holder, store, org_with_members):
        """Client members may not acknowledge."""
        store.seed(tenant_path(org_with_members, "aiExecutions"), "exec1", {"humanReviewed": False})
        login(caller_holder, "user_client")

        response = client.post(
            "/actions/acknowledge-ai-output",
            json={"orgId": org_with_members, "targetId": "exec1"}
        )

        assert response.status_code == 403
        assert response.json()["error"] == "permission-denied"
        assert store.documents(tenant_path(org_with_members, "aiExecutions"))[0]["humanReviewed"] is False

    def test_non_member_denied(self, client, caller_holder, org_with_members):
        """Callers with no membership document are denied."""
        login(caller_holder, "user_stranger")

        response = client.post(
            "/actions/acknowledge-ai-output",
            json={"orgId": org_with_members, "targetId": "exec1"}
        )

        assert response.status_code == 403

    def test_missing_target(self, client, caller_holder, org_with_members):
        """Unknown targets return 404 with the action's message."""
        login(caller_holder, "user_staff")

        response = client.post(
            "/actions/acknowledge-ai-output",
            json={"orgId": org_with_members, "targetId": "missing"}
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Execution log not found"

    def test_staff_acknowledges_operating_summary(self, client, caller_holder, store, org_with_members):
        """Staff can finalize an operating summary."""
        store.seed(tenant_path(org_with_members, "operatingSummaries"), "sum1", {"isFinalized": False})
        login(caller_holder, "user_staff")

        response = client.post(
            "/actions/acknowledge-operating-summary",
            json={"orgId": org_with_members, "targetId": "sum1"}
        )

        assert response.status_code == 200
        assert response.json() == {"acknowledged": True}
        summary = store.documents(tenant_path(org_with_members, "operatingSummaries"))[0]
        assert summary["isFinalized"] is True
        assert summary["acknowledgedBy"] == "user_staff"
        assert "acknowledgedAt" in summary

    def test_pattern_review_is_admin_only(self, client, caller_holder, store, org_with_members):
        """Staff cannot approve patterns; admins can."""
        patterns = tenant_path(org_with_members, "commercialPatterns")
        store.seed(patterns, "pat1", {"status": "draft"})
        body = {"orgId": org_with_members, "targetId": "pat1"}

        login(caller_holder, "user_staff")
        denied = client.post("/actions/approve-commercial-pattern", json=body)

        login(caller_holder, "user_admin")
        approved = client.post("/actions/approve-commercial-pattern", json=body)

        assert denied.status_code == 403
        assert denied.json()["message"] == "admin only"
        assert approved.status_code == 200
        pattern = store.documents(patterns)[0]
        assert pattern["status"] == "approved"
        assert pattern["reviewedBy"] == "user_admin"

    def test_admin_rejects_pattern(self, client, caller_holder, store, org_with_members):
        """Rejection sets the rejected status."""
        patterns = tenant_path(org_with_members, "commercialPatterns")
        store.seed(patterns, "pat1", {"status": "draft"})
        login(caller_holder, "user_admin")

        response = client.post(
            "/actions/reject-commercial-pattern",
            json={"orgId": org_with_members, "targetId": "pat1"}
        )

        assert response.status_code == 200
        assert store.documents(patterns)[0]["status"] == "rejected"

    def test_unknown_action(self, client, caller_holder):
        """Unregistered action names return 404."""
        login(caller_holder, "user_admin")

        response = client.post("/actions/delete-everything", json={"orgId": "o", "targetId": "t"})

        assert response.status_code == 404
        assert response.json()["message"] == "Unknown action: delete-everything"
