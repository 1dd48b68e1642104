# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for PartnerSession and PartnerContextService.

Tests cover:
- Setting, clearing and restoring the active context
- Keeping the previous context when activation fails
- Reacting to admin edits of the active College
- Resolving contexts from the entity store
"""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from partnerhub.domains.hierarchy import CollegeNotFoundError, HierarchyService
from partnerhub.domains.partner import (
    PartnerContextService,
    PartnerNotEnabledError,
    PartnerSession,
    StaleReferenceError,
)
from partnerhub.infrastructure.repositories.memory import InMemoryStore
from partnerhub.models import (
    BranchCreateRequest,
    CollegeCreateRequest,
    CollegeUpdateRequest,
    UniversityCreateRequest,
)


@pytest.fixture
def session() -> PartnerSession:
    return PartnerSession(user_id="learner-1")


@pytest.fixture
def mock_store():
    """Create mock context persistence hook."""
    store = AsyncMock()
    store.load = AsyncMock(return_value=None)
    store.save = AsyncMock()
    store.clear = AsyncMock()
    return store


class TestPartnerSession:
    """Tests for PartnerSession."""

    def test_starts_outside_partner_mode(self, session: PartnerSession) -> None:
        assert session.partner_context is None
        assert session.is_partner_mode is False

    @pytest.mark.asyncio
    async def test_set_partner_college(self, session, partner_college, university, cse, ece) -> None:
        context = await session.set_partner_college(partner_college, university, [cse, ece])

        assert session.is_partner_mode is True
        assert session.partner_context is context
        assert context is not None
        assert context.branch_ids == [cse.id]

    @pytest.mark.asyncio
    async def test_set_none_clears(self, session, partner_college, university, cse) -> None:
        await session.set_partner_college(partner_college, university, [cse])

        result = await session.set_partner_college(None, None, [])

        assert result is None
        assert session.is_partner_mode is False

    @pytest.mark.asyncio
    async def test_failed_set_keeps_previous(self, session, partner_college, university, cse) -> None:
        """Test that a rejected College leaves the current context in place."""
        previous = await session.set_partner_college(partner_college, university, [cse])
        unpartnered = partner_college.model_copy(update={"id": "c2", "is_partnered": False})

        with pytest.raises(PartnerNotEnabledError):
            await session.set_partner_college(unpartnered, university, [cse])

        assert session.partner_context is previous

    @pytest.mark.asyncio
    async def test_stale_university_keeps_previous(
        self, session, partner_college, university, other_university, cse
    ) -> None:
        previous = await session.set_partner_college(partner_college, university, [cse])

        with pytest.raises(StaleReferenceError):
            await session.set_partner_college(partner_college, other_university, [cse])

        assert session.partner_context is previous

    @pytest.mark.asyncio
    async def test_clear_partner_context(self, session, partner_college, university, cse) -> None:
        await session.set_partner_college(partner_college, university, [cse])

        await session.clear_partner_context()

        assert session.partner_context is None

    @pytest.mark.asyncio
    async def test_store_receives_context(self, mock_store, partner_college, university, cse) -> None:
        session = PartnerSession(user_id="learner-1", store=mock_store)

        context = await session.set_partner_college(partner_college, university, [cse])
        await session.clear_partner_context()

        mock_store.save.assert_awaited_once_with("learner-1", context)
        mock_store.clear.assert_awaited_once_with("learner-1")

    @pytest.mark.asyncio
    async def test_store_failure_keeps_previous(self, mock_store, partner_college, university, cse) -> None:
        """Test that a failed save does not swap the held context."""
        mock_store.save.side_effect = RuntimeError("store unavailable")
        session = PartnerSession(user_id="learner-1", store=mock_store)

        with pytest.raises(RuntimeError):
            await session.set_partner_college(partner_college, university, [cse])

        assert session.partner_context is None

    @pytest.mark.asyncio
    async def test_restore(self, mock_store, partner_college, university, cse) -> None:
        saved = PartnerSession(user_id="learner-1")
        context = await saved.set_partner_college(partner_college, university, [cse])
        mock_store.load.return_value = context
        session = PartnerSession(user_id="learner-1", store=mock_store)

        restored = await session.restore()

        assert restored == context
        assert session.is_partner_mode is True
        mock_store.load.assert_awaited_once_with("learner-1")

    @pytest.mark.asyncio
    async def test_restore_without_saved_context(self, session) -> None:
        assert await session.restore() is None
        assert session.is_partner_mode is False

    @pytest.mark.asyncio
    async def test_notify_unpartnered_clears(self, session, partner_college, university, cse) -> None:
        await session.set_partner_college(partner_college, university, [cse])

        cleared = await session.notify_college_updated(
            partner_college.model_copy(update={"is_partnered": False})
        )

        assert cleared is True
        assert session.is_partner_mode is False

    @pytest.mark.asyncio
    async def test_notify_deactivated_clears(self, session, partner_college, university, cse) -> None:
        await session.set_partner_college(partner_college, university, [cse])

        cleared = await session.notify_college_updated(
            partner_college.model_copy(update={"is_active": False})
        )

        assert cleared is True

    @pytest.mark.asyncio
    async def test_notify_other_edit_keeps_context(self, session, partner_college, university, cse) -> None:
        """Test that a rename leaves the held context stale but active."""
        await session.set_partner_college(partner_college, university, [cse])

        cleared = await session.notify_college_updated(
            partner_college.model_copy(update={"name": "Renamed College"})
        )

        assert cleared is False
        assert session.partner_context is not None
        assert session.partner_context.college.name == "Sunrise Engineering College"

    @pytest.mark.asyncio
    async def test_notify_other_college_ignored(self, session, partner_college, university, cse) -> None:
        await session.set_partner_college(partner_college, university, [cse])

        cleared = await session.notify_college_updated(
            partner_college.model_copy(update={"id": "c-other", "is_partnered": False})
        )

        assert cleared is False
        assert session.is_partner_mode is True

    @pytest.mark.asyncio
    async def test_context_manager_clears_on_exit(self, partner_college, university, cse) -> None:
        async with PartnerSession(user_id="learner-1") as session:
            await session.set_partner_college(partner_college, university, [cse])
            assert session.is_partner_mode is True

        assert session.is_partner_mode is False


@pytest_asyncio.fixture
async def partner_setup(store: InMemoryStore) -> dict:
    """Create U1 with CSE and ECE and a partnered College offering CSE."""
    hierarchy = HierarchyService(store.universities, store.branches, store.colleges)
    u1 = await hierarchy.create_university(UniversityCreateRequest(name="U1", logo="https://cdn.example.com/u1.png"))
    cse = await hierarchy.create_branch(BranchCreateRequest(university_id=u1.id, name="CS", code="CSE"))
    ece = await hierarchy.create_branch(BranchCreateRequest(university_id=u1.id, name="EC", code="ECE"))
    college = await hierarchy.create_college(
        CollegeCreateRequest(
            university_id=u1.id, name="C1", offered_branches=[cse.id], is_partnered=True
        )
    )
    return {"hierarchy": hierarchy, "u1": u1, "cse": cse, "ece": ece, "college": college}


@pytest.fixture
def partner_service(store: InMemoryStore) -> PartnerContextService:
    return PartnerContextService(store.universities, store.branches, store.colleges)


class TestPartnerContextService:
    """Tests for PartnerContextService."""

    @pytest.mark.asyncio
    async def test_activate_college(self, partner_service, partner_setup, session) -> None:
        context = await partner_service.activate_college(session, partner_setup["college"].id)

        assert context.university.id == partner_setup["u1"].id
        assert context.branch_ids == [partner_setup["cse"].id]
        assert session.partner_context == context

    @pytest.mark.asyncio
    async def test_activate_missing_college(self, partner_service, session) -> None:
        with pytest.raises(CollegeNotFoundError):
            await partner_service.activate_college(session, "missing")

    @pytest.mark.asyncio
    async def test_activate_with_deleted_university(self, partner_service, partner_setup, session) -> None:
        await partner_setup["hierarchy"].delete_university(partner_setup["u1"].id)

        with pytest.raises(StaleReferenceError):
            await partner_service.activate_college(session, partner_setup["college"].id)

        assert session.is_partner_mode is False

    @pytest.mark.asyncio
    async def test_activate_unpartnered(self, partner_service, partner_setup, session) -> None:
        await partner_setup["hierarchy"].set_partnership(partner_setup["college"].id, False)

        with pytest.raises(PartnerNotEnabledError):
            await partner_service.activate_college(session, partner_setup["college"].id)

    @pytest.mark.asyncio
    async def test_refresh_picks_up_edits(self, partner_service, partner_setup, session) -> None:
        """Test that a refresh observes offerings changed after activation."""
        await partner_service.activate_college(session, partner_setup["college"].id)
        await partner_setup["hierarchy"].update_college(
            partner_setup["college"].id,
            CollegeUpdateRequest(offered_branches=[partner_setup["cse"].id, partner_setup["ece"].id]),
        )
        assert session.partner_context.branch_ids == [partner_setup["cse"].id]

        context = await partner_service.refresh(session)

        assert context is not None
        assert context.branch_ids == [partner_setup["cse"].id, partner_setup["ece"].id]

    @pytest.mark.asyncio
    async def test_refresh_outside_partner_mode(self, partner_service, session) -> None:
        assert await partner_service.refresh(session) is None

    @pytest.mark.asyncio
    async def test_refresh_after_partnership_revoked(self, partner_service, partner_setup, session) -> None:
        """Test that a revoked partnership takes the session out of partner mode."""
        college_id = partner_setup["college"].id
        await partner_service.activate_college(session, college_id)
        await partner_setup["hierarchy"].set_partnership(college_id, False)

        with pytest.raises(PartnerNotEnabledError):
            await partner_service.refresh(session)

        assert session.is_partner_mode is False
        assert session.partner_context is None

    @pytest.mark.asyncio
    async def test_refresh_after_deactivation(self, partner_service, partner_setup, session) -> None:
        await partner_service.activate_college(session, partner_setup["college"].id)
        await partner_setup["hierarchy"].deactivate_college(partner_setup["college"].id)

        with pytest.raises(PartnerNotEnabledError):
            await partner_service.refresh(session)

        assert session.is_partner_mode is False

    @pytest.mark.asyncio
    async def test_refresh_after_university_deleted(self, partner_service, partner_setup, session) -> None:
        await partner_service.activate_college(session, partner_setup["college"].id)
        await partner_setup["hierarchy"].delete_university(partner_setup["u1"].id)

        with pytest.raises(StaleReferenceError):
            await partner_service.refresh(session)

        assert session.is_partner_mode is False

    @pytest.mark.asyncio
    async def test_refresh_after_college_removed(self, partner_service, partner_setup, session, store) -> None:
        await partner_service.activate_college(session, partner_setup["college"].id)
        store.colleges.get = AsyncMock(return_value=None)

        with pytest.raises(CollegeNotFoundError):
            await partner_service.refresh(session)

        assert session.is_partner_mode is False

    @pytest.mark.asyncio
    async def test_refresh_clears_persisted_context(self, mock_store, store, partner_setup) -> None:
        session = PartnerSession(user_id="learner-1", store=mock_store)
        service = PartnerContextService(store.universities, store.branches, store.colleges)
        await service.activate_college(session, partner_setup["college"].id)
        await partner_setup["hierarchy"].set_partnership(partner_setup["college"].id, False)

        with pytest.raises(PartnerNotEnabledError):
            await service.refresh(session)

        mock_store.clear.assert_awaited_with("learner-1")

    @pytest.mark.asyncio
    async def test_list_partner_colleges(self, partner_service, partner_setup) -> None:
        hierarchy = partner_setup["hierarchy"]
        inactive = await hierarchy.create_college(
            CollegeCreateRequest(university_id=partner_setup["u1"].id, name="C2", is_partnered=True)
        )
        await hierarchy.deactivate_college(inactive.id)
        await hierarchy.create_college(
            CollegeCreateRequest(university_id=partner_setup["u1"].id, name="C3")
        )

        colleges = await partner_service.list_partner_colleges()

        assert [c.id for c in colleges] == [partner_setup["college"].id]
