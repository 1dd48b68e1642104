# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Hierarchy service."""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from partnerhub.domains.hierarchy import (
    BranchNotFoundError,
    CollegeNotFoundError,
    DanglingReferenceError,
    HierarchyService,
    InvalidOfferingError,
    UniversityNotFoundError,
)
from partnerhub.infrastructure.repositories.memory import InMemoryStore
from partnerhub.models import (
    BranchCreateRequest,
    BranchStatus,
    BranchUpdateRequest,
    CollegeCreateRequest,
    CollegeUpdateRequest,
    UniversityCreateRequest,
    UniversityUpdateRequest,
)


@pytest.fixture
def hierarchy_service(store: InMemoryStore) -> HierarchyService:
    """Create hierarchy service over an empty in-memory store."""
    return HierarchyService(store.universities, store.branches, store.colleges)


@pytest_asyncio.fixture
async def seeded(hierarchy_service: HierarchyService) -> dict:
    """Create U1 with CSE and ECE, and U2 with ME."""
    u1 = await hierarchy_service.create_university(
        UniversityCreateRequest(name="State Technical University", logo="https://cdn.example.com/u1.png")
    )
    u2 = await hierarchy_service.create_university(UniversityCreateRequest(name="Coastal University"))
    cse = await hierarchy_service.create_branch(
        BranchCreateRequest(university_id=u1.id, name="Computer Science", code="CSE")
    )
    ece = await hierarchy_service.create_branch(
        BranchCreateRequest(university_id=u1.id, name="Electronics", code="ECE")
    )
    me = await hierarchy_service.create_branch(
        BranchCreateRequest(university_id=u2.id, name="Mechanical", code="ME")
    )
    return {"u1": u1, "u2": u2, "cse": cse, "ece": ece, "me": me}


class TestHierarchyServiceUniversity:
    """Tests for University operations."""

    @pytest.mark.asyncio
    async def test_create_university(self, hierarchy_service: HierarchyService) -> None:
        """Test creating a University assigns id and timestamps."""
        university = await hierarchy_service.create_university(
            UniversityCreateRequest(name="U1", contact_numbers=[" 040-123 "])
        )

        assert university.id is not None
        assert university.created_at is not None
        assert university.contact_numbers == ["040-123"]

    @pytest.mark.asyncio
    async def test_get_university_not_found(self, hierarchy_service: HierarchyService) -> None:
        with pytest.raises(UniversityNotFoundError):
            await hierarchy_service.get_university("missing")

    @pytest.mark.asyncio
    async def test_update_university_applies_only_set_fields(self, hierarchy_service, seeded) -> None:
        """Test that unset fields keep their stored values."""
        updated = await hierarchy_service.update_university(
            seeded["u1"].id, UniversityUpdateRequest(chairman_name="Dr. Rao")
        )

        assert updated.chairman_name == "Dr. Rao"
        assert updated.name == "State Technical University"
        assert updated.logo == "https://cdn.example.com/u1.png"
        assert updated.updated_at is not None

    @pytest.mark.asyncio
    async def test_delete_university_is_soft(self, hierarchy_service, seeded, store) -> None:
        deleted = await hierarchy_service.delete_university(seeded["u2"].id)

        assert deleted.is_deleted is True
        assert await store.universities.count() == 2
        with pytest.raises(UniversityNotFoundError):
            await hierarchy_service.get_university(seeded["u2"].id)

        visible = await hierarchy_service.list_universities()
        assert [u.id for u in visible] == [seeded["u1"].id]
        assert len(await hierarchy_service.list_universities(include_deleted=True)) == 2

    @pytest.mark.asyncio
    async def test_delete_university_twice(self, hierarchy_service, seeded) -> None:
        await hierarchy_service.delete_university(seeded["u2"].id)

        with pytest.raises(UniversityNotFoundError):
            await hierarchy_service.delete_university(seeded["u2"].id)


class TestHierarchyServiceBranch:
    """Tests for Branch operations."""

    @pytest.mark.asyncio
    async def test_create_branch(self, hierarchy_service, seeded) -> None:
        branches = await hierarchy_service.list_branches(seeded["u1"].id)

        assert [b.code for b in branches] == ["CSE", "ECE"]
        assert all(b.status == BranchStatus.ACTIVE for b in branches)

    @pytest.mark.asyncio
    async def test_create_branch_unknown_university(self, hierarchy_service, store) -> None:
        """Test that a dangling Branch is rejected before any write."""
        with pytest.raises(DanglingReferenceError):
            await hierarchy_service.create_branch(
                BranchCreateRequest(university_id="missing", name="Civil", code="CE")
            )

        assert await store.branches.count() == 0

    @pytest.mark.asyncio
    async def test_create_branch_under_deleted_university(self, hierarchy_service, seeded) -> None:
        await hierarchy_service.delete_university(seeded["u2"].id)

        with pytest.raises(DanglingReferenceError):
            await hierarchy_service.create_branch(
                BranchCreateRequest(university_id=seeded["u2"].id, name="Civil", code="CE")
            )

    @pytest.mark.asyncio
    async def test_update_branch(self, hierarchy_service, seeded) -> None:
        updated = await hierarchy_service.update_branch(
            seeded["cse"].id, BranchUpdateRequest(description="Core CS")
        )

        assert updated.description == "Core CS"
        assert updated.code == "CSE"
        assert updated.university_id == seeded["u1"].id

    @pytest.mark.asyncio
    async def test_update_branch_not_found(self, hierarchy_service) -> None:
        with pytest.raises(BranchNotFoundError):
            await hierarchy_service.update_branch("missing", BranchUpdateRequest(name="X"))

    @pytest.mark.asyncio
    async def test_deactivate_branch(self, hierarchy_service, seeded) -> None:
        branch = await hierarchy_service.deactivate_branch(seeded["ece"].id)

        assert branch.status == BranchStatus.INACTIVE
        active = await hierarchy_service.list_branches(seeded["u1"].id, active_only=True)
        assert [b.id for b in active] == [seeded["cse"].id]

    @pytest.mark.asyncio
    async def test_deactivated_branch_remains_offered(self, hierarchy_service, seeded) -> None:
        college = await hierarchy_service.create_college(
            CollegeCreateRequest(
                university_id=seeded["u1"].id, name="C1", offered_branches=[seeded["ece"].id]
            )
        )

        await hierarchy_service.deactivate_branch(seeded["ece"].id)

        stored = await hierarchy_service.get_college(college.id)
        assert stored.offered_branches == [seeded["ece"].id]


class TestHierarchyServiceCollege:
    """Tests for College operations."""

    @pytest.mark.asyncio
    async def test_create_college(self, hierarchy_service, seeded) -> None:
        college = await hierarchy_service.create_college(
            CollegeCreateRequest(
                university_id=seeded["u1"].id,
                name="Sunrise Engineering College",
                offered_branches=[seeded["cse"].id, seeded["cse"].id],
                is_partnered=True,
            )
        )

        assert college.offered_branches == [seeded["cse"].id]
        assert college.is_partnered is True
        assert college.is_active is True

    @pytest.mark.asyncio
    async def test_create_college_foreign_branch(self, hierarchy_service, seeded, store) -> None:
        """Test that offering another University's Branch is rejected."""
        with pytest.raises(InvalidOfferingError) as exc_info:
            await hierarchy_service.create_college(
                CollegeCreateRequest(
                    university_id=seeded["u1"].id,
                    name="C2",
                    offered_branches=[seeded["cse"].id, seeded["me"].id],
                )
            )

        assert exc_info.value.foreign_branch_ids == [seeded["me"].id]
        assert await store.colleges.count() == 0

    @pytest.mark.asyncio
    async def test_create_college_unknown_branch(self, hierarchy_service, seeded) -> None:
        with pytest.raises(InvalidOfferingError) as exc_info:
            await hierarchy_service.create_college(
                CollegeCreateRequest(
                    university_id=seeded["u1"].id, name="C3", offered_branches=["b-missing"]
                )
            )

        assert exc_info.value.unknown_branch_ids == ["b-missing"]

    @pytest.mark.asyncio
    async def test_create_college_unknown_university(self, hierarchy_service, store) -> None:
        with pytest.raises(DanglingReferenceError):
            await hierarchy_service.create_college(
                CollegeCreateRequest(university_id="missing", name="C4")
            )

        assert await store.colleges.count() == 0

    @pytest.mark.asyncio
    async def test_rejected_college_never_reaches_repository(self, store, seeded) -> None:
        """Test that validation runs before the repository is called."""
        store.colleges.create = AsyncMock()
        service = HierarchyService(store.universities, store.branches, store.colleges)

        with pytest.raises(InvalidOfferingError):
            await service.create_college(
                CollegeCreateRequest(
                    university_id=seeded["u1"].id, name="C5", offered_branches=[seeded["me"].id]
                )
            )

        store.colleges.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_college_offerings(self, hierarchy_service, seeded) -> None:
        college = await hierarchy_service.create_college(
            CollegeCreateRequest(
                university_id=seeded["u1"].id, name="C1", offered_branches=[seeded["cse"].id]
            )
        )

        updated = await hierarchy_service.update_college(
            college.id,
            CollegeUpdateRequest(offered_branches=[seeded["cse"].id, seeded["ece"].id]),
        )

        assert updated.offered_branches == [seeded["cse"].id, seeded["ece"].id]
        assert updated.name == "C1"

    @pytest.mark.asyncio
    async def test_update_college_rejects_foreign_branch(self, hierarchy_service, seeded) -> None:
        """Test that a rejected update leaves the stored College unchanged."""
        college = await hierarchy_service.create_college(
            CollegeCreateRequest(
                university_id=seeded["u1"].id, name="C1", offered_branches=[seeded["cse"].id]
            )
        )

        with pytest.raises(InvalidOfferingError):
            await hierarchy_service.update_college(
                college.id, CollegeUpdateRequest(offered_branches=[seeded["me"].id])
            )

        stored = await hierarchy_service.get_college(college.id)
        assert stored.offered_branches == [seeded["cse"].id]

    @pytest.mark.asyncio
    async def test_moving_college_revalidates_offerings(self, hierarchy_service, seeded) -> None:
        """Test that changing the University checks existing offerings against it."""
        college = await hierarchy_service.create_college(
            CollegeCreateRequest(
                university_id=seeded["u1"].id, name="C1", offered_branches=[seeded["cse"].id]
            )
        )

        with pytest.raises(InvalidOfferingError):
            await hierarchy_service.update_college(
                college.id, CollegeUpdateRequest(university_id=seeded["u2"].id)
            )

        moved = await hierarchy_service.update_college(
            college.id,
            CollegeUpdateRequest(university_id=seeded["u2"].id, offered_branches=[seeded["me"].id]),
        )
        assert moved.university_id == seeded["u2"].id

    @pytest.mark.asyncio
    async def test_update_college_not_found(self, hierarchy_service) -> None:
        with pytest.raises(CollegeNotFoundError):
            await hierarchy_service.update_college("missing", CollegeUpdateRequest(name="X"))

    @pytest.mark.asyncio
    async def test_set_partnership(self, hierarchy_service, seeded) -> None:
        college = await hierarchy_service.create_college(
            CollegeCreateRequest(university_id=seeded["u1"].id, name="C1")
        )

        partnered = await hierarchy_service.set_partnership(college.id, True)

        assert partnered.is_partnered is True
        assert [c.id for c in await hierarchy_service.list_partnered_colleges()] == [college.id]

        unpartnered = await hierarchy_service.set_partnership(college.id, False)
        assert unpartnered.is_partnered is False
        assert await hierarchy_service.list_partnered_colleges() == []

    @pytest.mark.asyncio
    async def test_deactivate_college_with_deleted_university(self, hierarchy_service, seeded) -> None:
        """Test that deactivation succeeds even when the record is stale."""
        college = await hierarchy_service.create_college(
            CollegeCreateRequest(university_id=seeded["u2"].id, name="C9", is_partnered=True)
        )
        await hierarchy_service.delete_university(seeded["u2"].id)

        deactivated = await hierarchy_service.deactivate_college(college.id)

        assert deactivated.is_active is False
        with pytest.raises(DanglingReferenceError):
            await hierarchy_service.update_college(college.id, CollegeUpdateRequest(name="C10"))

    @pytest.mark.asyncio
    async def test_list_colleges(self, hierarchy_service, seeded) -> None:
        c1 = await hierarchy_service.create_college(
            CollegeCreateRequest(university_id=seeded["u1"].id, name="C1")
        )
        c2 = await hierarchy_service.create_college(
            CollegeCreateRequest(university_id=seeded["u2"].id, name="C2")
        )

        assert [c.id for c in await hierarchy_service.list_colleges()] == [c1.id, c2.id]
        assert [c.id for c in await hierarchy_service.list_colleges(seeded["u2"].id)] == [c2.id]
