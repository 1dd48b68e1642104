# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Hierarchy service for the admin console.

This module provides the HierarchyService that handles:
- University CRUD with soft deletion
- Branch CRUD with soft deactivation
- College CRUD, partnership toggling and soft deactivation

Every Branch and College write is validated against freshly read
University/Branch state first; a failed validation never reaches the
entity store.

Example:
    >>> service = HierarchyService(store.universities, store.branches, store.colleges)
    >>> university = await service.create_university(UniversityCreateRequest(name="U1"))
    >>> cse = await service.create_branch(
    ...     BranchCreateRequest(university_id=university.id, name="Computer Science", code="CSE")
    ... )
"""

import logging
from typing import Any

from partnerhub.domains.hierarchy.validator import (
    HierarchyError,
    validate_branch,
    validate_college,
)
from partnerhub.infrastructure.repositories.base import (
    BranchRepository,
    CollegeRepository,
    UniversityRepository,
)
from partnerhub.models import (
    Branch,
    BranchCreateRequest,
    BranchStatus,
    BranchUpdateRequest,
    College,
    CollegeCreateRequest,
    CollegeUpdateRequest,
    University,
    UniversityCreateRequest,
    UniversityUpdateRequest,
)
from partnerhub.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class HierarchyServiceError(HierarchyError):
    """Base exception for hierarchy service errors."""

    pass


class UniversityNotFoundError(HierarchyServiceError):
    """Raised when a University is not found or is deleted."""

    pass


class BranchNotFoundError(HierarchyServiceError):
    """Raised when a Branch is not found."""

    pass


class CollegeNotFoundError(HierarchyServiceError):
    """Raised when a College is not found."""

    pass


class HierarchyService:
    """Service for managing Universities, Branches and Colleges.

    Attributes:
        _universities: University repository.
        _branches: Branch repository.
        _colleges: College repository.
    """

    def __init__(
        self,
        universities: UniversityRepository,
        branches: BranchRepository,
        colleges: CollegeRepository,
    ) -> None:
        """Initialize the hierarchy service.

        Args:
            universities: University repository.
            branches: Branch repository.
            colleges: College repository.
        """
        self._universities = universities
        self._branches = branches
        self._colleges = colleges

    # =========================================================================
    # Universities
    # =========================================================================

    async def create_university(self, request: UniversityCreateRequest) -> University:
        """Create a new University."""
        university = await self._universities.create(University(**request.model_dump()))
        logger.info("University created: %s (%s)", university.id, university.name)
        return university

    async def get_university(self, university_id: str) -> University:
        """Get a University by ID.

        Raises:
            UniversityNotFoundError: If not found or soft-deleted.
        """
        university = await self._universities.get(university_id)
        if university is None or university.is_deleted:
            raise UniversityNotFoundError(f"University {university_id} not found")
        return university

    async def list_universities(self, include_deleted: bool = False) -> list[University]:
        universities = await self._universities.list_all()
        if include_deleted:
            return universities
        return [u for u in universities if not u.is_deleted]

    async def update_university(
        self,
        university_id: str,
        request: UniversityUpdateRequest,
    ) -> University:
        """Update a University.

        Raises:
            UniversityNotFoundError: If not found or soft-deleted.
        """
        await self.get_university(university_id)
        changes = request.model_dump(exclude_unset=True)
        university = await self._universities.update(university_id, changes)
        logger.info("University updated: %s (fields=%s)", university_id, sorted(changes))
        return university

    async def delete_university(self, university_id: str) -> University:
        """Soft-delete a University.

        Branches and Colleges keep their rows; later writes to them fail
        validation until they point at a live University.

        Raises:
            UniversityNotFoundError: If not found or already deleted.
        """
        await self.get_university(university_id)
        university = await self._universities.update(university_id, {"deleted_at": utc_now()})
        logger.info("University deleted: %s", university_id)
        return university

    # =========================================================================
    # Branches
    # =========================================================================

    async def create_branch(self, request: BranchCreateRequest) -> Branch:
        """Create a Branch under an existing University.

        Raises:
            DanglingReferenceError: If the University does not exist.
        """
        branch = Branch(**request.model_dump())
        await self._check_branch(branch)

        created = await self._branches.create(branch)
        logger.info(
            "Branch created: %s (code=%s, university=%s)",
            created.id,
            created.code,
            created.university_id,
        )
        return created

    async def get_branch(self, branch_id: str) -> Branch:
        """Get a Branch by ID.

        Raises:
            BranchNotFoundError: If not found.
        """
        branch = await self._branches.get(branch_id)
        if branch is None:
            raise BranchNotFoundError(f"Branch {branch_id} not found")
        return branch

    async def list_branches(self, university_id: str, active_only: bool = False) -> list[Branch]:
        branches = await self._branches.find_by_university(university_id)
        if active_only:
            return [b for b in branches if b.is_active]
        return branches

    async def update_branch(self, branch_id: str, request: BranchUpdateRequest) -> Branch:
        """Update a Branch; its University never changes.

        Raises:
            BranchNotFoundError: If not found.
            DanglingReferenceError: If its University no longer exists.
        """
        current = await self.get_branch(branch_id)
        changes = request.model_dump(exclude_unset=True)
        await self._check_branch(current.model_copy(update=changes))

        branch = await self._branches.update(branch_id, changes)
        logger.info("Branch updated: %s (fields=%s)", branch_id, sorted(changes))
        return branch

    async def deactivate_branch(self, branch_id: str) -> Branch:
        """Mark a Branch inactive.

        Colleges offering it keep the offering until an admin edits them.

        Raises:
            BranchNotFoundError: If not found.
        """
        return await self.update_branch(
            branch_id, BranchUpdateRequest(status=BranchStatus.INACTIVE)
        )

    # =========================================================================
    # Colleges
    # =========================================================================

    async def create_college(self, request: CollegeCreateRequest) -> College:
        """Create a College.

        Raises:
            DanglingReferenceError: If the University does not exist.
            InvalidOfferingError: If an offered Branch is unknown or foreign.
        """
        college = College(**request.model_dump())
        await self._check_college(college)

        created = await self._colleges.create(college)
        logger.info(
            "College created: %s (university=%s, branches=%d, partnered=%s)",
            created.id,
            created.university_id,
            len(created.offered_branches),
            created.is_partnered,
        )
        return created

    async def get_college(self, college_id: str) -> College:
        """Get a College by ID.

        Raises:
            CollegeNotFoundError: If not found.
        """
        college = await self._colleges.get(college_id)
        if college is None:
            raise CollegeNotFoundError(f"College {college_id} not found")
        return college

    async def list_colleges(self, university_id: str | None = None) -> list[College]:
        if university_id is not None:
            return await self._colleges.find_by_university(university_id)
        return await self._colleges.list_all()

    async def list_partnered_colleges(self) -> list[College]:
        return await self._colleges.find_partnered()

    async def update_college(self, college_id: str, request: CollegeUpdateRequest) -> College:
        """Update a College.

        Raises:
            CollegeNotFoundError: If not found.
            DanglingReferenceError: If the (new) University does not exist.
            InvalidOfferingError: If an offered Branch is unknown or foreign.
        """
        return await self._apply_college_changes(
            college_id, request.model_dump(exclude_unset=True)
        )

    async def set_partnership(self, college_id: str, is_partnered: bool) -> College:
        """Enable or disable white-label mode for a College.

        Raises:
            CollegeNotFoundError: If not found.
        """
        return await self._apply_college_changes(college_id, {"is_partnered": is_partnered})

    async def deactivate_college(self, college_id: str) -> College:
        """Mark a College inactive.

        Deactivation only removes capability, so it is not blocked by
        stale references in the record.

        Raises:
            CollegeNotFoundError: If not found.
        """
        await self.get_college(college_id)
        college = await self._colleges.update(college_id, {"is_active": False})
        logger.info("College deactivated: %s", college_id)
        return college

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _apply_college_changes(self, college_id: str, changes: dict[str, Any]) -> College:
        current = await self.get_college(college_id)
        await self._check_college(current.model_copy(update=changes))

        college = await self._colleges.update(college_id, changes)
        logger.info("College updated: %s (fields=%s)", college_id, sorted(changes))
        return college

    async def _universities_for(self, university_id: str) -> list[University]:
        university = await self._universities.get(university_id)
        return [university] if university is not None else []

    async def _check_branch(self, branch: Branch) -> None:
        universities = await self._universities_for(branch.university_id)
        try:
            validate_branch(branch, universities)
        except HierarchyError as e:
            logger.warning("Branch rejected: %s", e)
            raise

    async def _check_college(self, college: College) -> None:
        universities = await self._universities_for(college.university_id)
        branches = await self._branches.find_by_university(college.university_id)

        # Offered ids outside the University are loaded so they can be reported
        # as foreign rather than unknown.
        known = {branch.id for branch in branches}
        for branch_id in college.offered_branches:
            if branch_id not in known:
                branch = await self._branches.get(branch_id)
                if branch is not None:
                    branches.append(branch)

        try:
            validate_college(college, universities, branches)
        except HierarchyError as e:
            logger.warning("College rejected: %s", e)
            raise
