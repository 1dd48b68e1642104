# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Partner context service.

Loads the entities a partner context is built from and hands them to a
PartnerSession. This is the "Preview as College" path of the admin
console and the entry point for partner-branded learner sessions.

Example:
    >>> service = PartnerContextService(store.universities, store.branches, store.colleges)
    >>> context = await service.activate_college(session, college_id)
"""

import logging

from partnerhub.domains.hierarchy.service import CollegeNotFoundError
from partnerhub.domains.partner.resolver import PartnerContextError, PartnerNotEnabledError
from partnerhub.domains.partner.session import PartnerSession
from partnerhub.infrastructure.repositories.base import (
    BranchRepository,
    CollegeRepository,
    UniversityRepository,
)
from partnerhub.models import College, PartnerContext

logger = logging.getLogger(__name__)


class PartnerContextService:
    """Service resolving partner contexts from the entity store."""

    def __init__(
        self,
        universities: UniversityRepository,
        branches: BranchRepository,
        colleges: CollegeRepository,
    ) -> None:
        self._universities = universities
        self._branches = branches
        self._colleges = colleges

    async def activate_college(self, session: PartnerSession, college_id: str) -> PartnerContext:
        """Activate partner mode for a College on the given session.

        Args:
            session: Session to update.
            college_id: College to brand as.

        Returns:
            The active context.

        Raises:
            CollegeNotFoundError: If the College does not exist.
            StaleReferenceError: If its University no longer exists.
            PartnerNotEnabledError: If it is not an active partner.
        """
        college = await self._colleges.get(college_id)
        if college is None:
            raise CollegeNotFoundError(f"College {college_id} not found")

        university = await self._universities.get(college.university_id)
        if university is not None and university.is_deleted:
            university = None
        branches = await self._branches.find_by_university(college.university_id)

        context = await session.set_partner_college(college, university, branches)
        if context is None:
            raise PartnerNotEnabledError(f"College {college_id} could not be activated")
        return context

    async def refresh(self, session: PartnerSession) -> PartnerContext | None:
        """Re-resolve the session's active College from the current store state.

        If the College can no longer be activated the session leaves partner
        mode before the error propagates.

        Returns:
            The refreshed context, or None if the session is not in partner mode.

        Raises:
            CollegeNotFoundError: If the College was removed.
            PartnerContextError: If it is no longer an active partner or its
                University is gone.
        """
        current = session.partner_context
        if current is None:
            return None

        college_id = current.college.id
        if college_id is None:
            await session.clear_partner_context()
            return None

        logger.debug("Refreshing partner context: user=%s, college=%s", session.user_id, college_id)
        try:
            return await self.activate_college(session, college_id)
        except (CollegeNotFoundError, PartnerContextError) as e:
            logger.warning(
                "Partner context dropped on refresh: user=%s, college=%s, reason=%s",
                session.user_id,
                college_id,
                e,
            )
            await session.clear_partner_context()
            raise

    async def list_partner_colleges(self) -> list[College]:
        """Partnered Colleges that can currently be activated."""
        colleges = await self._colleges.find_partnered()
        return [college for college in colleges if college.is_active]
