# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database-backed PartnerHub runtime.

PartnerHub owns the process-wide pieces (settings, logging, the entity
store connection). Each unit of work opens one session and builds the
domain services over SQL repositories bound to it, so an admin action or
a lecture event commits or rolls back as a whole.

Example:
    async with PartnerHub() as hub:
        async with hub.unit_of_work(user_id="learner-1") as uow:
            await uow.progress.record_lecture_event(
                "learner-1", "course-x", "lec-1", 540, completed=True
            )
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession

from partnerhub.core.config import Settings, get_settings
from partnerhub.domains.hierarchy import HierarchyService
from partnerhub.domains.partner import PartnerContextService
from partnerhub.domains.progress import ProgressAggregator
from partnerhub.infrastructure.database import DatabaseManager
from partnerhub.infrastructure.repositories.sql import (
    SqlBranchRepository,
    SqlCollegeRepository,
    SqlCourseProgressRepository,
    SqlCourseRepository,
    SqlLectureProgressRepository,
    SqlUniversityRepository,
)
from partnerhub.utils.logging import log_context, setup_logging

logger = logging.getLogger(__name__)


class UnitOfWork:
    """Domain services sharing one database session.

    Attributes:
        db: The session every repository writes through.
        hierarchy: University/Branch/College administration.
        partner: Partner context resolution.
        progress: Lecture event recording and progress queries.
    """

    def __init__(self, db: AsyncSession, settings: Settings) -> None:
        self.db = db
        self.universities = SqlUniversityRepository(db)
        self.branches = SqlBranchRepository(db)
        self.colleges = SqlCollegeRepository(db)
        self.courses = SqlCourseRepository(db)
        self.course_progress = SqlCourseProgressRepository(db)
        self.lecture_progress = SqlLectureProgressRepository(db)

        self.hierarchy = HierarchyService(self.universities, self.branches, self.colleges)
        self.partner = PartnerContextService(self.universities, self.branches, self.colleges)
        self.progress = ProgressAggregator(
            self.courses,
            self.course_progress,
            self.lecture_progress,
            completion_threshold=settings.progress.completion_threshold,
        )


class PartnerHub:
    """Process-wide entry point wiring settings, logging and the entity store."""

    def __init__(
        self,
        settings: Settings | None = None,
        database: DatabaseManager | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.database = database or DatabaseManager(self.settings)

    async def start(self, create_schema: bool = False) -> None:
        """Configure logging and optionally create missing tables."""
        setup_logging(self.settings)
        logger.info(
            "Starting PartnerHub: environment=%s, debug=%s",
            self.settings.environment,
            self.settings.debug,
        )
        if create_schema:
            await self.database.create_schema()
            logger.info("Entity store schema ensured")

    async def stop(self) -> None:
        await self.database.close()
        logger.info("PartnerHub stopped")

    @asynccontextmanager
    async def unit_of_work(
        self,
        user_id: str | None = None,
        college_id: str | None = None,
    ) -> AsyncIterator[UnitOfWork]:
        """Open a session and yield services bound to it.

        Log lines inside the block carry user_id and college_id when given.

        Raises:
            DatabaseError: If the session fails to commit.
        """
        with log_context(user_id=user_id, college_id=college_id):
            async with self.database.session() as db:
                yield UnitOfWork(db, self.settings)

    async def __aenter__(self) -> "PartnerHub":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
