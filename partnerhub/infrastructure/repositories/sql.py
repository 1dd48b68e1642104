# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy-backed entity store.

Repositories share the caller's AsyncSession and only flush; the commit
belongs to the session scope (see DatabaseManager.session and
partnerhub.runtime.UnitOfWork), so one admin action or one lecture event
is committed or rolled back as a unit.

Example:
    >>> async with manager.session() as db:
    ...     branches = await SqlBranchRepository(db).find_by_university("u-1")
"""

import logging
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from partnerhub.infrastructure.database.models import (
    Base,
    BranchRecord,
    CollegeRecord,
    CourseProgressRecord,
    CourseRecord,
    LectureProgressRecord,
    UniversityRecord,
)
from partnerhub.infrastructure.repositories.base import EntityNotFoundError
from partnerhub.models import (
    Branch,
    College,
    Course,
    University,
    UserCourseProgress,
    UserLectureProgress,
    course_progress_id,
    lecture_progress_id,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
RecordT = TypeVar("RecordT", bound=Base)


def _to_columns(values: dict[str, Any]) -> dict[str, Any]:
    """Convert model values to column values (enums to their string value)."""
    return {
        key: value.value if isinstance(value, Enum) else value
        for key, value in values.items()
    }


class _SqlRepository(Generic[ModelT, RecordT]):
    """Shared create/get/update/count over one table."""

    model: type[ModelT]
    record_type: type[RecordT]

    def __init__(self, db: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            db: Async database session.
        """
        self._db = db

    async def create(self, entity: ModelT) -> ModelT:
        values = entity.model_dump(exclude={"id", "created_at", "updated_at"})
        record = self.record_type(**_to_columns(values))
        self._db.add(record)
        await self._db.flush()
        await self._db.refresh(record)
        logger.debug("Inserted %s/%s", self.record_type.__tablename__, record.id)
        return self.model.model_validate(record)

    async def get(self, entity_id: str) -> ModelT | None:
        record = await self._db.get(self.record_type, entity_id)
        return self.model.model_validate(record) if record is not None else None

    async def update(self, entity_id: str, changes: dict[str, Any]) -> ModelT:
        record = await self._db.get(self.record_type, entity_id)
        if record is None:
            raise EntityNotFoundError(
                f"{self.record_type.__tablename__}/{entity_id} not found"
            )

        for key, value in _to_columns(changes).items():
            setattr(record, key, value)
        await self._db.flush()
        await self._db.refresh(record)
        return self.model.model_validate(record)

    async def count(self) -> int:
        result = await self._db.execute(select(func.count()).select_from(self.record_type))
        return result.scalar() or 0

    async def _find(self, *criteria: Any) -> list[ModelT]:
        stmt = select(self.record_type).where(*criteria)
        if hasattr(self.record_type, "created_at"):
            stmt = stmt.order_by(self.record_type.created_at.asc())
        result = await self._db.execute(stmt)
        return [self.model.model_validate(record) for record in result.scalars().all()]


class SqlUniversityRepository(_SqlRepository[University, UniversityRecord]):
    model = University
    record_type = UniversityRecord

    async def list_all(self) -> list[University]:
        return await self._find()


class SqlBranchRepository(_SqlRepository[Branch, BranchRecord]):
    model = Branch
    record_type = BranchRecord

    async def find_by_university(self, university_id: str) -> list[Branch]:
        return await self._find(BranchRecord.university_id == university_id)


class SqlCollegeRepository(_SqlRepository[College, CollegeRecord]):
    model = College
    record_type = CollegeRecord

    async def list_all(self) -> list[College]:
        return await self._find()

    async def find_by_university(self, university_id: str) -> list[College]:
        return await self._find(CollegeRecord.university_id == university_id)

    async def find_partnered(self) -> list[College]:
        return await self._find(CollegeRecord.is_partnered.is_(True))


class SqlCourseRepository:
    """Read access to the course catalog table."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def get(self, course_id: str) -> Course | None:
        record = await self._db.get(CourseRecord, course_id)
        return Course.model_validate(record) if record is not None else None

    async def list_all(self) -> list[Course]:
        result = await self._db.execute(select(CourseRecord).order_by(CourseRecord.title.asc()))
        return [Course.model_validate(record) for record in result.scalars().all()]


class SqlCourseProgressRepository:
    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def get(self, user_id: str, course_id: str) -> UserCourseProgress | None:
        record = await self._db.get(
            CourseProgressRecord, {"user_id": user_id, "course_id": course_id}
        )
        return UserCourseProgress.model_validate(record) if record is not None else None

    async def save(self, progress: UserCourseProgress) -> UserCourseProgress:
        """Upsert on the (user_id, course_id) key."""
        values = _to_columns(progress.model_dump(exclude={"id"}))
        record = await self._db.get(
            CourseProgressRecord,
            {"user_id": progress.user_id, "course_id": progress.course_id},
        )
        if record is None:
            record = CourseProgressRecord(
                id=course_progress_id(progress.user_id, progress.course_id), **values
            )
            self._db.add(record)
        else:
            for column, value in values.items():
                setattr(record, column, value)
        await self._db.flush()
        return UserCourseProgress.model_validate(record)

    async def find_by_user(self, user_id: str) -> list[UserCourseProgress]:
        stmt = (
            select(CourseProgressRecord)
            .where(CourseProgressRecord.user_id == user_id)
            .order_by(CourseProgressRecord.last_accessed_at.desc())
        )
        result = await self._db.execute(stmt)
        return [UserCourseProgress.model_validate(r) for r in result.scalars().all()]

    async def count(self) -> int:
        result = await self._db.execute(
            select(func.count()).select_from(CourseProgressRecord)
        )
        return result.scalar() or 0


class SqlLectureProgressRepository:
    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def get(
        self, user_id: str, course_id: str, lecture_id: str
    ) -> UserLectureProgress | None:
        record = await self._db.get(
            LectureProgressRecord,
            {"user_id": user_id, "course_id": course_id, "lecture_id": lecture_id},
        )
        return UserLectureProgress.model_validate(record) if record is not None else None

    async def save(self, progress: UserLectureProgress) -> UserLectureProgress:
        """Upsert on the (user_id, course_id, lecture_id) key."""
        values = progress.model_dump(exclude={"id"})
        record = await self._db.get(
            LectureProgressRecord,
            {
                "user_id": progress.user_id,
                "course_id": progress.course_id,
                "lecture_id": progress.lecture_id,
            },
        )
        if record is None:
            record = LectureProgressRecord(
                id=lecture_progress_id(
                    progress.user_id, progress.course_id, progress.lecture_id
                ),
                **values,
            )
            self._db.add(record)
        else:
            for column, value in values.items():
                setattr(record, column, value)
        await self._db.flush()
        return UserLectureProgress.model_validate(record)

    async def find_by_course(self, user_id: str, course_id: str) -> list[UserLectureProgress]:
        stmt = select(LectureProgressRecord).where(
            LectureProgressRecord.user_id == user_id,
            LectureProgressRecord.course_id == course_id,
        )
        result = await self._db.execute(stmt)
        return [UserLectureProgress.model_validate(r) for r in result.scalars().all()]

    async def count(self) -> int:
        result = await self._db.execute(
            select(func.count()).select_from(LectureProgressRecord)
        )
        return result.scalar() or 0
