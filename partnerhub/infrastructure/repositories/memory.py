# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""In-process entity store.

Backs the repository protocols with dictionaries. Records are deep-copied
on the way in and out so callers never share mutable state with the store,
the same isolation a document database gives its clients.

Example:
    >>> store = InMemoryStore()
    >>> university = await store.universities.create(University(name="U1"))
    >>> await store.branches.find_by_university(university.id)
    []
"""

import logging
from collections.abc import Hashable
from typing import Any, Generic, TypeVar
from uuid import uuid4

from pydantic import BaseModel

from partnerhub.infrastructure.repositories.base import EntityNotFoundError
from partnerhub.models import (
    Branch,
    College,
    Course,
    University,
    UserCourseProgress,
    UserLectureProgress,
)
from partnerhub.utils.datetime import utc_now

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class InMemoryCollection(Generic[ModelT]):
    """Keyed collection supporting the document-store operations.

    Attributes:
        name: Collection name, used in log lines and errors.
    """

    def __init__(self, name: str, model: type[ModelT]) -> None:
        self.name = name
        self._model = model
        self._records: dict[Hashable, ModelT] = {}

    def insert(self, record: ModelT) -> ModelT:
        """Store a record under a generated id and return a copy."""
        now = utc_now()
        changes: dict[str, Any] = {"id": str(uuid4())}
        if "created_at" in self._model.model_fields:
            changes["created_at"] = now
        stored = record.model_copy(update=changes, deep=True)
        self._records[stored.id] = stored  # type: ignore[attr-defined]
        logger.debug("Inserted %s/%s", self.name, stored.id)  # type: ignore[attr-defined]
        return stored.model_copy(deep=True)

    def put(self, key: Hashable, record: ModelT) -> ModelT:
        """Insert or replace a record under a caller-chosen key."""
        self._records[key] = record.model_copy(deep=True)
        return record.model_copy(deep=True)

    def get(self, key: Hashable) -> ModelT | None:
        record = self._records.get(key)
        return record.model_copy(deep=True) if record is not None else None

    def update(self, record_id: str, changes: dict[str, Any]) -> ModelT:
        """Apply a partial update, re-validating the merged record.

        Raises:
            EntityNotFoundError: If no record has this id.
        """
        current = self._records.get(record_id)
        if current is None:
            raise EntityNotFoundError(f"{self.name}/{record_id} not found")

        merged = {**current.model_dump(), **changes}
        if "updated_at" in self._model.model_fields:
            merged["updated_at"] = utc_now()
        updated = self._model.model_validate(merged)
        self._records[record_id] = updated
        return updated.model_copy(deep=True)

    def find(self, **equals: Any) -> list[ModelT]:
        """List records whose fields equal every given value, in insertion order."""
        return [
            record.model_copy(deep=True)
            for record in self._records.values()
            if all(getattr(record, field) == value for field, value in equals.items())
        ]

    def count(self) -> int:
        return len(self._records)


class InMemoryUniversityRepository:
    def __init__(self) -> None:
        self._collection = InMemoryCollection("universities", University)

    async def create(self, university: University) -> University:
        return self._collection.insert(university)

    async def get(self, university_id: str) -> University | None:
        return self._collection.get(university_id)

    async def update(self, university_id: str, changes: dict[str, Any]) -> University:
        return self._collection.update(university_id, changes)

    async def list_all(self) -> list[University]:
        return self._collection.find()

    async def count(self) -> int:
        return self._collection.count()


class InMemoryBranchRepository:
    def __init__(self) -> None:
        self._collection = InMemoryCollection("branches", Branch)

    async def create(self, branch: Branch) -> Branch:
        return self._collection.insert(branch)

    async def get(self, branch_id: str) -> Branch | None:
        return self._collection.get(branch_id)

    async def update(self, branch_id: str, changes: dict[str, Any]) -> Branch:
        return self._collection.update(branch_id, changes)

    async def find_by_university(self, university_id: str) -> list[Branch]:
        return self._collection.find(university_id=university_id)

    async def count(self) -> int:
        return self._collection.count()


class InMemoryCollegeRepository:
    def __init__(self) -> None:
        self._collection = InMemoryCollection("colleges", College)

    async def create(self, college: College) -> College:
        return self._collection.insert(college)

    async def get(self, college_id: str) -> College | None:
        return self._collection.get(college_id)

    async def update(self, college_id: str, changes: dict[str, Any]) -> College:
        return self._collection.update(college_id, changes)

    async def list_all(self) -> list[College]:
        return self._collection.find()

    async def find_by_university(self, university_id: str) -> list[College]:
        return self._collection.find(university_id=university_id)

    async def find_partnered(self) -> list[College]:
        return self._collection.find(is_partnered=True)

    async def count(self) -> int:
        return self._collection.count()


class InMemoryCourseRepository:
    """Read-only course catalog, seeded by the caller."""

    def __init__(self, courses: list[Course] | None = None) -> None:
        self._collection = InMemoryCollection("courses", Course)
        for course in courses or []:
            self.add(course)

    def add(self, course: Course) -> None:
        self._collection.put(course.id, course)

    async def get(self, course_id: str) -> Course | None:
        return self._collection.get(course_id)

    async def list_all(self) -> list[Course]:
        return self._collection.find()


class InMemoryCourseProgressRepository:
    """Course progress keyed by the (user_id, course_id) pair."""

    def __init__(self) -> None:
        self._collection = InMemoryCollection("user_course_progress", UserCourseProgress)

    async def get(self, user_id: str, course_id: str) -> UserCourseProgress | None:
        return self._collection.get((user_id, course_id))

    async def save(self, progress: UserCourseProgress) -> UserCourseProgress:
        return self._collection.put((progress.user_id, progress.course_id), progress)

    async def find_by_user(self, user_id: str) -> list[UserCourseProgress]:
        return self._collection.find(user_id=user_id)

    async def count(self) -> int:
        return self._collection.count()


class InMemoryLectureProgressRepository:
    """Lecture progress keyed by the (user_id, course_id, lecture_id) triple."""

    def __init__(self) -> None:
        self._collection = InMemoryCollection("user_lecture_progress", UserLectureProgress)

    async def get(
        self, user_id: str, course_id: str, lecture_id: str
    ) -> UserLectureProgress | None:
        return self._collection.get((user_id, course_id, lecture_id))

    async def save(self, progress: UserLectureProgress) -> UserLectureProgress:
        return self._collection.put(
            (progress.user_id, progress.course_id, progress.lecture_id), progress
        )

    async def find_by_course(self, user_id: str, course_id: str) -> list[UserLectureProgress]:
        return self._collection.find(user_id=user_id, course_id=course_id)

    async def count(self) -> int:
        return self._collection.count()


class InMemoryStore:
    """All repositories of one in-process store.

    Attributes:
        universities: University records.
        branches: Branch records.
        colleges: College records.
        courses: Course catalog.
        course_progress: UserCourseProgress records.
        lecture_progress: UserLectureProgress records.
    """

    def __init__(self, courses: list[Course] | None = None) -> None:
        self.universities = InMemoryUniversityRepository()
        self.branches = InMemoryBranchRepository()
        self.colleges = InMemoryCollegeRepository()
        self.courses = InMemoryCourseRepository(courses)
        self.course_progress = InMemoryCourseProgressRepository()
        self.lecture_progress = InMemoryLectureProgressRepository()
