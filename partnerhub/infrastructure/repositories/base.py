# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Entity store protocols.

The domain core never talks to a concrete store. Each protocol exposes
one method per query shape the domain needs, so a backend only has to
support create-with-generated-id, read-by-id, partial update, equality
filters and count.

Progress repositories are keyed by the owning ids themselves, never by a
joined string. `save` is an upsert on that key, which is how the
one-record-per-(user, course) and per-(user, course, lecture) rules are
enforced.
"""

from typing import Any, Protocol

from partnerhub.models import (
    Branch,
    College,
    Course,
    University,
    UserCourseProgress,
    UserLectureProgress,
)


class RepositoryError(Exception):
    """Base exception for entity store errors."""

    pass


class EntityNotFoundError(RepositoryError):
    """Raised when updating a record that does not exist."""

    pass


class UniversityRepository(Protocol):
    async def create(self, university: University) -> University: ...

    async def get(self, university_id: str) -> University | None: ...

    async def update(self, university_id: str, changes: dict[str, Any]) -> University: ...

    async def list_all(self) -> list[University]: ...

    async def count(self) -> int: ...


class BranchRepository(Protocol):
    async def create(self, branch: Branch) -> Branch: ...

    async def get(self, branch_id: str) -> Branch | None: ...

    async def update(self, branch_id: str, changes: dict[str, Any]) -> Branch: ...

    async def find_by_university(self, university_id: str) -> list[Branch]: ...

    async def count(self) -> int: ...


class CollegeRepository(Protocol):
    async def create(self, college: College) -> College: ...

    async def get(self, college_id: str) -> College | None: ...

    async def update(self, college_id: str, changes: dict[str, Any]) -> College: ...

    async def list_all(self) -> list[College]: ...

    async def find_by_university(self, university_id: str) -> list[College]: ...

    async def find_partnered(self) -> list[College]: ...

    async def count(self) -> int: ...


class CourseRepository(Protocol):
    async def get(self, course_id: str) -> Course | None: ...

    async def list_all(self) -> list[Course]: ...


class CourseProgressRepository(Protocol):
    async def get(self, user_id: str, course_id: str) -> UserCourseProgress | None: ...

    async def save(self, progress: UserCourseProgress) -> UserCourseProgress: ...

    async def find_by_user(self, user_id: str) -> list[UserCourseProgress]: ...

    async def count(self) -> int: ...


class LectureProgressRepository(Protocol):
    async def get(
        self, user_id: str, course_id: str, lecture_id: str
    ) -> UserLectureProgress | None: ...

    async def save(self, progress: UserLectureProgress) -> UserLectureProgress: ...

    async def find_by_course(self, user_id: str, course_id: str) -> list[UserLectureProgress]: ...

    async def count(self) -> int: ...
