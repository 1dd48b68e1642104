# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Entity store repositories.

- base: Protocols the domain services depend on
- memory: In-process implementation
- sql: SQLAlchemy async implementation
"""

from partnerhub.infrastructure.repositories.base import (
    BranchRepository,
    CollegeRepository,
    CourseProgressRepository,
    CourseRepository,
    EntityNotFoundError,
    LectureProgressRepository,
    RepositoryError,
    UniversityRepository,
)
from partnerhub.infrastructure.repositories.memory import InMemoryStore

__all__ = [
    # Protocols
    "UniversityRepository",
    "BranchRepository",
    "CollegeRepository",
    "CourseRepository",
    "CourseProgressRepository",
    "LectureProgressRepository",
    # Errors
    "RepositoryError",
    "EntityNotFoundError",
    # Implementations
    "InMemoryStore",
]
