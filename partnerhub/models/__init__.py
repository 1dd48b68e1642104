# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic models shared by the domain services and repositories."""

from partnerhub.models.common import BranchStatus, ProgressStatus
from partnerhub.models.course import Course, Lecture
from partnerhub.models.hierarchy import (
    Branch,
    BranchCreateRequest,
    BranchUpdateRequest,
    College,
    CollegeCreateRequest,
    CollegeUpdateRequest,
    University,
    UniversityCreateRequest,
    UniversityUpdateRequest,
)
from partnerhub.models.partner import PartnerBranding, PartnerContext
from partnerhub.models.progress import (
    CourseProgressSummary,
    LectureProgressResponse,
    UserCourseProgress,
    UserLectureProgress,
    course_progress_id,
    lecture_progress_id,
)

__all__ = [
    # Common
    "BranchStatus",
    "ProgressStatus",
    # Hierarchy
    "University",
    "Branch",
    "College",
    "UniversityCreateRequest",
    "UniversityUpdateRequest",
    "BranchCreateRequest",
    "BranchUpdateRequest",
    "CollegeCreateRequest",
    "CollegeUpdateRequest",
    # Catalog
    "Course",
    "Lecture",
    # Partner
    "PartnerContext",
    "PartnerBranding",
    # Progress
    "UserCourseProgress",
    "UserLectureProgress",
    "LectureProgressResponse",
    "CourseProgressSummary",
    "course_progress_id",
    "lecture_progress_id",
]
