# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learner progress models.

Defines Pydantic models for progress tracking:
- UserCourseProgress: one per (user, course), source of truth for course state
- UserLectureProgress: one per (user, course, lecture)
- CourseProgressSummary: listing projection for "My Learning" screens
- LectureProgressResponse: per-lecture resume information
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from partnerhub.models.common import ProgressStatus


def course_progress_id(user_id: str, course_id: str) -> str:
    """Display id of a UserCourseProgress record.

    Not unique on its own; stores key progress on the (user_id, course_id) pair.
    """
    return f"{user_id}_{course_id}"


def lecture_progress_id(user_id: str, course_id: str, lecture_id: str) -> str:
    """Display id of a UserLectureProgress record."""
    return f"{user_id}_{course_id}_{lecture_id}"


class UserCourseProgress(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    course_id: str
    completed_lectures_count: int = Field(default=0, ge=0)
    total_lectures: int = Field(default=0, ge=0)
    completion_percentage: int = Field(default=0, ge=0, le=100)
    last_accessed_lecture_id: str | None = None
    last_played_timestamp: float = Field(default=0.0, ge=0.0)
    status: ProgressStatus = ProgressStatus.NOT_STARTED
    started_at: datetime | None = None
    last_accessed_at: datetime | None = None
    completed_at: datetime | None = None


class UserLectureProgress(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    course_id: str
    lecture_id: str
    watched_duration_seconds: float = Field(default=0.0, ge=0.0)
    is_completed: bool = False
    last_watched_at: datetime | None = None


class LectureProgressResponse(BaseModel):
    """Resume information for a single lecture."""

    lecture_id: str
    watched_duration_seconds: float = 0.0
    is_completed: bool = False


class CourseProgressSummary(BaseModel):
    """Course progress as shown on listing screens."""

    course_id: str
    course_title: str
    completion_percentage: int
    status: ProgressStatus
    last_accessed_lecture_id: str | None
    last_played_timestamp: float
    total_lectures: int
    completed_lectures_count: int
    thumbnail: str | None = None
    instructor: str | None = None
