# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Progress aggregator for lecture playback events.

This module provides the ProgressAggregator that handles:
- Recording lecture watch events with monotonicity checks
- Recomputing course-level counts, percentage and status
- Read projections for resume and "My Learning" screens

Course status moves not_started -> in_progress -> completed and never
back. Each (user, course) and (user, course, lecture) has exactly one
record, addressed by its owning ids.

Example:
    >>> aggregator = ProgressAggregator(store.courses, store.course_progress, store.lecture_progress)
    >>> progress = await aggregator.record_lecture_event("u-1", "c-1", "l-1", 540, completed=True)
    >>> progress.completion_percentage
    25
"""

import logging
from datetime import datetime, timezone

from partnerhub.core.config import get_settings
from partnerhub.infrastructure.repositories.base import (
    CourseProgressRepository,
    CourseRepository,
    LectureProgressRepository,
)
from partnerhub.models import (
    Course,
    CourseProgressSummary,
    Lecture,
    LectureProgressResponse,
    ProgressStatus,
    UserCourseProgress,
    UserLectureProgress,
    course_progress_id,
    lecture_progress_id,
)
from partnerhub.utils.datetime import utc_now

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class ProgressError(Exception):
    """Base exception for progress aggregation errors."""

    pass


class RegressionError(ProgressError):
    """Raised when an event moves watched time or completion backward."""

    pass


class InvalidCourseError(ProgressError):
    """Raised when a course has no lectures to aggregate over."""

    pass


class CourseNotFoundError(ProgressError):
    """Raised when a course is not in the catalog."""

    pass


class LectureNotFoundError(ProgressError):
    """Raised when a lecture does not belong to the course."""

    pass


class InvalidProgressEventError(ProgressError):
    """Raised when an event carries impossible values."""

    pass


def completion_percentage(completed: int, total: int) -> int:
    """Percentage of completed lectures, rounded half up.

    Raises:
        InvalidCourseError: If total is zero.
    """
    if total <= 0:
        raise InvalidCourseError("Cannot compute completion of a course without lectures")
    return (200 * completed + total) // (2 * total)


class ProgressAggregator:
    """Reconciles lecture-level events into course-level progress.

    Attributes:
        completion_threshold: Fraction of a lecture's duration after which
            it counts as completed.
    """

    def __init__(
        self,
        courses: CourseRepository,
        course_progress: CourseProgressRepository,
        lecture_progress: LectureProgressRepository,
        completion_threshold: float | None = None,
    ) -> None:
        """Initialize the aggregator.

        Args:
            courses: Course catalog.
            course_progress: UserCourseProgress repository.
            lecture_progress: UserLectureProgress repository.
            completion_threshold: Overrides settings.progress.completion_threshold.
        """
        self._courses = courses
        self._course_progress = course_progress
        self._lecture_progress = lecture_progress
        if completion_threshold is None:
            completion_threshold = get_settings().progress.completion_threshold
        self.completion_threshold = completion_threshold

    async def record_lecture_event(
        self,
        user_id: str,
        course_id: str,
        lecture_id: str,
        watched_seconds: float,
        completed: bool,
        reset: bool = False,
    ) -> UserCourseProgress:
        """Record a playback event and recompute the course progress.

        Replaying the exact event that produced the current state changes
        nothing. A lecture counts as completed when the event says so or
        when watched_seconds reaches the completion threshold.

        Args:
            user_id: Learner.
            course_id: Course of the lecture.
            lecture_id: Lecture being watched.
            watched_seconds: Playback position in seconds.
            completed: Whether the player reports the lecture as finished.
            reset: Allow moving watched time or completion backward.

        Returns:
            The course progress after the event.

        Raises:
            CourseNotFoundError: If the course is not in the catalog.
            InvalidCourseError: If the course has no lectures.
            LectureNotFoundError: If the lecture is not part of the course.
            InvalidProgressEventError: If watched_seconds is negative.
            RegressionError: If the event moves backward without reset.
        """
        course = await self._get_course(course_id)
        lecture = course.get_lecture(lecture_id)
        if lecture is None:
            raise LectureNotFoundError(f"Lecture {lecture_id} not found in course {course_id}")
        if watched_seconds < 0:
            raise InvalidProgressEventError(
                f"watched_seconds must be >= 0, got {watched_seconds}"
            )

        is_completed = completed or self._reaches_threshold(lecture, watched_seconds)
        previous = await self._lecture_progress.get(user_id, course_id, lecture_id)
        if previous is not None and not reset:
            if watched_seconds < previous.watched_duration_seconds:
                raise RegressionError(
                    f"Lecture {lecture_id}: watched {watched_seconds}s is behind "
                    f"stored {previous.watched_duration_seconds}s"
                )
            if previous.is_completed and not is_completed:
                raise RegressionError(f"Lecture {lecture_id} is already completed")

        progress = await self._course_progress.get(user_id, course_id)
        if progress is not None and self._is_replay(
            previous, progress, course, lecture_id, watched_seconds, is_completed
        ):
            logger.debug(
                "Replayed lecture event ignored: user=%s, course=%s, lecture=%s",
                user_id,
                course_id,
                lecture_id,
            )
            return progress

        now = utc_now()
        await self._lecture_progress.save(
            UserLectureProgress(
                id=lecture_progress_id(user_id, course_id, lecture_id),
                user_id=user_id,
                course_id=course_id,
                lecture_id=lecture_id,
                watched_duration_seconds=watched_seconds,
                is_completed=is_completed,
                last_watched_at=now,
            )
        )

        completed_count = await self._count_completed(user_id, course)
        if progress is None:
            progress = self._new_course_progress(user_id, course, now)

        updated = self._advance(progress, course, lecture_id, watched_seconds, completed_count, now)
        saved = await self._course_progress.save(updated)

        logger.info(
            "Lecture event recorded: user=%s, course=%s, lecture=%s, %d/%d lectures (%d%%), status=%s",
            user_id,
            course_id,
            lecture_id,
            saved.completed_lectures_count,
            saved.total_lectures,
            saved.completion_percentage,
            saved.status.value,
        )
        return saved

    async def get_lecture_progress(
        self,
        user_id: str,
        course_id: str,
        lecture_id: str,
    ) -> LectureProgressResponse:
        """Resume information for a lecture; zero progress when never watched."""
        record = await self._lecture_progress.get(user_id, course_id, lecture_id)
        if record is None:
            return LectureProgressResponse(lecture_id=lecture_id)

        return LectureProgressResponse(
            lecture_id=lecture_id,
            watched_duration_seconds=record.watched_duration_seconds,
            is_completed=record.is_completed,
        )

    async def get_course_progress(self, user_id: str, course_id: str) -> UserCourseProgress | None:
        return await self._course_progress.get(user_id, course_id)

    async def initialize_course_progress(self, user_id: str, course_id: str) -> UserCourseProgress:
        """Create the not-started record on enrollment, or return the existing one.

        Raises:
            CourseNotFoundError: If the course is not in the catalog.
            InvalidCourseError: If the course has no lectures.
        """
        course = await self._get_course(course_id)
        existing = await self._course_progress.get(user_id, course_id)
        if existing is not None:
            return existing

        progress = await self._course_progress.save(
            self._new_course_progress(user_id, course, utc_now())
        )
        logger.info("Course progress initialized: user=%s, course=%s", user_id, course_id)
        return progress

    async def get_my_learnings(self, user_id: str) -> list[CourseProgressSummary]:
        """Summaries of every course the user has progress in, most recent first.

        Progress for courses no longer in the catalog is left out.
        """
        records = await self._course_progress.find_by_user(user_id)
        records.sort(key=lambda p: p.last_accessed_at or _EPOCH, reverse=True)

        summaries = []
        for progress in records:
            course = await self._courses.get(progress.course_id)
            if course is None:
                logger.warning(
                    "Skipping progress for missing course: user=%s, course=%s",
                    user_id,
                    progress.course_id,
                )
                continue

            summaries.append(
                CourseProgressSummary(
                    course_id=progress.course_id,
                    course_title=course.title,
                    completion_percentage=progress.completion_percentage,
                    status=progress.status,
                    last_accessed_lecture_id=progress.last_accessed_lecture_id,
                    last_played_timestamp=progress.last_played_timestamp,
                    total_lectures=progress.total_lectures,
                    completed_lectures_count=progress.completed_lectures_count,
                    thumbnail=course.thumbnail,
                    instructor=course.instructor,
                )
            )
        return summaries

    async def get_next_lecture_id(self, course_id: str, current_lecture_id: str) -> str | None:
        """Lecture following the current one by order_index, None after the last.

        Raises:
            CourseNotFoundError: If the course is not in the catalog.
            LectureNotFoundError: If the current lecture is not in the course.
        """
        course = await self._courses.get(course_id)
        if course is None:
            raise CourseNotFoundError(f"Course {course_id} not found")

        ordered = course.ordered_lectures()
        for index, lecture in enumerate(ordered):
            if lecture.id == current_lecture_id:
                return ordered[index + 1].id if index + 1 < len(ordered) else None

        raise LectureNotFoundError(
            f"Lecture {current_lecture_id} not found in course {course_id}"
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _get_course(self, course_id: str) -> Course:
        course = await self._courses.get(course_id)
        if course is None:
            raise CourseNotFoundError(f"Course {course_id} not found")
        if course.total_lectures == 0:
            raise InvalidCourseError(f"Course {course_id} has no lectures")
        return course

    def _reaches_threshold(self, lecture: Lecture, watched_seconds: float) -> bool:
        duration = lecture.duration_seconds
        return duration > 0 and watched_seconds >= duration * self.completion_threshold

    async def _count_completed(self, user_id: str, course: Course) -> int:
        lecture_ids = {lecture.id for lecture in course.lectures}
        records = await self._lecture_progress.find_by_course(user_id, course.id)
        return sum(1 for r in records if r.is_completed and r.lecture_id in lecture_ids)

    @staticmethod
    def _is_replay(
        previous: UserLectureProgress | None,
        progress: UserCourseProgress,
        course: Course,
        lecture_id: str,
        watched_seconds: float,
        is_completed: bool,
    ) -> bool:
        if previous is None:
            return False
        return (
            previous.watched_duration_seconds == watched_seconds
            and previous.is_completed == is_completed
            and progress.last_accessed_lecture_id == lecture_id
            and progress.last_played_timestamp == watched_seconds
            and progress.total_lectures == course.total_lectures
        )

    @staticmethod
    def _new_course_progress(user_id: str, course: Course, now: datetime) -> UserCourseProgress:
        return UserCourseProgress(
            id=course_progress_id(user_id, course.id),
            user_id=user_id,
            course_id=course.id,
            total_lectures=course.total_lectures,
            last_accessed_at=now,
        )

    @staticmethod
    def _advance(
        progress: UserCourseProgress,
        course: Course,
        lecture_id: str,
        watched_seconds: float,
        completed_count: int,
        now: datetime,
    ) -> UserCourseProgress:
        total = course.total_lectures
        status = progress.status
        completed_at = progress.completed_at

        if status == ProgressStatus.NOT_STARTED:
            status = ProgressStatus.IN_PROGRESS
        if status == ProgressStatus.IN_PROGRESS and completed_count == total:
            status = ProgressStatus.COMPLETED
            completed_at = now

        return progress.model_copy(
            update={
                "completed_lectures_count": completed_count,
                "total_lectures": total,
                "completion_percentage": completion_percentage(completed_count, total),
                "last_accessed_lecture_id": lecture_id,
                "last_played_timestamp": watched_seconds,
                "status": status,
                "started_at": progress.started_at or now,
                "last_accessed_at": now,
                "completed_at": completed_at,
            }
        )
