# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Progress domain package.

This package provides learner progress tracking including:
- Lecture event recording with monotonicity checks
- Course status state machine and completion percentage
- Resume and "My Learning" projections
"""

from partnerhub.domains.progress.aggregator import (
    CourseNotFoundError,
    InvalidCourseError,
    InvalidProgressEventError,
    LectureNotFoundError,
    ProgressAggregator,
    ProgressError,
    RegressionError,
    completion_percentage,
)

__all__ = [
    "ProgressAggregator",
    "completion_percentage",
    "ProgressError",
    "RegressionError",
    "InvalidCourseError",
    "CourseNotFoundError",
    "LectureNotFoundError",
    "InvalidProgressEventError",
]
