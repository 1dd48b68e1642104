# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course catalog models.

The catalog is owned by the course authoring side of the platform; the
domain core only reads it to count lectures and to filter courses for a
partner.
"""

from pydantic import BaseModel, ConfigDict, Field


class Lecture(BaseModel):
    """Finest-grained progress unit, belonging to exactly one course."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str = ""
    duration_minutes: float = Field(default=0.0, ge=0.0)
    order_index: int = 0

    @property
    def duration_seconds(self) -> float:
        return self.duration_minutes * 60


class Course(BaseModel):
    """Course as seen by the progress and partner domains."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    instructor: str | None = None
    thumbnail: str | None = None
    lectures: list[Lecture] = Field(default_factory=list)
    university_ids: list[str] = Field(default_factory=list)
    branch_ids: list[str] = Field(default_factory=list)
    year: str | None = None

    @property
    def total_lectures(self) -> int:
        return len(self.lectures)

    def get_lecture(self, lecture_id: str) -> Lecture | None:
        for lecture in self.lectures:
            if lecture.id == lecture_id:
                return lecture
        return None

    def ordered_lectures(self) -> list[Lecture]:
        return sorted(self.lectures, key=lambda lecture: lecture.order_index)
