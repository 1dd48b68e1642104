# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy ORM records for the entity store.

Column names match the pydantic models so records convert with
`Model.model_validate(record)` (from_attributes). Progress tables use the
owning ids as a composite primary key; the `id` column is informational.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from partnerhub.utils.datetime import utc_now


def _uuid() -> str:
    return str(uuid4())


class Base(DeclarativeBase):
    """Declarative base for all PartnerHub tables."""

    pass


class UniversityRecord(Base):
    __tablename__ = "universities"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    logo: Mapped[str | None] = mapped_column(Text, nullable=True)
    chairman_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    chairman_photo: Mapped[str | None] = mapped_column(Text, nullable=True)
    contact_numbers: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, onupdate=utc_now
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class BranchRecord(Base):
    __tablename__ = "branches"
    __table_args__ = (
        CheckConstraint("status IN ('active', 'inactive')", name="valid_branch_status"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    university_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("universities.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, onupdate=utc_now
    )


class CollegeRecord(Base):
    __tablename__ = "colleges"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    university_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("universities.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    logo: Mapped[str | None] = mapped_column(Text, nullable=True)
    chairman_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    chairman_photo: Mapped[str | None] = mapped_column(Text, nullable=True)
    contact_numbers: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    offered_branches: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    is_partnered: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, onupdate=utc_now
    )


class CourseRecord(Base):
    """Catalog row; lectures are embedded as a JSON list of Lecture dicts."""

    __tablename__ = "courses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    instructor: Mapped[str | None] = mapped_column(String(255), nullable=True)
    thumbnail: Mapped[str | None] = mapped_column(Text, nullable=True)
    lectures: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    university_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    branch_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    year: Mapped[str | None] = mapped_column(String(10), nullable=True)


class CourseProgressRecord(Base):
    __tablename__ = "user_course_progress"
    __table_args__ = (
        CheckConstraint(
            "status IN ('not_started', 'in_progress', 'completed')",
            name="valid_course_progress_status",
        ),
        CheckConstraint(
            "completion_percentage BETWEEN 0 AND 100",
            name="valid_completion_percentage",
        ),
    )

    user_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    course_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    id: Mapped[str] = mapped_column(String(255), nullable=False)
    completed_lectures_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_lectures: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    completion_percentage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_accessed_lecture_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    last_played_timestamp: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="not_started")
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_accessed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class LectureProgressRecord(Base):
    __tablename__ = "user_lecture_progress"

    user_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    course_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    lecture_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    id: Mapped[str] = mapped_column(String(255), nullable=False)
    watched_duration_seconds: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_watched_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
