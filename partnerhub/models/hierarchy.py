# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""University, College and Branch models.

Entities carry `id=None` until the entity store assigns one on create.
Update requests only carry the fields an admin may change; a Branch's
university_id is absent from BranchUpdateRequest because it is fixed at
creation.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from partnerhub.models.common import BranchStatus, ContactNumber


def _dedupe(ids: list[str]) -> list[str]:
    return list(dict.fromkeys(ids))


class University(BaseModel):
    """Root of the hierarchy."""

    model_config = ConfigDict(from_attributes=True)

    id: str | None = None
    name: str = Field(min_length=1, max_length=255)
    logo: str | None = None
    chairman_name: str = ""
    chairman_photo: str | None = None
    contact_numbers: list[ContactNumber] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class Branch(BaseModel):
    """Academic branch owned by exactly one University."""

    model_config = ConfigDict(from_attributes=True)

    id: str | None = None
    university_id: str
    name: str = Field(min_length=1, max_length=255)
    code: str = Field(min_length=1, max_length=20)
    description: str | None = None
    status: BranchStatus = BranchStatus.ACTIVE
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status == BranchStatus.ACTIVE


class College(BaseModel):
    """College owned by a University, offering a subset of its Branches."""

    model_config = ConfigDict(from_attributes=True)

    id: str | None = None
    university_id: str
    name: str = Field(min_length=1, max_length=255)
    logo: str | None = None
    chairman_name: str = ""
    chairman_photo: str | None = None
    contact_numbers: list[ContactNumber] = Field(default_factory=list)
    offered_branches: list[str] = Field(default_factory=list)
    is_partnered: bool = False
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("offered_branches")
    @classmethod
    def dedupe_offered(cls, value: list[str]) -> list[str]:
        return _dedupe(value)


# =============================================================================
# Admin requests
# =============================================================================


class UniversityCreateRequest(BaseModel):
    """Request to create a University."""

    name: str = Field(min_length=1, max_length=255)
    logo: str | None = None
    chairman_name: str = ""
    chairman_photo: str | None = None
    contact_numbers: list[ContactNumber] = Field(default_factory=list)


class UniversityUpdateRequest(BaseModel):
    """Partial University update; only explicitly set fields are applied."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    logo: str | None = None
    chairman_name: str | None = None
    chairman_photo: str | None = None
    contact_numbers: list[ContactNumber] | None = None


class BranchCreateRequest(BaseModel):
    """Request to create a Branch under a University."""

    university_id: str
    name: str = Field(min_length=1, max_length=255)
    code: str = Field(min_length=1, max_length=20)
    description: str | None = None
    status: BranchStatus = BranchStatus.ACTIVE


class BranchUpdateRequest(BaseModel):
    """Partial Branch update; the owning University cannot change."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    code: str | None = Field(default=None, min_length=1, max_length=20)
    description: str | None = None
    status: BranchStatus | None = None


class CollegeCreateRequest(BaseModel):
    """Request to create a College."""

    university_id: str
    name: str = Field(min_length=1, max_length=255)
    logo: str | None = None
    chairman_name: str = ""
    chairman_photo: str | None = None
    contact_numbers: list[ContactNumber] = Field(default_factory=list)
    offered_branches: list[str] = Field(default_factory=list)
    is_partnered: bool = False

    @field_validator("offered_branches")
    @classmethod
    def dedupe_offered(cls, value: list[str]) -> list[str]:
        return _dedupe(value)


class CollegeUpdateRequest(BaseModel):
    """Partial College update; only explicitly set fields are applied."""

    university_id: str | None = None
    name: str | None = Field(default=None, min_length=1, max_length=255)
    logo: str | None = None
    chairman_name: str | None = None
    chairman_photo: str | None = None
    contact_numbers: list[ContactNumber] | None = None
    offered_branches: list[str] | None = None
    is_partnered: bool | None = None

    @field_validator("offered_branches")
    @classmethod
    def dedupe_offered(cls, value: list[str] | None) -> list[str] | None:
        return None if value is None else _dedupe(value)
