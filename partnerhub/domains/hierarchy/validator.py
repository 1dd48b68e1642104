# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Referential checks between Universities, Branches and Colleges.

Validation is pure: it reads only the records it is given and never
touches the entity store. Callers pass the most recently committed
University/Branch state and must run validation before writing a Branch
or College.

Example:
    >>> validate_branch(branch, [university])
    >>> validate_college(college, [university], branches_of_university)
"""

from collections.abc import Iterable

from partnerhub.models import Branch, College, University


class HierarchyError(Exception):
    """Base exception for hierarchy invariant violations."""

    pass


class DanglingReferenceError(HierarchyError):
    """Raised when an entity references a University that does not exist.

    Attributes:
        entity: Kind of the referencing entity ("branch" or "college").
        university_id: The unresolved University id.
    """

    def __init__(self, entity: str, university_id: str) -> None:
        super().__init__(f"{entity} references unknown university '{university_id}'")
        self.entity = entity
        self.university_id = university_id


class InvalidOfferingError(HierarchyError):
    """Raised when a College offers Branches outside its own University.

    Attributes:
        unknown_branch_ids: Offered ids that match no Branch.
        foreign_branch_ids: Offered ids owned by another University.
    """

    def __init__(self, unknown_branch_ids: list[str], foreign_branch_ids: list[str]) -> None:
        parts = []
        if unknown_branch_ids:
            parts.append(f"unknown branches {unknown_branch_ids}")
        if foreign_branch_ids:
            parts.append(f"branches of another university {foreign_branch_ids}")
        super().__init__("College offers " + " and ".join(parts))
        self.unknown_branch_ids = unknown_branch_ids
        self.foreign_branch_ids = foreign_branch_ids


def _require_university(entity: str, university_id: str, universities: Iterable[University]) -> None:
    for university in universities:
        if university.id == university_id and not university.is_deleted:
            return
    raise DanglingReferenceError(entity, university_id)


def validate_branch(branch: Branch, universities: Iterable[University]) -> None:
    """Check that a Branch belongs to an existing, non-deleted University.

    Args:
        branch: Branch about to be created or updated.
        universities: Known Universities.

    Raises:
        DanglingReferenceError: If branch.university_id matches none of them.
    """
    _require_university("branch", branch.university_id, universities)


def validate_college(
    college: College,
    universities: Iterable[University],
    branches: Iterable[Branch],
) -> None:
    """Check a College's University and its offered Branches.

    Every offered id must resolve to a Branch whose university_id equals
    the College's university_id.

    Args:
        college: College about to be created or updated.
        universities: Known Universities.
        branches: Known Branches; at least those of the College's University.

    Raises:
        DanglingReferenceError: If college.university_id is unknown or deleted.
        InvalidOfferingError: If any offered id is unknown or foreign.
    """
    _require_university("college", college.university_id, universities)

    by_id = {branch.id: branch for branch in branches}
    unknown: list[str] = []
    foreign: list[str] = []
    for branch_id in college.offered_branches:
        branch = by_id.get(branch_id)
        if branch is None:
            unknown.append(branch_id)
        elif branch.university_id != college.university_id:
            foreign.append(branch_id)

    if unknown or foreign:
        raise InvalidOfferingError(unknown, foreign)
