# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Hierarchy domain package.

This package provides University/College/Branch management including:
- Pure referential validation
- Admin CRUD with soft deletion and deactivation
- Partnership toggling
"""

from partnerhub.domains.hierarchy.service import (
    BranchNotFoundError,
    CollegeNotFoundError,
    HierarchyService,
    HierarchyServiceError,
    UniversityNotFoundError,
)
from partnerhub.domains.hierarchy.validator import (
    DanglingReferenceError,
    HierarchyError,
    InvalidOfferingError,
    validate_branch,
    validate_college,
)

__all__ = [
    "HierarchyService",
    "validate_branch",
    "validate_college",
    "HierarchyError",
    "HierarchyServiceError",
    "DanglingReferenceError",
    "InvalidOfferingError",
    "UniversityNotFoundError",
    "BranchNotFoundError",
    "CollegeNotFoundError",
]
