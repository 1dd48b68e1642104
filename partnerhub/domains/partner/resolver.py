# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Partner context resolution.

Derives the white-label context from a College, its owning University
and that University's Branches. Resolution does not validate the
hierarchy; that is the hierarchy domain's job at write time.
"""

from collections.abc import Iterable

from partnerhub.models import Branch, College, PartnerContext, University


class PartnerContextError(Exception):
    """Base exception for partner context errors."""

    pass


class StaleReferenceError(PartnerContextError):
    """Raised when the University passed does not own the College."""

    pass


class PartnerNotEnabledError(PartnerContextError):
    """Raised when the College is not partnered or has been deactivated."""

    pass


def resolve_partner_context(
    college: College | None,
    university: University | None,
    branches_of_university: Iterable[Branch],
) -> PartnerContext | None:
    """Build the partner context for a College.

    The context's branches are the University's Branches that the College
    offers, in the University's order. Identical inputs always give an
    identical context.

    Args:
        college: Selected College, or None to leave partner mode.
        university: The College's owning University.
        branches_of_university: All Branches of that University.

    Returns:
        The context, or None when college is None.

    Raises:
        StaleReferenceError: If university is missing or is not the College's owner.
        PartnerNotEnabledError: If the College is not partnered or is inactive.
    """
    if college is None:
        return None

    if university is None or university.id != college.university_id:
        raise StaleReferenceError(
            f"College {college.id} belongs to university {college.university_id}, "
            f"got {university.id if university else None}"
        )

    if not college.is_partnered or not college.is_active:
        raise PartnerNotEnabledError(f"College {college.id} is not an active partner")

    offered = set(college.offered_branches)
    branches = tuple(
        branch
        for branch in branches_of_university
        if branch.id in offered and branch.university_id == university.id
    )

    return PartnerContext(college=college, university=university, branches=branches)
