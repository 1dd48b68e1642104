# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Branding and course filtering derived from a partner context."""

from collections.abc import Iterable

from partnerhub.core.config import PartnerSettings, get_settings
from partnerhub.models import Course, PartnerBranding, PartnerContext


def build_branding(
    context: PartnerContext | None,
    settings: PartnerSettings | None = None,
) -> PartnerBranding:
    """Compute the app identity for the current context.

    In partner mode the app is named after the College and shows the
    College logo, falling back to the University logo.

    Args:
        context: Active partner context, or None.
        settings: Branding settings; defaults to the application settings.

    Returns:
        Branding projection.
    """
    settings = settings or get_settings().partner

    if context is None:
        return PartnerBranding(app_name=settings.default_app_name)

    college = context.college
    return PartnerBranding(
        app_name=f"{college.name} {settings.app_name_suffix}".strip(),
        logo=college.logo or context.university.logo,
        university_name=context.university.name,
        is_partner_mode=True,
    )


def filter_courses_for_partner(
    courses: Iterable[Course],
    context: PartnerContext | None,
) -> list[Course]:
    """Restrict a course listing to what a partner College offers.

    Outside partner mode every course is kept. In partner mode a course is
    kept when it is assigned to the context's University and, if it is
    restricted to particular branches, to at least one branch the College
    offers. Input order is preserved.

    Args:
        courses: Courses to filter.
        context: Active partner context, or None.

    Returns:
        Visible courses.
    """
    if context is None:
        return list(courses)

    university_id = context.university.id
    offered = set(context.branch_ids)

    visible = []
    for course in courses:
        if university_id not in course.university_ids:
            continue
        if course.branch_ids and offered.isdisjoint(course.branch_ids):
            continue
        visible.append(course)
    return visible
