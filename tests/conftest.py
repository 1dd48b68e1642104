# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- In-memory entity store
- A small sample hierarchy (one University, two Branches)
- Sample course catalog entries
"""

from collections.abc import Generator

import pytest

from partnerhub.core.config import clear_settings_cache
from partnerhub.infrastructure.repositories.memory import InMemoryStore
from partnerhub.models import Branch, College, Course, Lecture, University


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires services)"
    )


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def fresh_settings() -> Generator[None, None, None]:
    """Reload settings from the environment for every test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
def store() -> InMemoryStore:
    """Provide an empty in-memory entity store."""
    return InMemoryStore()


# =============================================================================
# Entity Fixtures
# =============================================================================


@pytest.fixture
def university() -> University:
    """University U1."""
    return University(id="u1", name="State Technical University", chairman_name="Dr. Rao")


@pytest.fixture
def other_university() -> University:
    """A second, unrelated University."""
    return University(id="u2", name="Coastal University")


@pytest.fixture
def cse(university: University) -> Branch:
    return Branch(id="b-cse", university_id=university.id, name="Computer Science", code="CSE")


@pytest.fixture
def ece(university: University) -> Branch:
    return Branch(id="b-ece", university_id=university.id, name="Electronics", code="ECE")


@pytest.fixture
def foreign_branch(other_university: University) -> Branch:
    return Branch(id="b-me", university_id=other_university.id, name="Mechanical", code="ME")


@pytest.fixture
def partner_college(university: University, cse: Branch) -> College:
    """Partnered College C1 offering only CSE."""
    return College(
        id="c1",
        university_id=university.id,
        name="Sunrise Engineering College",
        logo="https://cdn.example.com/sunrise.png",
        offered_branches=[cse.id],
        is_partnered=True,
    )


@pytest.fixture
def four_lecture_course() -> Course:
    """Course X with four 10-minute lectures."""
    return Course(
        id="course-x",
        title="Data Structures",
        instructor="A. Kumar",
        lectures=[
            Lecture(id=f"lec-{i}", title=f"Lecture {i}", duration_minutes=10, order_index=i)
            for i in range(1, 5)
        ],
        university_ids=["u1"],
    )


@pytest.fixture
def empty_course() -> Course:
    """A course without lectures."""
    return Course(id="course-empty", title="Coming Soon")
