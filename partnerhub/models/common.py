# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared model types."""

from enum import Enum
from typing import Annotated

from pydantic import StringConstraints


class BranchStatus(str, Enum):
    """Branch lifecycle status."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class ProgressStatus(str, Enum):
    """Course progress state."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


ContactNumber = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
