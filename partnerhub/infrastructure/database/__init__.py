# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for PartnerHub.

Example:
    >>> from partnerhub.infrastructure.database import DatabaseManager
    >>> manager = DatabaseManager(settings)
    >>> async with manager.session() as db:
    ...     ...
"""

from partnerhub.infrastructure.database.connection import DatabaseError, DatabaseManager
from partnerhub.infrastructure.database.models import Base

__all__ = [
    "Base",
    "DatabaseError",
    "DatabaseManager",
]
