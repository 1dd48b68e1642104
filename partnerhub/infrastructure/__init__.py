# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Infrastructure layer for PartnerHub.

- database: SQLAlchemy async engine, sessions and ORM records
- repositories: Entity store protocols and their implementations
"""
