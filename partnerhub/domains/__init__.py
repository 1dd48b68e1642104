# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for PartnerHub.

Each domain module encapsulates business rules and talks to the entity
store only through the repository protocols.

Domains:
    hierarchy: University/College/Branch validation and admin operations.
    partner: White-label partner context resolution and branding.
    progress: Lecture event aggregation into course progress.
"""
