# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Partner (white-label) domain package.

This package provides:
- Partner context resolution from College/University/Branches
- Per-session context holder with a persistence hook
- Branding and course filtering for partner mode
"""

from partnerhub.domains.partner.catalog import build_branding, filter_courses_for_partner
from partnerhub.domains.partner.resolver import (
    PartnerContextError,
    PartnerNotEnabledError,
    StaleReferenceError,
    resolve_partner_context,
)
from partnerhub.domains.partner.service import PartnerContextService
from partnerhub.domains.partner.session import (
    NullPartnerContextStore,
    PartnerContextStore,
    PartnerSession,
)

__all__ = [
    "resolve_partner_context",
    "PartnerSession",
    "PartnerContextStore",
    "NullPartnerContextStore",
    "PartnerContextService",
    "build_branding",
    "filter_courses_for_partner",
    "PartnerContextError",
    "StaleReferenceError",
    "PartnerNotEnabledError",
]
