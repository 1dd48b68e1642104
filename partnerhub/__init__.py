"""PartnerHub domain core.

University/College/Branch hierarchy management, white-label partner
context resolution and learner progress aggregation for an education
platform.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
