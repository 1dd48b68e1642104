# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Partner (white-label) context models."""

from pydantic import BaseModel, ConfigDict, Field

from partnerhub.models.hierarchy import Branch, College, University


class PartnerContext(BaseModel):
    """Branding and filtering context derived from a partnered College.

    Never persisted by the core; rebuilt from the source entities on every
    activation. Frozen so a held context cannot be modified in place.
    """

    model_config = ConfigDict(frozen=True)

    college: College
    university: University
    branches: tuple[Branch, ...] = ()

    @property
    def branch_ids(self) -> list[str]:
        return [branch.id for branch in self.branches if branch.id is not None]


class PartnerBranding(BaseModel):
    """Read projection used for app identity decisions."""

    app_name: str = Field(description="Displayed application name")
    logo: str | None = Field(default=None, description="Logo URL, college first")
    university_name: str | None = Field(default=None, description="Owning university")
    is_partner_mode: bool = Field(default=False, description="White-label mode active")
