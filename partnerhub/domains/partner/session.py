# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Per-session holder of the active partner context.

A PartnerSession is created when a user session starts and passed to
whatever needs branding decisions. It is the whole public surface for
those decisions: partner_context, is_partner_mode, set_partner_college()
and clear_partner_context().

The held context is replaced in one assignment after the new context has
been fully built and persisted, so readers only ever see the old context
or the new one. Edits to the underlying College are not picked up
automatically; callers re-resolve to observe them.

Example:
    >>> async with PartnerSession(user_id="u-1") as session:
    ...     await session.set_partner_college(college, university, branches)
    ...     session.is_partner_mode
    True
"""

import logging
from collections.abc import Iterable
from types import TracebackType
from typing import Protocol

from partnerhub.domains.partner.resolver import resolve_partner_context
from partnerhub.models import Branch, College, PartnerContext, University

logger = logging.getLogger(__name__)


class PartnerContextStore(Protocol):
    """Persistence hook for callers that want the context to survive restarts."""

    async def load(self, user_id: str) -> PartnerContext | None: ...

    async def save(self, user_id: str, context: PartnerContext) -> None: ...

    async def clear(self, user_id: str) -> None: ...


class NullPartnerContextStore:
    """Default hook: the context lives in memory only."""

    async def load(self, user_id: str) -> PartnerContext | None:
        return None

    async def save(self, user_id: str, context: PartnerContext) -> None:
        return None

    async def clear(self, user_id: str) -> None:
        return None


class PartnerSession:
    """Active partner context of one user session.

    Attributes:
        user_id: Owner of the session.
    """

    def __init__(self, user_id: str, store: PartnerContextStore | None = None) -> None:
        """Initialize an empty (non-partner) session.

        Args:
            user_id: Owner of the session.
            store: Persistence hook; defaults to NullPartnerContextStore.
        """
        self.user_id = user_id
        self._store: PartnerContextStore = store or NullPartnerContextStore()
        self._context: PartnerContext | None = None

    @property
    def partner_context(self) -> PartnerContext | None:
        return self._context

    @property
    def is_partner_mode(self) -> bool:
        return self._context is not None

    async def set_partner_college(
        self,
        college: College | None,
        university: University | None,
        branches: Iterable[Branch],
    ) -> PartnerContext | None:
        """Resolve and activate a partner context.

        Passing college=None leaves partner mode. On any error the previous
        context stays in place.

        Args:
            college: Selected College or None.
            university: The College's owning University.
            branches: All Branches of that University.

        Returns:
            The newly active context, or None.

        Raises:
            StaleReferenceError: If university does not own college.
            PartnerNotEnabledError: If college is not an active partner.
        """
        context = resolve_partner_context(college, university, branches)
        if context is None:
            await self.clear_partner_context()
            return None

        await self._store.save(self.user_id, context)
        self._context = context
        logger.info(
            "Partner context set: user=%s, college=%s, branches=%d",
            self.user_id,
            context.college.id,
            len(context.branches),
        )
        return context

    async def restore(self) -> PartnerContext | None:
        """Load a previously saved context from the persistence hook.

        The restored context reflects the entities as they were when it was
        saved; re-resolve to pick up later edits.
        """
        context = await self._store.load(self.user_id)
        if context is not None:
            self._context = context
            logger.info(
                "Partner context restored: user=%s, college=%s",
                self.user_id,
                context.college.id,
            )
        return context

    async def clear_partner_context(self) -> None:
        """Leave partner mode."""
        await self._store.clear(self.user_id)
        if self._context is not None:
            logger.info(
                "Partner context cleared: user=%s, college=%s",
                self.user_id,
                self._context.college.id,
            )
        self._context = None

    async def notify_college_updated(self, college: College) -> bool:
        """React to an admin edit of a College.

        Only loss of partnership (unpartnered or deactivated) clears the
        active context; other edits leave it stale until re-resolved.

        Args:
            college: The College as just written.

        Returns:
            True if the active context was cleared.
        """
        if self._context is None or self._context.college.id != college.id:
            return False

        if college.is_partnered and college.is_active:
            return False

        await self.clear_partner_context()
        return True

    async def __aenter__(self) -> "PartnerSession":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.clear_partner_context()
