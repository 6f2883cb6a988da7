"""Premium entitlement checks."""

import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from enorett.models import ACTIVE_STATUSES, Purchase

logger = logging.getLogger(__name__)


class EntitlementCheck(Protocol):
    """Answers whether a user currently holds a valid premium entitlement."""

    async def is_entitled(self, user_id: str) -> bool: ...  # pragma: no cover


class StaticEntitlement:
    """Fixed answer for every user (CLI and tests)."""

    def __init__(self, entitled: bool) -> None:
        self.entitled = entitled

    async def is_entitled(self, user_id: str) -> bool:
        return self.entitled


class PurchaseEntitlementChecker:
    """Entitlement backed by stored purchase records."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_active_purchase(self, user_id: str) -> Purchase | None:
        """Return the most recent purchase that is still active, if any."""
        stmt = (
            select(Purchase)
            .where(
                Purchase.user_id == user_id,
                Purchase.status.in_(ACTIVE_STATUSES),
            )
            .order_by(Purchase.created_at.desc())
        )
        result = await self.session.execute(stmt)
        for purchase in result.scalars():
            if purchase.is_active():
                return purchase
        return None

    async def is_entitled(self, user_id: str) -> bool:
        user_id = (user_id or "").strip()
        if not user_id:
            return False

        try:
            purchase = await self.find_active_purchase(user_id)
        except SQLAlchemyError as e:
            logger.warning(f"Error checking entitlement for '{user_id}': {e}")
            return False

        return purchase is not None


class SessionEntitlementChecker:
    """Purchase-backed entitlement that opens its own session per check."""

    def __init__(
        self, session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]]
    ) -> None:
        self.session_factory = session_factory

    async def is_entitled(self, user_id: str) -> bool:
        if not (user_id or "").strip():
            return False
        async with self.session_factory() as session:
            return await PurchaseEntitlementChecker(session).is_entitled(user_id)
