"""Balance persistence - one integer stored under one key.

The SQL repository is the normal path; the in-memory one stands in when the
database is unavailable (demo mode), mirroring how the API falls back.
"""

import logging
from typing import Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from ..models import StoredBalance

logger = logging.getLogger(__name__)


class InMemoryBalanceRepository:
    """Process-local balance storage."""

    def __init__(self):
        self._values: Dict[str, int] = {}

    async def load(self, key: str, default: int) -> int:
        return self._values.get(key, default)

    async def save(self, key: str, value: int):
        self._values[key] = value


class SqlBalanceRepository:
    """Balance storage backed by the stored_balances table."""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def load(self, key: str, default: int) -> int:
        async with self.session_factory() as db:
            result = await db.execute(
                select(StoredBalance).where(StoredBalance.key == key)
            )
            stored: Optional[StoredBalance] = result.scalar_one_or_none()
            if stored is None:
                return default
            return stored.value

    async def save(self, key: str, value: int):
        async with self.session_factory() as db:
            stored = await db.get(StoredBalance, key)
            if stored is None:
                db.add(StoredBalance(key=key, value=value))
            else:
                stored.value = value
            await db.commit()
        logger.debug(f"Saved balance {value} under {key}")
