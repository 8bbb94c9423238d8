from sqlalchemy import Column, String, Integer, DateTime
from sqlalchemy.sql import func
from ..database import Base


class StoredBalance(Base):
    """The player's balance, persisted under a single key."""
    __tablename__ = "stored_balances"

    key = Column(String(64), primary_key=True)
    value = Column(Integer, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
