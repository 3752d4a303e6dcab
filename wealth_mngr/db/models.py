"""
SQLAlchemy ORM models for Wealth Manager persistence.

Two tables back the application's saved state:
- saved_calculations: named snapshots of corpus simulations
- user_preferences: key/value store for preferences and the work-in-progress corpus state

Payloads are stored in generic JSON columns so the schema works on SQLite and PostgreSQL.
"""

from typing import Any, Dict

from sqlalchemy import (
    JSON,
    BigInteger,
    Column,
    DateTime,
    Index,
    Text,
    func,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class SavedCalculation(Base):
    __tablename__ = "saved_calculations"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    # Milliseconds since the epoch; refreshed on update
    timestamp = Column(BigInteger, nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_saved_calculations_timestamp", "timestamp"),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "timestamp": self.timestamp,
            "data": self.data,
        }

    def __repr__(self):
        return f"<SavedCalculation(id='{self.id}', name='{self.name}', timestamp={self.timestamp})>"


class UserPreference(Base):
    __tablename__ = "user_preferences"

    key = Column(Text, primary_key=True)
    value = Column(JSON)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<UserPreference(key='{self.key}')>"
